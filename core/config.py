"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for AgriRent happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead,
or accept a Settings instance in the constructor.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. jwt_secret -> JWT_SECRET, port -> PORT).

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved. Dev mode (DEBUG=true) may fall back to the hardcoded
      signing secret; production mode refuses to start without a real one.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("agrirent.config")

# Only acceptable outside production; see Settings.validate_jwt_secret.
DEV_FALLBACK_SECRET = "supersecretkey"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file (as long as DEBUG=true, or a
    secret is supplied).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    port: int = 5000

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured".
    jwt_secret: str = ""
    token_expire_seconds: int = Field(default=3600, gt=0)
    cookie_name: str = "token"
    secure_cookies: bool = False
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    users_file: Path = Path("users.json")

    # ------------------------------------------------------------------
    # HTTP / logging
    # ------------------------------------------------------------------

    cors_origins: list[str] = ["http://localhost:5173"]
    log_file: str = "logs/app.log"  # "" disables the file handler

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_jwt_secret(self) -> "Settings":
        """Enforce the signing-secret policy.

        Dev mode (DEBUG=true): a missing secret falls back to the hardcoded
            development secret with a warning.

        Production mode: refuse to start without JWT_SECRET, and reject
            secrets shorter than 32 characters.
        """
        if not self.jwt_secret:
            if self.debug:
                self.jwt_secret = DEV_FALLBACK_SECRET
                logger.warning("WARNING: JWT_SECRET not set, using the development fallback secret.")
            else:
                raise ValueError(
                    "JWT_SECRET is required in production mode. "
                    "Set JWT_SECRET in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
        if not self.debug and len(self.jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
