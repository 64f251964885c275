"""
tests/conftest.py -- Shared fixtures for AgriRent tests.

This module provides:
  - settings: a Settings instance pointing at a per-test users file
  - store / hasher / tokens / accounts: the auth components built from it
  - api_client: TestClient on the real app with a patched lifespan

Design: every test gets its own users file under tmp_path, so tests never
share accounts. bcrypt_rounds=4 (the library minimum) keeps hashing fast.

The DEBUG env var must be set before any app import so get_settings() may
fall back to the development secret instead of raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager
from pathlib import Path

# CRITICAL: Set DEBUG before any core/auth/api import.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOG_FILE", "")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.passwords import PasswordHasher
from auth.service import AccountService
from auth.store import CredentialStore
from auth.tokens import TokenService
from core.config import Settings

TEST_SECRET = "test-signing-secret-0123456789abcdef"


@pytest.fixture
def users_file(tmp_path: Path) -> Path:
    return tmp_path / "users.json"


@pytest.fixture
def settings(users_file: Path) -> Settings:
    return Settings(
        debug=True,
        jwt_secret=TEST_SECRET,
        users_file=users_file,
        bcrypt_rounds=4,
        log_file="",
    )


@pytest.fixture
def store(settings: Settings) -> CredentialStore:
    return CredentialStore.from_settings(settings)


@pytest.fixture
def hasher(settings: Settings) -> PasswordHasher:
    return PasswordHasher.from_settings(settings)


@pytest.fixture
def tokens(settings: Settings) -> TokenService:
    return TokenService(settings)


@pytest.fixture
def accounts(store: CredentialStore, hasher: PasswordHasher, tokens: TokenService) -> AccountService:
    return AccountService(store, hasher, tokens)


def _patch_lifespan(settings: Settings, accounts: AccountService):
    """Return a lifespan that publishes test components on app.state."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.settings = settings
        app.state.accounts = accounts
        app.state.tokens = accounts.tokens
        yield

    return test_lifespan


@pytest.fixture
def api_client(settings: Settings, accounts: AccountService) -> Generator[TestClient, None, None]:
    """Yield a TestClient wired to an empty, per-test credential store."""
    original = app.router.lifespan_context
    app.router.lifespan_context = _patch_lifespan(settings, accounts)
    with TestClient(app, raise_server_exceptions=True) as client:
        yield client
    app.router.lifespan_context = original
