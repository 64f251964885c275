"""
auth/tokens.py -- Session token issuance/verification and the session cookie.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry email, role, iat and exp, signed
       with Settings.jwt_secret. The secret is injected through the Settings
       object handed to TokenService -- there is no module-level key. Rotating
       the secret invalidates every outstanding token.

  Verification raises rather than returning None so the caller can tell the
  two failure outcomes apart: MissingToken (nothing supplied) and InvalidToken
  (bad signature, malformed structure, missing claims, or expired).

  No server-side session table exists. The client holds the token in an
  httpOnly cookie; logout only clears that cookie.

Layer rule: no imports from api/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from auth.errors import InvalidToken, MissingToken
from auth.models import SessionClaims
from core.config import Settings

logger = logging.getLogger("agrirent.auth")

_ALGORITHM = "HS256"


class TokenService:
    """Issues and verifies signed, time-limited session tokens.

    Usage:
        tokens = TokenService(get_settings())
        token = tokens.issue("f1@t.com", "farmer")
        claims = tokens.verify(token)
    """

    def __init__(self, settings: Settings) -> None:
        self._secret = settings.jwt_secret
        self.expire_seconds = settings.token_expire_seconds

    def issue(self, email: str, role: str, now: datetime | None = None) -> str:
        """Encode a signed JWT for the given identity.

        now defaults to the current UTC time; tests pass an earlier instant to
        produce an already-expired token.
        """
        issued = now or datetime.now(timezone.utc)
        payload = {
            "email": email,
            "role": role,
            "iat": issued,
            "exp": issued + timedelta(seconds=self.expire_seconds),
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str | None) -> SessionClaims:
        """Decode and validate a token.

        Raises:
            MissingToken: token is None or empty.
            InvalidToken: signature mismatch, malformed token, missing claims,
                or expiry has passed.
        """
        if not token:
            raise MissingToken()
        try:
            payload = jwt.decode(token, self._secret, algorithms=[_ALGORITHM])
        except JWTError as exc:
            raise InvalidToken() from exc
        try:
            return SessionClaims(
                email=str(payload["email"]),
                role=str(payload["role"]),
                issued_at=int(payload["iat"]),
                expires_at=int(payload["exp"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidToken() from exc


# ---------------------------------------------------------------------------
# Cookie helpers
# ---------------------------------------------------------------------------


def set_session_cookie(response, token: str, settings: Settings) -> None:
    """Write the session token as an httpOnly cookie on the response.

    httponly=True: JS cannot read the cookie.
    samesite="lax": sent on same-site requests and top-level navigations.
    secure: only sent over HTTPS when SECURE_COOKIES=true (set in production).
    max_age: matches the token lifetime so both expire together.
    """
    response.set_cookie(
        settings.cookie_name,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
        max_age=settings.token_expire_seconds,
    )


def clear_session_cookie(response, settings: Settings) -> None:
    """Expire the session cookie using the attributes it was set with."""
    response.delete_cookie(
        settings.cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
    )
