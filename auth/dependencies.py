"""
auth/dependencies.py -- Session Gate: FastAPI Depends() helpers for protected routes.

The gate reads the session cookie, hands it to TokenService.verify(), and
either attaches the decoded claims to request.state.session or rejects the
request with HTTP 401 before the route body runs. It never falls through.

  MissingToken -> 401 {"code": "unauthorized"}
  InvalidToken -> 401 {"code": "invalid_token"}

The gate is stateless: it only calls TokenService, never the store.

Layer rule: auth/dependencies.py may import from fastapi because this module
is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request

from auth.errors import InvalidToken, MissingToken
from auth.models import SessionClaims
from auth.tokens import TokenService

logger = logging.getLogger("agrirent.auth")


def get_session(request: Request) -> SessionClaims:
    """Require a valid session cookie. Raises HTTP 401 otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(session: SessionClaims = Depends(get_session)): ...
    """
    tokens: TokenService = request.app.state.tokens
    token = request.cookies.get(request.app.state.settings.cookie_name)
    try:
        claims = tokens.verify(token)
    except MissingToken as exc:
        logger.warning("Unauthorized access attempt on %s", request.url.path)
        raise HTTPException(
            status_code=401,
            detail={"code": exc.code, "message": exc.message},
        ) from exc
    except InvalidToken as exc:
        logger.error("Invalid token used on %s", request.url.path)
        raise HTTPException(
            status_code=401,
            detail={"code": exc.code, "message": exc.message},
        ) from exc
    request.state.session = claims
    return claims
