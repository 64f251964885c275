"""
api/routes/auth.py -- Account and session REST endpoints.

Routes (mounted under /api):
  POST /signup     -- register; sets session cookie
  POST /login      -- password login; sets session cookie
  POST /logout     -- clears session cookie
  GET  /protected  -- example protected route; echoes the session claims
  GET  /profile    -- current account (requires session)
  GET  /test       -- public liveness check for the front-end

Failures from the Account Service (auth.errors.AuthError subclasses) are not
caught here. They propagate to the handler in api/main.py, which maps them to
a status code and the standard error envelope.

Handlers that hash or verify passwords are plain `def` so FastAPI runs them in
its threadpool; bcrypt would otherwise block the event loop.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import (
    AccountResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProtectedResponse,
    SessionResponse,
    SignupRequest,
    SignupResponse,
)
from auth.dependencies import get_session
from auth.models import AccountView, SessionClaims
from auth.service import AccountService
from auth.tokens import clear_session_cookie, set_session_cookie

logger = logging.getLogger("agrirent.api")

# Auth policy:
# - POST /api/signup:     public
# - POST /api/login:      public
# - POST /api/logout:     public -- clearing a cookie needs no prior auth
# - GET  /api/test:       public
# - GET  /api/protected:  requires session (get_session)
# - GET  /api/profile:    requires session (get_session)
router = APIRouter()


def _account_response(view: AccountView) -> AccountResponse:
    return AccountResponse(email=view.email, role=view.role, created_at=view.created_at)


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/signup", response_model=SignupResponse)
def signup(request: Request, body: SignupRequest) -> JSONResponse:
    """Register a new account and log it in.

    The response lists every account in its public form (allUsers) so the
    client can confirm the registration landed.
    """
    service: AccountService = request.app.state.accounts
    result = service.signup(body.email, body.password, body.role)

    resp = JSONResponse(
        content=SignupResponse(
            message="User registered & logged in successfully",
            role=result.account.role,
            email=result.account.email,
            token=result.token,
            all_users=[_account_response(v) for v in result.all_accounts],
        ).model_dump(by_alias=True),
    )
    set_session_cookie(resp, result.token, request.app.state.settings)
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; set the session cookie.

    Unknown email and wrong password return the same 401 body.
    """
    service: AccountService = request.app.state.accounts
    result = service.login(body.email, body.password)

    resp = JSONResponse(
        content=LoginResponse(
            message="Login successful",
            role=result.account.role,
            user=result.account.email,
            created_at=result.account.created_at,
        ).model_dump(by_alias=True),
    )
    set_session_cookie(resp, result.token, request.app.state.settings)
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request) -> JSONResponse:
    """Clear the session cookie. Already-issued tokens stay valid until they expire."""
    service: AccountService = request.app.state.accounts
    service.logout()
    resp = JSONResponse(content=MessageResponse(message="Logged out successfully").model_dump())
    clear_session_cookie(resp, request.app.state.settings)
    return resp


@router.get("/test", response_model=MessageResponse)
async def liveness() -> MessageResponse:
    logger.info("Test API accessed")
    return MessageResponse(message="API working Fine!")


# ---------------------------------------------------------------------------
# Session-protected endpoints
# ---------------------------------------------------------------------------


@router.get("/protected", response_model=ProtectedResponse)
async def protected(session: SessionClaims = Depends(get_session)) -> ProtectedResponse:
    """Example protected route: greets the caller by role and echoes the claims."""
    logger.info("Protected route accessed by %s", session.email)
    return ProtectedResponse(
        message=f"Welcome {session.role}!",
        user=SessionResponse(**session.to_dict()),
    )


@router.get("/profile", response_model=AccountResponse)
def profile(request: Request, session: SessionClaims = Depends(get_session)) -> JSONResponse:
    """Return the stored account for the session's email, without the password hash."""
    service: AccountService = request.app.state.accounts
    view = service.get_profile(session.email)
    return JSONResponse(content=_account_response(view).model_dump(by_alias=True))
