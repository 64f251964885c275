"""
API request and response models for AgriRent REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Field names follow the JSON the front-end already consumes (camelCase
createdAt / allUsers), so aliases are used where Python naming differs.

Request fields are Optional on purpose: an absent field must reach the
Account Service and come back as a 400 "missing_fields", not as a 422 from
Pydantic. Values are passed through byte-for-byte: no whitespace
stripping, and no length cap on password (bcrypt only reads the first 72
bytes anyway).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class SignupRequest(BaseModel):
    """Request body for POST /api/signup."""

    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = None
    role: Optional[str] = Field(default=None, max_length=50)


class LoginRequest(BaseModel):
    """Request body for POST /api/login."""

    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class AccountResponse(BaseModel):
    """Public view of an account. Never carries the password hash."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    email: str
    role: str
    created_at: int = Field(serialization_alias="createdAt")


class SignupResponse(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message: str
    role: str
    email: str
    token: str
    all_users: list[AccountResponse] = Field(serialization_alias="allUsers")


class LoginResponse(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message: str
    role: str
    user: str
    created_at: int = Field(serialization_alias="createdAt")


class SessionResponse(BaseModel):
    """Decoded token claims as returned by protected routes."""

    model_config = ConfigDict(frozen=True)

    email: str
    role: str
    iat: int
    exp: int


class ProtectedResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    user: SessionResponse


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
