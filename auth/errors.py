"""
auth/errors.py -- Failure taxonomy for the auth package.

Every exception carries a machine-readable code and a message that is safe to
show to a client. Internal detail (I/O errors, jose exceptions) goes to the
log and to __cause__, never into message. The API layer maps each class to an
HTTP status; nothing in auth/ knows about HTTP.

Layer rule: no imports from api/ or core/.
"""


class AuthError(Exception):
    """Base class for all auth failures."""

    code = "auth_error"
    message = "Authentication error."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AuthError):
    """Client input is incomplete (a required field is absent or empty)."""

    code = "missing_fields"
    message = "All fields are required."


class DuplicateAccount(AuthError):
    """An account with the same email already exists."""

    code = "duplicate_account"
    message = "User already exists."


class InvalidCredentials(AuthError):
    """Unknown email or wrong password. The two causes are deliberately merged."""

    code = "invalid_credentials"
    message = "Invalid credentials."


class MissingToken(AuthError):
    """No session token was supplied."""

    code = "unauthorized"
    message = "Unauthorized."


class InvalidToken(AuthError):
    """Token is malformed, has a bad signature, or has expired."""

    code = "invalid_token"
    message = "Invalid token."


class NotFound(AuthError):
    """The authenticated identity no longer matches a stored account."""

    code = "not_found"
    message = "User not found."


class StoreUnavailable(AuthError):
    """The credential store could not be written."""

    code = "store_unavailable"
    message = "Account storage is temporarily unavailable."
