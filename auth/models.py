"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic beyond mapping).
Stores and services do the work.

Account is the persisted record and the only type that carries the password
hash. AccountView is the public projection handed to everything outside the
auth package -- the hash field simply does not exist on it, so it cannot be
leaked by forgetting to strip it.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AccountView:
    """An account as it may be shown to clients."""

    email: str
    role: str
    created_at: int  # calendar year only

    def to_dict(self) -> dict:
        return {"email": self.email, "role": self.role, "createdAt": self.created_at}


@dataclass(frozen=True)
class Account:
    """A registered identity.

    email is the unique key (case-sensitive, compared as received).
    role is fixed at signup; no operation changes it.
    """

    email: str
    password_hash: str
    role: str  # "farmer", "vehicle_owner", ...
    created_at: int  # calendar year of signup

    def public(self) -> AccountView:
        return AccountView(email=self.email, role=self.role, created_at=self.created_at)

    def to_record(self) -> dict:
        """Serialize to the on-disk record layout."""
        return {
            "email": self.email,
            "passwordHash": self.password_hash,
            "role": self.role,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, record: dict) -> Account:
        """Build an Account from an on-disk record.

        Older files stored the hash under "password"; both keys are accepted.
        Raises KeyError/ValueError/TypeError on a malformed record.
        """
        password_hash = record.get("passwordHash") or record.get("password")
        if not record["email"] or not password_hash or not record["role"]:
            raise ValueError("record has empty required fields")
        return cls(
            email=str(record["email"]),
            password_hash=str(password_hash),
            role=str(record["role"]),
            created_at=int(record["createdAt"]),
        )


@dataclass(frozen=True)
class SessionClaims:
    """Decoded contents of a valid session token."""

    email: str
    role: str
    issued_at: int  # epoch seconds
    expires_at: int  # epoch seconds

    def to_dict(self) -> dict:
        return {"email": self.email, "role": self.role, "iat": self.issued_at, "exp": self.expires_at}
