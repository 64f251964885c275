"""
auth/passwords.py -- Password hashing (bcrypt, direct usage, no passlib wrapper).

bcrypt is salted per call (gensalt) and costed by a fixed work factor, so
hashing the same plaintext twice gives two different strings while
checkpw() accepts both. The cost factor comes from Settings.bcrypt_rounds.

Plaintext passwords are never logged or stored by this module.

Layer rule: no imports from api/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging

import bcrypt

from core.config import Settings

logger = logging.getLogger("agrirent.auth")

# bcrypt only looks at the first 72 bytes; newer releases raise instead of
# truncating, so truncate explicitly.
_BCRYPT_MAX_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    """One-way salted hashing and verification of plaintext passwords.

    Usage:
        hasher = PasswordHasher(rounds=10)
        stored = hasher.hash("pw123")
        hasher.verify("pw123", stored)   # True
    """

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds
        # Hashed once so an unknown-email login still pays the full bcrypt cost.
        self._dummy_hash = self.hash("agrirent_timing_dummy")

    @classmethod
    def from_settings(cls, settings: Settings) -> PasswordHasher:
        return cls(rounds=settings.bcrypt_rounds)

    def hash(self, plain: str) -> str:
        """Return a bcrypt hash of the given plaintext password."""
        return bcrypt.hashpw(_encode(plain), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True if the plaintext password matches the bcrypt hash.

        A corrupt or non-bcrypt hash string is a mismatch, not an error.
        """
        try:
            return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
        except (ValueError, TypeError):
            logger.warning("Stored password hash is not a valid bcrypt hash")
            return False

    def burn(self, plain: str) -> None:
        """Run a verification against a throwaway hash and discard the result."""
        self.verify(plain, self._dummy_hash)
