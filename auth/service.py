"""
auth/service.py -- Account Service: signup, login, logout, profile lookup.

This is the only component with business rules, and the only caller of
CredentialStore, PasswordHasher and TokenService.

Account lifecycle: NonExistent -> Registered (signup). Nothing moves an
account out of Registered; there is no update or delete.

Concurrency: signup is a read-modify-write of the whole store file. A single
lock per service instance serialises that sequence so two concurrent signups
cannot overwrite each other's write. Separate processes sharing one file are
not coordinated.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from auth.errors import DuplicateAccount, InvalidCredentials, NotFound, ValidationError
from auth.models import Account, AccountView
from auth.passwords import PasswordHasher
from auth.store import CredentialStore
from auth.tokens import TokenService
from core.config import Settings

logger = logging.getLogger("agrirent.auth")


@dataclass(frozen=True)
class SignupResult:
    account: AccountView
    token: str
    all_accounts: list[AccountView]


@dataclass(frozen=True)
class LoginResult:
    account: AccountView
    token: str


class AccountService:
    """Orchestrates account registration and authentication.

    Usage:
        service = AccountService(store, hasher, tokens)
        result = service.signup("f1@t.com", "pw123", "farmer")
        result = service.login("f1@t.com", "pw123")
    """

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenService,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self._clock = clock
        self._write_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> AccountService:
        """Wire store, hasher and token service from one Settings instance."""
        return cls(
            store=CredentialStore.from_settings(settings),
            hasher=PasswordHasher.from_settings(settings),
            tokens=TokenService(settings),
        )

    def signup(self, email: str | None, password: str | None, role: str | None) -> SignupResult:
        """Register a new account and issue its first session token.

        Raises:
            ValidationError: email, password or role is absent or empty.
            DuplicateAccount: an account with this exact email exists.
            StoreUnavailable: the updated set could not be persisted.
        """
        if not email or not password or not role:
            logger.warning("Signup failed: Missing fields")
            raise ValidationError()

        with self._write_lock:
            accounts = self.store.load_all()
            if any(a.email == email for a in accounts):
                logger.warning("Signup failed: User %s already exists", email)
                raise DuplicateAccount()

            account = Account(
                email=email,
                password_hash=self.hasher.hash(password),
                role=role,
                created_at=self._clock().year,
            )
            accounts.append(account)
            self.store.save_all(accounts)

        token = self.tokens.issue(account.email, account.role)
        logger.info("New user signed up: %s as %s", email, role)
        return SignupResult(
            account=account.public(),
            token=token,
            all_accounts=[a.public() for a in accounts],
        )

    def login(self, email: str | None, password: str | None) -> LoginResult:
        """Verify credentials and issue a fresh session token.

        Unknown email and wrong password both raise InvalidCredentials, and
        both pay for one bcrypt verification.
        """
        account = self._find(email) if email else None
        if account is None:
            self.hasher.burn(password or "")
            logger.warning("Login failed for %s: Invalid credentials", email)
            raise InvalidCredentials()
        if not password or not self.hasher.verify(password, account.password_hash):
            logger.warning("Login failed for %s: Invalid credentials", email)
            raise InvalidCredentials()

        token = self.tokens.issue(account.email, account.role)
        logger.info("User logged in: %s", email)
        return LoginResult(account=account.public(), token=token)

    def logout(self) -> None:
        """End the client session.

        Tokens are not tracked server-side, so this only records the event;
        the caller clears the cookie. A token copied before logout stays valid
        until it expires.
        """
        logger.info("User logged out")

    def get_profile(self, email: str) -> AccountView:
        """Return the public view of the account for an authenticated email."""
        account = self._find(email)
        if account is None:
            logger.warning("Profile fetch failed: User %s not found", email)
            raise NotFound()
        logger.info("Profile accessed: %s", email)
        return account.public()

    def _find(self, email: str) -> Account | None:
        for account in self.store.load_all():
            if account.email == email:
                return account
        return None
