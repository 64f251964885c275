"""
auth/store.py -- Flat-file persistence for Account records.

Pattern: Repository over a single JSON document. The whole account set is
read and written as one unit; there is no incremental update.

  load_all() never raises. A missing, unreadable, or malformed file is logged
  and treated as an empty store. Individual malformed records are skipped
  with a warning so one bad entry does not hide every other account.

  save_all() writes to a sibling temp file and os.replace()s it over the
  target, so a reader never sees a half-written document. A write failure
  raises StoreUnavailable.

No locking happens here. Callers that do load-modify-save must serialise
that sequence themselves (AccountService holds a lock for it).

Layer rule: no imports from api/. Import from core/ is allowed.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from auth.errors import StoreUnavailable
from auth.models import Account
from core.config import Settings

logger = logging.getLogger("agrirent.store")


class CredentialStore:
    """Durable mapping of email -> Account backed by one JSON file.

    Usage:
        store = CredentialStore(Path("users.json"))
        accounts = store.load_all()
        store.save_all(accounts + [new_account])
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    @classmethod
    def from_settings(cls, settings: Settings) -> CredentialStore:
        return cls(settings.users_file)

    def load_all(self) -> list[Account]:
        """Return every stored account, or [] if the file is missing or corrupt."""
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.info("Users file %s does not exist yet; starting empty", self.path)
            return []
        except (OSError, ValueError) as exc:
            logger.error("Error reading users file %s: %s", self.path, exc)
            return []

        if not isinstance(raw, list):
            logger.error("Error reading users file %s: expected a JSON array", self.path)
            return []

        accounts: list[Account] = []
        for index, record in enumerate(raw):
            try:
                accounts.append(Account.from_record(record))
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                logger.warning("Skipping malformed record #%d in %s: %s", index, self.path, exc)
        return accounts

    def save_all(self, accounts: list[Account]) -> None:
        """Replace the persisted set with accounts."""
        payload = json.dumps([a.to_record() for a in accounts], indent=2)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.error("Error writing users file %s: %s", self.path, exc)
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreUnavailable() from exc
        logger.info("User data updated successfully (%d accounts)", len(accounts))
