"""
In-memory account registry.

Authoritative store of onboarded accounts for the lifetime of the process,
keyed by WABA id and guarded by a reader/writer lock. Created in the app
lifespan and injected wherever it is needed.
"""

import json
from datetime import datetime, timedelta, timezone

from wasignup.core.errors import NotFoundError, PersistenceError
from wasignup.core.logging.logger import get_logger
from wasignup.domain.interfaces.account_repository import IAccountRepository
from wasignup.domain.models.account import Account

from .utils.rw_lock import ReadWriteLock

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AccountRegistry(IAccountRepository):
    """
    Thread-safe in-memory account store.

    Records are copied on the way in and on the way out, so callers never hold
    a reference into the store.
    """

    def __init__(self):
        self._accounts: dict[str, Account] = {}
        self._lock = ReadWriteLock()
        self._closed = False

    def save(self, account: Account) -> Account:
        """
        Upsert an account under its WABA id.

        Sets ``updated_at`` on every call (strictly later than the stored
        record's) and keeps the first ``created_at`` ever stored for the key.

        Returns:
            The same account instance, with timestamps filled in

        Raises:
            PersistenceError: If the registry has been closed
        """
        with self._lock.write():
            if self._closed:
                raise PersistenceError("account registry is closed")

            now = _utcnow()
            previous = self._accounts.get(account.waba_id)
            last_update = previous.updated_at if previous is not None else None
            if last_update is not None and now <= last_update:
                now = last_update + timedelta(microseconds=1)

            account.updated_at = now
            if previous is not None and previous.created_at is not None:
                account.created_at = previous.created_at
            elif account.created_at is None:
                account.created_at = now

            self._accounts[account.waba_id] = account.model_copy(deep=True)

        logger.debug(f"Saved account {account.id} for WABA {account.waba_id}")
        return account

    def get(self, waba_id: str) -> Account:
        with self._lock.read():
            account = self._accounts.get(waba_id)
            if account is None:
                raise NotFoundError("Account not found")
            return account.model_copy(deep=True)

    def list(self) -> list[Account]:
        with self._lock.read():
            return [
                account.model_copy(deep=True) for account in self._accounts.values()
            ]

    def delete(self, waba_id: str) -> None:
        with self._lock.write():
            removed = self._accounts.pop(waba_id, None)
        if removed is not None:
            logger.info(f"Deleted account for WABA {waba_id}")

    def export(self) -> str:
        """
        Dump every account as indented JSON keyed by WABA id.

        Keys are sorted so the same store always exports the same text.
        Access tokens are included; the export is a backup.
        """
        with self._lock.read():
            snapshot = {
                waba_id: account.model_dump(mode="json")
                for waba_id, account in self._accounts.items()
            }
        try:
            return json.dumps(snapshot, indent=2, sort_keys=True, ensure_ascii=False)
        except (TypeError, ValueError) as err:
            raise PersistenceError(f"failed to export data: {err}") from err

    def count(self) -> int:
        with self._lock.read():
            return len(self._accounts)

    def close(self) -> None:
        """Tear down the store at shutdown; later saves fail."""
        with self._lock.write():
            dropped = len(self._accounts)
            self._accounts.clear()
            self._closed = True
        logger.info(f"Account registry closed ({dropped} accounts dropped)")

    @property
    def is_closed(self) -> bool:
        return self._closed
