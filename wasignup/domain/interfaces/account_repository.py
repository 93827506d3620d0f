"""
Account repository interface.

Defines the key-value contract the onboarding flow needs for persisting
accounts. The in-memory AccountRegistry is the shipped implementation; a
database-backed store only has to honour the same semantics.
"""

from abc import ABC, abstractmethod

from wasignup.domain.models.account import Account


class IAccountRepository(ABC):
    """
    Store of Account records keyed by ``waba_id``.

    Semantics every implementation keeps:
    - save is an upsert, last write wins
    - created_at is set on first save and never changed afterwards
    - updated_at is refreshed on every save
    - delete of a missing key is not an error
    """

    @abstractmethod
    def save(self, account: Account) -> Account:
        """Upsert an account; raises PersistenceError if storage fails."""

    @abstractmethod
    def get(self, waba_id: str) -> Account:
        """Return the account; raises NotFoundError if absent."""

    @abstractmethod
    def list(self) -> list[Account]:
        """Snapshot of all accounts, in no particular order."""

    @abstractmethod
    def delete(self, waba_id: str) -> None:
        """Remove an account if present."""

    @abstractmethod
    def export(self) -> str:
        """Deterministic, indented JSON dump of the whole store."""
