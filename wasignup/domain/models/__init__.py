"""Domain models."""

from .account import Account, AccountMetadata, PhoneNumberRecord

__all__ = ["Account", "AccountMetadata", "PhoneNumberRecord"]
