"""Domain interfaces."""

from .account_repository import IAccountRepository
from .platform_interface import IPlatformClient

__all__ = ["IAccountRepository", "IPlatformClient"]
