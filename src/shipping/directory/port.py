"""User directory port.

Read-only lookup of user records owned by the identity system. The shipping
context only needs a user's wallet address, for crediting milestones.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class DirectoryError(Exception):
    """The directory could not be queried."""


@dataclass(frozen=True)
class UserRecord:
    user_id: str
    wallet_address: str | None = None


class UserDirectory(ABC):
    """Abstract user directory interface."""

    @abstractmethod
    def find_by_id(self, user_id: str) -> UserRecord | None:
        """Return the user record, or None when no such user exists."""
        ...
