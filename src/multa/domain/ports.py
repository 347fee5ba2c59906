"""
Ports (interfaces) for profile storage.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from .models import Card


class ProfileRepository(ABC):
    """
    Port for reading and writing the practice history of one profile.

    Implementations:
        - JsonProfileRepository: One JSON document per profile.
    """

    @abstractmethod
    def read(self, path: Path) -> list[Card] | None:
        """
        Read the cards stored at `path`.

        Returns:
            The stored cards, or None if no profile exists at `path`.

        Raises:
            ProfileReadError: The profile exists but cannot be read.
            CorruptProfileError: The content is not a valid profile.
        """
        pass

    @abstractmethod
    def write(self, path: Path, cards: list[Card]) -> None:
        """
        Replace the profile at `path` with `cards`.

        Raises:
            ProfileWriteError: The profile cannot be written.
        """
        pass

    @abstractmethod
    def delete(self, path: Path) -> bool:
        """Remove the profile at `path`. Returns False if there was none."""
        pass

    @abstractmethod
    def quarantine(self, path: Path) -> Path:
        """Move an unusable profile aside and return its new location."""
        pass
