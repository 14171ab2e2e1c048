"""Abstract key-value store interface."""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """Abstract string key-value store backing the overlay cache."""

    @abstractmethod
    def connect(self) -> None:
        """Open the underlying storage."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release the underlying storage."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None if absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Write or overwrite a value."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""
        pass
