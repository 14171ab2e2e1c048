"""In-memory key-value store."""

from typing import Optional

from ledgerdesk.database.base import KeyValueStore


class MemoryStore(KeyValueStore):
    """Dict-backed store living for the lifetime of the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)
