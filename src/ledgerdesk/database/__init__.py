"""Cache storage layer for ledgerdesk."""

from ledgerdesk.database.base import KeyValueStore
from ledgerdesk.database.memory import MemoryStore
from ledgerdesk.database.overlay import OverlayCache, merge
from ledgerdesk.database.factories import create_sqlite_store

__all__ = ["KeyValueStore", "MemoryStore", "OverlayCache", "merge", "create_sqlite_store"]
