"""SQLAlchemy-backed key-value store."""

from typing import Optional
from sqlalchemy.orm import Session

from ledgerdesk.database.base import KeyValueStore
from ledgerdesk.database.models import CacheEntry, create_session_factory


class SQLAlchemyStore(KeyValueStore):
    """SQLAlchemy-based implementation of the KeyValueStore interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def get(self, key: str) -> Optional[str]:
        session = self._get_session()
        entry = session.get(CacheEntry, key)
        if entry is None:
            return None
        return entry.value

    def set(self, key: str, value: str) -> None:
        session = self._get_session()
        entry = session.get(CacheEntry, key)
        if entry is None:
            session.add(CacheEntry(key=key, value=value))
        else:
            entry.value = value
        session.commit()

    def remove(self, key: str) -> None:
        session = self._get_session()
        entry = session.get(CacheEntry, key)
        if entry is not None:
            session.delete(entry)
            session.commit()
