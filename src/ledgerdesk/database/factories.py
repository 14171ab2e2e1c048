"""Factory functions for creating cache store instances."""

import os
from pathlib import Path
from typing import Optional

from ledgerdesk.database.sqlalchemy_store import SQLAlchemyStore


def create_sqlite_store(cache_path: Optional[str] = None) -> SQLAlchemyStore:
    """Create a SQLite-backed cache store.

    Args:
        cache_path: Path to SQLite file. If None, checks LEDGERDESK_CACHE_PATH
            environment variable, then defaults to ~/.ledgerdesk/cache.db

    Returns:
        SQLAlchemyStore instance configured for SQLite
    """
    if cache_path is None:
        cache_path = os.environ.get("LEDGERDESK_CACHE_PATH")

    if cache_path is None:
        home = Path.home()
        cache_dir = home / ".ledgerdesk"
        cache_dir.mkdir(exist_ok=True)
        cache_path = str(cache_dir / "cache.db")

    return SQLAlchemyStore(f"sqlite:///{cache_path}")
