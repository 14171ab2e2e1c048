"""Session-scoped overlay cache.

Each repository remembers the authoritative record returned by its own
mutations here, so a later paginated list read that lags behind (offset
drift, read-after-write delay, or columns the list endpoint omits) can be
reconciled locally. The whole namespace for one session is a single JSON
document::

    {"accounts": {"byId": {"7": {...}}}, "account_groups": {...}, ...}
"""

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional

from ledgerdesk.database.base import KeyValueStore
from ledgerdesk.domain.errors import CacheCorruptionError

logger = logging.getLogger(__name__)

NAMESPACE_PREFIX = "cm_contabilidad_cache_v1"
ACTIVE_KEY = f"{NAMESPACE_PREFIX}:active"

ENTITY_TYPES = ("accounts", "account_groups", "cost_centers", "transactions")

Record = dict[str, Any]


def _json_default(o: Any) -> Any:
    if isinstance(o, (datetime, date)):
        return o.isoformat()
    if isinstance(o, Decimal):
        return str(o)
    if isinstance(o, (set, tuple)):
        return list(o)
    return str(o)


def _record_id(record: Record) -> str:
    value = record.get("id")
    return "" if value is None else str(value)


def merge(
    server_records: Iterable[Record],
    cached: dict[str, Record],
    include: Optional[Callable[[Record], bool]] = None,
) -> list[Record]:
    """Overlay cached records on a server page.

    Cached fields win over server fields for the same id. Cached records
    whose id is absent from the page are prepended, most recently written
    first, unless ``include`` rejects them (the page was filtered). Records
    without an id are dropped; duplicate ids keep their first position.
    """
    seen: set[str] = set()
    overlaid: list[Record] = []
    for record in server_records:
        key = _record_id(record)
        if key:
            seen.add(key)
        cached_record = cached.get(key) if key else None
        overlaid.append({**record, **cached_record} if cached_record else dict(record))

    cache_only = [
        dict(record)
        for key, record in cached.items()
        if str(key) not in seen and (include is None or include(record))
    ]
    cache_only.reverse()

    merged: dict[str, Record] = {}
    for record in cache_only + overlaid:
        key = _record_id(record)
        if not key:
            continue
        if key in merged:
            merged[key].update(record)
        else:
            merged[key] = record
    return list(merged.values())


class OverlayCache:
    """Namespaced id->record maps, one namespace per session."""

    def __init__(self, store: KeyValueStore):
        """Initialize overlay cache.

        Args:
            store: Key-value store holding the serialized namespaces
        """
        self.store = store

    @staticmethod
    def namespace_key(session_key: str) -> str:
        return f"{NAMESPACE_PREFIX}:{session_key}"

    def _decode(self, raw: str) -> dict[str, Any]:
        try:
            document = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise CacheCorruptionError(f"Unreadable cache content: {e}") from e
        if not isinstance(document, dict):
            raise CacheCorruptionError("Cache content is not an object")
        for entity_type in ENTITY_TYPES:
            if entity_type not in document:
                continue
            section = document[entity_type]
            if not isinstance(section, dict) or not isinstance(section.get("byId", {}), dict):
                raise CacheCorruptionError(f"Malformed '{entity_type}' section")
        return document

    def _load(self, session_key: str) -> dict[str, Any]:
        """Read the namespace document; corrupt content reads as empty."""
        raw = self.store.get(self.namespace_key(session_key))
        if not raw:
            return {}
        try:
            return self._decode(raw)
        except CacheCorruptionError as e:
            logger.warning("Discarding overlay cache for session %s: %s", session_key, e)
            self.store.remove(self.namespace_key(session_key))
            return {}

    def _save(self, session_key: str, document: dict[str, Any]) -> None:
        self.store.set(self.namespace_key(session_key), json.dumps(document, default=_json_default))

    def ensure_namespace(self, session_key: Optional[str]) -> None:
        """Create the four entity maps for a session if absent.

        A namespace belonging to a previously active session is discarded.
        """
        if not session_key:
            return

        active = self.store.get(ACTIVE_KEY)
        if active and active != session_key:
            logger.info("Session changed, discarding overlay cache of session %s", active)
            self.store.remove(self.namespace_key(active))
        if active != session_key:
            self.store.set(ACTIVE_KEY, session_key)

        document = self._load(session_key)
        changed = not document
        for entity_type in ENTITY_TYPES:
            if not isinstance(document.get(entity_type), dict) or "byId" not in document[entity_type]:
                document[entity_type] = {"byId": {}}
                changed = True
        if changed:
            self._save(session_key, document)

    def upsert(self, session_key: Optional[str], entity_type: str, entity_id: Any, record: Record) -> None:
        """Write or overwrite one entry. No-op without a session key or id."""
        if not session_key or not entity_id:
            return
        document = self._load(session_key)
        section = document.get(entity_type)
        if not isinstance(section, dict) or not isinstance(section.get("byId"), dict):
            section = document[entity_type] = {"byId": {}}
        by_id = section["byId"]
        key = str(entity_id)
        # Re-insert so iteration order reflects write recency
        by_id.pop(key, None)
        by_id[key] = record
        self._save(session_key, document)

    def read_all(self, session_key: Optional[str], entity_type: str) -> dict[str, Record]:
        """Return the id->record map, or an empty map if nothing is readable."""
        if not session_key:
            return {}
        document = self._load(session_key)
        section = document.get(entity_type)
        by_id = section.get("byId") if isinstance(section, dict) else None
        if not isinstance(by_id, dict):
            return {}
        return {str(k): v for k, v in by_id.items() if isinstance(v, dict)}

    def clear(self, session_key: Optional[str]) -> None:
        """Remove a session namespace entirely."""
        if not session_key:
            return
        self.store.remove(self.namespace_key(session_key))
        if self.store.get(ACTIVE_KEY) == session_key:
            self.store.remove(ACTIVE_KEY)

    merge = staticmethod(merge)
