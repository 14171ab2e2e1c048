"""Shared behaviour of the per-entity repositories.

A repository reads one page from the backend, overlays what this session
has written itself (see ``ledgerdesk.database.overlay``), and writes the
authoritative record returned by every successful mutation back into both
the overlay cache and its in-memory list.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Optional, TypeVar

from ledgerdesk.database.overlay import OverlayCache, Record, merge
from ledgerdesk.domain.entities import INACTIVE
from ledgerdesk.domain.errors import (
    OperationError,
    PreconditionError,
    ValidationError,
    missing_identifier,
    required_field,
)
from ledgerdesk.domain.session import ActorSession
from ledgerdesk.remote.base import RemoteBackend
from ledgerdesk.remote.endpoints import EntityEndpoints
from ledgerdesk.remote.response import Ok, normalize_response, unwrap

logger = logging.getLogger(__name__)

E = TypeVar("E")

DEFAULT_PAGE_SIZE = 200


def pagination_payload(offset: int, limit: int) -> dict[str, Any]:
    """Every pagination alias the list procedures accept."""
    offset = max(int(offset or 0), 0)
    limit = max(int(limit or 1), 1)
    page = offset // limit + 1
    return {
        "p_limit": limit,
        "p_offset": offset,
        "limit": limit,
        "offset": offset,
        "page": page,
        "page_size": limit,
        "p_page": page,
        "p_page_size": limit,
    }


def target_id(target: Any) -> Any:
    """Id of an entity, draft, record or a bare id."""
    if isinstance(target, dict):
        return target.get("id")
    return getattr(target, "id", target)


class EntityRepository(Generic[E]):
    """Base repository; subclasses describe one entity type.

    Attributes set by subclasses:
        entity_type: Overlay cache section (e.g. 'accounts')
        label: Human readable entity name used in messages
        id_param: Mutation payload field carrying the id (e.g. 'p_id_cuenta')
        response_key: Key of the authoritative record in ``rows[0].data``
        endpoints: Remote routes for this entity
        clear_on_list_error: Empty the in-memory list when a list read fails
    """

    entity_type: str = ""
    label: str = "record"
    id_param: str = ""
    response_key: str = ""
    endpoints: EntityEndpoints
    clear_on_list_error: bool = False

    def __init__(
        self,
        backend: RemoteBackend,
        cache: OverlayCache,
        session: ActorSession,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        """Initialize repository.

        Args:
            backend: Remote procedure collaborator
            cache: Overlay cache shared by all repositories of the session
            session: Canonical actor session
            page_size: Default limit for list reads
        """
        self.backend = backend
        self.cache = cache
        self.session = session
        self.page_size = page_size
        self.records: list[Record] = []
        self.rows: list[E] = []
        self.error = ""
        self.cache.ensure_namespace(session.session_id)

    # Entity-specific hooks

    def to_record(self, row: dict[str, Any]) -> Record:
        """Convert a backend row to a canonical record."""
        raise NotImplementedError

    def from_record(self, record: Record) -> E:
        """Convert a canonical record to an entity."""
        raise NotImplementedError

    def create_payload(self, draft: Any) -> dict[str, Any]:
        raise NotImplementedError

    def update_payload(self, draft: Any) -> dict[str, Any]:
        raise NotImplementedError

    def validate_draft(self, draft: Any) -> None:
        """Local field checks shared by create and update."""
        if not str(getattr(draft, "code", "") or "").strip():
            raise ValidationError(required_field("Code"))
        if not str(getattr(draft, "name", "") or "").strip():
            raise ValidationError(required_field("Name"))

    def filters_payload(self, filters: dict[str, Any]) -> dict[str, Any]:
        if filters.get("only_active") is not None:
            return {"p_only_activos": bool(filters["only_active"])}
        return {}

    def cached_filter(self, filters: dict[str, Any]) -> Optional[Callable[[Record], bool]]:
        """Predicate keeping cache-only records that match the list filters."""
        if filters.get("only_active"):
            return lambda record: record.get("register_status") != INACTIVE
        return None

    # Shared helpers

    def _set_records(self, records: list[Record]) -> None:
        self.records = records
        self.rows = [self.from_record(r) for r in records]

    def _require_session(self) -> ActorSession:
        return self.session.require()

    def _require_endpoint(self, endpoint: Optional[str], operation: str) -> str:
        if not endpoint:
            raise PreconditionError(f"No {operation} endpoint configured for {self.label}")
        return endpoint

    def _call(self, endpoint: str, payload: dict[str, Any]) -> Ok:
        response = self.backend.call(endpoint, payload, self.session)
        return unwrap(normalize_response(response))

    @staticmethod
    def metadata_fields(draft: Any, creating: bool) -> dict[str, Any]:
        """Metadata payload field.

        On create an absent value is sent as ``{}``. On update it is sent only
        when the caller touched metadata in this edit session.
        """
        metadata = getattr(draft, "metadata", None)
        if creating:
            return {"p_metadata": metadata if metadata is not None else {}}
        if getattr(draft, "metadata_touched", False):
            return {"p_metadata": metadata if metadata is not None else {}}
        return {}

    def store(self, record: Record) -> E:
        """Write an authoritative record into the cache and the in-memory list."""
        self.cache.upsert(self.session.session_id, self.entity_type, record.get("id"), record)
        key = str(record.get("id"))
        records = list(self.records)
        for index, existing in enumerate(records):
            if str(existing.get("id")) == key:
                records[index] = {**existing, **record}
                break
        else:
            records.insert(0, record)
        self._set_records(records)
        return self.from_record(record)

    def _write_back(self, result: Ok) -> Optional[E]:
        row = result.data.get(self.response_key)
        if not isinstance(row, dict):
            logger.debug("%s mutation returned no %s record", self.label, self.response_key)
            return None
        record = self.to_record(row)
        if not record.get("id"):
            return None
        return self.store(record)

    # Operations

    def list(
        self,
        offset: int = 0,
        limit: Optional[int] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[E]:
        """Read one page and merge it with the overlay cache.

        Args:
            offset: Row offset of the page
            limit: Page size (defaults to the repository page size)
            filters: Optional list filters

        Returns:
            Merged list of entities, also kept in ``rows``

        Raises:
            PreconditionError: If the session has no id
            OperationError: If the backend reports failure
        """
        filters = filters or {}
        limit = limit or self.page_size
        try:
            session = self._require_session()
            endpoint = self._require_endpoint(self.endpoints.list, "list")
            payload = {
                **session.actor_payload(),
                **pagination_payload(offset, limit),
                **self.filters_payload(filters),
            }
            logger.debug("Listing %s offset=%s limit=%s", self.entity_type, offset, limit)
            result = self._call(endpoint, payload)
        except (PreconditionError, OperationError) as e:
            logger.warning("Listing %s failed: %s", self.entity_type, e)
            self.error = str(e)
            if self.clear_on_list_error:
                self._set_records([])
            raise

        self.error = ""
        server_records = [self.to_record(row) for row in result.rows if isinstance(row, dict)]
        cached = self.cache.read_all(session.session_id, self.entity_type)
        self._set_records(merge(server_records, cached, self.cached_filter(filters)))
        return self.rows

    def create(self, draft: Any) -> Optional[E]:
        """Create an entity and write the returned record back.

        Returns:
            The created entity, or None if the backend returned no record
        """
        session = self._require_session()
        endpoint = self._require_endpoint(self.endpoints.create, "create")
        self.validate_draft(draft)
        payload = {**session.actor_payload(), **self.create_payload(draft)}
        result = self._call(endpoint, payload)
        entity = self._write_back(result)
        logger.info("Created %s %s", self.label, target_id(entity) if entity else "")
        return entity

    def update(self, draft: Any) -> Optional[E]:
        """Update an entity and write the returned record back."""
        session = self._require_session()
        endpoint = self._require_endpoint(self.endpoints.update, "update")
        if not target_id(draft):
            raise PreconditionError(missing_identifier(self.label, self.id_param))
        self.validate_draft(draft)
        payload = {
            **session.actor_payload(),
            self.id_param: target_id(draft),
            **self.update_payload(draft),
        }
        result = self._call(endpoint, payload)
        entity = self._write_back(result)
        logger.info("Updated %s %s", self.label, target_id(draft))
        return entity

    def deactivate(self, target: Any, reason: Optional[str] = None) -> Optional[E]:
        """Soft-delete: an update forcing ``register_status`` to Inactivo."""
        session = self._require_session()
        endpoint = self._require_endpoint(self.endpoints.deactivate, "deactivate")
        entity_id = target_id(target)
        if not entity_id:
            raise PreconditionError(missing_identifier(self.label, self.id_param))
        payload = {
            **session.actor_payload(),
            self.id_param: entity_id,
            "p_register_status": INACTIVE,
        }
        if reason:
            payload["p_motivo"] = reason
        result = self._call(endpoint, payload)
        entity = self._write_back(result)
        logger.info("Deactivated %s %s", self.label, entity_id)
        return entity

    def by_id(self) -> dict[Any, E]:
        return {target_id(row): row for row in self.rows}

    def find(self, entity_id: Any) -> Optional[E]:
        for row in self.rows:
            if str(target_id(row)) == str(entity_id):
                return row
        return None
