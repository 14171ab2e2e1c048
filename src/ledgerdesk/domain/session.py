"""Actor session ingestion.

The login response has carried the acting user's id under several field
names over time. It is resolved once here so mutation call sites only ever
see ``actor_user_id``.
"""

import time
from dataclasses import dataclass
from typing import Any, Optional

from ledgerdesk.domain.errors import PreconditionError, missing_session

# Checked in order; the first non-empty value wins.
ACTOR_ID_FIELDS = ("user_id", "usuario_id", "id_user", "id_usuario")


@dataclass(frozen=True)
class ActorSession:
    """Canonical view of an authenticated admin session."""

    session_id: Optional[str]
    actor_user_id: Any = None
    access_token: Optional[str] = None
    expires_at: Optional[float] = None

    def is_expired(self, now_ms: Optional[float] = None) -> bool:
        """Return True when ``expires_at`` (epoch ms) is known and past."""
        if self.expires_at is None:
            return False
        if now_ms is None:
            now_ms = time.time() * 1000
        return now_ms >= self.expires_at

    def require(self) -> "ActorSession":
        """Return self, or raise if the session id is missing."""
        if not self.session_id:
            raise PreconditionError(missing_session())
        return self

    def actor_payload(self) -> dict[str, Any]:
        """Actor identity fields sent with every remote call."""
        return {
            "p_actor_user_id": self.actor_user_id,
            "p_id_sesion": self.session_id,
        }


def resolve_actor_id(raw: dict[str, Any]) -> Any:
    """Return the first populated legacy actor id field, or None."""
    for name in ACTOR_ID_FIELDS:
        value = raw.get(name)
        if value is not None and value != "":
            return value
    return None


def ingest_session(raw: Optional[dict[str, Any]]) -> ActorSession:
    """Normalize a stored login response into an ActorSession.

    Args:
        raw: Login response as persisted by the console, or None

    Returns:
        ActorSession; ``session_id`` is None when the response has none
    """
    raw = raw or {}
    session_id = raw.get("id_sesion", raw.get("session_id"))
    expires_at = raw.get("expires_at")
    try:
        expires_at = float(expires_at) if expires_at is not None else None
    except (TypeError, ValueError):
        expires_at = None
    return ActorSession(
        session_id=str(session_id) if session_id not in (None, "") else None,
        actor_user_id=resolve_actor_id(raw),
        access_token=raw.get("access_token"),
        expires_at=expires_at,
    )
