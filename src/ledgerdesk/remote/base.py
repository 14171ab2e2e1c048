"""Abstract remote procedure interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ledgerdesk.domain.session import ActorSession


class RemoteBackend(ABC):
    """Abstract remote collaborator for ledgerdesk.

    Implementations return the decoded response body. Transport-level
    failures are raised as OperationError; backend-reported failures are
    left in the body for ``normalize_response`` to detect.
    """

    @abstractmethod
    def call(
        self,
        endpoint: str,
        payload: dict[str, Any],
        session: Optional[ActorSession] = None,
    ) -> dict[str, Any]:
        """Invoke a remote procedure and return its decoded response."""
        pass
