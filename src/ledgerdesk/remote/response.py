"""Response normalization.

The backend may answer with ``ok: true`` at the top level and still report
an error in ``rows[0].status``. Both layers are checked once here and the
outcome is returned as a tagged result consumed uniformly by repositories.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from ledgerdesk.domain.errors import DEFAULT_OPERATION_MESSAGE, OperationError


@dataclass(frozen=True)
class Ok:
    """Successful response."""

    response: Any
    rows: list[Any] = field(default_factory=list)

    @property
    def first_row(self) -> Optional[dict[str, Any]]:
        if self.rows and isinstance(self.rows[0], dict):
            return self.rows[0]
        return None

    @property
    def data(self) -> dict[str, Any]:
        """``data`` of the first row, falling back to the top-level ``data``."""
        r0 = self.first_row
        if r0 is not None and isinstance(r0.get("data"), dict):
            return r0["data"]
        if isinstance(self.response, dict) and isinstance(self.response.get("data"), dict):
            return self.response["data"]
        return {}


@dataclass(frozen=True)
class Err:
    """Failed response.

    ``kind`` is ``"response"`` when the top-level ``ok`` flag is false and
    ``"row"`` when the first row carries a non-ok status.
    """

    kind: str
    message: str
    response: Any = None


Result = Union[Ok, Err]


def _message(source: dict[str, Any]) -> Optional[str]:
    return source.get("message") or source.get("error") or None


def normalize_response(response: Any) -> Result:
    """Classify a raw backend response."""
    if not isinstance(response, dict):
        response = {}

    if response.get("ok") is False:
        return Err("response", _message(response) or DEFAULT_OPERATION_MESSAGE, response)

    rows = response.get("rows")
    rows = rows if isinstance(rows, list) else []
    r0 = rows[0] if rows and isinstance(rows[0], dict) else None
    if r0 is not None and r0.get("status") and str(r0["status"]).lower() != "ok":
        return Err("row", _message(r0) or DEFAULT_OPERATION_MESSAGE, response)

    return Ok(response=response, rows=rows)


def unwrap(result: Result) -> Ok:
    """Return the Ok result or raise OperationError for an Err."""
    if isinstance(result, Err):
        raise OperationError(result.message, result.response)
    return result
