"""HTTP implementation of the remote backend."""

import logging
import os
from typing import Any, Optional

import requests

from ledgerdesk.domain.errors import OperationError
from ledgerdesk.domain.session import ActorSession
from ledgerdesk.remote.base import RemoteBackend
from ledgerdesk.remote.endpoints import DEFAULT_API_URL

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class HTTPBackend(RemoteBackend):
    """POSTs JSON payloads to the backend and decodes the answer."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        http: Optional[requests.Session] = None,
    ):
        """Initialize HTTP backend.

        Args:
            base_url: API root, e.g. 'https://api.example.com'
            timeout: Per-request timeout in seconds
            http: Optional requests session (shared connection pool)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    def url_for(self, endpoint: str) -> str:
        if not isinstance(endpoint, str) or not endpoint.strip():
            raise OperationError(f"Undefined or invalid API endpoint: {endpoint!r}")
        normalized = endpoint if endpoint.startswith("/") else f"/{endpoint}"
        return f"{self.base_url}{normalized}"

    def call(
        self,
        endpoint: str,
        payload: dict[str, Any],
        session: Optional[ActorSession] = None,
    ) -> dict[str, Any]:
        url = self.url_for(endpoint)
        headers = {"Content-Type": "application/json; charset=utf-8"}
        if session is not None and session.access_token:
            headers["Authorization"] = f"Bearer {session.access_token}"

        logger.debug("POST %s", url)
        try:
            response = self.http.post(url, json=payload, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning("Request to %s failed: %s", endpoint, e)
            raise OperationError(f"Could not reach backend: {e}") from e

        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                data = response.json()
            except ValueError:
                data = {}
        else:
            text = response.text or ""
            data = {"message": text} if text else {}

        if not response.ok:
            message = (data.get("message") if isinstance(data, dict) else None) or (
                f"Error {response.status_code}: {response.reason}"
            )
            logger.warning("Backend answered %s for %s: %s", response.status_code, endpoint, message)
            raise OperationError(message, data)

        return data if isinstance(data, dict) else {"rows": data}


def _env_timeout() -> float:
    raw = os.environ.get("LEDGERDESK_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        timeout = 0.0
    if not timeout > 0:
        logger.warning("Ignoring invalid LEDGERDESK_TIMEOUT %r, using %ss", raw, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    return timeout


def create_http_backend(api_url: Optional[str] = None) -> HTTPBackend:
    """Create an HTTP backend.

    Args:
        api_url: API root. If None, checks LEDGERDESK_API_URL, then falls back
            to the development API.

    Returns:
        HTTPBackend instance
    """
    if api_url is None:
        api_url = os.environ.get("LEDGERDESK_API_URL", DEFAULT_API_URL)
    timeout = _env_timeout()
    return HTTPBackend(api_url, timeout=timeout)
