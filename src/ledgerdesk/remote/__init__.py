"""Remote procedure layer for ledgerdesk application."""

from ledgerdesk.remote.base import RemoteBackend
from ledgerdesk.remote.http import HTTPBackend, create_http_backend
from ledgerdesk.remote.response import Ok, Err, normalize_response, unwrap

__all__ = [
    "RemoteBackend",
    "HTTPBackend",
    "create_http_backend",
    "Ok",
    "Err",
    "normalize_response",
    "unwrap",
]
