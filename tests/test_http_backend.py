"""Tests for the HTTP backend."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from ledgerdesk.domain.errors import OperationError
from ledgerdesk.domain.session import ingest_session
from ledgerdesk.remote.http import HTTPBackend, create_http_backend


def fake_response(status=200, json_body=None, text="", content_type="application/json", reason="OK"):
    response = MagicMock()
    response.status_code = status
    response.ok = status < 400
    response.reason = reason
    response.headers = {"content-type": content_type}
    response.json.return_value = json_body
    response.text = text
    return response


@pytest.fixture
def http():
    return MagicMock(spec=requests.Session)


def test_call_posts_json_with_bearer_token(http):
    http.post.return_value = fake_response(json_body={"ok": True, "rows": []})
    backend = HTTPBackend("https://api.example.com/", http=http, timeout=5)
    session = ingest_session({"id_sesion": "s", "access_token": "tok"})

    result = backend.call("api/contabilidad/cuentas/listar", {"p_limit": 1}, session)

    assert result == {"ok": True, "rows": []}
    args, kwargs = http.post.call_args
    assert args[0] == "https://api.example.com/api/contabilidad/cuentas/listar"
    assert kwargs["json"] == {"p_limit": 1}
    assert kwargs["headers"]["Authorization"] == "Bearer tok"
    assert kwargs["timeout"] == 5


def test_call_without_token_has_no_authorization(http):
    http.post.return_value = fake_response(json_body={"ok": True})

    HTTPBackend("https://api.example.com", http=http).call("/x", {})

    assert "Authorization" not in http.post.call_args.kwargs["headers"]


def test_http_error_uses_backend_message(http):
    http.post.return_value = fake_response(status=400, json_body={"ok": False, "message": "Código duplicado"})

    with pytest.raises(OperationError) as exc_info:
        HTTPBackend("https://api.example.com", http=http).call("/x", {})

    assert exc_info.value.message == "Código duplicado"
    assert exc_info.value.response == {"ok": False, "message": "Código duplicado"}


def test_http_error_without_body(http):
    http.post.return_value = fake_response(status=502, content_type="text/html", text="", reason="Bad Gateway")

    with pytest.raises(OperationError, match="Error 502: Bad Gateway"):
        HTTPBackend("https://api.example.com", http=http).call("/x", {})


def test_text_body_becomes_message(http):
    http.post.return_value = fake_response(status=500, content_type="text/plain", text="boom", reason="Server Error")

    with pytest.raises(OperationError, match="boom"):
        HTTPBackend("https://api.example.com", http=http).call("/x", {})


def test_transport_failure_becomes_operation_error(http):
    http.post.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(OperationError, match="Could not reach backend"):
        HTTPBackend("https://api.example.com", http=http).call("/x", {})


def test_invalid_endpoint(http):
    with pytest.raises(OperationError, match="invalid API endpoint"):
        HTTPBackend("https://api.example.com", http=http).call("  ", {})

    http.post.assert_not_called()


def test_list_body_is_wrapped_as_rows(http):
    http.post.return_value = fake_response(json_body=[{"id": 1}])

    assert HTTPBackend("https://api.example.com", http=http).call("/x", {}) == {"rows": [{"id": 1}]}


def test_factory_reads_environment(monkeypatch):
    monkeypatch.setenv("LEDGERDESK_API_URL", "https://ledger.example.org")
    monkeypatch.setenv("LEDGERDESK_TIMEOUT", "12")

    backend = create_http_backend()

    assert backend.base_url == "https://ledger.example.org"
    assert backend.timeout == 12.0


def test_factory_argument_overrides_environment(monkeypatch):
    monkeypatch.setenv("LEDGERDESK_API_URL", "https://ledger.example.org")

    with patch("ledgerdesk.remote.http.requests.Session"):
        backend = create_http_backend("https://other.example.org")

    assert backend.base_url == "https://other.example.org"


@pytest.mark.parametrize("raw", ["soon", "0", "-5"])
def test_factory_ignores_invalid_timeout(monkeypatch, raw):
    monkeypatch.setenv("LEDGERDESK_TIMEOUT", raw)

    backend = create_http_backend("https://ledger.example.org")

    assert backend.timeout == 30.0
