"""Tests for actor session ingestion."""

import pytest

from ledgerdesk.domain.errors import PreconditionError
from ledgerdesk.domain.session import ingest_session, resolve_actor_id


@pytest.mark.parametrize(
    "raw, expected",
    [
        ({"user_id": 1, "usuario_id": 2, "id_user": 3, "id_usuario": 4}, 1),
        ({"usuario_id": 2, "id_user": 3, "id_usuario": 4}, 2),
        ({"user_id": "", "id_user": 3, "id_usuario": 4}, 3),
        ({"id_usuario": 4}, 4),
        ({}, None),
    ],
)
def test_actor_id_fallback_chain(raw, expected):
    assert resolve_actor_id(raw) == expected


def test_ingest_session():
    session = ingest_session({"id_sesion": 77, "id_usuario": 5, "access_token": "t", "expires_at": "1000"})

    assert session.session_id == "77"
    assert session.actor_user_id == 5
    assert session.access_token == "t"
    assert session.expires_at == 1000.0
    assert session.actor_payload() == {"p_actor_user_id": 5, "p_id_sesion": "77"}


def test_ingest_none_has_no_session_id():
    session = ingest_session(None)

    assert session.session_id is None
    with pytest.raises(PreconditionError, match="missing session id"):
        session.require()


def test_is_expired():
    session = ingest_session({"id_sesion": "s", "expires_at": 2000})

    assert session.is_expired(now_ms=2000)
    assert not session.is_expired(now_ms=1999)
    assert not ingest_session({"id_sesion": "s"}).is_expired()
