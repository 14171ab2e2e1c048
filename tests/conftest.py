"""Shared pytest fixtures for ledgerdesk tests."""

import os
import tempfile

import pytest

from ledgerdesk.database.factories import create_sqlite_store
from ledgerdesk.database.memory import MemoryStore
from ledgerdesk.database.overlay import OverlayCache
from ledgerdesk.domain.account import AccountRepository
from ledgerdesk.domain.account_group import AccountGroupRepository
from ledgerdesk.domain.composer import TransactionComposer
from ledgerdesk.domain.cost_center import CostCenterRepository
from ledgerdesk.domain.session import ingest_session
from ledgerdesk.domain.transaction import TransactionRepository
from backend_fakes import FakeBackend, page


@pytest.fixture
def backend():
    """Create a scripted fake backend."""
    return FakeBackend()


@pytest.fixture
def memory_store():
    """Create an empty in-memory key-value store."""
    return MemoryStore()


@pytest.fixture
def temp_store():
    """Create a temporary SQLite-backed store."""
    fd, cache_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(cache_path=cache_path)
    store.cache_path = cache_path
    store.connect()

    yield store

    store.disconnect()
    if os.path.exists(cache_path):
        os.unlink(cache_path)


@pytest.fixture
def cache(memory_store):
    """Create an overlay cache over the in-memory store."""
    return OverlayCache(memory_store)


@pytest.fixture
def session():
    """Create a canonical session with a legacy actor id field."""
    return ingest_session({"id_sesion": "sess-1", "usuario_id": 42, "access_token": "tok"})


@pytest.fixture
def anonymous_session():
    """Create a session without a session id."""
    return ingest_session({"usuario_id": 42})


@pytest.fixture
def account_repository(backend, cache, session):
    return AccountRepository(backend, cache, session)


@pytest.fixture
def group_repository(backend, cache, session):
    return AccountGroupRepository(backend, cache, session)


@pytest.fixture
def cost_center_repository(backend, cache, session):
    return CostCenterRepository(backend, cache, session)


@pytest.fixture
def transaction_repository(backend, cache, session):
    return TransactionRepository(backend, cache, session, page_size=50)


@pytest.fixture
def sample_accounts(backend, account_repository):
    """Load three accounts into the account repository."""
    backend.respond(
        "/api/contabilidad/cuentas/listar",
        page(
            {"id_cuenta": 11, "codigo": "1.1.01", "nombre": "Caja general"},
            {"id_cuenta": 12, "codigo": "1.1.02", "nombre": "Banco"},
            {"id_cuenta": 40, "codigo": "4.1.01", "nombre": "Ventas"},
        ),
    )
    account_repository.list()
    return account_repository


@pytest.fixture
def composer(transaction_repository, sample_accounts):
    """Create a composer over the loaded accounts."""
    return TransactionComposer(transaction_repository, sample_accounts)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_obj(backend, cache, session):
    """Collaborators injected into the CLI context."""
    return {"backend": backend, "cache": cache, "session": session}
