"""Shared fixtures and environment setup for configuration storage tests."""

import os

# Set environment variables BEFORE any package imports
os.environ.setdefault("PMA_DATABASE_URL", "sqlite://")
os.environ.setdefault("PMA_CONTROL_DATABASE_URL", "sqlite://")
os.environ.setdefault("PMA_PMADB", "phpmyadmin")
os.environ.setdefault("PMA_LOG_LEVEL", "WARNING")
os.environ.setdefault("PMA_API_KEY", "test-key")

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.pool import StaticPool

from config_storage.auth import verify_api_key
from config_storage.config import DEFAULT_TABLE_NAMES
from config_storage.db.models import build_config_storage_metadata
from config_storage.dbi import DatabaseInterface
from config_storage.relation_parameters import FEATURE_SLOTS, RelationParameters

PMADB = "phpmyadmin"


def _probe_params(db=PMADB, **names):
    """Probe-shaped dict with every table present and every work flag set."""
    params = {"user": "root", "db": db}
    params.update(DEFAULT_TABLE_NAMES)
    params["bookmark"] = DEFAULT_TABLE_NAMES["bookmarktable"]
    for _, work_flag, _ in FEATURE_SLOTS.values():
        params[work_flag] = True
    params.update(names)
    return params


@pytest.fixture
def storage_settings() -> dict:
    """Storage settings with the default table names."""
    settings = {"pmadb": PMADB}
    settings.update(DEFAULT_TABLE_NAMES)
    return settings


@pytest.fixture
def all_features() -> RelationParameters:
    """Registry with every feature present."""
    return RelationParameters.from_dict(_probe_params())


@pytest.fixture
def make_parameters():
    """Factory building a registry with only the given feature slots present."""
    def _make(*slots: str, db=PMADB) -> RelationParameters:
        full = RelationParameters.from_dict(_probe_params(db=db))
        kept = {slot: getattr(full, slot) for slot in slots}
        return RelationParameters(user=full.user, db=db, **kept)
    return _make


@pytest.fixture
def mock_dbi():
    """DatabaseInterface mock recording control-user statements."""
    dbi = MagicMock(spec=DatabaseInterface)
    dbi.query_as_control_user.return_value = 0
    dbi.query.return_value = 0
    dbi.backquote.side_effect = lambda name: "`" + name.replace("`", "``") + "`"
    return dbi


@pytest.fixture
def mock_relation(all_features):
    """Relation mock returning the fully featured registry."""
    relation = MagicMock()
    relation.get_relation_parameters.return_value = all_features
    return relation


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite engine with the storage database and a 'shop' database attached."""
    engine = create_engine("sqlite://", poolclass=StaticPool)

    @event.listens_for(engine, "connect")
    def _attach(dbapi_connection, connection_record):
        dbapi_connection.execute(f"ATTACH DATABASE ':memory:' AS {PMADB}")
        dbapi_connection.execute("ATTACH DATABASE ':memory:' AS shop")

    yield engine
    engine.dispose()


@pytest.fixture
def sqlite_dbi(sqlite_engine) -> DatabaseInterface:
    """DatabaseInterface using the SQLite engine for both connections."""
    return DatabaseInterface(sqlite_engine, sqlite_engine)


@pytest.fixture
def storage_tables(sqlite_engine, storage_settings):
    """Create every configuration storage table and return the table objects."""
    metadata = build_config_storage_metadata(PMADB, storage_settings)
    metadata.create_all(sqlite_engine)
    return {table.name: table for table in metadata.tables.values()}


@pytest.fixture
def mock_operations():
    """DatabaseOperations mock."""
    return MagicMock()


@pytest.fixture
def client(mock_operations, mock_relation):
    """TestClient with auth overridden and service components mocked."""
    import config_storage.main as main_module
    from contextlib import asynccontextmanager

    # Replace lifespan to avoid real engine probing
    @asynccontextmanager
    async def _test_lifespan(app):
        yield

    async def _auth_override():
        return {"authenticated": True}

    original_lifespan = main_module.app.router.lifespan_context
    main_module.app.router.lifespan_context = _test_lifespan
    main_module.operations = mock_operations
    main_module.relation = mock_relation
    main_module.app.dependency_overrides[verify_api_key] = _auth_override

    with TestClient(main_module.app) as tc:
        yield tc

    main_module.app.dependency_overrides.clear()
    main_module.operations = None
    main_module.relation = None
    main_module.app.router.lifespan_context = original_lifespan
