"""
Pytest configuration and fixtures
"""
import pytest
from fastapi.testclient import TestClient

from asset_inventory.infrastructure.database.base import configure_engine, dispose_engine, get_session_factory, init_db
from asset_inventory.main import app


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def database(tmp_path):
    """Fresh SQLite database per test"""
    configure_engine(f"sqlite:///{tmp_path / 'assets.db'}")
    init_db()
    yield
    dispose_engine()


@pytest.fixture
def db_session(database):
    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(database):
    """FastAPI test client bound to the test database"""
    app.dependency_overrides.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def projector():
    return {
        "name": "Projector",
        "category": "Electronics",
        "status": "Active",
        "value": "750.5",
        "purchaseDate": "2024-01-01",
    }


def asset_json(name, asset_id=None, **overrides):
    """Wire representation of a stored asset"""
    data = {
        "id": asset_id or f"id-{name.lower()}",
        "name": name,
        "category": "Electronics",
        "status": "Active",
        "purchaseDate": "2024-01-01",
        "value": 100.0,
        "location": "Not specified",
        "assignedTo": "Unassigned",
    }
    data.update(overrides)
    return data
