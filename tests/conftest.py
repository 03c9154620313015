"""
Cupcake Store — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the whole suite.
How:   pytest auto-discovers this file; fixtures are function-scoped.

Fixture Hierarchy:
    ├── mock_repository: AsyncMock standing in for the persistence gateway
    ├── make_cupcake: builds detached Cupcake entities with sensible defaults
    ├── database: real SQLite database (aiosqlite) in tmp_path, tables created
    ├── db_session: one transactional session on `database`
    └── test_client: HTTPX AsyncClient talking to create_app(database=...)
"""

import os

# Override settings BEFORE any cupcake_store import reads them
os.environ["DB_DIALECT"] = "sqlite"
os.environ["DB_DSN"] = ":memory:"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.engine import URL

from cupcake_store.config import Settings
from cupcake_store.database import Database
from cupcake_store.models.cupcake import Cupcake
from cupcake_store.repositories.base import CupcakeRepositoryBase


@pytest.fixture
def mock_repository():
    """
    A repository double whose async methods are AsyncMocks.

    Usage:
        mock_repository.find_by_id.return_value = cupcake
        service = CupcakeService(mock_repository)
    """
    return AsyncMock(spec=CupcakeRepositoryBase)


@pytest.fixture
def make_cupcake():
    """Factory for Cupcake entities that look like they came from the store."""

    def _make(**overrides) -> Cupcake:
        now = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)
        fields = {
            "id": 1,
            "name": "Original Name",
            "flavor": "Original Flavor",
            "price_cents": 1000,
            "is_available": True,
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        return Cupcake(**fields)

    return _make


@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        db_dialect="sqlite",
        db_dsn=str(tmp_path / "cupcakes.db"),
        log_level="WARNING",
        static_dir=str(tmp_path / "web"),
    )


@pytest_asyncio.fixture
async def database(tmp_path):
    """A connected SQLite database with the cupcakes table created."""
    db = Database(URL.create("sqlite+aiosqlite", database=str(tmp_path / "test.db")))
    await db.connect()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    """A session that commits when the test body finishes."""
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(database, test_settings):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    ASGITransport does not run the lifespan, so the app receives the
    already connected `database` fixture.
    """
    from cupcake_store.main import create_app

    app = create_app(settings=test_settings, database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
