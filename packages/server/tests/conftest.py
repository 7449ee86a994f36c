"""
Shared fixtures for server tests.

Tests run against an in-memory SQLite database (aiosqlite + StaticPool) so
that every session in a test sees the same data. Concurrency tests use a
file-backed database instead, so each session gets its own connection.
"""

import os

os.environ.setdefault("NESTED_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("NESTED_LOG_FORMAT", "text")

import uuid  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.pool import NullPool, StaticPool  # noqa: E402

from app.core.database import (  # noqa: E402
    build_engine,
    build_session_factory,
    get_session,
    init_db,
    session_scope,
)
from app.main import app  # noqa: E402
from app.services.resources import create_resource  # noqa: E402
from nested_shared.schemas.common import ResourceType  # noqa: E402
from nested_shared.schemas.resources import ResourceCreate  # noqa: E402


@pytest.fixture
async def engine():
    eng = build_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
async def file_session_factory(tmp_path):
    """Sessions on separate connections to one file-backed database."""
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'nested.db'}", poolclass=NullPool)
    await init_db(eng)
    yield build_session_factory(eng)
    await eng.dispose()


@pytest.fixture
async def client(session_factory):
    async def _get_session():
        async with session_scope(session_factory) as s:
            yield s

    app.dependency_overrides[get_session] = _get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def owner_id():
    return uuid.uuid4()


@pytest.fixture
def make_resource(session, owner_id):
    """Factory: register a resource owned by ``owner_id``."""

    async def _make(
        type: ResourceType = ResourceType.PROJECT,
        capacity: int = 0,
        title: str = "Study Buddy App",
        owner: uuid.UUID | None = None,
    ):
        return await create_resource(
            ResourceCreate(type=type, title=title, capacity=capacity),
            owner or owner_id,
            session,
        )

    return _make


@pytest.fixture
def bearer():
    """Simple Bearer UUID auth (dev tokens)."""

    def _headers(user_id: uuid.UUID) -> dict:
        return {"Authorization": f"Bearer {user_id}"}

    return _headers
