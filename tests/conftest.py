"""
Test infrastructure for the Social Media API.

Strategy
--------
- SQLite in-memory via aiosqlite replaces Postgres; StaticPool makes every
  session share the one connection that holds the in-memory database.
- The app's get_db dependency is overridden with the test session factory.
- All tables are created fresh before each test and dropped after.
- The blob store is an ``InMemoryBlobStore`` (see helpers.py) installed
  through the get_blob_store dependency, so no S3 endpoint is needed.
- ``sql_statements`` records every statement the test engine executes, so
  tests can prove that a rejected request never reached the database.
"""
from typing import Iterator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from socialmedia.database import Base, get_db
from socialmedia.main import app
from socialmedia.middleware import install_query_counter
from socialmedia.storage import get_blob_store

from helpers import InMemoryBlobStore

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)

blob_store = InMemoryBlobStore()


# ---------------------------------------------------------------------------
# Dependency overrides
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_blob_store] = lambda: blob_store


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def blobs() -> Iterator[InMemoryBlobStore]:
    """The blob store the app uses, emptied and healthy at the start of a test."""
    blob_store.reset()
    yield blob_store
    blob_store.reset()


@pytest.fixture
def sql_statements() -> Iterator[list[str]]:
    statements: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine_test.sync_engine, "before_cursor_execute", _record)
    yield statements
    event.remove(engine_test.sync_engine, "before_cursor_execute", _record)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """
    Yield a live AsyncSession for tests that call services directly or
    seed rows before exercising the API.
    """
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(blobs) -> AsyncClient:
    """Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
