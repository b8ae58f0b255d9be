"""Shared pytest fixtures for unit and integration tests."""
import io
import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock
from uuid import UUID

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.api import deps
from app.api.errors import register_exception_handlers
from app.api.routes import tasks as tasks_router
from app.db.models import Base, TaskStatus
from app.db.repository import TaskRepository
from app.db.schemas import ImageResolution, TaskRecord
from app.services.task_service import TaskService


class InMemoryTaskStore:
    """Records every full-record write so tests can count and inspect them."""

    def __init__(self) -> None:
        self.records: dict[UUID, TaskRecord] = {}
        self.writes: list[TaskRecord] = []
        self.reads: list[UUID] = []

    async def save(self, record: TaskRecord) -> TaskRecord:
        self.writes.append(record)
        self.records[record.id] = record
        return record

    async def get_by_id(self, task_id: UUID) -> TaskRecord | None:
        self.reads.append(task_id)
        return self.records.get(task_id)


@pytest.fixture
def task_store() -> InMemoryTaskStore:
    return InMemoryTaskStore()


@pytest.fixture
def mock_resizer() -> AsyncMock:
    """Resize collaborator returning fixed bytes."""
    resizer = AsyncMock()
    resizer.resize = AsyncMock(return_value=bytes([4, 5, 6]))
    return resizer


@pytest.fixture
def mock_storage() -> AsyncMock:
    """Blob store collaborator echoing the object name into an example URL."""
    storage = AsyncMock()
    storage.store = AsyncMock(
        side_effect=lambda data, name, length: f"http://example.com/processed/{name}"
    )
    return storage


@pytest.fixture
def task_service(task_store, mock_resizer, mock_storage) -> TaskService:
    """Create TaskService instance with in-memory and mocked collaborators."""
    return TaskService(task_store, mock_resizer, mock_storage, default_extension=".tmp")


@pytest.fixture
def test_app(task_service) -> FastAPI:
    """Create FastAPI test application with the service dependency overridden."""
    app = FastAPI(title="Test Image Resize Service")
    app.dependency_overrides[deps.get_task_service] = lambda: task_service
    app.include_router(tasks_router.router, prefix="/v1")
    register_exception_handlers(app)
    return app


@pytest_asyncio.fixture
async def test_client(test_app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create test HTTP client."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture(scope="session")
def database_url():
    """PostgreSQL URL from TEST_DATABASE_URL or a testcontainers instance."""
    test_db_url = os.getenv("TEST_DATABASE_URL")
    if test_db_url:
        yield test_db_url
        return

    from testcontainers.postgres import PostgresContainer

    container = PostgresContainer("postgres:16-alpine", driver="asyncpg")
    try:
        container.start()
    except Exception as exc:  # noqa: BLE001
        pytest.skip(f"PostgreSQL container unavailable: {exc}")
    try:
        yield container.get_connection_url()
    finally:
        container.stop()


@pytest_asyncio.fixture
async def test_engine(database_url):
    """Create test database engine; one per test so it shares the test's event loop."""
    engine = create_async_engine(database_url, echo=False, poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    async_session_maker = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def task_repository(test_session) -> TaskRepository:
    """Create TaskRepository instance backed by PostgreSQL."""
    return TaskRepository(test_session)


def create_record(**kwargs) -> TaskRecord:
    """Factory function to create TaskRecord instances for tests with defaults."""
    defaults = {
        "original_fingerprint": "5289df737df57326fcdd22597afb1fac",
        "requested_resolution": ImageResolution(width=100, height=50),
        "status": TaskStatus.PENDING,
    }
    defaults.update(kwargs)
    return TaskRecord(**defaults)


def make_image(fmt: str = "PNG", size: tuple[int, int] = (40, 20), mode: str = "RGB") -> bytes:
    """Encode a solid-colour image for resize tests."""
    buffer = io.BytesIO()
    Image.new(mode, size, color="red" if mode != "L" else 128).save(buffer, format=fmt)
    return buffer.getvalue()
