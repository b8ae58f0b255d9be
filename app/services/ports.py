"""Contracts of the collaborators consumed by TaskService."""

from typing import Callable, Protocol
from uuid import UUID

from app.db.schemas import TaskRecord

FingerprintFunction = Callable[[bytes], str]


class ImageResizer(Protocol):
    async def resize(self, data: bytes, width: int, height: int) -> bytes:
        """Return resized image bytes or raise ResizeError."""
        ...


class BlobStore(Protocol):
    async def store(self, data: bytes, name: str, length: int) -> str:
        """Persist the bytes under ``name`` and return their URL, or raise StoreError."""
        ...


class TaskStore(Protocol):
    async def save(self, record: TaskRecord) -> TaskRecord:
        """Durably overwrite the full record keyed by id, or raise PersistenceError."""
        ...

    async def get_by_id(self, task_id: UUID) -> TaskRecord | None:
        ...
