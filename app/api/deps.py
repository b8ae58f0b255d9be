from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.clients.storage import S3BlobStore
from app.clients.storage import client as storage_client
from app.db.repository import TaskRepository
from app.db.session import get_session
from app.services.image_resizer import PillowImageResizer
from app.services.image_resizer import resizer as image_resizer
from app.services.task_service import TaskService


async def get_task_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TaskRepository:
    """Dependency to get TaskRepository instance."""
    return TaskRepository(session)


def get_image_resizer() -> PillowImageResizer:
    return image_resizer


def get_blob_store() -> S3BlobStore:
    return storage_client


async def get_task_service(
    repository: Annotated[TaskRepository, Depends(get_task_repository)],
    resizer: Annotated[PillowImageResizer, Depends(get_image_resizer)],
    storage: Annotated[S3BlobStore, Depends(get_blob_store)],
) -> TaskService:
    """Dependency to get TaskService instance."""
    return TaskService(repository, resizer, storage)
