"""Repository for image task records."""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Task
from app.db.schemas import TaskRecord
from app.errors import PersistenceError

logger = logging.getLogger(__name__)


class TaskRepository:

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, record: TaskRecord) -> TaskRecord:
        """
        Write the full record keyed by id and commit.
        Each call is one durable write; a PROCESSING save must be visible before
        the slow collaborator calls start.
        """
        try:
            await self.session.merge(record.to_row())
            await self.session.commit()
        except SQLAlchemyError as exc:
            logger.error(f"Failed to save task {record.id}: {exc}")
            await self.session.rollback()
            raise PersistenceError(f"Failed to save task {record.id}") from exc
        return record

    async def get_by_id(self, task_id: UUID) -> TaskRecord | None:
        """Get task by ID, or None if it does not exist."""
        try:
            row = await self.session.get(Task, task_id, populate_existing=True)
        except SQLAlchemyError as exc:
            logger.error(f"Failed to load task {task_id}: {exc}")
            raise PersistenceError(f"Failed to load task {task_id}") from exc
        if row is None:
            return None
        return TaskRecord.from_row(row)
