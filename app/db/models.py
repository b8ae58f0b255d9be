import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class TaskStatus(str, enum.Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class Task(Base):
    """Row for one resize request. Always written as a whole from a TaskRecord."""

    __tablename__ = "image_tasks"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    original_fingerprint = Column(String(64), nullable=False)
    requested_width = Column(Integer, nullable=False)
    requested_height = Column(Integer, nullable=False)
    status = Column(
        Enum(TaskStatus, name="image_task_status"),
        nullable=False,
        default=TaskStatus.PENDING,
    )
    result_location = Column(Text, nullable=True)
