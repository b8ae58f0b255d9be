from datetime import datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, model_validator

from app.db.models import Task, TaskStatus


class ImageResolution(BaseModel):
    width: PositiveInt
    height: PositiveInt

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


class TaskRecord(BaseModel):
    """Immutable snapshot of a task. State changes go through ``apply_event``."""

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    original_fingerprint: str
    requested_resolution: ImageResolution
    status: TaskStatus = TaskStatus.PENDING
    result_location: str | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_location_matches_status(self) -> "TaskRecord":
        if (self.result_location is not None) != (self.status == TaskStatus.COMPLETED):
            raise ValueError("result_location must be set if and only if status is COMPLETED")
        return self

    @classmethod
    def from_row(cls, row: Task) -> "TaskRecord":
        return cls(
            id=row.id,
            created_at=row.created_at,
            original_fingerprint=row.original_fingerprint,
            requested_resolution=ImageResolution(
                width=row.requested_width, height=row.requested_height
            ),
            status=row.status,
            result_location=row.result_location,
        )

    def to_row(self) -> Task:
        return Task(
            id=self.id,
            created_at=self.created_at,
            original_fingerprint=self.original_fingerprint,
            requested_width=self.requested_resolution.width,
            requested_height=self.requested_resolution.height,
            status=self.status,
            result_location=self.result_location,
        )


class TaskCreate(BaseModel):
    """Raw task request. Field values are validated by TaskService, not here."""

    image_bytes: bytes
    original_filename: str | None = None
    target_width: int
    target_height: int


class TaskRead(BaseModel):
    id: UUID
    created_at: datetime
    original_fingerprint: str
    resolution: str
    status: TaskStatus
    result_location: str | None = None

    @classmethod
    def from_record(cls, record: TaskRecord) -> "TaskRead":
        return cls(
            id=record.id,
            created_at=record.created_at,
            original_fingerprint=record.original_fingerprint,
            resolution=str(record.requested_resolution),
            status=record.status,
            result_location=record.result_location,
        )
