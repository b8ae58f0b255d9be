"""Service layer for the image task lifecycle."""

import logging
import posixpath
from dataclasses import dataclass
from uuid import UUID

from app.config import settings
from app.db.schemas import ImageResolution, TaskCreate, TaskRecord
from app.errors import InvalidInputError, PersistenceError, StoreError
from app.services.fingerprint import compute_fingerprint
from app.services.ports import BlobStore, FingerprintFunction, ImageResizer, TaskStore
from app.services.state_machine import TaskEvent, apply_event

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stored:
    location: str


@dataclass(frozen=True)
class Failed:
    error: Exception


ProcessingOutcome = Stored | Failed


def output_name(task_id: UUID, original_filename: str | None, default_extension: str) -> str:
    """Name of the stored artifact: the task id plus the original file's extension."""
    basename = posixpath.basename((original_filename or "").replace("\\", "/"))
    _, dot, suffix = basename.rpartition(".")
    if dot and suffix:
        return f"{task_id}.{suffix}"
    return f"{task_id}{default_extension}"


class TaskService:
    """
    Runs one resize task end to end: PENDING -> PROCESSING -> COMPLETED | FAILED.
    Every task gets exactly two writes: the PROCESSING record before any
    collaborator is called, then one terminal record.
    """

    def __init__(
        self,
        repository: TaskStore,
        resizer: ImageResizer,
        storage: BlobStore,
        fingerprint: FingerprintFunction = compute_fingerprint,
        default_extension: str | None = None,
    ) -> None:
        self.repository = repository
        self.resizer = resizer
        self.storage = storage
        self.fingerprint = fingerprint
        self.default_extension = default_extension or settings.default_extension

    async def create(self, payload: TaskCreate) -> TaskRecord:
        """Resize, store and record a task. Collaborator errors are re-raised after the FAILED write."""
        self._validate(payload)

        record = TaskRecord(
            original_fingerprint=self.fingerprint(payload.image_bytes),
            requested_resolution=ImageResolution(
                width=payload.target_width, height=payload.target_height
            ),
        )
        logger.info(
            f"Created task {record.id} for {record.requested_resolution} "
            f"(fingerprint {record.original_fingerprint})"
        )

        record = apply_event(record, TaskEvent.BEGIN_PROCESSING)
        await self.repository.save(record)
        logger.info(f"Task {record.id} marked as PROCESSING")

        outcome = await self._resize_and_store(record, payload)

        if isinstance(outcome, Failed):
            record = apply_event(record, TaskEvent.FAIL)
            await self._save_terminal(record)
            logger.info(f"Task {record.id} marked as FAILED: {outcome.error!r}")
            raise outcome.error

        record = apply_event(record, TaskEvent.COMPLETE, outcome.location)
        await self._save_terminal(record)
        logger.info(f"Task {record.id} completed: {record.result_location}")
        return record

    async def get(self, task_id: UUID) -> TaskRecord | None:
        """Get a task by ID."""
        return await self.repository.get_by_id(task_id)

    @staticmethod
    def _validate(payload: TaskCreate) -> None:
        if not payload.image_bytes:
            raise InvalidInputError("Image bytes must not be empty.")
        if payload.target_width <= 0 or payload.target_height <= 0:
            raise InvalidInputError(
                f"Width and height must be positive, got "
                f"{payload.target_width}x{payload.target_height}."
            )

    async def _resize_and_store(self, record: TaskRecord, payload: TaskCreate) -> ProcessingOutcome:
        resolution = record.requested_resolution
        try:
            resized = await self.resizer.resize(
                payload.image_bytes, resolution.width, resolution.height
            )
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Task {record.id} resize failed: {exc}", exc_info=True)
            return Failed(exc)

        name = output_name(record.id, payload.original_filename, self.default_extension)
        try:
            location = await self.storage.store(resized, name, len(resized))
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Task {record.id} storage of {name} failed: {exc}", exc_info=True)
            return Failed(exc)

        if not location:
            return Failed(StoreError(f"Blob store returned no location for {name}"))
        return Stored(location)

    async def _save_terminal(self, record: TaskRecord) -> None:
        # The caller still gets the in-memory outcome; the stored row stays
        # PROCESSING and needs external reconciliation.
        try:
            await self.repository.save(record)
        except PersistenceError as exc:
            logger.error(
                f"Terminal write for task {record.id} ({record.status.value}) failed: {exc}",
                exc_info=True,
            )
