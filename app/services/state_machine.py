"""Task status transitions.

``apply_event`` is the only way a TaskRecord changes status. It never mutates
its input: legal transitions return a new record, illegal ones return the
input unchanged and log a warning, since they point at a caller bug rather
than bad task data.

    PENDING    --BEGIN_PROCESSING--> PROCESSING
    PROCESSING --COMPLETE----------> COMPLETED
    PROCESSING --FAIL--------------> FAILED
    PENDING    --FAIL--------------> FAILED
"""

import enum
import logging

from app.db.models import TaskStatus
from app.db.schemas import TaskRecord

logger = logging.getLogger(__name__)


class TaskEvent(str, enum.Enum):
    BEGIN_PROCESSING = "BEGIN_PROCESSING"
    COMPLETE = "COMPLETE"
    FAIL = "FAIL"


TRANSITIONS: dict[tuple[TaskStatus, TaskEvent], TaskStatus] = {
    (TaskStatus.PENDING, TaskEvent.BEGIN_PROCESSING): TaskStatus.PROCESSING,
    (TaskStatus.PROCESSING, TaskEvent.COMPLETE): TaskStatus.COMPLETED,
    (TaskStatus.PROCESSING, TaskEvent.FAIL): TaskStatus.FAILED,
    (TaskStatus.PENDING, TaskEvent.FAIL): TaskStatus.FAILED,
}


def apply_event(
    record: TaskRecord, event: TaskEvent, result_location: str | None = None
) -> TaskRecord:
    """Return the record after ``event``, or the same record if the transition is illegal."""
    target = TRANSITIONS.get((record.status, event))
    if target is None:
        logger.warning(
            f"Ignoring illegal transition {event.value} for task {record.id} "
            f"in status {record.status.value}"
        )
        return record

    if target == TaskStatus.COMPLETED:
        if not result_location:
            logger.warning(f"Ignoring {event.value} for task {record.id}: no result location")
            return record
        return record.model_copy(update={"status": target, "result_location": result_location})

    return record.model_copy(update={"status": target, "result_location": None})
