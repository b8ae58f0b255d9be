"""Unit tests for TaskRecord and ImageResolution."""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from app.db.models import TaskStatus
from app.db.schemas import ImageResolution, TaskRead, TaskRecord
from tests.conftest import create_record


def test_record_initial_state():
    """Test that a new record has correct initial state."""
    before = datetime.now(timezone.utc)
    record = TaskRecord(
        original_fingerprint="abc",
        requested_resolution=ImageResolution(width=100, height=50),
    )
    after = datetime.now(timezone.utc)

    assert record.id is not None
    assert record.status == TaskStatus.PENDING
    assert record.result_location is None
    assert before <= record.created_at <= after


def test_records_get_distinct_ids():
    assert create_record().id != create_record().id


def test_record_is_immutable():
    record = create_record()
    with pytest.raises(ValidationError):
        record.status = TaskStatus.COMPLETED


def test_completed_record_requires_location():
    with pytest.raises(ValidationError, match="result_location"):
        create_record(status=TaskStatus.COMPLETED)


@pytest.mark.parametrize("status", [TaskStatus.PENDING, TaskStatus.PROCESSING, TaskStatus.FAILED])
def test_non_completed_record_rejects_location(status):
    with pytest.raises(ValidationError, match="result_location"):
        create_record(status=status, result_location="http://example.com/x.jpg")


def test_resolution_string_form():
    assert str(ImageResolution(width=100, height=50)) == "100x50"


@pytest.mark.parametrize("width,height", [(0, 50), (100, 0), (-1, 50), (100, -5)])
def test_resolution_rejects_non_positive_values(width, height):
    with pytest.raises(ValidationError):
        ImageResolution(width=width, height=height)


def test_record_row_mapping_keeps_every_field():
    record = create_record(status=TaskStatus.COMPLETED, result_location="http://cdn/x.png")
    row = record.to_row()

    assert row.id == record.id
    assert row.requested_width == 100
    assert row.requested_height == 50
    assert row.status == TaskStatus.COMPLETED
    assert TaskRecord.from_row(row) == record


def test_task_read_from_record():
    record = create_record(status=TaskStatus.FAILED)
    read = TaskRead.from_record(record)

    assert read.id == record.id
    assert read.resolution == "100x50"
    assert read.status == TaskStatus.FAILED
    assert read.result_location is None
    assert read.original_fingerprint == record.original_fingerprint
