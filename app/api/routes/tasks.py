from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from app.api.deps import get_task_service
from app.db.schemas import TaskCreate, TaskRead
from app.services.task_service import TaskService

router = APIRouter(prefix="/task", tags=["tasks"])


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    svc: Annotated[TaskService, Depends(get_task_service)],
    file: Annotated[UploadFile, File()],
    width: Annotated[int, Form()],
    height: Annotated[int, Form()],
) -> TaskRead:
    """Resize the uploaded image, store it and return the finished task."""
    payload = TaskCreate(
        image_bytes=await file.read(),
        original_filename=file.filename,
        target_width=width,
        target_height=height,
    )
    record = await svc.create(payload)
    return TaskRead.from_record(record)


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: UUID, svc: Annotated[TaskService, Depends(get_task_service)]
) -> TaskRead:
    record = await svc.get(task_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return TaskRead.from_record(record)
