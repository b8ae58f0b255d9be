"""Translate pipeline errors into HTTP responses."""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.models import ErrorResponse
from app.errors import (
    ImageTaskError,
    InvalidInputError,
    PersistenceError,
    ResizeError,
    StoreError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[ImageTaskError], HTTPStatus] = {
    InvalidInputError: HTTPStatus.BAD_REQUEST,
    ResizeError: HTTPStatus.UNPROCESSABLE_ENTITY,
    StoreError: HTTPStatus.BAD_GATEWAY,
    PersistenceError: HTTPStatus.SERVICE_UNAVAILABLE,
}


def status_for(exc: ImageTaskError) -> HTTPStatus:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return HTTPStatus.INTERNAL_SERVER_ERROR


async def image_task_error_handler(request: Request, exc: ImageTaskError) -> JSONResponse:
    status = status_for(exc)
    if status == HTTPStatus.BAD_REQUEST:
        logger.warning(f"Rejected request to {request.url.path}: {exc}")
    else:
        logger.error(f"Request to {request.url.path} failed: {exc!r}")
    body = ErrorResponse(
        status=status.value,
        error=status.phrase,
        message=str(exc),
        path=request.url.path,
    )
    return JSONResponse(status_code=status.value, content=body.model_dump(mode="json"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ImageTaskError, image_task_error_handler)
