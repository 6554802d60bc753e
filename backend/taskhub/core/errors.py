"""Error taxonomy and the handlers that turn it into JSON responses."""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class TaskhubError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(TaskhubError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class InvalidId(TaskhubError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid task ID"


class NotFound(TaskhubError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Task not found"


class InvalidStatus(TaskhubError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid status"


class Conflict(TaskhubError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Email already registered"


class Unauthorized(TaskhubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class Internal(TaskhubError):
    pass


class ConfigurationError(Exception):
    """Settings are unusable; raised during startup only."""


def build_error_payload(message: str) -> dict:
    return {"error": message}


async def taskhub_error_handler(_: Request, exc: TaskhubError) -> JSONResponse:
    headers = None
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_payload(exc.message),
        headers=headers,
    )


async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=build_error_payload(InvalidInput.default_message),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=build_error_payload(Internal.default_message),
    )
