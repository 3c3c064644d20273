"""Rendering of service failures into HTTP error responses."""

import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from loguru import logger
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse

from src.user_manager.core.exceptions import (
    CLIENT_ERROR_KINDS,
    ErrorKind,
    UserManagerError,
)
from src.user_manager.core.services.user.validation import field_label, required_message


def _now_millis() -> int:
    return int(time.time() * 1000)


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    message: str = Field(description="User-facing description of the failure")
    timestamp: int = Field(
        default_factory=_now_millis, description="Epoch milliseconds of the failure"
    )


def status_for(kind: ErrorKind) -> int:
    if kind in CLIENT_ERROR_KINDS:
        return 400
    if kind == ErrorKind.NOT_FOUND:
        return 404
    return 500


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


def validation_error_message(exc: RequestValidationError) -> str:
    """Join every request validation problem into one comma separated message."""
    messages = []
    for error in exc.errors():
        loc = error.get("loc") or ("request",)
        field_name = str(loc[-1])
        # An explicit null on a required field counts as missing
        if error.get("type") == "missing" or (
            "input" in error and error["input"] is None
        ):
            messages.append(required_message(field_name))
        else:
            messages.append(f"{field_label(field_name)}: {error.get('msg')}")
    return ", ".join(messages)


async def handle_user_manager_error(request: Request, exc: UserManagerError) -> JSONResponse:
    status_code = status_for(exc.kind)
    log = logger.bind(
        error_kind=exc.kind.value,
        origin=exc.origin,
        status_code=status_code,
    )
    if status_code >= 500:
        log.opt(exception=exc).error("{}: {}", type(exc).__name__, exc.message)
    else:
        log.warning("{}: {}", type(exc).__name__, exc.message)
    return error_response(exc.message, status_code)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = validation_error_message(exc)
    logger.bind(status_code=400).warning("RequestValidationError: {}", message)
    return error_response(message, 400)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(UserManagerError, handle_user_manager_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)  # type: ignore[arg-type]
