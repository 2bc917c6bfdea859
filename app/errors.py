"""Error handling and response models."""
from typing import Any, Optional

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from domain.errors import (
    ConflictError,
    DomainError,
    InvalidOrderItemsError,
    InvalidStateError,
    NotFoundError,
    NotProvidedError,
    UnexpectedError,
    ValidationError,
)
from infrastructure.logging import get_logger


logger = get_logger()

STATUS_CODES = {
    NotProvidedError: status.HTTP_400_BAD_REQUEST,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidOrderItemsError: status.HTTP_400_BAD_REQUEST,
    InvalidStateError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    UnexpectedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ErrorResponse(BaseModel):
    """Standard error response body."""
    message: str
    detail: Optional[Any] = None
    error_type: str


def status_code_for(exc: DomainError) -> int:
    for error_type, code in STATUS_CODES.items():
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map domain errors to their status code; unexpected ones hide their cause."""
    code = status_code_for(exc)

    if code >= 500:
        cause = getattr(exc, "cause", None)
        logger.error(
            exc.message,
            exc_info=cause if isinstance(cause, BaseException) else exc,
            path=request.url.path,
            error_type=exc.kind,
        )
        detail = "Internal server error"
    else:
        logger.warning(
            f"{exc.kind}: {exc.message}",
            path=request.url.path,
            detail=exc.detail,
        )
        detail = exc.detail

    return JSONResponse(
        status_code=code,
        content=ErrorResponse(message=exc.message, detail=detail, error_type=exc.kind).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle generic exceptions with 500 status without exposing internals."""
    logger.error(
        f"Internal server error: {type(exc).__name__}",
        exc_info=exc,
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            message="Unexpected error",
            detail="Internal server error",
            error_type="InternalServerError",
        ).model_dump(),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle FastAPI request validation errors with detailed messages."""
    errors = jsonable_encoder(exc.errors())
    logger.warning(
        "Request validation failed",
        path=request.url.path,
        errors=errors,
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            message="Invalid request",
            detail=errors,
            error_type="RequestValidationError",
        ).model_dump(),
    )
