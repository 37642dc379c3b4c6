"""
Typed HTTP exceptions and the handlers that turn them into JSON responses.

Every error leaves the API as::

    {"message": "...", "errorCode": "2001", "errors": null}
"""
import enum
import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ErrorCode(str, enum.Enum):
    # User errors
    USER_NOT_FOUND = "1001"
    USER_ALREADY_EXISTS = "1002"
    INVALID_CREDENTIALS = "1003"

    # General errors
    UNPROCESSABLE_ENTITY = "201"
    INTERNAL_EXCEPTION = "301"
    RESOURCE_NOT_FOUND = "404"
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "401"
    FORBIDDEN = "FORBIDDEN"

    # Reservation errors
    RESERVATION_CONFLICT = "2001"
    ALREADY_CANCELED = "2002"
    INVALID_STATUS_FOR_ACTION = "2003"
    CANCELLATION_PERIOD_EXPIRED = "2004"
    PAYMENT_NOT_ELIGIBLE = "2005"


class AppException(HTTPException):
    """Base class for errors raised by route handlers."""

    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: ErrorCode,
        errors: Optional[Any] = None,
        headers: Optional[dict] = None,
    ):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.message = message
        self.error_code = error_code
        self.errors = errors


class BadRequestException(AppException):
    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.BAD_REQUEST, errors: Optional[Any] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, error_code, errors)


class NotFoundException(AppException):
    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.RESOURCE_NOT_FOUND, errors: Optional[Any] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, error_code, errors)


class UnauthorizedException(AppException):
    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.UNAUTHORIZED, errors: Optional[Any] = None):
        super().__init__(
            message,
            status.HTTP_401_UNAUTHORIZED,
            error_code,
            errors,
            headers={"WWW-Authenticate": "Bearer"},
        )


def error_body(message: str, error_code: ErrorCode, errors: Optional[Any] = None) -> dict:
    return {
        "message": message,
        "errorCode": error_code.value,
        "errors": jsonable_encoder(errors),
    }


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.error_code, exc.errors),
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Plain HTTPExceptions raised by FastAPI itself (404 route, 405 method...)
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        code = ErrorCode.RESOURCE_NOT_FOUND
    elif exc.status_code == status.HTTP_401_UNAUTHORIZED:
        code = ErrorCode.UNAUTHORIZED
    else:
        code = ErrorCode.BAD_REQUEST
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), code),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=error_body("Validation failed", ErrorCode.UNPROCESSABLE_ENTITY, exc.errors()),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Something went wrong", ErrorCode.INTERNAL_EXCEPTION),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
