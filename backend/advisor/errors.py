"""API error taxonomy and the FastAPI handlers that render it."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, code: Optional[str] = None) -> None:
        self.message = message or self.default_message
        self.code = code
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.code:
            payload["code"] = self.code
        return payload


class AuthenticationRequired(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class ValidationFailed(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message, code=code)


class NotFoundOrNotOwned(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class UnexpectedFailure(ApiError):
    pass


def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_payload(), status_code=exc.status_code)


def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"Invalid request parameter {location}: {first.get('msg', 'invalid value')}"
    return JSONResponse(
        {"error": message, "code": "INVALID_REQUEST"},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


def _storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Storage failure during %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(UnexpectedFailure().to_payload(), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error during %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(UnexpectedFailure().to_payload(), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, _storage_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


__all__ = [
    "ApiError",
    "AuthenticationRequired",
    "NotFoundOrNotOwned",
    "UnexpectedFailure",
    "ValidationFailed",
    "install_error_handlers",
]
