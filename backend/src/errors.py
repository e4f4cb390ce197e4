"""API error taxonomy and the handlers that render the error envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.models.schemas import ErrorResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base for errors that map onto an HTTP error response."""

    status_code: int = 500

    def __init__(
        self,
        code: str,
        message: str,
        details: list[str] | None = None,
        status_code: int | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class AuthError(ApiError):
    """Missing or invalid credentials or session token."""

    status_code = 401


class PatientValidationError(ApiError):
    """A patient field failed validation, or the store rejected the record."""

    status_code = 400


class StoreError(ApiError):
    """The record store is unreachable or refused the operation."""

    status_code = 500

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(code="StoreError", message=message)


def _error_response(
    status_code: int, code: str, message: str, details: list[str] | None = None
) -> JSONResponse:
    body = ErrorResponse(error=message, code=code, details=details)
    return JSONResponse(
        status_code=status_code, content=body.model_dump(exclude_none=True)
    )


async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    logger.info(
        "%s %s failed: %s (%s)", request.method, request.url.path, exc.code, exc.status_code
    )
    return _error_response(exc.status_code, exc.code, exc.message, exc.details)


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = [
        f"{'.'.join(str(part) for part in err['loc'][1:]) or 'body'}: {err['msg']}"
        for err in exc.errors()
    ]
    return _error_response(400, "ValidationError", "Validation Error", details)


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    # Unknown paths and unsupported methods are both reported as missing routes.
    if exc.status_code in (404, 405):
        return _error_response(
            404, "NotFound", f"Route {request.method} {request.url.path} not found"
        )
    return _error_response(exc.status_code, "HTTPError", str(exc.detail))


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(500, "InternalError", "Internal Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)
