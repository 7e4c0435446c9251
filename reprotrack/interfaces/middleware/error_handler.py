from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from reprotrack.application.errors import AppError, InfrastructureError, ValidationError

logger = logging.getLogger(__name__)


def error_payload(exc: AppError) -> dict[str, Any]:
    """Render an application error as the API error body.

    The offending field, when the error names one, is repeated at the top
    level so clients can highlight it without digging into ``details``.
    """
    payload: dict[str, Any] = {"code": exc.code, "message": exc.message}
    if exc.details is not None:
        field = exc.details.get("field")
        if field:
            payload["field"] = field
        payload["details"] = dict(exc.details)
    return payload


def _request_error(exc: RequestValidationError) -> ValidationError:
    errors = [
        {
            "loc": [part for part in error.get("loc", ()) if part != "body"],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    first = errors[0] if errors else {"loc": [], "msg": "Invalid request"}
    names = [part for part in first["loc"] if isinstance(part, str)]
    details: dict[str, Any] = {"errors": errors}
    if names:
        details["field"] = names[-1]
    return ValidationError(first["msg"] or "Invalid request", details=details)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:  # noqa: WPS430
        logger.info(
            "Application error handled: %s - %s (status: %d)",
            exc.code,
            exc.message,
            exc.status_code,
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(status_code=exc.status_code, content=error_payload(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: WPS430
        error = _request_error(exc)
        logger.info(
            "Request rejected on %s %s: %s",
            request.method,
            request.url.path,
            error.message,
        )
        return JSONResponse(status_code=error.status_code, content=error_payload(error))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # noqa: WPS430
        payload = {"code": "http_error", "message": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=payload)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:  # noqa: WPS430
        logger.exception(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        error = InfrastructureError("Unexpected server error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_payload(error)
        )
