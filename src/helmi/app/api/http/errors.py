"""Mapping of release errors to broker HTTP responses.

- ChartNotSpecified, malformed requests -> 400
- InstanceConflict -> 409
- InstanceNotFound -> 410 (routes that need 404 translate it themselves)
- ExternalToolFailure and any other release error -> 500
"""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from helmi.app.api.http.schemas.broker import ErrorResponse
from helmi.app.core.release import (
    ChartNotSpecified,
    InstanceConflict,
    InstanceNotFound,
    ReleaseError,
)

INVALID_REQUEST = "Invalid Request"


def empty_response(status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={})


def error_response(
    status_code: int, description: str | None = None, error: str | None = None
) -> JSONResponse:
    body = ErrorResponse(error=error, description=description)
    return JSONResponse(
        status_code=status_code, content=body.model_dump(exclude_none=True)
    )


async def release_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if isinstance(exc, ChartNotSpecified):
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc))
    if isinstance(exc, InstanceConflict):
        return empty_response(status.HTTP_409_CONFLICT)
    if isinstance(exc, InstanceNotFound):
        return empty_response(status.HTTP_410_GONE)

    logger.bind(component="http").error(
        f"{request.method} {request.url.path} failed: {exc}"
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, INVALID_REQUEST)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReleaseError, release_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
