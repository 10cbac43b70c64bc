from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.application.errors import AppError, InfrastructureError, PartialBatchFailure

logger = logging.getLogger(__name__)


def _error_body(exc: AppError) -> dict:
    body = {"code": exc.code, "message": exc.message}
    if exc.details is not None:
        body["details"] = exc.details
    return body


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(PartialBatchFailure)
    async def handle_partial_batch(request: Request, exc: PartialBatchFailure) -> JSONResponse:
        # Created ids stay in the store until the client retracts them
        logger.warning(
            "Partial batch on %s %s: %s (created: %s)",
            request.method,
            request.url.path,
            exc.message,
            ", ".join(str(i) for i in exc.created_ids) or "none",
        )
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc))

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            "%s %s -> %s: %s",
            request.method,
            request.url.path,
            exc.code,
            exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"code": "http_error", "message": exc.detail},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        error = InfrastructureError("Unexpected server error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"code": error.code, "message": error.message},
        )
