# This file defines consistent API error payloads and exception handlers.
# It exists so every endpoint returns the same `{ok: false, message}` shape plus a request trace field.
# The handlers translate fleet operation, validation, HTTP, and unexpected failures into safe client messages.

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from squid_manager.squids.errors import SquidOperationError


class APIError(Exception):
    """Error type with structured API details."""

    def __init__(self, *, status_code: int, message: str, data: Any | None = None) -> None:
        self.status_code = status_code
        self.message = message
        self.data = data
        super().__init__(message)


def _request_id(request: Request) -> str:
    return str(getattr(request.state, "request_id", "unknown"))


def error_body(*, request: Request, message: str, data: Any | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"ok": False, "message": message, "request_id": _request_id(request)}
    if data is not None:
        body["data"] = data
    return body


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(request=request, message=exc.message, data=exc.data),
        )

    @app.exception_handler(SquidOperationError)
    async def squid_operation_error_handler(request: Request, exc: SquidOperationError) -> JSONResponse:
        return JSONResponse(status_code=500, content=error_body(request=request, message=exc.message))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=error_body(request=request, message="Invalid request parameters.", data=exc.errors()),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(request=request, message=str(exc.detail)),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, _: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content=error_body(request=request, message="The server encountered an unexpected error."),
        )
