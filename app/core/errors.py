# app/core/errors.py
import logging
from http import HTTPStatus

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas.common import ErrorResponse
from app.storage.base import ConflictError

logger = logging.getLogger(__name__)


class FieldValidationError(HTTPException):
    """400 raised by the API layer for a body field that fails a cross-record check."""

    def __init__(self, field: str, message: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
        self.field = field


def _error_body(status_code: int, detail, field=None) -> dict:
    return ErrorResponse(
        error=HTTPStatus(status_code).phrase,
        detail=str(detail),
        field=field,
    ).model_dump(exclude_none=True)


def _field_from_error(error: dict) -> str:
    # ("body", "taskIds", 0) -> "taskIds.0"; ("path", "task_id") -> "taskId"
    loc = error.get("loc") or ("body",)
    if error.get("type") == "json_invalid":
        # loc holds the decode position, not a field
        return "body"
    source, parts = loc[0], [str(p) for p in loc[1:]]
    if not parts:
        return str(source)
    if source in ("path", "query") and "_" in parts[0]:
        parts[0] = to_camel(parts[0])
    return ".".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.status_code, exc.detail, getattr(exc, "field", None)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {"loc": ("body",), "msg": "Invalid request"}
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(400, first["msg"], _field_from_error(first)),
        )

    @app.exception_handler(ConflictError)
    async def conflict_exception_handler(request: Request, exc: ConflictError):
        logger.info("Write conflict on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=_error_body(409, exc),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(500, "An unexpected error occurred"),
        )
