"""
API error types and handlers.

Every error leaves the API as ``{"error": str, "details"?: str}``.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class APIException(HTTPException):
    """Base API exception with an optional debugging detail."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        details: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.details = details


class ValidationError(APIException):
    """Missing or out-of-range input."""

    def __init__(self, detail: str, details: Optional[str] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, details)


class NotFoundError(APIException):
    """Resource not found."""

    def __init__(self, detail: str):
        super().__init__(status.HTTP_404_NOT_FOUND, detail)


class DatabaseError(APIException):
    """A write failed and was rolled back."""

    def __init__(self, detail: str, details: Optional[str] = None):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail, details)


def _error_body(error: str, details: Optional[str] = None) -> Dict[str, str]:
    body = {"error": error}
    if details:
        body["details"] = details
    return body


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail), getattr(exc, "details", None)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Validation failed", "; ".join(problems)),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception: %s",
        exc,
        exc_info=True,
        extra={"extra_fields": {"method": request.method, "path": request.url.path}},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error", str(exc)),
    )


def register_exception_handlers(application: FastAPI) -> None:
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(Exception, unhandled_exception_handler)
