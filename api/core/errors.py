"""
Error responses shared by all routers.

- request validation failures -> 400 with per-field messages
- anything unhandled -> 500 with a generic message (details only in logs)
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = logging.getLogger(__name__)

VALIDATION_FAILED = "Validation failed."


def field_errors(errors: Iterable[dict[str, Any]]) -> dict[str, list[str]]:
    """
    Group pydantic error entries by field name.

    Location prefixes added by FastAPI ("body", "query", ...) are dropped.
    """
    grouped: dict[str, list[str]] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = loc[0] if loc else "_"
        grouped.setdefault(field, []).append(str(err.get("msg") or "Invalid value."))
    return grouped


def validation_exception(exc: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"message": VALIDATION_FAILED, "errors": field_errors(exc.errors())},
    )


async def _request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": VALIDATION_FAILED, "errors": field_errors(exc.errors())},
    )


async def _http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    # Structured details (validation) are flattened into the top-level body.
    if isinstance(exc.detail, dict) and "message" in exc.detail:
        content = {"detail": exc.detail["message"], **{k: v for k, v in exc.detail.items() if k != "message"}}
    else:
        content = {"detail": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def install(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
