"""Error Handlers — map every failure to the same JSON error envelope.

Invariants:
    - CubeTimerError → its own http_status and to_response() body
    - RequestValidationError → 400 VALIDATION_ERROR with per-field details
    - Anything else → 500 INTERNAL_ERROR, internal details only in the log
    - 4xx are logged at WARNING, 5xx at ERROR

Design Decisions:
    - Plain module-level handlers registered with add_exception_handler:
      each is importable and testable on its own
    - Extracted from main.py to keep the entry point small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cubetimer.core.errors import (
    CubeTimerError, ErrorCategory, ErrorSeverity,
)

logger = logging.getLogger(__name__)


def _envelope(code: str, message: str, category: ErrorCategory, **extra) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": (
                ErrorSeverity.CRITICAL if category is ErrorCategory.INTERNAL
                else ErrorSeverity.ERROR
            ).value,
            **extra,
        },
    }


async def handle_cubetimer_error(request: Request, exc: CubeTimerError) -> JSONResponse:
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{exc.code}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "event_id": exc.context.event_id,
            "solve_id": exc.context.solve_id,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Rejected request body: {len(details)} invalid field(s)",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__}: {exc}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred", ErrorCategory.INTERNAL,
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CubeTimerError, handle_cubetimer_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
