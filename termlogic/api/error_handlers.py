"""Error Handlers — map every failure leaving a route to the termlogic error envelope.

Invariants:
    - TermLogicError → its own to_response() body and http_status
    - RequestValidationError → 400 VALIDATION_ERROR with field-level details
    - Any other exception → 500 INTERNAL_ERROR; the message never reaches the client
    - Every handler logs with error_code and path extras, so JSON logs can be
      filtered by failure kind and endpoint
    - Retryable errors (lookup unavailable, database) carry Retry-After

Design Decisions:
    - Three layers (domain, validation, catch-all) registered in one place
    - Envelope for non-domain errors built by one helper so all three layers
      share the code/message/category/severity keys
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from termlogic.core.errors import ErrorCategory, ErrorSeverity, TermLogicError

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = "5"
VALIDATION_ERROR_CODE = "VALIDATION_ERROR"
INTERNAL_ERROR_CODE = "INTERNAL_ERROR"


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TermLogicError, handle_termlogic_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


def _log_extra(request: Request, code: str) -> dict:
    return {"error_code": code, "path": request.url.path}


def _envelope(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity,
    **fields,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **fields,
        },
    }


async def handle_termlogic_error(request: Request, exc: TermLogicError) -> JSONResponse:
    log = logger.warning if exc.retryable else logger.error
    log(f"{exc.code}: {exc.message}", extra=_log_extra(request, exc.code))
    headers = {"Retry-After": RETRY_AFTER_SECONDS} if exc.retryable else None
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(), headers=headers,
    )


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
        f"Rejected request with {len(details)} invalid field(s)",
        extra=_log_extra(request, VALIDATION_ERROR_CODE),
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            VALIDATION_ERROR_CODE, "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR,
            details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all; the exception text goes to the log only."""
    logger.error(
        f"Unhandled {type(exc).__name__}: {exc}",
        exc_info=True,
        extra=_log_extra(request, INTERNAL_ERROR_CODE),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            INTERNAL_ERROR_CODE, "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )
