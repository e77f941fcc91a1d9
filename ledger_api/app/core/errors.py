"""
Exception hierarchy for the ledger and its translation to HTTP.

Services raise these exceptions at the point a rule is violated and
never catch them; the handlers registered by ``register_exception_handlers``
are the single place where an error becomes a status code and JSON
body.  The mapping itself is the pure function ``error_response``.
"""

import logging
from typing import Tuple

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


class LedgerError(ValueError):
    """Base exception for all ledger business errors."""


class ValidationError(LedgerError):
    """Raised when client input is malformed or out of range."""


class ConflictError(LedgerError):
    """Raised when an operation would break a business rule."""


class NotFoundError(LedgerError):
    """Raised when an entity that must exist cannot be found.

    Mapped to 404 with its message.  The services report a missing
    entity by returning ``None`` and the routes answer with an empty
    404; this class is the mapping for code that cannot return early.
    """


def error_response(exc: Exception) -> Tuple[int, str]:
    """Map an exception to ``(status_code, message)``.

    Business errors carry their message to the client.  Anything else
    is reported with an opaque message so internals are not leaked.
    """
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND, str(exc)
    if isinstance(exc, (ValidationError, ConflictError)):
        return status.HTTP_400_BAD_REQUEST, str(exc)
    return status.HTTP_500_INTERNAL_SERVER_ERROR, UNEXPECTED_ERROR_MESSAGE


def _json_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"statusCode": status_code, "message": message},
    )


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "The request is invalid."


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the ledger error handlers to ``app``."""
    logger = logging.getLogger(__name__)

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        status_code, message = error_response(exc)
        return _json_error(status_code, message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _json_error(status.HTTP_400_BAD_REQUEST, _describe_validation_errors(exc))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        status_code, message = error_response(exc)
        return _json_error(status_code, message)
