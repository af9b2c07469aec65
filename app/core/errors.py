"""
Error taxonomy for the scan API and the handlers that render it.

Every error reaches the caller as a JSON body ``{"error": "<message>"}``;
nothing is retried internally.
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.core.logging import get_logger

logger = get_logger(__name__)


class ScanError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(ScanError):
    """A required field is missing or empty."""
    status_code = 400
    default_message = "Invalid input"


class NotFound(ScanError):
    """Unknown scan id."""
    status_code = 404
    default_message = "Scan not found"


class NotReady(ScanError):
    """Report requested before the scan completed."""
    status_code = 400
    default_message = "Scan not completed yet"


async def scan_error_handler(request: Request, exc: ScanError) -> JSONResponse:
    logger.info("%s %s -> %d %s", request.method, request.url.path,
                exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code,
                        content={"error": exc.message})


async def validation_error_handler(request: Request,
                                   exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request body",
            "details": jsonable_encoder(exc.errors()),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ScanError, scan_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
