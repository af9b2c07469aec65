# app/core/middleware.py
from __future__ import annotations
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.errors import ScanError
from app.core.logging import get_logger, set_request_id

access_log = get_logger("strix.access")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
}


def install_middleware(app: FastAPI) -> None:
    """Request id + access log, and the security headers on every response."""

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    # registered last so it wraps everything else, including error responses
    @app.middleware("http")
    async def request_context(request: Request, call_next):
        rid = set_request_id(request.headers.get("X-Request-ID"))
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            access_log.exception("unhandled error on %s %s",
                                 request.method, request.url.path)
            response = JSONResponse(status_code=500,
                                    content={"error": ScanError.default_message},
                                    headers=SECURITY_HEADERS)
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Request-ID"] = rid
        client = request.client.host if request.client else "-"
        access_log.info('%s "%s %s" %d %.1fms', client, request.method,
                        request.url.path, response.status_code, elapsed_ms)
        return response
