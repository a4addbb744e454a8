from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Callable

from fastapi import Request
from fastapi.responses import PlainTextResponse
from starlette.responses import Response

from pdfthis.config import settings

_APP_START_MONOTONIC = time.monotonic()


def uptime_seconds() -> float:
    return max(0.0, time.monotonic() - _APP_START_MONOTONIC)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def failure_body(exc: BaseException) -> str:
    message = str(exc) or type(exc).__name__
    return f"Failed to generate PDF: {message}"


def _logger_for(request: Request) -> logging.Logger:
    return getattr(request.app.state, "logger", None) or logging.getLogger("pdfthis")


async def global_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """
    Last-resort handler for exceptions that escape the PDF route.

    Returns the same plain-text 500 the route produces; only the exception
    message is exposed, the traceback goes to the log.
    """
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())

    _logger_for(request).exception(
        "unhandled_exception",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "exception_type": type(exc).__name__,
        },
    )

    return PlainTextResponse(
        failure_body(exc),
        status_code=500,
        headers={"X-Request-ID": request_id},
    )


async def request_logging_middleware(request: Request, call_next: Callable) -> Response:
    """Request-level logging middleware.

    Adds/propagates X-Request-ID and measures request duration.
    Does not log request/response bodies.
    """

    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    logger = _logger_for(request)

    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    except Exception:
        duration_ms = (time.perf_counter() - start) * 1000.0
        extra = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "duration_ms": round(duration_ms, 2),
        }
        # Also log to uvicorn.error so tracebacks survive uvicorn's logging config.
        try:
            logger.exception("http_request_failed", extra=extra)
        finally:
            logging.getLogger("uvicorn.error").exception("http_request_failed", extra=extra)
        raise

    duration_ms = (time.perf_counter() - start) * 1000.0
    extra = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "status_code": response.status_code,
        "duration_ms": round(duration_ms, 2),
    }
    if duration_ms >= settings.slow_request_ms:
        logger.info("slow_request", extra=extra)
    logger.info("http_request", extra=extra)

    response.headers.setdefault("X-Request-ID", request_id)
    return response
