# ruff: noqa: I001

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pdfthis.api.router import api_router
from pdfthis.config import settings
from pdfthis.core.observability import (
    global_exception_handler,
    request_logging_middleware,
    uptime_seconds,
    utc_now_iso,
)

logger = logging.getLogger("pdfthis")
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")

# Docs/OpenAPI routes are disabled: every path renders a PDF.
app = FastAPI(
    title=settings.app_name,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

# Expose logger for middleware without creating circular imports.
app.state.logger = logger

app.add_exception_handler(Exception, global_exception_handler)

# Request-level logging + request correlation id.
app.middleware("http")(request_logging_middleware)

if settings.cors_origin_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-PDF-Pages", "X-Request-ID"],
    )

app.include_router(api_router)


@app.on_event("startup")
def _log_runtime_config():
    logger.info(
        "runtime_config",
        extra={
            "pid": os.getpid(),
            "service": settings.app_name,
            "environment": settings.environment,
            "version": settings.build_version,
            "unicode_support": settings.unicode_support,
            "unicode_font": bool(settings.unicode_font_path),
            "time": utc_now_iso(),
        },
    )


@app.on_event("shutdown")
def _log_shutdown():
    logger.info("shutdown", extra={"uptime_seconds": round(uptime_seconds(), 2)})
