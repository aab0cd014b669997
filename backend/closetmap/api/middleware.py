"""HTTP Middleware — CORS, request logging and the per-request time budget.

Invariants:
    - Every response is logged with method, path, status and duration
    - A request running past settings.request_timeout_seconds is answered with 504;
      store writes already issued are not rolled back
"""

import asyncio
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from closetmap.config import Settings
from closetmap.core.errors import RequestTimeoutError

logger = logging.getLogger(__name__)


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure all middleware for the application."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def enforce_timeout_and_log(request: Request, call_next):
        context = getattr(request.app.state, "context", None)
        timeout = (
            context.settings.request_timeout_seconds
            if context else settings.request_timeout_seconds
        )
        start = time.perf_counter()
        try:
            async with asyncio.timeout(timeout):
                response = await call_next(request)
        except TimeoutError:
            error = RequestTimeoutError(timeout)
            logger.error(
                error.message,
                extra={"path": request.url.path, "error_code": error.code},
            )
            response = JSONResponse(
                status_code=error.http_status, content=error.to_response(),
            )

        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return response
