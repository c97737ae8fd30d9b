"""
Global middleware.

Request timing plus an access log line that names the authenticated caller
when the guard attached one to ``request.state.user``.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


def register_middleware(app: FastAPI) -> None:
    """Attach any app-level middleware."""

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        caller = getattr(request.state, "user", None)
        logger.debug(
            "%s %s -> %d (user=%s) — %.3fs",
            request.method, request.url.path, response.status_code,
            caller.id if caller is not None else "-", elapsed,
        )
        return response
