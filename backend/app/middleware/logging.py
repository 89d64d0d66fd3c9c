from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any
from uuid import uuid4

from fastapi import Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..metrics import REQUEST_COUNT, REQUEST_ERRORS, REQUEST_LATENCY

# Route handlers may set these on request.state to tag the log line
STATE_FIELDS = ("kind", "entry_id")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one JSON log line per API call and record it in Prometheus.

    Besides the request id, path, method, status and latency, the line carries
    the entry id and entry kind when the journal routes touched an entry.
    """

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)
        self._logger = logging.getLogger("moodjournal.request")
        if self._logger.level == logging.NOTSET:
            self._logger.setLevel(logging.INFO)

    async def dispatch(  # type: ignore[override]
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        started = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception:
            fields = _record_fields(request, request_id, 500, started)
            self._logger.error("request error", extra=fields, exc_info=True)
            raise

        fields = _record_fields(request, request_id, response.status_code, started)
        self._logger.info("request complete", extra=fields)
        response.headers["X-Request-ID"] = request_id
        return response


def _record_fields(request: Request, request_id: str, status: int, started: float) -> dict[str, Any]:
    """Collect log fields and update the request metrics."""

    duration = time.perf_counter() - started
    # the matched route is only known once the router has run
    route = request.scope.get("route")
    path = str(getattr(route, "path", None) or request.url.path)
    status_label = str(status)

    REQUEST_COUNT.labels(method=request.method, path=path, status=status_label).inc()
    REQUEST_LATENCY.labels(method=request.method, path=path).observe(duration)
    if status >= 500:
        REQUEST_ERRORS.labels(method=request.method, path=path, status=status_label).inc()

    fields: dict[str, Any] = {
        "request_id": request_id,
        "path": path,
        "method": request.method,
        "status": status,
        "duration_ms": round(duration * 1000, 3),
    }
    for name in STATE_FIELDS:
        value = getattr(request.state, name, None)
        if value is not None:
            fields[name] = value
    return fields
