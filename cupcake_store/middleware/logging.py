"""
Cupcake Store — Access Log Middleware
======================================

What:  One access log line per API request.
How:   After the router has matched, reads the route template and the
       `cupcake_id` path parameter from the ASGI scope, so lines for
       /api/v1/cupcakes/7 and /api/v1/cupcakes/8 group under one template.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Example:
    PUT /api/v1/cupcakes/{cupcake_id} id=7 -> 400 2.9ms [a1b2c3d4]

Outcome levels:
    2xx/3xx      DEBUG for reads, INFO for writes
    4xx          WARNING
    5xx          ERROR

Health probes and static frontend files are not logged. Bodies never are.
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from cupcake_store.middleware.request_id import request_id_var

logger = logging.getLogger("cupcake_store.access")

API_PREFIX = "/api/"
READ_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def route_template(request: Request) -> str:
    """The matched route path (e.g. `/api/v1/cupcakes/{cupcake_id}`), else the raw path."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def outcome_level(method: str, status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.DEBUG if method in READ_METHODS else logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each API call with its route, cupcake id, status and duration."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not request.url.path.startswith(API_PREFIX):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        template = route_template(request)
        cupcake_id: Optional[str] = request.path_params.get("cupcake_id")
        target = f"{template} id={cupcake_id}" if cupcake_id is not None else template

        logger.log(
            outcome_level(request.method, response.status_code),
            "%s %s -> %d %.1fms [%s]",
            request.method,
            target,
            response.status_code,
            elapsed_ms,
            request_id_var.get(""),
            extra={"route": template, "cupcake_id": cupcake_id},
        )
        return response
