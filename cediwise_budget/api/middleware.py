"""Request tracing and latency middleware for the budget API"""

import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from cediwise_budget.infrastructure.observability.logging import log_request
from cediwise_budget.infrastructure.observability.metrics import record_request

REQUEST_ID_HEADER = "X-Request-ID"


def route_template(request: Request) -> str:
    """Matched route path such as /v1/strategy/{name}, or the raw path when nothing matched"""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's request ID or mint one, and echo it on the response"""

    async def dispatch(self, request: Request, call_next):
        request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Time each request, labelled by route template so path parameters stay out of the metric"""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        endpoint = route_template(request)
        record_request(request.method, endpoint, response.status_code, elapsed)
        log_request(
            getattr(request.state, "request_id", "unknown"),
            request.method,
            endpoint,
            response.status_code,
            elapsed * 1000,
        )
        return response
