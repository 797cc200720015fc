"""HTTP metrics middleware."""
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
import structlog

log = structlog.get_logger()


def route_path(request: Request) -> str:
    """Route template for the request, so caller-chosen paths don't become labels."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Records request count, duration and in-flight gauge per route, and logs each request."""

    def __init__(self, app, metrics, skip_prefix: str = "/metrics"):
        super().__init__(app)
        self.metrics = metrics
        self.skip_prefix = skip_prefix

    async def dispatch(self, request: Request, call_next):
        if request.url.path.startswith(self.skip_prefix):
            return await call_next(request)

        start_time = time.perf_counter()
        status = 500
        with self.metrics.track_active_request():
            try:
                response = await call_next(request)
                status = response.status_code
                return response
            finally:
                duration = time.perf_counter() - start_time
                path = route_path(request)
                self.metrics.record_request(request.method, path, status, duration)
                log.info(
                    "http.request",
                    route=path,
                    http_status=status,
                    duration_ms=round(duration * 1000, 2),
                )
