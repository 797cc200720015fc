"""Structured error responses for faults escaping the request handlers."""
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
import structlog
from .correlation import get_correlation_id

log = structlog.get_logger()


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Converts exceptions into JSON error bodies.

    Bus transport failures abort the submission with 503 so callers can tell
    an unavailable bus apart from a rejected delivery (a 200 with
    ``status: "failed"``). Anything else is a 500.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except RedisError as exc:
            return self._error_response(
                request, exc, 503, "BusUnavailable", "Message bus is unavailable"
            )
        except Exception as exc:
            return self._error_response(
                request, exc, 500, "InternalServerError", "An unexpected error occurred"
            )

    @staticmethod
    def _error_response(request: Request, exc: Exception, status_code: int, error: str, message: str):
        correlation_id = get_correlation_id()
        log.error(
            "request.failed",
            error=error,
            error_type=exc.__class__.__name__,
            detail=str(exc),
            status_code=status_code,
            path=request.url.path,
            exc_info=True,
        )
        return JSONResponse(
            status_code=status_code,
            content={
                "error": error,
                "message": message,
                "correlation_id": correlation_id,
                "path": request.url.path,
            },
        )
