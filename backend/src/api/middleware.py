"""HTTP middleware applied to every request."""
import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = logging.getLogger("api.access")


class JSONContentTypeMiddleware(BaseHTTPMiddleware):
    """Set Content-Type: application/json on all API responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and normalize the response content type."""
        response = await call_next(request)
        # Interactive docs (/docs, /redoc) are the only HTML responses
        if not response.headers.get("content-type", "").startswith("text/html"):
            response.headers["Content-Type"] = "application/json"
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log one line per request, including requests that fail."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and log method, path, status and duration."""
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            logger.info(
                "%s %s %s",
                request.method,
                request.url.path,
                status_code,
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status_code,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
