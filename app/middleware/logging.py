"""
Access Logging Middleware

Logs one line per HTTP request:
- Request method and path
- Response status code
- Processing time
- Client IP address
- Redirect target, for 3xx responses

The redirect target is logged because destinations are picked at random;
without it the access log cannot tell which destination a visitor was sent to.
"""

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("link_cloaker.access")


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    Checks X-Forwarded-For first (proxies/load balancers), taking the first hop.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Access log middleware; also sets the X-Process-Time response header."""

    async def dispatch(self, request: Request, call_next):
        client_ip = get_client_ip(request)
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        location = response.headers.get("location")

        # Format: METHOD PATH STATUS_CODE PROCESS_TIME_MS IP [-> LOCATION]
        logger.info(
            "%s %s %s %.2fms IP:%s%s",
            request.method,
            request.url.path,
            response.status_code,
            process_time * 1000,
            client_ip,
            f" -> {location}" if location else "",
        )

        response.headers["X-Process-Time"] = str(process_time)
        return response


def add_logging_middleware(app):
    """Add access logging middleware to a FastAPI app."""
    app.add_middleware(LoggingMiddleware)
