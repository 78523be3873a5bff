"""
Rate Limiting Configuration

Per-client rate limiting for the redirect route, keyed on the remote
address. Limits and the on/off switch come from settings so that tests and
deployments behind their own limiter can turn it off.

Uses slowapi (lightweight, FastAPI-compatible). The limiter keeps counters
in process memory; a multi-instance deployment would point slowapi at a
shared storage backend.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.setting import settings

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.RATE_LIMIT_ENABLED,
)

# Format: "count/period" (e.g., "100/minute" means 100 requests per minute)
RATE_LIMITS = {
    "redirect": settings.REDIRECT_RATE_LIMIT,
}
