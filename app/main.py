"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes (the /go/{slug} redirect and health checks)
- Middleware (access logging)
- Rate limiting
- Database setup and teardown

Run with: uvicorn app.main:app
"""

import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.api import endpoints
from app.api.schemas import HealthResponse, ServiceInfoResponse
from app.core.rate_limit import limiter
from app.core.setting import settings
from app.db.session import dispose_engine, init_db
from app.middleware.logging import add_logging_middleware

SERVICE_VERSION = "1.0.0"

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("link_cloaker")

app = FastAPI(
    title="Link Cloaker Service",
    description="Redirects cloaked /go/ slugs to weighted-random destinations",
    version=SERVICE_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

add_logging_middleware(app)


@app.get("/", tags=["Health"], response_model=ServiceInfoResponse)
async def root():
    """Root endpoint for health checks."""
    return ServiceInfoResponse(
        message="Link Cloaker Service",
        version=SERVICE_VERSION,
        docs="/docs",
    )


@app.get("/health", tags=["Health"], response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint for monitoring.

    Only reports that the process is serving; database reachability shows up
    as 500s on the redirect route.
    """
    return HealthResponse(status="healthy")


app.include_router(endpoints.router, tags=["Redirects"])


@app.on_event("startup")
async def startup_event():
    """Create tables on startup unless migrations own the schema."""
    if settings.CREATE_TABLES_ON_STARTUP:
        await init_db()
    logger.info("Link cloaker started (env=%s)", settings.ENV_SETTING.value)


@app.on_event("shutdown")
async def shutdown_event():
    """Release database connections."""
    await dispose_engine()
