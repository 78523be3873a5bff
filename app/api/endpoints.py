"""
FastAPI Endpoints for the Link Cloaker Service

Endpoints only handle:
- Rate limiting
- Building the redirect service from request-scoped dependencies
- Translating RedirectResult into HTTP responses

All decision logic is in app.services.redirect_service.

Responses for GET /go/{slug}:
- 302 with Location header, empty body
- 404 text/plain: link missing, or link without destinations
- 500 text/plain: no usable destination, or lookup failure
"""

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.rate_limit import limiter, RATE_LIMITS
from app.core.setting import settings
from app.db.session import get_session
from app.services.link_repository import LinkRepository, SQLLinkRepository
from app.services.redirect_service import RedirectService
from app.services.results import Redirect, RedirectResult


router = APIRouter()


def get_link_repository(session: AsyncSession = Depends(get_session)) -> LinkRepository:
    """Repository dependency; overridden in tests with an in-memory one."""
    return SQLLinkRepository(session)


def get_redirect_service(
    repository: LinkRepository = Depends(get_link_repository),
) -> RedirectService:
    return RedirectService(
        repository,
        lookup_timeout=settings.LOOKUP_TIMEOUT_SECONDS,
        slug_prefix=settings.SLUG_PREFIX,
    )


def to_response(result: RedirectResult) -> Response:
    """Map a redirect result onto an HTTP response."""
    if isinstance(result, Redirect):
        return RedirectResponse(url=result.url, status_code=result.status_code)
    return PlainTextResponse(result.message, status_code=result.status_code)


@router.get(
    "/go/{slug}",
    status_code=status.HTTP_302_FOUND,
    summary="Redirect a cloaked link",
    description="Redirects to one of the link's destinations, chosen at random by weight",
    responses={
        302: {"description": "Redirect to the selected destination"},
        404: {"description": "Link not found, or link has no destinations"},
        500: {"description": "No usable destination, or lookup failure"},
    },
)
@limiter.limit(RATE_LIMITS["redirect"])
async def redirect_cloaked_link(
    slug: str,
    request: Request,  # Required for rate limiting (slowapi expects parameter named 'request')
    redirect_service: RedirectService = Depends(get_redirect_service),
) -> Response:
    """
    Redirect a cloaked slug to a weighted-random destination.

    Args:
        slug: Slug remainder after /go/
        request: FastAPI Request object (for rate limiting)

    Returns:
        RedirectResponse (HTTP 302) or a plain-text error response
    """
    result = await redirect_service.resolve(slug)
    return to_response(result)
