"""
Redirect Service

This service turns an incoming slug into a redirect decision:

1. Normalize the slug to its canonical /go/ form
2. Look the link up through the repository (bounded by a timeout)
3. Check that the link has destinations
4. Pick one with the weighted selector, falling back to the first entry
   when no destination has a positive weight
5. Return a typed RedirectResult

resolve() never raises. Every failure is mapped to NotFound or ServerError
here so the HTTP layer only has to translate results into responses. Lookup
failures are logged and not retried.
"""

import asyncio
import logging
import random
from typing import Optional, Sequence

from app.core.exceptions import (
    LinkNotConfiguredError,
    LinkNotFoundError,
    SelectionFailureError,
    UpstreamFailureError,
)
from app.core.setting import settings
from app.core.validators import normalize_slug
from app.db.models import CloakedLinkRecord, DestinationRecord
from app.services.link_repository import LinkRepository
from app.services.results import ErrorKind, NotFound, Redirect, RedirectResult, ServerError
from app.services.selector import RandomSource, select_weighted_destination

logger = logging.getLogger(__name__)

LINK_NOT_FOUND = "Link not found"
NO_DESTINATIONS_CONFIGURED = "No destination URLs configured for this link"
NO_VALID_DESTINATION = "No valid destination URL configured for this link"
INTERNAL_SERVER_ERROR = "Internal Server Error"

# Destinations are picked at random per request, so the redirect must never be cached as permanent
REDIRECT_STATUS_CODE = 302


class RedirectService:
    """
    Resolves cloaked slugs to destination URLs.

    Holds no per-request state, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        repository: LinkRepository,
        rng: RandomSource = random.random,
        lookup_timeout: Optional[float] = None,
        slug_prefix: Optional[str] = None,
    ):
        """
        Args:
            repository: Storage collaborator providing find_by_slug()
            rng: Uniform [0, 1) random source handed to the selector
            lookup_timeout: Seconds before a lookup counts as an upstream failure
            slug_prefix: Routing prefix of canonical slugs
        """
        self.repository = repository
        self.rng = rng
        self.lookup_timeout = lookup_timeout if lookup_timeout is not None else settings.LOOKUP_TIMEOUT_SECONDS
        self.slug_prefix = slug_prefix or settings.SLUG_PREFIX

    async def resolve(self, raw_slug: str) -> RedirectResult:
        """
        Resolve a slug to a redirect result.

        Args:
            raw_slug: Slug as received, with or without the routing prefix

        Returns:
            Redirect(url, 302) on success, NotFound or ServerError otherwise
        """
        slug = normalize_slug(raw_slug, self.slug_prefix)

        try:
            return await self._resolve(slug)
        except LinkNotFoundError:
            logger.info("Cloaked link %s not found", slug)
            return NotFound(LINK_NOT_FOUND, kind=ErrorKind.NOT_FOUND)
        except LinkNotConfiguredError:
            logger.warning("Cloaked link %s has no destination URLs configured", slug)
            return NotFound(NO_DESTINATIONS_CONFIGURED, kind=ErrorKind.NOT_CONFIGURED)
        except SelectionFailureError:
            logger.warning("No valid destination URL found for cloaked link %s", slug)
            return ServerError(NO_VALID_DESTINATION, kind=ErrorKind.SELECTION_FAILURE)
        except UpstreamFailureError as e:
            logger.error(
                "Error handling cloaked link redirect for %s: %s",
                slug,
                e,
                exc_info=e.original_error,
            )
            return ServerError(INTERNAL_SERVER_ERROR, kind=ErrorKind.UPSTREAM_FAILURE)

    async def _resolve(self, slug: str) -> Redirect:
        link = await self._lookup(slug)
        if link is None:
            raise LinkNotFoundError(slug)

        destinations = link.destination_urls
        if not destinations:
            raise LinkNotConfiguredError(slug)

        url = select_weighted_destination(destinations, self.rng)
        if url:
            return Redirect(url, REDIRECT_STATUS_CODE)

        fallback_url = self._first_destination_url(destinations)
        if not fallback_url:
            raise SelectionFailureError(slug)

        logger.debug("No positively weighted destination for %s, using first entry", slug)
        return Redirect(fallback_url, REDIRECT_STATUS_CODE, fallback=True)

    async def _lookup(self, slug: str) -> Optional[CloakedLinkRecord]:
        try:
            return await asyncio.wait_for(
                self.repository.find_by_slug(slug),
                timeout=self.lookup_timeout,
            )
        # asyncio.TimeoutError included: a slow store is treated like a failed one
        except Exception as e:
            raise UpstreamFailureError(slug, e) from e

    @staticmethod
    def _first_destination_url(destinations: Sequence[DestinationRecord]) -> Optional[str]:
        if not destinations:
            return None
        return destinations[0].url or None
