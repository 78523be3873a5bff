"""
Link Repository

Storage collaborator for cloaked links. The redirect service depends only on
LinkRepository.find_by_slug(); which storage sits behind it is a deployment
detail.

Implementations:
- SQLLinkRepository: async SQLAlchemy session (SQLite or PostgreSQL)
- InMemoryLinkRepository: dict-backed, for tests and local tooling

Both implementations also expose a write path that runs the write-side
validator before anything is stored. The redirect path never writes.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DatabaseError, DuplicateSlugError, LinkNotFoundError
from app.core.validators import prepare_cloaked_link
from app.db.models import CloakedLink, CloakedLinkRecord, utcnow

logger = logging.getLogger(__name__)


class LinkRepository(ABC):
    """Lookup contract consumed by the redirect service."""

    @abstractmethod
    async def find_by_slug(self, canonical_slug: str) -> Optional[CloakedLinkRecord]:
        """
        Find the link stored under a canonical slug.

        Args:
            canonical_slug: Slug already carrying the routing prefix

        Returns:
            The slug/destinations projection, or None if no link matches

        Raises:
            Any storage error; callers are expected to handle it
        """
        pass


class SQLLinkRepository(LinkRepository):
    """
    Repository backed by the cloaked_links table.

    One instance per request; the session is owned by the caller.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_slug(self, canonical_slug: str) -> Optional[CloakedLinkRecord]:
        # Only the two columns the redirect needs; tracking_data stays in the row
        statement = (
            select(CloakedLink.slug, CloakedLink.destination_urls)
            .where(CloakedLink.slug == canonical_slug)
            .limit(1)
        )
        result = await self.session.execute(statement)
        row = result.first()
        if row is None:
            return None

        # A malformed JSON payload raises a ValidationError here
        return CloakedLinkRecord.model_validate(
            {"slug": row.slug, "destination_urls": row.destination_urls}
        )

    async def save(self, data: Mapping[str, Any]) -> CloakedLink:
        """
        Validate and insert a new cloaked link.

        Args:
            data: Mapping with slug, destination_urls and optional tracking_data.
                The slug may omit the routing prefix.

        Returns:
            The persisted CloakedLink

        Raises:
            InvalidLinkError: If the payload fails validation
            DuplicateSlugError: If the canonical slug already exists
            DatabaseError: If the insert fails for any other reason
        """
        prepared = prepare_cloaked_link(data)
        link = CloakedLink(
            slug=prepared["slug"],
            destination_urls=prepared["destination_urls"],
            tracking_data=prepared.get("tracking_data"),
        )

        try:
            self.session.add(link)
            await self.session.flush()
            await self.session.commit()
            await self.session.refresh(link)
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateSlugError(prepared["slug"]) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"Failed to save link '{prepared['slug']}'", original_error=e) from e

        logger.info("Saved cloaked link %s with %d destination(s)", link.slug, len(link.destination_urls))
        return link

    async def update_destinations(self, slug: str, destination_urls: list[Mapping[str, Any]]) -> CloakedLink:
        """
        Replace the destination list of an existing link.

        Raises:
            InvalidLinkError: If the new destinations fail validation
            LinkNotFoundError: If no link exists under the slug
        """
        prepared = prepare_cloaked_link({"slug": slug, "destination_urls": destination_urls})
        statement = select(CloakedLink).where(CloakedLink.slug == prepared["slug"]).limit(1)
        result = await self.session.execute(statement)
        link = result.scalars().first()
        if link is None:
            raise LinkNotFoundError(prepared["slug"])

        link.destination_urls = prepared["destination_urls"]
        link.updated_at = utcnow()
        try:
            await self.session.commit()
            await self.session.refresh(link)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"Failed to update link '{prepared['slug']}'", original_error=e) from e
        return link


class InMemoryLinkRepository(LinkRepository):
    """Dict-backed repository. Safe for concurrent readers; records are never mutated in place."""

    def __init__(self, records: Optional[Mapping[str, CloakedLinkRecord]] = None):
        self._records: dict[str, CloakedLinkRecord] = dict(records or {})

    async def find_by_slug(self, canonical_slug: str) -> Optional[CloakedLinkRecord]:
        return self._records.get(canonical_slug)

    def add(self, data: Mapping[str, Any]) -> CloakedLinkRecord:
        """
        Validate and store a link.

        Raises:
            InvalidLinkError: If the payload fails validation
            DuplicateSlugError: If the canonical slug already exists
        """
        prepared = prepare_cloaked_link(data)
        if prepared["slug"] in self._records:
            raise DuplicateSlugError(prepared["slug"])

        record = CloakedLinkRecord.model_validate(
            {"slug": prepared["slug"], "destination_urls": prepared["destination_urls"]}
        )
        self._records[record.slug] = record
        return record

    def put(self, record: CloakedLinkRecord) -> None:
        """Store a record as-is, skipping validation (imports and fixtures)."""
        self._records[record.slug] = record
