"""
Database Models for the Link Cloaker Service

This module defines the SQLModel schemas for:
- CloakedLink: table mapping a canonical slug to its weighted destinations
- DestinationRecord: one weighted destination (stored as JSON inside CloakedLink)
- CloakedLinkRecord: the read projection the redirect path works with

Design Decisions:
- Destinations are stored as a JSON array on the link row, order preserved.
  The list is small and always read as a whole, so a child table would only
  add a join to the hot path.
- Unique index on slug for fast lookups (the only query on the read path)
- tracking_data is opaque JSON and is never selected by the redirect path
"""

import math
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, String
from pydantic import field_validator
from sqlmodel import Column, Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DestinationRecord(SQLModel):
    """
    One weighted destination of a cloaked link.

    weight is optional: absent or null counts as 1. A weight of zero or
    below keeps the record in the list but makes it unselectable.
    """
    url: str
    weight: Optional[float] = None
    label: Optional[str] = None

    @field_validator("weight")
    @classmethod
    def weight_must_be_finite(cls, value: Optional[float]) -> Optional[float]:
        # NaN would poison the running total in the selector
        if value is not None and not math.isfinite(value):
            raise ValueError("weight must be a finite number")
        return value

    @property
    def effective_weight(self) -> float:
        return self.weight if self.weight is not None else 1


class CloakedLinkRecord(SQLModel):
    """Read projection of a cloaked link: slug and destinations only."""
    slug: str
    destination_urls: Optional[list[DestinationRecord]] = None


class CloakedLink(SQLModel, table=True):
    """
    Cloaked links table.

    Fields:
    - id: Auto-incrementing primary key
    - slug: Canonical slug including the routing prefix (e.g. /go/product-name)
    - destination_urls: JSON array of {url, weight, label} objects
    - tracking_data: Optional opaque JSON payload, passthrough storage only
    - created_at / updated_at: Maintained by the write path

    Indexes:
    - slug: Unique index (the redirect lookup key)
    """
    __tablename__ = "cloaked_links"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(
        sa_column=Column(String(255), nullable=False, unique=True, index=True),
        max_length=255
    )
    destination_urls: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False)
    )
    tracking_data: Optional[dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True)
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
