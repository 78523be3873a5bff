"""
Custom Exceptions

This module defines custom exceptions for the redirect read path and the
write-side validation path.

Read path (recovered locally by the redirect service, never raised to HTTP):
- LinkNotFoundError: no record for the slug
- LinkNotConfiguredError: record exists but lists no destinations
- SelectionFailureError: destinations exist but none could be used
- UpstreamFailureError: the storage collaborator failed or timed out

Write path:
- InvalidLinkError, DuplicateSlugError, DatabaseError
"""

from typing import Optional


class LinkCloakerException(Exception):
    """Base exception for the link cloaker service."""
    pass


class LinkNotFoundError(LinkCloakerException):
    """Raised when no cloaked link exists for a slug."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Link '{slug}' not found")


class LinkNotConfiguredError(LinkCloakerException):
    """Raised when a cloaked link has no destination URLs."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Link '{slug}' has no destination URLs configured")


class SelectionFailureError(LinkCloakerException):
    """Raised when no usable destination could be chosen for a link."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"No valid destination URL found for link '{slug}'")


class UpstreamFailureError(LinkCloakerException):
    """Raised when the storage collaborator fails or times out."""

    def __init__(self, slug: str, original_error: Optional[BaseException] = None):
        self.slug = slug
        self.original_error = original_error
        reason = type(original_error).__name__ if original_error else "unknown error"
        super().__init__(f"Lookup for '{slug}' failed: {reason}")


class InvalidLinkError(LinkCloakerException):
    """Raised when a cloaked link fails write-side validation."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("Invalid cloaked link: " + "; ".join(self.errors))


class DuplicateSlugError(LinkCloakerException):
    """Raised when saving a link whose slug is already taken."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Slug '{slug}' is already in use")


class DatabaseError(LinkCloakerException):
    """Raised when database operations fail."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
