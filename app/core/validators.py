"""
Write-Side Validators and Normalizers

Cloaked links are created by an external administrative process. Before a
link is persisted it goes through the same rules the admin collection
enforces:

- slug: required, normalized to carry the routing prefix, unique (enforced
  by the database index)
- destinationURLs: at least one entry
- url: required, must start with http:// or https://
- weight: optional, must be a finite non-negative number
- label: optional string

The redirect path only uses normalize_slug(); everything else runs before
persistence and never on the read path.
"""

import math
from typing import Any, Mapping, Optional

from app.core.exceptions import InvalidLinkError
from app.core.setting import settings

ALLOWED_URL_PREFIXES = ("http://", "https://")
MAX_URL_LENGTH = 2048


def normalize_slug(slug: str, prefix: Optional[str] = None) -> str:
    """
    Return the canonical form of a slug.

    A slug missing the routing prefix gets it prepended; a slug that already
    carries it is returned unchanged, so the operation is idempotent.
    Empty values are returned as-is and left to the required-field check.

    Example:
        normalize_slug("promo") -> "/go/promo"
        normalize_slug("/go/promo") -> "/go/promo"
    """
    prefix = prefix or settings.SLUG_PREFIX
    if slug and not slug.startswith(prefix):
        return prefix + slug
    return slug


def is_valid_destination_url(url: Any) -> bool:
    """Check that a destination URL is an http(s) string of sane length."""
    if not url or not isinstance(url, str):
        return False
    if len(url) > MAX_URL_LENGTH:
        return False
    return url.startswith(ALLOWED_URL_PREFIXES)


def validate_destination(destination: Any, position: int) -> list[str]:
    """Validate one destination entry; returns a list of messages (empty when valid)."""
    where = f"destinationURLs[{position}]"
    if not isinstance(destination, Mapping):
        return [f"{where} must be an object"]

    errors = []
    url = destination.get("url")
    if url is None or url == "":
        errors.append(f"{where}.url is required")
    elif not is_valid_destination_url(url):
        errors.append(f"{where}.url must start with http:// or https://")

    weight = destination.get("weight")
    if weight is not None:
        # bool is an int subclass; reject it explicitly
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            errors.append(f"{where}.weight must be a number")
        elif not math.isfinite(weight):
            errors.append(f"{where}.weight must be a finite number")
        elif weight < 0:
            errors.append(f"{where}.weight must be greater than or equal to 0")

    label = destination.get("label")
    if label is not None and not isinstance(label, str):
        errors.append(f"{where}.label must be a string")

    return errors


def validate_cloaked_link(data: Mapping[str, Any], prefix: Optional[str] = None) -> list[str]:
    """
    Validate a cloaked link payload whose slug has already been normalized.

    Returns:
        All validation messages found, empty list if the payload is valid
    """
    prefix = prefix or settings.SLUG_PREFIX
    errors = []

    slug = data.get("slug")
    if not slug or not isinstance(slug, str):
        errors.append("slug is required")
    elif not slug.startswith(prefix):
        errors.append(f"Slug must start with {prefix}")
    elif slug == prefix:
        errors.append(f"Slug must have a name after {prefix}")

    destinations = data.get("destination_urls")
    if not isinstance(destinations, (list, tuple)) or len(destinations) < 1:
        errors.append("destinationURLs must contain at least 1 entry")
    else:
        for position, destination in enumerate(destinations):
            errors.extend(validate_destination(destination, position))

    tracking_data = data.get("tracking_data")
    if tracking_data is not None and not isinstance(tracking_data, Mapping):
        errors.append("trackingData must be a JSON object")

    return errors


def prepare_cloaked_link(data: Mapping[str, Any], prefix: Optional[str] = None) -> dict[str, Any]:
    """
    Normalize and validate a link payload before persistence.

    Runs the slug normalization hook first, then every validation rule.

    Returns:
        A new dict with the canonical slug and the remaining fields copied

    Raises:
        InvalidLinkError: listing every problem found
    """
    prepared = dict(data)
    slug = prepared.get("slug")
    if isinstance(slug, str):
        prepared["slug"] = normalize_slug(slug.strip(), prefix)

    errors = validate_cloaked_link(prepared, prefix)
    if errors:
        raise InvalidLinkError(errors)

    prepared["destination_urls"] = [dict(d) for d in prepared["destination_urls"]]
    return prepared
