"""Tests for slug normalization and write-side link validation."""

import pytest

from app.core.exceptions import InvalidLinkError
from app.core.validators import (
    is_valid_destination_url,
    normalize_slug,
    prepare_cloaked_link,
    validate_cloaked_link,
)


class TestNormalizeSlug:
    """Test the slug-prefix normalization hook."""

    def test_bare_slug_gets_prefix(self):
        """Test that a bare slug gets the /go/ prefix."""
        assert normalize_slug("product-name") == "/go/product-name"

    def test_canonical_slug_unchanged(self):
        """Test that a canonical slug is returned as-is."""
        assert normalize_slug("/go/product-name") == "/go/product-name"

    def test_idempotent(self):
        """Test that normalizing twice equals normalizing once."""
        once = normalize_slug("promo")
        assert normalize_slug(once) == once

    def test_empty_slug_left_alone(self):
        """Test that an empty slug is left for the required-field check."""
        assert normalize_slug("") == ""

    def test_custom_prefix(self):
        """Test normalization with a non-default prefix."""
        assert normalize_slug("deal", prefix="/out/") == "/out/deal"


class TestDestinationURL:
    """Test destination URL checks."""

    @pytest.mark.parametrize("url", [
        "http://example.com",
        "https://example.com/path?query=value",
        "https://sub.example.com:8443/x",
    ])
    def test_valid_urls(self, url):
        """Test that http(s) URLs are accepted."""
        assert is_valid_destination_url(url)

    @pytest.mark.parametrize("url", [
        "",
        None,
        "example.com",
        "ftp://example.com",
        "javascript:alert(1)",
        "https://example.com/" + "a" * 3000,
    ])
    def test_invalid_urls(self, url):
        """Test that other schemes, empty and oversized URLs are rejected."""
        assert not is_valid_destination_url(url)


class TestValidateCloakedLink:
    """Test the full write-side validation of a link payload."""

    def valid_payload(self, **overrides):
        """Payload that passes validation, with overrides applied."""
        payload = {
            "slug": "/go/promo",
            "destination_urls": [{"url": "https://a.example", "weight": 1, "label": "A"}],
        }
        payload.update(overrides)
        return payload

    def test_valid_payload_has_no_errors(self):
        """Test that a well-formed payload passes."""
        assert validate_cloaked_link(self.valid_payload()) == []

    def test_slug_without_prefix_rejected(self):
        """Test that an un-normalized slug is rejected."""
        errors = validate_cloaked_link(self.valid_payload(slug="promo"))
        assert errors == ["Slug must start with /go/"]

    def test_missing_slug_rejected(self):
        """Test that the slug is required."""
        assert "slug is required" in validate_cloaked_link(self.valid_payload(slug=None))

    def test_bare_prefix_rejected(self):
        """Test that the prefix alone is not a slug."""
        assert validate_cloaked_link(self.valid_payload(slug="/go/")) == ["Slug must have a name after /go/"]

    def test_needs_at_least_one_destination(self):
        """Test that an empty destination list is rejected."""
        errors = validate_cloaked_link(self.valid_payload(destination_urls=[]))
        assert errors == ["destinationURLs must contain at least 1 entry"]

    def test_destination_errors_are_positional(self):
        """Test that every bad destination is reported with its index."""
        errors = validate_cloaked_link(self.valid_payload(destination_urls=[
            {"url": "https://ok.example"},
            {"url": "ftp://bad.example", "weight": -1},
            {"weight": 2},
        ]))
        assert errors == [
            "destinationURLs[1].url must start with http:// or https://",
            "destinationURLs[1].weight must be greater than or equal to 0",
            "destinationURLs[2].url is required",
        ]

    def test_zero_weight_and_missing_weight_accepted(self):
        """Test that zero, null and absent weights are all valid."""
        payload = self.valid_payload(destination_urls=[
            {"url": "https://a.example", "weight": 0},
            {"url": "https://b.example", "weight": None},
            {"url": "https://c.example"},
        ])
        assert validate_cloaked_link(payload) == []

    @pytest.mark.parametrize("weight", [True, "3", [1]])
    def test_non_numeric_weight_rejected(self, weight):
        """Test that booleans, strings and lists are not weights."""
        errors = validate_cloaked_link(self.valid_payload(destination_urls=[{"url": "https://a.example", "weight": weight}]))
        assert errors == ["destinationURLs[0].weight must be a number"]

    @pytest.mark.parametrize("weight", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_weight_rejected(self, weight):
        """Test that NaN and infinite weights are rejected."""
        errors = validate_cloaked_link(self.valid_payload(destination_urls=[{"url": "https://a.example", "weight": weight}]))
        assert errors == ["destinationURLs[0].weight must be a finite number"]

    def test_tracking_data_must_be_object(self):
        """Test that trackingData must be a JSON object."""
        errors = validate_cloaked_link(self.valid_payload(tracking_data="clicks"))
        assert errors == ["trackingData must be a JSON object"]


class TestPrepareCloakedLink:
    """Test normalization plus validation before persistence."""

    def test_normalizes_slug_before_validation(self):
        """Test that a bare, padded slug is stripped and prefixed."""
        prepared = prepare_cloaked_link({
            "slug": "  summer-sale ",
            "destination_urls": [{"url": "https://a.example"}],
        })
        assert prepared["slug"] == "/go/summer-sale"

    def test_raises_with_all_errors(self):
        """Test that InvalidLinkError carries every message."""
        with pytest.raises(InvalidLinkError) as exc_info:
            prepare_cloaked_link({"slug": "", "destination_urls": []})

        assert exc_info.value.errors == [
            "slug is required",
            "destinationURLs must contain at least 1 entry",
        ]

    def test_nan_weight_blocks_persistence(self):
        """Test that a NaN weight cannot reach storage."""
        with pytest.raises(InvalidLinkError):
            prepare_cloaked_link({
                "slug": "split",
                "destination_urls": [
                    {"url": "https://a.example", "weight": float("nan")},
                    {"url": "https://b.example", "weight": 1},
                ],
            })

    def test_does_not_mutate_input(self):
        """Test that the caller's payload is left unchanged."""
        payload = {"slug": "promo", "destination_urls": [{"url": "https://a.example"}]}
        prepare_cloaked_link(payload)
        assert payload["slug"] == "promo"
