#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the placeholder marker grammar and tracking tokens."""

import pytest

from layoutslots.constants import PLACEHOLDER_IMAGE, PLACEHOLDER_LOGO_IMAGE, PLACEHOLDER_PRODUCT_IMAGE
from layoutslots.exceptions import ValidationError
from layoutslots.markers import (
    ContentMarker,
    ImageMarker,
    ProductMarker,
    append_token,
    dummy_image_for,
    dummy_text_for,
    format_marker,
    has_tracking_token,
    iter_product_markers,
    parse_content_marker,
    parse_image_source,
    parse_marker,
    parse_tracking_token,
    remove_tokens,
    replace_token,
    tracking_markers,
    tracking_token_for,
)


@pytest.mark.unit
class TestParseMarker:
    """Tests for parsing complete marker strings."""

    def test_content_marker(self) -> None:
        """Test parsing a content marker."""
        assert parse_marker("{{content:headline}}") == ContentMarker("headline")

    def test_image_marker(self) -> None:
        """Test parsing an image marker."""
        assert parse_marker("{{image:hero-banner}}") == ImageMarker("hero-banner")

    def test_product_marker(self) -> None:
        """Test parsing a product marker with every field."""
        for field in ("name", "price", "url", "image"):
            assert parse_marker(f"{{{{product:spotlight:3:{field}}}}}") == ProductMarker("spotlight", 3, field)

    def test_logo_alias(self) -> None:
        """Test the logo alias parses to the logo image slot."""
        marker = parse_marker("{{logo}}")
        assert marker == ImageMarker("logo")
        assert marker.is_logo

    def test_footer_alias(self) -> None:
        """Test the footer alias parses to the footer content slot."""
        assert parse_marker("{{footer}}") == ContentMarker("footer")

    @pytest.mark.parametrize(
        "text",
        [
            "Hello {{content:headline}}",
            "{{content:headline}} ",
            "{{content:head line}}",
            "{{content:headline!}}",
            "{{content:}}",
            "{{product:spotlight:0:color}}",
            "{{product:spotlight:-1:name}}",
            "{{image:hero}}{{image:hero}}",
            "{content:headline}",
            "{{Logo}}",
        ],
    )
    def test_grammar_mismatch_is_plain_content(self, text: str) -> None:
        """Test that near-miss marker text is not a marker."""
        assert parse_marker(text) is None

    def test_slot_ids_are_case_sensitive(self) -> None:
        """Test that slot identifiers keep their case."""
        assert parse_marker("{{content:HeadLine}}") == ContentMarker("HeadLine")
        assert parse_marker("{{content:HeadLine}}") != ContentMarker("headline")

    def test_parse_content_marker_trims(self) -> None:
        """Test that node content is trimmed before matching."""
        assert parse_content_marker("  {{content:body-text}}\n") == ContentMarker("body-text")

    def test_parse_content_marker_ignores_product_text(self) -> None:
        """Test that product markers in text are not content markers."""
        assert parse_content_marker("{{product:spotlight:0:name}}") is None

    def test_parse_image_source(self) -> None:
        """Test which markers qualify as an image source."""
        assert parse_image_source("{{logo}}") == ImageMarker("logo")
        assert parse_image_source("{{product:a:1:image}}") == ProductMarker("a", 1, "image")
        assert parse_image_source("{{product:a:1:url}}") is None
        assert parse_image_source("{{content:headline}}") is None
        assert parse_image_source("https://cdn.example.com/a.png") is None

    def test_iter_product_markers(self) -> None:
        """Test finding product markers embedded in text."""
        markers = iter_product_markers("Buy {{product:a:0:name}} for {{product:a:0:price}}!")
        assert markers == [ProductMarker("a", 0, "name"), ProductMarker("a", 0, "price")]


@pytest.mark.unit
class TestFormatMarker:
    """Tests for formatting markers back to persisted text."""

    def test_content_and_image(self) -> None:
        """Test plain content and image markers."""
        assert format_marker(ContentMarker("headline")) == "{{content:headline}}"
        assert format_marker(ImageMarker("hero-banner")) == "{{image:hero-banner}}"

    def test_aliases_are_asymmetric(self) -> None:
        """Test that logo and footer format to their bare aliases."""
        assert format_marker(ImageMarker("logo")) == "{{logo}}"
        assert format_marker(ContentMarker("footer")) == "{{footer}}"

    def test_product(self) -> None:
        """Test product marker formatting."""
        assert format_marker(ProductMarker("spotlight-1", 0, "name")) == "{{product:spotlight-1:0:name}}"

    @pytest.mark.parametrize(
        "text",
        ["{{content:a_b-1}}", "{{image:x}}", "{{logo}}", "{{footer}}", "{{product:c:12:url}}"],
    )
    def test_parse_format_identity(self, text: str) -> None:
        """Test that formatting a parsed marker yields the same text."""
        assert format_marker(parse_marker(text)) == text


@pytest.mark.unit
class TestMarkerValidation:
    """Tests for marker construction checks."""

    def test_invalid_slot_id(self) -> None:
        """Test that slot ids outside the identifier alphabet are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            ContentMarker("bad id")
        assert exc_info.value.parameter_name == "slot_id"

    def test_negative_index(self) -> None:
        """Test that negative product indexes are rejected."""
        with pytest.raises(ValidationError):
            ProductMarker("spotlight", -1, "name")

    def test_boolean_index(self) -> None:
        """Test that booleans are not accepted as indexes."""
        with pytest.raises(ValidationError):
            ProductMarker("spotlight", True, "name")

    def test_unknown_field(self) -> None:
        """Test that unknown product fields are rejected."""
        with pytest.raises(ValidationError):
            ProductMarker("spotlight", 0, "color")  # type: ignore[arg-type]


@pytest.mark.unit
class TestTrackingTokens:
    """Tests for tracking token construction and parsing."""

    def test_token_for_each_marker(self) -> None:
        """Test the token recorded for each marker kind."""
        assert tracking_token_for(ContentMarker("headline")) == "content-slot--headline"
        assert tracking_token_for(ImageMarker("logo")) == "img-slot--logo"
        assert tracking_token_for(ProductMarker("spotlight", 2, "image")) == "product-img-slot--spotlight--2"

    def test_parse_tokens(self) -> None:
        """Test parsing each token kind."""
        assert parse_tracking_token("content-slot--body-text") == ContentMarker("body-text")
        assert parse_tracking_token("img-slot--hero-banner") == ImageMarker("hero-banner")
        assert parse_tracking_token("product-img-slot--spotlight--0") == ProductMarker("spotlight", 0, "image")

    def test_product_token_with_hyphenated_component(self) -> None:
        """Test that the index is the last double-dash group."""
        assert parse_tracking_token("product-img-slot--spot-light-1--2") == ProductMarker("spot-light-1", 2, "image")
        assert parse_tracking_token("product-img-slot--a--1--2") == ProductMarker("a--1", 2, "image")

    def test_non_tracking_tokens(self) -> None:
        """Test that ordinary classes and the lock token are not identities."""
        assert parse_tracking_token("locked-section") is None
        assert parse_tracking_token("hero-section") is None
        assert parse_tracking_token("content-slot--") is None

    def test_tracking_markers_in_class_value(self) -> None:
        """Test collecting identities from a multi-value class attribute."""
        value = "hero content-slot--headline locked-section"
        assert tracking_markers(value) == [ContentMarker("headline")]
        assert has_tracking_token(value)
        assert not has_tracking_token("hero locked-section")
        assert not has_tracking_token(None)

    def test_append_token(self) -> None:
        """Test appending keeps existing tokens and never duplicates."""
        assert append_token(None, "img-slot--a") == "img-slot--a"
        assert append_token("", "img-slot--a") == "img-slot--a"
        assert append_token("rounded", "img-slot--a") == "rounded img-slot--a"
        assert append_token("rounded img-slot--a", "img-slot--a") == "rounded img-slot--a"

    def test_remove_tokens(self) -> None:
        """Test removing tokens and collapsing whitespace."""
        value = "  hero   content-slot--a  locked-section "
        assert remove_tokens(value, lambda t: t == "locked-section") == "hero content-slot--a"
        assert remove_tokens("locked-section", lambda t: True) == ""

    def test_replace_token_matches_whole_tokens(self) -> None:
        """Test that replacement never touches a token merely containing the old one."""
        value = "content-slot--headline content-slot--headline-1"
        assert replace_token(value, "content-slot--headline", "content-slot--headline-2") == (
            "content-slot--headline-2 content-slot--headline-1"
        )


@pytest.mark.unit
class TestDummyContent:
    """Tests for editor stand-in content."""

    def test_known_slot_text(self) -> None:
        """Test the stand-in text of known slots."""
        assert dummy_text_for("headline") == "Your Headline Here"
        assert dummy_text_for("cta-text") == "Click Here"

    def test_unknown_slot_falls_back_to_id(self) -> None:
        """Test that unknown slots show their id."""
        assert dummy_text_for("promo-line") == "promo-line"

    def test_dummy_images(self) -> None:
        """Test the placeholder image picked for each image marker."""
        assert dummy_image_for(ImageMarker("logo")) == PLACEHOLDER_LOGO_IMAGE
        assert dummy_image_for(ImageMarker("hero")) == PLACEHOLDER_IMAGE
        assert dummy_image_for(ProductMarker("a", 0, "image")) == PLACEHOLDER_PRODUCT_IMAGE

    def test_placeholders_contain_no_literal_quotes(self) -> None:
        """Test that placeholder data URIs are safe inside attribute values."""
        for uri in (PLACEHOLDER_IMAGE, PLACEHOLDER_LOGO_IMAGE, PLACEHOLDER_PRODUCT_IMAGE):
            assert "'" not in uri
            assert '"' not in uri
            assert ">" not in uri
