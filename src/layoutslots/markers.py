#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/markers.py
"""Placeholder marker grammar and editor tracking tokens.

Persisted templates reference AI-filled content through placeholder
markers. The literal syntax is shared with the downstream content-filling
service and must match byte for byte::

    {{content:<slotId>}}
    {{image:<slotId>}}
    {{logo}}                                   alias for image:logo
    {{footer}}                                 alias for content:footer
    {{product:<componentId>:<index>:<field>}}  field in name, price, url, image

While a template is open in the editor, markers are replaced by readable
stand-ins and the marker identity is kept as a token inside the element's
``css-class`` attribute::

    content-slot--<slotId>
    img-slot--<slotId>
    product-img-slot--<componentId>--<index>

Matching is always exact: a value that merely contains a marker, or a
marker with characters outside ``[A-Za-z0-9_-]`` in its identifiers, is
ordinary content.

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Union

from layoutslots.constants import (
    CONTENT_TOKEN_PREFIX,
    FOOTER_ALIAS,
    FOOTER_SLOT_ID,
    IMAGE_TOKEN_PREFIX,
    LOGO_ALIAS,
    LOGO_SLOT_ID,
    PLACEHOLDER_IMAGE,
    PLACEHOLDER_LOGO_IMAGE,
    PLACEHOLDER_PRODUCT_IMAGE,
    PRODUCT_FIELDS,
    PRODUCT_IMAGE_TOKEN_PREFIX,
    PRODUCT_TOKEN_SEPARATOR,
    SLOT_DUMMY_TEXT,
    SLOT_ID_PATTERN,
    ProductField,
)
from layoutslots.exceptions import ValidationError

_SLOT_ID_RE = re.compile(SLOT_ID_PATTERN)

CONTENT_MARKER_RE = re.compile(r"\{\{content:(" + SLOT_ID_PATTERN + r")\}\}")
IMAGE_MARKER_RE = re.compile(r"\{\{image:(" + SLOT_ID_PATTERN + r")\}\}")
PRODUCT_MARKER_RE = re.compile(
    r"\{\{product:(" + SLOT_ID_PATTERN + r"):(\d+):(" + "|".join(PRODUCT_FIELDS) + r")\}\}"
)

CONTENT_TOKEN_RE = re.compile(re.escape(CONTENT_TOKEN_PREFIX) + "(" + SLOT_ID_PATTERN + ")")
IMAGE_TOKEN_RE = re.compile(re.escape(IMAGE_TOKEN_PREFIX) + "(" + SLOT_ID_PATTERN + ")")
# Greedy component id: the index is the last "--<digits>" group
PRODUCT_IMAGE_TOKEN_RE = re.compile(
    re.escape(PRODUCT_IMAGE_TOKEN_PREFIX) + "(" + SLOT_ID_PATTERN + ")" + PRODUCT_TOKEN_SEPARATOR + r"(\d+)"
)


def _check_identifier(value: str, name: str) -> None:
    if not isinstance(value, str) or not _SLOT_ID_RE.fullmatch(value):
        raise ValidationError(
            f"{name} must match {SLOT_ID_PATTERN}, got {value!r}", parameter_name=name, parameter_value=value
        )


@dataclass(frozen=True)
class ContentMarker:
    """Textual or button content slot.

    Parameters
    ----------
    slot_id : str
        Case-sensitive slot identifier

    """

    slot_id: str

    def __post_init__(self) -> None:
        """Validate the slot identifier."""
        _check_identifier(self.slot_id, "slot_id")


@dataclass(frozen=True)
class ImageMarker:
    """Image slot; ``slot_id == "logo"`` is the brand logo."""

    slot_id: str

    def __post_init__(self) -> None:
        """Validate the slot identifier."""
        _check_identifier(self.slot_id, "slot_id")

    @property
    def is_logo(self) -> bool:
        """Return True for the logo slot."""
        return self.slot_id == LOGO_SLOT_ID


@dataclass(frozen=True)
class ProductMarker:
    """One field of one product position inside a product block.

    Parameters
    ----------
    component_id : str
        Identifier of the product block
    index : int
        Zero-based product position within the block
    field : {"name", "price", "url", "image"}
        Product attribute the marker stands for

    """

    component_id: str
    index: int
    field: ProductField = "image"

    def __post_init__(self) -> None:
        """Validate component id, index and field."""
        _check_identifier(self.component_id, "component_id")
        if not isinstance(self.index, int) or isinstance(self.index, bool) or self.index < 0:
            raise ValidationError(
                f"index must be a non-negative integer, got {self.index!r}",
                parameter_name="index",
                parameter_value=self.index,
            )
        if self.field not in PRODUCT_FIELDS:
            raise ValidationError(
                f"field must be one of {', '.join(PRODUCT_FIELDS)}, got {self.field!r}",
                parameter_name="field",
                parameter_value=self.field,
            )


Marker = Union[ContentMarker, ImageMarker, ProductMarker]


# ============================================================================
# Marker text
# ============================================================================


def parse_marker(text: str) -> Marker | None:
    """Parse a complete marker string.

    The whole string must be exactly one marker; surrounding text or
    whitespace makes it ordinary content.

    Parameters
    ----------
    text : str
        Candidate marker text

    Returns
    -------
    Marker or None
        The parsed marker, or None on any grammar mismatch

    Examples
    --------
    >>> parse_marker("{{logo}}")
    ImageMarker(slot_id='logo')
    >>> parse_marker("Hello {{content:headline}}") is None
    True

    """
    if text == LOGO_ALIAS:
        return ImageMarker(LOGO_SLOT_ID)
    if text == FOOTER_ALIAS:
        return ContentMarker(FOOTER_SLOT_ID)
    match = CONTENT_MARKER_RE.fullmatch(text)
    if match:
        return ContentMarker(match.group(1))
    match = IMAGE_MARKER_RE.fullmatch(text)
    if match:
        return ImageMarker(match.group(1))
    match = PRODUCT_MARKER_RE.fullmatch(text)
    if match:
        return ProductMarker(match.group(1), int(match.group(2)), match.group(3))  # type: ignore[arg-type]
    return None


def format_marker(marker: Marker) -> str:
    """Return the persisted text of a marker.

    The logo and footer slots serialize to their bare aliases, never to
    ``{{image:logo}}`` or ``{{content:footer}}``.

    """
    if isinstance(marker, ContentMarker):
        if marker.slot_id == FOOTER_SLOT_ID:
            return FOOTER_ALIAS
        return "{{content:" + marker.slot_id + "}}"
    if isinstance(marker, ImageMarker):
        if marker.is_logo:
            return LOGO_ALIAS
        return "{{image:" + marker.slot_id + "}}"
    return "{{product:" + f"{marker.component_id}:{marker.index}:{marker.field}" + "}}"


def parse_content_marker(text: str) -> ContentMarker | None:
    """Parse the trimmed content of a text or button node.

    Only ``{{content:X}}`` and the ``{{footer}}`` alias qualify; product
    markers in text stay literal.
    """
    marker = parse_marker(text.strip())
    return marker if isinstance(marker, ContentMarker) else None


def parse_image_source(src: str) -> ImageMarker | ProductMarker | None:
    """Parse an image ``src`` value that is exactly one image-bearing marker."""
    marker = parse_marker(src)
    if isinstance(marker, ImageMarker):
        return marker
    if isinstance(marker, ProductMarker) and marker.field == "image":
        return marker
    return None


def dummy_text_for(slot_id: str) -> str:
    """Return readable stand-in text for a content slot (slot id for unknown slots)."""
    return SLOT_DUMMY_TEXT.get(slot_id, slot_id)


def dummy_image_for(marker: ImageMarker | ProductMarker) -> str:
    """Return the inline SVG stand-in for an image-bearing marker."""
    if isinstance(marker, ProductMarker):
        return PLACEHOLDER_PRODUCT_IMAGE
    if marker.is_logo:
        return PLACEHOLDER_LOGO_IMAGE
    return PLACEHOLDER_IMAGE


def content_marker_text(slot_id: str) -> str:
    """Return ``{{content:<slot_id>}}`` without alias handling."""
    return "{{content:" + slot_id + "}}"


def image_marker_text(slot_id: str) -> str:
    """Return ``{{image:<slot_id>}}`` without alias handling."""
    return "{{image:" + slot_id + "}}"


def product_marker_prefix(component_id: str) -> str:
    """Return the literal ``{{product:<component_id>:`` prefix shared by a block's markers."""
    return "{{product:" + component_id + ":"


def iter_product_markers(text: str) -> list[ProductMarker]:
    """Return every well-formed product marker embedded anywhere in ``text``."""
    return [
        ProductMarker(m.group(1), int(m.group(2)), m.group(3))  # type: ignore[arg-type]
        for m in PRODUCT_MARKER_RE.finditer(text)
    ]


# ============================================================================
# Tracking tokens
# ============================================================================


def content_token(slot_id: str) -> str:
    """Return the tracking token for a content slot."""
    return CONTENT_TOKEN_PREFIX + slot_id


def image_token(slot_id: str) -> str:
    """Return the tracking token for an image slot."""
    return IMAGE_TOKEN_PREFIX + slot_id


def product_image_token(component_id: str, index: int) -> str:
    """Return the tracking token for a product image position."""
    return f"{PRODUCT_IMAGE_TOKEN_PREFIX}{component_id}{PRODUCT_TOKEN_SEPARATOR}{index}"


def product_token_prefix(component_id: str) -> str:
    """Return the token prefix shared by every image position of a product block."""
    return PRODUCT_IMAGE_TOKEN_PREFIX + component_id + PRODUCT_TOKEN_SEPARATOR


def tracking_token_for(marker: Marker) -> str:
    """Return the tracking token recording ``marker``'s identity."""
    if isinstance(marker, ContentMarker):
        return content_token(marker.slot_id)
    if isinstance(marker, ImageMarker):
        return image_token(marker.slot_id)
    return product_image_token(marker.component_id, marker.index)


def parse_tracking_token(token: str) -> Marker | None:
    """Parse a single tracking token back into the marker identity it records.

    Product tokens yield a ``ProductMarker`` with ``field="image"``.
    Anything else (including ``locked-section`` and user classes) yields None.
    """
    match = PRODUCT_IMAGE_TOKEN_RE.fullmatch(token)
    if match:
        return ProductMarker(match.group(1), int(match.group(2)), "image")
    match = IMAGE_TOKEN_RE.fullmatch(token)
    if match:
        return ImageMarker(match.group(1))
    match = CONTENT_TOKEN_RE.fullmatch(token)
    if match:
        return ContentMarker(match.group(1))
    return None


def split_tokens(value: str | None) -> list[str]:
    """Split a multi-value class attribute into tokens."""
    return value.split() if value else []


def tracking_markers(value: str | None) -> list[Marker]:
    """Return the identities recorded by every tracking token in ``value``."""
    markers = []
    for token in split_tokens(value):
        marker = parse_tracking_token(token)
        if marker is not None:
            markers.append(marker)
    return markers


def has_tracking_token(value: str | None) -> bool:
    """Return True if ``value`` contains any slot tracking token."""
    return bool(tracking_markers(value))


def append_token(value: str | None, token: str) -> str:
    """Append ``token`` to a class attribute value, separated by one space.

    Existing tokens are preserved as written; nothing is appended twice.
    """
    if not value:
        return token
    if token in split_tokens(value):
        return value
    return f"{value} {token}"


def remove_tokens(value: str | None, predicate: Callable[[str], bool]) -> str:
    """Drop every token matching ``predicate`` and collapse whitespace.

    Returns an empty string when nothing is left; callers drop the
    attribute in that case.
    """
    return " ".join(token for token in split_tokens(value) if not predicate(token))


def replace_token(value: str | None, old: str, new: str) -> str:
    """Replace whole-token occurrences of ``old`` by ``new``."""
    return " ".join(new if token == old else token for token in split_tokens(value))
