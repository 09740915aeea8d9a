#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/transforms/forward.py
"""Persisted template to editable document transform.

A persisted template carries placeholder markers where AI-filled content
will go. Before it is shown in the visual editor every marker is swapped
for a readable stand-in, and the marker identity is recorded as a tracking
token in the element's ``css-class`` attribute:

- ``mj-image`` whose ``src`` is exactly ``{{logo}}``, ``{{image:X}}`` or
  ``{{product:C:I:image}}`` gets an inline SVG placeholder and the token
  ``img-slot--X`` (``img-slot--logo``) or ``product-img-slot--C--I``
- ``mj-text`` / ``mj-button`` whose whole trimmed content is
  ``{{content:X}}`` or ``{{footer}}`` gets dummy text and the token
  ``content-slot--X``

Product name, price and url markers stay literal. Elements already
carrying a tracking token are left alone, so running the transform on
editable content changes nothing.

Examples
--------
    >>> to_editable('<mj-image src="{{image:hero-banner}}" alt="Hero" />')  # doctest: +ELLIPSIS
    '<mj-image src="data:image/svg+xml,..." alt="Hero" css-class="img-slot--hero-banner" />'

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from layoutslots.ast import Document, Element, Node, NodeTransformer, Text
from layoutslots.constants import CONTENT_TAGS, IMAGE_TAG, SOURCE_ATTRIBUTE, TRACKING_ATTRIBUTE
from layoutslots.exceptions import TransformError
from layoutslots.markers import (
    append_token,
    content_token,
    dummy_image_for,
    dummy_text_for,
    has_tracking_token,
    parse_content_marker,
    parse_image_source,
    tracking_token_for,
)
from layoutslots.options.mjml import MjmlParserOptions, MjmlRendererOptions
from layoutslots.parsers.mjml import MjmlParser
from layoutslots.renderers.mjml import MjmlRenderer
from layoutslots.utils.decorators import debug_timer

logger = logging.getLogger(__name__)


class EditablePlaceholderTransform(NodeTransformer):
    """Replace placeholder markers with editor stand-ins and tracking tokens.

    The input tree is not modified.

    Attributes
    ----------
    converted_images : int
        Number of image sources replaced during the last ``transform`` call
    converted_content : int
        Number of text and button contents replaced

    """

    def __init__(self) -> None:
        """Initialize the transform counters."""
        self.converted_images = 0
        self.converted_content = 0

    def transform(self, node: Node) -> Node | None:
        """Transform a node, resetting counters when called on a Document."""
        if isinstance(node, Document):
            self.converted_images = 0
            self.converted_content = 0
        return super().transform(node)

    def visit_element(self, node: Element) -> Element:
        """Convert marker-bearing image, text and button elements."""
        result: Element = self._generic_transform(node)  # type: ignore[assignment]
        if has_tracking_token(result.get(TRACKING_ATTRIBUTE)):
            return result

        if result.tag == IMAGE_TAG:
            self._convert_image(result)
        elif result.tag in CONTENT_TAGS:
            self._convert_content(result)
        return result

    def _convert_image(self, element: Element) -> None:
        src = element.get(SOURCE_ATTRIBUTE)
        if src is None:
            return
        marker = parse_image_source(src)
        if marker is None:
            return
        element.set(SOURCE_ATTRIBUTE, dummy_image_for(marker))
        element.set(TRACKING_ATTRIBUTE, append_token(element.get(TRACKING_ATTRIBUTE), tracking_token_for(marker)))
        self.converted_images += 1

    def _convert_content(self, element: Element) -> None:
        # Content with nested markup is never a bare marker
        if not all(isinstance(child, Text) for child in element.children):
            return
        raw = "".join(child.content for child in element.children)  # type: ignore[union-attr]
        marker = parse_content_marker(raw)
        if marker is None:
            return
        element.children = [Text(content=dummy_text_for(marker.slot_id))]
        element.set(TRACKING_ATTRIBUTE, append_token(element.get(TRACKING_ATTRIBUTE), content_token(marker.slot_id)))
        element.affordances.editable = False
        element.affordances.copyable = False
        self.converted_content += 1


def to_editable_document(
    markup: Union[str, bytes, Path, Document],
    parser_options: MjmlParserOptions | None = None,
) -> Document:
    """Parse persisted markup and return the editable Document.

    Parameters
    ----------
    markup : str, bytes, Path or Document
        Persisted template markup, or an already parsed tree (left unmodified)
    parser_options : MjmlParserOptions, optional
        Options for parsing string input

    Returns
    -------
    Document
        New tree with markers replaced by stand-ins

    """
    document = markup if isinstance(markup, Document) else MjmlParser(parser_options).parse(markup)
    transform = EditablePlaceholderTransform()
    with debug_timer(logger, "Forward transform"):
        result = transform.transform(document)
    logger.debug(
        "Converted %d image slot(s) and %d content slot(s) to editor form",
        transform.converted_images,
        transform.converted_content,
    )
    if not isinstance(result, Document):
        raise TransformError(
            f"Forward transform returned {type(result).__name__} instead of a Document",
            transform_name=type(transform).__name__,
        )
    return result


def to_editable(
    markup: Union[str, bytes, Path, Document],
    parser_options: MjmlParserOptions | None = None,
    renderer_options: MjmlRendererOptions | None = None,
) -> str:
    """Convert persisted markup to editor markup.

    Examples
    --------
        >>> to_editable("<mj-text>{{content:headline}}</mj-text>")
        '<mj-text css-class="content-slot--headline">Your Headline Here</mj-text>'

    """
    return MjmlRenderer(renderer_options).render_to_string(to_editable_document(markup, parser_options))
