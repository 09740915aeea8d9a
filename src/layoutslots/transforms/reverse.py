#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/transforms/reverse.py
"""Editable document to persisted template transform.

The reverse direction keys off tracking tokens only; text and sources the
editor shows are never inspected, so dummy text a user typed by hand is
not mistaken for a slot. For each tracked element:

- ``img-slot--X`` on an ``mj-image``: the element is rebuilt with
  ``src="{{image:X}}"`` (``{{logo}}`` when X is ``logo``) and only known
  image attributes
- ``product-img-slot--C--I`` on an ``mj-image``: rebuilt with
  ``src="{{product:C:I:image}}"``
- ``content-slot--X`` on an ``mj-text`` / ``mj-button``: content becomes
  ``{{content:X}}`` (``{{footer}}`` when X is ``footer``)

Tracking tokens and the session-only ``locked-section`` token are removed
from ``css-class``; the attribute is dropped when nothing is left.
Untracked elements keep the user's edits. The rendered result finally goes
through :func:`~layoutslots.reconstruct.repair_corrupted_images`.

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from layoutslots.ast import Document, Element, Node, NodeTransformer, Text
from layoutslots.constants import (
    CONTENT_TAGS,
    IMAGE_TAG,
    SESSION_ONLY_TOKENS,
    SOURCE_ATTRIBUTE,
    TRACKING_ATTRIBUTE,
)
from layoutslots.exceptions import TransformError
from layoutslots.markers import (
    ContentMarker,
    ImageMarker,
    ProductMarker,
    format_marker,
    parse_tracking_token,
    remove_tokens,
    tracking_markers,
)
from layoutslots.options.mjml import MjmlParserOptions, MjmlRendererOptions
from layoutslots.parsers.mjml import MjmlParser
from layoutslots.reconstruct import build_image_node, extract_mjml_root, repair_corrupted_images, repair_tag_spacing
from layoutslots.renderers.mjml import MjmlRenderer
from layoutslots.utils.decorators import debug_timer

logger = logging.getLogger(__name__)


def _is_session_token(token: str) -> bool:
    return token in SESSION_ONLY_TOKENS or parse_tracking_token(token) is not None


def strip_session_tokens(element: Element) -> None:
    """Remove tracking and session-only tokens from an element in place."""
    value = element.get(TRACKING_ATTRIBUTE)
    if value is None:
        return
    cleaned = remove_tokens(value, _is_session_token)
    if cleaned:
        element.set(TRACKING_ATTRIBUTE, cleaned)
    else:
        element.remove(TRACKING_ATTRIBUTE)


class PersistedMarkerTransform(NodeTransformer):
    """Restore exact placeholder markers from tracking tokens.

    The input tree is not modified.
    """

    def __init__(self) -> None:
        """Initialize the transform counters."""
        self.restored_images = 0
        self.restored_content = 0

    def transform(self, node: Node) -> Node | None:
        """Transform a node, resetting counters when called on a Document."""
        if isinstance(node, Document):
            self.restored_images = 0
            self.restored_content = 0
        return super().transform(node)

    def visit_element(self, node: Element) -> Element:
        """Rebuild tracked elements and strip session tokens from all others."""
        result: Element = self._generic_transform(node)  # type: ignore[assignment]
        markers = tracking_markers(result.get(TRACKING_ATTRIBUTE))
        strip_session_tokens(result)

        if result.tag == IMAGE_TAG:
            image_marker = next((m for m in markers if isinstance(m, (ImageMarker, ProductMarker))), None)
            if image_marker is not None:
                self.restored_images += 1
                rebuilt = build_image_node(format_marker(image_marker), result.attributes)
                rebuilt.affordances = result.affordances
                rebuilt.metadata = result.metadata
                return rebuilt
        elif result.tag in CONTENT_TAGS:
            content_marker = next((m for m in markers if isinstance(m, ContentMarker)), None)
            if content_marker is not None:
                self.restored_content += 1
                result.children = [Text(content=format_marker(content_marker))]
        return result


def _prepare_editor_markup(markup: str) -> str:
    return extract_mjml_root(repair_tag_spacing(markup))


def to_persisted_document(
    markup: Union[str, bytes, Path, Document],
    parser_options: MjmlParserOptions | None = None,
) -> Document:
    """Return the persisted tree for editor markup or an editable Document.

    String input is first repaired (tag spacing, wrapper markup) before it
    is parsed. A Document argument is left unmodified.

    Parameters
    ----------
    markup : str, bytes, Path or Document
        Serialized editor markup or the editable tree
    parser_options : MjmlParserOptions, optional
        Options for parsing string input

    Returns
    -------
    Document
        New tree carrying placeholder markers

    """
    if isinstance(markup, Document):
        document = markup
    else:
        text = MjmlParser._load_text(markup)
        document = MjmlParser(parser_options).parse(_prepare_editor_markup(text))

    transform = PersistedMarkerTransform()
    with debug_timer(logger, "Reverse transform"):
        result = transform.transform(document)
    logger.debug(
        "Restored %d image slot(s) and %d content slot(s) to markers",
        transform.restored_images,
        transform.restored_content,
    )
    if not isinstance(result, Document):
        raise TransformError(
            f"Reverse transform returned {type(result).__name__} instead of a Document",
            transform_name=type(transform).__name__,
        )
    return result


def to_persisted(
    markup: Union[str, bytes, Path, Document],
    parser_options: MjmlParserOptions | None = None,
    renderer_options: MjmlRendererOptions | None = None,
) -> str:
    """Convert editor markup (or an editable Document) to persisted markup.

    Parameters
    ----------
    markup : str, bytes, Path or Document
        Serialized editor markup or the editable tree
    parser_options : MjmlParserOptions, optional
        Options for parsing string input
    renderer_options : MjmlRendererOptions, optional
        Options for rendering the result

    Returns
    -------
    str
        Persisted markup, after the corrupted-image safety net

    Notes
    -----
    Character references in user content are decoded by the parser and
    re-escaped minimally by the renderer, so ``&copy;`` and ``&nbsp;`` come
    back as the literal characters and a bare ``&`` in an attribute comes
    back as ``&amp;``. The result is equivalent markup, not a byte copy.

    Examples
    --------
        >>> to_persisted('<mj-image src="data:image/svg+xml,x" css-class="img-slot--logo" />')
        '<mj-image src="{{logo}}" />'

    """
    document = to_persisted_document(markup, parser_options)
    rendered = MjmlRenderer(renderer_options).render_to_string(document)
    return repair_corrupted_images(rendered)
