#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/reconstruct.py
"""Recovery helpers for image markup mangled by the visual editor.

Placeholder images are inline SVG data URIs. When the editor serializes a
document it does not always keep their quoting intact, and fragments of the
SVG (``width='600'``, ``fill='%23E5E7EB'`` and so on) end up as stray
attributes of the surrounding ``mj-image`` tag. Replacing only the ``src``
value of such a tag leaves the garbage in place, so image tags are rebuilt
from scratch instead: the known ``mj-image`` attributes are recovered with a
text scan in which the *last* occurrence of each name wins, and a minimal tag
is emitted from them.

The module also holds the two textual clean-ups applied to editor output
before it is parsed: restoring the space the editor drops between a tag
name and its first attribute, and cutting away wrapper markup around the
``<mjml>`` root.

"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Mapping

from layoutslots.ast.nodes import Element
from layoutslots.constants import IMAGE_TAG, MJML_SERIALIZED_TAG_NAMES, SOURCE_ATTRIBUTE, SVG_DATA_URI_PREFIX

logger = logging.getLogger(__name__)

# Known mj-image attributes; ``src`` is excluded because it is always set explicitly
VALID_IMAGE_ATTRIBUTES: tuple[str, ...] = (
    "alt",
    "width",
    "height",
    "padding",
    "padding-top",
    "padding-right",
    "padding-bottom",
    "padding-left",
    "align",
    "border",
    "border-radius",
    "container-background-color",
    "css-class",
    "fluid-on-mobile",
    "href",
    "rel",
    "target",
    "title",
    "name",
    "srcset",
    "sizes",
)

IMAGE_TAG_RE = re.compile(r"<mj-image\b[^>]*?/?>", re.IGNORECASE)

_TAG_SPACING_RE = re.compile(
    "(<(?:" + "|".join(re.escape(name) for name in MJML_SERIALIZED_TAG_NAMES) + "))([a-z])"
)

_ROOT_OPEN = "<mjml"
_ROOT_CLOSE = "</mjml>"


def extract_attributes(raw: str, allowed: Iterable[str] = VALID_IMAGE_ATTRIBUTES) -> dict[str, str]:
    """Recover quoted attribute values from possibly malformed tag text.

    Every ``name="value"`` (or single-quoted) assignment of an allowed name
    is scanned; the last one wins so genuine attributes written after a
    leaked fragment take precedence over it. The result is ordered by the
    position of each winning occurrence.

    Parameters
    ----------
    raw : str
        Raw tag text, e.g. ``<mj-image src="..." alt="x" />``
    allowed : iterable of str
        Attribute names to recover

    Returns
    -------
    dict
        Recovered attributes

    Examples
    --------
    >>> extract_attributes('<mj-image alt="a" width="1" alt="b" />', ["alt", "width"])
    {'width': '1', 'alt': 'b'}

    """
    winners: dict[str, tuple[int, str]] = {}
    for name in allowed:
        pattern = re.compile(r"\b" + re.escape(name) + r"=[\"']([^\"']*?)[\"']")
        for match in pattern.finditer(raw):
            winners[name] = (match.start(), match.group(1))
    ordered = sorted(winners.items(), key=lambda item: item[1][0])
    return {name: value for name, (_, value) in ordered}


def build_image_tag(src: str, attributes: Mapping[str, str]) -> str:
    """Emit a minimal ``mj-image`` tag: ``src`` first, then the given attributes."""
    parts = [f'<mj-image {SOURCE_ATTRIBUTE}="{src}"']
    for name, value in attributes.items():
        parts.append(f'{name}="{value}"')
    return " ".join(parts) + " />"


def build_image_node(src: str, attributes: Mapping[str, str]) -> Element:
    """Build a clean ``mj-image`` element keeping only known attributes.

    Parameters
    ----------
    src : str
        New source value (a marker, or empty)
    attributes : mapping
        Candidate attributes; names outside ``VALID_IMAGE_ATTRIBUTES`` and
        ``src`` itself are dropped, the rest keep their order

    Returns
    -------
    Element
        A childless image element

    """
    clean = {SOURCE_ATTRIBUTE: src}
    for name, value in attributes.items():
        if name in VALID_IMAGE_ATTRIBUTES:
            clean[name] = value
    return Element(tag=IMAGE_TAG, attributes=clean)


def repair_corrupted_images(markup: str) -> str:
    """Rebuild every image tag that still carries an inline SVG source.

    Runs as the last step of serialization. Any ``mj-image`` whose tag text
    contains an SVG data URI at this point either lost its tracking token
    or was mangled; its source is blanked and only recovered attributes are
    kept. Repairs are logged, never raised.

    """

    def _repair(match: re.Match[str]) -> str:
        tag = match.group(0)
        if SVG_DATA_URI_PREFIX not in tag:
            return tag
        attributes = extract_attributes(tag, VALID_IMAGE_ATTRIBUTES)
        logger.warning("Rebuilt image tag carrying a placeholder data URI (kept: %s)", ", ".join(attributes) or "none")
        return build_image_tag("", attributes)

    return IMAGE_TAG_RE.sub(_repair, markup)


def repair_tag_spacing(markup: str) -> str:
    """Restore the space between a tag name and its first attribute.

    Examples
    --------
    >>> repair_tag_spacing('<mj-textfont-size="17px">Hi</mj-text>')
    '<mj-text font-size="17px">Hi</mj-text>'

    """
    return _TAG_SPACING_RE.sub(r"\1 \2", markup)


def extract_mjml_root(markup: str) -> str:
    """Return the ``<mjml>...</mjml>`` span of ``markup``, or ``markup`` unchanged."""
    start = markup.find(_ROOT_OPEN)
    end = markup.rfind(_ROOT_CLOSE)
    if start == -1 or end == -1 or end < start:
        return markup
    return markup[start : end + len(_ROOT_CLOSE)]
