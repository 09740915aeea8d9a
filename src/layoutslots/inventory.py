#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/inventory.py
"""Slot inventory of a template.

Lists the content slots, image slots and product components a template
declares. Both representations are understood: persisted markup carrying
``{{...}}`` markers and editor markup carrying tracking tokens.

Examples
--------
    >>> inventory = collect_slots('<mj-column><mj-text>{{content:headline}}</mj-text>'
    ...                           '<mj-image src="{{logo}}" /></mj-column>')
    >>> inventory.content_slots, inventory.image_slots
    (['headline'], ['logo'])

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator, Union

from layoutslots.ast import Document, Element, Text, iter_elements
from layoutslots.constants import CONTENT_TAGS, IMAGE_TAG, LINK_ATTRIBUTE, SOURCE_ATTRIBUTE, TRACKING_ATTRIBUTE
from layoutslots.markers import (
    ContentMarker,
    ImageMarker,
    Marker,
    ProductMarker,
    iter_product_markers,
    parse_content_marker,
    parse_image_source,
    tracking_markers,
)
from layoutslots.options.mjml import MjmlParserOptions
from layoutslots.parsers.mjml import MjmlParser

logger = logging.getLogger(__name__)


def _direct_text(element: Element) -> str | None:
    if not all(isinstance(child, Text) for child in element.children):
        return None
    return "".join(child.content for child in element.children)  # type: ignore[union-attr]


def _marker_fields(element: Element) -> Iterator[str]:
    for name in (SOURCE_ATTRIBUTE, LINK_ATTRIBUTE):
        value = element.get(name)
        if value:
            yield value
    for child in element.children:
        if isinstance(child, Text):
            yield child.content


def element_identities(element: Element) -> list[Marker]:
    """Return the slot identities an element carries.

    Tracking tokens come first. Without tokens, a text or button whose whole
    content is a content marker and an image whose ``src`` is an image
    marker count as well. Product markers embedded in direct text, ``src``
    or ``href`` are always included.
    """
    identities: list[Marker] = list(tracking_markers(element.get(TRACKING_ATTRIBUTE)))
    if not identities:
        if element.tag in CONTENT_TAGS:
            text = _direct_text(element)
            content = parse_content_marker(text) if text is not None else None
            if content is not None:
                identities.append(content)
        elif element.tag == IMAGE_TAG:
            image = parse_image_source(element.get(SOURCE_ATTRIBUTE) or "")
            if isinstance(image, ImageMarker):
                identities.append(image)
    for value in _marker_fields(element):
        identities.extend(iter_product_markers(value))
    return identities


def identity_key(marker: Marker) -> str:
    """Return a string key for a slot identity (``content:X``, ``image:X``, ``product:C:I:field``).

    An image token of a product block is keyed with field ``image``.
    """
    if isinstance(marker, ContentMarker):
        return f"content:{marker.slot_id}"
    if isinstance(marker, ImageMarker):
        return f"image:{marker.slot_id}"
    return f"product:{marker.component_id}:{marker.index}:{marker.field}"


def max_product_index(elements: Iterable[Element], component_id: str) -> int:
    """Return the highest product position used by a component (0 when unused)."""
    highest = 0
    for element in elements:
        for marker in element_identities(element):
            if isinstance(marker, ProductMarker) and marker.component_id == component_id:
                highest = max(highest, marker.index)
    return highest


@dataclass
class SlotInventory:
    """Slots declared by a template, in order of first appearance.

    Parameters
    ----------
    content_slots : list of str
        Content slot ids (``footer`` for ``{{footer}}``)
    image_slots : list of str
        Image slot ids (``logo`` for ``{{logo}}``)
    product_components : dict of str to list of int
        Product component id to the sorted positions it uses

    """

    content_slots: list[str] = field(default_factory=list)
    image_slots: list[str] = field(default_factory=list)
    product_components: dict[str, list[int]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """Return True when the template declares no slots."""
        return not (self.content_slots or self.image_slots or self.product_components)

    def max_products(self, component_id: str) -> int:
        """Return the number of product positions of a component (highest index + 1)."""
        positions = self.product_components.get(component_id)
        return max(positions) + 1 if positions else 0

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "content": list(self.content_slots),
            "image": list(self.image_slots),
            "product": {key: list(value) for key, value in self.product_components.items()},
        }


def collect_slots(
    source: Union[str, bytes, Path, Document, Element],
    parser_options: MjmlParserOptions | None = None,
) -> SlotInventory:
    """Collect the slot inventory of persisted or editor markup.

    Parameters
    ----------
    source : str, bytes, Path, Document or Element
        Markup or an already parsed tree
    parser_options : MjmlParserOptions, optional
        Options for parsing markup input

    Returns
    -------
    SlotInventory
        Slots in order of first appearance

    """
    root = source if isinstance(source, (Document, Element)) else MjmlParser(parser_options).parse(source)
    inventory = SlotInventory()
    for element in iter_elements(root):
        for marker in element_identities(element):
            if isinstance(marker, ContentMarker):
                if marker.slot_id not in inventory.content_slots:
                    inventory.content_slots.append(marker.slot_id)
            elif isinstance(marker, ImageMarker):
                if marker.slot_id not in inventory.image_slots:
                    inventory.image_slots.append(marker.slot_id)
            else:
                positions = inventory.product_components.setdefault(marker.component_id, [])
                if marker.index not in positions:
                    positions.append(marker.index)
    for positions in inventory.product_components.values():
        positions.sort()
    logger.debug(
        "Collected %d content, %d image and %d product slot group(s)",
        len(inventory.content_slots),
        len(inventory.image_slots),
        len(inventory.product_components),
    )
    return inventory
