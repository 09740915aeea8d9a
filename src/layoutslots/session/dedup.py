#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/session/dedup.py
"""Slot deduplication for inserted blocks.

Every slot identity must be unique across a document: if two nodes both
record ``content-slot--headline`` the content-filling step writes both with
the same text. When a block is inserted, the identities it carries are
compared with the rest of the document and the *inserted* copies are
renamed; pre-existing nodes are never touched.

Naming
------
If identity ``X`` occurs ``k`` times counting the node being checked, that
node is renamed to ``X-(k-1)``; when that name is already used anywhere in
the document the ordinal is bumped to the next free one. A second headline
therefore becomes ``headline-1`` and a third ``headline-2``.

Counting
--------
Occurrences are counted on the markup surface of each element (its start
tag and direct text), not on parsed identities:

- content slots: every ``content-slot--X`` substring (no trailing boundary,
  so ``content-slot--headline-1`` also counts towards ``headline``) plus
  every literal ``{{content:X}}``
- image slots: ``img-slot--X`` followed by a quote or whitespace
- product blocks: one occurrence per top-level section that mentions
  ``{{product:C:`` or ``product-img-slot--C--`` outside the inserted
  subtree, plus one for the inserted block

Content and image identities are checked node by node in document order,
so two icons inside one inserted block are told apart as well. Product
blocks are renamed at the component level; positional indexes are kept.

"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from layoutslots.ast import Document, Element, NodePath, Text, iter_elements, node_path
from layoutslots.constants import (
    CONTENT_TOKEN_PREFIX,
    LINK_ATTRIBUTE,
    SOURCE_ATTRIBUTE,
    TRACKING_ATTRIBUTE,
    SlotKind,
)
from layoutslots.markers import (
    ContentMarker,
    ImageMarker,
    ProductMarker,
    content_marker_text,
    content_token,
    image_token,
    parse_tracking_token,
    product_image_token,
    product_marker_prefix,
    product_token_prefix,
    replace_token,
    split_tokens,
)
from layoutslots.inventory import element_identities, identity_key, max_product_index
from layoutslots.renderers.mjml import escape_attribute
from layoutslots.utils.text import make_ordinal_name

logger = logging.getLogger(__name__)

# Top-level rows used when counting product blocks
PRODUCT_COUNT_UNIT_TAGS = frozenset({"mj-section", "mj-hero"})


@dataclass(frozen=True)
class SlotRename:
    """One identity renamed by the deduplicator.

    Parameters
    ----------
    kind : {"content", "image", "product"}
        Identity kind
    old : str
        Identity before renaming (slot id or product component id)
    new : str
        Identity after renaming
    node_path : tuple of int or None
        Child-index path of the renamed node (the inserted root for products)

    """

    kind: SlotKind
    old: str
    new: str
    node_path: NodePath | None = None


@dataclass(frozen=True)
class PendingProductSelection:
    """A product block waiting for the user to pick catalog products.

    Parameters
    ----------
    component_id : str
        Product component id after deduplication
    max_products : int
        Number of product positions in the block (highest index + 1)

    """

    component_id: str
    max_products: int


@dataclass
class DedupResult:
    """Outcome of processing one insertion."""

    renames: list[SlotRename] = field(default_factory=list)
    product_selection: PendingProductSelection | None = None

    @property
    def changed(self) -> bool:
        """Return True if any identity was renamed."""
        return bool(self.renames)


def node_fragment(element: Element) -> str:
    """Return the surface text scanned for one element: start tag plus direct text."""
    parts = ["<", element.tag]
    for name, value in element.attributes.items():
        parts.append(f' {name}="{escape_attribute(value)}"')
    parts.append(">")
    parts.extend(child.content for child in element.children if isinstance(child, Text))
    return "".join(parts)


def find_duplicate_identities(document: Document | Element) -> dict[str, int]:
    """Return identities carried by more than one node, with their node counts.

    An empty result means the document satisfies the uniqueness invariant.

    Examples
    --------
        >>> from layoutslots.parsers.mjml import parse_mjml
        >>> doc = parse_mjml('<mj-column><mj-text css-class="content-slot--a">A</mj-text>'
        ...                  '<mj-text css-class="content-slot--a">A</mj-text></mj-column>')
        >>> find_duplicate_identities(doc)
        {'content:a': 2}

    """
    counts: Counter[str] = Counter()
    for element in iter_elements(document):
        for key in {identity_key(marker) for marker in element_identities(element)}:
            counts[key] += 1
    return {key: count for key, count in counts.items() if count > 1}


def _used_names(elements: Iterable[Element]) -> set[tuple[str, str]]:
    used: set[tuple[str, str]] = set()
    for element in elements:
        for marker in element_identities(element):
            if isinstance(marker, ContentMarker):
                used.add(("content", marker.slot_id))
            elif isinstance(marker, ImageMarker):
                used.add(("image", marker.slot_id))
            else:
                used.add(("product", marker.component_id))
    return used


def _image_count_pattern(slot_id: str) -> re.Pattern[str]:
    return re.compile(r"\b" + re.escape(image_token(slot_id)) + r"(?=[\"\s])")


def count_content_occurrences(slot_id: str, fragments: Iterable[str]) -> int:
    """Count surface occurrences of a content slot across fragments."""
    token = CONTENT_TOKEN_PREFIX + slot_id
    marker = content_marker_text(slot_id)
    return sum(fragment.count(token) + fragment.count(marker) for fragment in fragments)


def count_image_occurrences(slot_id: str, fragments: Iterable[str]) -> int:
    """Count surface occurrences of an image slot token across fragments."""
    pattern = _image_count_pattern(slot_id)
    return sum(len(pattern.findall(fragment)) for fragment in fragments)


class SlotDeduplicator:
    """Rename duplicated slot identities inside a freshly inserted subtree.

    Examples
    --------
        >>> dedup = SlotDeduplicator()
        >>> result = dedup.process(document, inserted_section)
        >>> [(r.old, r.new) for r in result.renames]
        [('headline', 'headline-1')]

    """

    def process(self, document: Document, inserted: Element) -> DedupResult:
        """Deduplicate the identities of ``inserted`` against ``document`` in place.

        Parameters
        ----------
        document : Document
            Whole document; ``inserted`` must already be attached to it
        inserted : Element
            Root of the inserted subtree

        Returns
        -------
        DedupResult
            Renames applied, and the product block awaiting selection if the
            subtree holds product markers

        """
        result = DedupResult()
        subtree = list(inserted.iter_elements())
        subtree_ids = {id(element) for element in subtree}
        outside = [element for element in iter_elements(document) if id(element) not in subtree_ids]
        used = _used_names(iter_elements(document))

        self._dedup_products(document, inserted, subtree, subtree_ids, used, result)
        self._dedup_slots(document, subtree, outside, used, result)

        for rename in result.renames:
            logger.debug("Renamed duplicated %s slot %r to %r", rename.kind, rename.old, rename.new)
        return result

    # ------------------------------------------------------------------
    # Content and image slots
    # ------------------------------------------------------------------

    def _dedup_slots(
        self,
        document: Document,
        subtree: list[Element],
        outside: list[Element],
        used: set[tuple[str, str]],
        result: DedupResult,
    ) -> None:
        outside_fragments = [node_fragment(element) for element in outside]
        for position, element in enumerate(subtree):
            for marker in element_identities(element):
                if isinstance(marker, ProductMarker):
                    continue
                processed = [node_fragment(e) for e in subtree[: position + 1]]
                fragments = outside_fragments + processed
                if isinstance(marker, ContentMarker):
                    kind: SlotKind = "content"
                    count = count_content_occurrences(marker.slot_id, fragments)
                else:
                    kind = "image"
                    count = count_image_occurrences(marker.slot_id, fragments)
                if count <= 1:
                    continue

                new_id = make_ordinal_name(marker.slot_id, count - 1, lambda name: (kind, name) in used)
                if kind == "content":
                    self._rename_content(element, marker.slot_id, new_id)
                else:
                    self._rename_image(element, marker.slot_id, new_id)
                used.add((kind, new_id))
                result.renames.append(SlotRename(kind, marker.slot_id, new_id, node_path(document, element)))

    @staticmethod
    def _rename_content(element: Element, old: str, new: str) -> None:
        value = element.get(TRACKING_ATTRIBUTE)
        if value is not None:
            element.set(TRACKING_ATTRIBUTE, replace_token(value, content_token(old), content_token(new)))
        old_marker, new_marker = content_marker_text(old), content_marker_text(new)
        for child in element.children:
            if isinstance(child, Text) and old_marker in child.content:
                child.content = child.content.replace(old_marker, new_marker)

    @staticmethod
    def _rename_image(element: Element, old: str, new: str) -> None:
        value = element.get(TRACKING_ATTRIBUTE)
        if value is not None and image_token(old) in split_tokens(value):
            element.set(TRACKING_ATTRIBUTE, replace_token(value, image_token(old), image_token(new)))
            return
        src = element.get(SOURCE_ATTRIBUTE)
        if src is not None:
            element.set(SOURCE_ATTRIBUTE, src.replace("{{image:" + old + "}}", "{{image:" + new + "}}"))

    # ------------------------------------------------------------------
    # Product blocks
    # ------------------------------------------------------------------

    def _dedup_products(
        self,
        document: Document,
        inserted: Element,
        subtree: list[Element],
        subtree_ids: set[int],
        used: set[tuple[str, str]],
        result: DedupResult,
    ) -> None:
        components = _product_components(subtree)
        if not components:
            return

        units = list(_count_units(document))
        for component_id in components:
            outside_count = sum(
                1 for unit in units if _unit_mentions(unit, component_id, subtree_ids)
            )
            final_id = component_id
            if outside_count > 0:
                final_id = make_ordinal_name(component_id, outside_count, lambda name: ("product", name) in used)
                for element in subtree:
                    _rename_product(element, component_id, final_id)
                used.add(("product", final_id))
                result.renames.append(SlotRename("product", component_id, final_id, node_path(document, inserted)))

            if result.product_selection is None:
                result.product_selection = PendingProductSelection(
                    final_id, max_product_index(subtree, final_id) + 1
                )


def _product_components(elements: Iterable[Element]) -> list[str]:
    components: list[str] = []
    for element in elements:
        for marker in element_identities(element):
            if isinstance(marker, ProductMarker) and marker.component_id not in components:
                components.append(marker.component_id)
    return components


def _count_units(root: Document | Element) -> Iterator[Element]:
    children = root.children
    for child in children:
        if not isinstance(child, Element):
            continue
        if child.tag in PRODUCT_COUNT_UNIT_TAGS:
            yield child
        else:
            yield from _count_units(child)


def _unit_mentions(unit: Element, component_id: str, excluded: set[int]) -> bool:
    marker_prefix = product_marker_prefix(component_id)
    token_prefix = product_token_prefix(component_id)
    for element in unit.iter_elements():
        if id(element) in excluded:
            continue
        fragment = node_fragment(element)
        if marker_prefix in fragment or token_prefix in fragment:
            return True
    return False


def _rename_product(element: Element, old: str, new: str) -> None:
    old_prefix, new_prefix = product_marker_prefix(old), product_marker_prefix(new)
    for name in (SOURCE_ATTRIBUTE, LINK_ATTRIBUTE):
        value = element.get(name)
        if value and old_prefix in value:
            element.set(name, value.replace(old_prefix, new_prefix))
    for child in element.children:
        if isinstance(child, Text) and old_prefix in child.content:
            child.content = child.content.replace(old_prefix, new_prefix)

    value = element.get(TRACKING_ATTRIBUTE)
    if value is None:
        return
    tokens = []
    for token in split_tokens(value):
        marker = parse_tracking_token(token)
        if isinstance(marker, ProductMarker) and marker.component_id == old:
            token = product_image_token(new, marker.index)
        tokens.append(token)
    element.set(TRACKING_ATTRIBUTE, " ".join(tokens))
