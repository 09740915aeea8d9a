#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/session/locking.py
"""Locking of reserved header and footer regions.

Sections whose ``css-class`` names a reserved region are styled from the
user's brand and email settings, not in the builder. When such a section is
loaded or inserted it is locked: it and every descendant become
non-draggable, non-removable, non-copyable and non-selectable, descendants
also become non-editable, and the section gains the ``locked-section``
token. There is no unlock.

Content slots get a lighter treatment: their text is filled in later, so
they are marked non-editable and non-copyable.

"""

from __future__ import annotations

import logging
from typing import Iterable

from layoutslots.ast import Document, Element, iter_elements
from layoutslots.constants import (
    DEFAULT_RESERVED_REGION_CLASSES,
    LOCKED_FOOTER_HINT,
    LOCKED_HEADER_HINT,
    LOCKED_SECTION_TOKEN,
    TRACKING_ATTRIBUTE,
)
from layoutslots.markers import ContentMarker, append_token, split_tokens, tracking_markers

logger = logging.getLogger(__name__)


class LockPolicy:
    """Lock reserved regions of a document in place.

    Parameters
    ----------
    reserved_classes : iterable of str, default = ("header-section", "footer-section")
        Class tokens marking a reserved region

    """

    def __init__(self, reserved_classes: Iterable[str] = DEFAULT_RESERVED_REGION_CLASSES):
        """Initialize with the reserved class tokens."""
        self.reserved_classes = tuple(reserved_classes)

    def is_reserved(self, element: Element) -> bool:
        """Return True if the element's class tokens name a reserved region."""
        tokens = split_tokens(element.get(TRACKING_ATTRIBUTE))
        return any(token in self.reserved_classes for token in tokens)

    @staticmethod
    def hint_for(element: Element) -> str | None:
        """Return the hover hint explaining why a region is locked."""
        tokens = split_tokens(element.get(TRACKING_ATTRIBUTE))
        if "header-section" in tokens:
            return LOCKED_HEADER_HINT
        if "footer-section" in tokens:
            return LOCKED_FOOTER_HINT
        return None

    @staticmethod
    def lock(element: Element) -> None:
        """Lock one region and cascade to its descendants."""
        flags = element.affordances
        flags.draggable = flags.removable = flags.copyable = flags.selectable = False
        element.set(TRACKING_ATTRIBUTE, append_token(element.get(TRACKING_ATTRIBUTE), LOCKED_SECTION_TOKEN))
        for descendant in element.iter_elements():
            if descendant is element:
                continue
            child_flags = descendant.affordances
            child_flags.draggable = child_flags.removable = child_flags.copyable = False
            child_flags.selectable = child_flags.editable = False

    def apply(self, root: Document | Element) -> list[Element]:
        """Lock every reserved region beneath ``root`` (inclusive).

        Returns
        -------
        list of Element
            Regions locked by this call; already locked regions are skipped

        """
        locked = []
        for element in iter_elements(root):
            if not self.is_reserved(element):
                continue
            if LOCKED_SECTION_TOKEN in split_tokens(element.get(TRACKING_ATTRIBUTE)) and element.affordances.locked:
                continue
            self.lock(element)
            locked.append(element)
            logger.debug("Locked reserved region <%s class=%r>", element.tag, element.get(TRACKING_ATTRIBUTE))
        return locked


def protect_content_slots(root: Document | Element) -> int:
    """Mark tracked content slots non-editable and non-copyable; return the count."""
    count = 0
    for element in iter_elements(root):
        if any(isinstance(marker, ContentMarker) for marker in tracking_markers(element.get(TRACKING_ATTRIBUTE))):
            element.affordances.editable = False
            element.affordances.copyable = False
            count += 1
    return count
