#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/session/dropzone.py
"""Drop-zone policy for dragged blocks.

Every insertable block is either *content* (text, button or image pieces
that must land inside a column or hero) or *structure* (sections that must
land directly in the email body or a wrapper). The policy remembers the
block currently being dragged; when the drag stops without any insertion
having happened it reports a failure whose message depends on the block's
class. It never modifies the document.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from layoutslots.ast import Document, Element
from layoutslots.constants import (
    CONTAINER_TAGS,
    DROP_FAILURE_CONTENT,
    DROP_FAILURE_STRUCTURE,
    DROP_FAILURE_UNKNOWN,
    ROOT_TAG,
    TOP_LEVEL_TAGS,
)

logger = logging.getLogger(__name__)

# Tags that form a full row of the email; everything else in the body is content
STRUCTURE_TAGS = frozenset({"mj-section", "mj-wrapper", "mj-hero"})

# Tags outside the visual canvas; nothing may be dropped into them
NON_CANVAS_TAGS = frozenset({ROOT_TAG, "mj-head", "mj-attributes"})


class BlockClass(str, Enum):
    """Where a block may be dropped."""

    CONTENT = "content"
    STRUCTURE = "structure"
    UNKNOWN = "unknown"


_FAILURE_MESSAGES = {
    BlockClass.CONTENT: DROP_FAILURE_CONTENT,
    BlockClass.STRUCTURE: DROP_FAILURE_STRUCTURE,
    BlockClass.UNKNOWN: DROP_FAILURE_UNKNOWN,
}


def classify_block(block_id: str | None) -> BlockClass:
    """Return the class of a library block; ids outside the library are UNKNOWN."""
    from layoutslots.session.blocks import BLOCKS

    for block in BLOCKS:
        if block.id == block_id:
            return block.block_class
    return BlockClass.UNKNOWN


def classify_node(node: Element) -> BlockClass:
    """Classify an arbitrary element by its tag."""
    if node.tag in STRUCTURE_TAGS:
        return BlockClass.STRUCTURE
    if node.tag.startswith("mj-") and node.tag not in NON_CANVAS_TAGS and node.tag not in TOP_LEVEL_TAGS:
        return BlockClass.CONTENT
    return BlockClass.UNKNOWN


def failure_message(block_class: BlockClass) -> str:
    """Return the user-facing drop failure message for a block class."""
    return _FAILURE_MESSAGES[block_class]


@dataclass(frozen=True)
class DropFailure:
    """A drop that did not result in an insertion.

    Parameters
    ----------
    block_id : str or None
        Dragged block
    block_class : BlockClass
        Its class
    message : str
        User-facing explanation

    """

    block_id: str | None
    block_class: BlockClass
    message: str


class DropZonePolicy:
    """Track the block being dragged and report failed drops.

    Examples
    --------
        >>> policy = DropZonePolicy()
        >>> policy.start("placeholder-headline")
        <BlockClass.CONTENT: 'content'>
        >>> policy.stop().message
        'Drop this inside a Column. Add a Section first if the canvas is empty.'

    """

    def __init__(self) -> None:
        """Initialize with no active drag."""
        self.current_block: str | None = None
        self.current_class: BlockClass | None = None
        self.insertion_seen = False

    @property
    def dragging(self) -> bool:
        """Return True while a drag is in progress."""
        return self.current_class is not None

    def start(self, block_id: str | None, block_class: BlockClass | None = None) -> BlockClass:
        """Begin tracking a drag and return the dragged block's class."""
        self.current_block = block_id
        self.current_class = block_class if block_class is not None else classify_block(block_id)
        self.insertion_seen = False
        logger.debug("Drag started for block %r (%s)", block_id, self.current_class.value)
        return self.current_class

    def record_insertion(self) -> None:
        """Note that a node was inserted during the current drag."""
        if self.dragging:
            self.insertion_seen = True

    def stop(self) -> DropFailure | None:
        """End the drag; return a failure when nothing was inserted since it started."""
        if not self.dragging:
            return None
        failure = None
        if not self.insertion_seen:
            assert self.current_class is not None
            failure = DropFailure(self.current_block, self.current_class, failure_message(self.current_class))
            logger.warning("Drop failed for block %r: %s", self.current_block, failure.message)
        self.current_block = None
        self.current_class = None
        self.insertion_seen = False
        return failure

    @staticmethod
    def accepts(block_class: BlockClass, parent: Document | Element) -> bool:
        """Return True if a block of ``block_class`` may become a child of ``parent``.

        Content blocks need a container (``mj-column``, ``mj-hero``);
        structure blocks need the body or a wrapper. Unknown blocks are
        accepted anywhere on the canvas.
        """
        if not isinstance(parent, Element):
            return False
        if block_class is BlockClass.CONTENT:
            return parent.tag in CONTAINER_TAGS
        if block_class is BlockClass.STRUCTURE:
            return parent.tag in TOP_LEVEL_TAGS
        return parent.tag not in NON_CANVAS_TAGS
