#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/session/__init__.py
"""Editing session: block library, drop zones, locking, events and deduplication."""

from layoutslots.session.blocks import BLOCKS, Block, get_block, list_blocks
from layoutslots.session.dedup import (
    DedupResult,
    PendingProductSelection,
    SlotDeduplicator,
    SlotRename,
    find_duplicate_identities,
)
from layoutslots.session.document_session import DEFAULT_LAYOUT, DocumentSession, Notice, SaveResult
from layoutslots.session.dropzone import BlockClass, DropFailure, DropZonePolicy, classify_block, classify_node
from layoutslots.session.events import (
    DragLifecycleEvent,
    DragSettledEvent,
    EditorEvent,
    EventDispatcher,
    NodeInsertedEvent,
)
from layoutslots.session.locking import LockPolicy, protect_content_slots

__all__ = [
    "BLOCKS",
    "Block",
    "get_block",
    "list_blocks",
    "DedupResult",
    "PendingProductSelection",
    "SlotDeduplicator",
    "SlotRename",
    "find_duplicate_identities",
    "DEFAULT_LAYOUT",
    "DocumentSession",
    "Notice",
    "SaveResult",
    "BlockClass",
    "DropFailure",
    "DropZonePolicy",
    "classify_block",
    "classify_node",
    "DragLifecycleEvent",
    "DragSettledEvent",
    "EditorEvent",
    "EventDispatcher",
    "NodeInsertedEvent",
    "LockPolicy",
    "protect_content_slots",
]
