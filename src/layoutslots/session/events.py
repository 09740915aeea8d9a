#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/session/events.py
"""Typed editor events and the single-threaded dispatcher that runs them.

The visual editor reports what the user did through a small set of events.
Events are posted to a FIFO queue and handled when the queue is flushed;
handlers may post further events, which are handled in the same flush after
everything already queued. A structural change is therefore always absorbed
by the document before anything posted after it is handled, which is what
the deduplicator and the drop-settle check depend on.

Examples
--------
    >>> dispatcher = EventDispatcher()
    >>> seen = []
    >>> dispatcher.subscribe(NodeInsertedEvent, lambda event: seen.append(event.node.tag))
    >>> dispatcher.post(NodeInsertedEvent(node=Element(tag="mj-text")))
    >>> dispatcher.flush()
    1
    >>> seen
    ['mj-text']

"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Union

from layoutslots.ast import Document, Element
from layoutslots.constants import DragPhase
from layoutslots.session.dropzone import BlockClass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeInsertedEvent:
    """A node was added to the document.

    Parameters
    ----------
    node : Element
        Root of the inserted subtree, already attached to the document
    parent : Document or Element, optional
        Element the node was inserted into
    block_id : str, optional
        Library block the node came from, if any

    """

    node: Element
    parent: Document | Element | None = None
    block_id: str | None = None


@dataclass(frozen=True)
class DragLifecycleEvent:
    """A library block started or stopped being dragged."""

    phase: DragPhase
    block_id: str | None = None
    block_class: BlockClass = BlockClass.UNKNOWN


@dataclass(frozen=True)
class DragSettledEvent:
    """Posted on drag stop; handled once everything queued before it has run."""

    block_id: str | None = None
    block_class: BlockClass = BlockClass.UNKNOWN


EditorEvent = Union[NodeInsertedEvent, DragLifecycleEvent, DragSettledEvent]
EventHandler = Callable[[Any], Any]


class EventDispatcher:
    """FIFO event queue with per-type handlers.

    Parameters
    ----------
    strict : bool, default = False
        If True, handler exceptions are re-raised and abort the flush
        (remaining events stay queued). If False, they are logged and the
        remaining handlers still run.

    Notes
    -----
    Handlers for the same event type run in priority order (lower first),
    then in registration order. The dispatcher is not thread-safe; one
    session owns one dispatcher.

    """

    def __init__(self, strict: bool = False) -> None:
        """Initialize an empty dispatcher."""
        self._handlers: dict[type, list[tuple[int, EventHandler]]] = {}
        self._queue: deque[EditorEvent] = deque()
        self._flushing = False
        self.strict = strict

    def subscribe(self, event_type: type, handler: EventHandler, priority: int = 100) -> None:
        """Register a handler for an event type.

        Parameters
        ----------
        event_type : type
            Event class to handle
        handler : callable
            Called with the event instance
        priority : int, default = 100
            Execution priority (lower runs first)

        """
        self._handlers.setdefault(event_type, []).append((priority, handler))
        logger.debug(f"Registered handler for '{event_type.__name__}' with priority {priority}")

    def unsubscribe(self, event_type: type, handler: EventHandler) -> bool:
        """Remove a handler; return True if it was registered."""
        handlers = self._handlers.get(event_type, [])
        remaining = [(p, h) for p, h in handlers if h != handler]
        self._handlers[event_type] = remaining
        return len(remaining) < len(handlers)

    def has_handlers(self, event_type: type) -> bool:
        """Return True if any handler is registered for the event type."""
        return bool(self._handlers.get(event_type))

    @property
    def pending(self) -> int:
        """Number of queued events."""
        return len(self._queue)

    def post(self, event: EditorEvent) -> None:
        """Queue an event for the next flush."""
        self._queue.append(event)

    def flush(self) -> int:
        """Handle queued events until the queue is empty.

        Returns
        -------
        int
            Number of events handled. A nested call from inside a handler
            returns 0; the outer flush handles whatever was posted.

        """
        if self._flushing:
            return 0
        self._flushing = True
        handled = 0
        try:
            while self._queue:
                event = self._queue.popleft()
                self._dispatch(event)
                handled += 1
        finally:
            self._flushing = False
        return handled

    def _dispatch(self, event: EditorEvent) -> None:
        name = type(event).__name__
        for priority, handler in sorted(self._handlers.get(type(event), []), key=lambda x: x[0]):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Handler failed for '{name}' with priority {priority}: {e}", exc_info=True)
                if self.strict:
                    raise
