#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/session/document_session.py
"""Editing session owning one editable Document.

A :class:`DocumentSession` owns one Document. It loads persisted markup
into editor form, accepts insertions (validated against the drop-zone
policy), and reacts to each insertion through its event dispatcher:
reserved regions are locked, content slots protected and duplicated slot
identities renamed. It exports persisted markup at any time and talks to
the template store and preview compiler when asked to save.

Examples
--------
    >>> session = DocumentSession()
    >>> _ = session.load()
    >>> body = session.document.find_first("mj-body")
    >>> _ = session.drop_block("combo-text", body)
    >>> "{{content:body-text-1}}" in session.export()
    True

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Union

from layoutslots.ast import Document, Element, NodePath, insert_child, node_at
from layoutslots.constants import PREVIEW_FAILURE_HTML
from layoutslots.exceptions import DropZoneError, LayoutSlotsError, ServiceError, TransformError, ValidationError
from layoutslots.inventory import collect_slots
from layoutslots.options.session import SessionOptions
from layoutslots.parsers.mjml import MjmlParser
from layoutslots.renderers.mjml import MjmlRenderer
from layoutslots.services import PreviewCompiler, TemplateStore
from layoutslots.session.blocks import get_block
from layoutslots.session.dedup import (
    PendingProductSelection,
    SlotDeduplicator,
    SlotRename,
    find_duplicate_identities,
)
from layoutslots.session.dropzone import (
    BlockClass,
    DropFailure,
    DropZonePolicy,
    classify_block,
    classify_node,
    failure_message,
)
from layoutslots.session.events import (
    DragLifecycleEvent,
    DragSettledEvent,
    EventDispatcher,
    NodeInsertedEvent,
)
from layoutslots.session.locking import LockPolicy, protect_content_slots
from layoutslots.transforms.forward import EditablePlaceholderTransform, to_editable_document
from layoutslots.transforms.reverse import to_persisted

logger = logging.getLogger(__name__)

# Blank layout offered when no template is loaded
DEFAULT_LAYOUT = """<mjml>
  <mj-head>
    <mj-attributes>
      <mj-all font-family="Arial, sans-serif" />
      <mj-text padding="10px" font-size="14px" color="#333333" line-height="22px" />
    </mj-attributes>
  </mj-head>
  <mj-body width="600px">
    <mj-section css-class="header-section" padding="15px 0px">
      <mj-column padding="12px">
        <mj-text align="center" font-size="24px" font-weight="bold">{{content:headline}}</mj-text>
      </mj-column>
    </mj-section>
    <mj-section css-class="hero-section" padding="15px 0px">
      <mj-column padding="0px">
        <mj-image src="{{image:hero-banner}}" alt="Hero image" width="600px" height="auto" padding="0px" />
      </mj-column>
    </mj-section>
    <mj-section css-class="content-section" padding="15px 0px">
      <mj-column padding="12px">
        <mj-text>{{content:body-text}}</mj-text>
        <mj-button background-color="#ff5757" color="#ffffff">{{content:cta-text}}</mj-button>
      </mj-column>
    </mj-section>
    <mj-section css-class="footer-section" padding="15px 0px">
      <mj-column padding="12px">
        <mj-text align="center" font-size="12px" color="#999999">{{footer}}</mj-text>
      </mj-column>
    </mj-section>
  </mj-body>
</mjml>"""

NoticeLevel = Literal["info", "warning", "error"]


@dataclass(frozen=True)
class Notice:
    """A transient, non-blocking message for the user."""

    level: NoticeLevel
    message: str
    block_id: str | None = None


@dataclass
class SaveResult:
    """Outcome of :meth:`DocumentSession.save`.

    Parameters
    ----------
    ok : bool
        Whether the store accepted the template
    template_id : str or None
        Id of the saved template (the requested id on failure)
    markup : str
        Persisted markup that was sent
    thumbnail : str or None
        Preview HTML stored with the template, if compilation succeeded
    error : str or None
        Failure message

    """

    ok: bool
    template_id: str | None
    markup: str
    thumbnail: str | None = None
    error: str | None = None


ParentRef = Union[Document, Element, NodePath]


class DocumentSession:
    """One editable Document and the policies that keep it consistent.

    Parameters
    ----------
    options : SessionOptions, optional
        Session configuration
    template_store : TemplateStore, optional
        Used by :meth:`open_template` and :meth:`save`
    preview_compiler : PreviewCompiler, optional
        Used by :meth:`preview` and for save thumbnails

    Attributes
    ----------
    document : Document
        The editable tree
    dispatcher : EventDispatcher
        Event queue driving the insertion handlers
    notices : list of Notice
        Messages raised for the user, oldest first
    renames : list of SlotRename
        Every rename applied by the deduplicator in this session
    product_selections : dict of str to list of str
        Confirmed product ids per product component

    """

    def __init__(
        self,
        options: SessionOptions | None = None,
        template_store: TemplateStore | None = None,
        preview_compiler: PreviewCompiler | None = None,
    ):
        """Initialize an empty session."""
        self.options = options or SessionOptions()
        self.template_store = template_store
        self.preview_compiler = preview_compiler
        self.template_id: str | None = None

        self.document = Document()
        self.dispatcher = EventDispatcher(strict=self.options.strict_events)
        self.drop_policy = DropZonePolicy()
        self.lock_policy = LockPolicy(self.options.reserved_region_classes)
        self.deduplicator = SlotDeduplicator()

        self.notices: list[Notice] = []
        self.renames: list[SlotRename] = []
        self.product_selections: dict[str, list[str]] = {}
        self.pending_product_selection: PendingProductSelection | None = None
        self.last_drop_failure: DropFailure | None = None

        self.dispatcher.subscribe(NodeInsertedEvent, self.on_node_inserted, priority=10)
        self.dispatcher.subscribe(DragLifecycleEvent, self._on_drag_lifecycle, priority=10)
        self.dispatcher.subscribe(DragSettledEvent, self._on_drag_settled, priority=10)

    # ------------------------------------------------------------------
    # Loading and serialization
    # ------------------------------------------------------------------

    def load(
        self,
        markup: Union[str, bytes, Path, None] = None,
        product_selections: dict[str, list[str]] | None = None,
    ) -> Document:
        """Replace the Document with the editable form of ``markup``.

        Parameters
        ----------
        markup : str, bytes or Path, optional
            Persisted (or editor) markup; the blank default layout when omitted
        product_selections : dict, optional
            Previously confirmed product ids per component

        Returns
        -------
        Document
            The new editable Document

        """
        source = DEFAULT_LAYOUT if markup is None else markup
        document = to_editable_document(source, self.options.parser_options)
        if self.options.lock_reserved_regions:
            self.lock_policy.apply(document)
        protect_content_slots(document)

        self.document = document
        self.notices.clear()
        self.renames.clear()
        self.product_selections = {key: list(value) for key, value in (product_selections or {}).items()}
        self.pending_product_selection = None
        self.last_drop_failure = None
        logger.info("Loaded %s into the editing session", "default layout" if markup is None else "template")
        return document

    def open_template(self, template_id: str) -> Document:
        """Load a template from the template store."""
        store = self._require_store()
        document = self.load(store.load_template(template_id))
        self.template_id = template_id
        return document

    def serialize(self) -> str:
        """Return the editor markup of the Document (tracking tokens included)."""
        return MjmlRenderer(self.options.renderer_options).render_to_string(self.document)

    def export(self) -> str:
        """Return the persisted markup of the Document."""
        return to_persisted(self.document, self.options.parser_options, self.options.renderer_options)

    def duplicate_identities(self) -> dict[str, int]:
        """Return slot identities currently carried by more than one node."""
        return find_duplicate_identities(self.document)

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def insert_node(
        self,
        node: Union[Element, str],
        parent: ParentRef,
        index: int | None = None,
        block_id: str | None = None,
    ) -> Element | None:
        """Insert a node and run the insertion handlers.

        Parameters
        ----------
        node : Element or str
            Element to insert, or markup holding exactly one element.
            Persisted markers in it are converted to editor form.
        parent : Document, Element or tuple of int
            Parent element, or its child-index path in the Document
        index : int, optional
            Position among the parent's children (appended when omitted)
        block_id : str, optional
            Library block the node comes from; classifies the drop

        Returns
        -------
        Element or None
            The inserted element, or None when the drop was rejected

        Raises
        ------
        DropZoneError
            If the drop is rejected and ``strict_drops`` is set
        ValidationError
            If ``node`` markup does not hold exactly one element
        TransformError
            If the forward transform does not yield an element

        """
        element = self._coerce_element(node)
        target = self._resolve_parent(parent)
        block_class = classify_block(block_id) if block_id is not None else classify_node(element)
        if not self.drop_policy.accepts(block_class, target):
            self._reject_drop(block_id, block_class, target)
            return None

        editable = EditablePlaceholderTransform().transform(element)
        if not isinstance(editable, Element):
            raise TransformError(
                f"Forward transform turned <{element.tag}> into {type(editable).__name__}",
                transform_name="EditablePlaceholderTransform",
            )
        insert_child(target, editable, index)
        self.dispatcher.post(NodeInsertedEvent(node=editable, parent=target, block_id=block_id))
        self.dispatcher.flush()
        return editable

    def drop_block(self, block_id: str, parent: ParentRef, index: int | None = None) -> list[Element]:
        """Insert a fresh copy of a library block.

        Returns
        -------
        list of Element
            Inserted elements (empty when the drop was rejected)

        """
        block = get_block(block_id)
        inserted: list[Element] = []
        position = index
        for element in block.to_nodes():
            result = self.insert_node(element, parent, position, block_id=block.id)
            if result is None:
                break
            inserted.append(result)
            if position is not None:
                position += 1
        return inserted

    def on_node_inserted(self, event: NodeInsertedEvent) -> None:
        """Lock, protect and deduplicate a freshly inserted subtree."""
        self.drop_policy.record_insertion()
        if self.options.lock_reserved_regions:
            self.lock_policy.apply(event.node)
        protect_content_slots(event.node)

        if self.options.dedup_enabled:
            result = self.deduplicator.process(self.document, event.node)
            self.renames.extend(result.renames)
            selection = result.product_selection
        else:
            selection = self._product_selection_for(event.node)
        if selection is not None:
            self.pending_product_selection = selection
            logger.info(
                "Product block %r needs up to %d product(s)", selection.component_id, selection.max_products
            )

    def _coerce_element(self, node: Union[Element, str]) -> Element:
        if isinstance(node, Element):
            return node
        document = MjmlParser(self.options.parser_options).parse(node)
        elements = [child for child in document.children if isinstance(child, Element)]
        if len(elements) != 1:
            raise ValidationError(
                f"Expected markup holding one element, found {len(elements)}",
                parameter_name="node",
                parameter_value=node,
            )
        return elements[0]

    def _resolve_parent(self, parent: ParentRef) -> Document | Element:
        if isinstance(parent, (Document, Element)):
            return parent
        target = node_at(self.document, tuple(parent))
        if not isinstance(target, (Document, Element)):
            raise ValidationError(
                f"Path {list(parent)} does not lead to an element", parameter_name="parent", parameter_value=parent
            )
        return target

    def _reject_drop(self, block_id: str | None, block_class: BlockClass, parent: Document | Element) -> None:
        message = failure_message(block_class)
        where = parent.tag if isinstance(parent, Element) else "document root"
        logger.warning("Rejected %s block %r dropped into %s", block_class.value, block_id, where)
        # During a drag the settle check reports the failure
        if not self.drop_policy.dragging:
            self.notices.append(Notice("warning", message, block_id))
        if self.options.strict_drops:
            raise DropZoneError(message, block_id=block_id, block_class=block_class.value)

    # ------------------------------------------------------------------
    # Drag lifecycle
    # ------------------------------------------------------------------

    def start_drag(self, block_id: str | None, block_class: BlockClass | None = None) -> None:
        """Report that a library block started being dragged."""
        resolved = block_class if block_class is not None else classify_block(block_id)
        self.dispatcher.post(DragLifecycleEvent(phase="start", block_id=block_id, block_class=resolved))
        self.dispatcher.flush()

    def stop_drag(self) -> DropFailure | None:
        """Report that the drag stopped; return the failure if nothing was inserted.

        The settle check is queued behind every event posted before it, so
        insertions reported earlier are always seen first.
        """
        block_id = self.drop_policy.current_block
        block_class = self.drop_policy.current_class or BlockClass.UNKNOWN
        self.last_drop_failure = None
        self.dispatcher.post(DragLifecycleEvent(phase="stop", block_id=block_id, block_class=block_class))
        self.dispatcher.post(DragSettledEvent(block_id=block_id, block_class=block_class))
        self.dispatcher.flush()
        return self.last_drop_failure

    def _on_drag_lifecycle(self, event: DragLifecycleEvent) -> None:
        if event.phase == "start":
            self.drop_policy.start(event.block_id, event.block_class)

    def _on_drag_settled(self, event: DragSettledEvent) -> None:
        failure = self.drop_policy.stop()
        if failure is not None:
            self.last_drop_failure = failure
            self.notices.append(Notice("warning", failure.message, failure.block_id))

    # ------------------------------------------------------------------
    # Product selection
    # ------------------------------------------------------------------

    def _product_selection_for(self, root: Element) -> PendingProductSelection | None:
        inventory = collect_slots(root)
        for component_id in inventory.product_components:
            return PendingProductSelection(component_id, inventory.max_products(component_id))
        return None

    def request_product_selection(self, component_id: str) -> PendingProductSelection:
        """Reopen product selection for a component already in the Document."""
        inventory = collect_slots(self.document)
        if component_id not in inventory.product_components:
            raise ValidationError(
                f"No product block named {component_id!r}",
                parameter_name="component_id",
                parameter_value=component_id,
            )
        max_products = inventory.max_products(component_id) or self.options.default_max_products
        self.pending_product_selection = PendingProductSelection(component_id, max_products)
        return self.pending_product_selection

    def confirm_product_selection(self, product_ids: list[str]) -> dict[str, list[str]]:
        """Record the products chosen for the pending product block.

        Raises
        ------
        ValidationError
            If no selection is pending or too many products are given

        """
        pending = self.pending_product_selection
        if pending is None:
            raise ValidationError("No product selection is pending")
        unique_ids = list(dict.fromkeys(product_ids))
        if len(unique_ids) > pending.max_products:
            raise ValidationError(
                f"Product block {pending.component_id!r} takes at most {pending.max_products} product(s), "
                f"got {len(unique_ids)}",
                parameter_name="product_ids",
                parameter_value=product_ids,
            )
        self.product_selections[pending.component_id] = unique_ids
        self.pending_product_selection = None
        return self.product_selections

    def cancel_product_selection(self) -> None:
        """Dismiss the pending product selection without recording anything."""
        self.pending_product_selection = None

    def product_slot_mapping(self) -> dict[tuple[str, int], str]:
        """Return ``(component_id, index) -> product_id`` for every confirmed selection."""
        mapping: dict[tuple[str, int], str] = {}
        for component_id, product_ids in self.product_selections.items():
            for index, product_id in enumerate(product_ids):
                mapping[(component_id, index)] = product_id
        return mapping

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    def _require_store(self) -> TemplateStore:
        if self.template_store is None:
            raise ValidationError("This session has no template store", parameter_name="template_store")
        return self.template_store

    def preview(self) -> str:
        """Compile the persisted markup to HTML; degrade to a failure page on error."""
        if self.preview_compiler is None:
            logger.warning("No preview compiler configured; returning failure page")
            return PREVIEW_FAILURE_HTML
        try:
            return self.preview_compiler.compile_to_preview_html(self.export())
        except LayoutSlotsError as e:
            logger.warning(f"Preview compilation failed: {e}")
            return PREVIEW_FAILURE_HTML

    def _thumbnail(self, markup: str) -> str | None:
        if self.preview_compiler is None:
            return None
        try:
            return self.preview_compiler.compile_to_preview_html(markup)
        except LayoutSlotsError as e:
            logger.warning(f"Thumbnail generation failed, saving without it: {e}")
            return None

    def save(
        self,
        name: str,
        template_id: str | None = None,
        category: str | None = None,
    ) -> SaveResult:
        """Persist the Document through the template store.

        Parameters
        ----------
        name : str
            Template name
        template_id : str, optional
            Template to update; defaults to the opened template, and a new
            template is created when neither is set
        category : str, optional
            Template category

        Returns
        -------
        SaveResult
            On failure ``ok`` is False, a notice is recorded and the
            Document is kept as is so the save can be retried

        """
        if not name.strip():
            raise ValidationError("Template name must not be empty", parameter_name="name", parameter_value=name)
        store = self._require_store()
        target_id = template_id if template_id is not None else self.template_id
        markup = self.export()
        thumbnail = self._thumbnail(markup)

        try:
            saved_id = store.save_template(
                target_id,
                markup,
                name=name,
                thumbnail=thumbnail,
                category=category,
                product_selections=dict(self.product_selections) or None,
            )
        except ServiceError as e:
            logger.error(f"Failed to save template {target_id or name!r}: {e}")
            self.notices.append(Notice("error", f"Failed to save layout: {e}"))
            return SaveResult(ok=False, template_id=target_id, markup=markup, thumbnail=thumbnail, error=str(e))

        self.template_id = saved_id
        logger.info("Saved template %r as %r", name, saved_id)
        return SaveResult(ok=True, template_id=saved_id, markup=markup, thumbnail=thumbnail)
