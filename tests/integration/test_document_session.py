#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Integration tests for the editing session."""

from typing import Any

import pytest

from layoutslots.ast import Element, Text, insert_child, node_path
from layoutslots.constants import DROP_FAILURE_CONTENT, DROP_FAILURE_STRUCTURE, PREVIEW_FAILURE_HTML
from layoutslots.exceptions import (
    DropZoneError,
    PreviewCompilationError,
    ServiceError,
    TransformError,
    ValidationError,
)
from layoutslots.options import SessionOptions
from layoutslots.services import InMemoryTemplateStore
from layoutslots.session import (
    DocumentSession,
    DropFailure,
    Notice,
    NodeInsertedEvent,
    PendingProductSelection,
)
from layoutslots.session.dropzone import BlockClass
from layoutslots.transforms.forward import EditablePlaceholderTransform


class FakeCompiler:
    """Preview compiler recording the markup it receives."""

    def __init__(self, html: str = "<html>fake</html>", error: Exception | None = None):
        self.html = html
        self.error = error
        self.calls: list[str] = []

    def compile_to_preview_html(self, markup: str) -> str:
        self.calls.append(markup)
        if self.error is not None:
            raise self.error
        return self.html


class FailingStore:
    """Template store that rejects every save."""

    def load_template(self, template_id: str) -> str:
        raise ServiceError("unreachable")

    def save_template(self, template_id: str | None, markup: str, **payload: Any) -> str:
        raise ServiceError("boom")


def _section(session: DocumentSession, css_class: str) -> Element:
    for element in session.document.find_first("mj-body").iter_elements():
        if element.tag == "mj-section" and css_class in (element.get("css-class") or "").split():
            return element
    raise AssertionError(f"no section {css_class!r}")


def _body(session: DocumentSession) -> Element:
    return session.document.find_first("mj-body")


@pytest.mark.integration
class TestLoading:
    """Tests for loading templates into a session."""

    def test_reserved_regions_locked_on_load(self, session: DocumentSession) -> None:
        """Test that header and footer are locked and the rest is not."""
        header = _section(session, "header-section")
        footer = _section(session, "footer-section")
        content = _section(session, "content-section")
        assert header.affordances.locked and footer.affordances.locked
        assert not content.affordances.locked
        assert "locked-section" in header.get("css-class")
        assert "locked-section" in session.serialize()
        assert "locked-section" not in session.export()

    def test_content_slots_protected_on_load(self, session: DocumentSession) -> None:
        """Test that content slots outside locked regions are not editable."""
        text = _section(session, "content-section").find_first("mj-text")
        assert text.get("css-class") == "content-slot--body-text"
        assert not text.affordances.editable
        assert text.affordances.draggable

    def test_default_layout_markers(self, session: DocumentSession) -> None:
        """Test the markers of the blank layout."""
        exported = session.export()
        for marker in ("{{content:headline}}", "{{image:hero-banner}}", "{{content:body-text}}", "{{footer}}"):
            assert marker in exported

    def test_load_resets_state(self, session: DocumentSession) -> None:
        """Test that loading clears notices, renames and selections."""
        session.drop_block("placeholder-headline", _body(session))
        session.drop_block("placeholder-headline", _section(session, "content-section").find_first("mj-column"))
        assert session.notices and session.renames
        session.load("<mjml><mj-body></mj-body></mjml>", product_selections={"product": ["p1"]})
        assert session.notices == []
        assert session.renames == []
        assert session.product_selections == {"product": ["p1"]}

    def test_lock_disabled(self) -> None:
        """Test that reserved regions stay free when locking is off."""
        session = DocumentSession(SessionOptions(lock_reserved_regions=False))
        session.load()
        assert not _section(session, "header-section").affordances.locked
        assert "locked-section" not in session.serialize()


@pytest.mark.integration
class TestDropping:
    """Tests for inserting blocks and nodes."""

    def test_content_block_into_body_rejected(self, session: DocumentSession) -> None:
        """Test that a content block dropped into the body is refused with a notice."""
        before = session.serialize()
        assert session.drop_block("placeholder-headline", _body(session)) == []
        assert session.notices[-1] == Notice("warning", DROP_FAILURE_CONTENT, "placeholder-headline")
        assert session.serialize() == before

    def test_section_into_column_rejected(self, session: DocumentSession) -> None:
        """Test that a section dropped into a column is refused."""
        column = _section(session, "content-section").find_first("mj-column")
        assert session.drop_block("combo-cta", column) == []
        assert session.notices[-1].message == DROP_FAILURE_STRUCTURE

    def test_strict_drops_raise(self) -> None:
        """Test that strict sessions raise on rejected drops."""
        session = DocumentSession(SessionOptions(strict_drops=True))
        session.load()
        with pytest.raises(DropZoneError) as exc_info:
            session.drop_block("placeholder-cta", _body(session))
        assert exc_info.value.block_id == "placeholder-cta"
        assert exc_info.value.block_class == "content"
        assert len(session.notices) == 1

    def test_drop_at_index(self, session: DocumentSession) -> None:
        """Test inserting at a position."""
        column = _section(session, "content-section").find_first("mj-column")
        inserted = session.drop_block("placeholder-icon", column, index=0)
        assert column.children[0] is inserted[0]
        assert inserted[0].get("css-class") == "img-slot--icon"

    def test_insert_by_path(self, session: DocumentSession) -> None:
        """Test addressing the parent by its child-index path."""
        column = _section(session, "content-section").find_first("mj-column")
        path = node_path(session.document, column)
        inserted = session.insert_node("<mj-text>{{content:promo}}</mj-text>", path)
        assert inserted is not None
        assert inserted.get("css-class") == "content-slot--promo"
        assert not inserted.affordances.editable
        assert "{{content:promo}}" in session.export()

    def test_insert_element(self, session: DocumentSession) -> None:
        """Test inserting an element built in code."""
        element = Element(tag="mj-image", attributes={"src": "{{image:hero-banner}}"})
        inserted = session.insert_node(element, _section(session, "content-section").find_first("mj-column"))
        assert inserted.get("css-class") == "img-slot--hero-banner-1"
        assert element.get("css-class") is None

    def test_invalid_path(self, session: DocumentSession) -> None:
        """Test that paths outside the Document are rejected."""
        with pytest.raises(ValidationError):
            session.insert_node("<mj-text>x</mj-text>", (99,))

    def test_multiple_elements_rejected(self, session: DocumentSession) -> None:
        """Test that markup holding several elements is rejected."""
        column = _section(session, "content-section").find_first("mj-column")
        with pytest.raises(ValidationError, match="one element"):
            session.insert_node("<mj-text>a</mj-text><mj-text>b</mj-text>", column)

    def test_inserted_reserved_section_locked(self, session: DocumentSession) -> None:
        """Test that inserted reserved regions are locked as well."""
        inserted = session.insert_node(
            '<mj-section css-class="footer-section"><mj-column><mj-text>x</mj-text></mj-column></mj-section>',
            _body(session),
        )
        assert inserted.affordances.locked
        assert inserted.find_first("mj-text").affordances.locked

    def test_transform_failure_leaves_document(
        self, session: DocumentSession, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that an insertion whose transform yields no element raises and inserts nothing."""
        column = _section(session, "content-section").find_first("mj-column")
        before = session.serialize()
        monkeypatch.setattr(EditablePlaceholderTransform, "transform", lambda self, node: Text(content="x"))
        with pytest.raises(TransformError) as exc_info:
            session.insert_node("<mj-text>{{content:promo}}</mj-text>", column)
        assert exc_info.value.transform_name == "EditablePlaceholderTransform"
        assert session.serialize() == before

    def test_dedup_disabled(self) -> None:
        """Test that duplicates are kept when deduplication is off."""
        session = DocumentSession(SessionOptions(dedup_enabled=False))
        session.load()
        session.drop_block("placeholder-headline", _section(session, "content-section").find_first("mj-column"))
        assert session.duplicate_identities() == {"content:headline": 2}
        assert session.renames == []


@pytest.mark.integration
class TestDragLifecycle:
    """Tests for drag start, stop and the settle check."""

    def test_successful_drag(self, session: DocumentSession) -> None:
        """Test that a drag ending in an insertion reports nothing."""
        session.start_drag("combo-text")
        session.drop_block("combo-text", _body(session))
        assert session.stop_drag() is None
        assert session.notices == []

    def test_drag_without_drop(self, session: DocumentSession) -> None:
        """Test that a drag ending without an insertion reports a failure."""
        session.start_drag("placeholder-cta")
        failure = session.stop_drag()
        assert failure == DropFailure("placeholder-cta", BlockClass.CONTENT, DROP_FAILURE_CONTENT)
        assert session.notices == [Notice("warning", DROP_FAILURE_CONTENT, "placeholder-cta")]

    def test_rejected_drop_during_drag_reported_once(self, session: DocumentSession) -> None:
        """Test that a refused drop inside a drag raises a single notice."""
        session.start_drag("placeholder-headline")
        assert session.drop_block("placeholder-headline", _body(session)) == []
        assert session.notices == []
        failure = session.stop_drag()
        assert failure is not None and failure.message == DROP_FAILURE_CONTENT
        assert len(session.notices) == 1
        assert session.notices[0] == Notice("warning", DROP_FAILURE_CONTENT, "placeholder-headline")

    def test_strict_rejected_drop_during_drag(self) -> None:
        """Test that strict sessions still raise for a refused drop inside a drag."""
        session = DocumentSession(SessionOptions(strict_drops=True))
        session.load()
        session.start_drag("combo-cta")
        column = _section(session, "content-section").find_first("mj-column")
        with pytest.raises(DropZoneError):
            session.drop_block("combo-cta", column)
        session.stop_drag()
        assert session.notices == [Notice("warning", DROP_FAILURE_STRUCTURE, "combo-cta")]

    def test_queued_insertion_seen_before_settle(self, session: DocumentSession) -> None:
        """Test that an insertion posted before the stop is handled before the settle check."""
        session.start_drag("combo-offer")
        section = Element(tag="mj-section")
        insert_child(_body(session), section)
        session.dispatcher.post(NodeInsertedEvent(node=section, parent=_body(session), block_id="combo-offer"))
        assert session.stop_drag() is None

    def test_stop_without_start(self, session: DocumentSession) -> None:
        """Test a stray stop."""
        assert session.stop_drag() is None


@pytest.mark.integration
class TestProductSelection:
    """Tests for the product selection flow."""

    def test_flow(self) -> None:
        """Test selection requests, confirmation and renaming of a second grid."""
        session = DocumentSession()
        session.load()
        body = _body(session)

        session.drop_block("product-grid-2", body)
        assert session.pending_product_selection == PendingProductSelection("product", 2)
        session.confirm_product_selection(["p1", "p2", "p1"])
        assert session.product_selections == {"product": ["p1", "p2"]}
        assert session.pending_product_selection is None

        session.drop_block("product-grid-3", body)
        assert session.pending_product_selection == PendingProductSelection("product-1", 3)
        with pytest.raises(ValidationError, match="at most 3"):
            session.confirm_product_selection(["a", "b", "c", "d"])
        session.cancel_product_selection()
        assert session.pending_product_selection is None

        assert session.product_slot_mapping() == {("product", 0): "p1", ("product", 1): "p2"}
        assert "{{product:product-1:2:name}}" in session.export()

    def test_confirm_without_pending(self, session: DocumentSession) -> None:
        """Test that confirming with nothing pending is an error."""
        with pytest.raises(ValidationError, match="No product selection"):
            session.confirm_product_selection(["p1"])

    def test_request_selection(self, session: DocumentSession) -> None:
        """Test reopening selection for a block already in the Document."""
        session.drop_block("product-spotlight", _body(session))
        session.cancel_product_selection()
        assert session.request_product_selection("product") == PendingProductSelection("product", 1)
        with pytest.raises(ValidationError):
            session.request_product_selection("missing")

    def test_selection_without_dedup(self) -> None:
        """Test that selections are still requested when deduplication is off."""
        session = DocumentSession(SessionOptions(dedup_enabled=False))
        session.load()
        session.drop_block("product-grid-3", _body(session))
        assert session.pending_product_selection == PendingProductSelection("product", 3)


@pytest.mark.integration
class TestCollaborators:
    """Tests for saving, opening and previewing."""

    def test_save_new_then_update(self, session: DocumentSession) -> None:
        """Test creating a template and saving it again under the same id."""
        store = InMemoryTemplateStore()
        compiler = FakeCompiler()
        session.template_store = store
        session.preview_compiler = compiler

        result = session.save("Welcome", category="promo")

        assert result.ok
        assert result.template_id == "layout-1"
        assert result.thumbnail == "<html>fake</html>"
        assert store.templates["layout-1"] == result.markup == session.export()
        assert compiler.calls == [result.markup]
        assert store.payloads["layout-1"]["category"] == "promo"
        assert store.payloads["layout-1"]["product_selections"] is None

        assert session.save("Welcome v2").template_id == "layout-1"
        assert list(store.templates) == ["layout-1"]

    def test_save_with_selections(self, session: DocumentSession) -> None:
        """Test that confirmed product selections are stored."""
        store = InMemoryTemplateStore()
        session.template_store = store
        session.drop_block("product-spotlight", _body(session))
        session.confirm_product_selection(["p9"])
        session.save("Spotlight")
        assert store.payloads["layout-1"]["product_selections"] == {"product": ["p9"]}

    def test_thumbnail_failure_does_not_block_save(self, session: DocumentSession) -> None:
        """Test that a failing compiler only drops the thumbnail."""
        session.template_store = InMemoryTemplateStore()
        session.preview_compiler = FakeCompiler(error=PreviewCompilationError("down"))
        result = session.save("Welcome")
        assert result.ok
        assert result.thumbnail is None

    def test_failed_save(self, session: DocumentSession) -> None:
        """Test that a rejected save keeps the Document and raises a notice."""
        session.template_store = FailingStore()
        before = session.serialize()
        result = session.save("Welcome", template_id="abc")
        assert not result.ok
        assert result.template_id == "abc"
        assert result.error == "boom"
        assert session.notices[-1] == Notice("error", "Failed to save layout: boom")
        assert session.serialize() == before

    def test_save_requires_name_and_store(self, session: DocumentSession) -> None:
        """Test save preconditions."""
        with pytest.raises(ValidationError, match="no template store"):
            session.save("Welcome")
        session.template_store = InMemoryTemplateStore()
        with pytest.raises(ValidationError, match="must not be empty"):
            session.save("  ")

    def test_open_template(self, persisted_template: str) -> None:
        """Test opening a stored template."""
        store = InMemoryTemplateStore({"t1": persisted_template})
        session = DocumentSession(template_store=store)
        session.open_template("t1")
        assert session.template_id == "t1"
        assert session.export() == persisted_template
        assert session.save("Again").template_id == "t1"

    def test_preview(self, session: DocumentSession) -> None:
        """Test compiling the exported markup."""
        compiler = FakeCompiler(html="<html>preview</html>")
        session.preview_compiler = compiler
        assert session.preview() == "<html>preview</html>"
        assert compiler.calls == [session.export()]

    @pytest.mark.parametrize("compiler", [None, FakeCompiler(error=PreviewCompilationError("down"))])
    def test_preview_fallback(self, session: DocumentSession, compiler) -> None:
        """Test the failure page when compilation is unavailable or fails."""
        session.preview_compiler = compiler
        assert session.preview() == PREVIEW_FAILURE_HTML
