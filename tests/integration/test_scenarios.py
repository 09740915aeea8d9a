#  Copyright (c) 2025 Tom Villani, Ph.D.
"""End-to-end editing scenarios across transforms, session and deduplication."""

import pytest

from layoutslots.ast import Element
from layoutslots.constants import PLACEHOLDER_IMAGE
from layoutslots.reconstruct import extract_attributes
from layoutslots.session import DocumentSession, PendingProductSelection
from layoutslots.transforms import to_editable, to_persisted

SPOTLIGHT_SECTION = (
    '<mj-section css-class="spotlight"><mj-column>'
    '<mj-image src="{{product:spotlight:0:image}}" alt="Product" />'
    "<mj-text>{{product:spotlight:0:name}}</mj-text>"
    "</mj-column></mj-section>"
)


def _section(session: DocumentSession, css_class: str) -> Element:
    for element in session.document.find_first("mj-body").iter_elements():
        if element.tag == "mj-section" and css_class in (element.get("css-class") or "").split():
            return element
    raise AssertionError(f"no section {css_class!r}")


@pytest.mark.integration
class TestScenarios:
    """Representative editing scenarios."""

    def test_image_slot_round_trip(self) -> None:
        """Test an image slot survives the editor unchanged."""
        persisted = '<mj-image src="{{image:hero-banner}}" />'
        editable = to_editable(persisted)
        assert editable == f'<mj-image src="{PLACEHOLDER_IMAGE}" css-class="img-slot--hero-banner" />'
        assert to_persisted(editable) == persisted

    def test_second_headline_dropped(self, session: DocumentSession) -> None:
        """Test dropping a headline where one already exists."""
        column = _section(session, "content-section").find_first("mj-column")

        inserted = session.drop_block("placeholder-headline", column)

        assert len(inserted) == 1
        assert inserted[0].get("css-class") == "content-slot--headline-1"
        header_text = _section(session, "header-section").find_first("mj-text")
        assert header_text.get("css-class") == "content-slot--headline"
        exported = session.export()
        assert "{{content:headline}}" in exported
        assert "{{content:headline-1}}" in exported
        assert session.duplicate_identities() == {}

    def test_product_block_duplicated(self) -> None:
        """Test that a duplicated product block gets a new component id."""
        session = DocumentSession()
        session.load("<mjml><mj-body></mj-body></mjml>")
        body = session.document.find_first("mj-body")

        session.insert_node(SPOTLIGHT_SECTION, body)
        assert session.pending_product_selection == PendingProductSelection("spotlight", 1)
        session.insert_node(SPOTLIGHT_SECTION, body)
        assert session.pending_product_selection == PendingProductSelection("spotlight-1", 1)

        exported = session.export()
        assert exported.count("{{product:spotlight:0:name}}") == 1
        assert exported.count("{{product:spotlight:0:image}}") == 1
        assert "{{product:spotlight-1:0:name}}" in exported
        assert "{{product:spotlight-1:0:image}}" in exported

    def test_leaked_vector_data_recovered(self) -> None:
        """Test recovering image attributes from a tag polluted by vector data."""
        raw = (
            '<mj-image alt="X" width="100" '
            "xmlns='http://www.w3.org/2000/svg' viewBox='0 0 600 340'%3E%3Cpath d='M0 0'/%3E />"
        )
        assert extract_attributes(raw) == {"alt": "X", "width": "100"}
