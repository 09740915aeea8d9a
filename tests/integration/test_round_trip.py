#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Round-trip tests between persisted and editor markup."""

import pytest

from layoutslots.inventory import collect_slots
from layoutslots.session import DocumentSession
from layoutslots.transforms import to_editable, to_persisted
from layoutslots.utils import normalize_markup


@pytest.mark.integration
class TestRoundTrip:
    """Tests for the persisted to editor to persisted cycle."""

    def test_template_survives(self, persisted_template: str) -> None:
        """Test that a template comes back byte for byte."""
        assert to_persisted(to_editable(persisted_template)) == persisted_template

    def test_persisting_is_idempotent(self, persisted_template: str) -> None:
        """Test that persisting persisted markup changes nothing."""
        once = to_persisted(to_editable(persisted_template))
        assert to_persisted(once) == once

    def test_pretty_printed_template(self, persisted_template: str) -> None:
        """Test that indentation does not affect the restored markers."""
        pretty = persisted_template.replace("><", ">\n  <")
        restored = to_persisted(to_editable(pretty))
        assert normalize_markup(restored) == normalize_markup(pretty)

    def test_default_layout_is_stable(self) -> None:
        """Test that exporting, reloading and exporting again is stable."""
        session = DocumentSession()
        session.load()
        first = session.export()
        session.load(first)
        assert session.export() == first

    @pytest.mark.parametrize(
        "persisted,expected",
        [
            ('<mj-image src="{{image:logo}}" />', '<mj-image src="{{logo}}" />'),
            ("<mj-text>{{content:footer}}</mj-text>", "<mj-text>{{footer}}</mj-text>"),
        ],
    )
    def test_alias_asymmetry(self, persisted: str, expected: str) -> None:
        """Test that the logo and footer slots are always written as their aliases."""
        assert to_persisted(to_editable(persisted)) == expected

    def test_renamed_slots_survive_reload(self, session: DocumentSession) -> None:
        """Test that renames made while editing are kept across save and reload."""
        body = session.document.find_first("mj-body")
        session.drop_block("combo-text", body)
        session.drop_block("combo-text", body)

        exported = session.export()
        assert collect_slots(exported).content_slots == [
            "headline",
            "body-text",
            "cta-text",
            "footer",
            "subheading",
            "body-text-1",
            "subheading-1",
            "body-text-2",
        ]

        reloaded = DocumentSession()
        reloaded.load(exported)
        assert reloaded.duplicate_identities() == {}
        assert reloaded.export() == exported
