#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the MJML renderer."""

from io import StringIO
from pathlib import Path
from typing import Any

import pytest

from layoutslots.ast import Comment, Document, Element, Node, Text
from layoutslots.exceptions import InvalidOptionsError, RenderingError
from layoutslots.options import MjmlParserOptions, MjmlRendererOptions
from layoutslots.parsers.mjml import parse_mjml
from layoutslots.renderers.mjml import MjmlRenderer, escape_attribute, escape_text, render_mjml


class _StrayNode(Node):
    """A node type the renderer does not know."""

    def __init__(self) -> None:
        self.metadata = {}

    def accept(self, visitor: Any) -> Any:
        return None


@pytest.mark.unit
class TestEscaping:
    """Tests for attribute and text escaping."""

    def test_escape_attribute(self) -> None:
        """Test escaping ampersands and double quotes."""
        assert escape_attribute('a "b" & c') == "a &quot;b&quot; &amp; c"
        assert escape_attribute("it's <ok>") == "it's <ok>"

    def test_escape_text(self) -> None:
        """Test escaping character data."""
        assert escape_text("Tom & Jerry <3 >") == "Tom &amp; Jerry &lt;3 &gt;"


@pytest.mark.unit
class TestMjmlRenderer:
    """Tests for rendering trees to MJML markup."""

    def test_render_element_with_attributes(self) -> None:
        """Test attributes are written in stored order."""
        doc = Document(
            children=[Element(tag="mj-text", attributes={"color": "#333", "align": "center"}, children=[Text("Hi")])]
        )
        assert MjmlRenderer().render_to_string(doc) == '<mj-text color="#333" align="center">Hi</mj-text>'

    def test_self_closing_leaf(self) -> None:
        """Test childless leaf tags are self-closed."""
        doc = Document(children=[Element(tag="mj-image", attributes={"src": "a.png"})])
        assert MjmlRenderer().render_to_string(doc) == '<mj-image src="a.png" />'

    def test_self_closing_disabled(self) -> None:
        """Test explicit closing tags when self-closing is disabled."""
        doc = Document(children=[Element(tag="mj-image", attributes={"src": "a.png"})])
        renderer = MjmlRenderer(MjmlRendererOptions(self_close_empty=False))
        assert renderer.render_to_string(doc) == '<mj-image src="a.png"></mj-image>'

    def test_html_void_tags_always_self_close(self) -> None:
        """Test HTML void tags inside raw blocks."""
        doc = Document(children=[Element(tag="br")])
        renderer = MjmlRenderer(MjmlRendererOptions(self_close_empty=False))
        assert renderer.render_to_string(doc) == "<br />"

    def test_empty_container_keeps_closing_tag(self) -> None:
        """Test that empty containers are not self-closed."""
        doc = Document(children=[Element(tag="mj-column", attributes={"width": "50%"})])
        assert MjmlRenderer().render_to_string(doc) == '<mj-column width="50%"></mj-column>'

    def test_text_escaped(self) -> None:
        """Test that text is escaped outside raw-text tags."""
        doc = Document(children=[Element(tag="mj-text", children=[Text("A & B")])])
        assert MjmlRenderer().render_to_string(doc) == "<mj-text>A &amp; B</mj-text>"

    def test_raw_text_tag(self) -> None:
        """Test that style content is written verbatim."""
        doc = Document(children=[Element(tag="mj-style", children=[Text(".a > .b { color: red; }")])])
        assert MjmlRenderer().render_to_string(doc) == "<mj-style>.a > .b { color: red; }</mj-style>"

    def test_attribute_escaped(self) -> None:
        """Test that attribute values are escaped."""
        doc = Document(children=[Element(tag="mj-button", attributes={"href": "/a?x=1&y=2"})])
        assert MjmlRenderer().render_to_string(doc) == '<mj-button href="/a?x=1&amp;y=2"></mj-button>'

    def test_comment(self) -> None:
        """Test rendering comments."""
        doc = Document(children=[Comment(content=" note ")])
        assert MjmlRenderer().render_to_string(doc) == "<!-- note -->"

    def test_affordances_not_serialized(self) -> None:
        """Test that editor affordances never reach the markup."""
        element = Element(tag="mj-section")
        element.affordances.draggable = False
        assert render_mjml(element) == "<mj-section></mj-section>"

    def test_render_node(self) -> None:
        """Test rendering a single subtree."""
        column = Element(tag="mj-column", children=[Element(tag="mj-divider")])
        assert MjmlRenderer().render_node(column) == "<mj-column><mj-divider /></mj-column>"

    def test_unknown_node_skipped(self) -> None:
        """Test that unknown node types are skipped by default."""
        doc = Document(children=[_StrayNode(), Element(tag="mj-spacer")])
        assert MjmlRenderer().render_to_string(doc) == "<mj-spacer />"

    def test_unknown_node_strict(self) -> None:
        """Test that unknown node types fail in strict mode."""
        doc = Document(children=[_StrayNode()])
        with pytest.raises(RenderingError):
            MjmlRenderer(MjmlRendererOptions(fail_on_unknown_nodes=True)).render_to_string(doc)

    def test_wrong_options_type(self) -> None:
        """Test that parser options are rejected by the renderer."""
        with pytest.raises(InvalidOptionsError):
            MjmlRenderer(MjmlParserOptions())  # type: ignore[arg-type]

    def test_render_to_stream_and_path(self, tmp_path: Path) -> None:
        """Test writing rendered output to a stream and to a file."""
        doc = Document(children=[Element(tag="mj-spacer")])
        buffer = StringIO()
        MjmlRenderer().render(doc, buffer)
        assert buffer.getvalue() == "<mj-spacer />"

        path = tmp_path / "out.mjml"
        MjmlRenderer().render(doc, path)
        assert path.read_text(encoding="utf-8") == "<mj-spacer />"

    def test_parse_render_identity(self) -> None:
        """Test that parsed markup renders back unchanged."""
        markup = (
            '<mjml><mj-body width="600px"><mj-section css-class="a b"><mj-column>'
            '<mj-image src="x.png" alt="X &amp; Y" /><mj-text>A &amp; B</mj-text>'
            "<!-- keep --><mj-button href=\"/go\">Go</mj-button></mj-column></mj-section></mj-body></mjml>"
        )
        assert render_mjml(parse_mjml(markup)) == markup
