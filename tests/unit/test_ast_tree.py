#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for tree nodes, the copy-on-write transformer and navigation helpers."""

import pytest

from layoutslots.ast import (
    Affordances,
    Comment,
    Document,
    Element,
    NodeCollector,
    NodeTransformer,
    Text,
    ancestors,
    clone_node,
    extract_elements,
    extract_nodes,
    find_parent,
    insert_child,
    iter_elements,
    node_at,
    node_path,
    remove_node,
)
from layoutslots.exceptions import ValidationError


def _sample() -> Document:
    text = Element(tag="mj-text", attributes={"css-class": "content-slot--headline"}, children=[Text("Hi")])
    image = Element(tag="mj-image", attributes={"src": "a.png"})
    column = Element(tag="mj-column", children=[text, image])
    section = Element(tag="mj-section", children=[column])
    body = Element(tag="mj-body", children=[Comment(" top "), section])
    return Document(children=[Element(tag="mjml", children=[body])])


@pytest.mark.unit
class TestNodes:
    """Tests for node classes."""

    def test_affordances_default_unlocked(self) -> None:
        """Test that new elements are fully interactive."""
        flags = Affordances()
        assert flags.draggable and flags.removable and flags.copyable and flags.selectable and flags.editable
        assert not flags.locked

    def test_affordances_locked(self) -> None:
        """Test the locked property."""
        assert Affordances(draggable=False, removable=False, selectable=False).locked
        assert not Affordances(draggable=False, removable=False).locked

    def test_attribute_accessors(self) -> None:
        """Test get, set and remove keep attribute order."""
        element = Element(tag="mj-image", attributes={"src": "a", "alt": "b"})
        element.set("src", "c")
        element.set("width", "10")
        assert list(element.attributes.items()) == [("src", "c"), ("alt", "b"), ("width", "10")]
        element.remove("alt")
        element.remove("missing")
        assert element.get("alt") is None
        assert element.get("alt", "x") == "x"

    def test_iter_elements_and_text_content(self) -> None:
        """Test document-order traversal."""
        doc = _sample()
        root = doc.children[0]
        assert [e.tag for e in root.iter_elements()] == [
            "mjml",
            "mj-body",
            "mj-section",
            "mj-column",
            "mj-text",
            "mj-image",
        ]
        assert root.text_content() == "Hi"

    def test_find_first(self) -> None:
        """Test locating the first element with a tag."""
        doc = _sample()
        assert doc.find_first("mj-image").get("src") == "a.png"
        assert doc.find_first("mj-hero") is None
        assert doc.children[0].find_first("mjml") is None


@pytest.mark.unit
class TestNodeTransformer:
    """Tests for the copy-on-write transformer."""

    def test_identity_transform_copies(self) -> None:
        """Test that the identity transform returns an equal, independent tree."""
        doc = _sample()
        copy = NodeTransformer().transform(doc)
        assert copy == doc
        assert copy is not doc
        copy.find_first("mj-image").set("src", "b.png")
        assert doc.find_first("mj-image").get("src") == "a.png"

    def test_affordances_are_copied(self) -> None:
        """Test that copied elements do not share affordance objects."""
        doc = _sample()
        copy = NodeTransformer().transform(doc)
        copy.find_first("mj-text").affordances.editable = False
        assert doc.find_first("mj-text").affordances.editable

    def test_subclass_can_drop_nodes(self) -> None:
        """Test that returning None removes a node."""

        class DropImages(NodeTransformer):
            def visit_element(self, node: Element) -> Element | None:
                if node.tag == "mj-image":
                    return None
                return super().visit_element(node)

        result = DropImages().transform(_sample())
        assert extract_elements(result, "mj-image") == []
        assert len(extract_elements(result, "mj-text")) == 1


@pytest.mark.unit
class TestNavigation:
    """Tests for in-place navigation helpers."""

    def test_collectors(self) -> None:
        """Test collecting nodes by type and elements by tag."""
        doc = _sample()
        assert len(extract_nodes(doc, Comment)) == 1
        assert [e.tag for e in extract_elements(doc, "mj-text")] == ["mj-text"]
        collector = NodeCollector()
        doc.accept(collector)
        assert collector.collected[0] is doc

    def test_iter_elements_on_document(self) -> None:
        """Test iterating a document skips non-element children."""
        assert [e.tag for e in iter_elements(_sample())][:2] == ["mjml", "mj-body"]

    def test_find_parent_by_identity(self) -> None:
        """Test that parents are located by identity, not equality."""
        doc = _sample()
        column = doc.find_first("mj-column")
        image = doc.find_first("mj-image")
        assert find_parent(doc, image) == (column, 1)
        assert find_parent(doc, Element(tag="mj-image", attributes={"src": "a.png"})) is None

    def test_node_path_and_node_at(self) -> None:
        """Test addressing nodes by child-index paths."""
        doc = _sample()
        image = doc.find_first("mj-image")
        path = node_path(doc, image)
        assert path == (0, 0, 1, 0, 1)
        assert node_at(doc, path) is image
        assert node_path(doc, doc) == ()
        assert node_path(doc, Element(tag="mj-text")) is None

    def test_node_at_invalid_path(self) -> None:
        """Test that paths leaving the tree are rejected."""
        with pytest.raises(ValidationError):
            node_at(_sample(), (0, 5))

    def test_insert_child(self) -> None:
        """Test insertion positions."""
        column = Element(tag="mj-column", children=[Element(tag="mj-text")])
        assert insert_child(column, Element(tag="mj-image")) == 1
        assert insert_child(column, Element(tag="mj-divider"), 0) == 0
        assert insert_child(column, Element(tag="mj-spacer"), 99) == 3
        assert insert_child(column, Element(tag="mj-button"), -4) == 0
        assert [c.tag for c in column.children] == ["mj-button", "mj-divider", "mj-text", "mj-image", "mj-spacer"]

    def test_remove_node(self) -> None:
        """Test removing a node in place."""
        doc = _sample()
        image = doc.find_first("mj-image")
        assert remove_node(doc, image)
        assert doc.find_first("mj-image") is None
        assert not remove_node(doc, image)

    def test_ancestors(self) -> None:
        """Test ancestor chains, nearest first."""
        doc = _sample()
        text = doc.find_first("mj-text")
        assert [e.tag for e in ancestors(doc, text)] == ["mj-column", "mj-section", "mj-body", "mjml"]
        assert ancestors(doc, Element(tag="x")) == []

    def test_clone_node(self) -> None:
        """Test deep cloning."""
        section = _sample().find_first("mj-section")
        copy = clone_node(section)
        assert copy == section
        copy.find_first("mj-text").children[0].content = "Changed"
        assert section.text_content() == "Hi"
