#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/ast/nodes.py
"""Tree node classes for layout markup.

This module defines the node hierarchy used to represent an email layout
template while it is being transformed or edited. The same tree shape backs
both representations of a design:

- the *persisted* template, whose nodes carry placeholder markers such as
  ``{{content:headline}}`` or ``{{image:hero-banner}}``
- the *editable* document, whose nodes carry readable stand-in content and
  a tracking token in their ``css-class`` attribute

Node Hierarchy
--------------
All nodes inherit from the base Node class and support the visitor pattern.

    - Document: root of a parsed markup string
    - Element: a markup tag with ordered attributes and ordered children
    - Text: character data inside an element
    - Comment: a markup comment, kept so round trips do not lose it

Elements additionally carry :class:`Affordances`, the editor-session flags
that decide whether a block may be dragged, removed, copied, selected or
edited. Affordances are never serialized.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Iterator


@dataclass
class Affordances:
    """Editor interaction flags for a single element.

    Parameters
    ----------
    draggable : bool, default = True
        Whether the element may be moved on the canvas
    removable : bool, default = True
        Whether the element may be deleted
    copyable : bool, default = True
        Whether the element may be duplicated by the editor
    selectable : bool, default = True
        Whether the element may be selected
    editable : bool, default = True
        Whether the element's text may be edited in place

    """

    draggable: bool = True
    removable: bool = True
    copyable: bool = True
    selectable: bool = True
    editable: bool = True

    @property
    def locked(self) -> bool:
        """Return True when the element can be neither moved, removed nor selected."""
        return not (self.draggable or self.removable or self.selectable)


class Node(ABC):
    """Base class for all tree nodes.

    Parameters
    ----------
    metadata : dict, default = empty dict
        Arbitrary metadata associated with this node

    """

    metadata: dict[str, Any]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


@dataclass
class Document(Node):
    """Root node containing the top-level markup nodes.

    A parsed template normally has a single ``mjml`` element child, but
    block fragments (a lone ``mj-section`` or ``mj-text``) parse to a
    Document with the fragment's nodes as children.

    Parameters
    ----------
    children : list of Node, default = empty list
        Top-level nodes in the document
    metadata : dict, default = empty dict
        Document-level metadata

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document."""
        return visitor.visit_document(self)

    def find_first(self, tag: str) -> Element | None:
        """Return the first element with the given tag in document order.

        Parameters
        ----------
        tag : str
            Tag name to look for

        Returns
        -------
        Element or None
            The first matching element, or None if there is none

        """
        for child in self.children:
            if isinstance(child, Element):
                if child.tag == tag:
                    return child
                found = child.find_first(tag)
                if found is not None:
                    return found
        return None


@dataclass
class Element(Node):
    """A markup element.

    Parameters
    ----------
    tag : str
        Tag name (e.g. ``mj-image``)
    attributes : dict of str to str, default = empty dict
        Attributes in source order
    children : list of Node, default = empty list
        Child nodes in source order
    affordances : Affordances, default = unlocked
        Editor interaction flags (never serialized)
    metadata : dict, default = empty dict
        Arbitrary metadata associated with this element

    """

    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    affordances: Affordances = field(default_factory=Affordances)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this element."""
        return visitor.visit_element(self)

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return an attribute value or a default."""
        return self.attributes.get(name, default)

    def set(self, name: str, value: str) -> None:
        """Set an attribute, keeping its position if it already exists."""
        self.attributes[name] = value

    def remove(self, name: str) -> None:
        """Remove an attribute if present."""
        self.attributes.pop(name, None)

    def iter_descendants(self) -> Iterator[Node]:
        """Yield every descendant node in document order."""
        for child in self.children:
            yield child
            if isinstance(child, Element):
                yield from child.iter_descendants()

    def iter_elements(self) -> Iterator[Element]:
        """Yield this element and every descendant element in document order."""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter_elements()

    def find_first(self, tag: str) -> Element | None:
        """Return the first descendant element with the given tag."""
        for element in self.iter_elements():
            if element is not self and element.tag == tag:
                return element
        return None

    def text_content(self) -> str:
        """Return the concatenated text of all descendant Text nodes."""
        return "".join(node.content for node in self.iter_descendants() if isinstance(node, Text))


@dataclass
class Text(Node):
    """Character data.

    Parameters
    ----------
    content : str
        The text, with entities already decoded

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text node."""
        return visitor.visit_text(self)


@dataclass
class Comment(Node):
    """A markup comment.

    Parameters
    ----------
    content : str
        Comment body without the ``<!--``/``-->`` delimiters

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this comment."""
        return visitor.visit_comment(self)


def get_node_children(node: Node) -> list[Node]:
    """Return the children of a node, or an empty list for leaves."""
    if isinstance(node, (Document, Element)):
        return node.children
    return []


def replace_node_children(node: Node, children: list[Node]) -> Node:
    """Return a shallow copy of ``node`` with its children replaced.

    Attributes, affordances and metadata are copied so that the new node
    can be mutated without affecting the original.

    Parameters
    ----------
    node : Node
        Node to copy
    children : list of Node
        New children

    Returns
    -------
    Node
        The copied node

    """
    if isinstance(node, Element):
        return replace(
            node,
            attributes=dict(node.attributes),
            children=children,
            affordances=replace(node.affordances),
            metadata=node.metadata.copy(),
        )
    if isinstance(node, Document):
        return replace(node, children=children, metadata=node.metadata.copy())
    return replace(node)
