#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/ast/transforms.py
"""Tree transformation and navigation utilities.

This module provides the copy-on-write :class:`NodeTransformer` used by the
forward and reverse marker transforms, plus the in-place navigation helpers
the editing session relies on (locating parents, addressing nodes by path,
inserting children).

Examples
--------
Collect every image element:

    >>> from layoutslots.ast import transforms
    >>> images = transforms.extract_elements(doc, "mj-image")

Clone a block before inserting it a second time:

    >>> copy = transforms.clone_node(block)

"""

from __future__ import annotations

import copy
from typing import Iterator

from layoutslots.ast.nodes import (
    Comment,
    Document,
    Element,
    Node,
    Text,
    get_node_children,
    replace_node_children,
)
from layoutslots.ast.visitors import NodeCollector, NodeVisitor
from layoutslots.exceptions import ValidationError

NodePath = tuple[int, ...]


class NodeTransformer(NodeVisitor):
    """Base class for transforming trees.

    Subclasses override visit_* methods and return modified nodes, or None
    to drop a node. The input tree is never mutated: every visited node is
    copied before its children are replaced.

    Examples
    --------
    >>> class UppercaseTransformer(NodeTransformer):
    ...     def visit_text(self, node):
    ...         return Text(content=node.content.upper())
    >>>
    >>> new_doc = UppercaseTransformer().transform(doc)

    """

    def transform(self, node: Node) -> Node | None:
        """Transform a node.

        Parameters
        ----------
        node : Node
            Node to transform

        Returns
        -------
        Node or None
            Transformed node or None to remove it

        """
        return node.accept(self)

    def _transform_children(self, children: list[Node]) -> list[Node]:
        result = []
        for child in children:
            transformed = self.transform(child)
            if transformed is not None:
                result.append(transformed)
        return result

    def _generic_transform(self, node: Node) -> Node:
        children = get_node_children(node)
        if not children:
            return replace_node_children(node, [])
        return replace_node_children(node, self._transform_children(children))

    def visit_document(self, node: Document) -> Document:
        """Transform a Document node."""
        return Document(children=self._transform_children(node.children), metadata=node.metadata.copy())

    def visit_element(self, node: Element) -> Element | None:
        """Transform an Element node."""
        return self._generic_transform(node)  # type: ignore[return-value]

    def visit_text(self, node: Text) -> Text | None:
        """Transform a Text node."""
        return Text(content=node.content, metadata=node.metadata.copy())

    def visit_comment(self, node: Comment) -> Comment | None:
        """Transform a Comment node."""
        return Comment(content=node.content, metadata=node.metadata.copy())


def clone_node(node: Node) -> Node:
    """Return a deep copy of a node and its subtree."""
    return copy.deepcopy(node)


def extract_nodes(root: Node, node_type: type[Node]) -> list[Node]:
    """Return every node of the given type beneath ``root`` (inclusive)."""
    collector = NodeCollector(lambda n: isinstance(n, node_type))
    root.accept(collector)
    return collector.collected


def extract_elements(root: Node, tag: str | None = None) -> list[Element]:
    """Return every element beneath ``root`` (inclusive), optionally filtered by tag."""
    collector = NodeCollector(lambda n: isinstance(n, Element) and (tag is None or n.tag == tag))
    root.accept(collector)
    return collector.collected  # type: ignore[return-value]


def iter_elements(root: Document | Element) -> Iterator[Element]:
    """Yield every element beneath ``root`` in document order."""
    if isinstance(root, Element):
        yield from root.iter_elements()
        return
    for child in root.children:
        if isinstance(child, Element):
            yield from child.iter_elements()


def find_parent(root: Document | Element, target: Node) -> tuple[Document | Element, int] | None:
    """Locate the parent of ``target`` by identity.

    Parameters
    ----------
    root : Document or Element
        Tree to search
    target : Node
        Node whose parent is wanted

    Returns
    -------
    tuple of (Document or Element, int) or None
        The parent and the target's index within it, or None if the
        target is not part of the tree

    """
    stack: list[Document | Element] = [root]
    while stack:
        parent = stack.pop()
        for index, child in enumerate(parent.children):
            if child is target:
                return parent, index
            if isinstance(child, Element):
                stack.append(child)
    return None


def node_path(root: Document | Element, target: Node) -> NodePath | None:
    """Return the child-index path from ``root`` to ``target``, or None."""
    if target is root:
        return ()

    def _walk(parent: Document | Element, prefix: NodePath) -> NodePath | None:
        for index, child in enumerate(parent.children):
            path = prefix + (index,)
            if child is target:
                return path
            if isinstance(child, Element):
                found = _walk(child, path)
                if found is not None:
                    return found
        return None

    return _walk(root, ())


def node_at(root: Document | Element, path: NodePath) -> Node:
    """Return the node addressed by a child-index path.

    Raises
    ------
    ValidationError
        If the path does not address a node in the tree

    """
    current: Node = root
    for depth, index in enumerate(path):
        children = get_node_children(current)
        if index < 0 or index >= len(children):
            raise ValidationError(
                f"Path {list(path)} leaves the tree at depth {depth}", parameter_name="path", parameter_value=path
            )
        current = children[index]
    return current


def insert_child(parent: Document | Element, node: Node, index: int | None = None) -> int:
    """Insert ``node`` into ``parent`` in place and return its index."""
    if index is None or index >= len(parent.children):
        parent.children.append(node)
        return len(parent.children) - 1
    index = max(index, 0)
    parent.children.insert(index, node)
    return index


def remove_node(root: Document | Element, target: Node) -> bool:
    """Remove ``target`` from the tree in place; return True if it was found."""
    located = find_parent(root, target)
    if located is None:
        return False
    parent, index = located
    del parent.children[index]
    return True


def ancestors(root: Document | Element, target: Node) -> list[Element]:
    """Return the element ancestors of ``target``, nearest first."""
    path = node_path(root, target)
    if path is None:
        return []
    chain: list[Element] = []
    current: Node = root
    for index in path[:-1]:
        current = get_node_children(current)[index]
        if isinstance(current, Element):
            chain.append(current)
    chain.reverse()
    return chain
