#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/ast/visitors.py
"""Visitor pattern implementation for tree traversal.

Visitors keep the algorithms that walk a layout tree (rendering, collecting
slot identities, transforming markers) separate from the node classes.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

from layoutslots.ast.nodes import Comment, Document, Element, Node, Text


class NodeVisitor(ABC):
    """Abstract base class for tree node visitors.

    Subclasses implement one visit_* method per node type. Each method
    receives the node and returns whatever the algorithm accumulates.

    Examples
    --------
    Count elements in a document:

        >>> class ElementCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...     def visit_document(self, node):
        ...         for child in node.children:
        ...             child.accept(self)
        ...     def visit_element(self, node):
        ...         self.count += 1
        ...         for child in node.children:
        ...             child.accept(self)
        ...     def visit_text(self, node):
        ...         pass
        ...     def visit_comment(self, node):
        ...         pass

    """

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit a Document node.

        Parameters
        ----------
        node : Document
            The document node to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_element(self, node: Element) -> Any:
        """Visit an Element node.

        Parameters
        ----------
        node : Element
            The element node to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""
        pass

    @abstractmethod
    def visit_comment(self, node: Comment) -> Any:
        """Visit a Comment node."""
        pass


class NodeCollector(NodeVisitor):
    """Visitor that collects nodes matching a predicate, in document order.

    Parameters
    ----------
    predicate : callable, optional
        Function deciding whether a node is collected. When omitted every
        node is collected.

    Examples
    --------
        >>> collector = NodeCollector(lambda n: isinstance(n, Element) and n.tag == "mj-image")
        >>> doc.accept(collector)
        >>> images = collector.collected

    """

    def __init__(self, predicate: Callable[[Node], bool] | None = None):
        """Initialize the collector with an optional predicate."""
        self.predicate = predicate or (lambda node: True)
        self.collected: list[Node] = []

    def _collect_if_match(self, node: Node) -> None:
        if self.predicate(node):
            self.collected.append(node)

    def visit_document(self, node: Document) -> None:
        """Collect the document and visit its children."""
        self._collect_if_match(node)
        for child in node.children:
            child.accept(self)

    def visit_element(self, node: Element) -> None:
        """Collect the element and visit its children."""
        self._collect_if_match(node)
        for child in node.children:
            child.accept(self)

    def visit_text(self, node: Text) -> None:
        """Collect the text node."""
        self._collect_if_match(node)

    def visit_comment(self, node: Comment) -> None:
        """Collect the comment node."""
        self._collect_if_match(node)
