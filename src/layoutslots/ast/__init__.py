#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/ast/__init__.py
"""Tree module for layout template representation.

The module consists of several components:

- nodes: node classes (Document, Element, Text, Comment) and editor affordances
- visitors: visitor pattern base classes for traversal
- transforms: copy-on-write transformer and in-place navigation helpers

Examples
--------
Basic usage:

    >>> from layoutslots.ast import Document, Element, Text
    >>> from layoutslots.renderers.mjml import MjmlRenderer
    >>>
    >>> doc = Document(children=[
    ...     Element(tag="mj-text", attributes={"align": "center"}, children=[Text(content="Hi")])
    ... ])
    >>> MjmlRenderer().render_to_string(doc)
    '<mj-text align="center">Hi</mj-text>'

"""

from layoutslots.ast.nodes import (
    Affordances,
    Comment,
    Document,
    Element,
    Node,
    Text,
    get_node_children,
    replace_node_children,
)
from layoutslots.ast.transforms import (
    NodePath,
    NodeTransformer,
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
from layoutslots.ast.visitors import NodeCollector, NodeVisitor

__all__ = [
    # Nodes
    "Node",
    "Document",
    "Element",
    "Text",
    "Comment",
    "Affordances",
    "get_node_children",
    "replace_node_children",
    # Visitors
    "NodeVisitor",
    "NodeCollector",
    # Transforms
    "NodePath",
    "NodeTransformer",
    "clone_node",
    "extract_nodes",
    "extract_elements",
    "iter_elements",
    "find_parent",
    "node_path",
    "node_at",
    "insert_child",
    "remove_node",
    "ancestors",
]
