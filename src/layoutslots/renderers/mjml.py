#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/renderers/mjml.py
"""Tree to MJML markup renderer.

This module serializes a layoutslots tree back to MJML text. Output is
deterministic: attributes in stored order, ``&`` and ``"`` escaped in
attribute values, ``&``, ``<`` and ``>`` escaped in text outside raw-text
tags, and childless leaf tags written as ``<tag ... />``.

Editor affordances are session state and never appear in the output.

"""

from __future__ import annotations

import logging

from layoutslots.ast import Comment, Document, Element, Node, NodeVisitor, Text
from layoutslots.constants import HTML_VOID_TAGS, MJML_SELF_CLOSING_TAGS, RAW_TEXT_TAGS
from layoutslots.exceptions import RenderingError
from layoutslots.options.mjml import MjmlRendererOptions
from layoutslots.renderers.base import BaseRenderer

logger = logging.getLogger(__name__)


def escape_attribute(value: str) -> str:
    """Escape an attribute value for a double-quoted attribute."""
    return value.replace("&", "&amp;").replace('"', "&quot;")


def escape_text(value: str) -> str:
    """Escape character data."""
    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


class MjmlRenderer(NodeVisitor, BaseRenderer):
    """Render a layoutslots tree to MJML markup.

    Parameters
    ----------
    options : MjmlRendererOptions or None, default = None
        Rendering configuration options

    Examples
    --------
        >>> from layoutslots.ast import Document, Element
        >>> doc = Document(children=[Element(tag="mj-image", attributes={"src": "a.png"})])
        >>> MjmlRenderer().render_to_string(doc)
        '<mj-image src="a.png" />'

    """

    def __init__(self, options: MjmlRendererOptions | None = None):
        """Initialize the MJML renderer with options."""
        BaseRenderer._validate_options_type(options, MjmlRendererOptions, "mjml")
        options = options or MjmlRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: MjmlRendererOptions = options
        self._output: list[str] = []
        self._raw_depth = 0

    def render_to_string(self, doc: Document) -> str:
        """Render a Document to MJML text."""
        self._output = []
        self._raw_depth = 0
        doc.accept(self)
        return "".join(self._output)

    def render_node(self, node: Node) -> str:
        """Render a single node and its subtree."""
        self._output = []
        self._raw_depth = 0
        self._render(node)
        return "".join(self._output)

    def _render(self, node: Node) -> None:
        if isinstance(node, (Document, Element, Text, Comment)):
            node.accept(self)
            return
        if self.options.fail_on_unknown_nodes:
            raise RenderingError(f"Unknown node type: {type(node).__name__}", rendering_stage="serialize")
        logger.warning("Skipping unknown node type %s", type(node).__name__)

    def visit_document(self, node: Document) -> None:
        """Render the document's top-level nodes."""
        for child in node.children:
            self._render(child)

    def visit_element(self, node: Element) -> None:
        """Render an element with its attributes and children."""
        open_tag = "<" + node.tag
        for name, value in node.attributes.items():
            open_tag += f' {name}="{escape_attribute(value)}"'

        if not node.children and self._self_closes(node.tag):
            self._output.append(open_tag + " />")
            return

        self._output.append(open_tag + ">")
        raw = node.tag in RAW_TEXT_TAGS
        if raw:
            self._raw_depth += 1
        for child in node.children:
            self._render(child)
        if raw:
            self._raw_depth -= 1
        self._output.append(f"</{node.tag}>")

    def visit_text(self, node: Text) -> None:
        """Render character data."""
        self._output.append(node.content if self._raw_depth else escape_text(node.content))

    def visit_comment(self, node: Comment) -> None:
        """Render a markup comment."""
        self._output.append(f"<!--{node.content}-->")

    def _self_closes(self, tag: str) -> bool:
        if tag in HTML_VOID_TAGS:
            return True
        return self.options.self_close_empty and tag in MJML_SELF_CLOSING_TAGS


def render_mjml(node: Node, options: MjmlRendererOptions | None = None) -> str:
    """Render a Document or a single node with a throwaway :class:`MjmlRenderer`."""
    renderer = MjmlRenderer(options)
    if isinstance(node, Document):
        return renderer.render_to_string(node)
    return renderer.render_node(node)
