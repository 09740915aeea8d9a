#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/parsers/mjml.py
"""MJML markup to tree parser.

This module parses MJML markup (a full ``<mjml>`` template or a block
fragment such as a lone ``mj-section``) into the layoutslots tree using
BeautifulSoup. Attribute order and text are preserved; entities are decoded
and re-encoded by the renderer.

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from layoutslots.ast import Comment, Document, Element, Node, Text
from layoutslots.exceptions import DependencyError, ParsingError
from layoutslots.options.mjml import MjmlParserOptions
from layoutslots.parsers.base import BaseParser
from layoutslots.reconstruct import extract_mjml_root

if TYPE_CHECKING:
    from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


class MjmlParser(BaseParser):
    """Convert MJML markup to a layoutslots Document.

    Parameters
    ----------
    options : MjmlParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
        >>> doc = MjmlParser().parse('<mj-text css-class="x">Hi</mj-text>')
        >>> doc.children[0].attributes
        {'css-class': 'x'}

    """

    def __init__(self, options: MjmlParserOptions | None = None):
        """Initialize the MJML parser with options."""
        BaseParser._validate_options_type(options, MjmlParserOptions, "mjml")
        options = options or MjmlParserOptions()
        super().__init__(options)
        self.options: MjmlParserOptions = options

    def parse(self, input_data: Union[str, bytes, Path]) -> Document:
        """Parse MJML markup into a Document.

        Parameters
        ----------
        input_data : str, bytes or Path
            Markup text, UTF-8 bytes, or a path to an ``.mjml`` file

        Returns
        -------
        Document
            Tree with one child per top-level markup node

        Raises
        ------
        ParsingError
            If BeautifulSoup rejects the markup
        DependencyError
            If the configured tree builder is not installed

        """
        markup = self._load_text(input_data)
        if self.options.extract_root:
            markup = extract_mjml_root(markup)

        soup = self._make_soup(markup)
        children = self._convert_children(soup)
        logger.debug("Parsed MJML markup into %d top-level node(s)", len(children))
        return Document(children=children)

    def _make_soup(self, markup: str) -> "BeautifulSoup":
        from bs4 import BeautifulSoup
        from bs4.builder import ParserRejectedMarkup
        from bs4.exceptions import FeatureNotFound

        try:
            return BeautifulSoup(
                markup,
                self.options.html_parser,
                multi_valued_attributes=None,
                on_duplicate_attribute="replace",
            )
        except FeatureNotFound as e:
            missing = [(self.options.html_parser, "")] if self.options.html_parser != "html.parser" else []
            raise DependencyError(
                "MjmlParser",
                missing_packages=missing,
                message=f"Selected MjmlParserOptions.html_parser not found: {e}.",
            ) from e
        except ParserRejectedMarkup as e:
            raise ParsingError(f"Markup could not be parsed: {e}", parsing_stage="tokenize", original_error=e) from e

    def _convert_children(self, parent: Any) -> list[Node]:
        from bs4.element import Comment as SoupComment
        from bs4.element import NavigableString, PreformattedString, Tag

        nodes: list[Node] = []
        for child in parent.children:
            if isinstance(child, Tag):
                nodes.append(self._convert_tag(child))
            elif isinstance(child, SoupComment):
                if not self.options.strip_comments:
                    nodes.append(Comment(content=str(child)))
            elif isinstance(child, PreformattedString):
                # Doctype, CDATA and processing instructions carry no layout content
                logger.debug("Skipping %s node", type(child).__name__)
            elif isinstance(child, NavigableString):
                nodes.append(Text(content=str(child)))
        return nodes

    def _convert_tag(self, tag: Any) -> Element:
        attributes = {str(name): "" if value is None else str(value) for name, value in tag.attrs.items()}
        return Element(tag=tag.name, attributes=attributes, children=self._convert_children(tag))


def parse_mjml(markup: Union[str, bytes, Path], options: MjmlParserOptions | None = None) -> Document:
    """Parse MJML markup with a throwaway :class:`MjmlParser`."""
    return MjmlParser(options).parse(markup)
