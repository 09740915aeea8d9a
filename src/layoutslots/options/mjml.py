#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for MJML parsing and rendering."""

from __future__ import annotations

from dataclasses import dataclass, field

from layoutslots.constants import DEFAULT_HTML_PARSER, HtmlParserType
from layoutslots.options.base import BaseParserOptions, BaseRendererOptions


@dataclass(frozen=True)
class MjmlParserOptions(BaseParserOptions):
    """Configuration options for parsing MJML markup into a tree.

    Parameters
    ----------
    html_parser : {"html.parser", "html5lib", "lxml"}, default "html.parser"
        BeautifulSoup tree builder. ``html.parser`` ships with Python and
        keeps unknown ``mj-*`` tags and self-closing syntax intact.
    extract_root : bool, default True
        When the input contains ``<mjml>…</mjml>`` surrounded by wrapper
        markup, keep only the ``mjml`` element.

    """

    html_parser: HtmlParserType = field(
        default=DEFAULT_HTML_PARSER,
        metadata={
            "help": "BeautifulSoup tree builder",
            "choices": ["html.parser", "html5lib", "lxml"],
            "importance": "advanced",
        },
    )
    extract_root: bool = field(
        default=True,
        metadata={"help": "Discard wrapper markup outside <mjml>...</mjml>", "importance": "core"},
    )


@dataclass(frozen=True)
class MjmlRendererOptions(BaseRendererOptions):
    """Configuration options for rendering a tree back to MJML markup.

    Parameters
    ----------
    self_close_empty : bool, default True
        Emit childless MJML leaf tags (``mj-image``, ``mj-divider``, …) and
        HTML void tags as ``<tag ... />``. When False every element gets an
        explicit closing tag except HTML void tags.

    """

    self_close_empty: bool = field(
        default=True,
        metadata={"help": "Serialize childless leaf tags as <tag ... />", "importance": "core"},
    )
