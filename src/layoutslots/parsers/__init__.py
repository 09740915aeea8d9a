#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/parsers/__init__.py
"""Markup parsers producing the layoutslots tree."""

from layoutslots.parsers.base import BaseParser
from layoutslots.parsers.mjml import MjmlParser, parse_mjml

__all__ = ["BaseParser", "MjmlParser", "parse_mjml"]
