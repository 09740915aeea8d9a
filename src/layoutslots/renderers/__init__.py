#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/renderers/__init__.py
"""Renderers serializing the layoutslots tree back to markup."""

from layoutslots.renderers.base import BaseRenderer
from layoutslots.renderers.mjml import MjmlRenderer, escape_attribute, escape_text, render_mjml

__all__ = ["BaseRenderer", "MjmlRenderer", "escape_attribute", "escape_text", "render_mjml"]
