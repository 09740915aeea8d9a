#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/utils/__init__.py
"""Utility modules for the layoutslots package."""

from layoutslots.utils.decorators import debug_timer, requires_dependencies
from layoutslots.utils.text import make_ordinal_name, normalize_markup

__all__ = [
    "debug_timer",
    "requires_dependencies",
    "make_ordinal_name",
    "normalize_markup",
]
