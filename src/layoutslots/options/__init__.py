#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for layoutslots.

Each component has its own frozen Options dataclass. Use
``create_updated`` (or :func:`create_updated_options`) to derive a modified
copy instead of mutating an instance.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from layoutslots.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from layoutslots.options.client import ClientOptions
from layoutslots.options.mjml import MjmlParserOptions, MjmlRendererOptions
from layoutslots.options.session import SessionOptions


def create_updated_options(options: Any, **kwargs: Any) -> Any:
    """Create a new options instance with updated values.

    Parameters
    ----------
    options : Any
        The original options instance (must be a dataclass)
    **kwargs : Any
        Fields to update

    Returns
    -------
    Any
        New options instance with the updated fields

    """
    return replace(options, **kwargs)


__all__ = [
    "CloneFrozenMixin",
    "BaseParserOptions",
    "BaseRendererOptions",
    "MjmlParserOptions",
    "MjmlRendererOptions",
    "SessionOptions",
    "ClientOptions",
    "create_updated_options",
]
