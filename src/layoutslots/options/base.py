#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Base classes for parser, renderer and session options.

This module defines the foundation classes for the frozen option
dataclasses used throughout layoutslots.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for all parser options.

    Parameters
    ----------
    strip_comments : bool, default False
        Drop markup comments instead of keeping them as Comment nodes

    """

    strip_comments: bool = field(
        default=False,
        metadata={"help": "Drop markup comments while parsing", "importance": "advanced"},
    )


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for all renderer options.

    Parameters
    ----------
    fail_on_unknown_nodes : bool, default False
        Raise RenderingError for node types the renderer does not know.
        If False, such nodes are skipped with a logged warning.

    """

    fail_on_unknown_nodes: bool = field(
        default=False,
        metadata={"help": "Raise RenderingError for unknown node types", "importance": "advanced"},
    )
