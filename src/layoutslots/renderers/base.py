#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/renderers/base.py
"""Base classes for tree renderers.

This module defines the abstract base class that renderers inherit from.
A renderer serializes a layoutslots tree back into markup text.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from layoutslots.ast import Document
from layoutslots.exceptions import InvalidOptionsError
from layoutslots.options.base import BaseRendererOptions


class BaseRenderer(ABC):
    """Abstract base class for tree renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @abstractmethod
    def render_to_string(self, doc: Document) -> str:
        """Render the tree to markup text.

        Parameters
        ----------
        doc : Document
            Tree to render

        Returns
        -------
        str
            Rendered markup

        Raises
        ------
        RenderingError
            If rendering fails

        """
        raise NotImplementedError

    def render(self, doc: Document, output: Union[str, Path, IO[str]]) -> None:
        """Render the tree and write it to a path or text stream."""
        self.write_text_output(self.render_to_string(doc), output)

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                component_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @staticmethod
    def write_text_output(text: str, output: Union[str, Path, IO[str]]) -> None:
        """Write text to a file path or a text stream.

        Examples
        --------
            >>> from io import StringIO
            >>> buffer = StringIO()
            >>> BaseRenderer.write_text_output("<mjml></mjml>", buffer)
            >>> buffer.getvalue()
            '<mjml></mjml>'

        """
        if isinstance(output, (str, Path)):
            Path(output).write_text(text, encoding="utf-8")
        else:
            output.write(text)
