#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/parsers/base.py
"""Base classes for markup parsers.

This module defines the abstract base class that markup parsers inherit
from. A parser turns markup text into the layoutslots tree
(:class:`~layoutslots.ast.Document`).

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from layoutslots.ast import Document
from layoutslots.exceptions import InvalidOptionsError, ValidationError
from layoutslots.options.base import BaseParserOptions

logger = logging.getLogger(__name__)


class BaseParser(ABC):
    """Abstract base class for markup parsers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Format-specific parsing options

    Examples
    --------
    Creating a custom parser:

        >>> from layoutslots.parsers.base import BaseParser
        >>> from layoutslots.ast import Document
        >>>
        >>> class EmptyParser(BaseParser):
        ...     def parse(self, input_data):
        ...         return Document(children=[])

    """

    def __init__(self, options: BaseParserOptions | None = None):
        """Initialize the parser with optional configuration."""
        self.options: BaseParserOptions | None = options

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                component_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @staticmethod
    def _load_text(input_data: Union[str, bytes, Path]) -> str:
        """Return markup text from a string, UTF-8 bytes or a file path.

        Strings are always treated as markup; pass a ``Path`` to read a file.

        Raises
        ------
        ValidationError
            If the input type is not supported or bytes are not UTF-8

        """
        if isinstance(input_data, str):
            return input_data
        if isinstance(input_data, Path):
            return input_data.read_text(encoding="utf-8")
        if isinstance(input_data, (bytes, bytearray)):
            try:
                return bytes(input_data).decode("utf-8")
            except UnicodeDecodeError as e:
                raise ValidationError(
                    "Markup bytes must be UTF-8 encoded", parameter_name="input_data", original_error=e
                ) from e
        raise ValidationError(
            f"Unsupported input type: {type(input_data).__name__}",
            parameter_name="input_data",
            parameter_value=type(input_data).__name__,
        )

    @abstractmethod
    def parse(self, input_data: Union[str, bytes, Path]) -> Document:
        """Parse markup into a Document.

        Parameters
        ----------
        input_data : str, bytes or Path
            Markup text, UTF-8 encoded markup, or a path to a markup file

        Returns
        -------
        Document
            Tree representing the markup

        Raises
        ------
        ParsingError
            If the markup cannot be parsed at all
        DependencyError
            If the configured tree builder is not installed
        ValidationError
            If the input type is not supported

        """
        raise NotImplementedError
