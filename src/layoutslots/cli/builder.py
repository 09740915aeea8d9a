#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/cli/builder.py
"""Argument parser and exit codes for the layoutslots command line."""

import argparse

from layoutslots.exceptions import (
    DependencyError,
    ParsingError,
    RenderingError,
    ServiceError,
    TransformError,
    ValidationError,
)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_DEPENDENCY_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6
EXIT_RENDERING_ERROR = 7
EXIT_SERVICE_ERROR = 10


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    if isinstance(exception, (DependencyError, ImportError)):
        return EXIT_DEPENDENCY_ERROR

    if isinstance(exception, ValidationError):
        return EXIT_VALIDATION_ERROR

    if isinstance(exception, OSError):
        return EXIT_FILE_ERROR

    if isinstance(exception, ParsingError):
        return EXIT_PARSING_ERROR

    if isinstance(exception, (RenderingError, TransformError)):
        return EXIT_RENDERING_ERROR

    if isinstance(exception, ServiceError):
        return EXIT_SERVICE_ERROR

    return EXIT_ERROR


def _add_output_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-o", "--out", help="Write the result to this file instead of stdout")


def create_parser() -> argparse.ArgumentParser:
    """Create the ``layoutslots`` argument parser with every subcommand."""
    parser = argparse.ArgumentParser(
        prog="layoutslots",
        description="Convert layout templates between persisted and editor form and manage their slots.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log output to this file")
    parser.add_argument("--trace", action="store_true", help="Trace mode: debug logging with timestamps")
    parser.add_argument("--verbose", "-v", action="store_true", help="Shortcut for --log-level DEBUG")
    parser.add_argument("--config", help="Configuration file (.toml, .yaml, .json or pyproject.toml)")
    parser.add_argument("--api-url", help="Base URL of the layout REST API (env: LAYOUTSLOTS_API)")
    parser.add_argument("--token", help="Bearer token for the layout REST API (env: LAYOUTSLOTS_TOKEN)")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    editable = subparsers.add_parser("editable", help="Convert persisted markup to editor markup")
    editable.add_argument("input", help="Template file ('-' for stdin)")
    _add_output_argument(editable)

    persisted = subparsers.add_parser("persisted", help="Convert editor markup back to persisted markup")
    persisted.add_argument("input", help="Editor markup file ('-' for stdin)")
    _add_output_argument(persisted)

    slots = subparsers.add_parser("slots", help="List the slots a template declares")
    slots.add_argument("input", help="Template file ('-' for stdin)")
    slots_format = slots.add_mutually_exclusive_group()
    slots_format.add_argument("--rich", action="store_true", help="Use rich terminal output")
    slots_format.add_argument("--json", action="store_true", help="Print the inventory as JSON")

    check = subparsers.add_parser("check", help="Check round-trip stability and slot uniqueness")
    check.add_argument("input", help="Template file ('-' for stdin)")

    blocks = subparsers.add_parser("blocks", help="List the insertable block library")
    blocks.add_argument("--category", choices=["Sections", "Elements"], help="Only list this category")
    blocks.add_argument("--rich", action="store_true", help="Use rich terminal output")

    pull = subparsers.add_parser("pull", help="Download a template from the layout service")
    pull.add_argument("template_id", help="Layout id")
    pull.add_argument("--editable", action="store_true", help="Convert to editor markup")
    _add_output_argument(pull)

    push = subparsers.add_parser("push", help="Upload a template to the layout service")
    push.add_argument("template_id", help="Layout id to update, or 'new' to create one")
    push.add_argument("input", help="Template file ('-' for stdin)")
    push.add_argument("--name", required=True, help="Layout name")
    push.add_argument("--category", help="Layout category")

    preview = subparsers.add_parser("preview", help="Compile a template to preview HTML")
    preview.add_argument("input", help="Template file ('-' for stdin)")
    _add_output_argument(preview)

    products = subparsers.add_parser("products", help="List catalog products")
    products.add_argument("--rich", action="store_true", help="Use rich terminal output")

    return parser
