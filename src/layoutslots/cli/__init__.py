"""Command-line interface for layoutslots.

Converts layout templates between their persisted form (``{{...}}``
placeholder markers) and their editor form (readable stand-ins with
``css-class`` tracking tokens), reports slot inventories, and talks to the
layout REST service.

Environment Variable Support
----------------------------
``LAYOUTSLOTS_API``, ``LAYOUTSLOTS_TOKEN`` and ``LAYOUTSLOTS_TIMEOUT``
configure the REST client; ``LAYOUTSLOTS_CONFIG`` points to a configuration
file. Command-line flags always win.

Examples
--------
Prepare a template for the editor::

    $ layoutslots editable welcome.mjml -o welcome.editor.mjml

Restore markers from editor output::

    $ layoutslots persisted welcome.editor.mjml

List the slots of a template::

    $ layoutslots slots welcome.mjml --rich

Upload a new layout::

    $ layoutslots --token $TOKEN push new welcome.mjml --name "Welcome"

"""

import argparse
import logging
import sys

from layoutslots.cli.builder import (
    EXIT_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    create_parser,
    get_exit_code_for_exception,
)
from layoutslots.cli.commands import CliContext, dispatch_command
from layoutslots.config import load_config_with_priority, options_from_config
from layoutslots.exceptions import LayoutSlotsError
from layoutslots.logging_utils import configure_logging, resolve_log_level

logger = logging.getLogger(__name__)


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging from ``--trace``, ``--verbose`` and ``--log-level``."""
    log_level = resolve_log_level(parsed_args.log_level, verbose=parsed_args.verbose, trace=parsed_args.trace)
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def build_context(parsed_args: argparse.Namespace) -> CliContext:
    """Resolve options from the configuration file, environment and flags."""
    config = load_config_with_priority(parsed_args.config)
    session_options, client_options = options_from_config(config)
    overrides = {"api_base_url": parsed_args.api_url, "token": parsed_args.token}
    client_options = client_options.create_updated(**{k: v for k, v in overrides.items() if v is not None})
    return CliContext(session_options=session_options, client_options=client_options)


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return the exit code."""
    parser = create_parser()
    try:
        parsed_args = parser.parse_args(args)
    except SystemExit as e:
        # argparse exits on --help and on usage errors
        return e.code if isinstance(e.code, int) else EXIT_VALIDATION_ERROR

    _setup_logging_level(parsed_args)

    try:
        context = build_context(parsed_args)
        return dispatch_command(parsed_args, context)
    except (LayoutSlotsError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return EXIT_ERROR


__all__ = ["main", "create_parser", "build_context", "EXIT_SUCCESS"]


if __name__ == "__main__":
    sys.exit(main())
