#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/cli/commands.py
"""Subcommand handlers for the layoutslots command line.

Each handler takes the parsed arguments and a :class:`CliContext` and
returns an exit code. Library exceptions propagate to :func:`main`, which
maps them to exit codes.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from typing import Callable

from layoutslots.cli.builder import EXIT_SERVICE_ERROR, EXIT_SUCCESS, EXIT_VALIDATION_ERROR
from layoutslots.inventory import SlotInventory, collect_slots
from layoutslots.options import ClientOptions, SessionOptions
from layoutslots.renderers.base import BaseRenderer
from layoutslots.services import CatalogProduct, LayoutApiClient
from layoutslots.session import Block, DocumentSession, find_duplicate_identities, list_blocks
from layoutslots.transforms import to_editable, to_editable_document, to_persisted
from layoutslots.utils.decorators import requires_dependencies
from layoutslots.utils.text import normalize_markup

logger = logging.getLogger(__name__)

DEPS_RICH = [("rich", "rich")]


@dataclass
class CliContext:
    """Options resolved from the configuration file, environment and flags."""

    session_options: SessionOptions
    client_options: ClientOptions


def create_client(options: ClientOptions) -> LayoutApiClient:
    """Create the REST client used by the service subcommands."""
    return LayoutApiClient(options)


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _emit(text: str, out: str | None) -> None:
    if out:
        BaseRenderer.write_text_output(text, out)
        logger.info(f"Wrote {out}")
    else:
        print(text)


# ----------------------------------------------------------------------
# Transform commands
# ----------------------------------------------------------------------


def handle_editable_command(parsed: argparse.Namespace, context: CliContext) -> int:
    """Convert persisted markup to editor markup."""
    options = context.session_options
    markup = to_editable(_read_input(parsed.input), options.parser_options, options.renderer_options)
    _emit(markup, parsed.out)
    return EXIT_SUCCESS


def handle_persisted_command(parsed: argparse.Namespace, context: CliContext) -> int:
    """Convert editor markup back to persisted markup."""
    options = context.session_options
    markup = to_persisted(_read_input(parsed.input), options.parser_options, options.renderer_options)
    _emit(markup, parsed.out)
    return EXIT_SUCCESS


def handle_check_command(parsed: argparse.Namespace, context: CliContext) -> int:
    """Check that a template survives a round trip and has no duplicated slots.

    Returns
    -------
    int
        0 when the template is clean, 3 otherwise

    """
    options = context.session_options
    document = to_editable_document(_read_input(parsed.input), options.parser_options)
    duplicates = find_duplicate_identities(document)

    persisted = to_persisted(document, options.parser_options, options.renderer_options)
    again = to_persisted(
        to_editable(persisted, options.parser_options, options.renderer_options),
        options.parser_options,
        options.renderer_options,
    )
    stable = normalize_markup(persisted) == normalize_markup(again)

    print(f"Round trip: {'OK' if stable else 'CHANGED'}")
    if duplicates:
        print(f"Duplicate slots ({len(duplicates)}):")
        for key, count in sorted(duplicates.items()):
            print(f"  {key} ({count} nodes)")
    else:
        print("Duplicate slots: none")

    return EXIT_SUCCESS if stable and not duplicates else EXIT_VALIDATION_ERROR


# ----------------------------------------------------------------------
# Listing commands
# ----------------------------------------------------------------------


def _render_plain_inventory(inventory: SlotInventory) -> None:
    print(f"Content slots ({len(inventory.content_slots)}): {', '.join(inventory.content_slots) or '-'}")
    print(f"Image slots ({len(inventory.image_slots)}): {', '.join(inventory.image_slots) or '-'}")
    products = [f"{component} {positions}" for component, positions in inventory.product_components.items()]
    print(f"Product blocks ({len(products)}): {', '.join(products) or '-'}")


@requires_dependencies("rich output", DEPS_RICH)
def _render_rich_inventory(inventory: SlotInventory) -> None:
    from rich.console import Console
    from rich.table import Table

    table = Table(title="Template slots")
    table.add_column("Kind", style="cyan", no_wrap=True)
    table.add_column("Slot", style="green")
    table.add_column("Marker")
    for slot_id in inventory.content_slots:
        marker = "{{footer}}" if slot_id == "footer" else "{{content:" + slot_id + "}}"
        table.add_row("content", slot_id, marker)
    for slot_id in inventory.image_slots:
        marker = "{{logo}}" if slot_id == "logo" else "{{image:" + slot_id + "}}"
        table.add_row("image", slot_id, marker)
    for component, positions in inventory.product_components.items():
        table.add_row("product", component, ", ".join(str(p) for p in positions))
    Console().print(table)


def handle_slots_command(parsed: argparse.Namespace, context: CliContext) -> int:
    """List the slots declared by a template."""
    inventory = collect_slots(_read_input(parsed.input), context.session_options.parser_options)
    if parsed.json:
        print(json.dumps(inventory.to_dict(), indent=2))
    elif parsed.rich:
        _render_rich_inventory(inventory)
    else:
        _render_plain_inventory(inventory)
    return EXIT_SUCCESS


@requires_dependencies("rich output", DEPS_RICH)
def _render_rich_blocks(blocks: list[Block]) -> None:
    from rich.console import Console
    from rich.table import Table

    table = Table(title="Block library")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Label")
    table.add_column("Category")
    table.add_column("Drop into", style="green")
    for block in blocks:
        target = "email body" if block.block_class.value == "structure" else "column"
        table.add_row(block.id, block.label, block.category, target)
    Console().print(table)


def handle_blocks_command(parsed: argparse.Namespace, context: CliContext) -> int:
    """List the insertable block library."""
    blocks = list_blocks(parsed.category)
    if parsed.rich:
        _render_rich_blocks(blocks)
    else:
        for block in blocks:
            print(f"{block.id:<28} {block.category:<9} {block.block_class.value:<10} {block.label}")
    return EXIT_SUCCESS


# ----------------------------------------------------------------------
# Service commands
# ----------------------------------------------------------------------


def handle_pull_command(parsed: argparse.Namespace, context: CliContext) -> int:
    """Download a template's persisted markup."""
    with create_client(context.client_options) as client:
        markup = client.load_template(parsed.template_id)
    if parsed.editable:
        options = context.session_options
        markup = to_editable(markup, options.parser_options, options.renderer_options)
    _emit(markup, parsed.out)
    return EXIT_SUCCESS


def handle_push_command(parsed: argparse.Namespace, context: CliContext) -> int:
    """Upload a template (persisted or editor markup) through an editing session."""
    with create_client(context.client_options) as client:
        session = DocumentSession(context.session_options, template_store=client, preview_compiler=client)
        session.load(_read_input(parsed.input))
        template_id = None if parsed.template_id == "new" else parsed.template_id
        result = session.save(parsed.name, template_id=template_id, category=parsed.category)

    if not result.ok:
        print(f"Error: {result.error}", file=sys.stderr)
        return EXIT_SERVICE_ERROR
    print(result.template_id)
    return EXIT_SUCCESS


def handle_preview_command(parsed: argparse.Namespace, context: CliContext) -> int:
    """Compile a template to preview HTML with the layout service."""
    options = context.session_options
    document = to_editable_document(_read_input(parsed.input), options.parser_options)
    markup = to_persisted(document, options.parser_options, options.renderer_options)
    with create_client(context.client_options) as client:
        html = client.compile_to_preview_html(markup)
    _emit(html, parsed.out)
    return EXIT_SUCCESS


@requires_dependencies("rich output", DEPS_RICH)
def _render_rich_products(products: list[CatalogProduct]) -> None:
    from rich.console import Console
    from rich.table import Table

    table = Table(title="Catalog products")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Price", justify="right")
    table.add_column("Category")
    for product in products:
        price = "" if product.price is None else f"{product.currency or ''} {product.price}".strip()
        table.add_row(product.id, product.name, price, product.category or "")
    Console().print(table)


def handle_products_command(parsed: argparse.Namespace, context: CliContext) -> int:
    """List catalog products."""
    with create_client(context.client_options) as client:
        products = client.list_catalog_products()
    if parsed.rich:
        _render_rich_products(products)
    else:
        for product in products:
            price = "" if product.price is None else str(product.price)
            print(f"{product.id}\t{product.name}\t{price}")
    return EXIT_SUCCESS


COMMAND_HANDLERS: dict[str, Callable[[argparse.Namespace, CliContext], int]] = {
    "editable": handle_editable_command,
    "persisted": handle_persisted_command,
    "slots": handle_slots_command,
    "check": handle_check_command,
    "blocks": handle_blocks_command,
    "pull": handle_pull_command,
    "push": handle_push_command,
    "preview": handle_preview_command,
    "products": handle_products_command,
}


def dispatch_command(parsed: argparse.Namespace, context: CliContext) -> int:
    """Run the handler registered for ``parsed.command``."""
    return COMMAND_HANDLERS[parsed.command](parsed, context)
