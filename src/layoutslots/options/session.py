#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for editing sessions."""

from __future__ import annotations

from dataclasses import dataclass, field

from layoutslots.constants import DEFAULT_MAX_PRODUCTS, DEFAULT_RESERVED_REGION_CLASSES
from layoutslots.options.base import CloneFrozenMixin
from layoutslots.options.mjml import MjmlParserOptions, MjmlRendererOptions


@dataclass(frozen=True)
class SessionOptions(CloneFrozenMixin):
    """Configuration for a :class:`~layoutslots.session.DocumentSession`.

    Parameters
    ----------
    reserved_region_classes : tuple of str
        ``css-class`` tokens naming regions that are locked on load and on
        insertion (header and footer by default)
    dedup_enabled : bool, default True
        Rename duplicated slot identities after each insertion
    lock_reserved_regions : bool, default True
        Apply the locking policy to reserved regions
    strict_events : bool, default False
        Re-raise exceptions from event handlers instead of logging them
    strict_drops : bool, default False
        Raise DropZoneError for invalid drops in addition to the user notice
    default_max_products : int, default 2
        Product picker size used when a product block has no indexed slots
    parser_options : MjmlParserOptions
        Options used when loading markup
    renderer_options : MjmlRendererOptions
        Options used when serializing the document

    """

    reserved_region_classes: tuple[str, ...] = field(
        default=DEFAULT_RESERVED_REGION_CLASSES,
        metadata={"help": "css-class tokens of regions locked in the editor", "importance": "core"},
    )
    dedup_enabled: bool = field(
        default=True,
        metadata={"help": "Rename duplicated slot identities after insertion", "importance": "core"},
    )
    lock_reserved_regions: bool = field(
        default=True,
        metadata={"help": "Lock header/footer regions on load and insertion", "importance": "core"},
    )
    strict_events: bool = field(
        default=False,
        metadata={"help": "Re-raise exceptions raised by event handlers", "importance": "advanced"},
    )
    strict_drops: bool = field(
        default=False,
        metadata={"help": "Raise DropZoneError for invalid drops", "importance": "advanced"},
    )
    default_max_products: int = field(
        default=DEFAULT_MAX_PRODUCTS,
        metadata={"help": "Fallback product picker size", "type": int, "importance": "advanced"},
    )
    parser_options: MjmlParserOptions = field(default_factory=MjmlParserOptions)
    renderer_options: MjmlRendererOptions = field(default_factory=MjmlRendererOptions)

    def __post_init__(self) -> None:
        """Validate numeric ranges.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.default_max_products < 1:
            raise ValueError(f"default_max_products must be positive, got {self.default_max_products}")
