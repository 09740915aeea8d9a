#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/session/blocks.py
"""Library of insertable blocks offered by the layout builder.

Blocks come in two categories. *Sections* are complete ``mj-section``
rows that attach to the email body; *Elements* are single text, button or
image pieces that go inside a column. Block markup is stored in editor
form: image slots already show their SVG placeholder and every slot carries
its tracking token.

Product blocks all use the component id ``product``; the deduplicator
renames the component when a second product block is dropped.

Examples
--------
    >>> block = get_block("placeholder-headline")
    >>> block.block_class
    <BlockClass.CONTENT: 'content'>
    >>> [element.tag for element in block.to_nodes()]
    ['mj-text']

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from layoutslots.ast import Element
from layoutslots.constants import PLACEHOLDER_IMAGE, PLACEHOLDER_PRODUCT_IMAGE
from layoutslots.exceptions import ValidationError
from layoutslots.parsers.mjml import MjmlParser
from layoutslots.session.dropzone import BlockClass

BlockCategory = Literal["Sections", "Elements"]

_IMG = PLACEHOLDER_IMAGE
_PRODUCT_IMG = PLACEHOLDER_PRODUCT_IMAGE


@dataclass(frozen=True)
class Block:
    """An insertable block.

    Parameters
    ----------
    id : str
        Stable block identifier (e.g. ``combo-hero``)
    label : str
        Human-readable name shown in the block panel
    category : {"Sections", "Elements"}
        Panel category
    block_class : BlockClass
        Where the block may be dropped
    content : str
        Block markup in editor form

    """

    id: str
    label: str
    category: BlockCategory
    block_class: BlockClass
    content: str

    def to_nodes(self) -> list[Element]:
        """Parse the block markup into fresh, independent elements."""
        document = MjmlParser().parse(self.content)
        return [child for child in document.children if isinstance(child, Element)]


def _product_column(index: int, width: str, image_width: str, name_size: str, price_size: str, button_size: str) -> str:
    font = f' font-size="{button_size}"' if button_size else ""
    return (
        f'<mj-column width="{width}" padding="12px">'
        f'<mj-image src="{_PRODUCT_IMG}" alt="Product image" width="{image_width}" height="auto" padding="0px" '
        f'css-class="product-img-slot--product--{index}" />'
        f'<mj-text font-size="{name_size}" font-weight="bold" padding="{"8px 0 4px 0" if button_size else "10px 0 4px 0"}">'
        f"{{{{product:product:{index}:name}}}}</mj-text>"
        f'<mj-text font-size="{price_size}" color="#666666" padding="0">{{{{product:product:{index}:price}}}}</mj-text>'
        f'<mj-button background-color="#ff5757" color="#ffffff" border-radius="4px"{font} padding="10px 0" '
        f'href="{{{{product:product:{index}:url}}}}">Shop Now</mj-button>'
        "</mj-column>"
    )


BLOCKS: tuple[Block, ...] = (
    # Sections
    Block(
        "combo-hero",
        "Hero Banner",
        "Sections",
        BlockClass.STRUCTURE,
        '<mj-section css-class="hero-section" padding="0px"><mj-column padding="0px">'
        f'<mj-image src="{_IMG}" alt="Hero image" width="600px" height="auto" padding="0px" '
        'css-class="img-slot--hero-banner" />'
        '<mj-text font-size="32px" font-weight="bold" padding="20px 25px 8px" '
        'css-class="content-slot--hero-headline">Your Hero Headline Here</mj-text></mj-column></mj-section>',
    ),
    Block(
        "combo-text",
        "Text Block",
        "Sections",
        BlockClass.STRUCTURE,
        '<mj-section padding="20px 0px"><mj-column padding="0px 25px">'
        '<mj-text font-size="18px" font-weight="bold" padding="0px 0px 8px" '
        'css-class="content-slot--subheading">Your Subheading Here</mj-text>'
        '<mj-text font-size="14px" line-height="22px" padding="0px" css-class="content-slot--body-text">'
        "Your body text will appear here. The AI will generate engaging content based on your brief.</mj-text>"
        "</mj-column></mj-section>",
    ),
    Block(
        "combo-cta",
        "Call to Action",
        "Sections",
        BlockClass.STRUCTURE,
        '<mj-section css-class="cta-section" padding="20px 0px"><mj-column>'
        '<mj-text font-size="20px" font-weight="bold" align="center" padding="0px 25px 10px" '
        'css-class="content-slot--cta-headline">Ready to Get Started?</mj-text>'
        '<mj-button background-color="#ff5757" color="#ffffff" border-radius="4px" padding="10px 25px" '
        'css-class="content-slot--cta-text">Click Here</mj-button></mj-column></mj-section>',
    ),
    Block(
        "combo-image-text",
        "Image + Text",
        "Sections",
        BlockClass.STRUCTURE,
        '<mj-section padding="20px 0px"><mj-column width="50%" padding="0px 12px">'
        f'<mj-image src="{_IMG}" alt="Image" width="220px" height="auto" padding="0px" css-class="img-slot--product" />'
        '</mj-column><mj-column width="50%" padding="0px 12px">'
        '<mj-text font-size="17px" font-weight="bold" padding="0px 0px 5px" '
        'css-class="content-slot--feature-headline">Feature Headline</mj-text>'
        '<mj-text font-size="14px" color="#6B7280" line-height="22px" padding="0px 0px 10px" '
        'css-class="content-slot--feature-text">Description of this feature goes here.</mj-text>'
        '<mj-button background-color="#ff5757" color="#ffffff" border-radius="4px" font-size="14px" padding="0px" '
        'css-class="content-slot--cta-text">Click Here</mj-button></mj-column></mj-section>',
    ),
    Block(
        "combo-features",
        "Feature Grid",
        "Sections",
        BlockClass.STRUCTURE,
        '<mj-section padding="25px 0px"><mj-group>'
        '<mj-column width="50%" padding="10px 15px">'
        f'<mj-image src="{_IMG}" alt="Feature image" width="120px" height="auto" padding="0px" css-class="img-slot--icon" />'
        '<mj-text font-size="17px" font-weight="bold" padding="10px 0px 5px" '
        'css-class="content-slot--highlight-headline-1">Feature One</mj-text>'
        '<mj-text font-size="14px" color="#6B7280" padding="0px" '
        'css-class="content-slot--highlight-text-1">Description of the first feature goes here.</mj-text></mj-column>'
        '<mj-column width="50%" padding="10px 15px">'
        f'<mj-image src="{_IMG}" alt="Feature image" width="120px" height="auto" padding="0px" css-class="img-slot--icon" />'
        '<mj-text font-size="17px" font-weight="bold" padding="10px 0px 5px" '
        'css-class="content-slot--highlight-headline-2">Feature Two</mj-text>'
        '<mj-text font-size="14px" color="#6B7280" padding="0px" '
        'css-class="content-slot--highlight-text-2">Description of the second feature goes here.</mj-text></mj-column>'
        "</mj-group></mj-section>",
    ),
    Block(
        "combo-offer",
        "Offer Banner",
        "Sections",
        BlockClass.STRUCTURE,
        '<mj-section css-class="offer-banner-section" padding="10px 25px"><mj-column padding="0px">'
        '<mj-text font-size="28px" font-weight="bold" align="center" padding="16px" background-color="#FEF3C7" '
        'color="#92400E" css-class="content-slot--offer-text">SPECIAL OFFER</mj-text></mj-column></mj-section>',
    ),
    Block(
        "combo-2col",
        "2 Columns (Empty)",
        "Sections",
        BlockClass.STRUCTURE,
        '<mj-section padding="15px 0px"><mj-group><mj-column width="50%" padding="12px"></mj-column>'
        '<mj-column width="50%" padding="12px"></mj-column></mj-group></mj-section>',
    ),
    Block(
        "combo-3col",
        "3 Columns (Empty)",
        "Sections",
        BlockClass.STRUCTURE,
        '<mj-section padding="15px 0px"><mj-group><mj-column width="33%" padding="12px"></mj-column>'
        '<mj-column width="33%" padding="12px"></mj-column><mj-column width="33%" padding="12px"></mj-column>'
        "</mj-group></mj-section>",
    ),
    Block(
        "product-grid-2",
        "2-Product Grid",
        "Sections",
        BlockClass.STRUCTURE,
        '<mj-section css-class="product-section" padding="15px 0px"><mj-group>'
        + "".join(_product_column(i, "50%", "220px", "16px", "14px", "") for i in range(2))
        + "</mj-group></mj-section>",
    ),
    Block(
        "product-grid-3",
        "3-Product Grid",
        "Sections",
        BlockClass.STRUCTURE,
        '<mj-section css-class="product-section" padding="15px 0px"><mj-group>'
        + "".join(_product_column(i, "33%", "180px", "14px", "13px", "13px") for i in range(3))
        + "</mj-group></mj-section>",
    ),
    Block(
        "product-spotlight",
        "Product Spotlight",
        "Sections",
        BlockClass.STRUCTURE,
        '<mj-section css-class="product-section" padding="15px 0px"><mj-column padding="12px">'
        f'<mj-image src="{_PRODUCT_IMG}" alt="Product image" width="400px" height="auto" padding="0px" '
        'css-class="product-img-slot--product--0" />'
        '<mj-text font-size="20px" font-weight="bold" align="center" padding="12px 0 4px 0">'
        "{{product:product:0:name}}</mj-text>"
        '<mj-text font-size="16px" color="#666666" align="center" padding="0">{{product:product:0:price}}</mj-text>'
        '<mj-button background-color="#ff5757" color="#ffffff" border-radius="4px" padding="12px 0" align="center" '
        'href="{{product:product:0:url}}">Shop Now</mj-button></mj-column></mj-section>',
    ),
    # Elements
    Block(
        "placeholder-headline",
        "Headline",
        "Elements",
        BlockClass.CONTENT,
        '<mj-text font-size="28px" font-weight="bold" align="center" padding="10px" '
        'css-class="content-slot--headline">Your Headline Here</mj-text>',
    ),
    Block(
        "placeholder-subheading",
        "Subheading",
        "Elements",
        BlockClass.CONTENT,
        '<mj-text font-size="18px" align="center" padding="10px" color="#666666" '
        'css-class="content-slot--subheading">Your Subheading Here</mj-text>',
    ),
    Block(
        "placeholder-body",
        "Body Text",
        "Elements",
        BlockClass.CONTENT,
        '<mj-text font-size="14px" padding="10px" line-height="22px" css-class="content-slot--body-text">'
        "Your body text will appear here. The AI will generate engaging content based on your brief.</mj-text>",
    ),
    Block(
        "placeholder-cta",
        "CTA Button",
        "Elements",
        BlockClass.CONTENT,
        '<mj-button background-color="#ff5757" color="#ffffff" border-radius="4px" padding="10px" '
        'css-class="content-slot--cta-text">Click Here</mj-button>',
    ),
    Block(
        "placeholder-offer",
        "Offer Text",
        "Elements",
        BlockClass.CONTENT,
        '<mj-text font-size="28px" font-weight="bold" align="center" padding="16px" background-color="#FEF3C7" '
        'color="#92400E" css-class="content-slot--offer-text">SPECIAL OFFER</mj-text>',
    ),
    Block(
        "placeholder-hero-image",
        "Hero Image (16:9)",
        "Elements",
        BlockClass.CONTENT,
        f'<mj-image src="{_IMG}" alt="Hero image" width="600px" height="auto" padding="0px" '
        'css-class="img-slot--hero-banner" />',
    ),
    Block(
        "placeholder-product-image",
        "Product Image (4:3)",
        "Elements",
        BlockClass.CONTENT,
        f'<mj-image src="{_IMG}" alt="Product image" width="400px" height="auto" padding="0px" '
        'css-class="img-slot--product" />',
    ),
    Block(
        "placeholder-square-image",
        "Square Image (1:1)",
        "Elements",
        BlockClass.CONTENT,
        f'<mj-image src="{_IMG}" alt="Image" width="300px" height="auto" padding="0px" css-class="img-slot--square" />',
    ),
    Block(
        "placeholder-icon",
        "Icon/Small Image",
        "Elements",
        BlockClass.CONTENT,
        f'<mj-image src="{_IMG}" alt="Icon" width="60px" height="auto" padding="0px" css-class="img-slot--icon" />',
    ),
)

_BLOCKS_BY_ID: dict[str, Block] = {block.id: block for block in BLOCKS}


def get_block(block_id: str) -> Block:
    """Return the block with the given id.

    Raises
    ------
    ValidationError
        If no block has that id

    """
    try:
        return _BLOCKS_BY_ID[block_id]
    except KeyError:
        raise ValidationError(
            f"Unknown block: {block_id!r}", parameter_name="block_id", parameter_value=block_id
        ) from None


def list_blocks(category: BlockCategory | None = None) -> list[Block]:
    """Return the blocks of a category (all blocks when omitted), in panel order."""
    return [block for block in BLOCKS if category is None or block.category == category]
