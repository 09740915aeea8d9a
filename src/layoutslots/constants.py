#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the layoutslots library.

This module centralizes the literal syntax, tag vocabularies, and default
configuration values used across the slot engine.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Marker Grammar - Placeholder token syntax and dummy content
3. Tracking Tokens - Editor-session attribute tokens
4. Markup Vocabulary - MJML tag families used by parser and renderer
5. Session Defaults - Locking, drop-zone and service defaults
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

ProductField = Literal["name", "price", "url", "image"]
SlotKind = Literal["content", "image", "product"]
DragPhase = Literal["start", "stop"]
HtmlParserType = Literal["html.parser", "html5lib", "lxml"]

# =============================================================================
# Marker Grammar
# =============================================================================

SLOT_ID_PATTERN = r"[A-Za-z0-9_-]+"
PRODUCT_FIELDS: tuple[ProductField, ...] = ("name", "price", "url", "image")

LOGO_SLOT_ID = "logo"
FOOTER_SLOT_ID = "footer"
LOGO_ALIAS = "{{logo}}"
FOOTER_ALIAS = "{{footer}}"

# Readable stand-in text shown in the editor for known content slots
SLOT_DUMMY_TEXT: dict[str, str] = {
    "headline": "Your Headline Here",
    "hero-headline": "Your Hero Headline Here",
    "subheading": "Your Subheading Here",
    "body-text": "Your body text will appear here. The AI will generate engaging content based on your brief.",
    "cta-text": "Click Here",
    "cta-headline": "Ready to Get Started?",
    "offer-text": "SPECIAL OFFER",
    "footer": "Footer content from your settings",
    "feature-headline": "Feature Headline",
    "feature-text": "Description of this feature goes here.",
    "product-headline": "Product Name",
    "product-description": "Product description will appear here.",
    "highlight-headline-1": "Feature One",
    "highlight-text-1": "Description of the first feature goes here.",
    "highlight-headline-2": "Feature Two",
    "highlight-text-2": "Description of the second feature goes here.",
}

# Inline SVG stand-ins for image slots. Single quotes MUST stay encoded as %27:
# a literal quote inside the data URI breaks attribute parsing in the editor.
PLACEHOLDER_IMAGE = (
    "data:image/svg+xml,%3Csvg xmlns=%27http://www.w3.org/2000/svg%27 width=%27600%27 height=%27340%27 "
    "viewBox=%270 0 600 340%27%3E%3Crect fill=%27%23E5E7EB%27 width=%27600%27 height=%27340%27/%3E"
    "%3Ctext x=%2750%25%27 y=%2750%25%27 dominant-baseline=%27middle%27 text-anchor=%27middle%27 "
    "fill=%27%239CA3AF%27 font-family=%27Arial%27 font-size=%2718%27%3EImage Preview%3C/text%3E%3C/svg%3E"
)
PLACEHOLDER_PRODUCT_IMAGE = (
    "data:image/svg+xml,%3Csvg xmlns=%27http://www.w3.org/2000/svg%27 width=%27220%27 height=%27220%27 "
    "viewBox=%270 0 220 220%27%3E%3Crect fill=%27%23E5E7EB%27 width=%27220%27 height=%27220%27/%3E"
    "%3Ctext x=%2750%25%27 y=%2750%25%27 dominant-baseline=%27middle%27 text-anchor=%27middle%27 "
    "fill=%27%239CA3AF%27 font-family=%27Arial%27 font-size=%2714%27%3EProduct%3C/text%3E%3C/svg%3E"
)
PLACEHOLDER_LOGO_IMAGE = (
    "data:image/svg+xml,%3Csvg xmlns=%27http://www.w3.org/2000/svg%27 width=%27140%27 height=%2740%27 "
    "viewBox=%270 0 140 40%27%3E%3Crect fill=%27%23E5E7EB%27 width=%27140%27 height=%2740%27 rx=%274%27/%3E"
    "%3Ctext x=%2750%25%27 y=%2750%25%27 dominant-baseline=%27middle%27 text-anchor=%27middle%27 "
    "fill=%27%239CA3AF%27 font-family=%27Arial%27 font-size=%2712%27%3EYour Logo%3C/text%3E%3C/svg%3E"
)

SVG_DATA_URI_PREFIX = "data:image/svg+xml"

# =============================================================================
# Tracking Tokens
# =============================================================================

TRACKING_ATTRIBUTE = "css-class"
CONTENT_TOKEN_PREFIX = "content-slot--"
IMAGE_TOKEN_PREFIX = "img-slot--"
PRODUCT_IMAGE_TOKEN_PREFIX = "product-img-slot--"
PRODUCT_TOKEN_SEPARATOR = "--"
LOCKED_SECTION_TOKEN = "locked-section"

# Tokens that only exist while a template is open in the editor
SESSION_ONLY_TOKENS = frozenset({LOCKED_SECTION_TOKEN})

# =============================================================================
# Markup Vocabulary
# =============================================================================

IMAGE_TAG = "mj-image"
TEXT_TAG = "mj-text"
BUTTON_TAG = "mj-button"
SECTION_TAG = "mj-section"
BODY_TAG = "mj-body"
ROOT_TAG = "mjml"

CONTENT_TAGS = frozenset({TEXT_TAG, BUTTON_TAG})

# Blocks of class "content" must land inside one of these
CONTAINER_TAGS = frozenset({"mj-column", "mj-hero"})

# Blocks of class "structure" must land directly inside one of these
TOP_LEVEL_TAGS = frozenset({BODY_TAG, "mj-wrapper"})

# Attributes that hold a source or link target and may carry markers
SOURCE_ATTRIBUTE = "src"
LINK_ATTRIBUTE = "href"

# MJML tags that never carry children and serialize as "<tag ... />"
MJML_SELF_CLOSING_TAGS = frozenset(
    {
        "mj-image",
        "mj-divider",
        "mj-spacer",
        "mj-all",
        "mj-class",
        "mj-font",
        "mj-breakpoint",
        "mj-carousel-image",
        "mj-html-attribute",
        "mj-include",
    }
)

HTML_VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
)

# Tags whose text is emitted verbatim (no entity escaping)
RAW_TEXT_TAGS = frozenset({"mj-style", "style", "script"})

# Tag names known to the editor's serializer; used to repair the missing
# space between tag name and first attribute. Longer names MUST come first.
MJML_SERIALIZED_TAG_NAMES: tuple[str, ...] = (
    "mj-social-element",
    "mj-accordion-element",
    "mj-html-attributes",
    "mj-text",
    "mj-button",
    "mj-image",
    "mj-section",
    "mj-column",
    "mj-divider",
    "mj-spacer",
    "mj-social",
    "mj-navbar",
    "mj-hero",
    "mj-all",
    "mj-attributes",
    "mj-font",
    "mj-preview",
    "mj-title",
    "mj-raw",
    "mj-head",
    "mj-body",
    "mj-breakpoint",
    "mj-accordion",
    "mj-table",
    "mj-group",
    "mj-wrapper",
    "mj-carrier",
)

# =============================================================================
# Session Defaults
# =============================================================================

DEFAULT_HTML_PARSER: HtmlParserType = "html.parser"
DEFAULT_RESERVED_REGION_CLASSES: tuple[str, ...] = ("header-section", "footer-section")

DROP_FAILURE_CONTENT = "Drop this inside a Column. Add a Section first if the canvas is empty."
DROP_FAILURE_STRUCTURE = "Sections can only be dropped into the email body."
DROP_FAILURE_UNKNOWN = "This element cannot be dropped here. Check the highlighted areas."

LOCKED_HEADER_HINT = "Header is locked - styled from your Brand Settings"
LOCKED_FOOTER_HINT = "Footer is locked - styled from your Email Settings"

PREVIEW_FAILURE_HTML = '<div style="padding:40px;text-align:center;color:#999;">Preview failed. Check MJML syntax.</div>'

DEFAULT_API_BASE_URL = "http://localhost:4000"
DEFAULT_API_TIMEOUT = 30.0
DEFAULT_PRODUCT_LIMIT = 100
DEFAULT_MAX_PRODUCTS = 2

ENV_API_BASE_URL = "LAYOUTSLOTS_API"
ENV_API_TOKEN = "LAYOUTSLOTS_TOKEN"
ENV_API_TIMEOUT = "LAYOUTSLOTS_TIMEOUT"
ENV_CONFIG = "LAYOUTSLOTS_CONFIG"

CONFIG_FILENAMES: tuple[str, ...] = (
    ".layoutslots.toml",
    ".layoutslots.yaml",
    ".layoutslots.yml",
    ".layoutslots.json",
    "pyproject.toml",
)
