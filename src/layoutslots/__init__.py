"""layoutslots - slot transforms and deduplication for email layout templates.

Email layout templates carry placeholder markers (``{{content:headline}}``,
``{{image:hero-banner}}``, ``{{product:spotlight:0:name}}``) that an AI
content service fills in later. A visual editor cannot show those markers,
so layoutslots converts templates between two forms:

- the *persisted* form, with exact markers, stored and sent downstream
- the *editable* form, with readable stand-ins, where each slot's identity
  is kept as a tracking token in the element's ``css-class``

An editing session (:class:`~layoutslots.session.DocumentSession`) owns one
editable Document, accepts block insertions under a drop-zone policy, locks
reserved header and footer regions, and renames duplicated slot identities
so every slot stays unique.

Requirements
------------
- Python 3.10+
- beautifulsoup4, httpx, PyYAML (rich optional for terminal tables)

Examples
--------
Round trip a template:

    >>> from layoutslots import to_editable, to_persisted
    >>> editable = to_editable('<mj-image src="{{logo}}" />')
    >>> to_persisted(editable)
    '<mj-image src="{{logo}}" />'

Edit in a session:

    >>> from layoutslots import DocumentSession
    >>> session = DocumentSession()
    >>> document = session.load()
    >>> body = document.find_first("mj-body")
    >>> inserted = session.drop_block("combo-cta", body)
    >>> session.renames[0].new
    'cta-text-1'

See Also
--------
layoutslots.transforms : forward and reverse marker transforms
layoutslots.session : editing session, drop zones, locking and deduplication

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "layoutslots requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "0.3.0"

from layoutslots.ast import Document, Element, Text  # noqa: E402
from layoutslots.exceptions import (  # noqa: E402
    DependencyError,
    DropZoneError,
    LayoutSlotsError,
    ParsingError,
    ServiceError,
    ValidationError,
)
from layoutslots.inventory import SlotInventory, collect_slots  # noqa: E402
from layoutslots.markers import format_marker, parse_marker  # noqa: E402
from layoutslots.options import ClientOptions, MjmlParserOptions, MjmlRendererOptions, SessionOptions  # noqa: E402
from layoutslots.reconstruct import extract_attributes, repair_corrupted_images  # noqa: E402
from layoutslots.services import InMemoryTemplateStore, LayoutApiClient  # noqa: E402
from layoutslots.session import DocumentSession, SlotDeduplicator, find_duplicate_identities  # noqa: E402
from layoutslots.transforms import to_editable, to_editable_document, to_persisted, to_persisted_document  # noqa: E402

__all__ = [
    "__version__",
    "Document",
    "Element",
    "Text",
    "LayoutSlotsError",
    "ValidationError",
    "ParsingError",
    "DropZoneError",
    "ServiceError",
    "DependencyError",
    "SlotInventory",
    "collect_slots",
    "parse_marker",
    "format_marker",
    "MjmlParserOptions",
    "MjmlRendererOptions",
    "SessionOptions",
    "ClientOptions",
    "extract_attributes",
    "repair_corrupted_images",
    "LayoutApiClient",
    "InMemoryTemplateStore",
    "DocumentSession",
    "SlotDeduplicator",
    "find_duplicate_identities",
    "to_editable",
    "to_editable_document",
    "to_persisted",
    "to_persisted_document",
]
