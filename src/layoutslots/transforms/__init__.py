#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/transforms/__init__.py
"""Marker transforms between persisted templates and editable documents.

- forward: persisted markers to editor stand-ins with tracking tokens
- reverse: tracking tokens back to exact persisted markers

Examples
--------
Round trip a template:

    >>> from layoutslots.transforms import to_editable, to_persisted
    >>> persisted = '<mj-text>{{content:headline}}</mj-text>'
    >>> to_persisted(to_editable(persisted)) == persisted
    True

"""

from layoutslots.transforms.forward import EditablePlaceholderTransform, to_editable, to_editable_document
from layoutslots.transforms.reverse import (
    PersistedMarkerTransform,
    strip_session_tokens,
    to_persisted,
    to_persisted_document,
)

__all__ = [
    "EditablePlaceholderTransform",
    "to_editable",
    "to_editable_document",
    "PersistedMarkerTransform",
    "strip_session_tokens",
    "to_persisted",
    "to_persisted_document",
]
