#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/utils/text.py
"""Text utilities for markup comparison and identifier naming."""

from __future__ import annotations

import re
from typing import Callable

_BETWEEN_TAGS_RE = re.compile(r">\s+<")
_AFTER_TAG_RE = re.compile(r">\s+")
_BEFORE_TAG_RE = re.compile(r"\s+<")
_SELF_CLOSE_RE = re.compile(r"\s*/>")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_markup(markup: str) -> str:
    """Collapse insignificant whitespace in markup.

    Whitespace between tags, directly inside tags and before ``/>`` is
    removed or unified, and every remaining whitespace run becomes a single
    space. Two templates that differ only in indentation normalize to the
    same string.

    Parameters
    ----------
    markup : str
        Markup text

    Returns
    -------
    str
        Normalized markup

    Examples
    --------
        >>> normalize_markup('<mj-column>\\n  <mj-text>\\n    Hi\\n  </mj-text>\\n</mj-column>')
        '<mj-column><mj-text>Hi</mj-text></mj-column>'
        >>> normalize_markup('<mj-image src="a"/>')
        '<mj-image src="a" />'

    """
    result = _BETWEEN_TAGS_RE.sub("><", markup)
    result = _AFTER_TAG_RE.sub(">", result)
    result = _BEFORE_TAG_RE.sub("<", result)
    result = _WHITESPACE_RE.sub(" ", result)
    result = _SELF_CLOSE_RE.sub(" />", result)
    return result.strip()


def make_ordinal_name(base: str, ordinal: int, is_taken: Callable[[str], bool], separator: str = "-") -> str:
    """Return ``base`` with a numeric suffix, bumped until the name is free.

    Parameters
    ----------
    base : str
        Identifier to suffix
    ordinal : int
        First suffix to try (at least 1)
    is_taken : callable
        Predicate telling whether a candidate name is already in use
    separator : str, default = "-"
        Separator placed before the suffix

    Returns
    -------
    str
        First free ``base<separator><n>`` with ``n >= ordinal``

    Examples
    --------
        >>> make_ordinal_name("headline", 1, lambda name: False)
        'headline-1'
        >>> make_ordinal_name("headline", 1, lambda name: name == "headline-1")
        'headline-2'

    """
    ordinal = max(ordinal, 1)
    candidate = f"{base}{separator}{ordinal}"
    while is_taken(candidate):
        ordinal += 1
        candidate = f"{base}{separator}{ordinal}"
    return candidate
