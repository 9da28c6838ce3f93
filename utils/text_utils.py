"""
Text utilities for fuzzy matching of Russian and English spreadsheet text.

Used for header classification, location lookup and catalog keys.
"""

import re
from typing import Optional

_WHITESPACE_RE = re.compile(r"\s+")
_NON_WORD_RE = re.compile(r"[^\w\s]")


def normalize_text(text: Optional[str]) -> str:
    """
    Canonicalize text for fuzzy comparison.

    Lowercases, drops all whitespace and every character that is not a
    word character. Cyrillic and Latin letters are kept as-is:
    - "Кол-во, шт" → "колвошт"
    - "  Store #2 " → "store2"
    - "ТЦ «Галерея»" → "тцгалерея"

    Args:
        text: Raw text (may be None)

    Returns:
        Normalized string, empty for empty input
    """
    if not text:
        return ""

    lowered = str(text).lower()
    compact = _WHITESPACE_RE.sub("", lowered)
    return _NON_WORD_RE.sub("", compact)


def name_key(name: Optional[str]) -> str:
    """
    Case-insensitive key for product names.

    Catalog identity compares names ignoring case and surrounding spaces,
    but keeps inner punctuation ("No5" and "No 5" stay different products).
    """
    if not name:
        return ""
    return str(name).strip().lower()


def contains_either_way(left: str, right: str) -> bool:
    """True if either normalized string contains the other (both non-empty)."""
    if not left or not right:
        return False
    return left in right or right in left
