"""
Cell value parsers: sizes, product types and quantities.

Spreadsheet cells arrive as free text ("5мл", "Автофлакон", "12,5 шт"),
these helpers map them to the closed vocabularies used by the catalog.
"""

import math
import re
from typing import Optional, Union

from models.product import CanonicalSize, ProductType
from utils.text_utils import normalize_text

# Exact spellings (lowercased, trimmed) accepted without further parsing.
# Includes every display label so labels map back to themselves.
SIZE_LOOKUP: dict[str, CanonicalSize] = {
    "5": CanonicalSize.ML_5,
    "5мл": CanonicalSize.ML_5,
    "5 мл": CanonicalSize.ML_5,
    "16": CanonicalSize.ML_16,
    "16мл": CanonicalSize.ML_16,
    "16 мл": CanonicalSize.ML_16,
    "20": CanonicalSize.ML_20,
    "20мл": CanonicalSize.ML_20,
    "20 мл": CanonicalSize.ML_20,
    "25": CanonicalSize.ML_25,
    "25мл": CanonicalSize.ML_25,
    "25 мл": CanonicalSize.ML_25,
    "30": CanonicalSize.ML_30,
    "30мл": CanonicalSize.ML_30,
    "30 мл": CanonicalSize.ML_30,
    "автофлакон": CanonicalSize.CAR,
    "авто флакон": CanonicalSize.CAR,
    "авто": CanonicalSize.CAR,
    "машина": CanonicalSize.CAR,
    "car": CanonicalSize.CAR,
    "car diffuser": CanonicalSize.CAR,
    "диффузор": CanonicalSize.CAR,
    "автомобильный": CanonicalSize.CAR,
}

# Substrings of normalized text that mean a car diffuser
CAR_TOKENS = ("автофлакон", "авто", "car", "диффузор", "дифф", "diffuser")

PERFUME_TOKENS = ("парфюм", "духи", "аромат", "perfume")

_NUMERIC_SIZES = {
    5: CanonicalSize.ML_5,
    16: CanonicalSize.ML_16,
    20: CanonicalSize.ML_20,
    25: CanonicalSize.ML_25,
    30: CanonicalSize.ML_30,
}

_INTEGER_RE = re.compile(r"\d+")
_QUANTITY_JUNK_RE = re.compile(r"[^0-9.,]")


# ===================
# SIZES
# ===================

def normalize_size(raw: Union[str, CanonicalSize, None]) -> Optional[CanonicalSize]:
    """
    Map a size token to a canonical size (strict).

    Rules, in priority order:
    1. Known spelling or display label ("5 мл", "Автофлакон", "машина")
    2. Car/diffuser token anywhere in the text → car
    3. First integer in the text if it is 5, 16, 20, 25 or 30

    Returns:
        CanonicalSize, or None when nothing matches (row must be rejected)
    """
    if isinstance(raw, CanonicalSize):
        return raw
    if raw is None:
        return None

    text = str(raw).strip()
    if not text:
        return None

    exact = SIZE_LOOKUP.get(text.lower())
    if exact is not None:
        return exact

    normalized = normalize_text(text)
    if any(token in normalized for token in CAR_TOKENS):
        return CanonicalSize.CAR

    match = _INTEGER_RE.search(text)
    if match:
        return _NUMERIC_SIZES.get(int(match.group(0)))

    return None


def map_size(raw: Union[str, CanonicalSize, None]) -> CanonicalSize:
    """Lax size mapping: same rules as normalize_size, unknown → 5 ml."""
    return normalize_size(raw) or CanonicalSize.ML_5


def resolve_size(raw: Union[str, CanonicalSize, None], strict: bool) -> Optional[CanonicalSize]:
    """Dispatch to strict or lax size mapping."""
    return normalize_size(raw) if strict else map_size(raw)


# ===================
# TYPES
# ===================

def map_type(raw: Union[str, ProductType, None]) -> ProductType:
    """
    Map a free-text product type.

    Blank → perfume (the shop's default); perfume words → perfume;
    anything else → other.
    """
    if isinstance(raw, ProductType):
        return raw
    normalized = normalize_text(raw)
    if not normalized:
        return ProductType.PERFUME
    if any(token in normalized for token in PERFUME_TOKENS):
        return ProductType.PERFUME
    return ProductType.OTHER


# ===================
# QUANTITIES
# ===================

def round_half_up(value: float) -> int:
    """Round to nearest integer, halves away from zero for positives (12.5 → 13)."""
    return int(math.floor(value + 0.5))


def parse_quantity(raw: Union[str, int, float, None]) -> int:
    """
    Extract a non-negative integer quantity from locale-ambiguous text.

    Fast path: the trimmed text is a positive number → rounded.
    Otherwise everything but digits, commas and dots is dropped, commas
    become dots, only the first dot is kept, and the rest is parsed:
    - "12" → 12, "12,5" → 13, "  7 шт " → 7, "1 200 руб." → 1200
    - "abc" → 0, "" → 0, "-5" → 5

    Returns:
        Rounded quantity, 0 when nothing numeric is left
    """
    if raw is None or isinstance(raw, bool):
        return 0

    text = str(raw).strip()
    if not text:
        return 0

    try:
        direct = float(text)
    except ValueError:
        direct = None
    if direct is not None and math.isfinite(direct) and direct > 0:
        return round_half_up(direct)

    cleaned = _QUANTITY_JUNK_RE.sub("", text).replace(",", ".")
    head, dot, tail = cleaned.partition(".")
    cleaned = head + dot + tail.replace(".", "")
    if not cleaned:
        return 0

    try:
        number = float(cleaned)
    except ValueError:
        return 0
    if not math.isfinite(number):
        return 0
    return round_half_up(number)
