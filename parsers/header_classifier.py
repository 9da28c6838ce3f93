"""
Header classifier for loosely structured inventory files.

Maps raw header strings (Russian or English) to semantic roles through a
prioritized rule chain:
1. Role synonyms (fuzzy substring match on normalized text)
2. Size-specific quantity columns ("5 мл", "30ml", "Автофлакон")
3. Numeric sampling of early data rows for unlabeled quantity columns

Synonym lists are plain data below; extend them there.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

import structlog

from config.settings import get_settings
from exceptions import MissingNameColumnError, MissingQuantityColumnError
from models.product import CanonicalSize
from utils.text_utils import normalize_text

logger = structlog.get_logger(__name__)


class ColumnRole(str, Enum):
    """Semantic roles a header can play."""
    NAME = "name"
    SIZE = "size"
    TYPE = "type"
    LOCATION = "location"
    QUANTITY = "quantity"


ROLE_SYNONYMS: dict[ColumnRole, tuple[str, ...]] = {
    ColumnRole.NAME: (
        "название", "наименование", "товар", "продукт",
        "name", "product", "title", "item",
    ),
    ColumnRole.SIZE: (
        "объем", "объём", "размер",
        "size", "volume", "capacity",
    ),
    ColumnRole.TYPE: (
        "тип", "вид",
        "type", "category", "kind",
    ),
    ColumnRole.LOCATION: (
        "точка", "магазин", "место", "расположение",
        "location", "store", "shop", "place",
    ),
    ColumnRole.QUANTITY: (
        "количество", "остаток", "кол-во", "колво", "число", "штук",
        "quantity", "amount", "count", "qty", "pcs",
    ),
}

# Roles whose synonyms also match when the header is a fragment of them
# ("Маг" → "магазин"); the header must be at least this long.
BIDIRECTIONAL_ROLES = {ColumnRole.LOCATION}
MIN_REVERSE_MATCH_LENGTH = 3

SIZE_COLUMN_CAR_TOKENS = ("автофлакон", "авто", "car", "diffuser", "диффузор")

_SIZE_HEADER_RE = re.compile(r"(?<!\d)(5|16|20|25|30)\s*(?:мл|ml)")
_BARE_SIZE_HEADER_RE = re.compile(r"(5|16|20|25|30)")
_HAS_DIGIT_RE = re.compile(r"\d")


@dataclass
class ColumnClassification:
    """Column indices per role; -1 means the role was not found."""
    headers: list[str]
    name_idx: int = -1
    size_idx: int = -1
    type_idx: int = -1
    location_idx: int = -1
    quantity_idx: int = -1
    size_columns: dict[CanonicalSize, int] = field(default_factory=dict)
    inferred_quantity: bool = False

    @property
    def multi_size(self) -> bool:
        """True if quantities come from size-specific columns."""
        return len(self.size_columns) > 0

    @property
    def has_quantity_info(self) -> bool:
        return self.multi_size or self.quantity_idx != -1

    @property
    def descriptive_indices(self) -> set[int]:
        """Columns claimed by name/size/type/location."""
        return {
            idx for idx in (self.name_idx, self.size_idx, self.type_idx, self.location_idx)
            if idx != -1
        }

    def to_dict(self) -> dict:
        return {
            "name": self.name_idx,
            "size": self.size_idx,
            "type": self.type_idx,
            "location": self.location_idx,
            "quantity": self.quantity_idx,
            "size_columns": {size.value: idx for size, idx in self.size_columns.items()},
            "inferred_quantity": self.inferred_quantity,
        }


def find_column_index(
    headers: Sequence[str],
    synonyms: Sequence[str],
    bidirectional: bool = False,
    exclude: Optional[set[int]] = None,
) -> int:
    """
    Index of the first header whose normalized text contains a synonym.

    Args:
        headers: Raw header strings
        synonyms: Role synonyms (raw; normalized here)
        bidirectional: Also match when the header is contained in a synonym
        exclude: Indices that may not be returned

    Returns:
        Column index or -1
    """
    normalized_synonyms = [normalize_text(s) for s in synonyms]
    for idx, header in enumerate(headers):
        if exclude and idx in exclude:
            continue
        normalized_header = normalize_text(header)
        if not normalized_header:
            continue
        for synonym in normalized_synonyms:
            if synonym in normalized_header:
                return idx
            if (
                bidirectional
                and len(normalized_header) >= MIN_REVERSE_MATCH_LENGTH
                and normalized_header in synonym
            ):
                return idx
    return -1


def detect_size_header(header: str) -> Optional[CanonicalSize]:
    """
    Size carried by a size-specific quantity column header.

    "5 мл" → 5, "30ml" → 30, "16" → 16, "Автофлакон" → car, "Остаток" → None
    """
    lowered = (header or "").strip().lower()
    if not lowered:
        return None

    match = _SIZE_HEADER_RE.search(lowered)
    if match is None:
        match = _BARE_SIZE_HEADER_RE.fullmatch(lowered)
    if match is not None:
        return CanonicalSize(match.group(1))

    normalized = normalize_text(lowered)
    if any(token in normalized for token in SIZE_COLUMN_CAR_TOKENS):
        return CanonicalSize.CAR
    return None


def find_size_columns(
    headers: Sequence[str],
    exclude: Optional[set[int]] = None,
) -> dict[CanonicalSize, int]:
    """Map each size named by a header to its column (first column wins)."""
    size_columns: dict[CanonicalSize, int] = {}
    for idx, header in enumerate(headers):
        if exclude and idx in exclude:
            continue
        size = detect_size_header(header)
        if size is None:
            continue
        if size in size_columns:
            logger.debug("duplicate_size_column_ignored", size=size.value, column=idx)
            continue
        size_columns[size] = idx
    return size_columns


def infer_quantity_columns(
    headers: Sequence[str],
    sample_rows: Sequence[Sequence[str]],
    exclude: set[int],
    numeric_ratio: float,
) -> list[int]:
    """
    Columns whose sampled values are numeric often enough.

    A value counts as numeric if it still has digits once everything else
    is stripped. Columns in `exclude` are never candidates.
    """
    if not sample_rows:
        return []

    counts = {idx: 0 for idx in range(len(headers)) if idx not in exclude}
    for columns in sample_rows:
        for idx in counts:
            if idx < len(columns) and _HAS_DIGIT_RE.search(columns[idx]):
                counts[idx] += 1

    threshold = len(sample_rows) * numeric_ratio
    return [idx for idx, count in counts.items() if count > 0 and count >= threshold]


def classify_headers(
    headers: Sequence[str],
    sample_rows: Sequence[Sequence[str]] = (),
    sample_size: Optional[int] = None,
    numeric_ratio: Optional[float] = None,
) -> ColumnClassification:
    """
    Assign semantic roles to header columns.

    Args:
        headers: Trimmed header fields
        sample_rows: Split data rows, used only for numeric inference
        sample_size: Max rows sampled (settings.import_sample_rows)
        numeric_ratio: Numeric share required (settings.import_numeric_ratio)

    Returns:
        ColumnClassification with at least a name column and a quantity signal

    Raises:
        MissingNameColumnError: No header looks like a product name
        MissingQuantityColumnError: No quantity information by any method
    """
    settings = get_settings()
    sample_size = sample_size or settings.import_sample_rows
    numeric_ratio = numeric_ratio or settings.import_numeric_ratio
    headers = list(headers)

    result = ColumnClassification(headers=headers)
    result.name_idx = find_column_index(headers, ROLE_SYNONYMS[ColumnRole.NAME])
    if result.name_idx == -1:
        logger.warning("name_column_missing", headers=headers)
        raise MissingNameColumnError(headers)

    name_only = {result.name_idx}
    result.size_idx = find_column_index(
        headers, ROLE_SYNONYMS[ColumnRole.SIZE], exclude=name_only
    )
    result.type_idx = find_column_index(
        headers, ROLE_SYNONYMS[ColumnRole.TYPE], exclude=name_only
    )
    result.location_idx = find_column_index(
        headers,
        ROLE_SYNONYMS[ColumnRole.LOCATION],
        bidirectional=ColumnRole.LOCATION in BIDIRECTIONAL_ROLES,
        exclude=name_only,
    )
    result.quantity_idx = find_column_index(
        headers, ROLE_SYNONYMS[ColumnRole.QUANTITY], exclude=name_only
    )

    result.size_columns = find_size_columns(headers, exclude=result.descriptive_indices)

    if not result.has_quantity_info:
        likely = infer_quantity_columns(
            headers,
            list(sample_rows)[:sample_size],
            exclude=result.descriptive_indices,
            numeric_ratio=numeric_ratio,
        )
        logger.debug("likely_quantity_columns", columns=likely)

        if len(likely) == 1 and result.size_idx != -1:
            result.quantity_idx = likely[0]
            result.inferred_quantity = True
        elif len(likely) > 1:
            for size, idx in zip(CanonicalSize.ordered(), likely):
                result.size_columns[size] = idx
            result.inferred_quantity = True

    if not result.has_quantity_info:
        logger.warning("quantity_column_missing", headers=headers)
        raise MissingQuantityColumnError(headers)

    logger.info("headers_classified", **result.to_dict())
    return result
