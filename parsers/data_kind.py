"""
Backup shape detection.

JSON backups are either the combined export ({version, inventory,
locations, sales, exportDate}) or a bare list of one kind of record.
"""

from enum import Enum
from typing import Any, Mapping

import structlog

logger = structlog.get_logger(__name__)


class DataKind(str, Enum):
    """What a decoded backup contains."""
    COMBINED = "combined"
    LOCATIONS = "locations"
    SALES = "sales"
    INVENTORY = "inventory"
    UNKNOWN = "unknown"


def _present(record: Mapping[str, Any], key: str) -> bool:
    return record.get(key) is not None


def detect_data_kind(data: Any) -> DataKind:
    """
    Classify decoded JSON by probing field presence.

    - Mapping with version, inventory, locations and sales → COMBINED
    - List whose first record has name and address or contact → LOCATIONS
    - List whose first record has items and total → SALES
    - List whose first record has name, size and quantity → INVENTORY
    - Anything else → UNKNOWN
    """
    if isinstance(data, Mapping):
        if data.get("version") and all(
            _present(data, key) for key in ("inventory", "locations", "sales")
        ):
            kind = DataKind.COMBINED
        else:
            kind = DataKind.UNKNOWN
    elif isinstance(data, list) and data and isinstance(data[0], Mapping):
        first = data[0]
        if first.get("name") and ("address" in first or "contact" in first):
            kind = DataKind.LOCATIONS
        elif _present(first, "items") and "total" in first:
            kind = DataKind.SALES
        elif first.get("name") and first.get("size") and "quantity" in first:
            kind = DataKind.INVENTORY
        else:
            kind = DataKind.UNKNOWN
    else:
        kind = DataKind.UNKNOWN

    logger.debug("data_kind_detected", kind=kind.value)
    return kind
