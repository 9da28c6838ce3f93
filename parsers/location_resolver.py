"""
Location resolution for import rows.

Maps the free-text location cell of a row ("Маг. Центр", "ТЦ Мега") to a
location of the caller's catalog, falling back to a manually chosen one.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import structlog

from config.settings import get_settings
from models.location import Location
from utils.text_utils import contains_either_way, normalize_text

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ResolvedLocation:
    """Location chosen for one row."""
    location_id: str
    location_name: str
    from_fallback: bool = False


def find_location_by_name(
    raw_text: Optional[str],
    locations: Sequence[Location],
) -> Optional[Location]:
    """
    First catalog location whose normalized name contains, or is contained
    in, the normalized raw text. Catalog order decides ties.
    """
    needle = normalize_text(raw_text)
    if not needle:
        return None
    for location in locations:
        if contains_either_way(normalize_text(location.name), needle):
            return location
    return None


def is_manual_location(location_id: Optional[str], sentinel: Optional[str] = None) -> bool:
    """True if the id names a real location rather than 'take it from the file'."""
    sentinel = sentinel or get_settings().manual_location_sentinel
    return bool(location_id) and location_id != sentinel


def resolve_location(
    raw_text: Optional[str],
    locations: Sequence[Location],
    fallback_id: Optional[str] = None,
    sentinel: Optional[str] = None,
) -> Optional[ResolvedLocation]:
    """
    Resolve a row's location.

    Args:
        raw_text: Location cell of the row (may be empty)
        locations: Caller's location catalog, in display order
        fallback_id: Manually chosen location id, or the sentinel
        sentinel: Value meaning "no manual location" (settings default)

    Returns:
        ResolvedLocation, or None when the row must be dropped
    """
    match = find_location_by_name(raw_text, locations)
    if match is not None:
        return ResolvedLocation(location_id=match.id, location_name=match.name)

    if is_manual_location(fallback_id, sentinel):
        known = next((loc for loc in locations if loc.id == fallback_id), None)
        return ResolvedLocation(
            location_id=fallback_id,
            location_name=known.name if known else "",
            from_fallback=True,
        )

    if raw_text:
        logger.debug("location_not_resolved", raw_text=raw_text)
    return None
