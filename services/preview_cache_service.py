"""
Staged import previews.

stage_import parses a file and keeps its rows here until the user confirms
or cancels. Entries live in process memory and expire after
preview_ttl_minutes; the inventory service is the only writer.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import structlog

from config.settings import get_settings
from models.imports import ImportRow

logger = structlog.get_logger(__name__)


@dataclass
class _StagedPreview:
    rows: list[ImportRow]
    expires_at: datetime

    def expired(self, now: datetime) -> bool:
        return now > self.expires_at


_previews: dict[str, _StagedPreview] = {}


def store_preview(rows: list[ImportRow], ttl_minutes: Optional[int] = None) -> str:
    """
    Stage parsed rows for a later commit.

    Expired previews are swept on every store.

    Returns:
        preview_id to pass to retrieve_preview / delete_preview
    """
    ttl_minutes = ttl_minutes or get_settings().preview_ttl_minutes
    now = datetime.now()
    _sweep(now)

    preview_id = str(uuid.uuid4())
    _previews[preview_id] = _StagedPreview(
        rows=list(rows),
        expires_at=now + timedelta(minutes=ttl_minutes),
    )
    logger.debug(
        "preview_stored",
        preview_id=preview_id,
        rows=len(rows),
        ttl_minutes=ttl_minutes,
    )
    return preview_id


def retrieve_preview(preview_id: str) -> Optional[list[ImportRow]]:
    """Staged rows, or None when the preview expired or never existed."""
    staged = _previews.get(preview_id)
    if staged is None:
        return None
    if staged.expired(datetime.now()):
        _previews.pop(preview_id, None)
        logger.debug("preview_expired", preview_id=preview_id)
        return None
    return list(staged.rows)


def delete_preview(preview_id: str) -> bool:
    """Drop a preview after confirm or cancel; False if it was not staged."""
    return _previews.pop(preview_id, None) is not None


def clear_previews() -> int:
    """Drop every staged preview; returns how many were removed."""
    removed = len(_previews)
    _previews.clear()
    return removed


def _sweep(now: datetime) -> None:
    for preview_id in [pid for pid, staged in _previews.items() if staged.expired(now)]:
        del _previews[preview_id]
        logger.debug("preview_expired", preview_id=preview_id)
