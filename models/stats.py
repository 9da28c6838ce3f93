"""
Inventory statistics schemas.
"""

from pydantic import Field
from typing import Optional

from models.base import BaseSchema
from models.product import CanonicalSize


class SizeStat(BaseSchema):
    """Units and stock value for one canonical size."""
    size: CanonicalSize
    label: str
    count: int = 0
    value: float = 0


class InventoryStats(BaseSchema):
    """Stock summary, optionally restricted to one location."""
    location_id: Optional[str] = Field(None, description="None means all locations")
    by_size: list[SizeStat] = Field(default_factory=list)
    total_count: int = 0
    total_value: float = 0
    item_count: int = Field(0, description="Catalog entries considered")
