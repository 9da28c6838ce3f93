"""
Location (point of sale) schema.

The location catalog is owned by the caller; the import engine only reads it.
"""

from pydantic import Field
from typing import Optional

from models.base import BaseSchema


class Location(BaseSchema):
    """Point of sale or warehouse."""

    id: str = Field(..., min_length=1, description="Location id")
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Display name, matched fuzzily against import files",
        examples=["Центральный магазин", "ТЦ Галерея"]
    )
    address: Optional[str] = Field(None, description="Street address")
    contact: Optional[str] = Field(None, description="Phone or contact person")
