"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema
from models.product import (
    CanonicalSize,
    ProductType,
    ProductBase,
    ProductCreate,
    ProductUpdate,
    Product,
)
from models.location import Location
from models.imports import (
    SizeMode,
    LogType,
    ChangeAction,
    ImportRow,
    ImportLogItem,
    ImportResult,
    CatalogChange,
    ReconcileOutcome,
    ImportPreview,
)
from models.stats import SizeStat, InventoryStats

__all__ = [
    # Base
    "BaseSchema",

    # Product
    "CanonicalSize",
    "ProductType",
    "ProductBase",
    "ProductCreate",
    "ProductUpdate",
    "Product",

    # Location
    "Location",

    # Import
    "SizeMode",
    "LogType",
    "ChangeAction",
    "ImportRow",
    "ImportLogItem",
    "ImportResult",
    "CatalogChange",
    "ReconcileOutcome",
    "ImportPreview",

    # Stats
    "SizeStat",
    "InventoryStats",
]
