"""
Product (catalog entry) schemas.

A catalog entry is identified by (name, size, type, location_id);
`id` is a surrogate assigned once at creation.
"""

from pydantic import Field, field_validator
from typing import Optional
from enum import Enum

from models.base import BaseSchema

# Longest product name a catalog entry can hold
NAME_MAX_LENGTH = 255


class CanonicalSize(str, Enum):
    """The six container sizes the shop tracks."""
    ML_5 = "5"
    ML_16 = "16"
    ML_20 = "20"
    ML_25 = "25"
    ML_30 = "30"
    CAR = "car"

    @property
    def label(self) -> str:
        """Display label: "5 мл" … "Автофлакон"."""
        return _SIZE_LABELS[self]

    @property
    def stat_key(self) -> str:
        """Short key used for statistics grouping."""
        return self.value

    @property
    def default_price(self) -> int:
        """Unit price in rubles when the entry carries none."""
        return _DEFAULT_PRICES[self]

    @classmethod
    def ordered(cls) -> list["CanonicalSize"]:
        """Canonical order, used for positional column mapping."""
        return [cls.ML_5, cls.ML_16, cls.ML_20, cls.ML_25, cls.ML_30, cls.CAR]


_SIZE_LABELS = {
    CanonicalSize.ML_5: "5 мл",
    CanonicalSize.ML_16: "16 мл",
    CanonicalSize.ML_20: "20 мл",
    CanonicalSize.ML_25: "25 мл",
    CanonicalSize.ML_30: "30 мл",
    CanonicalSize.CAR: "Автофлакон",
}

_DEFAULT_PRICES = {
    CanonicalSize.ML_5: 500,
    CanonicalSize.ML_16: 1000,
    CanonicalSize.ML_20: 1300,
    CanonicalSize.ML_25: 1500,
    CanonicalSize.ML_30: 1800,
    CanonicalSize.CAR: 500,
}


class ProductType(str, Enum):
    """Product types."""
    PERFUME = "perfume"
    OTHER = "other"


class ProductBase(BaseSchema):
    """Fields shared by new and stored catalog entries."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="Product name as entered or imported",
        examples=["Chanel No5", "Dior Sauvage"]
    )
    size: CanonicalSize = Field(
        ...,
        description="Canonical container size"
    )
    type: ProductType = Field(
        default=ProductType.PERFUME,
        description="Product type"
    )
    location_id: str = Field(
        ...,
        min_length=1,
        description="Location UUID or id"
    )
    quantity: int = Field(
        ...,
        ge=0,
        description="Units in stock"
    )
    price: Optional[float] = Field(
        None,
        ge=0,
        description="Unit price override (rubles)"
    )


class ProductCreate(ProductBase):
    """
    New catalog entry.

    Used by the manual "add product" flow; quantities add up on match.
    """

    @field_validator("quantity")
    @classmethod
    def positive_quantity(cls, v: int) -> int:
        """Adding zero units is meaningless."""
        if v <= 0:
            raise ValueError("Quantity must be positive")
        return v


class Product(ProductBase):
    """Stored catalog entry."""

    id: str = Field(..., min_length=1, description="Durable surrogate id")

    @property
    def size_label(self) -> str:
        return self.size.label


class ProductUpdate(BaseSchema):
    """
    Update existing catalog entry.

    All fields optional - only provided fields are updated.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    size: Optional[CanonicalSize] = None
    type: Optional[ProductType] = None
    location_id: Optional[str] = Field(None, min_length=1)
    quantity: Optional[int] = Field(None, ge=0)
    price: Optional[float] = Field(None, ge=0)
