"""
Test data factories.

Uses factory pattern to generate consistent test data.
"""

from typing import Optional
from uuid import uuid4

from models.imports import ImportRow
from models.location import Location
from models.product import CanonicalSize, Product, ProductType


class ProductFactory:
    """
    Factory for creating catalog entries.

    Usage:
        # Create with defaults
        product = ProductFactory.create()

        # Create with overrides
        product = ProductFactory.create(name="Chanel", size=CanonicalSize.CAR)

        # Create multiple
        products = ProductFactory.create_batch(5, location_id="L2")
    """

    _counter = 0

    @classmethod
    def _next_counter(cls) -> int:
        cls._counter += 1
        return cls._counter

    @classmethod
    def create(
        cls,
        id: Optional[str] = None,
        name: Optional[str] = None,
        size: CanonicalSize = CanonicalSize.ML_5,
        type: ProductType = ProductType.PERFUME,
        location_id: str = "L1",
        quantity: int = 10,
        price: Optional[float] = None,
    ) -> Product:
        """
        Create a single Product.

        Args:
            id: Product id (auto-generated if not provided)
            name: Product name (auto-generated if not provided)
            size: Canonical size
            type: Product type
            location_id: Location id
            quantity: Units in stock
            price: Unit price override

        Returns:
            Product
        """
        counter = cls._next_counter()
        return Product(
            id=id or str(uuid4()),
            name=name or f"Test Perfume {counter}",
            size=size,
            type=type,
            location_id=location_id,
            quantity=quantity,
            price=price,
        )

    @classmethod
    def create_batch(cls, count: int, **overrides) -> list[Product]:
        """Create multiple products."""
        return [cls.create(**overrides) for _ in range(count)]

    @classmethod
    def create_row(
        cls,
        name: str = "Chanel No5",
        size: CanonicalSize = CanonicalSize.ML_5,
        type: ProductType = ProductType.PERFUME,
        location_id: str = "L1",
        quantity: int = 1,
    ) -> ImportRow:
        """Create an ImportRow as the parser would emit it."""
        return ImportRow(
            name=name,
            size=size,
            type=type,
            location_id=location_id,
            quantity=quantity,
        )

    @classmethod
    def reset_counter(cls):
        """Reset the counter (call in test setup if needed)."""
        cls._counter = 0


class LocationFactory:
    """Factory for creating locations."""

    _counter = 0

    @classmethod
    def _next_counter(cls) -> int:
        cls._counter += 1
        return cls._counter

    @classmethod
    def create(
        cls,
        id: Optional[str] = None,
        name: Optional[str] = None,
        address: Optional[str] = None,
        contact: Optional[str] = None,
    ) -> Location:
        counter = cls._next_counter()
        return Location(
            id=id or f"loc-{counter}",
            name=name or f"Магазин {counter}",
            address=address,
            contact=contact,
        )

    @classmethod
    def reset_counter(cls):
        cls._counter = 0
