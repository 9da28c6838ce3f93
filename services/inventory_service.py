"""
Inventory service for catalog operations.

Owns one in-memory product catalog and the location catalog it refers to.
Single writer: imports replace the catalog with the reconciled snapshot, so
callers must not run two operations on the same service concurrently.
"""

import uuid
from typing import Iterable, Optional, Sequence

import structlog

from exceptions import (
    LocationNotFoundError,
    PreviewNotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from models.imports import ImportPreview, ImportResult, ReconcileOutcome, SizeMode
from models.location import Location
from models.product import Product, ProductCreate, ProductUpdate
from models.stats import InventoryStats
from services import import_service
from services.preview_cache_service import delete_preview, retrieve_preview, store_preview
from services.reconciliation_service import RowInput, match_key
from services.stats_service import compute_inventory_stats
from utils.text_utils import name_key

logger = structlog.get_logger(__name__)


class InventoryService:
    """
    Inventory business logic.

    Handles CRUD on catalog entries plus the import flows
    (direct CSV import, row import, preview → confirm).
    """

    def __init__(
        self,
        products: Optional[Iterable[Product]] = None,
        locations: Optional[Iterable[Location]] = None,
    ):
        self._products: list[Product] = list(products or [])
        self._locations: list[Location] = list(locations or [])

    # ===================
    # READ OPERATIONS
    # ===================

    def get_all(self) -> list[Product]:
        """Snapshot of the whole catalog, in insertion order."""
        return list(self._products)

    def get_by_id(self, product_id: str) -> Product:
        """
        Get a single catalog entry by ID.

        Raises:
            ProductNotFoundError: If the entry doesn't exist
        """
        for product in self._products:
            if product.id == product_id:
                return product
        raise ProductNotFoundError(product_id)

    def get_by_location(self, location_id: str) -> list[Product]:
        """Entries stocked at one location."""
        return [p for p in self._products if p.location_id == location_id]

    @property
    def locations(self) -> list[Location]:
        return list(self._locations)

    def set_locations(self, locations: Iterable[Location]) -> None:
        """Replace the location catalog used to resolve import rows."""
        self._locations = list(locations)
        logger.info("locations_set", count=len(self._locations))

    def get_location(self, location_id: str) -> Location:
        """
        Raises:
            LocationNotFoundError: If the location is unknown
        """
        for location in self._locations:
            if location.id == location_id:
                return location
        raise LocationNotFoundError(location_id)

    def get_stats(self, location_id: Optional[str] = None) -> InventoryStats:
        """Units and stock value per size, optionally for one location."""
        return compute_inventory_stats(self._products, location_id)

    # ===================
    # WRITE OPERATIONS
    # ===================

    def add_product(self, data: ProductCreate) -> Product:
        """
        Add units of a product.

        Unlike imports, this is additive: if an entry with the same
        (name, size, type, location) exists, its quantity grows by
        data.quantity.

        Returns:
            The created or updated entry
        """
        key = (name_key(data.name), data.size, data.type, data.location_id)
        for pos, existing in enumerate(self._products):
            if match_key(existing) == key:
                updated = existing.model_copy(
                    update={"quantity": existing.quantity + data.quantity}
                )
                self._products[pos] = updated
                logger.info(
                    "product_quantity_added",
                    product_id=existing.id,
                    added=data.quantity,
                    quantity=updated.quantity,
                )
                return updated

        product = Product(id=str(uuid.uuid4()), **data.model_dump())
        self._products.append(product)
        logger.info(
            "product_created",
            product_id=product.id,
            name=product.name,
            size=product.size.value,
            location_id=product.location_id,
        )
        return product

    def update_quantity(self, product_id: str, quantity: int) -> Product:
        """
        Set an entry's quantity.

        Raises:
            ProductNotFoundError: If the entry doesn't exist
            ValidationError: If quantity is negative
        """
        if quantity < 0:
            raise ValidationError(
                "Quantity cannot be negative",
                details={"product_id": product_id, "quantity": quantity},
            )
        product = self.get_by_id(product_id)
        updated = product.model_copy(update={"quantity": quantity})
        self._replace(updated)
        logger.info("product_quantity_updated", product_id=product_id, quantity=quantity)
        return updated

    def update_product(self, product_id: str, data: ProductUpdate) -> Product:
        """
        Update an entry. Only provided fields change.

        Raises:
            ProductNotFoundError: If the entry doesn't exist
            ValidationError: If the change would collide with another entry's
                (name, size, type, location)
        """
        product = self.get_by_id(product_id)
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            logger.debug("product_update_empty", product_id=product_id)
            return product

        updated = Product.model_validate({**product.model_dump(), **update_data})
        key = match_key(updated)
        duplicate = next(
            (p for p in self._products if p.id != product_id and match_key(p) == key),
            None,
        )
        if duplicate is not None:
            logger.warning(
                "product_update_duplicate",
                product_id=product_id,
                duplicate_id=duplicate.id,
            )
            raise ValidationError(
                "Product with the same name, size, type and location already exists",
                code="PRODUCT_DUPLICATE",
                details={"product_id": product_id, "duplicate_id": duplicate.id},
            )

        self._replace(updated)
        logger.info("product_updated", product_id=product_id, fields=sorted(update_data))
        return updated

    def delete_product(self, product_id: str) -> None:
        """
        Raises:
            ProductNotFoundError: If the entry doesn't exist
        """
        product = self.get_by_id(product_id)
        self._products = [p for p in self._products if p.id != product.id]
        logger.info("product_deleted", product_id=product_id)

    def delete_all(self) -> int:
        """Clear the catalog; returns how many entries were removed."""
        removed = len(self._products)
        self._products = []
        logger.warning("catalog_cleared", removed=removed)
        return removed

    # ===================
    # IMPORT OPERATIONS
    # ===================

    def import_from_csv(
        self,
        raw_text: str,
        target_location_id: Optional[str],
        zero_non_existing: bool = False,
    ) -> ImportResult:
        """Import a delimited file into the catalog (strict sizes)."""
        outcome = import_service.import_from_csv(
            raw_text,
            self._products,
            target_location_id,
            zero_non_existing,
            locations=self._locations,
        )
        return self._apply(outcome)

    def import_products(
        self,
        products: Sequence[RowInput],
        location_id: Optional[str],
        zero_non_existing: bool = False,
    ) -> ImportResult:
        """Reconcile prepared rows into the catalog."""
        outcome = import_service.import_products(
            products,
            self._products,
            location_id,
            zero_non_existing,
        )
        return self._apply(outcome)

    def preview_import(
        self,
        raw_text: str,
        manual_location_id: Optional[str] = None,
        size_mode: SizeMode = SizeMode.LAX,
    ) -> ImportPreview:
        """Parse a file without touching the catalog."""
        return import_service.parse_import_data(
            raw_text,
            manual_location_id=manual_location_id,
            locations=self._locations,
            size_mode=size_mode,
        )

    def stage_import(
        self,
        raw_text: str,
        manual_location_id: Optional[str] = None,
        size_mode: SizeMode = SizeMode.LAX,
    ) -> ImportPreview:
        """
        Parse a file and keep its rows for a later confirm_import.

        Returns:
            ImportPreview with preview_id set when parsing succeeded
        """
        preview = self.preview_import(raw_text, manual_location_id, size_mode)
        if preview.ok:
            preview.preview_id = store_preview(preview.full_data)
            logger.info(
                "import_staged",
                preview_id=preview.preview_id,
                rows=len(preview.full_data),
            )
        return preview

    def confirm_import(
        self,
        preview_id: str,
        target_location_id: Optional[str],
        zero_non_existing: bool = False,
    ) -> ImportResult:
        """
        Reconcile the rows of a staged preview; the preview is consumed.

        Raises:
            PreviewNotFoundError: If the preview expired or never existed
        """
        rows = retrieve_preview(preview_id)
        if rows is None:
            logger.warning("import_preview_missing", preview_id=preview_id)
            raise PreviewNotFoundError(preview_id)

        result = self.import_products(rows, target_location_id, zero_non_existing)
        delete_preview(preview_id)
        return result

    def cancel_import(self, preview_id: str) -> None:
        """Discard a staged preview."""
        delete_preview(preview_id)
        logger.info("import_cancelled", preview_id=preview_id)

    # ===================
    # INTERNAL
    # ===================

    def _replace(self, product: Product) -> None:
        self._products = [product if p.id == product.id else p for p in self._products]

    def _apply(self, outcome: ReconcileOutcome) -> ImportResult:
        self._products = list(outcome.catalog)
        logger.info(
            "catalog_replaced",
            size=len(self._products),
            changes=len(outcome.changes),
        )
        return outcome.result


# Singleton instance for convenience
_inventory_service: Optional[InventoryService] = None


def get_inventory_service() -> InventoryService:
    """Get or create InventoryService instance."""
    global _inventory_service
    if _inventory_service is None:
        _inventory_service = InventoryService()
    return _inventory_service
