"""
Business logic services.

Each service handles one domain area.
"""

from services.reconciliation_service import reconcile
from services.import_service import (
    import_from_csv,
    import_products,
    parse_import_data,
)
from services.preview_cache_service import (
    store_preview,
    retrieve_preview,
    delete_preview,
)
from services.stats_service import compute_inventory_stats
from services.export_service import ExportService, get_export_service
from services.inventory_service import InventoryService, get_inventory_service

__all__ = [
    "reconcile",
    "import_from_csv",
    "import_products",
    "parse_import_data",
    "store_preview",
    "retrieve_preview",
    "delete_preview",
    "compute_inventory_stats",
    "ExportService",
    "get_export_service",
    "InventoryService",
    "get_inventory_service",
]
