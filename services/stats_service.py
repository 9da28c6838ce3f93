"""
Inventory statistics: units and stock value per canonical size.

Value uses the entry's own price when set, otherwise the size's
default price.
"""

from typing import Optional, Sequence

import pandas as pd
import structlog

from models.product import CanonicalSize, Product
from models.stats import InventoryStats, SizeStat

logger = structlog.get_logger(__name__)

FRAME_COLUMNS = ["id", "name", "size", "type", "location_id", "quantity", "price"]


def catalog_frame(products: Sequence[Product]) -> pd.DataFrame:
    """
    One row per catalog entry; `size` holds the stat key and `price` the
    effective unit price.
    """
    records = [
        {
            "id": p.id,
            "name": p.name,
            "size": p.size.stat_key,
            "type": p.type.value,
            "location_id": p.location_id,
            "quantity": p.quantity,
            "price": p.price if p.price is not None else p.size.default_price,
        }
        for p in products
    ]
    df = pd.DataFrame(records, columns=FRAME_COLUMNS)
    df["quantity"] = df["quantity"].astype("int64")
    df["price"] = df["price"].astype("float64")
    return df


def compute_inventory_stats(
    products: Sequence[Product],
    location_id: Optional[str] = None,
) -> InventoryStats:
    """
    Summarize stock per canonical size.

    Args:
        products: Catalog entries
        location_id: Only count entries at this location (None = all)

    Returns:
        InventoryStats with one SizeStat per canonical size, in canonical order
    """
    df = catalog_frame(products)
    if location_id:
        df = df[df["location_id"] == location_id]

    df = df.assign(value=df["quantity"] * df["price"])
    totals = df.groupby("size")[["quantity", "value"]].sum()

    by_size = []
    for size in CanonicalSize.ordered():
        if size.stat_key in totals.index:
            count = int(totals.at[size.stat_key, "quantity"])
            value = float(totals.at[size.stat_key, "value"])
        else:
            count, value = 0, 0.0
        by_size.append(SizeStat(size=size, label=size.label, count=count, value=value))

    stats = InventoryStats(
        location_id=location_id,
        by_size=by_size,
        total_count=sum(s.count for s in by_size),
        total_value=sum(s.value for s in by_size),
        item_count=len(df),
    )
    logger.debug(
        "inventory_stats_computed",
        location_id=location_id,
        total_count=stats.total_count,
        item_count=stats.item_count,
    )
    return stats
