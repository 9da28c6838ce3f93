"""
Export service: Catalog to CSV, Excel and JSON.

The CSV layout is the one the importer reads back: semicolon-delimited,
Russian headers, display labels for size and type.
"""

import csv
from io import BytesIO, StringIO
from typing import Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
import structlog

from models.location import Location
from models.product import Product, ProductType
from services.stats_service import compute_inventory_stats

logger = structlog.get_logger(__name__)

EXPORT_HEADERS = ["Название", "Объем", "Тип", "Точка", "Количество"]
EXPORT_DELIMITER = ";"

TYPE_LABELS = {
    ProductType.PERFUME: "Парфюм",
    ProductType.OTHER: "Другое",
}


def _location_names(locations: Sequence[Location]) -> dict[str, str]:
    return {location.id: location.name for location in locations}


def export_row(product: Product, location_names: dict[str, str]) -> list:
    """Row values in EXPORT_HEADERS order."""
    return [
        product.name,
        product.size.label,
        TYPE_LABELS[product.type],
        location_names.get(product.location_id, product.location_id),
        product.quantity,
    ]


class ExportService:
    """Catalog export in the formats the shop exchanges."""

    def to_csv(
        self,
        products: Sequence[Product],
        locations: Sequence[Location] = (),
    ) -> str:
        """
        Semicolon-delimited text, one line per catalog entry.

        Location ids are replaced by names when the location is known.
        """
        names = _location_names(locations)
        output = StringIO()
        writer = csv.writer(output, delimiter=EXPORT_DELIMITER, lineterminator="\n")
        writer.writerow(EXPORT_HEADERS)
        for product in products:
            writer.writerow(export_row(product, names))

        logger.info("catalog_exported", format="csv", rows=len(products))
        return output.getvalue()

    def to_xlsx(
        self,
        products: Sequence[Product],
        locations: Sequence[Location] = (),
        location_id: Optional[str] = None,
    ) -> BytesIO:
        """
        Excel workbook with an inventory sheet and a per-size summary sheet.

        Args:
            products: Catalog entries
            locations: Location catalog for display names
            location_id: Restrict both sheets to one location

        Returns:
            BytesIO containing the Excel file
        """
        if location_id:
            products = [p for p in products if p.location_id == location_id]
        names = _location_names(locations)

        wb = Workbook()
        header_font = Font(bold=True)
        header_fill = PatternFill(start_color="E0E8FF", end_color="E0E8FF", fill_type="solid")

        ws = wb.active
        ws.title = "Остатки"
        ws.append(EXPORT_HEADERS)
        for product in products:
            ws.append(export_row(product, names))
        for cell in ws[1]:
            cell.font = header_font
            cell.fill = header_fill
        ws.column_dimensions["A"].width = 40
        ws.column_dimensions["B"].width = 12
        ws.column_dimensions["C"].width = 12
        ws.column_dimensions["D"].width = 25
        ws.column_dimensions["E"].width = 12

        stats = compute_inventory_stats(products)
        ws_stats = wb.create_sheet(title="Статистика")
        ws_stats.append(["Объем", "Количество", "Стоимость"])
        for stat in stats.by_size:
            ws_stats.append([stat.label, stat.count, stat.value])
        ws_stats.append(["Итого", stats.total_count, stats.total_value])
        for cell in ws_stats[1]:
            cell.font = header_font
            cell.fill = header_fill
        for cell in ws_stats[ws_stats.max_row]:
            cell.font = header_font

        output = BytesIO()
        wb.save(output)
        output.seek(0)

        logger.info("catalog_exported", format="xlsx", rows=len(products))
        return output

    def to_json(self, products: Sequence[Product]) -> list[dict]:
        """camelCase product records."""
        return [product.to_dict() for product in products]


# Singleton instance for convenience
_export_service: Optional[ExportService] = None


def get_export_service() -> ExportService:
    """Get or create ExportService instance."""
    global _export_service
    if _export_service is None:
        _export_service = ExportService()
    return _export_service
