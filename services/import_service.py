"""
Import facade used by the UI layer.

Three entry points:
- import_from_csv: raw text → reconciled catalog (strict sizes)
- import_products: prepared rows → reconciled catalog
- parse_import_data: raw text → preview rows, no catalog change (lax sizes)

Fatal ImportParseErrors raised by parsers/reconciliation are converted here
into an ImportResult with a single error log, so callers never need to
catch them. Anything else propagates.
"""

from typing import Optional, Sequence

import structlog

from config.settings import get_settings
from exceptions import (
    EmptyProductListError,
    ImportParseError,
    MissingTargetLocationError,
    NoImportableRowsError,
)
from models.imports import ImportPreview, ImportResult, LogType, ReconcileOutcome, SizeMode
from models.location import Location
from models.product import Product
from parsers.inventory_csv_parser import parse_import_text
from services.reconciliation_service import RowInput, reconcile

logger = structlog.get_logger(__name__)


def failed_result(error: ImportParseError) -> ImportResult:
    """Result carrying one error log for a fatal import failure."""
    return ImportResult.failed(error.message, {"code": error.code, **error.details})


def _unchanged(catalog: Sequence[Product], result: ImportResult) -> ReconcileOutcome:
    return ReconcileOutcome(
        catalog=[product.model_copy() for product in catalog],
        result=result,
    )


def import_from_csv(
    raw_text: str,
    catalog: Sequence[Product],
    target_location_id: Optional[str],
    zero_non_existing: bool = False,
    locations: Optional[Sequence[Location]] = None,
) -> ReconcileOutcome:
    """
    Import a delimited inventory file into a catalog snapshot.

    Sizes are strict: rows with an unsupported size token are skipped with a
    warning. Rows without a resolvable location column use the target
    location. Parse warnings come first in the result log and parse skips
    count towards skippedCount.

    Args:
        raw_text: Decoded file contents
        catalog: Current product catalog (not mutated)
        target_location_id: Location the file describes
        zero_non_existing: Zero stock at the target missing from the file
        locations: Location catalog for files with a location column

    Returns:
        ReconcileOutcome; on fatal failure the catalog is unchanged and the
        result holds a single error log (after any parse warnings)
    """
    logger.info(
        "csv_import_started",
        target_location_id=target_location_id,
        zero_non_existing=zero_non_existing,
        catalog_size=len(catalog),
    )

    try:
        if zero_non_existing and not target_location_id:
            raise MissingTargetLocationError()
        parsed = parse_import_text(
            raw_text,
            locations=locations or (),
            fallback_location_id=target_location_id,
            size_mode=SizeMode.STRICT,
        )
    except ImportParseError as e:
        logger.warning("csv_import_failed", code=e.code, error=e.message)
        return _unchanged(catalog, failed_result(e))

    if not parsed.rows:
        error = NoImportableRowsError(parsed.data_line_count)
        logger.warning("csv_import_failed", code=error.code, skipped=parsed.skipped)
        result = failed_result(error)
        result = result.model_copy(update={
            "skipped_count": parsed.skipped,
            "logs": parsed.logs + result.logs,
        })
        return _unchanged(catalog, result)

    outcome = reconcile(parsed.rows, catalog, target_location_id, zero_non_existing)
    result = outcome.result.model_copy(update={
        "skipped_count": outcome.result.skipped_count + parsed.skipped,
        "logs": parsed.logs + outcome.result.logs,
    })

    logger.info(
        "csv_import_completed",
        imported=result.imported_count,
        new=result.new_items_count,
        updated=result.updated_items_count,
        zeroed=result.zeroed_items_count,
        skipped=result.skipped_count,
    )
    return outcome.model_copy(update={"result": result})


def import_products(
    products: Sequence[RowInput],
    catalog: Sequence[Product],
    location_id: Optional[str],
    zero_non_existing: bool = False,
) -> ReconcileOutcome:
    """
    Reconcile already-built rows (e.g. the confirmed preview) into a catalog.

    Args:
        products: ImportRows or mappings as sent by the UI
        catalog: Current product catalog (not mutated)
        location_id: Target location for zero-fill
        zero_non_existing: Zero stock at the target missing from the rows

    Returns:
        ReconcileOutcome; fatal failures leave the catalog unchanged
    """
    if not products:
        error = EmptyProductListError()
        logger.warning("product_import_failed", code=error.code)
        return _unchanged(catalog, failed_result(error))

    try:
        outcome = reconcile(products, catalog, location_id, zero_non_existing)
    except ImportParseError as e:
        logger.warning("product_import_failed", code=e.code, error=e.message)
        return _unchanged(catalog, failed_result(e))

    logger.info(
        "product_import_completed",
        rows=len(products),
        imported=outcome.result.imported_count,
        skipped=outcome.result.skipped_count,
    )
    return outcome


def parse_import_data(
    raw_text: str,
    manual_location_id: Optional[str] = None,
    locations: Sequence[Location] = (),
    size_mode: SizeMode = SizeMode.LAX,
    preview_limit: Optional[int] = None,
) -> ImportPreview:
    """
    Parse a file for preview-before-commit. Nothing is reconciled.

    Args:
        raw_text: Decoded file contents
        manual_location_id: Location chosen in the UI, or the
            "use-from-file" sentinel to rely on the location column
        locations: Location catalog for matching the location column
        size_mode: LAX maps unknown sizes to 5 ml (default)
        preview_limit: Rows in the preview slice (settings default)

    Returns:
        ImportPreview with the preview slice, all rows and row warnings,
        or with `error` set on fatal failure
    """
    preview_limit = preview_limit or get_settings().import_preview_limit

    try:
        parsed = parse_import_text(
            raw_text,
            locations=locations,
            fallback_location_id=manual_location_id,
            size_mode=size_mode,
        )
        if not parsed.rows:
            raise NoImportableRowsError(parsed.data_line_count)
    except ImportParseError as e:
        logger.warning("import_preview_failed", code=e.code, error=e.message)
        return ImportPreview(error=e.message)

    warnings = [log for log in parsed.logs if log.type != LogType.SUCCESS]
    logger.info(
        "import_preview_parsed",
        rows=len(parsed.rows),
        warnings=len(warnings),
        manual_location_id=manual_location_id,
    )
    return ImportPreview(
        preview=parsed.rows[:preview_limit],
        full_data=parsed.rows,
        warnings=warnings,
    )
