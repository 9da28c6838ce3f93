"""
Reconciliation of imported rows against a product catalog.

Takes a catalog snapshot and returns a new catalog value; the input list and
its products are never mutated. Semantics:
- Match on (name case-insensitive, size, type, location) → overwrite quantity
- No match → new entry with a fresh id
- zero_non_existing → entries at the target location that had stock and are
  absent from the import are set to 0 (never deleted)

Every mutation is logged in ImportResult.logs and listed as a CatalogChange.
"""

import math
import uuid
from dataclasses import dataclass
from numbers import Number
from typing import Any, Mapping, Optional, Sequence, Union

import structlog

from exceptions import MissingTargetLocationError
from models.imports import (
    CatalogChange,
    ChangeAction,
    ImportLogItem,
    ImportResult,
    ImportRow,
    ReconcileOutcome,
)
from models.product import NAME_MAX_LENGTH, CanonicalSize, Product, ProductType
from parsers.value_parser import map_type, normalize_size, parse_quantity, round_half_up
from utils.text_utils import name_key

logger = structlog.get_logger(__name__)

RowInput = Union[ImportRow, Mapping[str, Any]]

# (name key, size, location_id): identity used for zero-fill bookkeeping
ZeroKey = tuple[str, CanonicalSize, str]
# (name key, size, type, location_id): composite catalog key
MatchKey = tuple[str, CanonicalSize, ProductType, str]


@dataclass
class _CheckedRow:
    name: str
    size: CanonicalSize
    type: ProductType
    location_id: str
    quantity: int

    @property
    def match_key(self) -> MatchKey:
        return (name_key(self.name), self.size, self.type, self.location_id)

    @property
    def zero_key(self) -> ZeroKey:
        return (name_key(self.name), self.size, self.location_id)


def match_key(product: Product) -> MatchKey:
    """Composite key of a catalog entry."""
    return (name_key(product.name), product.size, product.type, product.location_id)


def _field(raw: Mapping[str, Any], snake: str, camel: str) -> Any:
    value = raw.get(snake)
    if value is None:
        value = raw.get(camel)
    return value


def coerce_quantity(raw: Any) -> int:
    """Quantity from a UI value: strings are parsed, numbers rounded half-up."""
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, str):
        return parse_quantity(raw)
    if isinstance(raw, Number):
        value = float(raw)
        if not math.isfinite(value):
            return 0
        return round_half_up(value)
    return 0


def _check_row(index: int, raw: RowInput, result: ImportResult) -> Optional[_CheckedRow]:
    """
    Validate one incoming row; log a warning and return None if it is skipped.
    """
    if isinstance(raw, ImportRow):
        return _CheckedRow(
            name=raw.name,
            size=raw.size,
            type=raw.type,
            location_id=raw.location_id,
            quantity=raw.quantity,
        )

    name = str(raw.get("name") or "").strip()
    location_id = str(_field(raw, "location_id", "locationId") or "").strip()
    if not name or not location_id:
        result.logs.append(ImportLogItem.warning(
            f"Пропущена строка {index}: отсутствует название или локация"
        ))
        return None
    if len(name) > NAME_MAX_LENGTH:
        result.logs.append(ImportLogItem.warning(
            f"Пропущена строка {index}: слишком длинное название",
            {"length": len(name), "max_length": NAME_MAX_LENGTH},
        ))
        return None

    raw_size = raw.get("size")
    size = normalize_size(raw_size)
    if size is None:
        result.logs.append(ImportLogItem.warning(
            f'Пропущена строка {index}: неподдерживаемый размер "{raw_size}"'
        ))
        return None

    raw_quantity = raw.get("quantity")
    quantity = coerce_quantity(raw_quantity)
    if quantity <= 0:
        result.logs.append(ImportLogItem.warning(
            f'Пропущена строка {index}: некорректное количество "{raw_quantity}"'
        ))
        return None

    return _CheckedRow(
        name=name,
        size=size,
        type=map_type(raw.get("type")),
        location_id=location_id,
        quantity=quantity,
    )


def reconcile(
    rows: Sequence[RowInput],
    catalog: Sequence[Product],
    target_location_id: Optional[str] = None,
    zero_non_existing: bool = False,
) -> ReconcileOutcome:
    """
    Merge import rows into a catalog snapshot.

    Args:
        rows: ImportRows, or mappings with name/size/type/locationId/quantity
        catalog: Current catalog (left untouched)
        target_location_id: Location the import describes
        zero_non_existing: Zero stock at the target location missing from rows

    Returns:
        ReconcileOutcome with the new catalog, result counts/logs and changes

    Raises:
        MissingTargetLocationError: zero_non_existing without a target location
    """
    if zero_non_existing and not target_location_id:
        raise MissingTargetLocationError()

    working: list[Product] = [product.model_copy() for product in catalog]
    positions: dict[MatchKey, int] = {}
    for pos, product in enumerate(working):
        positions.setdefault(match_key(product), pos)

    # Snapshot taken before any row is applied
    zero_candidates: dict[ZeroKey, list[int]] = {}
    if zero_non_existing:
        for pos, product in enumerate(working):
            if product.location_id == target_location_id and product.quantity > 0:
                key = (name_key(product.name), product.size, product.location_id)
                zero_candidates.setdefault(key, []).append(pos)

    result = ImportResult()
    changes: list[CatalogChange] = []

    for index, raw in enumerate(rows, start=1):
        row = _check_row(index, raw, result)
        if row is None:
            result.skipped_count += 1
            continue

        zero_candidates.pop(row.zero_key, None)
        label = row.size.label

        pos = positions.get(row.match_key)
        if pos is not None:
            existing = working[pos]
            working[pos] = existing.model_copy(update={"quantity": row.quantity})
            result.updated_items_count += 1
            result.logs.append(ImportLogItem.success(
                f'Обновлен товар "{existing.name}" ({label}), новое количество: {row.quantity}'
            ))
            changes.append(CatalogChange(
                action=ChangeAction.UPDATED,
                product_id=existing.id,
                name=existing.name,
                size=existing.size,
                location_id=existing.location_id,
                previous_quantity=existing.quantity,
                new_quantity=row.quantity,
            ))
        else:
            created = Product(
                id=str(uuid.uuid4()),
                name=row.name,
                size=row.size,
                type=row.type,
                location_id=row.location_id,
                quantity=row.quantity,
            )
            positions[row.match_key] = len(working)
            working.append(created)
            result.new_items_count += 1
            result.logs.append(ImportLogItem.success(
                f'Добавлен новый товар "{created.name}" ({label}), количество: {row.quantity}'
            ))
            changes.append(CatalogChange(
                action=ChangeAction.CREATED,
                product_id=created.id,
                name=created.name,
                size=created.size,
                location_id=created.location_id,
                new_quantity=created.quantity,
            ))
        result.imported_count += 1

    if zero_non_existing:
        stale = sorted(pos for group in zero_candidates.values() for pos in group)
        for pos in stale:
            product = working[pos]
            working[pos] = product.model_copy(update={"quantity": 0})
            result.zeroed_items_count += 1
            result.logs.append(ImportLogItem.warning(
                f'Обнулен товар "{product.name}" ({product.size.label}), отсутствует в импорте'
            ))
            changes.append(CatalogChange(
                action=ChangeAction.ZEROED,
                product_id=product.id,
                name=product.name,
                size=product.size,
                location_id=product.location_id,
                previous_quantity=product.quantity,
                new_quantity=0,
            ))

    logger.info(
        "reconcile_completed",
        rows=len(rows),
        imported=result.imported_count,
        new=result.new_items_count,
        updated=result.updated_items_count,
        zeroed=result.zeroed_items_count,
        skipped=result.skipped_count,
        target_location_id=target_location_id,
    )

    return ReconcileOutcome(catalog=working, result=result, changes=changes)
