"""
Import and reconciliation schemas.

ImportResult is the only artifact an import run hands back to the user:
its logs must account for every input line and every touched entry.
"""

from pydantic import Field
from typing import Any, Optional
from enum import Enum

from models.base import BaseSchema
from models.product import NAME_MAX_LENGTH, CanonicalSize, Product, ProductType


class SizeMode(str, Enum):
    """How unrecognized size tokens are treated."""
    STRICT = "strict"  # reject the row
    LAX = "lax"        # fall back to 5 ml


class LogType(str, Enum):
    """Severity of an import log line."""
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class ChangeAction(str, Enum):
    """Kind of catalog mutation produced by reconciliation."""
    CREATED = "created"
    UPDATED = "updated"
    ZEROED = "zeroed"


class ImportRow(BaseSchema):
    """One normalized import entry, consumed by reconciliation."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    size: CanonicalSize
    type: ProductType = ProductType.PERFUME
    location_id: str = Field(..., min_length=1)
    location_name: str = ""
    quantity: int = Field(..., gt=0)


class ImportLogItem(BaseSchema):
    """Single line of the import audit log."""

    type: LogType
    message: str
    details: Optional[Any] = None

    @classmethod
    def success(cls, message: str, details: Any = None) -> "ImportLogItem":
        return cls(type=LogType.SUCCESS, message=message, details=details)

    @classmethod
    def warning(cls, message: str, details: Any = None) -> "ImportLogItem":
        return cls(type=LogType.WARNING, message=message, details=details)

    @classmethod
    def error(cls, message: str, details: Any = None) -> "ImportLogItem":
        return cls(type=LogType.ERROR, message=message, details=details)


class ImportResult(BaseSchema):
    """Counts plus line-level log of one import run."""

    imported_count: int = 0
    skipped_count: int = 0
    new_items_count: int = 0
    updated_items_count: int = 0
    zeroed_items_count: int = 0
    logs: list[ImportLogItem] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """True if any log line is an error."""
        return any(log.type == LogType.ERROR for log in self.logs)

    @property
    def warnings(self) -> list[ImportLogItem]:
        return [log for log in self.logs if log.type == LogType.WARNING]

    @classmethod
    def failed(cls, message: str, details: Any = None) -> "ImportResult":
        """Empty result carrying a single error line."""
        return cls(logs=[ImportLogItem.error(message, details)])


class CatalogChange(BaseSchema):
    """One catalog mutation, in the order it was applied."""

    action: ChangeAction
    product_id: str
    name: str
    size: CanonicalSize
    location_id: str
    previous_quantity: Optional[int] = None
    new_quantity: int


class ReconcileOutcome(BaseSchema):
    """New catalog value plus the result and change list that produced it."""

    catalog: list[Product] = Field(default_factory=list)
    result: ImportResult = Field(default_factory=ImportResult)
    changes: list[CatalogChange] = Field(default_factory=list)


class ImportPreview(BaseSchema):
    """Parsed rows shown to the user before committing."""

    preview: list[ImportRow] = Field(default_factory=list)
    full_data: list[ImportRow] = Field(default_factory=list)
    error: Optional[str] = None
    warnings: list[ImportLogItem] = Field(default_factory=list)
    preview_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
