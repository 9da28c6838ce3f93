"""
Custom exception classes for the application.

Fatal import failures are raised as ImportParseError subclasses inside the
parsers and converted into an ImportResult by services.import_service.
Their messages are shown to the user as-is, so they are in Russian.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PRODUCT_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP-style status code for callers that expose one
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


# ===================
# CATALOG ERRORS
# ===================

class ProductNotFoundError(NotFoundError):
    """Product not found in the catalog."""

    def __init__(self, product_id: str):
        super().__init__(
            resource="Product",
            identifier=product_id,
            code="PRODUCT_NOT_FOUND"
        )


class LocationNotFoundError(NotFoundError):
    """Location not found in the location catalog."""

    def __init__(self, location_id: str):
        super().__init__(
            resource="Location",
            identifier=location_id,
            code="LOCATION_NOT_FOUND"
        )


class PreviewNotFoundError(NotFoundError):
    """Staged import preview expired or never existed."""

    def __init__(self, preview_id: str):
        super().__init__(
            resource="Import preview",
            identifier=preview_id,
            code="IMPORT_PREVIEW_NOT_FOUND"
        )


# ===================
# IMPORT ERRORS
# ===================

class ImportParseError(ValidationError):
    """Import cannot proceed at all (fatal, aborts the whole file)."""

    def __init__(
        self,
        message: str,
        code: str = "IMPORT_PARSE_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            details=details
        )


class EmptyImportError(ImportParseError):
    """Input text is empty."""

    def __init__(self):
        super().__init__(
            code="IMPORT_EMPTY",
            message="Пустой CSV-файл"
        )


class HeaderOnlyImportError(ImportParseError):
    """Input has a header line but no data lines."""

    def __init__(self):
        super().__init__(
            code="IMPORT_HEADER_ONLY",
            message="Файл пуст или содержит только заголовок"
        )


class MissingNameColumnError(ImportParseError):
    """No header matched any product-name synonym."""

    def __init__(self, headers: list[str]):
        super().__init__(
            code="IMPORT_NAME_COLUMN_MISSING",
            message="Не удалось найти колонку с названием товара",
            details={"headers": headers}
        )


class MissingQuantityColumnError(ImportParseError):
    """No quantity signal: no quantity column, size columns or numeric columns."""

    def __init__(self, headers: list[str]):
        super().__init__(
            code="IMPORT_QUANTITY_COLUMN_MISSING",
            message="Не удалось найти колонку с количеством товара",
            details={"headers": headers}
        )


class NoImportableRowsError(ImportParseError):
    """Every data line was skipped."""

    def __init__(self, line_count: int):
        super().__init__(
            code="IMPORT_NO_ROWS",
            message="Не удалось найти данные для импорта",
            details={"data_lines": line_count}
        )


class EmptyProductListError(ImportParseError):
    """Row-list import called with no rows."""

    def __init__(self):
        super().__init__(
            code="IMPORT_NO_PRODUCTS",
            message="Нет товаров для импорта"
        )


class MissingTargetLocationError(ImportParseError):
    """Zero-fill requested without a target location."""

    def __init__(self):
        super().__init__(
            code="IMPORT_TARGET_LOCATION_MISSING",
            message="Не выбрана точка продажи для обнуления остатков"
        )


class FileLoadError(ImportParseError):
    """Uploaded file cannot be read as text or spreadsheet."""

    def __init__(self, filename: str, reason: str):
        super().__init__(
            code="IMPORT_FILE_UNREADABLE",
            message=f"Не удалось прочитать файл {filename}",
            details={"filename": filename, "original_error": reason}
        )
