"""
Custom exceptions module.

Fatal import failures derive from ImportParseError.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,

    # Catalog
    ProductNotFoundError,
    LocationNotFoundError,
    PreviewNotFoundError,

    # Import
    ImportParseError,
    EmptyImportError,
    HeaderOnlyImportError,
    MissingNameColumnError,
    MissingQuantityColumnError,
    NoImportableRowsError,
    EmptyProductListError,
    MissingTargetLocationError,
    FileLoadError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",

    # Catalog
    "ProductNotFoundError",
    "LocationNotFoundError",
    "PreviewNotFoundError",

    # Import
    "ImportParseError",
    "EmptyImportError",
    "HeaderOnlyImportError",
    "MissingNameColumnError",
    "MissingQuantityColumnError",
    "NoImportableRowsError",
    "EmptyProductListError",
    "MissingTargetLocationError",
    "FileLoadError",
]
