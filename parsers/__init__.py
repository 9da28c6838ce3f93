"""
Inventory file parsers.

Pure text processing: no catalog mutation happens here.
"""

from parsers.delimited_parser import split_lines, detect_delimiter, split_line
from parsers.value_parser import (
    normalize_size,
    map_size,
    map_type,
    parse_quantity,
)
from parsers.header_classifier import ColumnClassification, classify_headers
from parsers.location_resolver import ResolvedLocation, resolve_location
from parsers.inventory_csv_parser import ParsedImport, build_rows, parse_import_text
from parsers.file_loader import read_import_file
from parsers.data_kind import DataKind, detect_data_kind

__all__ = [
    "split_lines",
    "detect_delimiter",
    "split_line",
    "normalize_size",
    "map_size",
    "map_type",
    "parse_quantity",
    "ColumnClassification",
    "classify_headers",
    "ResolvedLocation",
    "resolve_location",
    "ParsedImport",
    "build_rows",
    "parse_import_text",
    "read_import_file",
    "DataKind",
    "detect_data_kind",
]
