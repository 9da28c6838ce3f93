"""
Inventory file parser: delimited text → ImportRow list.

Reads the header line, classifies columns, then builds one ImportRow per
(line, size) with a positive quantity. Handles:
- Single-quantity files (name / size / quantity columns)
- Size-specific files ("5 мл", "16 мл", ... columns)
- Unlabeled numeric columns (inferred from sample rows)

Fatal problems raise ImportParseError subclasses. Row problems never raise;
they are returned as log items and counted as skipped.
"""

import csv
from dataclasses import dataclass, field
from typing import Optional, Sequence

import structlog

from config.settings import get_settings
from exceptions import EmptyImportError, HeaderOnlyImportError, ImportParseError
from models.imports import ImportLogItem, ImportRow, SizeMode
from models.location import Location
from models.product import NAME_MAX_LENGTH, CanonicalSize
from parsers.delimited_parser import detect_delimiter, split_line, split_lines
from parsers.header_classifier import ColumnClassification, classify_headers
from parsers.location_resolver import ResolvedLocation, resolve_location
from parsers.value_parser import map_type, parse_quantity, resolve_size

logger = structlog.get_logger(__name__)

# Data lines are numbered as in the file: header is line 1
FIRST_DATA_LINE = 2

MISSING_SIZE_COLUMN_WARNING = (
    "Не удалось найти колонку с объемом, будет использоваться значение по умолчанию (5 мл)"
)


@dataclass
class RowBuildResult:
    """Rows built from data lines plus the per-line log."""
    rows: list[ImportRow] = field(default_factory=list)
    logs: list[ImportLogItem] = field(default_factory=list)
    skipped: int = 0

    def skip(self, log: ImportLogItem) -> None:
        self.logs.append(log)
        self.skipped += 1


@dataclass
class ParsedImport:
    """Everything learned from one file, before reconciliation."""
    delimiter: str
    classification: ColumnClassification
    data_line_count: int
    rows: list[ImportRow] = field(default_factory=list)
    logs: list[ImportLogItem] = field(default_factory=list)
    skipped: int = 0


def _cell(columns: Sequence[str], idx: int) -> str:
    """Column value, empty when the column is absent or out of range."""
    if idx == -1 or idx >= len(columns):
        return ""
    return columns[idx]


def _required_width(classification: ColumnClassification) -> int:
    """Minimum number of fields a data line must have."""
    required = [classification.name_idx]
    if not classification.multi_size:
        required.append(classification.quantity_idx)
        if classification.size_idx != -1:
            required.append(classification.size_idx)
    return max(required) + 1


def _build_line(
    line_number: int,
    columns: list[str],
    classification: ColumnClassification,
    locations: Sequence[Location],
    fallback_location_id: Optional[str],
    strict: bool,
    out: RowBuildResult,
) -> None:
    """Append the rows (or the skip warning) for one split data line."""
    if len(columns) < _required_width(classification):
        out.skip(ImportLogItem.warning(
            f"Пропущена строка {line_number}: недостаточно колонок",
            {"columns": len(columns)},
        ))
        return

    name = _cell(columns, classification.name_idx)
    if not name:
        out.skip(ImportLogItem.warning(
            f"Пропущена строка {line_number}: отсутствует название товара"
        ))
        return
    if len(name) > NAME_MAX_LENGTH:
        out.skip(ImportLogItem.warning(
            f"Пропущена строка {line_number}: слишком длинное название",
            {"length": len(name), "max_length": NAME_MAX_LENGTH},
        ))
        return

    location: Optional[ResolvedLocation] = resolve_location(
        _cell(columns, classification.location_idx),
        locations,
        fallback_location_id,
    )
    if location is None:
        out.skip(ImportLogItem.warning(
            f"Пропущена строка {line_number}: не удалось определить точку продажи",
            {"location": _cell(columns, classification.location_idx)},
        ))
        return

    product_type = map_type(_cell(columns, classification.type_idx))

    if classification.multi_size:
        emitted = 0
        for size, idx in classification.size_columns.items():
            raw_quantity = _cell(columns, idx)
            if not raw_quantity:
                continue
            quantity = parse_quantity(raw_quantity)
            if quantity <= 0:
                continue
            out.rows.append(ImportRow(
                name=name,
                size=size,
                type=product_type,
                location_id=location.location_id,
                location_name=location.location_name,
                quantity=quantity,
            ))
            emitted += 1
        if not emitted:
            out.skip(ImportLogItem.warning(
                f"Пропущена строка {line_number}: нет количества ни для одного объема"
            ))
        return

    raw_size = _cell(columns, classification.size_idx)
    if raw_size:
        size = resolve_size(raw_size, strict=strict)
    else:
        size = CanonicalSize.ML_5
    if size is None:
        out.skip(ImportLogItem.warning(
            f'Пропущена строка {line_number}: неподдерживаемый размер "{raw_size}"'
        ))
        return

    raw_quantity = _cell(columns, classification.quantity_idx)
    quantity = parse_quantity(raw_quantity)
    if quantity <= 0:
        out.skip(ImportLogItem.warning(
            f'Пропущена строка {line_number}: некорректное количество "{raw_quantity}"'
        ))
        return

    out.rows.append(ImportRow(
        name=name,
        size=size,
        type=product_type,
        location_id=location.location_id,
        location_name=location.location_name,
        quantity=quantity,
    ))


def build_rows(
    data_lines: Sequence[str],
    delimiter: str,
    classification: ColumnClassification,
    locations: Sequence[Location] = (),
    fallback_location_id: Optional[str] = None,
    size_mode: SizeMode = SizeMode.STRICT,
) -> RowBuildResult:
    """
    Turn data lines into ImportRows, in input order.

    No deduplication happens here; repeated keys are merged by reconciliation.

    Args:
        data_lines: Lines after the header
        delimiter: Field delimiter detected from the header
        classification: Column roles
        locations: Caller's location catalog
        fallback_location_id: Manual/target location, or the sentinel
        size_mode: STRICT rejects unknown sizes, LAX maps them to 5 ml

    Returns:
        RowBuildResult (rows, warning/error logs, skipped line count)
    """
    strict = size_mode == SizeMode.STRICT
    result = RowBuildResult()

    for offset, line in enumerate(data_lines):
        line_number = FIRST_DATA_LINE + offset
        if not line.strip():
            continue
        try:
            columns = split_line(line, delimiter)
            _build_line(
                line_number,
                columns,
                classification,
                locations,
                fallback_location_id,
                strict,
                result,
            )
        except Exception as e:
            logger.error("import_line_failed", line=line_number, error=str(e))
            result.skip(ImportLogItem.error(
                f"Ошибка обработки строки {line_number}",
                {"error": str(e)},
            ))

    logger.debug(
        "rows_built",
        rows=len(result.rows),
        skipped=result.skipped,
        lines=len(data_lines),
    )
    return result


def _sample_rows(data_lines: Sequence[str], delimiter: str, limit: int) -> list[list[str]]:
    """First `limit` splittable non-empty data lines."""
    samples: list[list[str]] = []
    for line in data_lines:
        if len(samples) >= limit:
            break
        if not line.strip():
            continue
        try:
            samples.append(split_line(line, delimiter))
        except csv.Error:
            continue
    return samples


def parse_import_text(
    raw_text: str,
    locations: Sequence[Location] = (),
    fallback_location_id: Optional[str] = None,
    size_mode: SizeMode = SizeMode.STRICT,
    sample_size: Optional[int] = None,
    numeric_ratio: Optional[float] = None,
) -> ParsedImport:
    """
    Parse a whole delimited file.

    Args:
        raw_text: Decoded file contents
        locations: Caller's location catalog
        fallback_location_id: Location for rows without a resolvable one
        size_mode: Size mapping policy for the size column
        sample_size: Rows sampled for numeric inference (settings default)
        numeric_ratio: Numeric share threshold (settings default)

    Returns:
        ParsedImport; `rows` may be empty if every line was skipped

    Raises:
        EmptyImportError: No text
        HeaderOnlyImportError: Header line only
        MissingNameColumnError: No name column
        MissingQuantityColumnError: No quantity information
        ImportParseError: Header line cannot be tokenized
    """
    lines = split_lines(raw_text)
    if not lines:
        raise EmptyImportError()
    if len(lines) < 2:
        raise HeaderOnlyImportError()

    delimiter = detect_delimiter(lines[0])
    try:
        headers = split_line(lines[0], delimiter)
    except csv.Error as e:
        raise ImportParseError(
            "Не удалось разобрать строку заголовка",
            code="IMPORT_HEADER_UNREADABLE",
            details={"error": str(e)},
        )

    data_lines = lines[1:]
    classification = classify_headers(
        headers,
        _sample_rows(data_lines, delimiter, sample_size or get_settings().import_sample_rows),
        sample_size=sample_size,
        numeric_ratio=numeric_ratio,
    )

    logs: list[ImportLogItem] = []
    if classification.size_idx == -1 and not classification.multi_size:
        logs.append(ImportLogItem.warning(MISSING_SIZE_COLUMN_WARNING))

    built = build_rows(
        data_lines,
        delimiter,
        classification,
        locations,
        fallback_location_id,
        size_mode,
    )

    logger.info(
        "import_text_parsed",
        delimiter=delimiter,
        data_lines=len(data_lines),
        rows=len(built.rows),
        skipped=built.skipped,
        size_mode=size_mode.value,
    )

    return ParsedImport(
        delimiter=delimiter,
        classification=classification,
        data_line_count=len(data_lines),
        rows=built.rows,
        logs=logs + built.logs,
        skipped=built.skipped,
    )
