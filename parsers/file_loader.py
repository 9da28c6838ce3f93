"""
Uploaded file → text for the delimited parser.

Excel workbooks are flattened to tab-delimited text (first sheet, header
row first). Text files are decoded as UTF-8, falling back to cp1251 for
legacy Windows exports.
"""

from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional, Union

import pandas as pd
import structlog

from exceptions import FileLoadError

logger = structlog.get_logger(__name__)

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
TEXT_ENCODINGS = ("utf-8-sig", "cp1251")

FileSource = Union[str, Path, bytes, BinaryIO]


def _source_name(file: FileSource, filename: Optional[str]) -> str:
    if filename:
        return filename
    if isinstance(file, (str, Path)):
        return Path(file).name
    return getattr(file, "name", None) or "upload"


def decode_text(data: bytes, filename: str = "upload") -> str:
    """
    Decode file bytes, trying TEXT_ENCODINGS in order.

    Raises:
        FileLoadError: If no encoding fits
    """
    for encoding in TEXT_ENCODINGS:
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError:
            continue
        logger.debug("file_decoded", filename=filename, encoding=encoding)
        return text
    raise FileLoadError(filename, "unsupported text encoding")


def _cell_text(value) -> str:
    """Cell as single-line text; tabs and newlines would break the layout."""
    return " ".join(str(value).split())


def excel_to_text(file: FileSource, filename: str = "upload.xlsx") -> str:
    """
    First sheet of a workbook as tab-delimited lines.

    Fully empty rows are dropped.

    Raises:
        FileLoadError: If the workbook cannot be read
    """
    source = BytesIO(file) if isinstance(file, bytes) else file
    try:
        df = pd.read_excel(source, sheet_name=0, header=None, dtype=str, engine="openpyxl")
    except Exception as e:
        logger.error("excel_read_failed", filename=filename, error=str(e))
        raise FileLoadError(filename, str(e))

    df = df.fillna("")
    lines = []
    for row in df.itertuples(index=False):
        cells = [_cell_text(value) for value in row]
        if any(cells):
            lines.append("\t".join(cells))

    logger.info("excel_flattened", filename=filename, rows=len(lines))
    return "\n".join(lines)


def read_import_file(file: FileSource, filename: Optional[str] = None) -> str:
    """
    Load an uploaded inventory file as text.

    Args:
        file: Path, raw bytes or binary file object
        filename: Original file name (decides Excel vs text by suffix)

    Returns:
        Text ready for parse_import_text

    Raises:
        FileLoadError: If the file cannot be read or decoded
    """
    name = _source_name(file, filename)
    suffix = Path(name).suffix.lower()

    if suffix in EXCEL_SUFFIXES:
        return excel_to_text(file, name)

    try:
        if isinstance(file, bytes):
            data = file
        elif isinstance(file, (str, Path)):
            data = Path(file).read_bytes()
        else:
            data = file.read()
    except OSError as e:
        logger.error("file_read_failed", filename=name, error=str(e))
        raise FileLoadError(name, str(e))

    return decode_text(data, name)
