"""
Delimited text helpers for spreadsheet exports.

Handles comma, semicolon and tab separated text from arbitrary spreadsheet
tools. Semicolon and tab are checked before comma because Russian-locale
exports use the comma as decimal separator.
"""

import csv
import re

import structlog

logger = structlog.get_logger(__name__)

BOM = "\ufeff"
DEFAULT_DELIMITER = ","

# First character that is not a word char, whitespace or quote
_FALLBACK_DELIMITER_RE = re.compile(r"[^\w\s\"']")


def split_lines(text: str) -> list[str]:
    """
    Prepare raw file text for line-based parsing.

    Strips a leading BOM, normalizes line endings, trims the whole text
    and splits it into lines. Empty input gives an empty list.
    """
    if not text:
        return []

    if text.startswith(BOM):
        text = text[len(BOM):]

    text = text.replace("\r\n", "\n").replace("\r", "\n").strip()
    if not text:
        return []
    return text.split("\n")


def detect_delimiter(header_line: str) -> str:
    """
    Choose the field delimiter from the header line.

    Order: tab, semicolon, comma (only if it actually splits the line),
    then the first character that is not a word char, whitespace or quote.

    "a\\tb\\tc" → "\\t", "a;b;c" → ";", "a,b,c" → ",", "a|b|c" → "|"
    """
    if "\t" in header_line:
        delimiter = "\t"
    elif ";" in header_line:
        delimiter = ";"
    elif len(header_line.split(",")) > 1:
        delimiter = ","
    else:
        match = _FALLBACK_DELIMITER_RE.search(header_line)
        delimiter = match.group(0) if match else DEFAULT_DELIMITER

    logger.debug("delimiter_detected", delimiter=delimiter)
    return delimiter


def split_line(line: str, delimiter: str) -> list[str]:
    """
    Split one line into trimmed fields.

    Quoted fields may contain the delimiter: '"a, b",5' → ["a, b", "5"].

    Raises:
        csv.Error: If the line cannot be tokenized (e.g. contains NUL)
    """
    reader = csv.reader([line], delimiter=delimiter, skipinitialspace=True)
    fields = next(reader, [])
    return [field.strip() for field in fields]
