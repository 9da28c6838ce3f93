"""
Unit tests for the inventory file parser (row builder).
"""

import pytest

from exceptions import (
    EmptyImportError,
    HeaderOnlyImportError,
    MissingNameColumnError,
)
from models.imports import LogType, SizeMode
from models.product import CanonicalSize, ProductType
from parsers.header_classifier import classify_headers
from parsers.inventory_csv_parser import (
    MISSING_SIZE_COLUMN_WARNING,
    build_rows,
    parse_import_text,
)


# ===================
# FATAL INPUT TESTS
# ===================

class TestFatalInput:
    """Tests for input that aborts parsing."""

    def test_empty_text(self):
        with pytest.raises(EmptyImportError):
            parse_import_text("", fallback_location_id="L1")

    def test_whitespace_only(self):
        with pytest.raises(EmptyImportError):
            parse_import_text("\ufeff \r\n ", fallback_location_id="L1")

    def test_header_only(self):
        with pytest.raises(HeaderOnlyImportError):
            parse_import_text("Название,Остаток\n", fallback_location_id="L1")

    def test_no_name_column_regardless_of_data(self):
        with pytest.raises(MissingNameColumnError):
            parse_import_text("Size,Qty\n5,3\n16,2\n", fallback_location_id="L1")


# ===================
# SINGLE-QUANTITY MODE TESTS
# ===================

class TestSingleQuantityMode:
    """Tests for files with one quantity column."""

    def test_basic_file(self, sample_csv):
        parsed = parse_import_text(sample_csv, fallback_location_id="L1")

        assert parsed.delimiter == ","
        assert parsed.data_line_count == 2
        assert parsed.skipped == 0
        assert [(r.name, r.size, r.quantity) for r in parsed.rows] == [
            ("Chanel No5", CanonicalSize.ML_5, 10),
            ("Dior Sauvage", CanonicalSize.CAR, 4),
        ]
        assert all(r.location_id == "L1" for r in parsed.rows)
        assert all(r.type == ProductType.PERFUME for r in parsed.rows)

    def test_semicolon_file_with_bom_and_crlf(self):
        text = "\ufeffНаименование;Объем;Кол-во\r\nChanel;16 мл;2,5\r\nDior;Автофлакон;1\r\n"
        parsed = parse_import_text(text, fallback_location_id="L1")
        assert [(r.size, r.quantity) for r in parsed.rows] == [
            (CanonicalSize.ML_16, 3),
            (CanonicalSize.CAR, 1),
        ]

    def test_quoted_names_with_delimiter(self):
        text = 'Название,Размер,Остаток\n"Chanel, No5",5,10\n'
        parsed = parse_import_text(text, fallback_location_id="L1")
        assert parsed.rows[0].name == "Chanel, No5"

    def test_missing_size_column_defaults_to_5ml(self):
        text = "Название\tОстаток\nChanel\t3\n"
        parsed = parse_import_text(text, fallback_location_id="L1")
        assert parsed.rows[0].size == CanonicalSize.ML_5
        assert parsed.logs[0].type == LogType.WARNING
        assert parsed.logs[0].message == MISSING_SIZE_COLUMN_WARNING

    def test_blank_size_cell_defaults_to_5ml(self):
        text = "Название,Размер,Остаток\nChanel,,3\n"
        parsed = parse_import_text(text, fallback_location_id="L1")
        assert parsed.rows[0].size == CanonicalSize.ML_5

    def test_unsupported_size_strict(self):
        text = "Название,Размер,Остаток\nChanel,50 мл,3\nDior,5,1\n"
        parsed = parse_import_text(text, fallback_location_id="L1", size_mode=SizeMode.STRICT)
        assert [r.name for r in parsed.rows] == ["Dior"]
        assert parsed.skipped == 1
        assert parsed.logs[0].message == 'Пропущена строка 2: неподдерживаемый размер "50 мл"'

    def test_unsupported_size_lax(self):
        text = "Название,Размер,Остаток\nChanel,50 мл,3\n"
        parsed = parse_import_text(text, fallback_location_id="L1", size_mode=SizeMode.LAX)
        assert parsed.rows[0].size == CanonicalSize.ML_5
        assert parsed.skipped == 0

    def test_bad_quantity_skipped(self):
        text = "Название,Остаток\nChanel,нет\nDior,0\nGucci,2\n"
        parsed = parse_import_text(text, fallback_location_id="L1")
        assert [r.name for r in parsed.rows] == ["Gucci"]
        assert parsed.skipped == 2
        messages = [log.message for log in parsed.logs]
        assert 'Пропущена строка 2: некорректное количество "нет"' in messages
        assert 'Пропущена строка 3: некорректное количество "0"' in messages

    def test_short_line_and_missing_name(self):
        text = "Название,Размер,Остаток\nChanel\n,5,3\nDior,5,1\n"
        parsed = parse_import_text(text, fallback_location_id="L1")
        assert [r.name for r in parsed.rows] == ["Dior"]
        messages = [log.message for log in parsed.logs]
        assert "Пропущена строка 2: недостаточно колонок" in messages
        assert "Пропущена строка 3: отсутствует название товара" in messages

    def test_blank_lines_ignored(self):
        text = "Название,Остаток\nChanel,1\n\n   \nDior,2\n"
        parsed = parse_import_text(text, fallback_location_id="L1")
        assert len(parsed.rows) == 2
        assert parsed.skipped == 0

    def test_type_column(self):
        text = "Название;Тип;Остаток\nChanel;Парфюм;1\nСвеча;Другое;2\nDior;;3\n"
        parsed = parse_import_text(text, fallback_location_id="L1")
        assert [r.type for r in parsed.rows] == [
            ProductType.PERFUME,
            ProductType.OTHER,
            ProductType.PERFUME,
        ]

    def test_rows_keep_input_order_without_dedup(self):
        text = "Название,Остаток\nChanel,1\nChanel,2\n"
        parsed = parse_import_text(text, fallback_location_id="L1")
        assert [r.quantity for r in parsed.rows] == [1, 2]


# ===================
# LOCATION TESTS
# ===================

class TestRowLocations:
    """Tests for location column handling."""

    def test_location_column_resolved_against_catalog(self, locations):
        text = "Название;Точка;Остаток\nChanel;Галерея;1\nDior;Центральный;2\n"
        parsed = parse_import_text(text, locations=locations, fallback_location_id="use-from-file")
        assert [(r.location_id, r.location_name) for r in parsed.rows] == [
            ("L2", "ТЦ Галерея"),
            ("L1", "Центральный магазин"),
        ]

    def test_unresolved_location_uses_fallback(self, locations):
        text = "Название;Точка;Остаток\nChanel;Мега;1\n"
        parsed = parse_import_text(text, locations=locations, fallback_location_id="L3")
        assert parsed.rows[0].location_id == "L3"

    def test_unresolved_location_without_fallback_skips_row(self, locations):
        text = "Название;Точка;Остаток\nChanel;Мега;1\nDior;Галерея;1\n"
        parsed = parse_import_text(text, locations=locations, fallback_location_id="use-from-file")
        assert [r.name for r in parsed.rows] == ["Dior"]
        assert parsed.skipped == 1
        assert parsed.logs[-1].message == "Пропущена строка 2: не удалось определить точку продажи"


# ===================
# MULTI-SIZE MODE TESTS
# ===================

class TestMultiSizeMode:
    """Tests for size-specific quantity columns."""

    def test_one_row_per_positive_size(self):
        text = (
            "Название;5 мл;16 мл;30 мл;Автофлакон\n"
            "Chanel;3;;0;1\n"
            "Dior;;2;;\n"
        )
        parsed = parse_import_text(text, fallback_location_id="L1")
        assert [(r.name, r.size, r.quantity) for r in parsed.rows] == [
            ("Chanel", CanonicalSize.ML_5, 3),
            ("Chanel", CanonicalSize.CAR, 1),
            ("Dior", CanonicalSize.ML_16, 2),
        ]
        assert parsed.skipped == 0

    def test_no_missing_size_warning_in_multi_size_mode(self):
        text = "Название;5 мл\nChanel;1\n"
        parsed = parse_import_text(text, fallback_location_id="L1")
        assert MISSING_SIZE_COLUMN_WARNING not in [log.message for log in parsed.logs]

    def test_short_lines_read_missing_sizes_as_blank(self):
        text = "Название;5 мл;16 мл\nChanel;2\n"
        parsed = parse_import_text(text, fallback_location_id="L1")
        assert [(r.size, r.quantity) for r in parsed.rows] == [(CanonicalSize.ML_5, 2)]

    def test_inferred_numeric_columns(self):
        text = "Название;A;B\nChanel;1;2\nDior;3;4\n"
        parsed = parse_import_text(text, fallback_location_id="L1")
        assert parsed.classification.inferred_quantity
        assert [(r.name, r.size, r.quantity) for r in parsed.rows] == [
            ("Chanel", CanonicalSize.ML_5, 1),
            ("Chanel", CanonicalSize.ML_16, 2),
            ("Dior", CanonicalSize.ML_5, 3),
            ("Dior", CanonicalSize.ML_16, 4),
        ]


# ===================
# BUILD ROWS TESTS
# ===================

class TestBuildRows:
    """Tests for per-line error isolation."""

    def test_unexpected_line_error_is_logged_and_skipped(self, monkeypatch):
        from parsers import inventory_csv_parser

        real_split = inventory_csv_parser.split_line

        def flaky_split(line, delimiter):
            if line.startswith("Bad"):
                raise ValueError("unbalanced quotes")
            return real_split(line, delimiter)

        monkeypatch.setattr(inventory_csv_parser, "split_line", flaky_split)

        classification = classify_headers(["Название", "Остаток"])
        lines = ["Chanel,1", "Bad,2", "Dior,3"]
        result = build_rows(lines, ",", classification, fallback_location_id="L1")

        assert [r.name for r in result.rows] == ["Chanel", "Dior"]
        assert result.skipped == 1
        assert result.logs[0].type == LogType.ERROR
        assert result.logs[0].message == "Ошибка обработки строки 3"
        assert result.logs[0].details == {"error": "unbalanced quotes"}


# ===================
# LINE ACCOUNTING TESTS
# ===================

class TestLineAccounting:
    """Every data line either yields rows or a log entry."""

    def test_multi_size_line_without_quantities_is_logged(self):
        text = "Название,5 мл,16 мл\nChanel,,\nDior,0,0\nGucci,1,\n"
        parsed = parse_import_text(text, fallback_location_id="L1")

        assert [r.name for r in parsed.rows] == ["Gucci"]
        assert parsed.skipped == 2
        assert [log.message for log in parsed.logs] == [
            "Пропущена строка 2: нет количества ни для одного объема",
            "Пропущена строка 3: нет количества ни для одного объема",
        ]

    def test_overlong_name_is_logged(self):
        text = "Название,Остаток\n" + "X" * 256 + ",1\n"
        parsed = parse_import_text(text, fallback_location_id="L1")
        assert parsed.rows == []
        assert parsed.skipped == 1
        assert parsed.logs[0].details == {"length": 256, "max_length": 255}
