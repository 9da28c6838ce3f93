"""
Unit tests for delimited text helpers and text normalization.
"""

import pytest

from parsers.delimited_parser import detect_delimiter, split_line, split_lines
from utils.text_utils import contains_either_way, name_key, normalize_text


# ===================
# TEXT NORMALIZATION TESTS
# ===================

class TestNormalizeText:
    """Tests for fuzzy-match normalization."""

    def test_drops_case_spaces_and_punctuation(self):
        assert normalize_text("Кол-во, шт") == "колвошт"
        assert normalize_text("  Store #2 ") == "store2"

    def test_keeps_cyrillic_letters(self):
        assert normalize_text("ТЦ «Галерея»") == "тцгалерея"

    def test_empty_and_none(self):
        assert normalize_text("") == ""
        assert normalize_text(None) == ""

    def test_name_key_ignores_case_and_outer_spaces(self):
        assert name_key("  Chanel No5 ") == "chanel no5"
        assert name_key("Chanel No5") != name_key("Chanel No 5")

    def test_contains_either_way(self):
        assert contains_either_way("тцгалерея", "галерея")
        assert contains_either_way("галерея", "тцгалерея2этаж")
        assert not contains_either_way("", "галерея")
        assert not contains_either_way("мега", "галерея")


# ===================
# LINE SPLITTING TESTS
# ===================

class TestSplitLines:
    """Tests for input preparation."""

    def test_strips_bom(self):
        lines = split_lines("\ufeffНазвание;Остаток\nA;1")
        assert lines[0] == "Название;Остаток"

    def test_normalizes_line_endings(self):
        assert split_lines("a\r\nb\rc\n") == ["a", "b", "c"]

    def test_trims_whole_text(self):
        assert split_lines("\n\n a,b \n1,2\n\n") == ["a,b ", "1,2"]

    def test_empty_input(self):
        assert split_lines("") == []
        assert split_lines("   \n  ") == []
        assert split_lines("\ufeff") == []


# ===================
# DELIMITER DETECTION TESTS
# ===================

class TestDetectDelimiter:
    """Tests for delimiter detection."""

    def test_tab(self):
        assert detect_delimiter("a\tb\tc") == "\t"

    def test_semicolon(self):
        assert detect_delimiter("a;b;c") == ";"

    def test_comma(self):
        assert detect_delimiter("a,b,c") == ","

    def test_fallback_to_first_symbol(self):
        assert detect_delimiter("a|b|c") == "|"

    def test_tab_wins_over_semicolon_and_comma(self):
        assert detect_delimiter("a;x\tb,c") == "\t"

    def test_semicolon_wins_over_comma(self):
        """Russian exports use comma as decimal separator."""
        assert detect_delimiter("Название;Цена, руб;Остаток") == ";"

    def test_single_column_defaults_to_comma(self):
        assert detect_delimiter("Название") == ","


# ===================
# FIELD SPLITTING TESTS
# ===================

class TestSplitLine:
    """Tests for quote-aware splitting."""

    def test_plain_fields_are_trimmed(self):
        assert split_line(" a , b ,c ", ",") == ["a", "b", "c"]

    def test_quoted_field_keeps_delimiter(self):
        assert split_line('"Chanel, No5",5,10', ",") == ["Chanel, No5", "5", "10"]

    def test_quoted_field_after_space(self):
        assert split_line('Dior, "Sauvage; EDT", 3', ",") == ["Dior", "Sauvage; EDT", "3"]

    def test_empty_fields_preserved(self):
        assert split_line("a;;c;", ";") == ["a", "", "c", ""]

    def test_tab_delimiter(self):
        assert split_line("Chanel\t5 мл\t7", "\t") == ["Chanel", "5 мл", "7"]

    @pytest.mark.parametrize("line", ["", "   "])
    def test_blank_line(self, line):
        result = split_line(line, ",")
        assert all(field == "" for field in result)
