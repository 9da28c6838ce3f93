"""
Unit tests for location resolution.
"""

from parsers.location_resolver import (
    find_location_by_name,
    is_manual_location,
    resolve_location,
)
from tests.factories import LocationFactory


class TestFindLocationByName:
    """Tests for fuzzy location matching."""

    def test_raw_text_contains_location_name(self, locations):
        match = find_location_by_name("ТЦ Галерея, 2 этаж", locations)
        assert match.id == "L2"

    def test_location_name_contains_raw_text(self, locations):
        """Abbreviated cell text still matches."""
        match = find_location_by_name("Галерея", locations)
        assert match.id == "L2"

    def test_case_and_punctuation_ignored(self, locations):
        match = find_location_by_name("store-riverside", locations)
        assert match.id == "L3"

    def test_first_match_in_catalog_order(self):
        catalog = [
            LocationFactory.create(id="A", name="Магазин Север"),
            LocationFactory.create(id="B", name="Магазин Юг"),
        ]
        assert find_location_by_name("магазин", catalog).id == "A"

    def test_no_match(self, locations):
        assert find_location_by_name("Мега", locations) is None

    def test_blank_text(self, locations):
        assert find_location_by_name("", locations) is None
        assert find_location_by_name(None, locations) is None


class TestResolveLocation:
    """Tests for resolution with manual fallback."""

    def test_catalog_match(self, locations):
        resolved = resolve_location("Центральный", locations, fallback_id="L3")
        assert resolved.location_id == "L1"
        assert resolved.location_name == "Центральный магазин"
        assert not resolved.from_fallback

    def test_fallback_when_no_match(self, locations):
        resolved = resolve_location("Мега", locations, fallback_id="L3")
        assert resolved.location_id == "L3"
        assert resolved.location_name == "Store Riverside"
        assert resolved.from_fallback

    def test_fallback_when_no_text(self, locations):
        resolved = resolve_location("", locations, fallback_id="L2")
        assert resolved.location_id == "L2"

    def test_unknown_fallback_id_keeps_empty_name(self, locations):
        resolved = resolve_location(None, locations, fallback_id="elsewhere")
        assert resolved.location_id == "elsewhere"
        assert resolved.location_name == ""

    def test_sentinel_is_not_a_location(self, locations):
        assert resolve_location("Мега", locations, fallback_id="use-from-file") is None

    def test_nothing_resolves(self, locations):
        assert resolve_location("Мега", locations) is None
        assert resolve_location("", []) is None

    def test_is_manual_location(self):
        assert is_manual_location("L1")
        assert not is_manual_location("use-from-file")
        assert not is_manual_location("")
        assert not is_manual_location(None)
        assert not is_manual_location("manual", sentinel="manual")
