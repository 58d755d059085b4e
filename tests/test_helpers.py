"""Tests for location normalization helpers."""

import pytest

from reach_map_server.helpers import (
    location_label,
    normalize_location,
    strip_accents,
)
from reach_map_server.models import AddressFragments


class TestStripAccents:
    """Tests for diacritic removal."""

    def test_removes_portuguese_accents(self):
        assert strip_accents("São João") == "Sao Joao"
        assert strip_accents("Cubatão") == "Cubatao"
        assert strip_accents("Açaí") == "Acai"

    def test_leaves_plain_text_alone(self):
        assert strip_accents("Surubim") == "Surubim"


class TestNormalizeLocation:
    """Tests for normalize_location."""

    def test_lowercases(self):
        assert normalize_location("SURUBIM") == "surubim"

    def test_accent_variants_are_equal(self):
        """Spellings differing only by accent marks normalize identically."""
        assert normalize_location("São Sebastião") == normalize_location("Sao Sebastiao")
        assert normalize_location("Vila Esperança") == normalize_location("vila esperanca")

    def test_collapses_whitespace(self):
        assert normalize_location("  Vila   Esperança  ") == "vila esperanca"

    def test_tidies_commas(self):
        assert normalize_location("Coqueiro ,Surubim") == "coqueiro, surubim"
        assert normalize_location("Coqueiro,   Surubim") == "coqueiro, surubim"

    def test_strips_dangling_commas(self):
        assert normalize_location(", Surubim,") == "surubim"

    def test_empty_input(self):
        assert normalize_location("") == ""
        assert normalize_location(None) == ""
        assert normalize_location("   ") == ""

    @pytest.mark.parametrize(
        "text",
        [
            "São Sebastião, Surubim",
            "  JOÃO   Alfredo ",
            "Xique-Xique, BA",
            "Coqueiro ,, Surubim",
            "İstanbul",
            "ﬁnal, ℌill",
            "",
        ],
    )
    def test_idempotent(self, text):
        once = normalize_location(text)
        assert normalize_location(once) == once


class TestLocationLabel:
    """Tests for the grouping/display label."""

    def test_neighborhood_and_city(self):
        fragments = AddressFragments(neighborhood="Coqueiro", city="Surubim", state="PE")
        assert location_label(fragments) == "Coqueiro, Surubim"

    def test_city_only(self):
        assert location_label(AddressFragments(city="Cubatão", state="SP")) == "Cubatão"

    def test_neighborhood_only(self):
        assert location_label(AddressFragments(neighborhood="Juca")) == "Juca"

    def test_nothing(self):
        assert location_label(AddressFragments(state="PE")) == ""

