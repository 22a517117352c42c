"""
Tests for unit, currency and identifier conversions.
"""

import pytest

from propzing.utils.conversions import (
    m2_to_sqft,
    sqft_to_m2,
    round_half_up,
    convert_to_aed,
    price_to_aed,
    parse_coordinates,
    generate_hash_id,
    split_list,
    is_persistent_url,
    clean_str,
)


class TestAreaConversion:

    def test_m2_to_sqft(self):
        assert m2_to_sqft(1) == pytest.approx(10.7639)
        assert m2_to_sqft(100) == pytest.approx(1076.39)

    def test_sqft_to_m2(self):
        assert sqft_to_m2(10.7639) == pytest.approx(1.0)

    def test_none_passes_through(self):
        assert m2_to_sqft(None) is None
        assert sqft_to_m2(None) is None

    def test_zero_is_converted(self):
        assert m2_to_sqft(0) == 0
        assert sqft_to_m2(0) == 0


class TestCurrencyConversion:

    def test_aed_passes_through(self):
        assert convert_to_aed(1500000, "AED") == 1500000

    def test_usd_uses_fixed_rate(self):
        assert convert_to_aed(100, "USD") == 367.0

    def test_currency_code_is_case_insensitive_for_rates(self):
        assert convert_to_aed(100, "eur") == 400.0

    def test_result_rounded_to_two_decimals(self):
        assert convert_to_aed(1.2345, "USD") == 4.53

    def test_unknown_currency_gives_none(self):
        assert convert_to_aed(100, "XYZ") is None

    def test_missing_amount_or_currency(self):
        assert convert_to_aed(None, "USD") is None
        assert convert_to_aed(100, None) is None
        assert convert_to_aed(100, "") is None

    def test_price_to_aed_treats_zero_as_missing(self):
        assert price_to_aed(0, "USD") is None
        assert price_to_aed(None, "AED") is None
        assert price_to_aed(1000, "AED") == 1000
        assert price_to_aed(1000, "GBP") == 4600.0

    def test_round_half_up(self):
        assert round_half_up(0.125) == 0.13
        assert round_half_up(12.5, 0) == 13
        assert round_half_up(-0.5, 0) == 0


class TestCoordinates:

    @pytest.mark.parametrize("text,expected", [
        ("25.2048, 55.2708", (25.2048, 55.2708)),
        ("25.2048,55.2708", (25.2048, 55.2708)),
        (" -33.86 , 151.21 ", (-33.86, 151.21)),
    ])
    def test_valid_pairs(self, text, expected):
        assert parse_coordinates(text) == expected

    @pytest.mark.parametrize("text", [None, "", "   ", "25.2", "1,2,3", "north,east", "nan,1"])
    def test_invalid_text(self, text):
        assert parse_coordinates(text) == (None, None)


class TestHashId:

    def test_known_values(self):
        assert generate_hash_id("a") == -97
        assert generate_hash_id("ab") == -(97 * 31 + 98)

    def test_empty_string(self):
        assert generate_hash_id("") == 0

    def test_deterministic_and_non_positive(self):
        first = generate_hash_id("PRJ-001")
        assert first == generate_hash_id("PRJ-001")
        assert first <= 0
        assert first != generate_hash_id("PRJ-002")

    def test_wraps_to_32_bits(self):
        value = generate_hash_id("a-fairly-long-external-identifier-that-overflows")
        assert -(2 ** 31) <= value <= 0

    def test_non_bmp_characters_hash_as_surrogate_pairs(self):
        # U+1F3E0 is the pair 0xD83C 0xDFE0
        assert generate_hash_id("\U0001F3E0") == -abs(((0xD83C * 31) + 0xDFE0))


class TestStringHelpers:

    def test_split_list_trims_and_drops_blanks(self):
        assert split_list(" a, b ,, c ") == ["a", "b", "c"]

    def test_split_list_multiple_separators(self):
        assert split_list("a\nb,c", separators="\n,") == ["a", "b", "c"]
        assert split_list("10%|40%| 50%", separators="|") == ["10%", "40%", "50%"]

    def test_split_list_empty(self):
        assert split_list(None) == []
        assert split_list("") == []

    def test_is_persistent_url(self):
        assert is_persistent_url("https://cdn.emaar.ae/video.mp4")
        assert not is_persistent_url("blob:http://localhost:5173/abc")
        assert not is_persistent_url("   ")
        assert not is_persistent_url(None)

    def test_clean_str(self):
        assert clean_str("  Tower A ") == "Tower A"
        assert clean_str("   ") is None
        assert clean_str(None) is None
