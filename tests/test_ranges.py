"""
Range Parser Test Suite

Failure categories:
1. Single values - bare integers, ceiling boundaries
2. Ranges - sampling stays inside [min, max], requested text is kept
3. Rejections - non-numeric, negative, inverted, over ceiling, malformed

Usage:
    pytest tests/test_ranges.py -v
"""

import random

import pytest

from apex_load.errors import BoundsError, ParameterError, ParseError, RangeFormatError
from apex_load.ranges import ParsedValue, parse_int_or_range


# =============================================================================
# Category 1: Single Values
# =============================================================================

class TestSingleValues:
    """A bare integer comes back unchanged and is not marked as a range."""

    @pytest.mark.parser
    @pytest.mark.parametrize("param,expected", [("0", 0), ("100", 100), ("1000", 1000)])
    def test_valid_single_value(self, param, expected, rng):
        parsed = parse_int_or_range(param, 1000, "test", rng)

        assert parsed == ParsedValue(value=expected)
        assert parsed.is_range is False
        assert parsed.requested_range is None

    @pytest.mark.parser
    def test_every_value_up_to_ceiling(self, rng):
        for n in range(0, 46):
            assert parse_int_or_range(str(n), 45, "f", rng).value == n

    @pytest.mark.parser
    def test_ceiling_plus_one_rejected(self, rng):
        with pytest.raises(BoundsError):
            parse_int_or_range("1001", 1000, "test", rng)


# =============================================================================
# Category 2: Ranges
# =============================================================================

class TestRanges:
    """A min..max range samples uniformly from the closed interval."""

    @pytest.mark.parser
    def test_valid_range(self, rng):
        parsed = parse_int_or_range("50..150", 1000, "test", rng)

        assert parsed.is_range is True
        assert parsed.requested_range == "50..150"
        assert 50 <= parsed.value <= 150

    @pytest.mark.parser
    def test_range_covers_both_bounds(self, rng):
        seen = {parse_int_or_range("3..7", 10, "test", rng).value for _ in range(500)}

        assert seen == {3, 4, 5, 6, 7}

    @pytest.mark.parser
    def test_degenerate_range(self, rng):
        parsed = parse_int_or_range("5..5", 10, "test", rng)

        assert parsed.value == 5
        assert parsed.is_range is True

    @pytest.mark.parser
    def test_range_up_to_ceiling(self, rng):
        parsed = parse_int_or_range("0..1000", 1000, "test", rng)
        assert 0 <= parsed.value <= 1000

    @pytest.mark.parser
    def test_seeded_sampling_is_reproducible(self):
        first = [parse_int_or_range("1..100", 100, "t", random.Random(7)).value for _ in range(3)]
        second = [parse_int_or_range("1..100", 100, "t", random.Random(7)).value for _ in range(3)]

        assert first == second


# =============================================================================
# Category 3: Rejections
# =============================================================================

class TestRejections:
    """Each invalid form raises a named error that carries the parameter name."""

    @pytest.mark.parser
    @pytest.mark.parametrize("param,error", [
        ("invalid", ParseError),
        ("", ParseError),
        ("1.5", ParseError),
        ("1e3", ParseError),
        ("-10", BoundsError),
        ("2000", BoundsError),
        ("50-150", ParseError),
        ("50..100..150", RangeFormatError),
        ("invalid..150", ParseError),
        ("50..invalid", ParseError),
        ("50..", ParseError),
        ("-10..50", BoundsError),
        ("150..50", BoundsError),
        ("500..2000", BoundsError),
    ])
    def test_invalid_params(self, param, error, rng):
        with pytest.raises(error):
            parse_int_or_range(param, 1000, "test", rng)

    @pytest.mark.parser
    @pytest.mark.parametrize("param", [
        "9" * 5000,
        "-" + "9" * 5000,
        "1.." + "9" * 5000,
        "9" * 5000 + "..1",
    ])
    def test_very_long_tokens_are_bounds_errors(self, param, rng):
        with pytest.raises(BoundsError) as exc_info:
            parse_int_or_range(param, 1000, "p", rng)

        assert str(exc_info.value).startswith("p: ")

    @pytest.mark.parser
    def test_leading_zeros_do_not_count_against_ceiling(self, rng):
        assert parse_int_or_range("0" * 50 + "42", 100, "p", rng).value == 42

    @pytest.mark.parser
    def test_error_message_names_param(self, rng):
        with pytest.raises(ParameterError) as exc_info:
            parse_int_or_range("invalid", 1000, "p", rng)

        assert exc_info.value.param == "p"
        assert str(exc_info.value) == "p: invalid number"

    @pytest.mark.parser
    def test_bounds_message_mentions_ceiling(self, rng):
        with pytest.raises(BoundsError) as exc_info:
            parse_int_or_range("2000000", 1_000_000, "m", rng)

        assert "1000000" in str(exc_info.value)
        assert str(exc_info.value).startswith("m: ")

    @pytest.mark.parser
    def test_rejected_range_does_not_draw(self):
        source = random.Random(99)
        state = source.getstate()

        with pytest.raises(BoundsError):
            parse_int_or_range("10..5", 100, "test", source)

        assert source.getstate() == state
