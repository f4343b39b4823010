"""Tests for decimal-precision normalization."""

import pytest

from stablepool.math.precision import greater_precision, rescale
from stablepool.safe_int import UINT128_MAX, Uint128Overflow


class TestRescale:
    def test_same_precision_unchanged(self):
        assert rescale(123_456, 6, 6) == 123_456

    def test_scale_up_is_exact(self):
        assert rescale(5, 6, 8) == 500
        assert rescale(1, 0, 18) == 10**18

    def test_scale_down_truncates(self):
        """Dropped digits are floored away, never rounded up."""
        assert rescale(123_456, 6, 3) == 123
        assert rescale(999, 6, 3) == 0

    def test_round_trip_up_then_down(self):
        for value in (0, 1, 999_999, 10**20):
            assert rescale(rescale(value, 6, 18), 18, 6) == value

    @pytest.mark.parametrize("value", [0, 1, 999_999_999_999, 10**12, 10**12 + 1, 123_456_789_012_345_678])
    @pytest.mark.parametrize("high,low", [(18, 6), (8, 6), (6, 0)])
    def test_round_trip_down_then_up_never_gains(self, value, high, low):
        restored = rescale(rescale(value, high, low), low, high)
        assert restored <= value
        assert value - restored < 10 ** (high - low)

    def test_round_trip_down_then_up_drops_digits(self):
        assert rescale(rescale(123_456_789, 8, 6), 6, 8) == 123_456_700

    def test_idempotent(self):
        once = rescale(123_456_789, 9, 6)
        assert rescale(once, 6, 6) == once

    def test_negative_raises(self):
        with pytest.raises(ValueError):
            rescale(-1, 6, 18)

    def test_overflow_raises(self):
        with pytest.raises(Uint128Overflow):
            rescale(UINT128_MAX, 0, 1)


class TestGreaterPrecision:
    def test_picks_max(self):
        assert greater_precision(6, 18) == 18
        assert greater_precision(6, 8, 6) == 8
