"""Tests for swap pricing and the slippage guard."""

from decimal import Decimal

import pytest

from stablepool.errors import AllowedSpreadAssertion, InvalidFeeError, MaxSpreadAssertion
from stablepool.math.fixed_point import Ufp
from stablepool.pool.swap import (
    assert_max_spread,
    calculate_maker_fee,
    compute_offer_amount,
    compute_swap,
    fee_rate,
)
from tests.helpers import UUSD

AMP_100 = 10_000


class TestComputeSwap:
    """Tests for exact-offer pricing."""

    def test_balanced_pool_without_fee(self):
        result = compute_swap(10**6, 6, 10**6, 6, 10_000, Decimal("0"), AMP_100)
        assert 9_980 < result.return_amount <= 10_000
        assert result.commission_amount == 0
        assert result.spread_amount == 10_000 - result.return_amount

    def test_commission_is_deducted_from_return(self):
        no_fee = compute_swap(10**9, 6, 10**9, 6, 10**6, Decimal("0"), AMP_100)
        with_fee = compute_swap(10**9, 6, 10**9, 6, 10**6, Decimal("0.003"), AMP_100)
        assert with_fee.commission_amount == no_fee.return_amount * 3 // 1000
        assert with_fee.return_amount == no_fee.return_amount - with_fee.commission_amount

    def test_mixed_precision_pool(self):
        """6-decimal offer into an 8-decimal ask: output comes back in 8 decimals."""
        result = compute_swap(10**12, 6, 10**14, 8, 10**6, Decimal("0"), AMP_100)
        assert 99_900_000 < result.return_amount <= 100_000_000

    def test_mixed_precision_matches_common_precision(self):
        mixed = compute_swap(10**12, 6, 10**14, 8, 10**6, Decimal("0"), AMP_100)
        common = compute_swap(10**14, 8, 10**14, 8, 10**8, Decimal("0"), AMP_100)
        assert mixed.return_amount == common.return_amount

    def test_invalid_fee_rate_raises(self):
        with pytest.raises(InvalidFeeError):
            compute_swap(10**6, 6, 10**6, 6, 10_000, Decimal("1"), AMP_100)


class TestComputeOfferAmount:
    """Tests for exact-ask pricing."""

    def test_offer_at_least_ask_in_balanced_pool(self):
        result = compute_offer_amount(10**9, 6, 10**9, 6, 10**6, Decimal("0"), AMP_100)
        assert result.offer_amount >= 10**6
        assert result.commission_amount == 0

    def test_commission_grosses_up_the_offer(self):
        no_fee = compute_offer_amount(10**9, 6, 10**9, 6, 10**6, Decimal("0"), AMP_100)
        with_fee = compute_offer_amount(10**9, 6, 10**9, 6, 10**6, Decimal("0.003"), AMP_100)
        assert with_fee.offer_amount > no_fee.offer_amount
        assert with_fee.commission_amount > 0

    def test_forward_swap_of_offer_covers_ask(self):
        reverse = compute_offer_amount(10**9, 6, 10**9, 6, 10**6, Decimal("0.003"), AMP_100)
        forward = compute_swap(10**9, 6, 10**9, 6, reverse.offer_amount, Decimal("0.003"), AMP_100)
        assert forward.return_amount >= 10**6 - 2


class TestForwardReverseAgreement:
    """Pricing the return of a swap in reverse recovers the offer."""

    @pytest.mark.parametrize("amp", [1, 100, 1_000])
    @pytest.mark.parametrize("ratio", [10, 1_000, 10**6, 10**8])
    @pytest.mark.parametrize("offer_precision,ask_precision", [(6, 6), (6, 18), (8, 8)])
    @pytest.mark.parametrize("offer_fraction", [1_000, 10, 1])
    @pytest.mark.parametrize("commission", ["0", "0.003"])
    def test_offering_the_scarce_asset(
        self, amp, ratio, offer_precision, ask_precision, offer_fraction, commission
    ):
        """Every unit of the scarce asset buys at least one unit back, so the
        reverse price lands within a few units of the original offer."""
        ask_pool = 10**6 * 10**ask_precision
        offer_pool = 10**6 * 10**offer_precision // ratio
        offer = offer_pool // offer_fraction

        forward = compute_swap(
            offer_pool, offer_precision, ask_pool, ask_precision, offer, Decimal(commission), amp * 100
        )
        reverse = compute_offer_amount(
            offer_pool,
            offer_precision,
            ask_pool,
            ask_precision,
            forward.return_amount,
            Decimal(commission),
            amp * 100,
        )
        assert abs(reverse.offer_amount - offer) <= 5

    @pytest.mark.parametrize("amp", [1, 100, 1_000])
    @pytest.mark.parametrize("ratio", [1_000, 10**6, 10**8])
    @pytest.mark.parametrize("offer_precision,ask_precision", [(6, 6), (18, 6)])
    def test_offering_the_abundant_asset(self, amp, ratio, offer_precision, ask_precision):
        """Many offer units map to one ask unit; the reverse never asks for more."""
        offer_pool = 10**6 * 10**offer_precision
        ask_pool = 10**6 * 10**ask_precision // ratio
        offer = offer_pool // 10

        forward = compute_swap(
            offer_pool, offer_precision, ask_pool, ask_precision, offer, Decimal("0.003"), amp * 100
        )
        reverse = compute_offer_amount(
            offer_pool,
            offer_precision,
            ask_pool,
            ask_precision,
            forward.return_amount,
            Decimal("0.003"),
            amp * 100,
        )
        assert reverse.offer_amount <= offer + 5


class TestFees:
    def test_fee_rate_bounds(self):
        assert fee_rate(Decimal("0")) == Ufp.zero()
        with pytest.raises(InvalidFeeError):
            fee_rate(Decimal("-0.1"))
        with pytest.raises(InvalidFeeError):
            fee_rate(Decimal("1"))

    def test_maker_fee(self):
        fee = calculate_maker_fee(UUSD, 1_000, Decimal("0.5"))
        assert fee is not None
        assert fee.amount == 500
        assert fee.info == UUSD

    def test_maker_fee_rounding_to_zero_is_none(self):
        assert calculate_maker_fee(UUSD, 1, Decimal("0.5")) is None
        assert calculate_maker_fee(UUSD, 1_000, Decimal("0")) is None


class TestAssertMaxSpread:
    """Tests for the slippage guard."""

    def test_default_tolerance_accepts_small_spread(self):
        assert_max_spread(None, None, 1_000, 996, 4)

    def test_default_tolerance_rejects_large_spread(self):
        with pytest.raises(MaxSpreadAssertion):
            assert_max_spread(None, None, 1_000, 994, 6)

    def test_explicit_tolerance(self):
        assert_max_spread(None, Decimal("0.01"), 1_000, 994, 6)

    def test_tolerance_above_allowed_raises(self):
        with pytest.raises(AllowedSpreadAssertion):
            assert_max_spread(None, Decimal("0.6"), 1_000, 1_000, 0)

    def test_belief_price_shortfall_raises(self):
        with pytest.raises(MaxSpreadAssertion):
            assert_max_spread(Decimal("1"), None, 1_000, 990, 10)

    def test_belief_price_within_tolerance(self):
        assert_max_spread(Decimal("1"), None, 1_000, 996, 4)

    def test_return_above_belief_passes(self):
        """Getting more than the belief price implies is never a spread violation."""
        assert_max_spread(Decimal("2"), Decimal("0"), 1_000, 900, 100)
