"""Swap pricing for the stable pair.

compute_swap() prices an exact-offer swap and compute_offer_amount() its
inverse. Both normalize to the greater of the two asset precisions, price
on the curve, and rescale the results back to native precision. The
commission stays in the pool.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

import structlog

from stablepool.constants import DEFAULT_SLIPPAGE, MAX_ALLOWED_SLIPPAGE
from stablepool.errors import AllowedSpreadAssertion, InvalidFeeError, MaxSpreadAssertion
from stablepool.math.fixed_point import Ufp
from stablepool.math.precision import greater_precision, rescale
from stablepool.math.stable_math import calc_ask_amount, calc_offer_amount
from stablepool.safe_int import S

from .types import Asset, AssetInfo

logger = structlog.get_logger()


@dataclass(frozen=True)
class SwapAmounts:
    """Result of an exact-offer swap, in ask-asset precision."""

    return_amount: int
    spread_amount: int
    commission_amount: int


@dataclass(frozen=True)
class ReverseSwapAmounts:
    """Result of an exact-ask swap.

    offer_amount is in offer-asset precision; spread and commission are in
    ask-asset precision.
    """

    offer_amount: int
    spread_amount: int
    commission_amount: int


def fee_rate(rate: Decimal) -> Ufp:
    """Validate a fee rate and convert it to fixed point.

    Raises:
        InvalidFeeError: If rate is not in range [0, 1)
    """
    if rate < 0 or rate >= 1:
        raise InvalidFeeError(f"Fee rate must be in range [0, 1), got {rate}")
    return Ufp.from_decimal(rate)


def compute_swap(
    offer_pool: int,
    offer_precision: int,
    ask_pool: int,
    ask_precision: int,
    offer_amount: int,
    commission_rate: Decimal,
    amp: int,
) -> SwapAmounts:
    """Price an exact-offer swap.

    Algorithm:
        1. Normalize pools and offer to the greater precision
        2. Raw output from the curve, holding D fixed
        3. Spread: shortfall below a 1:1 exchange, floored at zero
        4. Commission: raw output * commission_rate, deducted from output
        5. Rescale everything to ask precision

    Args:
        offer_pool: Offer-side balance (native precision)
        offer_precision: Offer asset decimals
        ask_pool: Ask-side balance (native precision)
        ask_precision: Ask asset decimals
        offer_amount: Amount offered (native precision)
        commission_rate: Total fee rate in [0, 1)
        amp: Current amp (scaled by AMP_PRECISION)

    Returns:
        SwapAmounts in ask precision
    """
    commission = fee_rate(commission_rate)

    precision = greater_precision(offer_precision, ask_precision)
    offer_pool = rescale(offer_pool, offer_precision, precision)
    ask_pool = rescale(ask_pool, ask_precision, precision)
    offer_amount = rescale(offer_amount, offer_precision, precision)

    return_amount = calc_ask_amount(offer_pool, ask_pool, offer_amount, amp)

    # The assets are expected to trade 1:1, so any shortfall is spread
    spread_amount = S(offer_amount).saturating_sub(return_amount).value

    commission_amount = commission.mul_int(return_amount)

    # The commission is absorbed by the pool
    return_amount = (S(return_amount) - commission_amount).value

    logger.debug(
        "swap_computed",
        offer_amount=offer_amount,
        return_amount=return_amount,
        spread_amount=spread_amount,
        commission_amount=commission_amount,
        precision=precision,
        amp=amp,
    )

    return SwapAmounts(
        return_amount=rescale(return_amount, precision, ask_precision),
        spread_amount=rescale(spread_amount, precision, ask_precision),
        commission_amount=rescale(commission_amount, precision, ask_precision),
    )


def compute_offer_amount(
    offer_pool: int,
    offer_precision: int,
    ask_pool: int,
    ask_precision: int,
    ask_amount: int,
    commission_rate: Decimal,
    amp: int,
) -> ReverseSwapAmounts:
    """Price an exact-ask swap (the inverse of compute_swap).

    The desired ask amount is grossed up by 1 / (1 - commission_rate) to the
    pre-commission output, which is then inverted on the curve.

    Args:
        offer_pool: Offer-side balance (native precision)
        offer_precision: Offer asset decimals
        ask_pool: Ask-side balance (native precision)
        ask_precision: Ask asset decimals
        ask_amount: Desired output after commission (native precision)
        commission_rate: Total fee rate in [0, 1)
        amp: Current amp (scaled by AMP_PRECISION)

    Returns:
        ReverseSwapAmounts (offer in offer precision, the rest in ask precision)

    Raises:
        ZeroBalanceError: If the grossed-up ask amount would drain the ask pool
    """
    commission = fee_rate(commission_rate)

    precision = greater_precision(offer_precision, ask_precision)
    offer_pool = rescale(offer_pool, offer_precision, precision)
    ask_pool = rescale(ask_pool, ask_precision, precision)
    ask_amount = rescale(ask_amount, ask_precision, precision)

    inv_one_minus_commission = commission.complement().inv()
    before_commission_deduction = inv_one_minus_commission.mul_int(ask_amount)

    offer_amount = calc_offer_amount(offer_pool, ask_pool, before_commission_deduction, amp)

    spread_amount = S(offer_amount).saturating_sub(before_commission_deduction).value
    commission_amount = commission.mul_int(before_commission_deduction)

    logger.debug(
        "reverse_swap_computed",
        ask_amount=ask_amount,
        offer_amount=offer_amount,
        spread_amount=spread_amount,
        commission_amount=commission_amount,
        precision=precision,
        amp=amp,
    )

    return ReverseSwapAmounts(
        offer_amount=rescale(offer_amount, precision, offer_precision),
        spread_amount=rescale(spread_amount, precision, ask_precision),
        commission_amount=rescale(commission_amount, precision, ask_precision),
    )


def calculate_maker_fee(
    ask_info: AssetInfo,
    commission_amount: int,
    maker_fee_rate: Decimal,
) -> Asset | None:
    """Portion of the commission paid out to the maker fee address.

    Returns:
        The maker fee as an Asset, or None if it rounds to zero
    """
    maker_fee = fee_rate(maker_fee_rate).mul_int(commission_amount)
    if maker_fee == 0:
        return None
    return Asset(info=ask_info, amount=maker_fee)


def assert_max_spread(
    belief_price: Decimal | None,
    max_spread: Decimal | None,
    offer_amount: int,
    return_amount: int,
    spread_amount: int,
) -> None:
    """Reject a swap whose spread exceeds max_spread.

    With a belief price the expected return is offer_amount / belief_price
    and the relative shortfall of return_amount against it is checked.
    Without one, spread_amount / (return_amount + spread_amount) is checked.

    Args:
        belief_price: Expected offer-per-ask price, if the caller has one
        max_spread: Caller's tolerance (defaults to DEFAULT_SLIPPAGE)
        offer_amount: Amount offered
        return_amount: Amount returned, including commission
        spread_amount: Spread reported by compute_swap

    Raises:
        AllowedSpreadAssertion: If max_spread exceeds MAX_ALLOWED_SLIPPAGE
        MaxSpreadAssertion: If the spread is larger than max_spread
    """
    max_allowed_spread = Ufp.from_decimal(MAX_ALLOWED_SLIPPAGE)
    max_spread_fp = Ufp.from_decimal(DEFAULT_SLIPPAGE if max_spread is None else max_spread)

    if max_spread_fp > max_allowed_spread:
        raise AllowedSpreadAssertion(
            f"Max spread {max_spread_fp} exceeds the allowed maximum {max_allowed_spread}"
        )

    if belief_price is not None:
        expected_return = Ufp.from_decimal(belief_price).inv().mul_int(offer_amount)
        shortfall = S(expected_return).saturating_sub(return_amount).value

        if (
            return_amount < expected_return
            and Ufp.from_ratio(shortfall, expected_return) > max_spread_fp
        ):
            raise MaxSpreadAssertion(
                f"Return {return_amount} is more than {max_spread_fp} below expected {expected_return}"
            )
    elif Ufp.from_ratio(spread_amount, return_amount + spread_amount) > max_spread_fp:
        raise MaxSpreadAssertion(
            f"Spread {spread_amount} on return {return_amount} exceeds {max_spread_fp}"
        )
