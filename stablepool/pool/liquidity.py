"""Share accounting for deposits and withdrawals.

Deposits are valued by the growth of the invariant D, so a deposit that
unbalances the pool mints fewer shares than its face value. Withdrawals are
always a proportional slice of both reserves.
"""

from __future__ import annotations

import math

import structlog

from stablepool.constants import N_COINS
from stablepool.errors import InvalidZeroAmount, LiquidityAmountTooSmall
from stablepool.math.precision import greater_precision, rescale
from stablepool.math.stable_math import compute_d
from stablepool.safe_int import S

logger = structlog.get_logger()


def compute_initial_share(deposit_0: int, deposit_1: int, precision: int, lp_precision: int) -> int:
    """Shares minted by the first deposit: the geometric mean of both legs.

    Args:
        deposit_0: First leg at the common precision
        deposit_1: Second leg at the common precision
        precision: The common precision of the legs
        lp_precision: Decimals of the share token

    Returns:
        sqrt(deposit_0 * deposit_1) in share token precision
    """
    product = (S(deposit_0) * deposit_1).to_uint256()
    return rescale(S(math.isqrt(product)).to_uint128(), precision, lp_precision)


def compute_mint_amount(
    pools: tuple[int, int],
    precisions: tuple[int, int],
    deposits: tuple[int, int],
    total_share: int,
    lp_precision: int,
    amp: int,
) -> int:
    """Shares to mint for a two-sided deposit.

    Args:
        pools: Current balances, native precision
        precisions: Decimals of each asset
        deposits: Deposit amounts, native precision
        total_share: Outstanding share supply
        lp_precision: Decimals of the share token
        amp: Current amp (scaled by AMP_PRECISION)

    Returns:
        Number of shares to mint

    Raises:
        InvalidZeroAmount: If either deposit is zero
        LiquidityAmountTooSmall: If D does not grow or the share rounds to zero
    """
    if deposits[0] == 0 or deposits[1] == 0:
        raise InvalidZeroAmount("Both deposit amounts must be positive")

    precision = greater_precision(*precisions)
    deposit_0 = rescale(deposits[0], precisions[0], precision)
    deposit_1 = rescale(deposits[1], precisions[1], precision)

    if total_share == 0:
        share = compute_initial_share(deposit_0, deposit_1, precision, lp_precision)
    else:
        leverage = amp * N_COINS

        pool_0 = rescale(pools[0], precisions[0], precision)
        pool_1 = rescale(pools[1], precisions[1], precision)
        d_before = compute_d(leverage, pool_0, pool_1)

        pool_0 = (S(pool_0) + deposit_0).to_uint128()
        pool_1 = (S(pool_1) + deposit_1).to_uint128()
        d_after = compute_d(leverage, pool_0, pool_1)

        # Rounding on tiny deposits can leave D unchanged
        if d_after <= d_before:
            raise LiquidityAmountTooSmall(
                f"Invariant did not grow: {d_before} -> {d_after}"
            )

        share = S(total_share).multiply_ratio(d_after - d_before, d_before).to_uint128()

    if share == 0:
        raise LiquidityAmountTooSmall("Deposit is too small to mint any share")

    logger.debug(
        "mint_amount_computed",
        deposits=deposits,
        total_share=total_share,
        share=share,
    )
    return share


def get_share_in_assets(pools: tuple[int, int], amount: int, total_share: int) -> tuple[int, int]:
    """Assets returned for burning amount shares.

    Each refund is balance * amount / total_share; an empty share supply
    refunds nothing.
    """
    if total_share == 0:
        return 0, 0
    return (
        S(pools[0]).multiply_ratio(amount, total_share).to_uint128(),
        S(pools[1]).multiply_ratio(amount, total_share).to_uint128(),
    )
