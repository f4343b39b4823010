"""Two-asset StableSwap math.

Core math functions for the stable pair, specialised for two coins.
Uses Newton-Raphson iteration for both the invariant D and the unknown
balance y.

The invariant, with leverage = amp * N_COINS and amp scaled by
AMP_PRECISION, is:

    leverage * (x + y) / AMP_PRECISION + D
        = leverage * D / AMP_PRECISION + D^3 / (4 * x * y)

IMPORTANT: All calculations use SafeInt. D^3 is formed at full width and
only its quotient is checked against uint256; other intermediates are
checked against uint256 and results against uint128.
"""

import structlog

from stablepool.constants import AMP_PRECISION, N_COINS
from stablepool.errors import BalanceDidNotConverge, InvariantDidNotConverge, ZeroBalanceError
from stablepool.safe_int import S, SafeInt

logger = structlog.get_logger()

# Maximum iterations for Newton-Raphson convergence
_MAX_ITERATIONS = 255

N_COINS_SQUARED = N_COINS * N_COINS


def compute_d(leverage: int, amount_a: int, amount_b: int) -> int:
    """Calculate StableSwap invariant D using Newton-Raphson iteration.

    Algorithm:
        1. Initial guess: D = x + y
        2. d_p = D^3 / (4xy), floored once
        3. D = (leverage * S / AP + 2 * d_p) * D / ((leverage - AP) * D / AP + 3 * d_p)
        4. Stop once |D_new - D_old| <= 1, or once D stops falling

    Starting from x + y, which is never below the root, exact Newton steps
    only decrease D. A step that does not decrease it means the iteration
    is down to rounding noise.

    Args:
        leverage: amp * N_COINS (amp scaled by AMP_PRECISION)
        amount_a: Balance of the first asset (common precision)
        amount_b: Balance of the second asset (common precision)

    Returns:
        The invariant D (0 for an empty pool)

    Raises:
        ZeroBalanceError: If exactly one balance is zero
        InvariantDidNotConverge: If iteration doesn't converge
    """
    sum_x = S(amount_a) + S(amount_b)
    if sum_x == 0:
        return 0
    if amount_a == 0 or amount_b == 0:
        raise ZeroBalanceError("Both balances must be positive to compute the invariant")

    # 4xy
    balance_product = S(amount_a) * N_COINS * amount_b * N_COINS

    d = sum_x
    for _ in range(_MAX_ITERATIONS):
        # Flooring D^2/2x and then */2y separately can trap the step in a cycle
        d_product = d.multiply_ratio(d * d, balance_product).checked_u256()

        d_prev = d
        d = _d_step(d, leverage, sum_x, d_product)

        if d.abs_diff(d_prev) <= 1:
            return d.to_uint128()
        if d > d_prev:
            return d_prev.to_uint128()

    logger.warning(
        "invariant_did_not_converge",
        leverage=leverage,
        amount_a=amount_a,
        amount_b=amount_b,
    )
    raise InvariantDidNotConverge(
        f"Invariant did not converge after {_MAX_ITERATIONS} iterations"
    )


def _d_step(d: SafeInt, leverage: int, sum_x: SafeInt, d_product: SafeInt) -> SafeInt:
    """One Newton-Raphson step for D."""
    leverage_mul = (S(leverage) * sum_x) // AMP_PRECISION
    numerator = ((leverage_mul + d_product * N_COINS) * d).checked_u256()

    leverage_sub = (d * (S(leverage) - AMP_PRECISION)) // AMP_PRECISION
    denominator = leverage_sub + d_product * (N_COINS + 1)

    return numerator // denominator


def compute_new_balance(leverage: int, new_source_amount: int, d: int) -> int:
    """Solve for the other balance y given one balance x and the invariant D.

    With sum' = prod' = x the invariant reduces to y^2 + (b - D) * y = c:

        c = D^3 * AP / (4 * x * leverage)
        b = x + D * AP / leverage

    Newton-Raphson from y = D: y = (y^2 + c) / (2y + b - D).

    Args:
        leverage: amp * N_COINS (amp scaled by AMP_PRECISION)
        new_source_amount: The known balance x (common precision)
        d: The invariant to preserve

    Returns:
        The balance y

    Raises:
        ZeroBalanceError: If new_source_amount is zero
        BalanceDidNotConverge: If iteration doesn't converge
    """
    if new_source_amount == 0:
        raise ZeroBalanceError("Source balance must be positive to solve for the other balance")

    x = S(new_source_amount)
    d_val = S(d)
    lev = S(leverage)

    c = d_val.multiply_ratio(d_val * d_val * AMP_PRECISION, x * N_COINS_SQUARED * lev).checked_u256()
    b = x + (d_val * AMP_PRECISION) // lev

    y = d_val
    for iteration in range(_MAX_ITERATIONS):
        y_prev = y

        denominator = y * 2 + b
        if denominator <= d_val:
            raise BalanceDidNotConverge("Denominator became non-positive")

        y = (y * y + c).checked_u256() // (denominator - d_val)

        if y.abs_diff(y_prev) <= 1:
            return y.to_uint128()
        # After the first step every iterate sits above the root and falls
        if iteration > 0 and y > y_prev:
            return y_prev.to_uint128()

    raise BalanceDidNotConverge(
        f"Balance did not converge after {_MAX_ITERATIONS} iterations"
    )


def calc_ask_amount(offer_pool: int, ask_pool: int, offer_amount: int, amp: int) -> int:
    """Calculate the raw (pre-fee) ask amount for a given offer amount.

    Algorithm:
        1. D from the current balances
        2. Offer balance increased by offer_amount
        3. Solve for the new ask balance holding D fixed
        4. Return: ask_pool - new_ask_pool

    Args:
        offer_pool: Offer-side balance (common precision)
        ask_pool: Ask-side balance (common precision)
        offer_amount: Amount offered (common precision)
        amp: Current amp (scaled by AMP_PRECISION)

    Returns:
        Ask amount before commission
    """
    leverage = amp * N_COINS
    d = compute_d(leverage, offer_pool, ask_pool)

    new_offer_pool = (S(offer_pool) + offer_amount).to_uint128()
    new_ask_pool = compute_new_balance(leverage, new_offer_pool, d)

    # Rounding can leave the solved balance at (or a unit above) the old one
    if new_ask_pool >= ask_pool:
        return 0
    return ask_pool - new_ask_pool


def calc_offer_amount(offer_pool: int, ask_pool: int, ask_amount: int, amp: int) -> int:
    """Calculate the offer amount needed to take ask_amount out of the pool.

    Algorithm:
        1. D from the current balances
        2. Ask balance decreased by ask_amount
        3. Solve for the new offer balance holding D fixed
        4. Return: new_offer_pool - offer_pool

    Args:
        offer_pool: Offer-side balance (common precision)
        ask_pool: Ask-side balance (common precision)
        ask_amount: Amount to receive before commission (common precision)
        amp: Current amp (scaled by AMP_PRECISION)

    Returns:
        Required offer amount

    Raises:
        ZeroBalanceError: If ask_amount >= ask_pool
    """
    if ask_amount >= ask_pool:
        raise ZeroBalanceError("ask_amount must be less than ask_pool")

    leverage = amp * N_COINS
    d = compute_d(leverage, offer_pool, ask_pool)

    new_offer_pool = compute_new_balance(leverage, ask_pool - ask_amount, d)

    return S(new_offer_pool).saturating_sub(offer_pool).to_uint128()
