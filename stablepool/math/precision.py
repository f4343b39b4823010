"""Decimal-precision normalization.

Assets in a pair may use different numbers of decimals. All curve math is
done at a common precision; amounts are rescaled in and out with rescale().
"""

from stablepool.safe_int import S


def rescale(value: int, from_precision: int, to_precision: int) -> int:
    """Rescale an integer amount between two decimal precisions.

    Scaling up multiplies by 10^(to - from) and is exact. Scaling down
    floor-divides by 10^(from - to); the dropped digits stay with the pool.

    Args:
        value: Non-negative amount expressed with from_precision decimals
        from_precision: Current number of decimals
        to_precision: Target number of decimals

    Returns:
        The amount expressed with to_precision decimals

    Raises:
        ValueError: If value or a precision is negative
        Uint128Overflow: If scaling up exceeds uint128
    """
    if value < 0:
        raise ValueError(f"Cannot rescale negative amount: {value}")
    if from_precision < 0 or to_precision < 0:
        raise ValueError(f"Precision must be non-negative, got {from_precision} -> {to_precision}")

    if from_precision == to_precision:
        return value
    if from_precision < to_precision:
        return (S(value) * 10 ** (to_precision - from_precision)).to_uint128()
    return value // 10 ** (from_precision - to_precision)


def greater_precision(*precisions: int) -> int:
    """The common working precision for a set of assets."""
    return max(precisions)
