"""Mathematical utilities for the stable pair.

This package provides the numeric primitives the pair is built on:
- Ufp: 18-decimal unsigned fixed-point arithmetic
- rescale: decimal-precision normalization
- compute_d / compute_new_balance: the StableSwap invariant solver
"""

from stablepool.math.fixed_point import Ufp
from stablepool.math.precision import greater_precision, rescale
from stablepool.math.stable_math import (
    calc_ask_amount,
    calc_offer_amount,
    compute_d,
    compute_new_balance,
)

__all__ = [
    "Ufp",
    "rescale",
    "greater_precision",
    "compute_d",
    "compute_new_balance",
    "calc_ask_amount",
    "calc_offer_amount",
]
