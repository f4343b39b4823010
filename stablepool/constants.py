"""Pair parameters.

Centralizes the curve, ramp, oracle and slippage constants shared by the
pool math and the pair operations.
"""

from decimal import Decimal

# Number of pooled assets; the curve is specialised for exactly two.
N_COINS = 2

# Amplification values are stored multiplied by AMP_PRECISION.
AMP_PRECISION = 100

# Upper bound for the (unscaled) amplification coefficient
MAX_AMP = 1_000_000

# A new ramp target may be at most MAX_AMP_CHANGE times larger (or smaller)
# than the amp in effect when the ramp is requested.
MAX_AMP_CHANGE = 10

# Minimum age of the current ramp and minimum span of a new one (1 day)
MIN_AMP_CHANGING_TIME = 86_400

# Decimal precision of the cumulative price accumulators
TWAP_PRECISION = 6

# Slippage defaults for swaps
DEFAULT_SLIPPAGE = Decimal("0.005")
MAX_ALLOWED_SLIPPAGE = Decimal("0.5")

# Decimals of the share (LP) token minted by the pair
LP_TOKEN_PRECISION = 6

# Denomination the external rewards are paid in
DEFAULT_REWARD_DENOM = "uusd"
