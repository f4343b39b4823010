"""Pair error classes.

Every error aborts the whole operation; none are retried or recovered
locally. Arithmetic failures (overflow, underflow, division by zero) are
raised as SafeIntError subclasses from stablepool.safe_int.
"""


class PairError(Exception):
    """Base error for pair operations."""

    pass


# --- Validation ---


class DoublingAssets(PairError):
    """Both pool assets are the same."""

    pass


class AssetMismatch(PairError):
    """Asset does not belong to this pair."""

    pass


class InvalidZeroAmount(PairError):
    """Amount must be positive."""

    pass


class InvalidFeeError(PairError):
    """Fee rate must be in range [0, 1)."""

    pass


# --- Numeric ---


class ZeroBalanceError(PairError):
    """Pool balance must be positive for this calculation."""

    pass


class InvariantDidNotConverge(PairError):
    """Newton-Raphson iteration for the invariant D did not converge."""

    pass


class BalanceDidNotConverge(PairError):
    """Newton-Raphson iteration for the balance y did not converge."""

    pass


# --- Economic guards ---


class LiquidityAmountTooSmall(PairError):
    """Deposit is too small to mint any share."""

    pass


class MaxSpreadAssertion(PairError):
    """Swap spread exceeds the requested maximum."""

    pass


class AllowedSpreadAssertion(PairError):
    """Requested max spread exceeds the maximum allowed spread."""

    pass


# --- Amplification ramp ---


class IncorrectAmp(PairError):
    """Amp must be in range (0, MAX_AMP]."""

    pass


class MaxAmpChangeAssertion(PairError):
    """Amp target differs from the current amp by more than MAX_AMP_CHANGE."""

    pass


class MinAmpChangingTimeAssertion(PairError):
    """Ramp requested too soon or over too short a window."""

    pass


# --- Authorization ---


class Unauthorized(PairError):
    """Caller is not allowed to perform this action."""

    pass


class AutoStakeError(PairError):
    """Auto-stake requested but no generator is configured."""

    pass


class NoStakedShares(PairError):
    """Reward claim by an account with no staked shares."""

    pass


# --- Rewards ---


class ZeroTotalShareError(PairError):
    """Reward accrual needs a positive total share."""

    pass


class RewardsNotConfigured(PairError):
    """Reward operation on a pair without a rewarder, generator or reward holder."""

    pass
