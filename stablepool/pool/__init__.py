"""Stable pair building blocks: pool data, amp ramp, pricing, shares, oracle."""

from stablepool.pool.types import Asset, AssetInfo, FeeInfo, PoolSnapshot
from stablepool.pool.effects import (
    BurnShares,
    ClaimExternalRewards,
    Effect,
    HandleReward,
    MintShares,
    RewardPayout,
    StakeShares,
    Transfer,
    TransferFrom,
)
from stablepool.pool.amp import AmpRamp, RampPhase
from stablepool.pool.swap import (
    ReverseSwapAmounts,
    SwapAmounts,
    assert_max_spread,
    calculate_maker_fee,
    compute_offer_amount,
    compute_swap,
)
from stablepool.pool.liquidity import compute_initial_share, compute_mint_amount, get_share_in_assets
from stablepool.pool.oracle import PriceCumulative, accumulate_prices
from stablepool.pool.state import PairInfo, PoolState

__all__ = [
    "AmpRamp",
    "Asset",
    "AssetInfo",
    "BurnShares",
    "ClaimExternalRewards",
    "Effect",
    "FeeInfo",
    "HandleReward",
    "MintShares",
    "PairInfo",
    "PoolSnapshot",
    "PoolState",
    "PriceCumulative",
    "RampPhase",
    "ReverseSwapAmounts",
    "RewardPayout",
    "StakeShares",
    "SwapAmounts",
    "Transfer",
    "TransferFrom",
    "accumulate_prices",
    "assert_max_spread",
    "calculate_maker_fee",
    "compute_initial_share",
    "compute_mint_amount",
    "compute_offer_amount",
    "compute_swap",
    "get_share_in_assets",
]
