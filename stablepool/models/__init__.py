"""Pydantic models for the pair API."""

from stablepool.models.messages import (
    AccrueRewardsRequest,
    AccrueRewardsResponse,
    AmpPhase,
    AssetInfoModel,
    AssetModel,
    AssetsResponse,
    ClaimRewardRequest,
    ConfigResponse,
    CumulativePricesResponse,
    PendingRewardResponse,
    PoolResponse,
    ProvideLiquidityRequest,
    ProvideLiquidityResponse,
    ReverseSimulationRequest,
    ReverseSimulationResponse,
    RewardAmountResponse,
    SettleRewardsRequest,
    SimulationRequest,
    SimulationResponse,
    StartAmpRequest,
    StopAmpRequest,
    SwapRequest,
    SwapResponse,
    UpdateRewarderRequest,
    WithdrawLiquidityRequest,
)
from stablepool.models.types import Uint128

__all__ = [
    "AccrueRewardsRequest",
    "AccrueRewardsResponse",
    "AmpPhase",
    "AssetInfoModel",
    "AssetModel",
    "AssetsResponse",
    "ClaimRewardRequest",
    "ConfigResponse",
    "CumulativePricesResponse",
    "PendingRewardResponse",
    "PoolResponse",
    "ProvideLiquidityRequest",
    "ProvideLiquidityResponse",
    "ReverseSimulationRequest",
    "ReverseSimulationResponse",
    "RewardAmountResponse",
    "SettleRewardsRequest",
    "SimulationRequest",
    "SimulationResponse",
    "StartAmpRequest",
    "StopAmpRequest",
    "SwapRequest",
    "SwapResponse",
    "Uint128",
    "UpdateRewarderRequest",
    "WithdrawLiquidityRequest",
]
