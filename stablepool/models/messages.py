"""Pydantic request and response models for the pair API.

Amounts travel as decimal strings and are converted to ints at the
boundary with the pair core.
"""

from decimal import Decimal
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from stablepool.models.types import Addr, Rate, Uint128
from stablepool.pool.types import Asset, AssetInfo


class AssetInfoModel(BaseModel):
    """A native denomination or a token contract."""

    kind: Literal["native", "token"]
    id: str = Field(min_length=1, description="Denomination or token contract address")

    def to_domain(self) -> AssetInfo:
        if self.kind == "native":
            return AssetInfo.native(self.id)
        return AssetInfo.token(self.id)

    @classmethod
    def from_domain(cls, info: AssetInfo) -> "AssetInfoModel":
        return cls(kind=info.kind, id=info.id)


class AssetModel(BaseModel):
    """An amount of an asset, in the asset's own precision."""

    info: AssetInfoModel
    amount: Uint128

    def to_domain(self) -> Asset:
        return Asset(info=self.info.to_domain(), amount=int(self.amount))

    @classmethod
    def from_domain(cls, asset: Asset) -> "AssetModel":
        return cls(info=AssetInfoModel.from_domain(asset.info), amount=asset.amount)


def _optional_decimal(value: str | None) -> Decimal | None:
    return None if value is None else Decimal(value)


# --- Requests ---


class SimulationRequest(BaseModel):
    offer_asset: AssetModel


class ReverseSimulationRequest(BaseModel):
    ask_asset: AssetModel


class SwapRequest(BaseModel):
    """Swap offer_asset for the other pooled asset.

    belief_price is the expected offer-per-ask price; max_spread the
    tolerated relative shortfall (default 0.005).
    """

    offer_asset: AssetModel
    sender: Addr
    belief_price: Rate | None = None
    max_spread: Rate | None = None
    to: Addr | None = None

    @property
    def belief_price_decimal(self) -> Decimal | None:
        return _optional_decimal(self.belief_price)

    @property
    def max_spread_decimal(self) -> Decimal | None:
        return _optional_decimal(self.max_spread)


class ProvideLiquidityRequest(BaseModel):
    assets: tuple[AssetModel, AssetModel]
    sender: Addr
    receiver: Addr | None = None
    auto_stake: bool = False


class WithdrawLiquidityRequest(BaseModel):
    sender: Addr
    amount: Uint128


class StartAmpRequest(BaseModel):
    sender: Addr
    next_amp: int = Field(ge=0, description="Target amp, unscaled")
    next_amp_time: int = Field(ge=0, description="Unix time the ramp ends")


class StopAmpRequest(BaseModel):
    sender: Addr


class UpdateRewarderRequest(BaseModel):
    sender: Addr
    address: Addr


class AccrueRewardsRequest(BaseModel):
    """Accrue holder balance growth; the holder balance and staked total are read by the pair."""

    sender: Addr
    previous_balance: Uint128 = Field(description="Reward holder balance at the last accrual")


class SettleRewardsRequest(BaseModel):
    """Settle user's rewards; sender must be user or the generator."""

    sender: Addr
    user: Addr
    receiver: Addr | None = None


class ClaimRewardRequest(BaseModel):
    """Claim rewards; with user set, the sender claims for user as the generator."""

    sender: Addr
    user: Addr | None = None
    receiver: Addr | None = None


# --- Responses ---


class SimulationResponse(BaseModel):
    return_amount: Uint128
    spread_amount: Uint128
    commission_amount: Uint128


class ReverseSimulationResponse(BaseModel):
    offer_amount: Uint128
    spread_amount: Uint128
    commission_amount: Uint128


class SwapResponse(BaseModel):
    ask_asset: AssetInfoModel
    return_amount: Uint128
    spread_amount: Uint128
    commission_amount: Uint128
    maker_fee_amount: Uint128


class ProvideLiquidityResponse(BaseModel):
    share: Uint128


class AssetsResponse(BaseModel):
    """Refunds for a withdrawal, or what a share amount is worth."""

    assets: list[AssetModel]


class PoolResponse(BaseModel):
    assets: list[AssetModel]
    total_share: Uint128


class AmpPhase(str, Enum):
    RAMPING = "ramping"
    SETTLED = "settled"


class ConfigResponse(BaseModel):
    block_time_last: int
    amp: str = Field(description="Effective amp as a decimal string")
    amp_phase: AmpPhase
    rewarder: str | None = None
    generator: str | None = None


class CumulativePricesResponse(BaseModel):
    assets: list[AssetModel]
    total_share: Uint128
    price0_cumulative_last: Uint128
    price1_cumulative_last: Uint128


class AccrueRewardsResponse(BaseModel):
    global_index: str = Field(description="Reward per share as a decimal string")


class RewardAmountResponse(BaseModel):
    amount: Uint128


class PendingRewardResponse(BaseModel):
    asset: AssetModel
