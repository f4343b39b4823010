"""Persistent pair state.

PoolState is frozen. Operations build a new state with dataclasses.replace
and hand it back to the caller, who stores it only once the operation has
succeeded.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from stablepool.constants import DEFAULT_REWARD_DENOM
from stablepool.rewards.ledger import RewardLedgerState

from .amp import AmpRamp
from .oracle import PriceCumulative
from .types import AssetInfo


@dataclass(frozen=True)
class PairInfo:
    """Addresses identifying the pair.

    Attributes:
        contract_addr: Address of the pair itself
        liquidity_token: Address of the share token
        asset_infos: The two pooled assets, in pool order
    """

    contract_addr: str
    liquidity_token: str
    asset_infos: tuple[AssetInfo, AssetInfo]


@dataclass(frozen=True)
class PoolState:
    """Everything the pair remembers between operations.

    Attributes:
        pair_info: Pair and share token addresses, pooled assets
        factory_addr: Factory whose owner may change the config
        amp: Amplification ramp
        oracle: Cumulative price accumulators
        rewarder: External reward source, if any
        generator: Staking contract holding delegated shares, if any
        reward_holder: Account that receives external rewards
        reward_asset: Asset rewards are paid in
        rewards: Reward index ledger
    """

    pair_info: PairInfo
    factory_addr: str
    amp: AmpRamp
    oracle: PriceCumulative = field(default_factory=PriceCumulative)
    rewarder: str | None = None
    generator: str | None = None
    reward_holder: str | None = None
    reward_asset: AssetInfo = field(default_factory=lambda: AssetInfo.native(DEFAULT_REWARD_DENOM))
    rewards: RewardLedgerState = field(default_factory=RewardLedgerState)

    @property
    def asset_infos(self) -> tuple[AssetInfo, AssetInfo]:
        return self.pair_info.asset_infos
