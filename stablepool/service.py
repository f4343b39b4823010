"""Pair service backed by in-memory collaborators.

The pair core never touches balances. PairService reads a PoolSnapshot from
an InMemoryLedger, runs the core operation, and only if it succeeds applies
the new state and executes the returned effects against a working copy of
the ledger, committing both together.
"""

from __future__ import annotations

import copy
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from functools import lru_cache

import structlog

from stablepool import pair
from stablepool.config import PairSettings
from stablepool.errors import RewardsNotConfigured
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
from stablepool.pool.state import PoolState
from stablepool.pool.swap import ReverseSwapAmounts, SwapAmounts
from stablepool.pool.types import Asset, AssetInfo, PoolSnapshot
from stablepool.rewards.claims import (
    RewardOutcome,
    accrue_reward_index,
    claim_reward,
    claim_reward_by_generator,
    handle_reward,
    settle_user_reward,
)
from stablepool.safe_int import S

logger = structlog.get_logger()


@dataclass
class InMemoryLedger:
    """Balances held by every account, plus share token and staking books.

    Attributes:
        balances: Asset balances keyed by (holder, asset)
        shares: Share token balances by holder
        staked: Shares staked in the generator, by beneficiary
        rewarder_pending: Rewards the external rewarder owes the pool
    """

    balances: dict[tuple[str, AssetInfo], int] = field(default_factory=dict)
    shares: dict[str, int] = field(default_factory=dict)
    staked: dict[str, int] = field(default_factory=dict)
    rewarder_pending: int = 0

    def balance_of(self, holder: str, info: AssetInfo) -> int:
        return self.balances.get((holder, info), 0)

    def credit(self, holder: str, info: AssetInfo, amount: int) -> None:
        self.balances[(holder, info)] = (S(self.balance_of(holder, info)) + amount).to_uint128()

    def debit(self, holder: str, info: AssetInfo, amount: int) -> None:
        """Raises Underflow if holder cannot cover amount."""
        self.balances[(holder, info)] = (S(self.balance_of(holder, info)) - amount).value

    def move(self, info: AssetInfo, sender: str, recipient: str, amount: int) -> None:
        self.debit(sender, info, amount)
        self.credit(recipient, info, amount)

    def share_balance(self, holder: str) -> int:
        return self.shares.get(holder, 0)

    def move_shares(self, sender: str, recipient: str, amount: int) -> None:
        self.shares[sender] = (S(self.share_balance(sender)) - amount).value
        self.shares[recipient] = self.share_balance(recipient) + amount

    @property
    def share_supply(self) -> int:
        return sum(self.shares.values())

    @property
    def total_staked(self) -> int:
        return sum(self.staked.values())

    def copy(self) -> InMemoryLedger:
        return copy.deepcopy(self)


class PairService:
    """A single stable pair with its collaborators simulated in memory.

    Calls are serialized by a lock; each runs to completion against the
    state committed by the previous one.

    Args:
        settings: Pair settings
        clock: Returns the current Unix time (injectable for tests)
        ledger: Starting balances (default: empty)
    """

    def __init__(
        self,
        settings: PairSettings,
        clock: Callable[[], int] | None = None,
        ledger: InMemoryLedger | None = None,
    ) -> None:
        self.settings = settings
        self._clock = clock or (lambda: int(time.time()))
        self._lock = threading.Lock()
        self.ledger = ledger or InMemoryLedger()
        self.state = pair.instantiate(
            contract_addr=settings.contract_addr,
            liquidity_token=settings.liquidity_token,
            asset_infos=settings.asset_infos,
            factory_addr=settings.factory_addr,
            amp=settings.amp,
            now=self._clock(),
            rewarder=settings.rewarder,
            generator=settings.generator,
            reward_holder=settings.reward_holder,
            reward_asset=AssetInfo.native(settings.reward_denom),
        )

    # --- Plumbing ---

    def now(self) -> int:
        return self._clock()

    @property
    def contract_addr(self) -> str:
        return self.state.pair_info.contract_addr

    def snapshot(self) -> PoolSnapshot:
        """Current collaborator facts about the pool."""
        infos = self.state.asset_infos
        return PoolSnapshot(
            reserves=(
                Asset(info=infos[0], amount=self.ledger.balance_of(self.contract_addr, infos[0])),
                Asset(info=infos[1], amount=self.ledger.balance_of(self.contract_addr, infos[1])),
            ),
            precisions=self.settings.precisions,
            total_share=self.ledger.share_supply,
            lp_precision=self.settings.lp_precision,
            fee_info=self.settings.fee_info,
        )

    def _commit(self, state: PoolState, ledger: InMemoryLedger, effects: tuple[Effect, ...]) -> None:
        """Execute effects on ledger, then store ledger and state together."""
        state = self._execute(state, ledger, effects)
        self.ledger = ledger
        self.state = state

    def _execute(self, state: PoolState, ledger: InMemoryLedger, effects: tuple[Effect, ...]) -> PoolState:
        for effect in effects:
            logger.debug("executing_effect", effect=type(effect).__name__)
            if isinstance(effect, Transfer):
                ledger.move(effect.asset.info, self.contract_addr, effect.recipient, effect.asset.amount)
            elif isinstance(effect, TransferFrom):
                ledger.move(effect.asset.info, effect.owner, effect.recipient, effect.asset.amount)
            elif isinstance(effect, MintShares):
                ledger.shares[effect.recipient] = ledger.share_balance(effect.recipient) + effect.amount
            elif isinstance(effect, BurnShares):
                ledger.shares[self.contract_addr] = (
                    S(ledger.share_balance(self.contract_addr)) - effect.amount
                ).value
            elif isinstance(effect, StakeShares):
                ledger.move_shares(self.contract_addr, effect.generator, effect.amount)
                ledger.staked[effect.beneficiary] = ledger.staked.get(effect.beneficiary, 0) + effect.amount
            elif isinstance(effect, ClaimExternalRewards):
                ledger.credit(effect.recipient, state.reward_asset, ledger.rewarder_pending)
                ledger.rewarder_pending = 0
            elif isinstance(effect, HandleReward):
                outcome = self._handle_reward(state, ledger, effect)
                state = self._execute(outcome.state, ledger, outcome.effects)
            elif isinstance(effect, RewardPayout):
                ledger.move(effect.asset.info, effect.holder, effect.recipient, effect.asset.amount)
            else:
                raise TypeError(f"Unknown effect: {type(effect).__name__}")
        return state

    def _handle_reward(self, state: PoolState, ledger: InMemoryLedger, effect: HandleReward) -> RewardOutcome:
        if state.reward_holder is None:
            raise RewardsNotConfigured("Pair has no reward holder")
        return handle_reward(
            state,
            sender=self.contract_addr,
            reward_balance=ledger.balance_of(state.reward_holder, state.reward_asset),
            previous_reward_balance=effect.previous_reward_balance,
            user=effect.user,
            user_share=effect.user_share,
            total_share=effect.total_share,
            receiver=effect.receiver,
        )

    def _reward_balance(self) -> int:
        if self.state.reward_holder is None:
            raise RewardsNotConfigured("Pair has no reward holder")
        return self.ledger.balance_of(self.state.reward_holder, self.state.reward_asset)

    # --- Funding (collaborator side) ---

    def fund(self, holder: str, info: AssetInfo, amount: int) -> None:
        """Give holder some of an asset, as a bank or token contract would."""
        with self._lock:
            self.ledger.credit(holder, info, amount)

    def fund_rewarder(self, amount: int) -> None:
        """Rewards accrue at the external rewarder for the pool."""
        with self._lock:
            self.ledger.rewarder_pending += amount

    # --- Pair operations ---

    def swap(
        self,
        offer_asset: Asset,
        sender: str,
        belief_price: Decimal | None = None,
        max_spread: Decimal | None = None,
        to: str | None = None,
    ) -> pair.SwapOutcome:
        with self._lock:
            outcome = pair.swap(
                self.state,
                self.snapshot(),
                offer_asset,
                sender,
                self.now(),
                belief_price=belief_price,
                max_spread=max_spread,
                to=to,
            )
            ledger = self.ledger.copy()
            ledger.move(offer_asset.info, sender, self.contract_addr, offer_asset.amount)
            self._commit(outcome.state, ledger, outcome.effects)
            return outcome

    def provide_liquidity(
        self,
        assets: tuple[Asset, Asset],
        sender: str,
        receiver: str | None = None,
        auto_stake: bool = False,
    ) -> pair.ProvideOutcome:
        with self._lock:
            outcome = pair.provide_liquidity(
                self.state,
                self.snapshot(),
                assets,
                sender,
                self.now(),
                receiver=receiver,
                auto_stake=auto_stake,
            )
            ledger = self.ledger.copy()
            # Native legs travel with the call; token legs are pulled by TransferFrom
            for asset in assets:
                if asset.info.is_native:
                    ledger.move(asset.info, sender, self.contract_addr, asset.amount)
            self._commit(outcome.state, ledger, outcome.effects)
            return outcome

    def withdraw_liquidity(self, sender: str, amount: int) -> pair.WithdrawOutcome:
        """Send amount shares to the pair and withdraw the underlying assets."""
        with self._lock:
            outcome = pair.withdraw_liquidity(
                self.state,
                self.snapshot(),
                sender,
                amount,
                caller=self.state.pair_info.liquidity_token,
                now=self.now(),
            )
            ledger = self.ledger.copy()
            ledger.move_shares(sender, self.contract_addr, amount)
            self._commit(outcome.state, ledger, outcome.effects)
            return outcome

    def simulate_swap(self, offer_asset: Asset) -> SwapAmounts:
        with self._lock:
            return pair.simulate_swap(self.state, self.snapshot(), offer_asset, self.now())

    def simulate_reverse_swap(self, ask_asset: Asset) -> ReverseSwapAmounts:
        with self._lock:
            return pair.simulate_reverse_swap(self.state, self.snapshot(), ask_asset, self.now())

    def query_pool(self) -> pair.PoolView:
        with self._lock:
            return pair.query_pool(self.snapshot())

    def query_share(self, amount: int) -> tuple[Asset, Asset]:
        with self._lock:
            return pair.query_share(self.snapshot(), amount)

    def query_config(self) -> pair.ConfigView:
        with self._lock:
            return pair.query_config(self.state, self.now())

    def cumulative_prices(self) -> pair.CumulativePrices:
        with self._lock:
            return pair.cumulative_prices(self.state, self.snapshot(), self.now())

    def update_config(self, sender: str, params: pair.UpdateParams) -> pair.ConfigView:
        with self._lock:
            now = self.now()
            self.state = pair.update_config(
                self.state, sender, self.settings.factory_owner, params, now
            )
            return pair.query_config(self.state, now)

    # --- Rewards ---

    def accrue_rewards(self, sender: str, previous_balance: int) -> str:
        """Fold holder balance growth since previous_balance into the global index.

        The holder balance and the staked total come from the ledger.

        Returns:
            The new global index as a decimal string
        """
        with self._lock:
            outcome = accrue_reward_index(
                self.state,
                sender,
                reward_balance=self._reward_balance(),
                previous_reward_balance=previous_balance,
                total_share=self.ledger.total_staked,
            )
            self.state = outcome.state
            return str(outcome.state.rewards.global_index)

    def settle_rewards(self, sender: str, user: str, receiver: str | None = None) -> int:
        """Settle user against the current index and pay out what is owed."""
        with self._lock:
            outcome = settle_user_reward(
                self.state,
                sender,
                user,
                user_share=self.ledger.staked.get(user, 0),
                receiver=receiver,
            )
            self._commit(outcome.state, self.ledger.copy(), outcome.effects)
            return outcome.user_reward

    def claim_reward(self, sender: str, receiver: str | None = None) -> int:
        """Claim external rewards and pay sender's part.

        Returns:
            The amount paid to the receiver
        """
        with self._lock:
            paid_before = self._paid_to(receiver or sender)
            outcome = claim_reward(
                self.state,
                sender,
                user_share=self.ledger.staked.get(sender, 0),
                total_share=self.ledger.total_staked,
                reward_balance=self._reward_balance(),
                receiver=receiver,
            )
            self._commit(outcome.state, self.ledger.copy(), outcome.effects)
            return self._paid_to(receiver or sender) - paid_before

    def claim_reward_by_generator(self, sender: str, user: str) -> int:
        with self._lock:
            paid_before = self._paid_to(user)
            outcome = claim_reward_by_generator(
                self.state,
                sender,
                user,
                user_share=self.ledger.staked.get(user, 0),
                total_share=self.ledger.total_staked,
                reward_balance=self._reward_balance(),
            )
            self._commit(outcome.state, self.ledger.copy(), outcome.effects)
            return self._paid_to(user) - paid_before

    def pending_reward(self, user: str) -> Asset:
        with self._lock:
            owed = self.state.rewards.pending(user, self.ledger.staked.get(user, 0))
            return Asset(info=self.state.reward_asset, amount=owed)

    def _paid_to(self, holder: str) -> int:
        return self.ledger.balance_of(holder, self.state.reward_asset)


@lru_cache(maxsize=1)
def get_default_service() -> PairService:
    """The process-wide service, configured from the environment."""
    settings = PairSettings.from_env()
    logger.info(
        "pair_service_created",
        contract_addr=settings.contract_addr,
        assets=[settings.asset0, settings.asset1],
        amp=settings.amp,
    )
    return PairService(settings)
