"""Reward claim flow.

A claim is two steps. The claim itself asks the external rewarder to pay
everything it owes the pool into the reward holder, and schedules a
HandleReward callback into the pair carrying the holder's balance from
before that payment. When the callback runs, the balance increase is
folded into the global index and the user is settled and paid.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

import structlog

from stablepool.errors import NoStakedShares, RewardsNotConfigured, Unauthorized
from stablepool.pool.effects import ClaimExternalRewards, Effect, HandleReward, RewardPayout
from stablepool.pool.types import Asset

from .ledger import calc_user_reward

if TYPE_CHECKING:
    from stablepool.pool.state import PoolState

logger = structlog.get_logger()


@dataclass(frozen=True)
class RewardOutcome:
    """Result of a reward operation.

    Attributes:
        state: Pair state after the operation
        effects: Effects to execute, in order
        user_reward: Amount paid to the user (handle_reward only)
        latest_reward_amount: Rewards newly folded into the index
    """

    state: PoolState
    effects: tuple[Effect, ...]
    user_reward: int = 0
    latest_reward_amount: int = 0


def _reward_handling_effects(
    state: PoolState,
    user: str,
    user_share: int,
    total_share: int,
    reward_balance: int,
    receiver: str | None,
) -> tuple[Effect, ...]:
    if state.rewarder is None or state.reward_holder is None:
        raise RewardsNotConfigured("Pair has no rewarder or reward holder")
    return (
        ClaimExternalRewards(rewarder=state.rewarder, recipient=state.reward_holder),
        HandleReward(
            previous_reward_balance=reward_balance,
            user=user,
            user_share=user_share,
            total_share=total_share,
            receiver=receiver,
        ),
    )


def claim_reward(
    state: PoolState,
    sender: str,
    user_share: int,
    total_share: int,
    reward_balance: int,
    receiver: str | None = None,
) -> RewardOutcome:
    """Claim the sender's rewards.

    Args:
        state: Current pair state
        sender: Claiming account
        user_share: Shares the sender has staked in the generator
        total_share: Shares staked in the generator overall
        reward_balance: Reward holder balance right now
        receiver: Where to send the reward (defaults to sender)

    Raises:
        NoStakedShares: If the sender has nothing staked
        RewardsNotConfigured: If the pair has no rewarder
    """
    if user_share == 0:
        raise NoStakedShares(f"{sender} has no shares staked in the generator")

    effects = _reward_handling_effects(state, sender, user_share, total_share, reward_balance, receiver)
    logger.info("reward_claim_requested", user=sender, user_share=user_share, receiver=receiver)
    return RewardOutcome(state=state, effects=effects)


def claim_reward_by_generator(
    state: PoolState,
    sender: str,
    user: str,
    user_share: int,
    total_share: int,
    reward_balance: int,
) -> RewardOutcome:
    """Claim on behalf of user; called by the generator when a stake changes.

    Raises:
        Unauthorized: If sender is not the generator
    """
    if state.generator is None or sender != state.generator:
        raise Unauthorized("Only the generator can claim on behalf of a user")

    effects = _reward_handling_effects(state, user, user_share, total_share, reward_balance, None)
    logger.info("reward_claim_by_generator", user=user, user_share=user_share)
    return RewardOutcome(state=state, effects=effects)


def handle_reward(
    state: PoolState,
    sender: str,
    reward_balance: int,
    previous_reward_balance: int,
    user: str,
    user_share: int,
    total_share: int,
    receiver: str | None = None,
) -> RewardOutcome:
    """Distribute freshly claimed rewards and pay user.

    Args:
        state: Current pair state
        sender: Caller; must be the pair itself
        reward_balance: Reward holder balance now
        previous_reward_balance: Reward holder balance before the claim
        user: Account being settled
        user_share: The user's staked shares
        total_share: Total staked shares
        receiver: Payout address (defaults to user)

    Raises:
        Unauthorized: If sender is not the pair
        ZeroTotalShareError: If total_share is zero
    """
    if sender != state.pair_info.contract_addr:
        raise Unauthorized("Only the pair can handle rewards")
    if state.reward_holder is None:
        raise RewardsNotConfigured("Pair has no reward holder")

    receiver = receiver or user
    latest_reward_amount = max(reward_balance - previous_reward_balance, 0)

    rewards, user_reward = calc_user_reward(
        state.rewards,
        reward_balance,
        previous_reward_balance,
        user,
        user_share,
        total_share,
    )

    effects: tuple[Effect, ...] = ()
    if user_reward > 0:
        effects = (
            RewardPayout(
                holder=state.reward_holder,
                asset=Asset(info=state.reward_asset, amount=user_reward),
                recipient=receiver,
            ),
        )

    logger.info(
        "reward_handled",
        user=user,
        receiver=receiver,
        claimed_reward_to_pool=latest_reward_amount,
        sent_reward=user_reward,
    )
    return RewardOutcome(
        state=replace(state, rewards=rewards),
        effects=effects,
        user_reward=user_reward,
        latest_reward_amount=latest_reward_amount,
    )


def accrue_reward_index(
    state: PoolState,
    sender: str,
    reward_balance: int,
    previous_reward_balance: int,
    total_share: int,
) -> RewardOutcome:
    """Fold rewards that reached the holder since previous_reward_balance into the index.

    reward_balance and total_share are read from the holder and the
    generator by the caller of this function, never taken from the sender.

    Raises:
        Unauthorized: If sender is neither the pair nor the generator
        ZeroTotalShareError: If nothing is staked
    """
    if sender not in (state.pair_info.contract_addr, state.generator):
        raise Unauthorized("Only the pair or the generator can accrue rewards")
    if state.reward_holder is None:
        raise RewardsNotConfigured("Pair has no reward holder")

    rewards = state.rewards.accrue(reward_balance, previous_reward_balance, total_share)
    latest_reward_amount = max(reward_balance - previous_reward_balance, 0)
    logger.info(
        "reward_index_accrued",
        sender=sender,
        latest_reward_amount=latest_reward_amount,
        global_index=str(rewards.global_index),
    )
    return RewardOutcome(
        state=replace(state, rewards=rewards),
        effects=(),
        latest_reward_amount=latest_reward_amount,
    )


def settle_user_reward(
    state: PoolState,
    sender: str,
    user: str,
    user_share: int,
    receiver: str | None = None,
) -> RewardOutcome:
    """Pay user what the current index owes them, without claiming from the rewarder.

    Raises:
        Unauthorized: If sender is neither user nor the generator
    """
    if sender != user and (state.generator is None or sender != state.generator):
        raise Unauthorized("Only the user or the generator can settle a user's rewards")
    if state.reward_holder is None:
        raise RewardsNotConfigured("Pair has no reward holder")

    receiver = receiver or user
    rewards, owed = state.rewards.settle(user, user_share)

    effects: tuple[Effect, ...] = ()
    if owed > 0:
        effects = (
            RewardPayout(
                holder=state.reward_holder,
                asset=Asset(info=state.reward_asset, amount=owed),
                recipient=receiver,
            ),
        )

    logger.info("user_reward_settled", sender=sender, user=user, receiver=receiver, sent_reward=owed)
    return RewardOutcome(state=replace(state, rewards=rewards), effects=effects, user_reward=owed)
