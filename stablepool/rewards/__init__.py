"""Reward index ledger and claim flow."""

from stablepool.rewards.ledger import RewardLedgerState, calc_user_reward
from stablepool.rewards.claims import (
    RewardOutcome,
    accrue_reward_index,
    claim_reward,
    claim_reward_by_generator,
    handle_reward,
    settle_user_reward,
)

__all__ = [
    "RewardLedgerState",
    "RewardOutcome",
    "accrue_reward_index",
    "calc_user_reward",
    "claim_reward",
    "claim_reward_by_generator",
    "handle_reward",
    "settle_user_reward",
]
