"""External effects produced by pair operations.

Pair operations never move funds themselves. They return a tuple of the
effects below, in execution order, and the calling layer carries them out
after the operation has succeeded.
"""

from __future__ import annotations

from dataclasses import dataclass

from .types import Asset


@dataclass(frozen=True)
class Transfer:
    """Send an asset held by the pair to recipient."""

    asset: Asset
    recipient: str


@dataclass(frozen=True)
class TransferFrom:
    """Pull a token asset from owner into the pair (requires an allowance)."""

    asset: Asset
    owner: str
    recipient: str


@dataclass(frozen=True)
class MintShares:
    """Mint share tokens to recipient."""

    recipient: str
    amount: int


@dataclass(frozen=True)
class BurnShares:
    """Burn share tokens held by the pair."""

    amount: int


@dataclass(frozen=True)
class StakeShares:
    """Send share tokens held by the pair to the generator on behalf of beneficiary."""

    generator: str
    beneficiary: str
    amount: int


@dataclass(frozen=True)
class ClaimExternalRewards:
    """Ask the external rewarder to pay accrued rewards to recipient."""

    rewarder: str
    recipient: str


@dataclass(frozen=True)
class HandleReward:
    """Callback into the pair once external rewards have arrived.

    previous_reward_balance is the reward holder's balance before the
    external claim executed.
    """

    previous_reward_balance: int
    user: str
    user_share: int
    total_share: int
    receiver: str | None = None


@dataclass(frozen=True)
class RewardPayout:
    """Pay a user's reward out of the reward holder."""

    holder: str
    asset: Asset
    recipient: str


Effect = (
    Transfer
    | TransferFrom
    | MintShares
    | BurnShares
    | StakeShares
    | ClaimExternalRewards
    | HandleReward
    | RewardPayout
)
