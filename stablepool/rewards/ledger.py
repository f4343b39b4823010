"""Pull-based reward index ledger.

Rewards arrive at the reward holder from outside. Whenever they are
observed, the balance increase is spread over all outstanding shares by
bumping a global index (reward per share). Each user carries the index at
which they were last settled; what they are owed is the index growth since
then times their share.

    global_index += (current_balance - previous_balance) / total_shares
    owed(user)    = (global_index - user_index) * user_share
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

import structlog

from stablepool.errors import ZeroTotalShareError
from stablepool.math.fixed_point import Ufp
from stablepool.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class RewardLedgerState:
    """Global reward index plus the index each user was last settled at.

    A user missing from user_indexes has never been observed.
    """

    global_index: Ufp = field(default_factory=Ufp.zero)
    user_indexes: Mapping[str, Ufp] = field(default_factory=lambda: MappingProxyType({}))

    def accrue(self, current_balance: int, previous_balance: int, total_shares: int) -> RewardLedgerState:
        """Fold newly arrived rewards into the global index.

        A balance that did not grow (or shrank) adds nothing.

        Raises:
            ZeroTotalShareError: If total_shares is zero
        """
        if total_shares == 0:
            raise ZeroTotalShareError("Cannot accrue rewards with zero total share")

        delta = S(current_balance).saturating_sub(previous_balance).value
        if delta == 0:
            return self

        global_index = self.global_index.add(Ufp.from_ratio(delta, total_shares))
        logger.debug(
            "reward_accrued",
            delta=delta,
            total_shares=total_shares,
            global_index=str(global_index),
        )
        return replace(self, global_index=global_index)

    def pending(self, user: str, user_share: int) -> int:
        """What settle() would pay user right now, without changing anything."""
        user_index = self.index_of(user)
        if user_index is None:
            # First sighting with a stake: the holding predates the index
            if user_share > 0:
                return S(self.global_index.mul_int(user_share)).to_uint128()
            return 0
        return S(self.global_index.sub(user_index).mul_int(user_share)).to_uint128()

    def settle(self, user: str, user_share: int) -> tuple[RewardLedgerState, int]:
        """Pay out what user is owed and move their index to the global one.

        Returns:
            The new ledger and the owed amount
        """
        owed = self.pending(user, user_share)

        user_indexes = dict(self.user_indexes)
        user_indexes[user] = self.global_index

        logger.debug("reward_settled", user=user, user_share=user_share, owed=owed)
        return replace(self, user_indexes=MappingProxyType(user_indexes)), owed

    def index_of(self, user: str) -> Ufp | None:
        """The index user was last settled at, or None if never observed."""
        return self.user_indexes.get(user)


def calc_user_reward(
    ledger: RewardLedgerState,
    current_balance: int,
    previous_balance: int,
    user: str,
    user_share: int,
    total_share: int,
) -> tuple[RewardLedgerState, int]:
    """Accrue the latest arrivals, then settle user.

    This is the step run when a reward callback fires after an external
    claim.
    """
    ledger = ledger.accrue(current_balance, previous_balance, total_share)
    return ledger.settle(user, user_share)
