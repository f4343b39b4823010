"""Tests for the reward index ledger."""

import pytest

from stablepool.errors import ZeroTotalShareError
from stablepool.math.fixed_point import Ufp
from stablepool.rewards.ledger import RewardLedgerState, calc_user_reward
from tests.helpers import ALICE, BOB


class TestAccrue:
    """Tests for folding arrivals into the global index."""

    def test_index_grows_by_reward_per_share(self):
        ledger = RewardLedgerState().accrue(1_000, 0, 500)
        assert ledger.global_index == Ufp.from_decimal("2")

    def test_thousand_over_hundred_shares(self):
        """1,000 arriving over 100 shares bumps the index by 10; 10 shares settle for 100."""
        ledger = RewardLedgerState().accrue(1_000, 0, 100)
        assert ledger.global_index == Ufp.from_decimal("10")
        _, owed = ledger.settle(ALICE, 10)
        assert owed == 100

    def test_accrue_is_additive(self):
        ledger = RewardLedgerState().accrue(100, 0, 100).accrue(300, 100, 100)
        assert ledger.global_index == Ufp.from_decimal("3")

    def test_no_growth_leaves_index(self):
        ledger = RewardLedgerState().accrue(100, 0, 100)
        assert ledger.accrue(100, 100, 100) is ledger
        assert ledger.accrue(50, 100, 100) is ledger

    def test_zero_total_share_raises(self):
        with pytest.raises(ZeroTotalShareError):
            RewardLedgerState().accrue(100, 0, 0)


class TestSettle:
    """Tests for settling a user against the global index."""

    def test_first_sighting_with_stake_gets_full_index(self):
        ledger = RewardLedgerState().accrue(1_000, 0, 1_000)
        ledger, owed = ledger.settle(ALICE, 400)
        assert owed == 400
        assert ledger.index_of(ALICE) == Ufp.one()

    def test_first_sighting_without_stake_gets_nothing(self):
        ledger = RewardLedgerState().accrue(1_000, 0, 1_000)
        ledger, owed = ledger.settle(ALICE, 0)
        assert owed == 0
        assert ledger.index_of(ALICE) == ledger.global_index

    def test_settle_twice_pays_once(self):
        ledger = RewardLedgerState().accrue(1_000, 0, 1_000)
        ledger, first = ledger.settle(ALICE, 1_000)
        ledger, second = ledger.settle(ALICE, 1_000)
        assert (first, second) == (1_000, 0)

    def test_only_growth_since_last_settlement_is_owed(self):
        ledger = RewardLedgerState().accrue(1_000, 0, 1_000)
        ledger, _ = ledger.settle(ALICE, 0)
        ledger = ledger.accrue(1_500, 1_000, 1_000)
        ledger, owed = ledger.settle(ALICE, 1_000)
        assert owed == 500

    def test_pending_does_not_change_ledger(self):
        ledger = RewardLedgerState().accrue(1_000, 0, 1_000)
        assert ledger.pending(BOB, 250) == 250
        assert ledger.index_of(BOB) is None

    def test_settle_does_not_mutate_original(self):
        ledger = RewardLedgerState().accrue(1_000, 0, 1_000)
        ledger.settle(ALICE, 10)
        assert ledger.index_of(ALICE) is None

    def test_payout_floors(self):
        ledger = RewardLedgerState().accrue(1, 0, 3)
        assert ledger.pending(ALICE, 2) == 0
        assert ledger.pending(ALICE, 3) == 0
        assert ledger.accrue(3, 1, 3).pending(ALICE, 3) == 2


class TestCalcUserReward:
    def test_accrues_then_settles(self):
        ledger, owed = calc_user_reward(RewardLedgerState(), 600, 0, ALICE, 300, 600)
        assert owed == 300
        assert ledger.global_index == Ufp.one()
        assert ledger.index_of(ALICE) == Ufp.one()

    def test_users_share_pro_rata(self):
        ledger, alice_owed = calc_user_reward(RewardLedgerState(), 900, 0, ALICE, 200, 300)
        ledger, bob_owed = calc_user_reward(ledger, 900, 900, BOB, 100, 300)
        assert (alice_owed, bob_owed) == (600, 300)
