"""Tests for the two-step reward claim flow."""

import pytest

from stablepool.errors import NoStakedShares, RewardsNotConfigured, Unauthorized, ZeroTotalShareError
from stablepool.math.fixed_point import Ufp
from stablepool.pool.effects import ClaimExternalRewards, HandleReward, RewardPayout
from stablepool.pool.types import Asset
from stablepool.rewards.claims import (
    accrue_reward_index,
    claim_reward,
    claim_reward_by_generator,
    handle_reward,
    settle_user_reward,
)
from tests.helpers import ALICE, BOB, GENERATOR, PAIR, REWARD_HOLDER, REWARDER, UUSD, make_state


class TestClaimReward:
    """Tests for a user claiming their own rewards."""

    def test_schedules_external_claim_then_callback(self, state):
        outcome = claim_reward(state, ALICE, user_share=100, total_share=1_000, reward_balance=42)
        assert outcome.state is state
        assert outcome.effects == (
            ClaimExternalRewards(rewarder=REWARDER, recipient=REWARD_HOLDER),
            HandleReward(
                previous_reward_balance=42,
                user=ALICE,
                user_share=100,
                total_share=1_000,
                receiver=None,
            ),
        )

    def test_receiver_is_carried_to_callback(self, state):
        outcome = claim_reward(state, ALICE, 100, 1_000, 0, receiver=BOB)
        assert outcome.effects[1].receiver == BOB

    def test_nothing_staked_raises(self, state):
        with pytest.raises(NoStakedShares):
            claim_reward(state, ALICE, 0, 1_000, 0)

    def test_without_rewarder_raises(self):
        with pytest.raises(RewardsNotConfigured):
            claim_reward(make_state(rewarder=None), ALICE, 100, 1_000, 0)


class TestClaimRewardByGenerator:
    def test_generator_may_claim_for_user(self, state):
        outcome = claim_reward_by_generator(state, GENERATOR, ALICE, 0, 1_000, 7)
        handle = outcome.effects[1]
        assert isinstance(handle, HandleReward)
        assert handle.user == ALICE
        assert handle.previous_reward_balance == 7

    def test_other_sender_is_unauthorized(self, state):
        with pytest.raises(Unauthorized):
            claim_reward_by_generator(state, ALICE, ALICE, 100, 1_000, 0)

    def test_pair_without_generator_is_unauthorized(self):
        with pytest.raises(Unauthorized):
            claim_reward_by_generator(make_state(generator=None), GENERATOR, ALICE, 100, 1_000, 0)


class TestHandleReward:
    """Tests for the callback that distributes arrived rewards."""

    def test_pays_user_share_of_new_rewards(self, state):
        outcome = handle_reward(state, PAIR, 1_042, 42, ALICE, 250, 1_000)
        assert outcome.user_reward == 250
        assert outcome.latest_reward_amount == 1_000
        assert outcome.effects == (
            RewardPayout(holder=REWARD_HOLDER, asset=Asset(info=UUSD, amount=250), recipient=ALICE),
        )
        assert outcome.state.rewards.index_of(ALICE) == outcome.state.rewards.global_index

    def test_pays_receiver_when_given(self, state):
        outcome = handle_reward(state, PAIR, 1_000, 0, ALICE, 500, 1_000, receiver=BOB)
        assert outcome.effects[0].recipient == BOB

    def test_nothing_owed_means_no_payout(self, state):
        outcome = handle_reward(state, PAIR, 0, 0, ALICE, 500, 1_000)
        assert outcome.user_reward == 0
        assert outcome.effects == ()

    def test_only_the_pair_may_call(self, state):
        with pytest.raises(Unauthorized):
            handle_reward(state, ALICE, 1_000, 0, ALICE, 500, 1_000)

    def test_zero_total_share_raises(self, state):
        with pytest.raises(ZeroTotalShareError):
            handle_reward(state, PAIR, 1_000, 0, ALICE, 0, 0)

    def test_second_callback_pays_only_new_arrivals(self, state):
        first = handle_reward(state, PAIR, 1_000, 0, ALICE, 1_000, 1_000)
        second = handle_reward(first.state, PAIR, 1_000, 1_000, ALICE, 1_000, 1_000)
        assert (first.user_reward, second.user_reward) == (1_000, 0)


class TestAccrueRewardIndex:
    """Tests for folding holder balance growth into the index."""

    @pytest.mark.parametrize("sender", [PAIR, GENERATOR])
    def test_pair_or_generator_may_accrue(self, state, sender):
        outcome = accrue_reward_index(state, sender, 1_000, 0, 500)
        assert outcome.state.rewards.global_index == Ufp.from_decimal("2")
        assert outcome.latest_reward_amount == 1_000
        assert outcome.effects == ()

    def test_other_sender_is_unauthorized(self, state):
        with pytest.raises(Unauthorized):
            accrue_reward_index(state, ALICE, 1_000, 0, 1)

    def test_zero_total_share_raises(self, state):
        with pytest.raises(ZeroTotalShareError):
            accrue_reward_index(state, PAIR, 1_000, 0, 0)


class TestSettleUserReward:
    """Tests for settling a user against the current index."""

    def test_user_settles_to_receiver(self, state):
        accrued = accrue_reward_index(state, PAIR, 1_000, 0, 1_000).state
        outcome = settle_user_reward(accrued, ALICE, ALICE, 300, receiver=BOB)
        assert outcome.user_reward == 300
        assert outcome.effects == (
            RewardPayout(holder=REWARD_HOLDER, asset=Asset(info=UUSD, amount=300), recipient=BOB),
        )

    def test_generator_settles_to_user(self, state):
        accrued = accrue_reward_index(state, PAIR, 1_000, 0, 1_000).state
        outcome = settle_user_reward(accrued, GENERATOR, ALICE, 300)
        assert outcome.effects[0].recipient == ALICE

    def test_someone_else_is_unauthorized(self, state):
        accrued = accrue_reward_index(state, PAIR, 1_000, 0, 1_000).state
        with pytest.raises(Unauthorized):
            settle_user_reward(accrued, BOB, ALICE, 300, receiver=BOB)

    def test_second_settle_pays_nothing(self, state):
        accrued = accrue_reward_index(state, PAIR, 1_000, 0, 1_000).state
        first = settle_user_reward(accrued, ALICE, ALICE, 300)
        second = settle_user_reward(first.state, ALICE, ALICE, 300)
        assert second.user_reward == 0
        assert second.effects == ()
