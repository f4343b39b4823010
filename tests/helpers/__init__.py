"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Assets, accounts and times
- factories: State, snapshot and service factory functions
"""

from tests.helpers.constants import (
    ALICE,
    BLUNA,
    BOB,
    DAY,
    FACTORY,
    FEE_COLLECTOR,
    GENERATOR,
    LP_TOKEN,
    OWNER,
    PAIR,
    REWARD_HOLDER,
    REWARDER,
    T0,
    ULUNA,
    UUSD,
)
from tests.helpers.factories import (
    FakeClock,
    make_service,
    make_settings,
    make_snapshot,
    make_state,
)

__all__ = [
    "ALICE",
    "BLUNA",
    "BOB",
    "DAY",
    "FACTORY",
    "FEE_COLLECTOR",
    "GENERATOR",
    "LP_TOKEN",
    "OWNER",
    "PAIR",
    "REWARDER",
    "REWARD_HOLDER",
    "T0",
    "ULUNA",
    "UUSD",
    "FakeClock",
    "make_service",
    "make_settings",
    "make_snapshot",
    "make_state",
]
