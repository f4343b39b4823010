"""Shared asset and account constants for tests.

Usage:
    from tests.helpers import UUSD, BLUNA, ALICE
    # or
    from tests.helpers.constants import UUSD, BLUNA, ALICE
"""

from stablepool.pool.types import AssetInfo

# =============================================================================
# Pooled assets
# =============================================================================

UUSD = AssetInfo.native("uusd")  # Native stablecoin (6 decimals)
ULUNA = AssetInfo.native("uluna")  # Native, not part of the default pair
BLUNA = AssetInfo.token("terra1bluna")  # Token contract (6 decimals)

# =============================================================================
# Accounts and contracts
# =============================================================================

PAIR = "pair"
LP_TOKEN = "lp-token"
FACTORY = "factory"
OWNER = "owner"
GENERATOR = "generator"
REWARDER = "rewarder"
REWARD_HOLDER = "reward-holder"
FEE_COLLECTOR = "fee-collector"

ALICE = "alice"
BOB = "bob"

# =============================================================================
# Time
# =============================================================================

T0 = 1_650_000_000  # Pair creation time
DAY = 86_400
