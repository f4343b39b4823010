"""Two-asset StableSwap pair with an amp ramp, TWAP oracle and reward ledger."""

from stablepool.service import PairService, get_default_service

__version__ = "0.1.0"
__all__ = ["PairService", "get_default_service", "__version__"]
