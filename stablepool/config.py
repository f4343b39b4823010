"""Settings for the pair service."""

import os
from dataclasses import dataclass
from decimal import Decimal

from stablepool.constants import DEFAULT_REWARD_DENOM, LP_TOKEN_PRECISION
from stablepool.pool.types import AssetInfo, FeeInfo


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


def _env_optional(name: str) -> str | None:
    value = os.environ.get(name, "")
    return value or None


def _asset_info(value: str) -> AssetInfo:
    """Parse "native:<denom>" or "token:<address>"."""
    kind, _, ident = value.partition(":")
    if kind == "native" and ident:
        return AssetInfo.native(ident)
    if kind == "token" and ident:
        return AssetInfo.token(ident)
    raise ValueError(f"Asset must be 'native:<denom>' or 'token:<address>', got '{value}'")


@dataclass(frozen=True)
class PairSettings:
    """Everything needed to stand up one pair with in-memory collaborators.

    Attributes:
        contract_addr: Address of the pair
        liquidity_token: Address of the share token
        factory_addr: Factory administering the pair
        factory_owner: Account allowed to update the config
        asset0, asset1: Pooled assets as "native:<denom>" or "token:<address>"
        precision0, precision1: Decimals of each pooled asset
        lp_precision: Decimals of the share token
        amp: Initial amp, unscaled
        total_fee_rate: Swap commission
        maker_fee_rate: Share of the commission paid to fee_address
        fee_address: Maker fee recipient (None disables the maker fee)
        rewarder, generator, reward_holder: Reward collaborators (optional)
        reward_denom: Native denom rewards are paid in
        host, port, debug: HTTP server settings
        log_level: Minimum structlog level
    """

    contract_addr: str = "pair"
    liquidity_token: str = "lp-token"
    factory_addr: str = "factory"
    factory_owner: str = "owner"

    asset0: str = "native:uusd"
    asset1: str = "native:uluna"
    precision0: int = 6
    precision1: int = 6
    lp_precision: int = LP_TOKEN_PRECISION

    amp: int = 100
    total_fee_rate: Decimal = Decimal("0.0005")
    maker_fee_rate: Decimal = Decimal("0")
    fee_address: str | None = None

    rewarder: str | None = None
    generator: str | None = None
    reward_holder: str | None = None
    reward_denom: str = DEFAULT_REWARD_DENOM

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "info"

    @classmethod
    def from_env(cls) -> "PairSettings":
        """Read settings from STABLEPOOL_* environment variables.

        Unset variables fall back to the defaults above.
        """
        defaults = cls()
        return cls(
            contract_addr=os.environ.get("STABLEPOOL_CONTRACT_ADDR", defaults.contract_addr),
            liquidity_token=os.environ.get("STABLEPOOL_LIQUIDITY_TOKEN", defaults.liquidity_token),
            factory_addr=os.environ.get("STABLEPOOL_FACTORY_ADDR", defaults.factory_addr),
            factory_owner=os.environ.get("STABLEPOOL_FACTORY_OWNER", defaults.factory_owner),
            asset0=os.environ.get("STABLEPOOL_ASSET0", defaults.asset0),
            asset1=os.environ.get("STABLEPOOL_ASSET1", defaults.asset1),
            precision0=int(os.environ.get("STABLEPOOL_PRECISION0", defaults.precision0)),
            precision1=int(os.environ.get("STABLEPOOL_PRECISION1", defaults.precision1)),
            lp_precision=int(os.environ.get("STABLEPOOL_LP_PRECISION", defaults.lp_precision)),
            amp=int(os.environ.get("STABLEPOOL_AMP", defaults.amp)),
            total_fee_rate=Decimal(os.environ.get("STABLEPOOL_TOTAL_FEE_RATE", defaults.total_fee_rate)),
            maker_fee_rate=Decimal(os.environ.get("STABLEPOOL_MAKER_FEE_RATE", defaults.maker_fee_rate)),
            fee_address=_env_optional("STABLEPOOL_FEE_ADDRESS"),
            rewarder=_env_optional("STABLEPOOL_REWARDER"),
            generator=_env_optional("STABLEPOOL_GENERATOR"),
            reward_holder=_env_optional("STABLEPOOL_REWARD_HOLDER"),
            reward_denom=os.environ.get("STABLEPOOL_REWARD_DENOM", defaults.reward_denom),
            host=os.environ.get("STABLEPOOL_HOST", defaults.host),
            port=int(os.environ.get("STABLEPOOL_PORT", defaults.port)),
            debug=_env_bool("STABLEPOOL_DEBUG"),
            log_level=os.environ.get("STABLEPOOL_LOG_LEVEL", defaults.log_level).lower(),
        )

    @property
    def asset_infos(self) -> tuple[AssetInfo, AssetInfo]:
        return _asset_info(self.asset0), _asset_info(self.asset1)

    @property
    def precisions(self) -> tuple[int, int]:
        return self.precision0, self.precision1

    @property
    def fee_info(self) -> FeeInfo:
        return FeeInfo(
            total_fee_rate=self.total_fee_rate,
            maker_fee_rate=self.maker_fee_rate,
            fee_address=self.fee_address,
        )
