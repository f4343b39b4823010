"""Pool dataclasses.

Data structures describing the pooled assets and the facts read from
external collaborators (balances, precisions, share supply, fees) at the
time an operation runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from stablepool.errors import AssetMismatch


@dataclass(frozen=True)
class AssetInfo:
    """Identifies a pooled asset.

    Attributes:
        kind: "native" for a bank denomination, "token" for a token contract
        id: The denomination or the token contract address (lowercase)
    """

    kind: Literal["native", "token"]
    id: str

    @classmethod
    def native(cls, denom: str) -> AssetInfo:
        return cls(kind="native", id=denom)

    @classmethod
    def token(cls, contract_addr: str) -> AssetInfo:
        return cls(kind="token", id=contract_addr.lower())

    @property
    def is_native(self) -> bool:
        return self.kind == "native"

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class Asset:
    """An amount of a specific asset, in the asset's native precision."""

    info: AssetInfo
    amount: int

    def __str__(self) -> str:
        return f"{self.amount}{self.info}"


@dataclass(frozen=True)
class FeeInfo:
    """Fee configuration supplied by the factory.

    Attributes:
        total_fee_rate: Commission taken from every swap, in [0, 1)
        maker_fee_rate: Share of the commission carved out for fee_address
        fee_address: Recipient of the maker fee, or None to disable it
    """

    total_fee_rate: Decimal
    maker_fee_rate: Decimal = Decimal(0)
    fee_address: str | None = None


@dataclass(frozen=True)
class PoolSnapshot:
    """Collaborator-owned facts about the pool at call time.

    Reserves are the balances *before* the action being priced: the
    calling layer credits deposits and offers only after the operation
    returns.

    Attributes:
        reserves: The two pooled assets with their balances
        precisions: Decimal precision of each asset, same order as reserves
        total_share: Outstanding share supply
        lp_precision: Decimal precision of the share token
        fee_info: Swap fee configuration
    """

    reserves: tuple[Asset, Asset]
    precisions: tuple[int, int]
    total_share: int
    lp_precision: int
    fee_info: FeeInfo

    def index_of(self, info: AssetInfo) -> int:
        """Position of an asset in this pool.

        Raises:
            AssetMismatch: If the asset does not belong to the pool
        """
        for i, reserve in enumerate(self.reserves):
            if reserve.info == info:
                return i
        raise AssetMismatch(f"Asset {info} does not belong to this pair")

    def balances(self) -> tuple[int, int]:
        return self.reserves[0].amount, self.reserves[1].amount

    def offer_and_ask(self, offer_info: AssetInfo) -> tuple[int, int]:
        """Indices (offer, ask) for a swap offering offer_info."""
        offer_index = self.index_of(offer_info)
        return offer_index, 1 - offer_index
