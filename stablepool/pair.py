"""Stable pair operations.

Every operation is a pure function of the current PoolState, a
PoolSnapshot of collaborator-owned facts (balances before the action,
precisions, share supply, fees) and the current Unix time. Mutating
operations return an outcome carrying the new state and the effects the
caller must execute; nothing is written if the operation raises.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal

import structlog

from stablepool.constants import AMP_PRECISION, DEFAULT_REWARD_DENOM
from stablepool.errors import AssetMismatch, AutoStakeError, DoublingAssets, InvalidZeroAmount, Unauthorized
from stablepool.pool.amp import AmpRamp, RampPhase
from stablepool.pool.effects import BurnShares, Effect, MintShares, StakeShares, Transfer, TransferFrom
from stablepool.pool.liquidity import compute_mint_amount, get_share_in_assets
from stablepool.pool.oracle import accumulate_prices
from stablepool.pool.state import PairInfo, PoolState
from stablepool.pool.swap import (
    ReverseSwapAmounts,
    SwapAmounts,
    assert_max_spread,
    calculate_maker_fee,
    compute_offer_amount,
    compute_swap,
)
from stablepool.pool.types import Asset, AssetInfo, PoolSnapshot

logger = structlog.get_logger()


# --- Outcomes ---


@dataclass(frozen=True)
class SwapOutcome:
    """Result of a swap. Amounts are in ask-asset precision."""

    state: PoolState
    effects: tuple[Effect, ...]
    ask_info: AssetInfo
    return_amount: int
    spread_amount: int
    commission_amount: int
    maker_fee_amount: int


@dataclass(frozen=True)
class ProvideOutcome:
    state: PoolState
    effects: tuple[Effect, ...]
    share: int


@dataclass(frozen=True)
class WithdrawOutcome:
    state: PoolState
    effects: tuple[Effect, ...]
    refund_assets: tuple[Asset, Asset]


@dataclass(frozen=True)
class PoolView:
    assets: tuple[Asset, Asset]
    total_share: int


@dataclass(frozen=True)
class CumulativePrices:
    """Oracle accumulators extended to the query time.

    Includes the period since the last recorded update, so two samples can
    be differenced without waiting for a balance-changing action.
    """

    assets: tuple[Asset, Asset]
    total_share: int
    price0_cumulative_last: int
    price1_cumulative_last: int


@dataclass(frozen=True)
class ConfigView:
    """Pair configuration as reported to clients.

    Attributes:
        block_time_last: Last time the oracle was advanced
        amp: Effective amp, unscaled (e.g. Decimal("100.5"))
        amp_phase: Whether a ramp is in progress
        rewarder: External reward source
        generator: Staking contract
    """

    block_time_last: int
    amp: Decimal
    amp_phase: RampPhase
    rewarder: str | None
    generator: str | None


# --- Config update parameters ---


@dataclass(frozen=True)
class StartChangingAmp:
    """Ramp to next_amp (unscaled), ending at next_amp_time."""

    next_amp: int
    next_amp_time: int


@dataclass(frozen=True)
class StopChangingAmp:
    """Freeze the amp at its current value."""


@dataclass(frozen=True)
class UpdateRewarder:
    """Point reward claims at a new external rewarder."""

    address: str


UpdateParams = StartChangingAmp | StopChangingAmp | UpdateRewarder


# --- Construction ---


def instantiate(
    contract_addr: str,
    liquidity_token: str,
    asset_infos: tuple[AssetInfo, AssetInfo],
    factory_addr: str,
    amp: int,
    now: int,
    rewarder: str | None = None,
    generator: str | None = None,
    reward_holder: str | None = None,
    reward_asset: AssetInfo | None = None,
) -> PoolState:
    """Create the state of a new pair.

    Args:
        contract_addr: Address of the pair
        liquidity_token: Address of its share token
        asset_infos: The two pooled assets
        factory_addr: Factory whose owner administers the pair
        amp: Initial amp, unscaled
        now: Creation time
        rewarder: External reward source, if rewards are enabled
        generator: Staking contract, if any
        reward_holder: Account receiving external rewards
        reward_asset: Asset the rewards are paid in (default: native uusd)

    Raises:
        DoublingAssets: If both assets are the same
        IncorrectAmp: If amp is zero or above MAX_AMP
    """
    if asset_infos[0] == asset_infos[1]:
        raise DoublingAssets(f"Pair assets must differ, got {asset_infos[0]} twice")

    state = PoolState(
        pair_info=PairInfo(
            contract_addr=contract_addr,
            liquidity_token=liquidity_token,
            asset_infos=asset_infos,
        ),
        factory_addr=factory_addr,
        amp=AmpRamp.fixed(amp, now),
        rewarder=rewarder,
        generator=generator,
        reward_holder=reward_holder,
        reward_asset=reward_asset or AssetInfo.native(DEFAULT_REWARD_DENOM),
    )
    logger.info(
        "pair_instantiated",
        contract_addr=contract_addr,
        assets=[str(info) for info in asset_infos],
        amp=amp,
    )
    return state


# --- Helpers ---


def _advance_oracle(state: PoolState, snapshot: PoolSnapshot, now: int) -> PoolState:
    x, y = snapshot.balances()
    oracle = accumulate_prices(
        state.oracle,
        state.amp,
        x,
        snapshot.precisions[0],
        y,
        snapshot.precisions[1],
        now,
    )
    if oracle is None:
        return state
    return replace(state, oracle=oracle)


def _swap_amounts(
    state: PoolState, snapshot: PoolSnapshot, offer_asset: Asset, now: int
) -> tuple[int, SwapAmounts]:
    offer_index, ask_index = snapshot.offer_and_ask(offer_asset.info)
    offer_pool = snapshot.reserves[offer_index]
    ask_pool = snapshot.reserves[ask_index]

    amounts = compute_swap(
        offer_pool.amount,
        snapshot.precisions[offer_index],
        ask_pool.amount,
        snapshot.precisions[ask_index],
        offer_asset.amount,
        snapshot.fee_info.total_fee_rate,
        state.amp.current_amp(now),
    )
    return ask_index, amounts


# --- Swaps ---


def swap(
    state: PoolState,
    snapshot: PoolSnapshot,
    offer_asset: Asset,
    sender: str,
    now: int,
    belief_price: Decimal | None = None,
    max_spread: Decimal | None = None,
    to: str | None = None,
) -> SwapOutcome:
    """Swap offer_asset for the other pooled asset.

    The offered amount must already be on its way to the pair; snapshot
    reserves exclude it. The return goes to `to` (default: sender) and the
    maker fee, if any, to the fee address. The commission otherwise stays
    in the pool.

    Raises:
        InvalidZeroAmount: If nothing is offered
        AssetMismatch: If offer_asset is not part of the pair
        MaxSpreadAssertion, AllowedSpreadAssertion: From the slippage guard
    """
    if offer_asset.amount == 0:
        raise InvalidZeroAmount("Offer amount must be positive")

    ask_index, amounts = _swap_amounts(state, snapshot, offer_asset, now)
    ask_info = snapshot.reserves[ask_index].info

    # The guard compares against the output before commission
    assert_max_spread(
        belief_price,
        max_spread,
        offer_asset.amount,
        amounts.return_amount + amounts.commission_amount,
        amounts.spread_amount,
    )

    receiver = to or sender
    effects: list[Effect] = [
        Transfer(asset=Asset(info=ask_info, amount=amounts.return_amount), recipient=receiver)
    ]

    maker_fee_amount = 0
    fee_address = snapshot.fee_info.fee_address
    if fee_address is not None:
        maker_fee = calculate_maker_fee(
            ask_info, amounts.commission_amount, snapshot.fee_info.maker_fee_rate
        )
        if maker_fee is not None:
            effects.append(Transfer(asset=maker_fee, recipient=fee_address))
            maker_fee_amount = maker_fee.amount

    new_state = _advance_oracle(state, snapshot, now)

    logger.info(
        "swap",
        sender=sender,
        receiver=receiver,
        offer_asset=str(offer_asset.info),
        ask_asset=str(ask_info),
        offer_amount=offer_asset.amount,
        return_amount=amounts.return_amount,
        spread_amount=amounts.spread_amount,
        commission_amount=amounts.commission_amount,
        maker_fee_amount=maker_fee_amount,
    )

    return SwapOutcome(
        state=new_state,
        effects=tuple(effects),
        ask_info=ask_info,
        return_amount=amounts.return_amount,
        spread_amount=amounts.spread_amount,
        commission_amount=amounts.commission_amount,
        maker_fee_amount=maker_fee_amount,
    )


def simulate_swap(state: PoolState, snapshot: PoolSnapshot, offer_asset: Asset, now: int) -> SwapAmounts:
    """Price a swap of offer_asset without executing it."""
    _, amounts = _swap_amounts(state, snapshot, offer_asset, now)
    return amounts


def simulate_reverse_swap(
    state: PoolState, snapshot: PoolSnapshot, ask_asset: Asset, now: int
) -> ReverseSwapAmounts:
    """Offer needed to receive ask_asset after commission.

    Raises:
        AssetMismatch: If ask_asset is not part of the pair
        ZeroBalanceError: If the ask amount would drain the pool
    """
    ask_index = snapshot.index_of(ask_asset.info)
    offer_index = 1 - ask_index

    return compute_offer_amount(
        snapshot.reserves[offer_index].amount,
        snapshot.precisions[offer_index],
        snapshot.reserves[ask_index].amount,
        snapshot.precisions[ask_index],
        ask_asset.amount,
        snapshot.fee_info.total_fee_rate,
        state.amp.current_amp(now),
    )


# --- Liquidity ---


def provide_liquidity(
    state: PoolState,
    snapshot: PoolSnapshot,
    assets: tuple[Asset, Asset],
    sender: str,
    now: int,
    receiver: str | None = None,
    auto_stake: bool = False,
) -> ProvideOutcome:
    """Deposit both assets and mint shares.

    Token legs are pulled from the sender with TransferFrom effects; native
    legs are expected to arrive with the call. With auto_stake the shares
    are minted to the pair and staked in the generator for the receiver.

    Raises:
        AssetMismatch: If assets do not match the pooled assets
        InvalidZeroAmount: If either leg is zero
        LiquidityAmountTooSmall: If no share would be minted
        AutoStakeError: If auto_stake is set but no generator is configured
    """
    deposits = []
    for reserve in snapshot.reserves:
        matching = [asset.amount for asset in assets if asset.info == reserve.info]
        if not matching:
            raise AssetMismatch(f"Deposit is missing pooled asset {reserve.info}")
        deposits.append(matching[0])
    # Reject anything outside the pair
    for asset in assets:
        snapshot.index_of(asset.info)

    deposit_pair = (deposits[0], deposits[1])
    share = compute_mint_amount(
        snapshot.balances(),
        snapshot.precisions,
        deposit_pair,
        snapshot.total_share,
        snapshot.lp_precision,
        state.amp.current_amp(now),
    )

    contract_addr = state.pair_info.contract_addr
    receiver = receiver or sender

    effects: list[Effect] = [
        TransferFrom(asset=Asset(info=reserve.info, amount=amount), owner=sender, recipient=contract_addr)
        for reserve, amount in zip(snapshot.reserves, deposit_pair, strict=True)
        if not reserve.info.is_native
    ]

    if auto_stake:
        if state.generator is None:
            raise AutoStakeError("Auto-stake requested but the pair has no generator")
        effects.append(MintShares(recipient=contract_addr, amount=share))
        effects.append(StakeShares(generator=state.generator, beneficiary=receiver, amount=share))
    else:
        effects.append(MintShares(recipient=receiver, amount=share))

    new_state = _advance_oracle(state, snapshot, now)

    logger.info(
        "provide_liquidity",
        sender=sender,
        receiver=receiver,
        deposits=deposit_pair,
        share=share,
        auto_stake=auto_stake,
    )
    return ProvideOutcome(state=new_state, effects=tuple(effects), share=share)


def withdraw_liquidity(
    state: PoolState,
    snapshot: PoolSnapshot,
    sender: str,
    amount: int,
    caller: str,
    now: int,
) -> WithdrawOutcome:
    """Burn amount shares and refund a proportional slice of both reserves.

    Shares reach the pair through the share token, so caller must be the
    share token; sender is the account that sent them.

    Raises:
        Unauthorized: If caller is not the share token
    """
    if caller != state.pair_info.liquidity_token:
        raise Unauthorized("Only the share token can withdraw liquidity")

    refund_assets = query_share(snapshot, amount)
    new_state = _advance_oracle(state, snapshot, now)

    effects: tuple[Effect, ...] = (
        Transfer(asset=refund_assets[0], recipient=sender),
        Transfer(asset=refund_assets[1], recipient=sender),
        BurnShares(amount=amount),
    )

    logger.info(
        "withdraw_liquidity",
        sender=sender,
        withdrawn_share=amount,
        refund_assets=[str(asset) for asset in refund_assets],
    )
    return WithdrawOutcome(state=new_state, effects=effects, refund_assets=refund_assets)


# --- Queries ---


def query_pool(snapshot: PoolSnapshot) -> PoolView:
    return PoolView(assets=snapshot.reserves, total_share=snapshot.total_share)


def query_share(snapshot: PoolSnapshot, amount: int) -> tuple[Asset, Asset]:
    """Assets that burning amount shares would return."""
    refund_0, refund_1 = get_share_in_assets(snapshot.balances(), amount, snapshot.total_share)
    return (
        Asset(info=snapshot.reserves[0].info, amount=refund_0),
        Asset(info=snapshot.reserves[1].info, amount=refund_1),
    )


def query_config(state: PoolState, now: int) -> ConfigView:
    return ConfigView(
        block_time_last=state.oracle.block_time_last,
        amp=Decimal(state.amp.current_amp(now)) / AMP_PRECISION,
        amp_phase=state.amp.phase(now),
        rewarder=state.rewarder,
        generator=state.generator,
    )


def cumulative_prices(state: PoolState, snapshot: PoolSnapshot, now: int) -> CumulativePrices:
    oracle = _advance_oracle(state, snapshot, now).oracle
    return CumulativePrices(
        assets=snapshot.reserves,
        total_share=snapshot.total_share,
        price0_cumulative_last=oracle.price0_cumulative_last,
        price1_cumulative_last=oracle.price1_cumulative_last,
    )


# --- Administration ---


def start_amp_ramp(state: PoolState, next_amp: int, next_amp_time: int, now: int) -> PoolState:
    return replace(state, amp=state.amp.start(next_amp, next_amp_time, now))


def stop_amp_ramp(state: PoolState, now: int) -> PoolState:
    return replace(state, amp=state.amp.stop(now))


def update_config(
    state: PoolState,
    sender: str,
    factory_owner: str,
    params: UpdateParams,
    now: int,
) -> PoolState:
    """Apply an owner-only configuration change.

    Raises:
        Unauthorized: If sender is not the factory owner
    """
    if sender != factory_owner:
        raise Unauthorized("Only the factory owner can update the pair config")

    if isinstance(params, StartChangingAmp):
        return start_amp_ramp(state, params.next_amp, params.next_amp_time, now)
    if isinstance(params, StopChangingAmp):
        return stop_amp_ramp(state, now)
    if isinstance(params, UpdateRewarder):
        logger.info("rewarder_updated", rewarder=params.address)
        return replace(state, rewarder=params.address)
    raise TypeError(f"Unknown config update: {type(params).__name__}")
