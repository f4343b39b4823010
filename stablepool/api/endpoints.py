"""API endpoints for the stable pair."""

import structlog
from fastapi import APIRouter, Depends, Query

from stablepool import pair
from stablepool.models.messages import (
    AccrueRewardsRequest,
    AccrueRewardsResponse,
    AmpPhase,
    AssetInfoModel,
    AssetModel,
    AssetsResponse,
    ClaimRewardRequest,
    ConfigResponse,
    CumulativePricesResponse,
    PendingRewardResponse,
    PoolResponse,
    ProvideLiquidityRequest,
    ProvideLiquidityResponse,
    ReverseSimulationRequest,
    ReverseSimulationResponse,
    RewardAmountResponse,
    SettleRewardsRequest,
    SimulationRequest,
    SimulationResponse,
    StartAmpRequest,
    StopAmpRequest,
    SwapRequest,
    SwapResponse,
    UpdateRewarderRequest,
    WithdrawLiquidityRequest,
)
from stablepool.service import PairService, get_default_service

logger = structlog.get_logger()

router = APIRouter()


def get_service() -> PairService:
    """Dependency provider for the pair service.

    Override this in tests to inject a service with its own clock and
    balances:
        app.dependency_overrides[get_service] = lambda: service

    Returns:
        The pair service to use for requests.
    """
    return get_default_service()


def _config_response(view: pair.ConfigView) -> ConfigResponse:
    return ConfigResponse(
        block_time_last=view.block_time_last,
        amp=str(view.amp),
        amp_phase=AmpPhase(view.amp_phase.value),
        rewarder=view.rewarder,
        generator=view.generator,
    )


# --- Queries ---


@router.get("/pool")
def get_pool(service: PairService = Depends(get_service)) -> PoolResponse:
    """Pooled assets and total share supply."""
    view = service.query_pool()
    return PoolResponse(
        assets=[AssetModel.from_domain(asset) for asset in view.assets],
        total_share=view.total_share,
    )


@router.get("/config")
def get_config(service: PairService = Depends(get_service)) -> ConfigResponse:
    """Effective amp, ramp phase and reward collaborators."""
    return _config_response(service.query_config())


@router.get("/share")
def get_share(
    amount: int = Query(ge=0, description="Share amount to value"),
    service: PairService = Depends(get_service),
) -> AssetsResponse:
    """Assets returned for burning `amount` shares."""
    assets = service.query_share(amount)
    return AssetsResponse(assets=[AssetModel.from_domain(asset) for asset in assets])


@router.get("/cumulative-prices")
def get_cumulative_prices(service: PairService = Depends(get_service)) -> CumulativePricesResponse:
    """Oracle accumulators as of now."""
    prices = service.cumulative_prices()
    return CumulativePricesResponse(
        assets=[AssetModel.from_domain(asset) for asset in prices.assets],
        total_share=prices.total_share,
        price0_cumulative_last=prices.price0_cumulative_last,
        price1_cumulative_last=prices.price1_cumulative_last,
    )


@router.post("/simulation")
def simulation(
    request: SimulationRequest, service: PairService = Depends(get_service)
) -> SimulationResponse:
    amounts = service.simulate_swap(request.offer_asset.to_domain())
    return SimulationResponse(
        return_amount=amounts.return_amount,
        spread_amount=amounts.spread_amount,
        commission_amount=amounts.commission_amount,
    )


@router.post("/reverse-simulation")
def reverse_simulation(
    request: ReverseSimulationRequest, service: PairService = Depends(get_service)
) -> ReverseSimulationResponse:
    amounts = service.simulate_reverse_swap(request.ask_asset.to_domain())
    return ReverseSimulationResponse(
        offer_amount=amounts.offer_amount,
        spread_amount=amounts.spread_amount,
        commission_amount=amounts.commission_amount,
    )


# --- Execution ---


@router.post("/swap")
def swap(request: SwapRequest, service: PairService = Depends(get_service)) -> SwapResponse:
    """Execute a swap.

    Error Handling:
        - Invalid request schema: 422 (Pydantic)
        - Pair errors (spread exceeded, unknown asset, ...): 400
    """
    outcome = service.swap(
        request.offer_asset.to_domain(),
        request.sender,
        belief_price=request.belief_price_decimal,
        max_spread=request.max_spread_decimal,
        to=request.to,
    )
    return SwapResponse(
        ask_asset=AssetInfoModel.from_domain(outcome.ask_info),
        return_amount=outcome.return_amount,
        spread_amount=outcome.spread_amount,
        commission_amount=outcome.commission_amount,
        maker_fee_amount=outcome.maker_fee_amount,
    )


@router.post("/provide-liquidity")
def provide_liquidity(
    request: ProvideLiquidityRequest, service: PairService = Depends(get_service)
) -> ProvideLiquidityResponse:
    assets = (request.assets[0].to_domain(), request.assets[1].to_domain())
    outcome = service.provide_liquidity(
        assets,
        request.sender,
        receiver=request.receiver,
        auto_stake=request.auto_stake,
    )
    return ProvideLiquidityResponse(share=outcome.share)


@router.post("/withdraw-liquidity")
def withdraw_liquidity(
    request: WithdrawLiquidityRequest, service: PairService = Depends(get_service)
) -> AssetsResponse:
    outcome = service.withdraw_liquidity(request.sender, int(request.amount))
    return AssetsResponse(assets=[AssetModel.from_domain(asset) for asset in outcome.refund_assets])


# --- Amp administration ---


@router.post("/amp/start")
def start_amp(request: StartAmpRequest, service: PairService = Depends(get_service)) -> ConfigResponse:
    params = pair.StartChangingAmp(next_amp=request.next_amp, next_amp_time=request.next_amp_time)
    return _config_response(service.update_config(request.sender, params))


@router.post("/amp/stop")
def stop_amp(request: StopAmpRequest, service: PairService = Depends(get_service)) -> ConfigResponse:
    return _config_response(service.update_config(request.sender, pair.StopChangingAmp()))


# --- Rewards ---


@router.post("/rewards/accrue")
def accrue_rewards(
    request: AccrueRewardsRequest, service: PairService = Depends(get_service)
) -> AccrueRewardsResponse:
    """Accrue rewards that reached the holder; pair or generator only."""
    global_index = service.accrue_rewards(request.sender, int(request.previous_balance))
    return AccrueRewardsResponse(global_index=global_index)


@router.post("/rewards/settle")
def settle_rewards(
    request: SettleRewardsRequest, service: PairService = Depends(get_service)
) -> RewardAmountResponse:
    amount = service.settle_rewards(request.sender, request.user, request.receiver)
    return RewardAmountResponse(amount=amount)


@router.post("/rewards/claim")
def claim_rewards(
    request: ClaimRewardRequest, service: PairService = Depends(get_service)
) -> RewardAmountResponse:
    if request.user is not None:
        paid = service.claim_reward_by_generator(request.sender, request.user)
    else:
        paid = service.claim_reward(request.sender, request.receiver)
    logger.info("reward_claim_served", sender=request.sender, user=request.user, paid=paid)
    return RewardAmountResponse(amount=paid)


@router.get("/rewards/pending/{user}")
def pending_reward(user: str, service: PairService = Depends(get_service)) -> PendingRewardResponse:
    return PendingRewardResponse(asset=AssetModel.from_domain(service.pending_reward(user)))


@router.post("/rewarder")
def update_rewarder(
    request: UpdateRewarderRequest, service: PairService = Depends(get_service)
) -> ConfigResponse:
    params = pair.UpdateRewarder(address=request.address)
    return _config_response(service.update_config(request.sender, params))
