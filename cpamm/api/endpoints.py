"""API endpoints for the pool harness service."""

from fastapi import APIRouter, Depends

from cpamm.api.host import PoolHost, get_default_host
from cpamm.models.api import (
    AccountView,
    AddLiquidityRequest,
    AddLiquidityResponse,
    EventsResponse,
    FaucetRequest,
    GovernorRequest,
    PoolView,
    QuoteResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    ReservesView,
    SetFeeRequest,
    SetTwapIntervalRequest,
    SwapRequest,
    SwapResponse,
    TwapView,
)
from cpamm.models.types import SwapDirection, normalize_address

router = APIRouter()


def get_host() -> PoolHost:
    """Dependency provider for the pool host.

    Override this in tests to inject a host with a manual clock:
        app.dependency_overrides[get_host] = lambda: host

    Returns:
        The host whose pool the request acts on.
    """
    return get_default_host()


def _twap_view(host: PoolHost) -> TwapView:
    sample = host.pool.get_twap()
    return TwapView(
        price_x=sample.price_x,
        price_y=sample.price_y,
        timestamp=sample.timestamp,
        next_sample_at=host.pool.twap_next_sample_at(),
        age_seconds=host.pool.twap_age(),
    )


@router.get("/pool")
async def pool_state(host: PoolHost = Depends(get_host)) -> PoolView:
    pool = host.pool
    reserve_x, reserve_y = pool.get_reserves()
    return PoolView(
        reserve_x=reserve_x,
        reserve_y=reserve_y,
        total_shares=pool.total_shares,
        fee_bps=pool.fee_bps,
        twap_interval_seconds=pool.twap_interval_seconds,
        governors=pool.governors(),
        twap=_twap_view(host),
    )


@router.get("/reserves")
async def reserves(host: PoolHost = Depends(get_host)) -> ReservesView:
    reserve_x, reserve_y = host.pool.get_reserves()
    return ReservesView(reserve_x=reserve_x, reserve_y=reserve_y)


@router.get("/twap")
async def twap(host: PoolHost = Depends(get_host)) -> TwapView:
    return _twap_view(host)


@router.get("/quote")
async def quote(
    amount_in: int,
    direction: SwapDirection,
    host: PoolHost = Depends(get_host),
) -> QuoteResponse:
    amount_out = host.pool.quote(amount_in, direction)
    return QuoteResponse(amount_in=amount_in, amount_out=amount_out, direction=direction)


@router.get("/accounts/{account}")
async def account_state(account: str, host: PoolHost = Depends(get_host)) -> AccountView:
    account = normalize_address(account)
    return AccountView(
        account=account,
        balance_x=host.token_x.balance_of(account),
        balance_y=host.token_y.balance_of(account),
        shares=host.pool.share_balance(account),
    )


@router.get("/events")
async def events(host: PoolHost = Depends(get_host)) -> EventsResponse:
    return EventsResponse(events=host.sink.events)


@router.post("/faucet")
async def faucet(request: FaucetRequest, host: PoolHost = Depends(get_host)) -> AccountView:
    """Mint test tokens and approve the pool to pull them."""
    account = normalize_address(request.account)
    async with host.lock:
        host.fund(account, int(request.amount_x), int(request.amount_y))
    return await account_state(account, host)


@router.post("/liquidity/add")
async def add_liquidity(
    request: AddLiquidityRequest, host: PoolHost = Depends(get_host)
) -> AddLiquidityResponse:
    async with host.lock:
        shares = host.pool.add_liquidity(
            request.caller, int(request.amount_x), int(request.amount_y)
        )
    return AddLiquidityResponse(shares=shares)


@router.post("/liquidity/remove")
async def remove_liquidity(
    request: RemoveLiquidityRequest, host: PoolHost = Depends(get_host)
) -> RemoveLiquidityResponse:
    async with host.lock:
        amount_x, amount_y = host.pool.remove_liquidity(request.caller, int(request.shares))
    return RemoveLiquidityResponse(amount_x=amount_x, amount_y=amount_y)


@router.post("/swap")
async def swap(request: SwapRequest, host: PoolHost = Depends(get_host)) -> SwapResponse:
    async with host.lock:
        result = host.pool.execute_swap(
            request.caller,
            int(request.amount_in),
            int(request.min_amount_out),
            request.direction,
        )
    return SwapResponse(amount_out=result.amount_out, twap_sampled=result.twap_sampled)


@router.post("/governance/fee", status_code=204)
async def set_fee(request: SetFeeRequest, host: PoolHost = Depends(get_host)) -> None:
    async with host.lock:
        host.pool.set_fee(request.caller, request.fee_bps)


@router.post("/governance/twap-interval", status_code=204)
async def set_twap_interval(
    request: SetTwapIntervalRequest, host: PoolHost = Depends(get_host)
) -> None:
    async with host.lock:
        host.pool.set_twap_interval(request.caller, request.seconds)


@router.post("/governance/governors/add", status_code=204)
async def add_governor(request: GovernorRequest, host: PoolHost = Depends(get_host)) -> None:
    async with host.lock:
        host.pool.add_governor(request.caller, request.account)


@router.post("/governance/governors/remove", status_code=204)
async def remove_governor(request: GovernorRequest, host: PoolHost = Depends(get_host)) -> None:
    async with host.lock:
        host.pool.remove_governor(request.caller, request.account)
