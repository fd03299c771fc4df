import logging
from typing import Any

import httpx
from fastapi import APIRouter, Depends, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ...core.market_cards import build_market_cards
from ...polymarket.client import PolymarketClient, build_events_params
from ...services.bets_service import get_polymarket_bets
from ...settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def get_polymarket_client() -> PolymarketClient:
    return PolymarketClient()


def _public_json(payload: Any) -> JSONResponse:
    max_age = max(int(settings.CACHE_TTL_BETS_SECONDS), 0)
    return JSONResponse(
        content=jsonable_encoder(payload),
        headers={"Cache-Control": f"public, max-age={max_age}"},
    )


@router.api_route("/api/polymarket/events", methods=PROXY_METHODS)
async def events_proxy(
    request: Request,
    limit: str | None = None,
    offset: str | None = None,
    closed: str | None = None,
    order: str | None = None,
    ascending: str | None = None,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    if request.method != "GET":
        return JSONResponse(
            status_code=405,
            content={"error": "Method Not Allowed"},
            headers={"Allow": "GET"},
        )

    params = build_events_params()
    overrides = {
        "limit": limit,
        "offset": offset,
        "closed": closed,
        "order": order,
        "ascending": ascending,
    }
    params.update({key: str(value) for key, value in overrides.items() if value})

    try:
        response = await client.proxy_events(params)
        if not response.is_success:
            return JSONResponse(
                status_code=response.status_code,
                content={"error": "Upstream error", "status": response.status_code},
            )
        data = response.json()
    except (httpx.HTTPError, ValueError):
        logger.exception("polymarket_events_proxy_failed")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch Polymarket events"})

    max_age = max(int(settings.EVENTS_PROXY_CACHE_SECONDS), 0)
    return JSONResponse(
        content=data,
        headers={"Cache-Control": f"s-maxage={max_age}, stale-while-revalidate={max_age}"},
    )


@router.get("/polymarket/bets")
async def polymarket_bets(
    name: str | None = None,
    symbol: str | None = None,
    chains: list[str] | None = Query(default=None),
):
    markets = await get_polymarket_bets(name=name, symbol=symbol, chains=chains)
    return _public_json(markets)


@router.get("/polymarket/cards")
async def polymarket_cards(
    name: str | None = None,
    symbol: str | None = None,
    chains: list[str] | None = Query(default=None),
):
    markets = await get_polymarket_bets(name=name, symbol=symbol, chains=chains)
    cards = build_market_cards(markets, limit=settings.BETS_DISPLAY_LIMIT)
    return _public_json(cards)
