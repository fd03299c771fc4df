"""Turn one Gamma events batch into the ranked markets relevant to an asset.

The pipeline fetches exactly once, then runs pure computation:
classify -> match -> parse outcomes -> dedupe -> sort -> truncate.
Fetch failures degrade to an empty result and are never raised.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from .outcomes import parse_outcomes
from .relevance import is_crypto_related, matches_event, normalize_terms
from ..polymarket.client import PolymarketClient, parse_events
from ..polymarket.schemas import Event, Market, ParsedMarket

logger = logging.getLogger(__name__)

MAX_RESULTS = 10

SearchStatus = Literal["ok", "upstream_error"]
FetchEvents = Callable[[], Awaitable[Sequence[Any]]]


@dataclass(frozen=True)
class SearchResult:
    markets: list[ParsedMarket] = field(default_factory=list)
    status: SearchStatus = "ok"
    events_seen: int = 0

    @property
    def is_degraded(self) -> bool:
        return self.status != "ok"


def build_parsed_market(event: Event, market: Market) -> ParsedMarket:
    return ParsedMarket(
        id=market.id,
        event_id=event.id,
        event_title=event.title,
        event_slug=event.slug,
        question=market.question,
        slug=market.slug,
        outcomes=tuple(parse_outcomes(market.outcomes, market.outcome_prices, market_id=market.id)),
        volume=market.volume,
        volume24hr=market.volume24hr,
        liquidity=market.liquidity,
        active=market.active,
        closed=market.closed,
        image=market.image or event.image,
        event_image=event.image,
    )


def rank_markets(
    events: Iterable[Event],
    terms: Iterable[str],
    limit: int = MAX_RESULTS,
) -> list[ParsedMarket]:
    """Select, dedupe and rank the markets of `events` that match `terms`.

    Results are ordered by 24h volume, then all-time volume, both descending;
    equal keys keep feed order.
    """
    normalized_terms = normalize_terms(terms)
    results: list[ParsedMarket] = []
    seen_market_ids: set[str] = set()

    for event in events:
        if not is_crypto_related(event, normalized_terms):
            continue
        if not event.markets:
            continue
        if not matches_event(event, normalized_terms):
            continue

        for market in event.markets:
            if market.id in seen_market_ids:
                continue
            if not market.active or market.closed:
                continue
            seen_market_ids.add(market.id)
            results.append(build_parsed_market(event, market))

    results.sort(key=lambda m: (m.volume24hr, m.volume), reverse=True)
    return results[: max(int(limit), 0)]


async def search_events_detailed(
    terms: Sequence[str],
    fetch: FetchEvents | None = None,
    limit: int = MAX_RESULTS,
) -> SearchResult:
    fetch = fetch or PolymarketClient().fetch_events
    try:
        batch = await fetch()
    except Exception as exc:
        logger.warning("polymarket_events_fetch_failed error=%s detail=%s", type(exc).__name__, exc)
        return SearchResult(markets=[], status="upstream_error", events_seen=0)

    events = _coerce_events(batch)
    markets = rank_markets(events, terms, limit=limit)
    logger.info(
        "polymarket_bets_search_summary terms=%s events_seen=%s markets_kept=%s",
        ",".join(terms),
        len(events),
        len(markets),
    )
    return SearchResult(markets=markets, status="ok", events_seen=len(events))


async def search_events(
    terms: Sequence[str],
    fetch: FetchEvents | None = None,
    limit: int = MAX_RESULTS,
) -> list[ParsedMarket]:
    result = await search_events_detailed(terms, fetch=fetch, limit=limit)
    return result.markets


def _coerce_events(batch: Any) -> list[Event]:
    if not isinstance(batch, (list, tuple)):
        return []
    return parse_events(list(batch))
