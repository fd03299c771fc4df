import logging
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from tenacity import AsyncRetrying, retry_if_result, stop_after_attempt, wait_exponential

from ..cache import cache_get, cache_key, cache_set
from ..core.pipeline import FetchEvents, SearchResult, search_events_detailed
from ..core.search_terms import build_search_terms
from ..polymarket.schemas import ParsedMarket
from ..settings import settings

logger = logging.getLogger(__name__)

BETS_CACHE_PREFIX = "polymarket_bets"
RETRY_WAIT = wait_exponential(multiplier=0.5, min=0.5, max=4)


def bets_cache_key(terms: Sequence[str]) -> str:
    return cache_key(BETS_CACHE_PREFIX, ",".join(terms))


async def get_polymarket_bets(
    name: str | None = None,
    symbol: str | None = None,
    chains: Sequence[str] | None = None,
    *,
    fetch: FetchEvents | None = None,
) -> list[ParsedMarket]:
    """Ranked Polymarket markets for one asset, cached per search vocabulary.

    An asset without usable terms never reaches the Gamma API. Upstream
    failures are retried `BETS_FETCH_RETRIES` times, then answered from a
    stale cache entry when one exists, else with an empty list. Degraded
    results are never written to the cache.
    """
    terms = build_search_terms(name=name, symbol=symbol, chains=chains)
    if not terms:
        logger.debug("polymarket_bets_skipped reason=no_terms")
        return []

    key = bets_cache_key(terms)
    cached = await run_in_threadpool(cache_get, key)
    if cached and cached.is_fresh:
        markets = _markets_from_cache(cached.value)
        if markets is not None:
            return markets

    result = await search_with_retry(terms, fetch=fetch)
    if result.is_degraded:
        if cached and cached.is_stale:
            markets = _markets_from_cache(cached.value)
            if markets is not None:
                logger.warning("polymarket_bets_served_stale terms=%s", ",".join(terms))
                return markets
        logger.warning("polymarket_bets_upstream_unavailable terms=%s", ",".join(terms))
        return []

    await run_in_threadpool(cache_set, key, result.markets, settings.CACHE_TTL_BETS_SECONDS)
    return result.markets


async def search_with_retry(terms: Sequence[str], *, fetch: FetchEvents | None = None) -> SearchResult:
    attempts = max(int(settings.BETS_FETCH_RETRIES), 0) + 1
    retrying = AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=RETRY_WAIT,
        retry=retry_if_result(lambda result: result.is_degraded),
        retry_error_callback=lambda retry_state: retry_state.outcome.result(),
    )
    return await retrying(
        search_events_detailed,
        list(terms),
        fetch=fetch,
        limit=settings.BETS_MAX_RESULTS,
    )


def _markets_from_cache(value: Any) -> list[ParsedMarket] | None:
    if not isinstance(value, list):
        return None
    try:
        return [ParsedMarket.model_validate(item) for item in value]
    except ValidationError:
        logger.warning("polymarket_bets_cache_invalid")
        return None
