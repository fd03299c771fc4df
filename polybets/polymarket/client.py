import asyncio
import logging
import time
from contextlib import nullcontext
from typing import Any

import httpx
from pydantic import ValidationError

from .circuit import CircuitBreaker
from .schemas import Event
from ..settings import settings

logger = logging.getLogger(__name__)

GAMMA_BREAKER = CircuitBreaker(
    "polymarket",
    settings.POLY_CIRCUIT_MAX_FAILURES,
    settings.POLY_CIRCUIT_RESET_SECONDS,
)
# <= 0 disables the limit
GAMMA_SLOTS = (
    asyncio.Semaphore(settings.EXTERNAL_MAX_CONCURRENT_POLY_CALLS)
    if settings.EXTERNAL_MAX_CONCURRENT_POLY_CALLS > 0
    else None
)


class PolymarketError(Exception):
    """Raised when the Gamma events feed cannot be fetched."""


class PolymarketUnavailable(PolymarketError):
    """Raised without a request when the Gamma circuit breaker is open."""


class PolymarketClient:
    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or settings.POLYMARKET_BASE_URL).rstrip("/")
        self.timeout = settings.POLY_TIMEOUT_SECONDS if timeout is None else timeout

    @property
    def events_url(self) -> str:
        return f"{self.base_url}/events"

    async def fetch_events(
        self,
        limit: int | None = None,
        offset: int | None = None,
        closed: bool | None = None,
        order: str | None = None,
        ascending: bool | None = None,
    ) -> list[Event]:
        """
        Fetch one page of events from the Gamma API:
        - GET /events?limit=200&offset=0&closed=false&order=volume24hr&ascending=false
        - Each event contains a list of 'markets'
        - Each market carries outcomes/outcomePrices as JSON-string arrays

        Raises PolymarketError on transport, HTTP or decoding failures. Callers
        that prefer an empty batch catch it themselves.
        """
        if not GAMMA_BREAKER.allow():
            logger.warning("polymarket_circuit_open")
            raise PolymarketUnavailable("polymarket circuit open")

        params = build_events_params(
            limit=limit,
            offset=offset,
            closed=closed,
            order=order,
            ascending=ascending,
        )
        try:
            raw_events = await self._fetch_events_page(params)
        except PolymarketError:
            GAMMA_BREAKER.record_failure()
            raise
        GAMMA_BREAKER.record_success()

        events = parse_events(raw_events)
        logger.info(
            "polymarket_events_fetched events_raw=%s events_parsed=%s limit=%s offset=%s",
            len(raw_events),
            len(events),
            params["limit"],
            params["offset"],
        )
        return events

    async def _fetch_events_page(self, params: dict[str, str]) -> list[Any]:
        started = time.monotonic()
        try:
            r = await self._get_events(params)
            r.raise_for_status()
            events = r.json()
        except httpx.HTTPStatusError as exc:
            raise PolymarketError(f"gamma events returned {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "gamma_request_exception url=%s error=%s latency_ms=%s",
                self.events_url,
                type(exc).__name__,
                int((time.monotonic() - started) * 1000),
            )
            raise PolymarketError(f"gamma events request failed: {type(exc).__name__}") from exc
        return events if isinstance(events, list) else []

    async def proxy_events(self, params: dict[str, str]) -> httpx.Response:
        """Forward a raw /events query and return the upstream response untouched."""
        return await self._get_events(params)

    async def _get_events(self, params: dict[str, str]) -> httpx.Response:
        started = time.monotonic()
        async with GAMMA_SLOTS or nullcontext():
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.events_url, params=params)
        log_upstream_response(response, time.monotonic() - started)
        return response


def log_upstream_response(response: httpx.Response, elapsed_seconds: float) -> None:
    """Warn about Gamma responses that failed or took longer than the slow threshold."""
    threshold = settings.HTTPX_SLOW_REQUEST_THRESHOLD_SECONDS
    slow = 0 < threshold <= elapsed_seconds
    if response.is_success and not slow:
        return
    logger.warning(
        "gamma_request_%s url=%s status=%s latency_ms=%s",
        "slow" if response.is_success else "error",
        response.request.url,
        response.status_code,
        int(elapsed_seconds * 1000),
    )


def build_events_params(
    limit: int | None = None,
    offset: int | None = None,
    closed: bool | None = None,
    order: str | None = None,
    ascending: bool | None = None,
) -> dict[str, str]:
    limit = settings.POLY_EVENTS_LIMIT if limit is None else limit
    offset = settings.POLY_EVENTS_OFFSET if offset is None else offset
    closed = settings.POLY_EVENTS_CLOSED if closed is None else closed
    order = settings.POLY_EVENTS_ORDER if order is None else order
    ascending = settings.POLY_EVENTS_ASCENDING if ascending is None else ascending

    params: dict[str, str] = {
        "limit": str(_coerce_non_negative_int(limit)),
        "offset": str(_coerce_non_negative_int(offset)),
        "closed": "true" if closed else "false",
    }
    if order:
        params["order"] = order
    if ascending is not None:
        params["ascending"] = "true" if ascending else "false"
    return params


def parse_events(raw_events: list[Any]) -> list[Event]:
    events: list[Event] = []
    skipped = 0
    for raw in raw_events:
        if isinstance(raw, Event):
            events.append(raw)
            continue
        if not isinstance(raw, dict):
            skipped += 1
            continue
        try:
            events.append(Event.model_validate(raw))
        except ValidationError:
            skipped += 1
            logger.warning("polymarket_event_invalid event_id=%s", raw.get("id"))
    if skipped:
        logger.info("polymarket_events_skipped count=%s", skipped)
    return events


def _coerce_non_negative_int(value: int | None) -> int:
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0
