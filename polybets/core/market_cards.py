import math
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal
from urllib.parse import quote

from ..polymarket.schemas import ParsedMarket
from ..settings import settings

DISPLAY_LIMIT = 5
MAX_EXTRA_OUTCOMES = 4
POSITIVE_PERCENT = 70
NEGATIVE_PERCENT = 30


@dataclass(frozen=True)
class OutcomeLabel:
    name: str
    percent: int


@dataclass(frozen=True)
class MarketCard:
    id: str
    title: str
    url: str
    top_outcome: OutcomeLabel | None
    tone: Literal["positive", "negative", "neutral"]
    secondary_outcome: OutcomeLabel | None
    extra_outcomes: tuple[OutcomeLabel, ...]
    more_outcomes: int
    volume_24h_label: str | None
    volume_label: str


def event_url(event_slug: str | None) -> str:
    base = settings.POLYMARKET_SITE_URL.rstrip("/")
    return f"{base}/event/{quote(str(event_slug or '').strip())}"


def percent(price: float) -> int:
    if not math.isfinite(price):
        return 0
    # Half-up: 0.125 -> 13.
    return int(Decimal(str(price * 100)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_compact_usd(value: float) -> str:
    value = float(value or 0.0)
    sign = "-" if value < 0 else ""
    value = abs(value)
    if value >= 1_000_000_000:
        return f"{sign}${_format_compact(value, 1_000_000_000, 'b')}"
    if value >= 1_000_000:
        return f"{sign}${_format_compact(value, 1_000_000, 'm')}"
    if value >= 1_000:
        return f"{sign}${_format_compact(value, 1_000, 'k')}"
    return f"{sign}${int(round(value))}"


def _format_compact(value: float, scale: int, suffix: str) -> str:
    scaled = value / scale
    if scaled.is_integer():
        return f"{int(scaled)}{suffix}"
    text = f"{scaled:.2f}".rstrip("0").rstrip(".")
    return f"{text}{suffix}"


def _tone(value: int | None) -> Literal["positive", "negative", "neutral"]:
    if value is None:
        return "neutral"
    if value >= POSITIVE_PERCENT:
        return "positive"
    if value <= NEGATIVE_PERCENT:
        return "negative"
    return "neutral"


def build_market_card(market: ParsedMarket) -> MarketCard:
    outcomes = market.outcomes
    top = outcomes[0] if outcomes else None
    top_label = OutcomeLabel(name=top.name or "Yes", percent=percent(top.price)) if top else None

    secondary = None
    if len(outcomes) == 2:
        secondary = OutcomeLabel(name=outcomes[1].name, percent=percent(outcomes[1].price))

    extra: tuple[OutcomeLabel, ...] = ()
    more = 0
    if len(outcomes) > 2:
        extra = tuple(
            OutcomeLabel(name=outcome.name, percent=percent(outcome.price))
            for outcome in outcomes[:MAX_EXTRA_OUTCOMES]
        )
        more = max(len(outcomes) - MAX_EXTRA_OUTCOMES, 0)

    return MarketCard(
        id=market.id,
        title=market.question or market.event_title,
        url=event_url(market.event_slug),
        top_outcome=top_label,
        tone=_tone(top_label.percent if top_label else None),
        secondary_outcome=secondary,
        extra_outcomes=extra,
        more_outcomes=more,
        volume_24h_label=format_compact_usd(market.volume24hr) if market.volume24hr > 0 else None,
        volume_label=format_compact_usd(market.volume),
    )


def build_market_cards(markets: Iterable[ParsedMarket], limit: int = DISPLAY_LIMIT) -> list[MarketCard]:
    cards = []
    for market in markets:
        if len(cards) >= limit:
            break
        cards.append(build_market_card(market))
    return cards
