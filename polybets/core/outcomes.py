import json
import logging
import math
from typing import Any

from ..polymarket.schemas import Outcome

logger = logging.getLogger(__name__)


def _decode_list(raw: Any) -> list:
    # Gamma usually ships '["Yes","No"]'; some payloads are already decoded.
    if raw is None or raw == "":
        return []
    value = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
    if not isinstance(value, list):
        raise ValueError(f"expected a list, got {type(value).__name__}")
    return value


def _parse_price(value: Any) -> float:
    if isinstance(value, bool) or not value:
        return 0.0
    try:
        price = float(value)
    except (TypeError, ValueError):
        return 0.0
    return price if math.isfinite(price) else 0.0


def parse_outcomes(raw_names: Any, raw_prices: Any, *, market_id: str | None = None) -> list[Outcome]:
    """Decode a market's outcome names and prices, most probable first.

    Any decoding problem yields an empty list for this market only.
    """
    try:
        names = _decode_list(raw_names)
        prices = _decode_list(raw_prices)
    except (ValueError, TypeError):
        logger.debug("polymarket_outcomes_malformed market_id=%s", market_id)
        return []

    outcomes = [
        Outcome(
            name="" if name is None else str(name),
            price=_parse_price(prices[idx] if idx < len(prices) else None),
        )
        for idx, name in enumerate(names)
    ]
    # sorted() is stable with reverse=True, so ties keep feed order.
    return sorted(outcomes, key=lambda outcome: outcome.price, reverse=True)
