import argparse
import asyncio
import json

from fastapi.encoders import jsonable_encoder

from polybets.core.logging_config import configure_logging
from polybets.core.market_cards import build_market_card, format_compact_usd
from polybets.core.pipeline import MAX_RESULTS, search_events
from polybets.core.search_terms import build_search_terms


def main() -> None:
    parser = argparse.ArgumentParser(description="Find Polymarket markets relevant to a crypto asset")
    parser.add_argument("--name", help="Asset display name (e.g., 'Uniswap Protocol')")
    parser.add_argument("--symbol", help="Ticker symbol (e.g., 'UNI')")
    parser.add_argument("--chain", action="append", dest="chains", default=None, help="Chain name; repeatable")
    parser.add_argument("--limit", type=int, default=MAX_RESULTS)
    parser.add_argument("--json", action="store_true", help="Print the raw market list as JSON")
    args = parser.parse_args()

    configure_logging()

    terms = build_search_terms(name=args.name, symbol=args.symbol, chains=args.chains)
    if not terms:
        parser.error("at least one of --name, --symbol or --chain is required")

    markets = asyncio.run(search_events(terms, limit=args.limit))

    if args.json:
        print(json.dumps(jsonable_encoder(markets), indent=2))
        return

    if not markets:
        print("no relevant markets")
        return

    for market in markets:
        card = build_market_card(market)
        top = f"{card.top_outcome.percent}% {card.top_outcome.name}" if card.top_outcome else "-"
        print(
            f"{top:<16} {card.title}  24h:{format_compact_usd(market.volume24hr)}  {card.url}"
        )


if __name__ == "__main__":
    main()
