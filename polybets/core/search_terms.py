import re
from collections.abc import Sequence

SYMBOL_PLACEHOLDER = "-"
MAX_CHAIN_TERMS = 3

_NAME_SUFFIX_RE = re.compile(r"\s+(protocol|finance|network|chain|swap|dex)\Z", re.IGNORECASE)


def strip_name_suffix(name: str) -> str:
    """'uniswap protocol' -> 'uniswap'; names without a known suffix are returned as-is."""
    return _NAME_SUFFIX_RE.sub("", name)


def build_search_terms(
    name: str | None = None,
    symbol: str | None = None,
    chains: Sequence[str] | None = None,
) -> list[str]:
    terms: list[str] = []

    if name:
        lowered = name.lower()
        terms.append(lowered)
        stripped = strip_name_suffix(lowered)
        if stripped != lowered:
            terms.append(stripped)

    if symbol and symbol != SYMBOL_PLACEHOLDER:
        terms.append(symbol.lower())

    if chains:
        for chain in list(chains)[:MAX_CHAIN_TERMS]:
            if not chain:
                continue
            chain_lower = chain.lower()
            if chain_lower not in terms:
                terms.append(chain_lower)

    return [term for term in dict.fromkeys(terms) if len(term) > 1]
