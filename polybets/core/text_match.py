import re
from functools import lru_cache


@lru_cache(maxsize=1024)
def _boundary_pattern(term: str) -> re.Pattern[str]:
    # ASCII word characters only, so accented letters act as boundaries.
    return re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE | re.ASCII)


def word_boundary_match(text: str, term: str) -> bool:
    """Case-insensitive match of `term` in `text` on word boundaries.

    `term` is matched literally; "eth" matches "ETH." but not "method".
    """
    if not term:
        return False
    return _boundary_pattern(term).search(text or "") is not None
