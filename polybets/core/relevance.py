from collections.abc import Iterable

from .keywords import CRYPTO_KEYWORDS
from .text_match import word_boundary_match
from ..polymarket.schemas import Event

MIN_TERM_LENGTH = 2
MIN_PREFIX_TERM_LENGTH = 3


def normalize_terms(terms: Iterable[str]) -> list[str]:
    normalized = (str(term or "").lower().strip() for term in terms)
    return [term for term in normalized if len(term) >= MIN_TERM_LENGTH]


def event_text(event: Event) -> str:
    parts = [
        event.title,
        event.description,
        event.ticker or "",
        event.slug,
        *(tag.label for tag in event.tags),
    ]
    return " ".join(parts).lower()


def is_crypto_related(event: Event, normalized_terms: Iterable[str]) -> bool:
    """Topic gate: any static crypto keyword, else any caller term, on word boundaries."""
    text = event_text(event)
    if any(word_boundary_match(text, keyword) for keyword in CRYPTO_KEYWORDS):
        return True
    return any(
        len(term) >= MIN_TERM_LENGTH and word_boundary_match(text, term)
        for term in normalized_terms
    )


def matches_event(event: Event, normalized_terms: Iterable[str]) -> bool:
    """Asset gate: plain substring match on the event fields and tag labels.

    Terms of three or more characters also match as a prefix of any title
    word, so "eth" catches "Ethereum" in the title.
    """
    title = event.title.lower()
    fields = (
        title,
        event.description.lower(),
        (event.ticker or "").lower(),
        event.slug.lower(),
    )
    tags = [tag.label.lower() for tag in event.tags]
    title_words = title.split()

    for term in normalized_terms:
        if any(term in field for field in fields):
            return True
        if any(term in tag for tag in tags):
            return True
        if len(term) >= MIN_PREFIX_TERM_LENGTH and any(word.startswith(term) for word in title_words):
            return True
    return False
