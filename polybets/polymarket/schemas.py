import math
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _coerce_float(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        result = float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(result):
        return 0.0
    return result


def _coerce_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _coerce_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None


class _GammaModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Tag(_GammaModel):
    id: str = ""
    label: str = ""
    slug: str = ""

    @field_validator("id", "label", "slug", mode="before")
    @classmethod
    def _str_or_empty(cls, value):
        return _coerce_str(value)


class Market(_GammaModel):
    """One tradable contract inside an event.

    `outcomes` and `outcome_prices` keep Gamma's encoding (usually a
    JSON-string array such as '["0.12","0.88"]'); they are decoded lazily
    by `polybets.core.outcomes.parse_outcomes`.
    """

    id: str = ""
    question: str = ""
    condition_id: str = Field(default="", validation_alias=AliasChoices("conditionId", "condition_id"))
    slug: str = ""
    outcomes: Any = None
    outcome_prices: Any = Field(default=None, validation_alias=AliasChoices("outcomePrices", "outcome_prices"))
    volume: float = 0.0
    volume24hr: float = Field(default=0.0, validation_alias=AliasChoices("volume24hr", "volume24h"))
    liquidity: float = 0.0
    active: bool = False
    closed: bool = False
    image: str | None = None

    @field_validator("id", "question", "condition_id", "slug", mode="before")
    @classmethod
    def _str_or_empty(cls, value):
        return _coerce_str(value)

    @field_validator("volume", "volume24hr", "liquidity", mode="before")
    @classmethod
    def _float_or_zero(cls, value):
        return _coerce_float(value)

    @field_validator("active", "closed", mode="before")
    @classmethod
    def _flag(cls, value):
        return bool(value)

    @field_validator("image", mode="before")
    @classmethod
    def _optional_str(cls, value):
        return _coerce_optional_str(value)


class Event(_GammaModel):
    id: str = ""
    ticker: str | None = None
    slug: str = ""
    title: str = ""
    description: str = ""
    start_date: str | None = Field(default=None, validation_alias=AliasChoices("startDate", "start_date"))
    end_date: str | None = Field(default=None, validation_alias=AliasChoices("endDate", "end_date"))
    image: str | None = None
    icon: str | None = None
    active: bool = False
    closed: bool = False
    liquidity: float = 0.0
    volume: float = 0.0
    volume24hr: float = Field(default=0.0, validation_alias=AliasChoices("volume24hr", "volume24h"))
    markets: list[Market] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)

    @field_validator("id", "slug", "title", "description", mode="before")
    @classmethod
    def _str_or_empty(cls, value):
        return _coerce_str(value)

    @field_validator("ticker", "start_date", "end_date", "image", "icon", mode="before")
    @classmethod
    def _optional_str(cls, value):
        return _coerce_optional_str(value)

    @field_validator("liquidity", "volume", "volume24hr", mode="before")
    @classmethod
    def _float_or_zero(cls, value):
        return _coerce_float(value)

    @field_validator("active", "closed", mode="before")
    @classmethod
    def _flag(cls, value):
        return bool(value)

    @field_validator("markets", "tags", mode="before")
    @classmethod
    def _list_of_objects(cls, value):
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, (dict, BaseModel))]


class Outcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    price: float


class ParsedMarket(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    event_id: str
    event_title: str
    event_slug: str
    question: str
    slug: str
    outcomes: tuple[Outcome, ...] = ()
    volume: float = 0.0
    volume24hr: float = 0.0
    liquidity: float = 0.0
    active: bool = True
    closed: bool = False
    image: str | None = None
    event_image: str | None = None
