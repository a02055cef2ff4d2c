"""Normalized market record and the value-parsing rules shared by providers."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Coin(BaseModel):
    """A tracked coin from the coin config."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    symbol: str
    name: str
    image: str = Field('', validation_alias=AliasChoices('img_url', 'image'))

    @field_validator('symbol')
    @classmethod
    def _upper_symbol(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'Coin':
        return cls.model_validate(raw)


@dataclass
class MarketRecord:
    """Provider-agnostic market snapshot of one asset.

    Parameters
    ----------
    id : str
        Provider- or config-assigned identifier
    symbol : str
        Upper-case ticker
    name : str
        Display name
    image : str
        Icon URL, empty when unknown
    price : float
        Current price in the quote currency
    market_cap : float
        Market capitalization, 0.0 when the provider does not report it
    total_volume : float
        24h volume, 0.0 when the provider does not report it
    sparkline : list of float
        7-day price samples, possibly empty
    """

    id: str
    symbol: str
    name: str
    image: str = ''
    price: float = 0.0
    market_cap: float = 0.0
    total_volume: float = 0.0
    sparkline: List[float] = field(default_factory=list)

    def __post_init__(self):
        self.symbol = self.symbol.upper()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire shape served by the request boundary."""
        return {
            'id': self.id,
            'symbol': self.symbol,
            'name': self.name,
            'image': self.image,
            'current_price': self.price,
            'market_cap': self.market_cap,
            'total_volume': self.total_volume,
            'sparkline_in_7d': {'price': list(self.sparkline)},
        }


def parse_amount(value: Any) -> float:
    """Parse a provider money/volume field.

    Absent values (None, empty string) read as 0.0. Anything that does not
    parse to a finite, non-negative float raises ValueError.
    """
    if value is None or value == '':
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"not a number: {value!r}")
    if not math.isfinite(amount) or amount < 0:
        raise ValueError(f"out of range: {value!r}")
    return amount


def parse_sparkline(value: Any) -> List[float]:
    """Parse a list of price samples, keeping order and length."""
    if not value:
        return []
    if not isinstance(value, list):
        raise ValueError(f"sparkline is not a list: {type(value).__name__}")
    return [parse_amount(v) for v in value]


def text(value: Optional[Any]) -> str:
    """Coerce an optional payload field to str, mapping None to ''."""
    return '' if value is None else str(value)
