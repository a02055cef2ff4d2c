"""Binance spot ticker provider.

Fetches the full ``/api/v3/ticker/price`` list in one request. The payload
only carries trading pairs and string prices, so records are keyed by pair
(e.g. ``BTCUSDT``) with market cap and volume left at zero; the dispatcher
maps pairs back to tracked coins for the requested currency.
"""

from typing import Any, Dict, Optional

from ..exceptions import MalformedResponseError
from ..models import MarketRecord, parse_amount
from .base import MarketDataAdapter


class BinanceAdapter(MarketDataAdapter):
    """Binance ``ticker/price`` adapter, keyed by trading pair."""

    name = 'binance'

    def fetch_market_data(
        self,
        currency: str = '',
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, MarketRecord]:
        payload = self.request(currency, params)
        if not isinstance(payload, list):
            raise MalformedResponseError(
                f"binance ticker payload is {type(payload).__name__}, expected list",
                provider=self.name,
            )
        return self.collect(payload, self._parse_ticker)

    @staticmethod
    def _parse_ticker(entry: Dict[str, Any]) -> MarketRecord:
        pair = entry['symbol']
        if not isinstance(pair, str) or not pair:
            raise ValueError(f"invalid pair: {pair!r}")
        price_str = entry['price']
        if not isinstance(price_str, str) or not price_str:
            raise ValueError(f"invalid price for {pair}: {price_str!r}")
        return MarketRecord(id=pair, symbol=pair, name='', price=parse_amount(price_str))
