"""CoinGecko ``/coins/markets`` provider.

The only provider with a native 7-day sparkline. Requests all tracked coin
ids in one call, ordered by market cap.
"""

from typing import Any, Dict, Optional

from ..exceptions import MalformedResponseError
from ..models import MarketRecord, parse_amount, parse_sparkline, text
from .base import MarketDataAdapter


class CoinGeckoAdapter(MarketDataAdapter):
    """CoinGecko markets adapter."""

    name = 'gecko'

    def build_params(self, currency: str) -> Dict[str, Any]:
        return {
            "vs_currency": currency.lower(),
            "ids": ','.join(coin.id for coin in self.coins),
            "order": "market_cap_desc",
            "sparkline": "true",
        }

    def fetch_market_data(
        self,
        currency: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, MarketRecord]:
        payload = self.request(currency, params)
        if not isinstance(payload, list):
            raise MalformedResponseError(
                f"gecko markets payload is {type(payload).__name__}, expected list",
                provider=self.name,
            )
        tracked = {coin.id for coin in self.coins}
        return self.collect(payload, lambda entry: self._parse_market(entry, tracked))

    def _parse_market(self, entry: Dict[str, Any], tracked) -> Optional[MarketRecord]:
        coin_id = text(entry.get('id'))
        if tracked and coin_id not in tracked:
            return None
        symbol = text(entry['symbol'])
        if not symbol:
            raise ValueError("missing symbol")

        sparkline = (entry.get('sparkline_in_7d') or {}).get('price')
        record = MarketRecord(
            id=coin_id,
            symbol=symbol,
            name=text(entry.get('name')),
            image=text(entry.get('image')),
            price=parse_amount(entry.get('current_price')),
            market_cap=parse_amount(entry.get('market_cap')),
            total_volume=parse_amount(entry.get('total_volume')),
            sparkline=parse_sparkline(sparkline),
        )
        return self.backfill(record)
