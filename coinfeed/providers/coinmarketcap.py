"""CoinMarketCap ``/v1/cryptocurrency/listings/latest`` provider."""

from typing import Any, Dict, Optional

from ..constants import COINMARKETCAP_AUTH_HEADER, COINMARKETCAP_LIMIT
from ..exceptions import MalformedResponseError, NoDataReturnedError
from ..models import MarketRecord, parse_amount, text
from .base import MarketDataAdapter


class CoinMarketCapAdapter(MarketDataAdapter):
    """CoinMarketCap listings adapter.

    The response is wrapped in ``{"data": [...]}``; an empty ``data`` list
    with a success status is treated as a failed fetch.
    """

    name = 'coinmarketcap'

    def auth_headers(self) -> Dict[str, str]:
        if not self.config.api_key:
            return {}
        return {COINMARKETCAP_AUTH_HEADER: self.config.api_key}

    def build_params(self, currency: str) -> Dict[str, Any]:
        return {"convert": currency.upper(), "limit": COINMARKETCAP_LIMIT}

    def fetch_market_data(
        self,
        currency: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, MarketRecord]:
        payload = self.request(currency, params)
        data = payload.get('data') if isinstance(payload, dict) else None
        if not isinstance(data, list):
            raise MalformedResponseError(
                "coinmarketcap payload has no data list", provider=self.name
            )
        if not data:
            raise NoDataReturnedError("coinmarketcap returned no data", provider=self.name)

        quote_currency = currency.upper()
        tracked = {coin.symbol.upper() for coin in self.coins}
        return self.collect(data, lambda entry: self._parse_listing(entry, quote_currency, tracked))

    def _parse_listing(self, entry: Dict[str, Any], currency: str, tracked) -> Optional[MarketRecord]:
        symbol = text(entry['symbol']).upper()
        if not symbol:
            raise ValueError("missing symbol")
        if tracked and symbol not in tracked:
            return None

        quote = entry['quote'][currency]
        record = MarketRecord(
            id=text(entry.get('id')),
            symbol=symbol,
            name=text(entry.get('name')),
            price=parse_amount(quote['price']),
            market_cap=parse_amount(quote.get('market_cap')),
            total_volume=parse_amount(quote.get('volume_24h')),
        )
        return self.backfill(record)
