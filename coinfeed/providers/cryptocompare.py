"""CryptoCompare ``pricemultifull`` provider.

Payload shape: ``{"RAW": {SYM: {CUR: {"PRICE": ..., "MKTCAP": ...}}}}``.
A coin missing at any nesting level is skipped; a payload without ``RAW``
is rejected.
"""

from typing import Any, Dict, Optional

from ..constants import CRYPTOCOMPARE_AUTH_HEADER
from ..exceptions import MalformedResponseError
from ..models import Coin, MarketRecord, parse_amount
from .base import MarketDataAdapter


class CryptoCompareAdapter(MarketDataAdapter):
    """CryptoCompare multi-symbol price adapter."""

    name = 'cryptocompare'

    def auth_headers(self) -> Dict[str, str]:
        if not self.config.api_key:
            return {}
        return {CRYPTOCOMPARE_AUTH_HEADER: f"Apikey {self.config.api_key}"}

    def build_params(self, currency: str) -> Dict[str, Any]:
        return {
            "fsyms": ','.join(coin.symbol.upper() for coin in self.coins),
            "tsyms": currency.upper(),
        }

    def fetch_market_data(
        self,
        currency: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, MarketRecord]:
        payload = self.request(currency, params)
        raw = payload.get('RAW') if isinstance(payload, dict) else None
        if not isinstance(raw, dict):
            # Error bodies come back as 200 {"Response": "Error", "Message": ...}
            message = "cryptocompare payload has no RAW section"
            detail = payload.get('Message') if isinstance(payload, dict) else None
            if detail:
                message = f"{message}: {detail}"
            raise MalformedResponseError(message, provider=self.name)

        quote_currency = currency.upper()
        return self.collect(self.coins, lambda coin: self._parse_coin(raw, coin, quote_currency))

    def _parse_coin(self, raw: Dict[str, Any], coin: Coin, currency: str) -> Optional[MarketRecord]:
        by_currency = raw.get(coin.symbol.upper())
        if not isinstance(by_currency, dict):
            return None
        quote = by_currency.get(currency)
        if not isinstance(quote, dict) or 'PRICE' not in quote:
            return None

        return MarketRecord(
            id=coin.id,
            symbol=coin.symbol,
            name=coin.name,
            image=coin.image,
            price=parse_amount(quote['PRICE']),
            market_cap=parse_amount(quote.get('MKTCAP')),
            total_volume=parse_amount(quote.get('TOTALVOLUME24HTO')),
        )
