"""Provider registry.

This module exports the Provider enum and ADAPTER_REGISTRY mapping each
provider to its adapter class. All adapters follow the same interface:

    class XxxAdapter(MarketDataAdapter):
        name = 'xxx'

        def fetch_market_data(self, currency, params=None) -> Dict[str, MarketRecord]:
            '''Fetch and normalize; keys are upper-case symbols.'''

To add a new provider:
1. Create a new module in providers/ (e.g., kraken.py)
2. Subclass MarketDataAdapter following the interface above
3. Add a Provider member and register the class in ADAPTER_REGISTRY below
"""

from enum import Enum
from typing import Dict, Type

from ..exceptions import UnknownProviderError
from .base import MarketDataAdapter, RestClient
from .binance import BinanceAdapter
from .coingecko import CoinGeckoAdapter
from .coinmarketcap import CoinMarketCapAdapter
from .cryptocompare import CryptoCompareAdapter


class Provider(Enum):
    BINANCE = 'binance'
    GECKO = 'gecko'
    CRYPTOCOMPARE = 'cryptocompare'
    COINMARKETCAP = 'coinmarketcap'

    @classmethod
    def parse(cls, name) -> 'Provider':
        """Resolve a provider name, raising UnknownProviderError otherwise."""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise UnknownProviderError(str(name)) from None


ADAPTER_REGISTRY: Dict[Provider, Type[MarketDataAdapter]] = {
    Provider.BINANCE: BinanceAdapter,
    Provider.GECKO: CoinGeckoAdapter,
    Provider.CRYPTOCOMPARE: CryptoCompareAdapter,
    Provider.COINMARKETCAP: CoinMarketCapAdapter,
}

__all__ = [
    'Provider',
    'ADAPTER_REGISTRY',
    'MarketDataAdapter',
    'RestClient',
    'BinanceAdapter',
    'CoinGeckoAdapter',
    'CryptoCompareAdapter',
    'CoinMarketCapAdapter',
]
