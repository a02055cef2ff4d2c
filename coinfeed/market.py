"""Provider dispatch: one call surface for every provider/currency pair.

Examples
--------
>>> from coinfeed import build_market, load_api_config, load_coin_config
>>> market = build_market(load_coin_config('config/coin.json'),
...                       load_api_config('config/api.json'))
>>> records = market.fetch('binance', 'usd')
"""

import re
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from .cache import CachedFetcher
from .config import ApiConfig, CoinConfig
from .constants import BINANCE_QUOTE_ALIASES, DEFAULT_CACHE_TTL, DEFAULT_CURRENCY
from .exceptions import InvalidCurrencyError, MarketDataError, UnknownProviderError
from .logging import get_logger
from .models import MarketRecord
from .providers import ADAPTER_REGISTRY, MarketDataAdapter, Provider

logger = get_logger(__name__)

_CURRENCY_PATTERN = re.compile(r"^[a-z]{2,10}$")


class Market:
    """Resolve provider names to cached fetchers and apply currency rules.

    CoinGecko, CryptoCompare and CoinMarketCap take the currency as a query
    parameter, so each (provider, currency) pair gets its own cache. Binance
    returns every trading pair regardless of currency; its single cache is
    keyed by pair and looked up with ``symbol + CURRENCY`` per tracked coin
    (``usd`` resolves to the ``USDT`` pair first).

    Parameters
    ----------
    coins : CoinConfig
        Tracked coins
    adapters : dict
        Provider -> constructed adapter
    ttls : dict, optional
        Provider -> cache TTL in seconds, defaults to 60
    clock : callable, default time.monotonic
        Time source shared by all fetchers
    """

    def __init__(
        self,
        coins: CoinConfig,
        adapters: Dict[Provider, MarketDataAdapter],
        ttls: Optional[Dict[Provider, float]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.coins = coins
        self.adapters = dict(adapters)
        self.ttls = dict(ttls or {})
        self._clock = clock
        self._fetchers: Dict[Tuple[Provider, str], CachedFetcher] = {}
        self._lock = threading.Lock()
        self._handlers = {
            Provider.BINANCE: self._fetch_binance,
            Provider.GECKO: self._fetch_quoted,
            Provider.CRYPTOCOMPARE: self._fetch_quoted,
            Provider.COINMARKETCAP: self._fetch_quoted,
        }

    @property
    def providers(self) -> List[Provider]:
        return [p for p in Provider if p in self.adapters]

    def fetcher(self, provider: Provider, currency: str = '') -> CachedFetcher:
        """Get or create the cached fetcher for ``provider`` and ``currency``."""
        key = (provider, currency)
        with self._lock:
            fetcher = self._fetchers.get(key)
            if fetcher is None:
                fetcher = CachedFetcher(
                    self.adapters[provider],
                    currency=currency,
                    ttl=self.ttls.get(provider, DEFAULT_CACHE_TTL),
                    clock=self._clock,
                )
                self._fetchers[key] = fetcher
            return fetcher

    def fetch_map(self, provider, currency: str = DEFAULT_CURRENCY) -> Dict[str, MarketRecord]:
        """Fetch normalized records keyed by upper-case symbol.

        Parameters
        ----------
        provider : str or Provider
            One of ``binance``, ``gecko``, ``cryptocompare``, ``coinmarketcap``
        currency : str, default 'usd'
            Quote currency

        Returns
        -------
        dict
            Symbol -> MarketRecord

        Raises
        ------
        UnknownProviderError
            Name is not a supported provider, or the provider is not
            configured; no network call is made
        InvalidCurrencyError
            Currency is not 2-10 letters; no network call is made
        MarketDataError
            Upstream fetch failed
        """
        resolved = Provider.parse(provider)
        if resolved not in self.adapters:
            raise UnknownProviderError(resolved.value)
        currency = (currency or DEFAULT_CURRENCY).strip().lower()
        if not _CURRENCY_PATTERN.match(currency):
            raise InvalidCurrencyError(currency)

        try:
            return self._handlers[resolved](resolved, currency)
        except MarketDataError as e:
            logger.warning("Fetch failed", provider=resolved.value,
                           currency=currency, error=str(e))
            raise

    def fetch(self, provider, currency: str = DEFAULT_CURRENCY) -> List[MarketRecord]:
        """Fetch normalized records as a list, see :meth:`fetch_map`."""
        return list(self.fetch_map(provider, currency).values())

    def _fetch_quoted(self, provider: Provider, currency: str) -> Dict[str, MarketRecord]:
        fetcher = self.fetcher(provider, currency)
        try:
            return fetcher.get_all()
        except MarketDataError:
            self._discard_unfilled(provider, currency, fetcher)
            raise

    def _discard_unfilled(self, provider: Provider, currency: str, fetcher: CachedFetcher) -> None:
        # Only currencies that have answered once keep a fetcher
        key = (provider, currency)
        with self._lock:
            if fetcher.last_fetched is None and self._fetchers.get(key) is fetcher:
                del self._fetchers[key]

    def _fetch_binance(self, provider: Provider, currency: str) -> Dict[str, MarketRecord]:
        prices = self.fetcher(provider).get_all()
        quote = currency.upper()
        quotes = [BINANCE_QUOTE_ALIASES.get(quote, quote), quote]

        result: Dict[str, MarketRecord] = {}
        for coin in self.coins:
            symbol = coin.symbol.upper()
            ticker = next((prices[symbol + q] for q in quotes if symbol + q in prices), None)
            if ticker is None or symbol in result:
                continue
            result[symbol] = MarketRecord(
                id=coin.id,
                symbol=symbol,
                name=coin.name,
                image=coin.image,
                price=ticker.price,
                sparkline=[ticker.price],
            )
        return result


def build_market(
    coins: CoinConfig,
    api: ApiConfig,
    clock: Callable[[], float] = time.monotonic,
) -> Market:
    """Construct adapters for every configured provider and wrap them in a Market.

    Providers absent from ``api`` are left out; requesting them raises
    UnknownProviderError.
    """
    adapters: Dict[Provider, MarketDataAdapter] = {}
    ttls: Dict[Provider, float] = {}
    for provider, adapter_cls in ADAPTER_REGISTRY.items():
        cfg = api.get(provider)
        if cfg is None:
            continue
        adapters[provider] = adapter_cls(cfg, coins)
        ttls[provider] = cfg.cache_ttl

    logger.info("Market ready", providers=[p.value for p in adapters], coins=len(coins))
    return Market(coins, adapters, ttls=ttls, clock=clock)
