"""Time-to-live cache around one provider adapter."""

import threading
import time
from typing import Any, Callable, Dict, Optional

from .constants import DEFAULT_CACHE_TTL
from .logging import get_logger, log_execution_time
from .models import MarketRecord
from .providers.base import MarketDataAdapter

logger = get_logger(__name__)


class CachedFetcher:
    """Serve an adapter's last good snapshot until it is older than ``ttl``.

    The cache is replaced wholesale by each successful fetch and left alone
    by a failed one; the failure is raised to the caller rather than masked
    with stale data. One lock covers the read-decide-replace sequence, so a
    caller sees either the previous snapshot or the new one, never a mix.
    The read-only accessors (``last_fetched``, ``snapshot``, ``should_fetch``)
    do not take the lock, so they answer while a refresh is in flight.

    Parameters
    ----------
    adapter : MarketDataAdapter
        Provider adapter to call on refresh
    currency : str
        Quote currency passed to the adapter
    ttl : float, default 60
        Maximum snapshot age in seconds
    clock : callable, default time.monotonic
        Time source returning seconds
    """

    def __init__(
        self,
        adapter: MarketDataAdapter,
        currency: str = '',
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.adapter = adapter
        self.currency = currency
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._cache: Dict[str, MarketRecord] = {}
        self._last_fetched: Optional[float] = None

    @property
    def last_fetched(self) -> Optional[float]:
        """Clock reading of the last successful fetch, None before the first."""
        return self._last_fetched

    def snapshot(self) -> Dict[str, MarketRecord]:
        """Current cached mapping without triggering a fetch."""
        return self._cache

    def should_fetch(self) -> bool:
        """True if nothing has been fetched yet or the snapshot outlived the TTL."""
        return self._is_stale()

    def _is_stale(self) -> bool:
        last = self._last_fetched
        if last is None:
            return True
        return self._clock() - last > self.ttl

    def get_all(self, extra_params: Optional[Dict[str, Any]] = None) -> Dict[str, MarketRecord]:
        """Return the cached snapshot if fresh, otherwise refetch.

        Parameters
        ----------
        extra_params : dict, optional
            Additional query parameters forwarded to the adapter on refresh

        Returns
        -------
        dict
            Symbol -> MarketRecord. A cache hit returns the cached object
            itself.

        Raises
        ------
        MarketDataError
            Whatever the adapter raised; the cache is unchanged
        """
        with self._lock:
            if not self._is_stale() and self._cache:
                logger.debug("Cache hit", provider=self.adapter.name,
                             currency=self.currency, entries=len(self._cache))
                return self._cache

            data = self._refresh(extra_params)

            self._cache = data
            self._last_fetched = self._clock()
            logger.info("Cache refreshed", provider=self.adapter.name,
                        currency=self.currency, entries=len(data))
            return data

    @log_execution_time(logger)
    def _refresh(self, extra_params: Optional[Dict[str, Any]]) -> Dict[str, MarketRecord]:
        return self.adapter.fetch_market_data(self.currency, extra_params)
