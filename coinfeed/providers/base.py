"""Shared infrastructure for market data providers.

- RestClient: HTTP GET client with a bounded timeout that maps every failure
  onto the coinfeed error taxonomy
- MarketDataAdapter: base class each provider implements to turn its payload
  into ``{symbol: MarketRecord}``
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, Optional

import requests

from ..config import CoinConfig, ProviderConfig
from ..constants import DEFAULT_TIMEOUT
from ..exceptions import (
    MalformedResponseError,
    UpstreamHTTPError,
    UpstreamTransportError,
)
from ..logging import get_logger
from ..models import MarketRecord

logger = get_logger(__name__)


class RestClient:
    """JSON-over-HTTP client for one provider.

    Parameters
    ----------
    provider : str
        Provider name, attached to raised errors and log context
    base_url : str
        Base URL for API requests
    timeout : float, default 10
        Request timeout in seconds
    headers : dict, optional
        Additional HTTP headers sent with every request
    """

    def __init__(
        self,
        provider: str,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.provider = provider
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if headers:
            self.session.headers.update(headers)

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Execute a GET request and decode the JSON body.

        Parameters
        ----------
        endpoint : str
            Path appended to the base URL
        params : dict, optional
            Query parameters

        Returns
        -------
        Any
            Decoded JSON

        Raises
        ------
        UpstreamTransportError
            Connection failure or timeout
        UpstreamHTTPError
            Non-2xx status code
        MalformedResponseError
            Body is not valid JSON
        """
        url = f"{self.base_url}{endpoint}"
        start = time.perf_counter()

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise UpstreamTransportError(
                f"{self.provider} request timed out after {self.timeout}s: {url}",
                provider=self.provider,
            ) from e
        except requests.exceptions.RequestException as e:
            raise UpstreamTransportError(
                f"{self.provider} request failed: {url} - {e}", provider=self.provider
            ) from e

        elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.debug("Upstream request", provider=self.provider, url=url,
                     status=response.status_code, elapsed_ms=elapsed_ms)

        if not 200 <= response.status_code < 300:
            raise UpstreamHTTPError(self.provider, response.status_code, url)

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"{self.provider} returned invalid JSON: {e}", provider=self.provider
            ) from e


class MarketDataAdapter(ABC):
    """One provider's wire format and endpoint conventions.

    Subclasses set ``name`` and implement :meth:`fetch_market_data`. The base
    URL, market path, API key and timeout come from the injected
    ProviderConfig.

    Parameters
    ----------
    config : ProviderConfig
        Connection settings
    coins : CoinConfig
        Tracked coins, used for query parameters and backfilling
    """

    name: str = ''

    def __init__(self, config: ProviderConfig, coins: CoinConfig):
        self.config = config
        self.coins = coins
        self.client = RestClient(
            self.name,
            config.base_url,
            timeout=config.timeout,
            headers=self.auth_headers(),
        )

    def auth_headers(self) -> Dict[str, str]:
        return {}

    def query_params(self, currency: str, params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Merge config-level, adapter-level and caller-supplied parameters."""
        merged: Dict[str, Any] = dict(self.config.params)
        merged.update(self.build_params(currency))
        if params:
            merged.update(params)
        return merged

    def build_params(self, currency: str) -> Dict[str, Any]:
        return {}

    def request(self, currency: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.get(self.config.market_url, self.query_params(currency, params))

    @abstractmethod
    def fetch_market_data(
        self,
        currency: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, MarketRecord]:
        """Fetch and normalize the provider's market data.

        Parameters
        ----------
        currency : str
            Quote currency, e.g. ``'usd'``
        params : dict, optional
            Extra query parameters overriding the adapter defaults

        Returns
        -------
        dict
            Upper-case symbol -> MarketRecord, one entry per recognized coin
        """

    def collect(
        self,
        entries: Iterable[Any],
        parse: Callable[[Any], Optional[MarketRecord]],
    ) -> Dict[str, MarketRecord]:
        """Run ``parse`` over payload entries and key the results by symbol.

        ``parse`` returns None for an entry that is not a tracked coin and
        raises ValueError/TypeError/KeyError for a malformed one. Malformed
        entries are skipped; if no entry parsed and at least one was
        malformed the whole payload is rejected.
        """
        result: Dict[str, MarketRecord] = {}
        parsed = malformed = 0

        for entry in entries:
            try:
                record = parse(entry)
            except (ValueError, TypeError, KeyError, AttributeError) as e:
                malformed += 1
                logger.debug("Skipping malformed entry", provider=self.name, error=str(e))
                continue
            if record is None:
                continue
            parsed += 1
            if record.symbol not in result:
                result[record.symbol] = record

        if malformed and not parsed:
            raise MalformedResponseError(
                f"{self.name} returned {malformed} entries, none parseable", provider=self.name
            )
        return result

    def backfill(self, record: MarketRecord) -> MarketRecord:
        """Fill id, name and image from the coin config where missing."""
        coin = self.coins.by_symbol(record.symbol)
        if coin is None:
            return record
        if not record.image:
            record.image = coin.image
        if not record.name:
            record.name = coin.name
        if not record.id:
            record.id = coin.id
        return record
