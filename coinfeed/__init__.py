"""Multi-provider crypto market data aggregation"""

__author__ = "coinfeed contributors"
__version__ = "0.1.0"

from .models import Coin, MarketRecord

from .config import (
    CoinConfig, ProviderConfig, ApiConfig, ApiKeySettings, ConfigError,
    load_coin_config, load_api_config,
)

from .exceptions import (
    MarketDataError, InvalidRequestError, UnknownProviderError, InvalidCurrencyError,
    UpstreamHTTPError, UpstreamTransportError, MalformedResponseError, NoDataReturnedError,
)

from .providers import Provider, ADAPTER_REGISTRY

from .cache import CachedFetcher

from .market import Market, build_market

__all__ = [
    'Coin', 'MarketRecord',

    'CoinConfig', 'ProviderConfig', 'ApiConfig', 'ApiKeySettings', 'ConfigError',
    'load_coin_config', 'load_api_config',

    'MarketDataError', 'InvalidRequestError', 'UnknownProviderError', 'InvalidCurrencyError',
    'UpstreamHTTPError', 'UpstreamTransportError', 'MalformedResponseError', 'NoDataReturnedError',

    'Provider', 'ADAPTER_REGISTRY',

    'CachedFetcher',

    'Market', 'build_market',
]
