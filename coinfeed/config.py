"""Coin list and provider connection config, loaded from JSON files.

Coin config::

    {"coins": [{"id": "bitcoin", "symbol": "BTC", "name": "Bitcoin",
                "img_url": "https://..."}]}

API config, one block per provider::

    {"binance":       {"baseUrl": "https://api.binance.com", "marketUrl": "/api/v3/ticker/price"},
     "CoinGecko":     {"BaseURL": "https://api.coingecko.com/api/v3", "marketUrl": "/coins/markets"},
     "CryptoCompare": {"BaseURL": "...", "marketUrl": "...", "apiKey": "..."},
     "CoinMarketCap": {"BaseURL": "...", "marketUrl": "...", "apiKey": "...",
                       "timeout_seconds": 10, "cache_ttl_seconds": 60}}

API keys can also come from the environment (``COINFEED_CRYPTOCOMPARE_API_KEY``,
``COINFEED_COINMARKETCAP_API_KEY``), which wins over the file.
"""

import json
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_CACHE_TTL, DEFAULT_TIMEOUT, ENV_PREFIX
from .models import Coin

# Provider value -> accepted block names in api.json
_API_SECTIONS = {
    'binance': ('binance', 'Binance'),
    'gecko': ('CoinGecko', 'coingecko', 'gecko'),
    'cryptocompare': ('CryptoCompare', 'cryptocompare'),
    'coinmarketcap': ('CoinMarketCap', 'coinmarketcap'),
}

Model = TypeVar('Model', bound=BaseModel)


class ConfigError(ValueError):
    """Config file is missing, unreadable or has the wrong shape."""


def _validate(model: Type[Model], raw: Any, what: str) -> Model:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"invalid {what}: {e}") from e


class _CoinDocument(BaseModel):
    coins: List[Coin]


class CoinConfig:
    """Ordered, read-only list of tracked coins.

    Parameters
    ----------
    coins : list of Coin
        Tracked coins in display order
    """

    def __init__(self, coins: List[Coin]):
        self._coins = tuple(coins)
        self._by_symbol: Dict[str, Coin] = {}
        for coin in self._coins:
            self._by_symbol.setdefault(coin.symbol.upper(), coin)

    def __iter__(self):
        return iter(self._coins)

    def __len__(self) -> int:
        return len(self._coins)

    def by_symbol(self, symbol: str) -> Optional[Coin]:
        return self._by_symbol.get(symbol.upper())

    @classmethod
    def from_dict(cls, raw: Any) -> 'CoinConfig':
        return cls(_validate(_CoinDocument, raw, "coin config").coins)


class ProviderConfig(BaseModel):
    """Connection settings for one provider."""

    model_config = ConfigDict(populate_by_name=True)

    base_url: str = Field(min_length=1, validation_alias=AliasChoices('baseUrl', 'BaseURL', 'base_url'))
    market_url: str = Field('', validation_alias=AliasChoices('marketUrl', 'market_url'))
    api_key: str = Field('', validation_alias=AliasChoices('apiKey', 'api_key'))
    timeout: float = Field(DEFAULT_TIMEOUT, ge=0, validation_alias=AliasChoices('timeout_seconds', 'timeout'))
    cache_ttl: float = Field(DEFAULT_CACHE_TTL, ge=0,
                             validation_alias=AliasChoices('cache_ttl_seconds', 'cache_ttl'))
    params: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Any) -> 'ProviderConfig':
        return _validate(cls, raw, "provider config")


class ApiKeySettings(BaseSettings):
    """API keys read from ``COINFEED_*_API_KEY`` environment variables."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra='ignore')

    cryptocompare_api_key: str = Field(default='', description="CryptoCompare API key")
    coinmarketcap_api_key: str = Field(default='', description="CoinMarketCap Pro API key")

    def key_for(self, provider: str) -> str:
        return getattr(self, f"{provider}_api_key", '')


class ApiConfig:
    """Provider connection settings keyed by provider name."""

    def __init__(self, providers: Dict[str, ProviderConfig]):
        self._providers = dict(providers)

    def get(self, provider) -> Optional[ProviderConfig]:
        """Look up by Provider enum member or its string value."""
        return self._providers.get(getattr(provider, 'value', provider))

    def __contains__(self, provider) -> bool:
        return self.get(provider) is not None

    @classmethod
    def from_dict(cls, raw: Any, keys: Optional[ApiKeySettings] = None) -> 'ApiConfig':
        """Map api.json blocks to providers; ``keys`` defaults to the environment."""
        if not isinstance(raw, dict):
            raise ConfigError("api config must be a JSON object")
        keys = ApiKeySettings() if keys is None else keys
        providers = {}
        for name, sections in _API_SECTIONS.items():
            section = next((s for s in sections if s in raw), None)
            if section is None:
                continue
            cfg = _validate(ProviderConfig, raw[section], f"{section} config")
            env_key = keys.key_for(name)
            if env_key:
                cfg = cfg.model_copy(update={'api_key': env_key})
            providers[name] = cfg
        return cls(providers)


def _read_json(path: str) -> Any:
    try:
        with open(path, encoding='utf-8') as f:
            return json.load(f)
    except OSError as e:
        raise ConfigError(f"failed to read config {path}: {e}") from e
    except ValueError as e:
        raise ConfigError(f"failed to parse config {path}: {e}") from e


def load_coin_config(path: str) -> CoinConfig:
    """Load the tracked-coin list from ``path``."""
    return CoinConfig.from_dict(_read_json(path))


def load_api_config(path: str) -> ApiConfig:
    """Load provider connection settings from ``path``.

    API keys in the file are overridden by ``COINFEED_CRYPTOCOMPARE_API_KEY``
    and ``COINFEED_COINMARKETCAP_API_KEY`` when set.
    """
    return ApiConfig.from_dict(_read_json(path))
