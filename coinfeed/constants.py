"""Module-level constants for coinfeed."""

DEFAULT_TIMEOUT = 10
DEFAULT_CACHE_TTL = 60

DEFAULT_PROVIDER = 'gecko'
DEFAULT_CURRENCY = 'usd'

COINMARKETCAP_LIMIT = 100

CRYPTOCOMPARE_AUTH_HEADER = 'Authorization'
COINMARKETCAP_AUTH_HEADER = 'X-CMC_PRO_API_KEY'

# Environment variable prefix for settings read by pydantic-settings
ENV_PREFIX = 'COINFEED_'

COIN_CONFIG_ENV = 'COINFEED_COIN_CONFIG'
API_CONFIG_ENV = 'COINFEED_API_CONFIG'
DEFAULT_COIN_CONFIG_PATH = 'config/coin.json'
DEFAULT_API_CONFIG_PATH = 'config/api.json'

# Binance lists dollar pairs against stablecoins, not USD itself
BINANCE_QUOTE_ALIASES = {
    'USD': 'USDT',
}
