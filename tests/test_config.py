"""Unit tests for coinfeed config loading."""

import json

import pytest

from coinfeed.config import (
    ApiConfig,
    ApiKeySettings,
    CoinConfig,
    ConfigError,
    ProviderConfig,
    load_api_config,
    load_coin_config,
)
from coinfeed.providers import Provider


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv('COINFEED_CRYPTOCOMPARE_API_KEY', raising=False)
    monkeypatch.delenv('COINFEED_COINMARKETCAP_API_KEY', raising=False)
    return monkeypatch


class TestCoinConfig:

    def test_load_from_file(self, tmp_path):
        path = tmp_path / 'coin.json'
        path.write_text(json.dumps({'coins': [
            {'id': 'bitcoin', 'symbol': 'btc', 'name': 'Bitcoin', 'img_url': 'https://img/btc.png'},
            {'id': 'ethereum', 'symbol': 'ETH', 'name': 'Ethereum'},
        ]}))

        cfg = load_coin_config(str(path))

        assert [c.symbol for c in cfg] == ['BTC', 'ETH']
        assert cfg.by_symbol('btc').image == 'https://img/btc.png'
        assert cfg.by_symbol('ETH').image == ''
        assert cfg.by_symbol('DOGE') is None

    def test_missing_coins_key(self):
        with pytest.raises(ConfigError, match="invalid coin config"):
            CoinConfig.from_dict({'tokens': []})

    def test_coin_without_symbol(self):
        with pytest.raises(ConfigError):
            CoinConfig.from_dict({'coins': [{'id': 'bitcoin', 'name': 'Bitcoin'}]})

    def test_document_not_an_object(self):
        with pytest.raises(ConfigError):
            CoinConfig.from_dict(['bitcoin'])

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="failed to read"):
            load_coin_config(str(tmp_path / 'nope.json'))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'coin.json'
        path.write_text('{"coins": [')

        with pytest.raises(ConfigError, match="failed to parse"):
            load_coin_config(str(path))

    def test_first_symbol_wins(self):
        cfg = CoinConfig.from_dict({'coins': [
            {'id': 'a', 'symbol': 'X', 'name': 'First'},
            {'id': 'b', 'symbol': 'x', 'name': 'Second'},
        ]})

        assert cfg.by_symbol('X').name == 'First'
        assert len(cfg) == 2


class TestProviderConfig:

    def test_defaults(self):
        cfg = ProviderConfig.from_dict({'baseUrl': 'https://a', 'marketUrl': '/m'})

        assert cfg.timeout == 10
        assert cfg.cache_ttl == 60
        assert cfg.api_key == ''
        assert cfg.params == {}

    def test_accepts_both_base_url_spellings(self):
        assert ProviderConfig.from_dict({'BaseURL': 'https://b'}).base_url == 'https://b'
        assert ProviderConfig.from_dict({'base_url': 'https://c'}).base_url == 'https://c'

    def test_requires_base_url(self):
        with pytest.raises(ConfigError):
            ProviderConfig.from_dict({'marketUrl': '/m'})

    def test_empty_base_url_rejected(self):
        with pytest.raises(ConfigError):
            ProviderConfig.from_dict({'baseUrl': ''})

    def test_zero_ttl_and_timeout_kept(self):
        cfg = ProviderConfig.from_dict({
            'baseUrl': 'https://x', 'marketUrl': '/m',
            'cache_ttl_seconds': 0, 'timeout_seconds': 0,
        })

        assert cfg.cache_ttl == 0
        assert cfg.timeout == 0

    def test_negative_ttl_rejected(self):
        with pytest.raises(ConfigError):
            ProviderConfig.from_dict({'baseUrl': 'https://x', 'cache_ttl_seconds': -1})

    def test_numeric_strings_coerced(self):
        cfg = ProviderConfig.from_dict({'baseUrl': 'https://x', 'timeout_seconds': '2.5'})

        assert cfg.timeout == 2.5

    @pytest.mark.parametrize('block', [None, 'https://x', ['https://x']])
    def test_block_not_an_object(self, block):
        with pytest.raises(ConfigError, match="invalid provider config"):
            ProviderConfig.from_dict(block)


class TestApiKeySettings:

    def test_reads_prefixed_env(self, clean_env):
        clean_env.setenv('COINFEED_COINMARKETCAP_API_KEY', 'cmc-env')

        keys = ApiKeySettings()

        assert keys.key_for('coinmarketcap') == 'cmc-env'
        assert keys.key_for('cryptocompare') == ''
        assert keys.key_for('binance') == ''


class TestApiConfig:

    @pytest.fixture
    def raw(self):
        return {
            'binance': {'baseUrl': 'https://api.binance.com', 'marketUrl': '/api/v3/ticker/price'},
            'CoinGecko': {'BaseURL': 'https://api.coingecko.com/api/v3', 'marketUrl': '/coins/markets'},
            'CryptoCompare': {'BaseURL': 'https://min-api.cryptocompare.com',
                              'marketUrl': '/data/pricemultifull', 'apiKey': 'from-file'},
            'CoinMarketCap': {'BaseURL': 'https://pro-api.coinmarketcap.com',
                              'marketUrl': '/v1/cryptocurrency/listings/latest', 'apiKey': 'cmc-file',
                              'timeout_seconds': 5, 'cache_ttl_seconds': 120},
        }

    def test_sections_mapped_to_providers(self, raw, clean_env):
        api = ApiConfig.from_dict(raw)

        assert all(p in api for p in Provider)
        assert api.get(Provider.GECKO).market_url == '/coins/markets'
        assert api.get('coinmarketcap').timeout == 5
        assert api.get('coinmarketcap').cache_ttl == 120

    def test_env_overrides_api_key(self, raw, clean_env):
        clean_env.setenv('COINFEED_CRYPTOCOMPARE_API_KEY', 'from-env')

        api = ApiConfig.from_dict(raw)

        assert api.get(Provider.CRYPTOCOMPARE).api_key == 'from-env'
        assert api.get(Provider.COINMARKETCAP).api_key == 'cmc-file'

    def test_explicit_keys(self, raw, clean_env):
        api = ApiConfig.from_dict(raw, keys=ApiKeySettings(coinmarketcap_api_key='given'))

        assert api.get(Provider.COINMARKETCAP).api_key == 'given'
        assert api.get(Provider.CRYPTOCOMPARE).api_key == 'from-file'

    def test_missing_section_skipped(self, raw, clean_env):
        del raw['binance']

        api = ApiConfig.from_dict(raw)

        assert Provider.BINANCE not in api

    def test_bad_section_names_block(self, raw, clean_env):
        raw['CoinGecko'] = None

        with pytest.raises(ConfigError, match="invalid CoinGecko config"):
            ApiConfig.from_dict(raw)

    def test_document_not_an_object(self, clean_env):
        with pytest.raises(ConfigError):
            ApiConfig.from_dict([])

    def test_load_from_file(self, raw, tmp_path, clean_env):
        path = tmp_path / 'api.json'
        path.write_text(json.dumps(raw))

        api = load_api_config(str(path))

        assert api.get(Provider.BINANCE).base_url == 'https://api.binance.com'
        assert api.get(Provider.CRYPTOCOMPARE).api_key == 'from-file'
