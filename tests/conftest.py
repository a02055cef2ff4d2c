"""Shared pytest fixtures for coinfeed tests."""

import pytest
from unittest.mock import MagicMock

from coinfeed.config import CoinConfig, ProviderConfig
from coinfeed.models import Coin


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_response(payload=None, status_code=200, invalid_json=False):
    """Build a stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    if invalid_json:
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        response.json.return_value = payload
    return response


def stub_session(adapter, *responses):
    """Replace the adapter's HTTP session GET with canned responses.

    Exceptions in ``responses`` are raised in turn instead of returned.
    """
    get = MagicMock(side_effect=list(responses))
    adapter.client.session.get = get
    return get


@pytest.fixture
def coins():
    """Tracked coins matching real usage patterns."""
    return CoinConfig([
        Coin(id='bitcoin', symbol='BTC', name='Bitcoin', image='https://img.example/btc.png'),
        Coin(id='ethereum', symbol='ETH', name='Ethereum', image='https://img.example/eth.png'),
        Coin(id='solana', symbol='SOL', name='Solana', image='https://img.example/sol.png'),
    ])


@pytest.fixture
def provider_config():
    def _make(**overrides):
        values = dict(base_url='https://api.example.com', market_url='/markets', api_key='secret-key')
        values.update(overrides)
        return ProviderConfig(**values)
    return _make


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gecko_payload():
    return [
        {
            'id': 'bitcoin', 'symbol': 'btc', 'name': 'Bitcoin',
            'image': 'https://coin-images.coingecko.com/btc.png',
            'current_price': 65000.5, 'market_cap': 1.28e12, 'total_volume': 3.1e10,
            'sparkline_in_7d': {'price': [1, 2, 3]},
        },
        {
            'id': 'ethereum', 'symbol': 'eth', 'name': 'Ethereum',
            'image': None,
            'current_price': 3200.0, 'market_cap': 3.8e11, 'total_volume': None,
            'sparkline_in_7d': None,
        },
    ]


@pytest.fixture
def binance_payload():
    return [
        {'symbol': 'BTCUSDT', 'price': '65000.5'},
        {'symbol': 'ETHUSDT', 'price': '3200.10'},
        {'symbol': 'ETHBTC', 'price': '0.0492'},
        {'symbol': 'BTCEUR', 'price': '60000.00'},
    ]


@pytest.fixture
def cryptocompare_payload():
    return {
        'RAW': {
            'BTC': {'USD': {'PRICE': 65000.5, 'MKTCAP': 1.28e12, 'TOTALVOLUME24HTO': 2.5e10}},
            'ETH': {'USD': {'PRICE': 3200.0}},
            'SOL': {'EUR': {'PRICE': 140.0}},
        },
        'DISPLAY': {},
    }


@pytest.fixture
def coinmarketcap_payload():
    return {
        'status': {'error_code': 0},
        'data': [
            {'id': 1, 'name': 'Bitcoin', 'symbol': 'BTC',
             'quote': {'USD': {'price': 65000.5, 'volume_24h': 3.0e10, 'market_cap': 1.28e12}}},
            {'id': 1027, 'name': 'Ethereum', 'symbol': 'ETH',
             'quote': {'USD': {'price': 3200.0, 'volume_24h': 1.5e10, 'market_cap': 3.8e11}}},
            {'id': 825, 'name': 'Tether', 'symbol': 'USDT',
             'quote': {'USD': {'price': 1.0, 'volume_24h': 5.0e10, 'market_cap': 1.1e11}}},
        ],
    }


@pytest.fixture
def fake_response():
    return make_response


@pytest.fixture
def stub_http():
    return stub_session
