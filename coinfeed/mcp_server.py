"""
MCP (Model Context Protocol) server for coinfeed.

Lets AI IDEs (Cursor, Claude Desktop) query aggregated market data through
the same Market the HTTP server uses.

Available MCP Tools:
    fetch_prices : Normalized market records for one provider and currency
    list_providers : Providers configured in this process

Usage:
    Configure in Cursor/Claude Desktop MCP settings:
    {"command": "coinfeed-mcp", "env": {"COINFEED_API_CONFIG": "/path/api.json"}}
"""

import json
import os

from mcp.server.fastmcp import FastMCP

from .config import load_api_config, load_coin_config
from .constants import (
    API_CONFIG_ENV,
    COIN_CONFIG_ENV,
    DEFAULT_API_CONFIG_PATH,
    DEFAULT_COIN_CONFIG_PATH,
    DEFAULT_CURRENCY,
    DEFAULT_PROVIDER,
)
from .exceptions import MarketDataError
from .market import Market, build_market


def create_mcp(market: Market) -> FastMCP:
    """Register coinfeed tools on a new FastMCP server bound to ``market``."""
    mcp = FastMCP("coinfeed")

    @mcp.tool()
    def fetch_prices(provider: str = DEFAULT_PROVIDER, currency: str = DEFAULT_CURRENCY) -> str:
        """
        Fetch current price, market cap, 24h volume and 7-day sparkline for
        the tracked coins.

        Args:
            provider: One of 'binance', 'gecko', 'cryptocompare', 'coinmarketcap'
            currency: Quote currency (e.g. 'usd', 'eur')

        Returns:
            JSON array of records, or an error message.
        """
        try:
            records = market.fetch(provider, currency)
        except MarketDataError as e:
            return f"Error fetching prices: {e}"
        return json.dumps([r.to_dict() for r in records], indent=2)

    @mcp.tool()
    def list_providers() -> str:
        """
        List the market data providers configured in this server.

        Returns:
            JSON list of provider names usable as the 'provider' argument.
        """
        return json.dumps([p.value for p in market.providers])

    return mcp


def main():
    """Entry point for the MCP server."""
    coins = load_coin_config(os.getenv(COIN_CONFIG_ENV, DEFAULT_COIN_CONFIG_PATH))
    api = load_api_config(os.getenv(API_CONFIG_ENV, DEFAULT_API_CONFIG_PATH))
    create_mcp(build_market(coins, api)).run()


if __name__ == "__main__":
    main()
