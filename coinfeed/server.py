"""HTTP boundary serving normalized market data.

``GET /price?provider=gecko&currency=usd`` returns a JSON array of records.
Errors are returned as plain text with the error message: 400 for an
unknown provider or malformed currency, 502 for upstream failures.

Usage::

    coinfeed-server --host 0.0.0.0 --port 8080
"""

import argparse
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .config import load_api_config, load_coin_config
from .constants import (
    API_CONFIG_ENV,
    COIN_CONFIG_ENV,
    DEFAULT_API_CONFIG_PATH,
    DEFAULT_COIN_CONFIG_PATH,
    DEFAULT_CURRENCY,
    DEFAULT_PROVIDER,
)
from .exceptions import InvalidRequestError, MarketDataError
from .logging import configure_logging, get_logger
from .market import Market, build_market

logger = get_logger(__name__)


def create_app(market: Market) -> FastAPI:
    """Build the FastAPI app around an already-composed Market."""
    app = FastAPI(title="coinfeed")
    app.state.market = market

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
    )

    @app.get("/price")
    def price(provider: str = DEFAULT_PROVIDER, currency: str = DEFAULT_CURRENCY):
        try:
            records = market.fetch(provider or DEFAULT_PROVIDER, currency or DEFAULT_CURRENCY)
        except InvalidRequestError as e:
            return PlainTextResponse(str(e), status_code=400)
        except MarketDataError as e:
            return PlainTextResponse(str(e), status_code=502)
        return JSONResponse([r.to_dict() for r in records])

    return app


def main():
    """Entry point: load config, compose the market and serve it."""
    import uvicorn

    parser = argparse.ArgumentParser(description="Serve aggregated crypto market data.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--coins", default=os.getenv(COIN_CONFIG_ENV, DEFAULT_COIN_CONFIG_PATH))
    parser.add_argument("--api", default=os.getenv(API_CONFIG_ENV, DEFAULT_API_CONFIG_PATH))
    parser.add_argument("--json-logs", action="store_true")
    args = parser.parse_args()

    configure_logging(json_mode=args.json_logs)
    market = build_market(load_coin_config(args.coins), load_api_config(args.api))

    logger.info("Server running", host=args.host, port=args.port)
    uvicorn.run(create_app(market), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
