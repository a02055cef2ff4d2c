"""Error taxonomy for market data fetching.

Every error raised by the fetch path derives from MarketDataError, so callers
at the request boundary can catch one type and report ``str(error)``.
"""

from typing import Optional


class MarketDataError(Exception):
    """Base class for all coinfeed errors.

    Parameters
    ----------
    message : str
        Human-readable description
    provider : str, optional
        Provider name the error originated from
    """

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.provider = provider


class InvalidRequestError(MarketDataError):
    """Caller asked for something that cannot be served; no network call is made."""


class UnknownProviderError(InvalidRequestError):
    """Requested provider name is not one of the supported providers."""

    def __init__(self, name: str):
        super().__init__(f"unknown provider: {name}", provider=name)
        self.name = name


class UpstreamHTTPError(MarketDataError):
    """Provider answered with a non-success status code."""

    def __init__(self, provider: str, status_code: int, url: str = ''):
        super().__init__(
            f"{provider} API returned status {status_code}", provider=provider
        )
        self.status_code = status_code
        self.url = url


class UpstreamTransportError(MarketDataError):
    """Network-level failure: DNS, refused connection, timeout."""


class MalformedResponseError(MarketDataError):
    """Provider payload could not be decoded into the expected shape."""


class NoDataReturnedError(MarketDataError):
    """Provider answered successfully but the payload holds no entries."""


class InvalidCurrencyError(InvalidRequestError):
    """Quote currency is not a short alphabetic code."""

    def __init__(self, currency: str):
        super().__init__(f"invalid currency: {currency!r}")
        self.currency = currency
