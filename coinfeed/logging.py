"""Structured logging for coinfeed.

Log calls accept keyword context which is rendered as ``key=value`` pairs in
console mode or as a ``context`` object in JSON mode.

Examples
--------
>>> from coinfeed.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("Cache refreshed", provider='gecko', entries=12)
"""

import json
import logging
import sys
import time
from functools import wraps
from typing import Any, Dict, Optional

ROOT_LOGGER = 'coinfeed'


class StructuredFormatter(logging.Formatter):
    """Render records as one JSON object per line or as a readable line.

    Parameters
    ----------
    json_mode : bool, default False
        Emit JSON instead of human-readable text
    """

    def __init__(self, json_mode: bool = False):
        super().__init__()
        self.json_mode = json_mode

    def format(self, record: logging.LogRecord) -> str:
        if self.json_mode:
            return self._format_json(record)
        return self._format_human(record)

    def _format_json(self, record: logging.LogRecord) -> str:
        payload = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        context = getattr(record, 'context', None)
        if context:
            payload['context'] = context
        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)

    def _format_human(self, record: logging.LogRecord) -> str:
        line = f"{self.formatTime(record)} [{record.levelname:8}] {record.name}: {record.getMessage()}"
        context = getattr(record, 'context', None)
        if context:
            line = f"{line} | " + ' '.join(f"{k}={v}" for k, v in context.items())
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class StructuredLogger(logging.Logger):
    """Logger whose level methods take keyword context.

    >>> logger = StructuredLogger('coinfeed.market')
    >>> logger.warning("Fetch failed", provider='binance', status=503)
    """

    def _log_with_context(self, level: int, msg: str, args: tuple,
                          exc_info: Any = None, extra: Optional[Dict] = None,
                          stack_info: bool = False, stacklevel: int = 1,
                          **context: Any) -> None:
        extra = dict(extra) if extra else {}
        extra['context'] = context
        super()._log(level, msg, args, exc_info, extra, stack_info, stacklevel + 1)

    def debug(self, msg: str, *args, **context) -> None:
        if self.isEnabledFor(logging.DEBUG):
            self._log_with_context(logging.DEBUG, msg, args, **context)

    def info(self, msg: str, *args, **context) -> None:
        if self.isEnabledFor(logging.INFO):
            self._log_with_context(logging.INFO, msg, args, **context)

    def warning(self, msg: str, *args, **context) -> None:
        if self.isEnabledFor(logging.WARNING):
            self._log_with_context(logging.WARNING, msg, args, **context)


def get_logger(name: str, json_mode: bool = False) -> StructuredLogger:
    """Return a structured logger for ``name``.

    Loggers under the ``coinfeed`` namespace propagate to the handler set up
    by :func:`configure_logging`; any other name gets its own stderr handler.

    Parameters
    ----------
    name : str
        Logger name, usually ``__name__``
    json_mode : bool, default False
        JSON output for a standalone handler

    Returns
    -------
    StructuredLogger
    """
    logging.setLoggerClass(StructuredLogger)
    logger = logging.getLogger(name)

    in_namespace = name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + '.')
    if not in_namespace and not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(StructuredFormatter(json_mode=json_mode))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    return logger


def configure_logging(level: int = logging.INFO, json_mode: bool = False) -> None:
    """Install a single stderr handler on the ``coinfeed`` root logger.

    Parameters
    ----------
    level : int, default logging.INFO
        Minimum level emitted
    json_mode : bool, default False
        Emit JSON lines instead of readable text
    """
    logging.setLoggerClass(StructuredLogger)

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(json_mode=json_mode))
    root.addHandler(handler)


def log_execution_time(logger: Optional[logging.Logger] = None):
    """Decorator logging how long the wrapped call took.

    Success is logged at DEBUG, failure at WARNING with the error text; the
    exception is re-raised untouched.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            _logger = logger or get_logger(func.__module__)
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
                _logger.warning(f"{func.__qualname__} failed", elapsed_ms=elapsed_ms, error=str(e))
                raise
            elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
            _logger.debug(f"{func.__qualname__} completed", elapsed_ms=elapsed_ms)
            return result
        return wrapper
    return decorator
