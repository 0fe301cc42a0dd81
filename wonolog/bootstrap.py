"""
Wonolog - Channel logger wiring.

Attaches the default handler to channel loggers.

Usage:
    from wonolog.bootstrap import get_logger

    logger = get_logger("http")
    logger.warning("Request failed", extra={"status": 502})
"""

import logging
import threading
from typing import Dict, Optional

from .config import get_config
from .factory import HandlerFactory
from .formatters import WonologJSONFormatter
from .handlers import DateBasedFileHandler

# Cache for configured loggers (keyed by channel)
_loggers: Dict[str, logging.Logger] = {}
_factory: Optional[HandlerFactory] = None
_setup_lock = threading.Lock()


def default_factory() -> HandlerFactory:
    """Shared factory built from the global configuration."""
    global _factory
    if _factory is None:
        config = get_config()
        _factory = HandlerFactory(
            provider=config.provider(),
            content_root=config.content_root,
            min_level=config.min_level,
        )
    return _factory


def get_logger(channel: str, factory: Optional[HandlerFactory] = None) -> logging.Logger:
    """
    Get or create the logger for a channel.

    The logger gets the default handler of factory (or of the shared
    factory). Records only propagate to parent loggers when the handler
    was configured to bubble.

    The first call for a channel decides its handler: once cached, later
    calls return the same logger and ignore factory. Call reset_loggers()
    to rewire a channel.

    Args:
        channel: Channel name, used as the logger name
        factory: Optional factory to take the handler from

    Returns:
        Configured logging.Logger instance
    """
    with _setup_lock:
        if channel in _loggers:
            return _loggers[channel]

        handler = (factory or default_factory()).create_default_handler()

        if isinstance(handler, DateBasedFileHandler) and handler.formatter is None:
            handler.setFormatter(WonologJSONFormatter())

        logger = logging.getLogger(channel)
        logger.setLevel(handler.level)
        logger.propagate = bool(getattr(handler, "bubble", False))
        if handler not in logger.handlers:
            logger.addHandler(handler)

        _loggers[channel] = logger
        return logger


def reset_loggers() -> None:
    """
    Reset all cached loggers and the shared factory.

    Useful for testing or when configuration changes.
    """
    global _factory
    with _setup_lock:
        for logger in _loggers.values():
            logger.handlers.clear()
        _loggers.clear()
        _factory = None
