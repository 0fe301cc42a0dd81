"""
Default Handler Factory for Wonolog.

Builds the handler used when the host application provides none. The
factory never raises: any misconfiguration or filesystem failure results
in a logging.NullHandler, because a broken log folder must not break the
application doing the logging.
"""

import enum
import logging
from typing import Any, Mapping, Optional

from .config import Configuration, ConfigResolver
from .folders import FolderResolver
from .handlers import DateBasedFileHandler
from .hardening import SecurityHardener
from .log_level import resolve_min_level

logger = logging.getLogger("wonolog.factory")


class FactoryState(enum.Enum):
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    DISABLED = "disabled"
    ENABLED = "enabled"


class HandlerFactory:
    """
    Creates (once) the default handler.

    Args:
        handler: Handler supplied by the host; returned as-is when given
        provider: Config provider with a get(key, default) method
        content_root: Publicly served directory of the host, if any
        min_level: Minimum level for the file handler (name or number)
        environ: Environment mapping, defaults to os.environ
    """

    def __init__(
        self,
        handler: Optional[logging.Handler] = None,
        *,
        provider: Optional[Any] = None,
        content_root: Optional[str] = None,
        min_level: Any = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self._handler = handler
        self._provider = provider
        self._content_root = content_root
        self._min_level = min_level
        self._environ = environ
        self._state = FactoryState.ENABLED if handler is not None else FactoryState.UNRESOLVED

    @classmethod
    def new(cls, handler: Optional[logging.Handler] = None, **kwargs: Any) -> "HandlerFactory":
        return cls(handler, **kwargs)

    @property
    def state(self) -> FactoryState:
        return self._state

    def create_default_handler(self) -> logging.Handler:
        """Return the default handler, building it on first call."""
        if self._handler is not None:
            return self._handler

        self._state = FactoryState.RESOLVING
        try:
            handler = self._build()
        except Exception as e:
            logger.warning(f"Default log handler unavailable, logging disabled: {e}")
            handler = None

        if handler is None:
            self._handler = logging.NullHandler()
            self._state = FactoryState.DISABLED
        else:
            self._handler = handler
            self._state = FactoryState.ENABLED

        return self._handler

    def _build(self) -> Optional[DateBasedFileHandler]:
        """Build the file handler, or None when no folder is available."""
        config = ConfigResolver(
            provider=self._provider,
            content_root=self._content_root,
            environ=self._environ,
        ).resolve()

        resolver = FolderResolver(SecurityHardener(self._content_root))
        folder = resolver.resolve_folder(config.folder)
        if not folder:
            logger.debug("No log folder configured, default handler disabled")
            return None

        return self._file_handler(folder, config)

    def _file_handler(self, folder: str, config: Configuration) -> DateBasedFileHandler:
        if not isinstance(config.filename_format, str):
            raise TypeError(f"Filename format must be a string, got {config.filename_format!r}")

        return DateBasedFileHandler(
            f"{folder}/{config.filename_format}",
            config.date_format,
            level=resolve_min_level(self._min_level, self._environ),
            bubble=config.bubble,
            use_locking=config.use_locking,
        )
