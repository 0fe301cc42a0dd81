# Wonolog - default log handler provisioning.
# Builds a date-based file handler from configuration, or a null handler
# when no usable log folder is available.

from .config import (
    FILTER_BUBBLE,
    FILTER_DATE_FORMAT,
    FILTER_FILENAME,
    FILTER_FOLDER,
    FILTER_USE_LOCKING,
    ConfigResolver,
    Configuration,
    FilterConfigProvider,
    MappingConfigProvider,
    load_config,
)
from .factory import FactoryState, HandlerFactory
from .folders import FolderResolver, ResolvedFolder
from .handlers import DateBasedFileHandler
from .hardening import SecurityHardener

__all__ = [
    "FILTER_BUBBLE",
    "FILTER_DATE_FORMAT",
    "FILTER_FILENAME",
    "FILTER_FOLDER",
    "FILTER_USE_LOCKING",
    "ConfigResolver",
    "Configuration",
    "FilterConfigProvider",
    "MappingConfigProvider",
    "load_config",
    "FactoryState",
    "HandlerFactory",
    "FolderResolver",
    "ResolvedFolder",
    "DateBasedFileHandler",
    "SecurityHardener",
]
