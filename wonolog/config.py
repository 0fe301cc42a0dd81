"""
Configuration Module for Wonolog.

Resolves everything the default handler needs to know before it is built:
- Extension-point keys and their defaults
- Pluggable config providers (mapping-based and filter-based)
- Optional YAML configuration from config/wonolog-config.yaml
- The immutable Configuration snapshot used by the handler factory
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

import yaml

from .handlers.date_based import DEFAULT_DATE_FORMAT

logger = logging.getLogger("wonolog.config")

# =============================================================================
# EXTENSION POINTS
# =============================================================================

FILTER_FOLDER = "wonolog.default-handler-folder"
FILTER_FILENAME = "wonolog.default-handler-filename"
FILTER_DATE_FORMAT = "wonolog.default-handler-date-format"
FILTER_BUBBLE = "wonolog.default-handler-bubble"
FILTER_USE_LOCKING = "wonolog.default-handler-use-locking"

ENV_ROOT_DIR = "WONOLOG_DEFAULT_HANDLER_ROOT_DIR"
ENV_CONFIG_FILE = "WONOLOG_CONFIG"

DEFAULT_FILENAME_FORMAT = "{date}.log"
CONTENT_SUBDIR = "wonolog"

# Keys accepted in the default_handler section of the YAML file
KNOWN_KEYS = {
    "folder",
    "filename",
    "date_format",
    "bubble",
    "use_locking",
    "min_level",
    "content_root",
}

# YAML key -> extension point it overrides
_KEY_TO_FILTER = {
    "folder": FILTER_FOLDER,
    "filename": FILTER_FILENAME,
    "date_format": FILTER_DATE_FORMAT,
    "bubble": FILTER_BUBBLE,
    "use_locking": FILTER_USE_LOCKING,
}


# =============================================================================
# CONFIG PROVIDERS
# =============================================================================

class MappingConfigProvider:
    """Config provider backed by a plain mapping of extension-point keys."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Any] = dict(values or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)


class FilterConfigProvider:
    """
    Config provider with hook-style filters.

    Each key can have any number of callbacks. On lookup, callbacks run in
    registration order; each one receives the value returned by the
    previous one (the first receives the default).
    """

    def __init__(self) -> None:
        self._filters: Dict[str, List[Callable[[Any], Any]]] = {}

    def add_filter(self, key: str, callback: Callable[[Any], Any]) -> None:
        """Register a callback that may replace the value for key."""
        self._filters.setdefault(key, []).append(callback)

    def remove_filters(self, key: str) -> None:
        self._filters.pop(key, None)

    def get(self, key: str, default: Any = None) -> Any:
        value = default
        for callback in self._filters.get(key, []):
            try:
                value = callback(value)
            except Exception as e:
                logger.warning(f"Filter for '{key}' failed, skipping it: {e}")
        return value


# =============================================================================
# YAML CONFIGURATION
# =============================================================================

@dataclass
class WonologConfig:
    """
    File-based configuration for the default handler.

    Every field is optional; unset fields leave the matching extension point
    at its built-in default.
    """

    folder: Optional[str] = None
    filename: Optional[str] = None
    date_format: Optional[str] = None
    bubble: Optional[bool] = None
    use_locking: Optional[bool] = None
    min_level: Optional[Any] = None
    content_root: Optional[str] = None

    # Internal: file the values were read from
    source: str = field(default="", repr=False)

    def provider(self) -> MappingConfigProvider:
        """Build a provider holding only the overrides that were set."""
        values = {
            filter_key: getattr(self, name)
            for name, filter_key in _KEY_TO_FILTER.items()
            if getattr(self, name) is not None
        }
        return MappingConfigProvider(values)


def _find_project_dir() -> Path:
    """Directory holding the wonolog package (and the config/ folder)."""
    return Path(__file__).resolve().parent.parent


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Dictionary of configuration values
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        logger.warning(f"Error parsing config file {config_path}: {e}")
        return {}
    except OSError as e:
        logger.warning(f"Error loading config file {config_path}: {e}")
        return {}

    if not config:
        return {}
    if not isinstance(config, dict):
        logger.warning(f"Config file {config_path} must contain a mapping, ignoring it")
        return {}
    return config


def _warn_unknown_keys(section: Dict[str, Any]) -> None:
    unknown_keys = set(section.keys()) - KNOWN_KEYS
    for key in sorted(unknown_keys):
        logger.warning(f"Unknown configuration key: '{key}' (ignored)")


def load_config(config_path: Optional[Path] = None) -> WonologConfig:
    """
    Load Wonolog configuration from file.

    Args:
        config_path: Optional path to config file. If None, uses
                    $WONOLOG_CONFIG or config/wonolog-config.yaml.

    Returns:
        WonologConfig with loaded values (unset fields stay None)
    """
    if config_path is None:
        env_path = os.environ.get(ENV_CONFIG_FILE)
        if env_path:
            config_path = Path(env_path)
        else:
            config_path = _find_project_dir() / "config" / "wonolog-config.yaml"

    config_path = Path(config_path)
    if not config_path.exists():
        return WonologConfig()

    config_dict = _load_yaml_config(config_path)
    section = config_dict.get("default_handler") or {}
    if not isinstance(section, dict):
        logger.warning("'default_handler' must be a mapping, using defaults")
        section = {}

    _warn_unknown_keys(section)

    return WonologConfig(
        **{key: section[key] for key in KNOWN_KEYS if key in section},
        source=str(config_path),
    )


# Global config instance (lazy-loaded)
_config: Optional[WonologConfig] = None


def get_config() -> WonologConfig:
    """Get the global configuration, loading it on first call."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the cached configuration. Useful for testing."""
    global _config
    _config = None


# =============================================================================
# RESOLUTION
# =============================================================================

@dataclass(frozen=True)
class Configuration:
    """Snapshot of the settings the default handler is built from."""

    folder: str = ""
    filename_format: Any = DEFAULT_FILENAME_FORMAT
    date_format: Any = DEFAULT_DATE_FORMAT
    bubble: bool = True
    use_locking: bool = True


class ConfigResolver:
    """
    Gathers the default handler settings from environment and providers.

    Folder source order: provider override, then $WONOLOG_DEFAULT_HANDLER_ROOT_DIR,
    then <content_root>/wonolog, else disabled.
    """

    def __init__(
        self,
        provider: Optional[Any] = None,
        content_root: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self._provider = provider if provider is not None else MappingConfigProvider()
        self._content_root = content_root
        self._environ = environ if environ is not None else os.environ

    def resolve(self) -> Configuration:
        return Configuration(
            folder=self.folder(),
            filename_format=self.filename_format(),
            date_format=self._provider.get(FILTER_DATE_FORMAT, DEFAULT_DATE_FORMAT),
            bubble=bool(self._provider.get(FILTER_BUBBLE, True)),
            use_locking=bool(self._provider.get(FILTER_USE_LOCKING, True)),
        )

    def folder(self) -> str:
        folder = self._environ.get(ENV_ROOT_DIR, "")

        if not folder and self._content_root:
            folder = self._content_root.rstrip("\\/") + "/" + CONTENT_SUBDIR

        folder = self._provider.get(FILTER_FOLDER, folder)
        if not isinstance(folder, str):
            logger.debug(f"Ignoring non-string folder override: {folder!r}")
            return ""
        return folder

    def filename_format(self) -> Any:
        filename = self._provider.get(FILTER_FILENAME, DEFAULT_FILENAME_FORMAT)
        # Non-strings are left for the handler to reject
        if isinstance(filename, str):
            filename = filename.lstrip("\\/")
        return filename
