"""
Tests for the configuration module.

Covers:
- Config providers (mapping and filter based)
- YAML configuration loading and unknown keys handling
- ConfigResolver folder/filename/flag resolution
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from wonolog.config import (
    ENV_CONFIG_FILE,
    ENV_ROOT_DIR,
    FILTER_BUBBLE,
    FILTER_DATE_FORMAT,
    FILTER_FILENAME,
    FILTER_FOLDER,
    FILTER_USE_LOCKING,
    ConfigResolver,
    Configuration,
    FilterConfigProvider,
    MappingConfigProvider,
    WonologConfig,
    get_config,
    load_config,
    reset_config,
)


class TestConfigFileTemplate:
    """Verify the shipped configuration template."""

    def test_config_file_template_exists(self):
        """wonolog-config.yaml should exist in config/."""
        project_root = Path(__file__).parent.parent
        config_file = project_root / "config" / "wonolog-config.yaml"
        assert config_file.exists(), "config/wonolog-config.yaml should exist"

    def test_template_only_sets_defaults(self):
        """The template should not change any built-in default."""
        project_root = Path(__file__).parent.parent
        config = load_config(project_root / "config" / "wonolog-config.yaml")

        assert config.folder is None
        assert config.content_root is None
        assert config.filename == "{date}.log"
        assert config.date_format == "Y/m/d"
        assert config.bubble is True
        assert config.use_locking is True


class TestMappingConfigProvider:

    def test_returns_value_when_set(self):
        provider = MappingConfigProvider({FILTER_FOLDER: "/var/log/app"})
        assert provider.get(FILTER_FOLDER, "") == "/var/log/app"

    def test_returns_default_when_missing(self):
        provider = MappingConfigProvider()
        assert provider.get(FILTER_BUBBLE, True) is True


class TestFilterConfigProvider:
    """Hook-style filters."""

    def test_no_filters_returns_default(self):
        provider = FilterConfigProvider()
        assert provider.get(FILTER_FILENAME, "{date}.log") == "{date}.log"

    def test_filters_chain_in_order(self):
        """Each filter should receive the previous filter's result."""
        provider = FilterConfigProvider()
        provider.add_filter(FILTER_FILENAME, lambda value: "app-" + value)
        provider.add_filter(FILTER_FILENAME, lambda value: value.upper())

        assert provider.get(FILTER_FILENAME, "{date}.log") == "APP-{DATE}.LOG"

    def test_failing_filter_is_skipped(self, caplog):
        """A filter raising should be skipped with a warning."""
        provider = FilterConfigProvider()
        provider.add_filter(FILTER_BUBBLE, lambda value: 1 / 0)
        provider.add_filter(FILTER_BUBBLE, lambda value: not value)

        with caplog.at_level(logging.WARNING):
            assert provider.get(FILTER_BUBBLE, True) is False

        assert any(FILTER_BUBBLE in r.message for r in caplog.records)

    def test_remove_filters(self):
        provider = FilterConfigProvider()
        provider.add_filter(FILTER_FOLDER, lambda value: "/elsewhere")
        provider.remove_filters(FILTER_FOLDER)

        assert provider.get(FILTER_FOLDER, "/default") == "/default"


class TestConfigurationFileLoading:
    """YAML configuration loading."""

    def test_load_config_from_yaml(self, tmp_path):
        """Should load the default_handler section."""
        config_file = tmp_path / "wonolog.yaml"
        config_file.write_text("""
default_handler:
  folder: /custom/logs
  filename: app-{date}.log
  date_format: Y-m-d
  bubble: false
  use_locking: false
  min_level: INFO
  content_root: /var/www/content
""")

        config = load_config(config_file)
        assert config.folder == "/custom/logs"
        assert config.filename == "app-{date}.log"
        assert config.date_format == "Y-m-d"
        assert config.bubble is False
        assert config.use_locking is False
        assert config.min_level == "INFO"
        assert config.content_root == "/var/www/content"
        assert config.source == str(config_file)

    def test_load_config_missing_file_uses_defaults(self, tmp_path):
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config == WonologConfig()

    def test_load_config_empty_file(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        config = load_config(config_file)
        assert config.folder is None
        assert config.bubble is None

    def test_load_config_from_env_path(self, tmp_path, monkeypatch):
        """$WONOLOG_CONFIG should point to the config file."""
        config_file = tmp_path / "from-env.yaml"
        config_file.write_text("default_handler:\n  folder: /from/env\n")
        monkeypatch.setenv(ENV_CONFIG_FILE, str(config_file))

        config = load_config()
        assert config.folder == "/from/env"

    def test_invalid_yaml_uses_defaults(self, tmp_path, caplog):
        """Invalid YAML should use defaults and log warning."""
        config_file = tmp_path / "invalid.yaml"
        config_file.write_text("invalid: yaml: content: [")

        with caplog.at_level(logging.WARNING):
            config = load_config(config_file)

        assert config.folder is None
        assert any("Error parsing" in r.message for r in caplog.records)

    def test_non_mapping_section_uses_defaults(self, tmp_path, caplog):
        config_file = tmp_path / "list.yaml"
        config_file.write_text("default_handler:\n  - folder\n")

        with caplog.at_level(logging.WARNING):
            config = load_config(config_file)

        assert config.folder is None
        assert any("default_handler" in r.message for r in caplog.records)


class TestUnknownKeysHandling:

    def test_unknown_keys_logged(self, tmp_path, caplog):
        """Unknown keys should be logged as warnings and ignored."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
default_handler:
  unknown_key: some_value
  another_unknown: 123
  bubble: false
""")

        with caplog.at_level(logging.WARNING):
            config = load_config(config_file)

        assert any("unknown_key" in r.message for r in caplog.records)
        assert any("another_unknown" in r.message for r in caplog.records)
        assert config.bubble is False

    def test_known_keys_not_warned(self, tmp_path, caplog):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
default_handler:
  folder: /custom
  use_locking: true
""")

        with caplog.at_level(logging.WARNING):
            load_config(config_file)

        warning_messages = [r.message for r in caplog.records if r.levelno == logging.WARNING]
        assert not any("folder" in m for m in warning_messages)
        assert not any("use_locking" in m for m in warning_messages)


class TestWonologConfigProvider:

    def test_provider_only_holds_set_values(self):
        """Unset fields should not override extension point defaults."""
        provider = WonologConfig(folder="/logs", bubble=False).provider()

        assert provider.get(FILTER_FOLDER, "") == "/logs"
        assert provider.get(FILTER_BUBBLE, True) is False
        assert provider.get(FILTER_FILENAME, "{date}.log") == "{date}.log"
        assert provider.get(FILTER_USE_LOCKING, True) is True

    def test_provider_ignores_non_filter_fields(self):
        provider = WonologConfig(min_level="DEBUG", content_root="/site").provider()
        assert provider.get("min_level") is None
        assert provider.get("content_root") is None


class TestGlobalConfig:

    def test_get_config_caches_result(self, monkeypatch):
        monkeypatch.delenv(ENV_CONFIG_FILE, raising=False)
        reset_config()

        config1 = get_config()
        config2 = get_config()
        assert isinstance(config1, WonologConfig)
        assert config1 is config2

    def test_reset_config_clears_cache(self, monkeypatch):
        monkeypatch.delenv(ENV_CONFIG_FILE, raising=False)
        config1 = get_config()
        reset_config()
        config2 = get_config()

        assert config1 is not config2


class TestConfigResolverFolder:
    """Folder source order: override, env var, content root."""

    def test_env_var_folder(self):
        resolver = ConfigResolver(environ={ENV_ROOT_DIR: "/tmp/logs"})
        assert resolver.folder() == "/tmp/logs"

    def test_content_root_folder(self):
        """Without env var, logs go to <content_root>/wonolog."""
        resolver = ConfigResolver(content_root="/site/content/", environ={})
        assert resolver.folder() == "/site/content/wonolog"

    def test_content_root_backslash_stripped(self):
        resolver = ConfigResolver(content_root="C:\\site\\content\\", environ={})
        assert resolver.folder() == "C:\\site\\content/wonolog"

    def test_env_var_wins_over_content_root(self):
        resolver = ConfigResolver(
            content_root="/site/content",
            environ={ENV_ROOT_DIR: "/tmp/logs"},
        )
        assert resolver.folder() == "/tmp/logs"

    def test_override_wins_over_env_var(self):
        provider = MappingConfigProvider({FILTER_FOLDER: "/override"})
        resolver = ConfigResolver(provider, environ={ENV_ROOT_DIR: "/tmp/logs"})
        assert resolver.folder() == "/override"

    def test_filter_receives_candidate_folder(self):
        provider = FilterConfigProvider()
        provider.add_filter(FILTER_FOLDER, lambda folder: folder + "/app")
        resolver = ConfigResolver(provider, environ={ENV_ROOT_DIR: "/tmp/logs"})
        assert resolver.folder() == "/tmp/logs/app"

    def test_no_source_gives_empty_folder(self):
        assert ConfigResolver(environ={}).folder() == ""

    @pytest.mark.parametrize("override", [None, 42, ["/tmp/logs"], False])
    def test_non_string_override_discarded(self, override):
        provider = MappingConfigProvider({FILTER_FOLDER: override})
        resolver = ConfigResolver(provider, environ={ENV_ROOT_DIR: "/tmp/logs"})
        assert resolver.folder() == ""


class TestConfigResolverResolve:

    def test_defaults(self):
        config = ConfigResolver(environ={}).resolve()
        assert config == Configuration(
            folder="",
            filename_format="{date}.log",
            date_format="Y/m/d",
            bubble=True,
            use_locking=True,
        )

    def test_configuration_is_immutable(self):
        config = ConfigResolver(environ={}).resolve()
        with pytest.raises(AttributeError):
            config.folder = "/elsewhere"

    def test_leading_separators_stripped_from_filename(self):
        provider = MappingConfigProvider({FILTER_FILENAME: "/\\app-{date}.log"})
        config = ConfigResolver(provider, environ={}).resolve()
        assert config.filename_format == "app-{date}.log"

    def test_non_string_filename_passed_through(self):
        provider = MappingConfigProvider({FILTER_FILENAME: 123})
        config = ConfigResolver(provider, environ={}).resolve()
        assert config.filename_format == 123

    def test_date_format_override(self):
        provider = MappingConfigProvider({FILTER_DATE_FORMAT: "Y-m-d"})
        assert ConfigResolver(provider, environ={}).resolve().date_format == "Y-m-d"

    def test_flags_coerced_to_bool(self):
        provider = MappingConfigProvider({FILTER_BUBBLE: 0, FILTER_USE_LOCKING: "yes"})
        config = ConfigResolver(provider, environ={}).resolve()
        assert config.bubble is False
        assert config.use_locking is True
