"""
Unit tests for configuration loading and the configuration singleton.
"""

import tomllib

import pytest

from unitybuildrunner.config import (
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    load_toml_file,
    reset_config_path,
    set_config_path,
)
from unitybuildrunner.models.config import AppConfig
from unitybuildrunner.validation import ValidationError


@pytest.mark.unit
class TestConfigManager:
    """Test cases for the configuration singleton."""

    def test_load_from_explicit_path(self, config_file):
        set_config_path(config_file)

        config = get_config()

        assert config.supervisor.default_log_file == "editor.log"
        assert config.classifier.pattern_set == "strict"
        assert config.log_level == "DEBUG"

    def test_config_is_cached(self, config_file):
        set_config_path(config_file)

        assert not is_config_loaded()
        first = get_config()
        assert is_config_loaded()
        assert get_config() is first

    def test_clear_cache_reloads(self, config_file):
        set_config_path(config_file)
        first = get_config()

        clear_config_cache()

        assert get_config() is not first
        assert get_config() == first

    def test_missing_explicit_file_is_error(self, temp_dir):
        set_config_path(temp_dir / "missing.toml")

        with pytest.raises(FileNotFoundError):
            get_config()

    def test_missing_default_file_uses_defaults(self, temp_dir, monkeypatch):
        monkeypatch.setattr(
            "unitybuildrunner.config.manager._DEFAULT_CONFIG_FILE_PATH", temp_dir / "absent.toml"
        )
        reset_config_path()

        assert get_config() == AppConfig()

    def test_invalid_values_raise(self, temp_dir):
        import toml

        path = temp_dir / "config.toml"
        with open(path, "w") as f:
            toml.dump({"supervisor": {"log_wait_timeout": -1}}, f)
        set_config_path(path)

        with pytest.raises(ValidationError):
            get_config()

    def test_malformed_toml_raises(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text("[supervisor\ntimeout = ", encoding="utf-8")
        set_config_path(path)

        with pytest.raises(tomllib.TOMLDecodeError):
            get_config()

    def test_config_info(self, config_file):
        set_config_path(config_file)
        get_config()

        info = get_config_info()

        assert info["config_loaded"] is True
        assert info["config_path"] == str(config_file)
        assert info["config_path_explicit"] is True
        assert info["pattern_set"] == "strict"

    def test_load_toml_file_missing(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_toml_file(temp_dir / "nope.toml")
