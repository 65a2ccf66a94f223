"""
Tests for configuration management

Tests cover:
- ClientOptions defaults and validation
- Loading configuration files and defaults
- Saving and resetting configuration
- Applying the logging section
"""
import json
import logging
from logging.handlers import RotatingFileHandler

import pytest
from pydantic import ValidationError

from smallpop3.utils.config import AppConfig, ClientOptions, ConfigManager
from smallpop3.utils.errors import ConfigurationError, InvalidConfigError


class TestClientOptions:
    """Tests for ClientOptions"""

    def test_defaults(self):
        options = ClientOptions()

        assert options.formatted_size_precision == 2
        assert options.default_timeout == 1.5
        assert options.credentials_allow_special_chars is False
        assert options.max_line_length == 2048

    def test_options_are_frozen(self):
        options = ClientOptions()

        with pytest.raises(ValidationError):
            options.default_timeout = 10

    @pytest.mark.parametrize("field, value", [
        ("formatted_size_precision", -1),
        ("default_timeout", 0),
        ("default_timeout", -2.5),
        ("max_line_length", 100),
    ])
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValidationError):
            ClientOptions(**{field: value})


class TestConfigLoading:
    """Tests for ConfigManager loading"""

    def test_missing_file_uses_defaults(self, temp_dir):
        manager = ConfigManager(temp_dir / "config.json")

        assert manager.config == AppConfig()
        assert manager.client_options == ClientOptions()
        assert not (temp_dir / "config.json").exists()

    def test_load_partial_file(self, temp_dir):
        """Test missing sections and fields fall back to defaults"""
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"client": {"default_timeout": 4}}), encoding="utf-8")

        manager = ConfigManager(path)

        assert manager.client_options.default_timeout == 4.0
        assert manager.client_options.formatted_size_precision == 2
        assert manager.config.logging.log_level == "INFO"

    def test_invalid_json(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(InvalidConfigError) as exc_info:
            ConfigManager(path)

        assert exc_info.value.details["path"] == str(path)

    def test_schema_mismatch(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"client": {"default_timeout": "soon"}}), encoding="utf-8")

        with pytest.raises(InvalidConfigError):
            ConfigManager(path)

    def test_unreadable_path(self, temp_dir):
        """Test a directory in place of the file is a configuration error"""
        path = temp_dir / "config.json"
        path.mkdir()

        with pytest.raises(ConfigurationError):
            ConfigManager(path)


class TestConfigSaving:
    """Tests for saving and resetting configuration"""

    def test_save_and_reload(self, temp_dir):
        path = temp_dir / "nested" / "config.json"
        manager = ConfigManager(path)
        manager.config = AppConfig(client=ClientOptions(formatted_size_precision=1))

        manager.save()

        assert ConfigManager(path).client_options.formatted_size_precision == 1

    def test_reset_to_defaults(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"client": {"max_line_length": 4096}}), encoding="utf-8")
        manager = ConfigManager(path)

        manager.reset_to_defaults()

        assert manager.client_options.max_line_length == 2048
        assert json.loads(path.read_text(encoding="utf-8"))["client"]["max_line_length"] == 2048


class TestApplyLogging:
    """Tests for ConfigManager.apply_logging"""

    def test_file_logging_from_config(self, temp_dir, isolated_logging):
        path = temp_dir / "config.json"
        log_dir = temp_dir / "logs"
        path.write_text(
            json.dumps({"logging": {"log_level": "DEBUG", "log_dir": str(log_dir)}}),
            encoding="utf-8",
        )

        log_manager = ConfigManager(path).apply_logging()

        assert log_manager.log_level == logging.DEBUG
        assert any(
            isinstance(handler, RotatingFileHandler)
            for handler in log_manager.root_logger.handlers
        )
        assert (log_dir / "app.log").exists()
