"""Tests for logging configuration."""

import logging
import os
from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

from ai_prompt_core.logging import get_logger, setup_logging
from ai_prompt_core.logging.logging_config import DEFAULT_LOG_LEVELS, LoggingConfig


class TestLoggingConfig:
    """Test LoggingConfig class."""

    def test_default_config_path_from_env(self):
        """Test getting config path from environment."""
        with patch.dict(os.environ, {"AI_PROMPT_LOGGING_CONFIG": "/path/to/config.yml"}):
            config = LoggingConfig()
            assert config.config_path == Path("/path/to/config.yml")

    def test_no_config_path_returns_none(self):
        """Test that no env vars results in None config path."""
        with patch.dict(os.environ, clear=True):
            config = LoggingConfig()
            assert config.config_path is None

    def test_load_config_from_file(self, tmp_path: Path) -> None:
        """Test loading config from YAML file."""
        config_file = tmp_path / "logging.yml"
        config_file.write_text("""
version: 1
disable_existing_loggers: false
handlers:
  console:
    class: logging.StreamHandler
""")

        config = LoggingConfig(config_path=config_file)
        loaded = config.load_config()

        assert loaded["version"] == 1
        assert loaded["disable_existing_loggers"] is False
        assert "console" in loaded["handlers"]

    def test_missing_file_falls_back_to_defaults(self, tmp_path: Path) -> None:
        config = LoggingConfig(config_path=tmp_path / "absent.yml")
        assert "ai_prompt_core" in config.load_config()["loggers"]

    def test_load_default_config_when_no_file(self):
        """Test loading default config when no file exists."""
        config = LoggingConfig()
        loaded = config.load_config()

        assert loaded["version"] == 1
        assert "formatters" in loaded
        assert "handlers" in loaded
        assert loaded["loggers"]["ai_prompt_core"]["propagate"] is False

    def test_log_level_from_env(self):
        with patch.dict(os.environ, {"AI_PROMPT_LOG_LEVEL": "DEBUG"}):
            loaded = LoggingConfig().load_config()
        assert loaded["loggers"]["ai_prompt_core"]["level"] == "DEBUG"

    def test_config_is_cached(self):
        config = LoggingConfig()
        assert config.load_config() is config.load_config()

    @patch("logging.config.dictConfig")
    def test_apply_config(self, mock_dict_config: Mock) -> None:
        """Test applying logging configuration."""
        config = LoggingConfig()
        config.apply()

        mock_dict_config.assert_called_once()
        call_args = mock_dict_config.call_args[0][0]
        assert call_args["version"] == 1


class TestSetupLogging:
    """Test setup_logging function."""

    @patch("ai_prompt_core.logging.logging_config.LoggingConfig.apply")
    def test_setup_logging_basic(self, mock_apply: Mock) -> None:
        """Test basic setup_logging call."""
        setup_logging()
        mock_apply.assert_called_once()

    @patch("ai_prompt_core.logging.logging_config.LoggingConfig.apply")
    def test_setup_logging_with_level(self, mock_apply: Mock) -> None:
        """Test setup_logging with custom level."""
        setup_logging(level="DEBUG")

        for name in DEFAULT_LOG_LEVELS:
            assert logging.getLogger(name).level == logging.DEBUG
        setup_logging(level="INFO")

    @patch("ai_prompt_core.logging.logging_config.LoggingConfig")
    def test_setup_logging_with_config_path(self, mock_config_class: Mock, tmp_path: Path) -> None:
        """Test setup_logging with custom config path."""
        config_file = tmp_path / "custom.yml"
        mock_instance = MagicMock()
        mock_config_class.return_value = mock_instance

        setup_logging(config_path=config_file)

        mock_config_class.assert_called_once_with(config_file)
        mock_instance.apply.assert_called_once()


class TestGetLogger:
    """Test get_logger function."""

    @patch("ai_prompt_core.logging.logging_config.setup_logging")
    def test_get_logger_ensures_setup(self, mock_setup: Mock) -> None:
        """Test that get_logger sets logging up on first use."""
        import ai_prompt_core.logging.logging_config as logging_config

        previous = logging_config._logging_config
        logging_config._logging_config = None
        try:
            logger = get_logger("ai_prompt_core.test")
        finally:
            logging_config._logging_config = previous

        mock_setup.assert_called_once()
        assert logger.name == "ai_prompt_core.test"

    def test_get_logger_reuses_config(self) -> None:
        """Test that subsequent calls don't re-setup logging."""
        get_logger("ai_prompt_core.first")

        with patch("ai_prompt_core.logging.logging_config.setup_logging") as mock_setup:
            get_logger("ai_prompt_core.module1")
            get_logger("ai_prompt_core.module2")

            mock_setup.assert_not_called()
