"""Centralized logging configuration for AI Prompt Core.

@public

Supports YAML-based configuration and programmatic setup with defaults.

Usage:
    >>> from ai_prompt_core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Cache resolved")

Environment variables:
    AI_PROMPT_LOGGING_CONFIG: Path to custom logging.yml
    AI_PROMPT_LOG_LEVEL: Default log level (INFO, DEBUG, etc.)
"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Any

import yaml

# Default log levels for different components
DEFAULT_LOG_LEVELS = {
    "ai_prompt_core": "INFO",
    "ai_prompt_core.render": "INFO",
    "ai_prompt_core.inputs": "INFO",
    "ai_prompt_core.module_cache": "INFO",
    "ai_prompt_core.components": "INFO",
}


class LoggingConfig:
    """Manages logging configuration for the library.

    @public

    Configuration precedence:
        1. Explicit config_path parameter
        2. AI_PROMPT_LOGGING_CONFIG environment variable
        3. Default configuration

    Example:
        >>> config = LoggingConfig()
        >>> config.apply()
        >>>
        >>> config = LoggingConfig(Path("custom_logging.yml"))
        >>> config.apply()

    Note:
        Configuration is lazy-loaded and cached after first access.
    """

    def __init__(self, config_path: Path | None = None):
        self.config_path = config_path or self._get_default_config_path()
        self._config: dict[str, Any] | None = None

    @staticmethod
    def _get_default_config_path() -> Path | None:
        """Get config path from the environment, or None for the built-in defaults."""
        if env_path := os.environ.get("AI_PROMPT_LOGGING_CONFIG"):
            return Path(env_path)
        return None

    def load_config(self) -> dict[str, Any]:
        """Load logging configuration from file or defaults.

        Returns:
            Dictionary in ``logging.config.dictConfig`` format.

        Note:
            Configuration is cached after first load. Create a new
            LoggingConfig instance to reload from disk.
        """
        if self._config is None:
            if self.config_path and self.config_path.exists():
                with open(self.config_path, "r", encoding="utf-8") as f:
                    self._config = yaml.safe_load(f)
            else:
                self._config = self._get_default_config()
        assert self._config is not None
        return self._config

    @staticmethod
    def _get_default_config() -> dict[str, Any]:
        """Get default logging configuration.

        Default format:
            "HH:MM:SS.mmm | LEVEL | logger.name - message"
        """
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s - %(message)s",
                    "datefmt": "%H:%M:%S",
                },
                "detailed": {
                    "format": ("%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d - %(message)s"),
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "ai_prompt_core": {
                    "level": os.environ.get("AI_PROMPT_LOG_LEVEL", "INFO"),
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
            "root": {
                "level": "WARNING",
                "handlers": ["console"],
            },
        }

    def apply(self) -> None:
        """Apply the logging configuration via ``logging.config.dictConfig``.

        Note:
            Multiple calls reconfigure logging.
        """
        config = self.load_config()
        logging.config.dictConfig(config)


# Global configuration instance
_logging_config: LoggingConfig | None = None


def setup_logging(config_path: Path | None = None, level: str | None = None) -> None:
    """Setup logging for the AI Prompt Core library.

    @public

    Args:
        config_path: Optional path to YAML logging configuration file.
        level: Optional log level override applied to every library logger.

    Example:
        >>> setup_logging()
        >>> setup_logging(level="DEBUG")
    """
    global _logging_config

    _logging_config = LoggingConfig(config_path)
    _logging_config.apply()

    if level:
        for logger_name in DEFAULT_LOG_LEVELS:
            logging.getLogger(logger_name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for library components.

    @public

    Initializes logging on first use so modules can create their loggers at
    import time.

    Args:
        name: Logger name, typically ``__name__``.
    """
    if _logging_config is None:
        setup_logging()

    return logging.getLogger(name)
