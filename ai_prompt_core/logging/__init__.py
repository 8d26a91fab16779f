"""Logging infrastructure for AI Prompt Core.

@public

Key components:
    get_logger: Factory function for module loggers
    setup_logging: Initialize logging configuration from YAML
    LoggingConfig: Configuration class for logging settings

Example:
    >>> from ai_prompt_core.logging import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("Rendering started")
"""

from .logging_config import LoggingConfig, get_logger, setup_logging

__all__ = [
    "LoggingConfig",
    "get_logger",
    "setup_logging",
]
