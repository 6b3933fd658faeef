"""Logging configuration for the command line interface."""

from __future__ import annotations

import logging
import logging.config
import os
import sys
import typing as t
from pathlib import Path

import yaml

__all__ = ["ConsoleFormatter", "setup_console_logging"]

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "{asctime:23s} | {levelname:8s} | {name:30s} | {message}"
LOG_CONFIG_ENV_VAR = "JSONPATH_STREAM_LOG_CONFIG"


class ConsoleFormatter(logging.Formatter):
    """Custom formatter for console logging."""

    def __init__(self, **kwargs: t.Any) -> None:
        """Initialize the console formatter."""
        kwargs.setdefault("fmt", DEFAULT_FORMAT)
        kwargs.setdefault("style", "{")
        super().__init__(**kwargs)


def load_yaml_logging_config(path: Path) -> t.Any:  # noqa: ANN401
    """Load the logging config from the YAML file.

    Args:
        path: A path to the YAML file.

    Returns:
        The logging config.
    """
    with path.open() as f:
        return yaml.safe_load(f)


def setup_console_logging(*, log_level: str | int | None = None) -> None:
    """Setup logging.

    A YAML dictConfig file named by ``JSONPATH_STREAM_LOG_CONFIG`` takes
    precedence. Otherwise a console handler is installed unless the root logger
    already has handlers.

    Args:
        log_level: The log level to set.
    """
    level = log_level or logging.INFO
    root = logging.getLogger()
    root.setLevel(level)

    if LOG_CONFIG_ENV_VAR in os.environ:
        log_config_path = Path(os.environ[LOG_CONFIG_ENV_VAR])
        try:
            logging.config.dictConfig(load_yaml_logging_config(log_config_path))
        except FileNotFoundError:
            logger.warning("Logging config file not found: %s", log_config_path)
        else:
            return

    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ConsoleFormatter())
    root.addHandler(handler)
