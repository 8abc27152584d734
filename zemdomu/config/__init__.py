"""Configuration loading and management for zemdomu."""

from zemdomu.config.loader import ConfigLoader, load_config
from zemdomu.config.models import (
    DEFAULT_EXCLUDES,
    LinterOptions,
    LoggingConfig,
    ZemDomuConfig,
)

__all__ = [
    "DEFAULT_EXCLUDES",
    "ConfigLoader",
    "LinterOptions",
    "LoggingConfig",
    "ZemDomuConfig",
    "load_config",
]
