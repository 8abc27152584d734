"""Centralized logging configuration for zemdomu using Loguru.

The linter is mostly used as a library, so the lazy default level is
``WARNING``; the CLI raises it with ``--verbose``.

Examples
--------
Basic usage:

>>> from zemdomu.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.debug("Linted {path}", path="index.html")

Configure logging globally::

    from zemdomu.logging import configure_logging
    configure_logging(level="DEBUG", format="rich")
"""

import os
import sys
from contextlib import suppress
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from loguru import Logger

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["console", "json", "structured", "rich"]

_CURRENT_CONFIG: dict | None = None
_HANDLER_IDS: list[int] = []
_DEFAULT_HANDLER_REMOVED = False


def configure_logging(
    level: LogLevel = "WARNING",
    format: LogFormat = "structured",
    output_file: str | Path | None = None,
    use_color: bool = True,
    force_reconfigure: bool = False,
) -> None:
    """Configure global logging for zemdomu.

    Idempotent: calling it again with the same settings does not add
    handlers.

    Parameters
    ----------
    level : LogLevel, default="WARNING"
        Minimum log level to output
    format : LogFormat, default="structured"
        Output format:
        - "console": plain one-line records
        - "json": serialized records for log aggregation
        - "structured": colored Loguru format with module and line
        - "rich": Rich console handler
    output_file : str | Path | None, default=None
        Optional file that receives JSON records in addition to stderr
    use_color : bool, default=True
        Use ANSI colors in structured format (auto-disabled for non-TTY)
    force_reconfigure : bool, default=False
        Reconfigure even if the settings did not change
    """
    global _CURRENT_CONFIG, _DEFAULT_HANDLER_REMOVED

    current_config = {
        "level": level,
        "format": format,
        "output_file": str(output_file) if output_file else None,
        "use_color": use_color,
    }

    if not force_reconfigure and current_config == _CURRENT_CONFIG:
        return

    # Loguru ships a DEBUG handler on stderr; drop it once so the level applies
    if not _DEFAULT_HANDLER_REMOVED:
        with suppress(ValueError):
            logger.remove(0)
        _DEFAULT_HANDLER_REMOVED = True

    # Only remove handlers we added so pytest's capture sinks survive
    for handler_id in _HANDLER_IDS:
        with suppress(ValueError):
            logger.remove(handler_id)
    _HANDLER_IDS.clear()

    if format == "rich":
        rich_handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            markup=False,
            show_time=True,
            show_level=True,
            show_path=False,
        )
        handler_id = logger.add(sink=rich_handler, level=level, format="{message}")
    elif format == "json":
        handler_id = logger.add(sink=sys.stderr, level=level, serialize=True)
    elif format == "structured":
        colorize = use_color and sys.stderr.isatty()
        color_level = "<level>{level: <8}</level>" if colorize else "{level: <8}"
        structured_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> "
            f"[{color_level}]"
            "<cyan>{name}:{function}:{line}</cyan> | <level>{message}</level>"
        )
        handler_id = logger.add(
            sink=sys.stderr,
            level=level,
            format=structured_format,
            colorize=colorize,
        )
    else:  # console
        handler_id = logger.add(
            sink=sys.stderr,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} {level: <8} | {name} | {message}",
            colorize=False,
        )
    _HANDLER_IDS.append(handler_id)

    if output_file:
        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        handler_id = logger.add(
            sink=output_path,
            level=level,
            serialize=True,
            rotation="10 MB",
            retention="1 week",
        )
        _HANDLER_IDS.append(handler_id)

    _CURRENT_CONFIG = current_config


@lru_cache(maxsize=256)
def get_logger(name: str) -> "Logger":
    """Get a logger bound with the given module name (cached).

    Parameters
    ----------
    name : str
        Logger name, typically ``__name__`` of the calling module

    Returns
    -------
    loguru.Logger
        Logger instance bound with ``module=name``
    """
    _ensure_configured()
    return logger.bind(module=name)


def _ensure_configured() -> None:
    """Apply environment-driven defaults if configure_logging() was never called."""
    if _CURRENT_CONFIG is None:
        level = os.getenv("ZEMDOMU_LOG_LEVEL", "WARNING").upper()
        format_type = os.getenv("ZEMDOMU_LOG_FORMAT", "structured").lower()
        configure_logging(level=level, format=format_type)  # type: ignore[arg-type]
