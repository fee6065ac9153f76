"""Loguru setup for fantasy_value.

Engine modules never configure output. They take a bound logger from
get_logger() and only emit DEBUG records (degenerate categories, parse
failures, cohort sizes). Whoever runs the pipeline decides where those go:
the CLI calls setup_logging() with the configured level and log directory,
and a host application may call it too or add its own loguru sinks.

Example:
    >>> from fantasy_value.logging import setup_logging, get_logger
    >>> setup_logging(level="DEBUG", log_dir=None)
    >>> logger = get_logger(__name__)
    >>> logger.debug("Scoring cohort of {} records", 412)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{line} | {message}"


class InterceptHandler(logging.Handler):
    """Route stdlib records (pandas, typer, host code) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip frames inside the logging package so the caller is reported
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).bind(
            name=record.name
        ).log(level, record.getMessage())


def setup_logging(
    level: str = "INFO",
    log_dir: str | Path | None = "logs",
    rotation: str = "1 day",
    retention: str = "30 days",
    serialize: bool = True,
) -> None:
    """Replace loguru's sinks with a stderr sink and, optionally, a log file.

    Args:
        level: Minimum level for every sink.
        log_dir: Directory for ``fantasy_value_<date>.log``; None logs to
            stderr only.
        rotation: Loguru rotation rule for the file sink.
        retention: Loguru retention rule for the file sink.
        serialize: Write the file sink as JSON lines.
    """
    logger.remove()
    logger.configure(extra={"name": "fantasy_value"})

    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / "fantasy_value_{time:YYYY-MM-DD}.log",
            level=level,
            format=FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            serialize=serialize,
            enqueue=True,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


def get_logger(name: str) -> Any:
    """Loguru logger bound to ``name`` (usually the module's __name__)."""
    return logger.bind(name=name)


__all__ = ["InterceptHandler", "get_logger", "logger", "setup_logging"]
