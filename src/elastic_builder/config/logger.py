from __future__ import annotations

import inspect
import logging.config
import sys
import typing
from typing import Any, override

from loguru import logger

from elastic_builder.config.general import CONFIG

if typing.TYPE_CHECKING:
    from loguru import Record


class InterceptHandler(logging.Handler):
    """Logger which forwards to loguru."""

    @override
    def emit(self, record: logging.LogRecord) -> None:
        """Intercept stdlib logging and send it to loguru handling."""
        # Get corresponding Loguru level if it exists.
        level: str | int
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message.
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def format_stdout(record: Record) -> str:
    """Build the colourised stdout line for a record."""
    header = "<cyan>{time:YYYY-MM-DDTHH:mm:ss.SSSZ}</cyan> <level>{level:8}</level> "
    if "scope" in record["extra"]:
        header += f"<green>{record['extra']['scope']}</green> "
    return header + "{message:80} <cyan>{name}:{function}():{line}</cyan>\n{exception}"


def configure_logging() -> dict[str, Any]:
    """Route standardlib logging to loguru and configure loguru."""
    std_log_config = {
        "version": 1,
        "handlers": {
            "loguru": {
                "()": InterceptHandler,
            }
        },
        "loggers": {
            "elastic_builder": {
                "level": "DEBUG",
                "handlers": ["loguru"],
            },
        },
        "incremental": False,
        "disable_existing_loggers": False,
    }
    logging.config.dictConfig(std_log_config)

    logger.remove()
    logger.add(
        sys.stdout,
        format=format_stdout,
        colorize=True,
        backtrace=True,
        diagnose=False,
        level=CONFIG.log_level,
    )
    if CONFIG.log.file_enabled:
        logger.add(
            CONFIG.log.file_path,
            format="{time:YYYY-MM-DDTHH:mm:ss.SSSZ} | {level:8} | {message:80} | {extra} | {name}:{function}:{line}",
            colorize=False,
            serialize=CONFIG.log.serialize,
            backtrace=True,
            diagnose=True,
            rotation=CONFIG.log.rotation,
            retention=CONFIG.log.retention,
            level=CONFIG.log_level,
        )

    return std_log_config
