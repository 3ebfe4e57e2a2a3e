"""Central logging configuration using loguru."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from bc_utils.config import BCUtilsSettings

_LOGGER_CONFIGURED = False


def configure_logging(settings: BCUtilsSettings, level: str | None = None) -> None:
    """Enable bc_utils logs and route them to stderr and a rotating file only once."""

    global _LOGGER_CONFIGURED
    logger.enable("bc_utils")
    if _LOGGER_CONFIGURED:
        return

    log_dir: Path = settings.paths.logs_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.configure(extra={"context": "bc_utils"})
    logger.add(
        sink=lambda msg: print(msg, end="", file=sys.stderr),
        level=level or settings.logging.level,
        colorize=True,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {extra[context]} | {message}",
    )
    logger.add(
        log_dir / "bc_utils.log",
        level="DEBUG",
        rotation="1 week",
        retention=4,
        compression="zip",
        enqueue=True,
        backtrace=True,
        diagnose=True,
    )

    _LOGGER_CONFIGURED = True


def get_logger(name: str | None = None):
    return logger.bind(context=name or "bc_utils")
