"""bc_utils: bit-flag state encoding and small helpers around it."""

from __future__ import annotations

from loguru import logger

from bc_utils import bit_flags
from bc_utils.errors import BCUtilsError, ConfigurationError, FlagLookupError, InvalidArgument, format_error

__version__ = "0.10.0"

__all__ = [
    "BCUtilsError",
    "ConfigurationError",
    "FlagLookupError",
    "InvalidArgument",
    "bit_flags",
    "format_error",
    "modules",
    "version",
]

# silent until the application calls bc_utils.logging.configure_logging
logger.disable("bc_utils")

_MODULES = [
    "bc_utils.bit_flags",
    "bc_utils.cli",
    "bc_utils.config",
    "bc_utils.core.events",
    "bc_utils.errors",
    "bc_utils.logging",
    "bc_utils.telemetry",
]


def version() -> str:
    return __version__


def modules() -> list[str]:
    """Dotted names of the public bc_utils modules."""
    return list(_MODULES)
