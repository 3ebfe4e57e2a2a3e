"""Settings models and flag map loading."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from bc_utils.bit_flags import is_flag
from bc_utils.errors import ConfigurationError

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class AppPaths(BaseModel):
    """Resolved directories for bc_utils runtime files."""

    base_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("BC_UTILS_HOME", Path.home() / ".bc_utils"))
    )

    @property
    def config_dir(self) -> Path:
        return self.base_dir / "config"

    @property
    def logs_dir(self) -> Path:
        return self.base_dir / "logs"

    def ensure(self) -> None:
        for path in (self.base_dir, self.config_dir, self.logs_dir):
            path.mkdir(parents=True, exist_ok=True)


class FlagSettings(BaseModel):
    map_file: Path | None = None


class LoggingSettings(BaseModel):
    level: LogLevel = "WARNING"


class BCUtilsSettings(BaseModel):
    app_name: str = "bc_utils"
    paths: AppPaths = Field(default_factory=AppPaths)
    flags: FlagSettings = Field(default_factory=FlagSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(env_path: Path | None = None) -> BCUtilsSettings:
    """Load settings from environment variables and defaults."""

    env_file = env_path or Path(".env")
    if env_file.exists():
        load_dotenv(env_file)

    overrides: dict[str, Any] = {}

    if map_file := os.getenv("BC_UTILS_FLAG_MAP"):
        overrides.setdefault("flags", {})["map_file"] = Path(map_file).expanduser()

    if level := os.getenv("BC_UTILS_LOG_LEVEL"):
        overrides.setdefault("logging", {})["level"] = level.upper()

    try:
        settings = BCUtilsSettings(**overrides)
    except ValueError as exc:
        raise ConfigurationError(f"invalid settings: {exc}", expected="valid BC_UTILS_* values") from exc
    settings.paths.ensure()
    return settings


def parse_int(text: str) -> int:
    """Parse a decimal, ``0b``, ``0o`` or ``0x`` integer literal. Decimals may have leading zeros."""
    cleaned = text.strip().replace("_", "")
    try:
        if cleaned.isdecimal():
            return int(cleaned, 10)
        return int(cleaned, 0)
    except ValueError:
        raise ValueError(f"not an integer: {text!r}") from None


def load_flag_map(path: Path) -> dict[int, str]:
    """
    Read a flag map from a JSON object file.

    Example file::

        {"1": "Ready", "2": "In Progress", "0x4": "Completed"}

    Raises:
        ConfigurationError: If the file is missing, is not a JSON object, or
            has a key that is not a power of two or a label that is not a
            non-empty string
    """
    key = str(path)
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigurationError("flag map file not found", config_key=key) from None
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"cannot read flag map: {exc}", config_key=key) from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(
            "flag map must be a JSON object", config_key=key, expected="object", received=type(raw).__name__
        )

    flag_map: dict[int, str] = {}
    for text, label in raw.items():
        try:
            flag = parse_int(text)
        except ValueError:
            flag = None
        if flag is None or not is_flag(flag):
            raise ConfigurationError(
                "flag map keys must be powers of two", config_key=key, expected="power of two", received=text
            )
        if not isinstance(label, str) or not label:
            raise ConfigurationError(
                f"flag {flag} needs a non-empty label", config_key=key, expected="string", received=label
            )
        flag_map[flag] = label
    return flag_map
