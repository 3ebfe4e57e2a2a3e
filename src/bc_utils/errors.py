"""Exception types shared across bc_utils."""

from __future__ import annotations

from typing import Any


class BCUtilsError(Exception):
    """Base class for every error raised by bc_utils."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def context(self) -> dict[str, Any]:
        return {}


class InvalidArgument(BCUtilsError, ValueError):
    """A flag or target is not an integer in the accepted range."""

    def __init__(self, message: str, received: Any = None) -> None:
        super().__init__(message)
        self.received = received

    def context(self) -> dict[str, Any]:
        return {"Received": repr(self.received)}


class FlagLookupError(BCUtilsError, LookupError):
    """A flag value or label could not be resolved through a flag map."""

    def __init__(self, message: str, target: int | None = None, flag: int | str | None = None) -> None:
        super().__init__(message)
        self.target = target
        self.flag = flag

    def context(self) -> dict[str, Any]:
        info: dict[str, Any] = {}
        if self.target is not None:
            info["Target"] = self.target
        if self.flag is not None:
            info["Flag"] = self.flag
        return info


class ConfigurationError(BCUtilsError):
    """Settings or a flag map file failed validation."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        expected: str | None = None,
        received: Any = None,
    ) -> None:
        super().__init__(message)
        self.config_key = config_key
        self.expected = expected
        self.received = received

    def context(self) -> dict[str, Any]:
        info: dict[str, Any] = {}
        if self.config_key is not None:
            info["Config Key"] = self.config_key
        if self.expected is not None:
            info["Expected"] = self.expected
        if self.received is not None:
            info["Received"] = repr(self.received)
        return info


def format_error(error: BaseException) -> str:
    """
    Render an error as a multi-line report.

    Examples:
        ConfigurationError("Invalid config", "theme", "str", 3) ->
            "ConfigurationError: Invalid config\\nConfig Key: theme\\nExpected: str\\nReceived: 3"

    Errors that are not part of bc_utils fall back to ``repr``.
    """
    if not isinstance(error, BCUtilsError):
        return repr(error)
    lines = [f"{type(error).__name__}: {error.message}"]
    lines.extend(f"{key}: {value}" for key, value in error.context().items())
    return "\n".join(lines)
