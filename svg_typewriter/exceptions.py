"""Exception hierarchy for svg-typewriter.

Parameter errors are the only ones meant to reach a caller as a client
error. Font fetch errors are caught by the font resolver and logged.
"""

from __future__ import annotations

from typing import Any


class TypewriterError(Exception):
    """Base class for all svg-typewriter errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({extra})"


class ParameterError(TypewriterError):
    """A request parameter could not be turned into render settings."""


class InvalidLinesError(ParameterError):
    """The structured ``lines`` parameter is not a list of line objects."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__("Invalid lines parameter", details)


class InvalidNumericError(ParameterError):
    """A numeric parameter is missing a number or is out of range."""

    def __init__(self, name: str, value: Any) -> None:
        super().__init__("Invalid numeric parameter", {"name": name, "value": value})
        self.name = name
        self.value = value


class FontFetchError(TypewriterError):
    """A remote font stylesheet or font file could not be fetched."""

    def __init__(
        self,
        url: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        if status_code is not None:
            details["status"] = status_code
        super().__init__(f"Failed to fetch font resource: {url}", details)
        self.url = url
        self.status_code = status_code


class ConfigError(TypewriterError):
    """The configuration file is unreadable or malformed."""
