from __future__ import annotations


class HttperfRunnerError(Exception):
    """Base class for errors raised by the sweep runner."""


class ConfigError(HttperfRunnerError):
    """Raised when the YAML configuration cannot be loaded or validated."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigFileNotFoundError(ConfigError):
    """Raised when the configuration path does not name an existing file."""


class MissingBinaryError(HttperfRunnerError):
    """Raised when no usable httperf executable is available."""

    def __init__(self, path: str | None) -> None:
        super().__init__(f"httperf binary not found or not executable: {path or '<unset>'}")
        self.path = path


__all__ = [
    "HttperfRunnerError",
    "ConfigError",
    "ConfigFileNotFoundError",
    "MissingBinaryError",
]
