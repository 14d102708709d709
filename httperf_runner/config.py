from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Union

import yaml

from .binary import discover_httperf
from .exceptions import ConfigError, ConfigFileNotFoundError

LOGGER = logging.getLogger("httperf_runner.config")

Number = Union[int, float]

VALID_OPTIONS: tuple[str, ...] = (
    "server",
    "rate",
    "low_rate",
    "high_rate",
    "rate_step",
    "wait_time",
    "port",
    "connections",
    "send_buffer",
    "recv_buffer",
    "uri_list",
    "httperf",
    "host",
    "username",
    "password",
    "num_call",
    "hog",
)

_INT_OPTIONS = frozenset({"port", "connections", "send_buffer", "recv_buffer", "num_call"})
_NUMBER_OPTIONS = frozenset({"rate", "low_rate", "high_rate", "rate_step", "wait_time"})
_STR_OPTIONS = frozenset({"server", "host", "httperf", "username", "password"})


@dataclass(frozen=True)
class RunConfig:
    """Immutable set of options for one sweep of httperf invocations."""

    server: str = "localhost"
    host: str = "localhost"
    rate: Number = 50
    low_rate: Number | None = None
    high_rate: Number | None = None
    rate_step: Number = 10
    wait_time: Number = 0
    port: int = 80
    connections: int = 200
    send_buffer: int = 4096
    recv_buffer: int = 16384
    uri_list: tuple[str, ...] = ("/",)
    num_call: int = 10
    hog: bool = True
    httperf: str = field(default_factory=discover_httperf)
    username: str | None = None
    password: str | None = None

    def rates(self) -> list[Number]:
        """Rates to run, inclusive of both ends when a range is configured."""
        if self.low_rate is None or self.high_rate is None:
            return [self.rate]
        rates: list[Number] = []
        step_index = 0
        value = self.low_rate
        while value <= self.high_rate:
            rates.append(value)
            step_index += 1
            # Multiply rather than accumulate so float steps do not drift.
            value = _normalise_number(self.low_rate + step_index * self.rate_step)
        return rates

    def has_credentials(self) -> bool:
        return self.username is not None and self.password is not None

    def describe(self) -> str:
        lines = ["Run options:"]
        for item in dataclasses.fields(self):
            value = getattr(self, item.name)
            if item.name == "password" and value:
                value = "********"
            elif item.name == "uri_list":
                value = ", ".join(value)
            lines.append(f"  {item.name}: {value}")
        return "\n".join(lines)


def load_config(path: str | Path | None) -> RunConfig:
    """Build a :class:`RunConfig` from defaults and an optional YAML file.

    Only keys listed in ``VALID_OPTIONS`` are taken from the file; any other
    key is ignored. Keys whose value is null keep their default.
    """
    if path is None:
        return RunConfig()

    config_path = Path(path).expanduser()
    if not config_path.is_file():
        raise ConfigFileNotFoundError(f"Invalid configuration file path {path}", path=str(path))

    try:
        with open(config_path, encoding="utf-8") as f:
            document = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Unable to parse {config_path}: {exc}", path=str(path)) from exc

    if not isinstance(document, Mapping):
        raise ConfigError(
            f"Configuration {config_path} must be a mapping, got {type(document).__name__}",
            path=str(path),
        )

    overrides = options_from_mapping(document)
    LOGGER.debug("Loaded %d option(s) from %s", len(overrides), config_path)
    config = RunConfig(**overrides)
    _validate(config)
    return config


def options_from_mapping(document: Mapping[str, Any]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for key, value in document.items():
        if key not in VALID_OPTIONS:
            LOGGER.debug("Ignoring unknown option %r", key)
            continue
        if value is None:
            continue
        overrides[key] = _coerce(key, value)
    return overrides


def _coerce(key: str, value: Any) -> Any:
    try:
        if key in _INT_OPTIONS:
            if isinstance(value, bool):
                raise ValueError("boolean is not an integer")
            return int(value)
        if key in _NUMBER_OPTIONS:
            if isinstance(value, bool):
                raise ValueError("boolean is not a number")
            return _normalise_number(float(value))
        if key in _STR_OPTIONS:
            return str(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value for {key}: {value!r}") from exc

    if key == "uri_list":
        if isinstance(value, str):
            return (value,)
        if isinstance(value, (list, tuple)) and value:
            return tuple(str(uri) for uri in value)
        raise ConfigError(f"Invalid value for uri_list: {value!r}")
    if key == "hog":
        if not isinstance(value, bool):
            raise ConfigError(f"Invalid value for hog: {value!r}")
        return value
    return value


def _validate(config: RunConfig) -> None:
    if config.rate_step <= 0:
        raise ConfigError(f"rate_step must be > 0, got {config.rate_step}")
    if config.wait_time < 0:
        raise ConfigError(f"wait_time must be >= 0, got {config.wait_time}")
    if (
        config.low_rate is not None
        and config.high_rate is not None
        and config.low_rate > config.high_rate
    ):
        raise ConfigError(
            f"low_rate ({config.low_rate}) must not exceed high_rate ({config.high_rate})"
        )


def _normalise_number(value: float) -> Number:
    if float(value).is_integer():
        return int(value)
    return round(value, 6)


__all__ = ["RunConfig", "VALID_OPTIONS", "load_config", "options_from_mapping"]
