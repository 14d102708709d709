"""Turn httperf's textual report into a flat metrics record.

httperf prints a fixed set of summary lines once a run finishes. Each line
of interest is described by a rule: a compiled pattern plus a setter that
copies the captured groups into the metrics mapping. Rules are tried in
order and the first match wins. Lines no rule recognises only survive in
the raw output.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, MutableMapping, Union

from .config import Number

Metric = Union[int, float]
Setter = Callable[["re.Match[str]", MutableMapping[str, Metric]], None]

_FLOAT = r"(\d+(?:\.\d+)?|nan|inf)"
_INT = r"(\d+)"


def _fields(*targets: tuple[str, type]) -> Setter:
    """Build a setter assigning match groups, in order, to the named metrics."""

    def setter(match: "re.Match[str]", metrics: MutableMapping[str, Metric]) -> None:
        for (name, kind), value in zip(targets, match.groups()):
            if value is not None:
                metrics[name] = kind(value)

    return setter


RULES: list[tuple["re.Pattern[str]", Setter]] = [
    (
        re.compile(
            rf"^Total: connections {_INT} requests {_INT} replies {_INT} test-duration {_FLOAT} s"
        ),
        _fields(
            ("total_connections", int),
            ("total_requests", int),
            ("total_replies", int),
            ("test_duration", float),
        ),
    ),
    (
        re.compile(rf"^Connection rate: {_FLOAT} conn/s"),
        _fields(("conn_rate", float)),
    ),
    (
        re.compile(rf"^Connection time \[ms\]: min {_FLOAT} avg {_FLOAT}"),
        _fields(("conn_time_min", float), ("conn_time_avg", float)),
    ),
    (
        re.compile(rf"^Request rate: {_FLOAT} req/s"),
        _fields(("req_rate", float)),
    ),
    (
        re.compile(
            rf"^Reply rate \[replies/s\]: min {_FLOAT} avg {_FLOAT} max {_FLOAT} stddev {_FLOAT}"
            rf"(?: \({_INT} samples?\))?"
        ),
        _fields(
            ("reply_rate_min", float),
            ("reply_rate_avg", float),
            ("reply_rate_max", float),
            ("reply_rate_stddev", float),
            ("reply_rate_samples", int),
        ),
    ),
    (
        re.compile(rf"^Reply time \[ms\]: response {_FLOAT}(?: transfer {_FLOAT})?"),
        _fields(("reply_time_response", float), ("reply_time_transfer", float)),
    ),
    (
        re.compile(
            rf"^Reply status: 1xx={_INT} 2xx={_INT} 3xx={_INT} 4xx={_INT} 5xx={_INT}"
        ),
        _fields(
            ("status_1xx", int),
            ("status_2xx", int),
            ("status_3xx", int),
            ("status_4xx", int),
            ("status_5xx", int),
        ),
    ),
    (
        re.compile(rf"^Net I/O: {_FLOAT} KB/s"),
        _fields(("net_io", float)),
    ),
    (
        re.compile(
            rf"^Errors: total {_INT}"
            rf"(?: client-timo {_INT} socket-timo {_INT} connrefused {_INT} connreset {_INT})?"
        ),
        _fields(
            ("errors", int),
            ("client_timeouts", int),
            ("socket_timeouts", int),
            ("conn_refused", int),
            ("conn_reset", int),
        ),
    ),
    (
        re.compile(rf"^Errors: fd-unavail {_INT} addrunavail {_INT} ftab-full {_INT} other {_INT}"),
        _fields(
            ("fd_unavail", int),
            ("addr_unavail", int),
            ("ftab_full", int),
            ("other_errors", int),
        ),
    ),
]


@dataclass(frozen=True)
class RunResult:
    """Metrics parsed from a single httperf invocation."""

    uri: str
    rate: Number
    metrics: Mapping[str, Metric] = field(default_factory=dict)
    output: str = ""
    exit_code: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "metrics", MappingProxyType(dict(self.metrics)))

    def get(self, name: str, default: Metric | None = None) -> Metric | None:
        return self.metrics.get(name, default)

    def has_failures(self) -> bool:
        return bool(self.metrics.get("errors", 0)) or bool(self.metrics.get("status_5xx", 0))


def parse_line(line: str, metrics: MutableMapping[str, Metric]) -> bool:
    """Apply the first matching rule to ``line``; return whether one matched."""
    text = line.strip()
    for pattern, setter in RULES:
        match = pattern.match(text)
        if match:
            setter(match, metrics)
            return True
    return False


def parse_output(lines: Iterable[str]) -> dict[str, Metric]:
    metrics: dict[str, Metric] = {}
    for line in lines:
        parse_line(line, metrics)
    return metrics


__all__ = ["RULES", "RunResult", "parse_line", "parse_output"]
