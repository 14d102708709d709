from __future__ import annotations

from typing import Iterator

import pandas as pd

from .parser import RunResult

COLUMNS: dict[str, str] = {
    "uri": "URI",
    "rate": "Rate",
    "conn_rate": "Conn/s",
    "req_rate": "Req/s",
    "reply_rate_min": "Reply min",
    "reply_rate_avg": "Reply avg",
    "reply_rate_max": "Reply max",
    "reply_rate_stddev": "Reply stddev",
    "reply_time_response": "Resp ms",
    "net_io": "Net KB/s",
    "errors": "Errors",
    "status_5xx": "5xx",
}

MISSING = "-"


class Report:
    """Append-only table of run results, one row per httperf invocation."""

    def __init__(self) -> None:
        self._results: list[RunResult] = []

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[RunResult]:
        return iter(self._results)

    def add(self, result: RunResult) -> None:
        self._results.append(result)

    def to_dataframe(self) -> pd.DataFrame:
        rows = []
        for result in self._results:
            row = {name: result.get(name) for name in COLUMNS}
            row["uri"] = result.uri
            row["rate"] = result.rate
            rows.append(row)
        # object dtype keeps integer counters from being widened to float by gaps.
        return pd.DataFrame(rows, columns=list(COLUMNS), dtype=object)

    def render(self) -> str:
        df = self.to_dataframe()
        if df.empty:
            return "No runs recorded."
        display = df.where(df.notna(), MISSING)
        return display.rename(columns=COLUMNS).to_string(index=False)

    @staticmethod
    def raw_output_for(result: RunResult) -> str:
        banner = f"==== httperf output for {result.uri} at rate {result.rate} ===="
        return f"{banner}\n{result.output.rstrip()}\n{'=' * len(banner)}"


__all__ = ["COLUMNS", "MISSING", "Report"]
