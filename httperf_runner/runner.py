from __future__ import annotations

import logging
import subprocess
import time
from typing import Callable, Iterator

from .command import build_command, format_command
from .config import Number, RunConfig
from .exceptions import MissingBinaryError
from .parser import Metric, RunResult, parse_line

LOGGER = logging.getLogger("httperf_runner.runner")


class HttperfRunner:
    """Run httperf sequentially for every configured URI and rate."""

    def __init__(
        self,
        config: RunConfig,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config
        self._popen = popen
        self._sleep = sleep

    @property
    def config(self) -> RunConfig:
        return self._config

    def planned_commands(self) -> list[list[str]]:
        return [
            build_command(self._config, uri, rate)
            for uri in self._config.uri_list
            for rate in self._config.rates()
        ]

    def sweep(self) -> Iterator[RunResult]:
        first = True
        for uri in self._config.uri_list:
            for rate in self._config.rates():
                if not first and self._config.wait_time > 0:
                    LOGGER.info("Waiting %ss before next run", self._config.wait_time)
                    self._sleep(self._config.wait_time)
                first = False
                yield self.run_once(uri, rate)

    def run_once(self, uri: str, rate: Number) -> RunResult:
        argv = build_command(self._config, uri, rate)
        LOGGER.info("Running httperf for %s at rate %s", uri, rate)
        LOGGER.debug("Command: %s", format_command(argv))

        metrics: dict[str, Metric] = {}
        captured: list[str] = []
        try:
            process = self._popen(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                bufsize=1,
            )
        except OSError as exc:
            raise MissingBinaryError(self._config.httperf) from exc

        with process:
            assert process.stdout is not None
            for line in process.stdout:
                captured.append(line)
                LOGGER.debug("httperf: %s", line.rstrip("\n"))
                parse_line(line, metrics)
            exit_code = process.wait()

        if exit_code != 0:
            LOGGER.warning("httperf exited with status %d for %s at rate %s", exit_code, uri, rate)

        return RunResult(
            uri=uri,
            rate=rate,
            metrics=metrics,
            output="".join(captured),
            exit_code=exit_code,
        )


__all__ = ["HttperfRunner"]
