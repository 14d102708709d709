from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .binary import MISSING_BINARY_MESSAGE, check_httperf
from .charts import render_rate_chart
from .command import format_command
from .config import RunConfig, load_config
from .exceptions import ConfigError, ConfigFileNotFoundError, MissingBinaryError
from .report import Report
from .runner import HttperfRunner

LOGGER = logging.getLogger("httperf_runner")

EXIT_OK = 0
EXIT_MISSING_BINARY = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

EPILOG = """\
examples:
  run the tests using a shared config:
    httperf-runner -c /data/yourapp/shared/config/httperf.yml

  display this help:
    httperf-runner --help

  display the version:
    httperf-runner --version
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="httperf-runner",
        description=(
            "Run httperf against a list of URIs over a range of request rates, "
            "using a simple YAML config for its options."
        ),
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s version {__version__}",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=os.environ.get("HTTPERF_RUNNER_CONFIG"),
        help="The YAML config file",
    )
    parser.add_argument(
        "--chart",
        default=None,
        help="Optional PNG path for a reply rate vs offered rate chart",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print the httperf commands that would run",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("HTTPERF_RUNNER_LOG_LEVEL", "INFO"),
        help="Logging level",
    )
    return parser


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = load_config(args.config)
    except ConfigFileNotFoundError as exc:
        print(exc)
        parser.print_help()
        return EXIT_OK
    except ConfigError as exc:
        LOGGER.error("%s", exc)
        return EXIT_CONFIG_ERROR

    print(config.describe())

    if args.dry_run:
        _print_commands(HttperfRunner(config))
        return EXIT_OK

    try:
        config = dataclasses.replace(config, httperf=check_httperf(config.httperf))
    except MissingBinaryError:
        print(MISSING_BINARY_MESSAGE)
        return EXIT_MISSING_BINARY

    runner = HttperfRunner(config)
    report = Report()
    try:
        _run_sweep(runner, report)
    except MissingBinaryError:
        print(MISSING_BINARY_MESSAGE)
        return EXIT_MISSING_BINARY
    except KeyboardInterrupt:
        LOGGER.warning("Interrupted after %d run(s)", len(report))
        return EXIT_INTERRUPTED

    if args.chart:
        render_rate_chart(report, Path(args.chart), title=_chart_title(config))
    LOGGER.info("Completed %d run(s)", len(report))
    return EXIT_OK


def _run_sweep(runner: HttperfRunner, report: Report) -> None:
    for result in runner.sweep():
        report.add(result)
        print()
        print(report.render())
        if result.has_failures():
            print()
            print(Report.raw_output_for(result))
        sys.stdout.flush()


def _print_commands(runner: HttperfRunner) -> None:
    for argv in runner.planned_commands():
        print(format_command(argv))


def _chart_title(config: RunConfig) -> str:
    return f"httperf Rate Sweep: {config.server}:{config.port}"


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
