from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

SAMPLE_OUTPUT = """\
httperf --client=0/1 --server=localhost --port=80 --uri=/ --rate=50 --send-buffer=4096 --recv-buffer=16384 --num-conns=200 --num-calls=10
Maximum connect burst length: 1

Total: connections 200 requests 2000 replies 2000 test-duration 3.992 s

Connection rate: 50.1 conn/s (20.0 ms/conn, <=2 concurrent connections)
Connection time [ms]: min 2.1 avg 4.7 max 12.9 median 4.5 stddev 1.3
Connection time [ms]: connect 0.1
Connection length [replies/conn]: 10.000

Request rate: 501.0 req/s (2.0 ms/req)
Request size [B]: 62.0

Reply rate [replies/s]: min 499.8 avg 500.4 max 501.0 stddev 0.8 (2 samples)
Reply time [ms]: response 0.4 transfer 0.0
Reply size [B]: header 239.0 content 612.0 footer 0.0 (total 851.0)
Reply status: 1xx=0 2xx=2000 3xx=0 4xx=0 5xx=0

CPU time [s]: user 0.95 system 3.03 (user 23.8% system 75.9% total 99.7%)
Net I/O: 447.0 KB/s (3.7*10^6 bps)

Errors: total 0 client-timo 0 socket-timo 0 connrefused 0 connreset 0
Errors: fd-unavail 0 addrunavail 0 ftab-full 0 other 0
"""

FAILING_OUTPUT = """\
Total: connections 200 requests 150 replies 120 test-duration 5.001 s

Connection rate: 40.0 conn/s (25.0 ms/conn, <=30 concurrent connections)
Request rate: 30.0 req/s (33.3 ms/req)
Reply rate [replies/s]: min 20.0 avg 24.0 max 28.0 stddev 5.7 (2 samples)
Reply status: 1xx=0 2xx=100 3xx=0 4xx=0 5xx=20
Net I/O: 20.5 KB/s (0.2*10^6 bps)
Errors: total 80 client-timo 30 socket-timo 0 connrefused 50 connreset 0
Errors: fd-unavail 0 addrunavail 0 ftab-full 0 other 0
"""


@pytest.fixture
def sample_output() -> str:
    return SAMPLE_OUTPUT


@pytest.fixture
def failing_output() -> str:
    return FAILING_OUTPUT


@pytest.fixture
def write_config(tmp_path: Path):
    """Write a YAML config document into ``tmp_path`` and return its path."""

    def writer(text: str, name: str = "httperf.yml") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return writer


@pytest.fixture
def fake_httperf(tmp_path: Path):
    """Create an executable script that prints ``output`` like httperf would.

    Each invocation appends its arguments to ``calls.log`` beside the script.
    """
    if os.name == "nt":
        pytest.skip("fake httperf script requires a POSIX shell")

    def factory(output: str = SAMPLE_OUTPUT, exit_code: int = 0) -> Path:
        (tmp_path / "report.txt").write_text(output, encoding="utf-8")
        script = tmp_path / "httperf"
        script.write_text(
            "#!/bin/sh\n"
            f'printf "%s\\n" "$*" >> "{tmp_path / "calls.log"}"\n'
            f'cat "{tmp_path / "report.txt"}"\n'
            f"exit {exit_code}\n",
            encoding="utf-8",
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return factory
