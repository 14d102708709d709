from __future__ import annotations

import base64
import re
import shlex
from typing import Sequence

from .config import Number, RunConfig

# httperf expands the two-character sequence "\n" inside --add-header itself.
HEADER_SEPARATOR = "\\n"

_BASIC_TOKEN = re.compile(r"(Authorization: Basic )[A-Za-z0-9+/=]+")


def authorization_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Authorization: Basic {token}"


def header_block(config: RunConfig) -> str:
    """Header text passed to ``--add-header`` for every request."""
    headers = [f"Host:{config.host}"]
    if config.has_credentials():
        headers.append(authorization_header(config.username, config.password))
    return "".join(f"{header}{HEADER_SEPARATOR}" for header in headers)


def build_command(config: RunConfig, uri: str, rate: Number) -> list[str]:
    argv = [
        config.httperf,
        "--client=0/1",
        f"--server={config.server}",
        f"--port={config.port}",
        f"--uri={uri}",
        f"--rate={rate}",
        f"--send-buffer={config.send_buffer}",
        f"--recv-buffer={config.recv_buffer}",
        f"--add-header={header_block(config)}",
        f"--num-conns={config.connections}",
        f"--num-call={config.num_call}",
    ]
    if config.hog:
        argv.append("--hog")
    return argv


def format_command(argv: Sequence[str], redact: bool = True) -> str:
    command = shlex.join(argv)
    if redact:
        command = _BASIC_TOKEN.sub(r"\1********", command)
    return command


__all__ = ["authorization_header", "build_command", "format_command", "header_block"]
