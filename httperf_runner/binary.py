from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from .exceptions import MissingBinaryError

LOGGER = logging.getLogger("httperf_runner.binary")

HTTPERF_NAME = "httperf"
MISSING_BINARY_MESSAGE = "Cannot find a valid httperf binary. Check your config and try again!"


def discover_httperf() -> str:
    """Return the httperf found on ``PATH``, or an empty string."""
    return shutil.which(HTTPERF_NAME) or ""


def check_httperf(path: str | None) -> str:
    """Resolve ``path`` to an executable httperf, raising MissingBinaryError otherwise."""
    if not path:
        raise MissingBinaryError(path)

    resolved = Path(path).expanduser()
    if not resolved.is_file() or not os.access(resolved, os.X_OK):
        raise MissingBinaryError(path)

    LOGGER.debug("Using httperf binary at %s", resolved)
    return str(resolved)


__all__ = ["HTTPERF_NAME", "MISSING_BINARY_MESSAGE", "check_httperf", "discover_httperf"]
