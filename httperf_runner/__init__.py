"""
Configuration-driven httperf sweep runner.

This package reads a YAML run description, drives the external ``httperf``
binary once per URI and request rate, parses its report into metrics and
prints an accumulating summary table after every run.
"""

__version__ = "0.1.0"

from .main import main

__all__ = ["__version__", "main"]
