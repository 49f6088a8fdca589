"""Utilities for quizadmin."""

from .io import read_json, write_json
from .logging import setup_logging
from .logging_config import configure_logging

__all__ = [
    "setup_logging",
    "configure_logging",
    "read_json",
    "write_json",
]
