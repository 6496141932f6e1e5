"""
Utility functions for the issue transfer tool.
"""

from __future__ import annotations

import logging
import re
import subprocess
from typing import Final

LOG_FILE: Final[str] = "transfer-issues.log"

_CONSOLE_LEVELS: Final[dict[int, int]] = {0: logging.WARNING, 1: logging.INFO}


class PassError(Exception):
    """Base class for pass-related errors."""


class InvalidPassPathError(PassError):
    """Raised when the pass path format is invalid or the entry does not exist."""


def setup_logging(*, verbosity: int = 0) -> None:
    """Configure logging for a transfer run.

    The console shows warnings by default, info with one -v and debug with two.
    The log file always receives debug output.
    """
    console_handler = logging.StreamHandler()
    console_handler.setLevel(_CONSOLE_LEVELS.get(verbosity, logging.DEBUG))

    file_handler = logging.FileHandler(LOG_FILE, mode="a")
    file_handler.setLevel(logging.DEBUG)

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[console_handler, file_handler],
    )


def _validate_pass_path(pass_path: str) -> None:
    if not re.fullmatch(r"(?:[A-Za-z0-9_-]+)(?:/[A-Za-z0-9_-]+)*", pass_path):
        msg = f"Invalid pass path: {pass_path}"
        raise InvalidPassPathError(msg)


def get_pass_value(pass_path: str) -> str:
    """Get value from pass utility at specified path."""
    _validate_pass_path(pass_path)

    try:
        result = subprocess.run(  # noqa: S603
            ["pass", pass_path], capture_output=True, text=True, check=True
        )
    except subprocess.CalledProcessError as e:
        if "not in the password store" in e.stderr.lower():
            msg = f"Pass path '{pass_path}' not found."
            raise InvalidPassPathError(msg) from e
        msg = (
            f"Failed to get value from pass at '{pass_path}'.\n"
            f"Error: {e.stderr.strip()}\n"
            f"Return code: {e.returncode}"
        )
        raise PassError(msg) from e

    return result.stdout.strip()
