"""
Issue Transfer Tool

Moves issues between GitHub repositories, preserving title, body, labels and
assignees. Uses the native transfer where the repositories allow it and
recreates the issue otherwise. Transferred issues carry a marker label so
repeated runs skip them.
"""

from __future__ import annotations

from .cli import main
from .exceptions import ConfigurationError, IssueNotFoundError, TransferError
from .repository import Repository
from .transfer import TransferStats, transfer_issues
from .utils import setup_logging

# Package version
__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "IssueNotFoundError",
    "Repository",
    "TransferError",
    "TransferStats",
    "main",
    "setup_logging",
    "transfer_issues",
]
