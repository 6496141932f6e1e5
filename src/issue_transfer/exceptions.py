"""
Custom exception classes for the issue transfer tool.
"""

from __future__ import annotations


class TransferError(Exception):
    """Base exception for transfer errors."""


class ConfigurationError(TransferError):
    """Raised when the run is configured with malformed input."""


class IssueNotFoundError(TransferError):
    """Raised when a requested source issue cannot be retrieved."""


class OriginParseError(TransferError):
    """Raised when an issue's repository URL does not end in 'owner/repo'."""


class GraphQLError(TransferError):
    """Raised when a GraphQL response carries errors."""
