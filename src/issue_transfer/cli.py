"""
Command-line interface for the issue transfer tool.
"""

from __future__ import annotations

import argparse
import logging
import sys

from github import GithubException

from . import github_utils as ghu
from .exceptions import ConfigurationError, TransferError
from .transfer import TransferStats, transfer_issues
from .utils import PassError, setup_logging

logger: logging.Logger = logging.getLogger(__name__)


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Transfer GitHub issues between repositories, natively where possible, by copy otherwise"
    )

    _ = parser.add_argument("source", help="Repository holding the issues (owner/repo)")
    _ = parser.add_argument("destination", help="Repository receiving the issues (owner/repo)")
    _ = parser.add_argument(
        "issue_numbers",
        nargs="+",
        help='Issue numbers to transfer, as separate arguments or one quoted list (e.g. "1 2 3")',
    )

    _ = parser.add_argument(
        "--github-pass-token", help="Path for GitHub token in pass utility (default: GH_TOKEN env var)"
    )
    _ = parser.add_argument(
        "--delay",
        type=float,
        default=ghu.DEFAULT_REQUEST_DELAY,
        help=f"Seconds to wait before each API request (default: {ghu.DEFAULT_REQUEST_DELAY})",
    )
    _ = parser.add_argument(
        "--verbose", "-v", action="count", default=0, help="Increase console verbosity (-v info, -vv debug)"
    )

    return parser.parse_args(argv)


def parse_issue_numbers(text: str) -> set[int]:
    """Parse a whitespace-delimited list of issue numbers.

    Tokens that are not integers are dropped and repeated numbers collapse.
    """
    numbers: set[int] = set()
    for token in text.split():
        try:
            numbers.add(int(token))
        except ValueError:
            logger.debug(f"Ignoring non-numeric issue number: {token!r}")
    return numbers


def _print_summary(source: str, destination: str, stats: TransferStats) -> None:
    print(f"Transfer {source} -> {destination}")
    print(f"  Transferred natively: {stats.issues_transferred}")
    print(f"  Copied: {stats.issues_copied}")
    print(f"  Skipped (already transferred): {stats.issues_skipped}")
    print(f"  Labels created: {stats.labels_created}")
    for source_number, destination_number in stats.number_map.items():
        print(f"  {source}#{source_number} -> {destination}#{destination_number}")


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_arguments(argv)

    verbosity: int = getattr(args, "verbose", 0)
    setup_logging(verbosity=verbosity)

    stats = TransferStats()
    try:
        issue_numbers = parse_issue_numbers(" ".join(args.issue_numbers))
        if not issue_numbers:
            msg = "Failed to retrieve 'issue_numbers'."
            raise ConfigurationError(msg)

        token = ghu.get_token(args.github_pass_token)
        if not token:
            msg = "Failed to retrieve a GitHub token. Set the GH_TOKEN environment variable or use --github-pass-token."
            raise ConfigurationError(msg)

        tracker = ghu.GitHubTracker(ghu.get_client(token, delay=args.delay))
        _ = transfer_issues(tracker, args.source, args.destination, issue_numbers, stats=stats)
    except (TransferError, PassError, GithubException) as e:
        logger.error(f"Transfer failed: {e}")  # noqa: TRY400
        _print_summary(args.source, args.destination, stats)
        sys.exit(1)

    _print_summary(args.source, args.destination, stats)
    sys.exit(0)
