"""Transfer engine: moves a batch of issues from one repository to another.

Issues are processed one at a time in input order. Any remote failure aborts
the run; issues transferred before the failure stay in place. Re-running with
the same arguments is safe because already transferred issues are recognized
by their marker label and title and skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .exceptions import IssueNotFoundError
from .models import RepositoryRef, TransferredIssue
from .repository import Repository

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .protocols import TrackerClient

logger = logging.getLogger(__name__)


@dataclass
class TransferStats:
    """Statistics collected during a run."""

    issues_transferred: int = 0
    issues_copied: int = 0
    issues_skipped: int = 0
    labels_created: int = 0
    # Source issue number -> destination issue number
    number_map: dict[int, int] = field(default_factory=dict)


def transfer_issues(
    client: TrackerClient,
    source: str,
    destination: str,
    issue_numbers: Iterable[int],
    *,
    stats: TransferStats | None = None,
) -> TransferStats:
    """Transfer the given issues from `source` to `destination`.

    Args:
        client: Authenticated tracker client
        source: Full name ('owner/repo') of the repository holding the issues
        destination: Full name ('owner/repo') of the repository receiving them
        issue_numbers: Issue numbers to transfer; repeated numbers are handled once
        stats: Optional statistics object to fill in, so partial results
            remain available to the caller when the run fails

    Returns:
        Statistics of the run

    Raises:
        ConfigurationError: If `source` or `destination` is not 'owner/repo'
        IssueNotFoundError: If a source issue cannot be retrieved
    """
    stats = stats if stats is not None else TransferStats()
    source_repo = Repository(client, RepositoryRef.parse(source, argument="source"))
    destination_repo = Repository(client, RepositoryRef.parse(destination, argument="destination"))

    for issue_number in dict.fromkeys(issue_numbers):
        source_issue = source_repo.get_issue(issue_number)
        if source_issue is None:
            msg = f"Failed to retrieve issue: {source}#{issue_number}."
            raise IssueNotFoundError(msg)

        labels_before = destination_repo.labels.created_count
        destination_issue = destination_repo.transfer_issue(source_issue)
        stats.labels_created += destination_repo.labels.created_count - labels_before

        if destination_issue is None:
            stats.issues_skipped += 1
            continue
        if isinstance(destination_issue, TransferredIssue):
            stats.issues_transferred += 1
        else:
            stats.issues_copied += 1
        if destination_issue.number is not None:
            stats.number_map[issue_number] = destination_issue.number
            logger.info(f"Transferred {source}#{issue_number} to {destination}#{destination_issue.number}")

    return stats
