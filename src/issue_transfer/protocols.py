"""Protocol defining the contract of the remote tracker client.

The transfer machinery never talks to an HTTP API directly. It asks a
`TrackerClient` for exactly the operations below, which keeps the decision
logic testable with an in-memory implementation and leaves authentication,
throttling and wire formats to the adapter (see `github_utils.GitHubTracker`).

All methods are blocking and raise the adapter's own exception types on
failure. Those are not caught by the transfer machinery.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .models import Issue, Label, RepositoryRef, TransferredIssue


class TrackerClient(Protocol):
    """Remote operations available per repository."""

    def list_labels(self, repo: RepositoryRef, page: int, per_page: int) -> list[Label]:
        """Return one page of the repository's labels (pages start at 1)."""
        ...

    def create_label(
        self,
        repo: RepositoryRef,
        name: str,
        description: str | None = None,
        color: str | None = None,
    ) -> Label:
        """Create a label and return it as stored by the tracker."""
        ...

    def list_issues(self, repo: RepositoryRef, labels: str, page: int, per_page: int) -> list[Issue]:
        """Return one page of issues carrying the given label (open and closed)."""
        ...

    def get_issue(self, repo: RepositoryRef, number: int) -> Issue | None:
        """Return the issue, or None if it does not exist or is inaccessible."""
        ...

    def create_issue(
        self,
        repo: RepositoryRef,
        *,
        title: str,
        body: str,
        labels: Sequence[str],
        assignee: str | None = None,
        assignees: Sequence[str] | None = None,
    ) -> Issue:
        """Create an issue and return it."""
        ...

    def add_labels(self, repo: RepositoryRef, issue_number: int, label_names: Sequence[str]) -> list[Label]:
        """Add labels to an existing issue and return the issue's resulting labels."""
        ...

    def get_repository_visibility(self, repo: RepositoryRef) -> bool | None:
        """Return the repository's private flag, or None when it cannot be determined."""
        ...

    def get_internal_id(self, repo: RepositoryRef, issue_number: int | None = None) -> str:
        """Return the opaque node id of the repository, or of one of its issues."""
        ...

    def transfer_issue(self, issue_id: str, repository_id: str) -> TransferredIssue:
        """Move an issue to another repository with the tracker's own transfer primitive.

        Only available when both repositories share an owner and the
        visibility combination is allowed.
        """
        ...
