"""
Repository model: one tracker repository and the issue transfer decision.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from .issue_cache import IssueCache
from .labels import LabelCache
from .models import (
    MARKER_LABEL_PREFIX,
    Issue,
    Label,
    RepositoryRef,
    TransferMode,
    TransferredIssue,
    Visibility,
    is_marker_label,
    marker_label,
    normalize_label,
)

if TYPE_CHECKING:
    from .protocols import TrackerClient

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)


def select_transfer_mode(source: Repository, destination: Repository) -> TransferMode:
    """Decide whether an issue can be moved natively or must be copied.

    Native transfer requires both repositories to share an owner (compared
    case-insensitively) and a compatible visibility: a public source may go
    anywhere, a private source only to another private repository.
    """
    same_owner = source.ref.same_owner(destination.ref)
    source_visibility = source.visibility
    destination_visibility = destination.visibility
    visibility_allowed = source_visibility is Visibility.PUBLIC or (
        source_visibility is Visibility.PRIVATE and destination_visibility is Visibility.PRIVATE
    )
    mode = TransferMode.NATIVE if same_owner and visibility_allowed else TransferMode.COPY
    logger.debug(
        f"Transfer mode {source.ref} -> {destination.ref}: {mode.value} "
        f"(same owner: {same_owner}, visibility: {source_visibility.value} -> {destination_visibility.value})"
    )
    return mode


def prepare_labels(issue: Issue, origin: RepositoryRef) -> list[Label]:
    """Build the label list for the destination issue.

    The marker label for `origin` comes first. Marker labels from earlier
    transfers are dropped and repeated names collapse to their first occurrence.
    """
    prepared: list[Label] = [marker_label(origin)]
    seen: set[str] = {prepared[0].name}
    for label in (normalize_label(raw) for raw in issue.labels):
        if is_marker_label(label) or label.name in seen:
            continue
        seen.add(label.name)
        prepared.append(label)
    return prepared


class Repository:
    """A tracker repository with lazily populated label and issue caches."""

    def __init__(self, client: TrackerClient, ref: RepositoryRef) -> None:
        self._client: TrackerClient = client
        self.ref: RepositoryRef = ref
        self._visibility: Visibility = Visibility.UNKNOWN
        self.labels: LabelCache = LabelCache(client, ref)
        self.issues: IssueCache = IssueCache(client, ref)
        # Origin repositories seen during this run, so their visibility is resolved once
        self._origins: dict[RepositoryRef, Repository] = {}

    @property
    def visibility(self) -> Visibility:
        """Visibility of the repository, queried once on first access."""
        if self._visibility is Visibility.UNKNOWN:
            self._visibility = Visibility.from_private_flag(self._client.get_repository_visibility(self.ref))
            logger.debug(f"Repository {self.ref} is {self._visibility.value}")
        return self._visibility

    def get_issue(self, issue_number: int) -> Issue | None:
        """Fetch an issue of this repository ahead of a transfer."""
        return self._client.get_issue(self.ref, issue_number)

    def transfer_issue(self, issue: Issue) -> Issue | TransferredIssue | None:
        """Bring `issue` into this repository.

        Returns:
            The issue as it now exists here, or None if the issue already lives
            here or an issue with the same title was already transferred from
            the issue's origin.

        Raises:
            OriginParseError: If the issue's repository URL cannot be parsed
        """
        origin = issue.origin

        # Issues moved here natively are served from this repository on later runs
        if origin == self.ref:
            marker = next((label for label in map(normalize_label, issue.labels) if is_marker_label(label)), None)
            recorded = marker.name.removeprefix(MARKER_LABEL_PREFIX) if marker else origin.full_name
            logger.info(
                f"Skipping issue transfer. Issue source ({recorded}) "
                f"already exists at destination ({self.ref}#{issue.number})."
            )
            return None

        self.issues.ensure_populated(origin)
        duplicate = self.issues.find_duplicate(origin, issue.title)
        if duplicate is not None:
            logger.info(
                f"Skipping issue transfer. Issue source ({origin}#{issue.number}) "
                f"already exists at destination ({self.ref}#{duplicate.number})."
            )
            return None

        # Only labels which exist can be added to issues
        labels = prepare_labels(issue, origin)
        for label in labels:
            self.labels.create_if_absent(label)

        source = self._origin_repository(origin)
        result: Issue | TransferredIssue
        if select_transfer_mode(source, self) is TransferMode.NATIVE:
            result = self._transfer_natively(source, issue, labels)
        else:
            result = self._copy(issue, labels)
        self.issues.add(origin, result)
        return result

    def _origin_repository(self, origin: RepositoryRef) -> Repository:
        if origin not in self._origins:
            self._origins[origin] = Repository(self._client, origin)
        return self._origins[origin]

    def _transfer_natively(self, source: Repository, issue: Issue, labels: list[Label]) -> TransferredIssue:
        issue_id = self._client.get_internal_id(source.ref, issue.number)
        repository_id = self._client.get_internal_id(self.ref)
        transferred = self._client.transfer_issue(issue_id, repository_id)

        # The transfer primitive does not carry labels over
        applied = self._client.add_labels(self.ref, transferred.number, [label.name for label in labels])
        return dataclasses.replace(transferred, labels=applied or labels)

    def _copy(self, issue: Issue, labels: list[Label]) -> Issue:
        assignees = [login for login in issue.assignees if login]
        return self._client.create_issue(
            self.ref,
            title=issue.title,
            body=issue.body or "",
            labels=[label.name for label in labels],
            assignee=issue.assignee if not assignees else None,
            assignees=assignees or None,
        )
