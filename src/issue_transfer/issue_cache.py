"""
Cache of issues already transferred into a destination repository.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING

from .models import marker_label_name
from .pagination import fetch_all_pages

if TYPE_CHECKING:
    from .models import Issue, RepositoryRef, TransferredIssue
    from .protocols import TrackerClient

logger: logging.Logger = logging.getLogger(__name__)


class IssueCache:
    """Destination issues carrying the marker label of an origin repository.

    Each origin's listing is fetched at most once. Duplicates are detected by
    exact title match only, so two unrelated issues sharing a title are
    treated as the same issue.
    """

    def __init__(self, client: TrackerClient, repo: RepositoryRef) -> None:
        self._client: TrackerClient = client
        self._repo: RepositoryRef = repo
        # Origin full name -> issues found at the destination for that origin
        self._issues: dict[str, list[Issue | TransferredIssue]] = {}

    def ensure_populated(self, origin: RepositoryRef) -> None:
        if origin.full_name in self._issues:
            return
        label = marker_label_name(origin)
        self._issues[origin.full_name] = list(fetch_all_pages(partial(self._client.list_issues, self._repo, label)))
        logger.debug(f"Cached {len(self._issues[origin.full_name])} issues of {self._repo} labeled '{label}'")

    def find_duplicate(self, origin: RepositoryRef, title: str) -> Issue | TransferredIssue | None:
        """Return a previously transferred issue with exactly this title, if any."""
        return next((issue for issue in self._issues.get(origin.full_name, []) if issue.title == title), None)

    def add(self, origin: RepositoryRef, issue: Issue | TransferredIssue) -> None:
        """Record an issue transferred during this run."""
        self._issues.setdefault(origin.full_name, []).append(issue)
