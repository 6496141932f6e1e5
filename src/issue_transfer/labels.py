"""
Label cache for a destination repository.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING

from .pagination import fetch_all_pages

if TYPE_CHECKING:
    from .models import Label, RepositoryRef
    from .protocols import TrackerClient

logger: logging.Logger = logging.getLogger(__name__)


class LabelCache:
    """Existing labels of one repository, fetched on first use.

    Only labels that exist can be added to issues. Checking the cache before
    creating a label avoids "already exists" errors and keeps the number of
    create-label requests (and thus rate limiting) down.
    """

    def __init__(self, client: TrackerClient, repo: RepositoryRef) -> None:
        self._client: TrackerClient = client
        self._repo: RepositoryRef = repo
        self._labels: list[Label] = []
        self._populated: bool = False
        self.created_count: int = 0

    def __len__(self) -> int:
        return len(self._labels)

    def ensure_populated(self) -> None:
        if self._populated:
            return
        self._labels = fetch_all_pages(partial(self._client.list_labels, self._repo))
        self._populated = True
        logger.debug(f"Cached {len(self._labels)} labels of {self._repo}")

    def find(self, name: str) -> Label | None:
        """Return the cached label with exactly this name, if any."""
        return next((label for label in self._labels if label.name == name), None)

    def create_if_absent(self, label: Label) -> Label:
        """Create the label unless a label of the same name already exists.

        Returns:
            The existing label, or the newly created one
        """
        self.ensure_populated()
        existing = self.find(label.name)
        if existing is not None:
            logger.debug(f"Skipping label creation. Label '{label.name}' already exists in {self._repo}")
            return existing

        logger.info(f"Creating label: {label.name}")
        created = self._client.create_label(
            self._repo,
            label.name,
            description=label.description or None,
            color=label.color or None,
        )
        self._labels.append(created)
        self.created_count += 1
        return created
