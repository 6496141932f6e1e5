"""
Pytest configuration and fixtures.

`FakeTracker` is an in-memory stand-in for the GitHub API implementing the
`TrackerClient` protocol. It records every call so tests can assert on the
number and kind of remote requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pytest

from issue_transfer.models import Issue, Label, RepositoryRef, TransferredIssue

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass
class FakeRepo:
    """State of one repository in the fake tracker."""

    ref: RepositoryRef
    private: bool | None = False
    labels: list[Label] = field(default_factory=list)
    issues: dict[int, Issue] = field(default_factory=dict)
    next_number: int = 1

    @property
    def api_url(self) -> str:
        return f"https://api.github.com/repos/{self.ref.owner}/{self.ref.name}"

    def take_number(self) -> int:
        number = self.next_number
        self.next_number += 1
        return number


class FakeTracker:
    """In-memory `TrackerClient`."""

    def __init__(self) -> None:
        self.repos: dict[str, FakeRepo] = {}
        self.calls: list[str] = []
        # (repository, number) of natively transferred issues -> where they live now
        self.moved: dict[tuple[str, int], tuple[str, int]] = {}

    # Test setup helpers

    def add_repo(self, full_name: str, *, private: bool | None = False, labels: Sequence[str] = ()) -> FakeRepo:
        ref = RepositoryRef.parse(full_name)
        repo = FakeRepo(ref=ref, private=private, labels=[Label(name=name) for name in labels])
        self.repos[full_name] = repo
        return repo

    def add_issue(
        self,
        full_name: str,
        number: int,
        title: str,
        *,
        body: str | None = "",
        labels: Sequence[Label | str] = (),
        assignee: str | None = None,
        assignees: Sequence[str] = (),
    ) -> Issue:
        repo = self.repos[full_name]
        issue = Issue(
            number=number,
            title=title,
            repository_url=repo.api_url,
            body=body,
            labels=list(labels),  # type: ignore[arg-type]
            assignee=assignee,
            assignees=list(assignees),
        )
        repo.issues[number] = issue
        repo.next_number = max(repo.next_number, number + 1)
        return issue

    def count(self, method: str) -> int:
        return self.calls.count(method)

    def _repo(self, ref: RepositoryRef) -> FakeRepo:
        return self.repos[ref.full_name]

    # TrackerClient

    def list_labels(self, repo: RepositoryRef, page: int, per_page: int) -> list[Label]:
        self.calls.append("list_labels")
        labels = self._repo(repo).labels
        return list(labels[(page - 1) * per_page : page * per_page])

    def create_label(
        self,
        repo: RepositoryRef,
        name: str,
        description: str | None = None,
        color: str | None = None,
    ) -> Label:
        self.calls.append("create_label")
        state = self._repo(repo)
        if any(label.name == name for label in state.labels):
            msg = f"Label {name} already exists"
            raise AssertionError(msg)
        label = Label(name=name, description=description, color=color or "ededed")
        state.labels.append(label)
        return label

    def list_issues(self, repo: RepositoryRef, labels: str, page: int, per_page: int) -> list[Issue]:
        self.calls.append("list_issues")
        matching = [
            issue
            for _, issue in sorted(self._repo(repo).issues.items())
            if any(getattr(label, "name", label) == labels for label in issue.labels)
        ]
        return matching[(page - 1) * per_page : page * per_page]

    def get_issue(self, repo: RepositoryRef, number: int) -> Issue | None:
        self.calls.append("get_issue")
        full_name = repo.full_name
        # Follow transfers the way the API redirects requests for moved issues
        while (full_name, number) in self.moved:
            full_name, number = self.moved[(full_name, number)]
        state = self.repos.get(full_name)
        return state.issues.get(number) if state else None

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
        self.calls.append("create_issue")
        state = self._repo(repo)
        number = state.take_number()
        issue = Issue(
            number=number,
            title=title,
            repository_url=state.api_url,
            body=body,
            labels=[Label(name=name) for name in labels],
            assignee=assignee or (assignees[0] if assignees else None),
            assignees=list(assignees or ([assignee] if assignee else [])),
        )
        state.issues[number] = issue
        return issue

    def add_labels(self, repo: RepositoryRef, issue_number: int, label_names: Sequence[str]) -> list[Label]:
        self.calls.append("add_labels")
        issue = self._repo(repo).issues[issue_number]
        for name in label_names:
            if all(label.name != name for label in issue.labels):
                issue.labels.append(Label(name=name))
        return list(issue.labels)

    def get_repository_visibility(self, repo: RepositoryRef) -> bool | None:
        self.calls.append("get_repository_visibility")
        return self._repo(repo).private

    def get_internal_id(self, repo: RepositoryRef, issue_number: int | None = None) -> str:
        self.calls.append("get_internal_id")
        if issue_number is None:
            return f"R:{repo.full_name}"
        return f"I:{repo.full_name}:{issue_number}"

    def transfer_issue(self, issue_id: str, repository_id: str) -> TransferredIssue:
        self.calls.append("transfer_issue")
        _, source_name, number = issue_id.split(":")
        destination = self.repos[repository_id.removeprefix("R:")]
        issue = self.repos[source_name].issues.pop(int(number))

        new_number = destination.take_number()
        moved = Issue(
            number=new_number,
            title=issue.title,
            repository_url=destination.api_url,
            body=issue.body,
            labels=[],
            assignee=issue.assignee,
            assignees=list(issue.assignees),
        )
        destination.issues[new_number] = moved
        self.moved[(source_name, int(number))] = (destination.ref.full_name, new_number)
        return TransferredIssue(
            id=f"I:{destination.ref.full_name}:{new_number}",
            number=new_number,
            url=f"https://github.com/{destination.ref.full_name}/issues/{new_number}",
            state="OPEN",
            title=issue.title,
        )


@pytest.fixture
def tracker() -> FakeTracker:
    return FakeTracker()
