"""
GitHub transport: token lookup, client construction and the `TrackerClient` adapter.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Final

from github import Auth, Github, UnknownObjectException

from . import utils
from .exceptions import GraphQLError
from .models import Issue, Label, TransferredIssue

if TYPE_CHECKING:
    from collections.abc import Sequence

    from github.Requester import Requester

    from .models import RepositoryRef

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)

_TOKEN_ENV_VARS: Final[tuple[str, ...]] = ("GH_TOKEN", "GITHUB_TOKEN")
_DEFAULT_TOKEN_PASS_PATH: Final[str] = "github/cli/token"  # noqa: S105

# Seconds to wait before every request, to stay clear of secondary rate limits
DEFAULT_REQUEST_DELAY: Final[float] = 1.0

_REPOSITORY_ID_QUERY: Final[str] = """
query RepositoryId($owner: String!, $name: String!) {
    repository(owner: $owner, name: $name) {
        id
    }
}
"""

_ISSUE_ID_QUERY: Final[str] = """
query IssueId($owner: String!, $name: String!, $number: Int!) {
    repository(owner: $owner, name: $name) {
        issue(number: $number) {
            id
        }
    }
}
"""

_TRANSFER_ISSUE_MUTATION: Final[str] = """
mutation TransferIssue($issueId: ID!, $repositoryId: ID!) {
    transferIssue(input: {issueId: $issueId, repositoryId: $repositoryId}) {
        issue {
            id
            number
            url
            state
            title
            locked
            labels(first: 100) {
                nodes {
                    name
                    color
                    description
                }
            }
        }
    }
}
"""


def get_token(pass_path: str | None = None) -> str | None:
    """Get GitHub token from pass path, env var GH_TOKEN or GITHUB_TOKEN, or default pass location."""
    if pass_path:
        return utils.get_pass_value(pass_path)

    for env_var in _TOKEN_ENV_VARS:
        token: str | None = os.environ.get(env_var)
        if token:
            return token

    try:
        return utils.get_pass_value(_DEFAULT_TOKEN_PASS_PATH)
    except (utils.PassError, OSError):
        logger.debug("No GitHub token found in the password store")
        return None


def get_client(token: str, *, delay: float = DEFAULT_REQUEST_DELAY) -> Github:
    """Get a GitHub client that waits `delay` seconds before each request."""
    return Github(
        auth=Auth.Token(token),
        seconds_between_requests=delay,
        seconds_between_writes=delay,
    )


class GitHubTracker:
    """`TrackerClient` backed by the GitHub REST and GraphQL APIs.

    Calls go through PyGithub's requester for consistent authentication,
    throttling and error handling. GithubException and its subclasses are
    left to propagate.
    """

    def __init__(self, client: Github) -> None:
        self._client: Github = client

    @property
    def _requester(self) -> Requester:
        return self._client.requester

    def _get(self, url: str, parameters: dict[str, Any] | None = None) -> Any:
        _, data = self._requester.requestJsonAndCheck("GET", url, parameters=parameters)
        return data

    def _post(self, url: str, payload: dict[str, Any]) -> Any:
        _, data = self._requester.requestJsonAndCheck("POST", url, input=payload)
        return data

    def _graphql(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        response: dict[str, Any] = self._post("/graphql", {"query": query, "variables": variables})
        if response.get("errors"):
            msg = f"GraphQL errors: {response['errors']}"
            raise GraphQLError(msg)
        return response.get("data") or {}

    @staticmethod
    def _repo_url(repo: RepositoryRef) -> str:
        return f"/repos/{repo.owner}/{repo.name}"

    def list_labels(self, repo: RepositoryRef, page: int, per_page: int) -> list[Label]:
        data = self._get(f"{self._repo_url(repo)}/labels", {"page": page, "per_page": per_page})
        return [Label.from_api(label) for label in data or []]

    def create_label(
        self,
        repo: RepositoryRef,
        name: str,
        description: str | None = None,
        color: str | None = None,
    ) -> Label:
        payload: dict[str, Any] = {"name": name}
        if description:
            payload["description"] = description
        if color:
            payload["color"] = color
        return Label.from_api(self._post(f"{self._repo_url(repo)}/labels", payload))

    def list_issues(self, repo: RepositoryRef, labels: str, page: int, per_page: int) -> list[Issue]:
        # Closed issues count as transferred too
        parameters = {"labels": labels, "state": "all", "page": page, "per_page": per_page}
        data = self._get(f"{self._repo_url(repo)}/issues", parameters)
        return [Issue.from_api(issue) for issue in data or []]

    def get_issue(self, repo: RepositoryRef, number: int) -> Issue | None:
        try:
            data = self._get(f"{self._repo_url(repo)}/issues/{number}")
        except UnknownObjectException:
            logger.debug(f"Issue {repo}#{number} not found")
            return None
        return Issue.from_api(data) if data else None

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
        payload: dict[str, Any] = {"title": title, "body": body, "labels": list(labels)}
        if assignees:
            payload["assignees"] = list(assignees)
        elif assignee:
            payload["assignee"] = assignee
        return Issue.from_api(self._post(f"{self._repo_url(repo)}/issues", payload))

    def add_labels(self, repo: RepositoryRef, issue_number: int, label_names: Sequence[str]) -> list[Label]:
        data = self._post(f"{self._repo_url(repo)}/issues/{issue_number}/labels", {"labels": list(label_names)})
        return [Label.from_api(label) for label in data or []]

    def get_repository_visibility(self, repo: RepositoryRef) -> bool | None:
        data: dict[str, Any] = self._get(self._repo_url(repo)) or {}
        private = data.get("private")
        return private if isinstance(private, bool) else None

    def get_internal_id(self, repo: RepositoryRef, issue_number: int | None = None) -> str:
        variables: dict[str, Any] = {"owner": repo.owner, "name": repo.name}
        if issue_number is None:
            repository = self._graphql(_REPOSITORY_ID_QUERY, variables).get("repository")
            if not repository:
                msg = f"Repository {repo} not found"
                raise GraphQLError(msg)
            return repository["id"]

        variables["number"] = issue_number
        repository = self._graphql(_ISSUE_ID_QUERY, variables).get("repository")
        issue = (repository or {}).get("issue")
        if not issue:
            msg = f"Issue {repo}#{issue_number} not found"
            raise GraphQLError(msg)
        return issue["id"]

    def transfer_issue(self, issue_id: str, repository_id: str) -> TransferredIssue:
        data = self._graphql(_TRANSFER_ISSUE_MUTATION, {"issueId": issue_id, "repositoryId": repository_id})
        issue = (data.get("transferIssue") or {}).get("issue")
        if not issue:
            msg = f"Transfer of issue {issue_id} returned no issue"
            raise GraphQLError(msg)
        return TransferredIssue.from_graphql(issue)
