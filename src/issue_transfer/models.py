"""Data models for issues moved between two tracker repositories.

Labels arrive from the tracker either as bare names or as structured objects.
They are normalized with `normalize_label` right after retrieval, so the rest
of the package only ever sees `Label` instances.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final, TypeGuard

from .exceptions import ConfigurationError, OriginParseError

MARKER_LABEL_PREFIX: Final[str] = "transferred-from: "
MAX_LABEL_NAME_LENGTH: Final[int] = 50

_REPO_PATH_PATTERN: Final[re.Pattern[str]] = re.compile(r"[^/]+/[^/]+")
# The last two path segments of an API repository URL, e.g. ".../repos/owner/repo"
_ORIGIN_URL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^.+/(?P<owner>[^/]+)/(?P<name>[^/]+)$")


@dataclass(frozen=True)
class RepositoryRef:
    """Identifies a tracker repository by owner and name."""

    owner: str
    name: str

    @classmethod
    def parse(cls, repo_path: str, *, argument: str = "repository") -> RepositoryRef:
        """Parse an 'owner/repo' string.

        Raises:
            ConfigurationError: If the string has no slash, more than one, or an empty segment
        """
        if not _REPO_PATH_PATTERN.fullmatch(repo_path):
            msg = f"Failed to parse '{argument}'. '{argument}' must be in the format 'owner/repo'."
            raise ConfigurationError(msg)
        owner, name = repo_path.split("/")
        return cls(owner=owner, name=name)

    @classmethod
    def from_url(cls, repository_url: str) -> RepositoryRef:
        """Derive the repository from an issue's repository URL."""
        match = _ORIGIN_URL_PATTERN.match(repository_url)
        if match is None:
            msg = f"Failed to parse repository URL: {repository_url!r}"
            raise OriginParseError(msg)
        return cls(owner=match.group("owner"), name=match.group("name"))

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def same_owner(self, other: RepositoryRef) -> bool:
        """Owners are compared case-insensitively, as the tracker treats them."""
        return self.owner.casefold() == other.owner.casefold()

    def __str__(self) -> str:
        return self.full_name


@dataclass
class Label:
    """A label that can be applied to issues."""

    name: str
    description: str | None = None
    color: str | None = None  # Hex color without '#' prefix (e.g., "ff0000")

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> Label:
        return cls(name=data["name"], description=data.get("description"), color=data.get("color"))


class Visibility(Enum):
    """Visibility of a repository, unknown until first queried."""

    UNKNOWN = "unknown"
    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def from_private_flag(cls, private: bool | None) -> Visibility:
        """An indeterminate flag resolves to PRIVATE, the stricter assumption."""
        if private is False:
            return cls.PUBLIC
        return cls.PRIVATE


class TransferMode(Enum):
    """How an issue reaches the destination repository."""

    NATIVE = "native"
    COPY = "copy"


@dataclass
class Issue:
    """An issue as retrieved from the tracker."""

    number: int
    title: str
    repository_url: str
    body: str | None = None
    labels: list[Label] = field(default_factory=list)
    assignee: str | None = None  # Login of the primary assignee
    assignees: list[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> Issue:
        assignee: Mapping[str, Any] | None = data.get("assignee")
        return cls(
            number=data["number"],
            title=data["title"],
            repository_url=data["repository_url"],
            body=data.get("body"),
            labels=[normalize_label(label) for label in data.get("labels") or []],
            assignee=assignee.get("login") if assignee else None,
            assignees=[user["login"] for user in data.get("assignees") or [] if user and user.get("login")],
        )

    @property
    def origin(self) -> RepositoryRef:
        """The repository this issue currently lives in."""
        return RepositoryRef.from_url(self.repository_url)


@dataclass
class TransferredIssue:
    """An issue as returned by the native transfer mutation."""

    id: str
    number: int
    url: str
    state: str
    title: str
    labels: list[Label] = field(default_factory=list)
    locked: bool = False

    @classmethod
    def from_graphql(cls, node: Mapping[str, Any]) -> TransferredIssue:
        label_nodes: list[Mapping[str, Any]] = (node.get("labels") or {}).get("nodes") or []
        return cls(
            id=node["id"],
            number=node["number"],
            url=node["url"],
            state=node["state"],
            title=node["title"],
            labels=[Label.from_api(label) for label in label_nodes],
            locked=bool(node.get("locked")),
        )


def is_label_name(label: object) -> TypeGuard[str]:
    """Tell a bare label name apart from a structured label."""
    return isinstance(label, str)


def normalize_label(label: Label | str | Mapping[str, Any]) -> Label:
    """Convert any label representation to a `Label`."""
    if is_label_name(label):
        return Label(name=label)
    if isinstance(label, Label):
        return label
    return Label.from_api(label)


def is_marker_label(label: Label) -> bool:
    return label.name.startswith(MARKER_LABEL_PREFIX)


def marker_label_name(origin: RepositoryRef) -> str:
    return f"{MARKER_LABEL_PREFIX}{origin.full_name}"[:MAX_LABEL_NAME_LENGTH]


def marker_label(origin: RepositoryRef) -> Label:
    """Build the label recording which repository an issue came from."""
    return Label(name=marker_label_name(origin))
