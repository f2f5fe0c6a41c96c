"""Pydantic models for GitHub webhook payloads."""

from datetime import datetime
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class GitHubUser(BaseModel):
    """GitHub user or organization."""

    login: str
    id: int | None = None


class GitHubLabel(BaseModel):
    """Issue or PR label."""

    name: str


class GitHubRepository(BaseModel):
    """GitHub repository info."""

    full_name: str
    name: str | None = None


class GitHubInstallation(BaseModel):
    """GitHub App installation reference carried by webhook payloads."""

    id: int


class Issue(BaseModel):
    """Issue as delivered by `issues` events."""

    number: int
    title: str
    body: str | None = None
    user: GitHubUser
    labels: list[GitHubLabel] = Field(default_factory=list)
    updated_at: datetime

    def has_label(self, name: str) -> bool:
        return any(label.name == name for label in self.labels)


class PullRequestHead(BaseModel):
    """PR head (source) branch info."""

    ref: str
    sha: str | None = None
    # "<owner>:<branch>"
    label: str | None = None


class PullRequestBase(BaseModel):
    """PR base (target) branch info."""

    ref: str
    sha: str | None = None


class PullRequest(BaseModel):
    """Pull request details."""

    number: int
    title: str | None = None
    body: str | None = None
    merged: bool | None = None
    merge_commit_sha: str | None = None
    head: PullRequestHead
    base: PullRequestBase


class WebhookEvent(BaseModel):
    """Fields shared by every webhook payload this service reads."""

    action: str | None = None
    repository: GitHubRepository | None = None
    installation: GitHubInstallation | None = None
    sender: GitHubUser | None = None


class IssuesEvent(WebhookEvent):
    """Webhook payload for issues events."""

    action: str
    issue: Issue


class PullRequestEvent(WebhookEvent):
    """Webhook payload for pull_request events."""

    action: str
    number: int
    pull_request: PullRequest


class GenericEvent(WebhookEvent):
    """Any other event kind; only decoded far enough to be rejected."""

    model_config = ConfigDict(extra="allow")


EVENT_MODELS: dict[str, type[WebhookEvent]] = {
    "issues": IssuesEvent,
    "pull_request": PullRequestEvent,
}


class RepositoryIdentity(NamedTuple):
    """`owner/name` of the repository an event belongs to."""

    owner: str
    name: str

    @classmethod
    def from_full_name(cls, full_name: str) -> "RepositoryIdentity | None":
        owner, sep, name = full_name.partition("/")
        if not sep or not owner or not name:
            return None
        return cls(owner, name)

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"
