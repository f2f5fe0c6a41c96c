"""Pydantic schemas for webhook payloads and repository configuration."""

from .github_webhooks import (
    EVENT_MODELS,
    GenericEvent,
    GitHubInstallation,
    GitHubLabel,
    GitHubRepository,
    GitHubUser,
    Issue,
    IssuesEvent,
    PullRequest,
    PullRequestEvent,
    RepositoryIdentity,
    WebhookEvent,
)
from .release_config import (
    CONFIG_VERSION,
    IssueMetadata,
    PackageManager,
    PackageSpec,
    PullRequestMetadata,
    ReleaseConfig,
)

__all__ = [
    "CONFIG_VERSION",
    "EVENT_MODELS",
    "GenericEvent",
    "GitHubInstallation",
    "GitHubLabel",
    "GitHubRepository",
    "GitHubUser",
    "Issue",
    "IssueMetadata",
    "IssuesEvent",
    "PackageManager",
    "PackageSpec",
    "PullRequest",
    "PullRequestEvent",
    "PullRequestMetadata",
    "ReleaseConfig",
    "RepositoryIdentity",
    "WebhookEvent",
]
