"""
Source control provider interface.

Release handlers only talk to GitHub through this protocol, so tests can
swap in an in-memory implementation. Every method is a network call and
raises `httpx.HTTPError` (or a subclass) when the provider rejects it.
"""

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class RepositoryFile:
    """File content read from the repository."""

    path: str
    content: str
    sha: str


class SourceControlProvider(Protocol):
    """Operations the release workflow needs from GitHub."""

    # Contents

    async def get_file(
        self, owner: str, repo: str, path: str, ref: str | None = None
    ) -> RepositoryFile | None:
        """Read a UTF-8 file. Returns None if it does not exist."""
        ...

    # Git data

    async def get_ref_sha(self, owner: str, repo: str, ref: str) -> str | None:
        """SHA a ref (`heads/main`, `tags/v1`) points at, None if missing."""
        ...

    async def get_commit_tree_sha(self, owner: str, repo: str, commit_sha: str) -> str:
        ...

    async def create_blob(self, owner: str, repo: str, content: str) -> str:
        ...

    async def create_tree(
        self, owner: str, repo: str, base_tree: str, entries: list[dict[str, Any]]
    ) -> str:
        ...

    async def create_commit(
        self, owner: str, repo: str, message: str, tree_sha: str, parents: list[str]
    ) -> str:
        ...

    async def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> None:
        """Create `refs/...`; fails if the ref already exists."""
        ...

    async def update_ref(
        self, owner: str, repo: str, ref: str, sha: str, force: bool = False
    ) -> None:
        """
        Move an existing ref to `sha`.

        With `force=True` the update is not required to be a fast-forward and
        is atomic from the caller's viewpoint: the ref ends up at `sha` or the
        call fails and the ref is unchanged.
        """
        ...

    # Issues

    async def get_issue(self, owner: str, repo: str, issue_number: int) -> dict[str, Any]:
        ...

    async def list_issues(
        self,
        owner: str,
        repo: str,
        *,
        creator: str | None = None,
        labels: list[str] | None = None,
        state: str = "open",
    ) -> list[dict[str, Any]]:
        ...

    async def create_issue(
        self, owner: str, repo: str, title: str, body: str, labels: list[str] | None = None
    ) -> dict[str, Any]:
        ...

    async def create_issue_comment(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> dict[str, Any]:
        ...

    async def remove_label(self, owner: str, repo: str, issue_number: int, label: str) -> None:
        ...

    # Pull requests and releases

    async def list_pull_requests(
        self, owner: str, repo: str, *, head: str, base: str, state: str = "open"
    ) -> list[dict[str, Any]]:
        """`head` is `<owner>:<branch>`."""
        ...

    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        *,
        title: str,
        head: str,
        base: str,
        body: str,
        maintainer_can_modify: bool = True,
    ) -> dict[str, Any]:
        ...

    async def create_release(
        self,
        owner: str,
        repo: str,
        *,
        tag_name: str,
        name: str,
        body: str,
        prerelease: bool = False,
        make_latest: bool = False,
    ) -> dict[str, Any]:
        ...
