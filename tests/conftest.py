"""Pytest configuration and fixtures."""

import itertools
import json
from datetime import datetime, timezone
from typing import Any

import httpx
import pytest

from release_butler.context import AppContext
from release_butler.services.provider import RepositoryFile
from release_butler.utils.github_auth import generate_hmac_sha256_hex

WEBHOOK_SECRET = "abc"
OWNER = "octo"
REPO = "butler"

SINGLE_PACKAGE_CONFIG = """\
version = 1
default_branch = "main"

[issues]
allowed_authors = ["Alice"]

[packages.butler]
changelog_file = "CHANGELOG.md"
pre_release_changelog_file = "CHANGELOG-next.md"
create_gh_release = true
package_manager = "cargo"
"""

MULTI_PACKAGE_CONFIG = """\
version = 1
default_branch = "main"

[issues]
allowed_authors = ["alice"]
label = "release"

[pull_requests]
branch_prefix = "releases/"

[packages.core]
path = "crates/core"
changelog_file = "crates/core/CHANGELOG.md"
package_manager = "cargo"

[packages.cli]
path = "crates/cli"
package_manager = "cargo"
"""

CARGO_TOML = """\
[package]
name = "butler"
version = "0.1.0" # bumped by release-butler
edition = "2021"

[dependencies]
serde = "1"
"""


class FakeGitHub:
    """In-memory SourceControlProvider recording every write."""

    def __init__(self, files: dict[str, str] | None = None):
        self.files: dict[str, str] = dict(files or {})
        self.refs: dict[str, str] = {"heads/main": "base-commit"}
        self.blobs: dict[str, str] = {}
        self.trees: dict[str, dict[str, str]] = {"tree-base": dict(self.files)}
        self.commits: dict[str, dict[str, Any]] = {
            "base-commit": {"tree": "tree-base", "parents": [], "message": "init"}
        }
        self.issues: dict[int, dict[str, Any]] = {}
        self.created_issues: list[dict[str, Any]] = []
        self.comments: list[tuple[int, str]] = []
        self.removed_labels: list[tuple[int, str]] = []
        self.pulls: list[dict[str, Any]] = []
        self.releases: list[dict[str, Any]] = []
        self.failing: set[str] = set()
        self._ids = itertools.count(1)

    async def __aenter__(self) -> "FakeGitHub":
        return self

    async def __aexit__(self, *args: Any) -> None:
        return None

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise httpx.ConnectError(f"{operation} failed")

    def branch_files(self, branch: str) -> dict[str, str]:
        commit = self.commits[self.refs[f"heads/{branch}"]]
        return self.trees[commit["tree"]]

    async def get_file(self, owner, repo, path, ref=None):
        self._check("get_file")
        if path not in self.files:
            return None
        return RepositoryFile(path=path, content=self.files[path], sha=f"sha-{path}")

    async def get_ref_sha(self, owner, repo, ref):
        self._check("get_ref_sha")
        return self.refs.get(ref)

    async def get_commit_tree_sha(self, owner, repo, commit_sha):
        return self.commits[commit_sha]["tree"]

    async def create_blob(self, owner, repo, content):
        sha = f"blob-{next(self._ids)}"
        self.blobs[sha] = content
        return sha

    async def create_tree(self, owner, repo, base_tree, entries):
        self._check("create_tree")
        sha = f"tree-{next(self._ids)}"
        tree = dict(self.trees[base_tree])
        for entry in entries:
            tree[entry["path"]] = self.blobs[entry["sha"]]
        self.trees[sha] = tree
        return sha

    async def create_commit(self, owner, repo, message, tree_sha, parents):
        sha = f"commit-{next(self._ids)}"
        self.commits[sha] = {"tree": tree_sha, "parents": parents, "message": message}
        return sha

    async def create_ref(self, owner, repo, ref, sha):
        self._check("create_ref")
        key = ref.removeprefix("refs/")
        if key in self.refs:
            raise httpx.ConnectError(f"Reference {ref} already exists")
        self.refs[key] = sha

    async def update_ref(self, owner, repo, ref, sha, force=False):
        assert ref in self.refs
        self.refs[ref] = sha

    async def get_issue(self, owner, repo, issue_number):
        self._check("get_issue")
        return self.issues[issue_number]

    async def list_issues(self, owner, repo, *, creator=None, labels=None, state="open"):
        return [
            issue
            for issue in self.created_issues
            if set(labels or []) <= set(issue["labels"])
        ]

    async def create_issue(self, owner, repo, title, body, labels=None):
        issue = {"number": next(self._ids), "title": title, "body": body, "labels": labels or []}
        self.created_issues.append(issue)
        return issue

    async def create_issue_comment(self, owner, repo, issue_number, body):
        self._check("create_issue_comment")
        self.comments.append((issue_number, body))
        return {"id": next(self._ids), "body": body}

    async def remove_label(self, owner, repo, issue_number, label):
        self.removed_labels.append((issue_number, label))

    async def list_pull_requests(self, owner, repo, *, head, base, state="open"):
        return [
            pr
            for pr in self.pulls
            if pr["head"] == head and pr["base"] == base and pr["state"] == state
        ]

    async def create_pull_request(
        self, owner, repo, *, title, head, base, body, maintainer_can_modify=True
    ):
        self._check("create_pull_request")
        pr = {
            "number": next(self._ids),
            "title": title,
            "head": f"{owner}:{head}",
            "base": base,
            "body": body,
            "state": "open",
            "maintainer_can_modify": maintainer_can_modify,
        }
        self.pulls.append(pr)
        return pr

    async def create_release(
        self, owner, repo, *, tag_name, name, body, prerelease=False, make_latest=False
    ):
        self._check("create_release")
        release = {
            "tag_name": tag_name,
            "name": name,
            "body": body,
            "prerelease": prerelease,
            "make_latest": make_latest,
        }
        self.releases.append(release)
        return release


def sign(body: bytes, secret: str = WEBHOOK_SECRET) -> str:
    return "sha256=" + generate_hmac_sha256_hex(body, secret.encode())


def issues_payload(
    title: str = "v1.2.3",
    author: str = "alice",
    labels: tuple[str, ...] = ("release-butler",),
    action: str = "labeled",
    body: str | None = "### Added\n- Shiny things",
    number: int = 7,
) -> dict[str, Any]:
    return {
        "action": action,
        "issue": {
            "number": number,
            "title": title,
            "body": body,
            "user": {"login": author, "id": 1},
            "labels": [{"name": name} for name in labels],
            "updated_at": datetime(2024, 5, 17, 10, 30, tzinfo=timezone.utc).isoformat(),
        },
        "repository": {"full_name": f"{OWNER}/{REPO}", "name": REPO},
        "installation": {"id": 42},
        "sender": {"login": author},
    }


def pull_request_payload(
    title: str | None = "RELEASE butler@v1.2.3",
    merged: bool = True,
    head_label: str = f"{OWNER}:release-butler/butler@1.2.3",
    body: str | None = "Fixes #7\n\nMerging this pull request creates the tag.",
    merge_commit_sha: str | None = "merge-sha",
    action: str = "closed",
) -> dict[str, Any]:
    return {
        "action": action,
        "number": 12,
        "pull_request": {
            "number": 12,
            "title": title,
            "body": body,
            "state": "closed",
            "merged": merged,
            "merge_commit_sha": merge_commit_sha,
            "head": {"ref": head_label.split(":", 1)[-1], "sha": "head-sha", "label": head_label},
            "base": {"ref": "main", "sha": "base-sha"},
        },
        "repository": {"full_name": f"{OWNER}/{REPO}", "name": REPO},
        "installation": {"id": 42},
    }


def encode(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload).encode()


@pytest.fixture
def gh() -> FakeGitHub:
    """Single-package repository with a manifest and a changelog."""
    return FakeGitHub(
        {
            ".github/release-butler.toml": SINGLE_PACKAGE_CONFIG,
            "Cargo.toml": CARGO_TOML,
            "CHANGELOG.md": "# Changelog\n\n## [0.1.0] - 2024-01-01\n\n- First release\n",
        }
    )


@pytest.fixture
def context(gh: FakeGitHub) -> AppContext:
    return AppContext(webhook_secret=WEBHOOK_SECRET, provider_for=lambda _installation_id: gh)
