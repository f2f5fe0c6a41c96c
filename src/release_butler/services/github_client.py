"""Async GitHub API client with installation auth."""

import base64
import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..utils.github_auth import GitHubAppAuth
from .provider import RepositoryFile

logger = logging.getLogger(__name__)


class GitHubClient:
    """Async GitHub API client with installation auth."""

    def __init__(self, auth: GitHubAppAuth, installation_id: int):
        self.auth = auth
        self.installation_id = installation_id
        self._token: str | None = None
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "GitHubClient":
        self._token = await self.auth.get_installation_token(self.installation_id)
        self._client = httpx.AsyncClient(
            base_url=self.auth.api_url,
            headers={
                "Authorization": f"Bearer {self._token}",
                "Accept": "application/vnd.github.v3+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=30.0,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()

    async def get_file(
        self,
        owner: str,
        repo: str,
        path: str,
        ref: str | None = None,
    ) -> RepositoryFile | None:
        """Get file content, None if the file does not exist."""
        assert self._client is not None
        params = {"ref": ref} if ref else None
        response = await self._client.get(
            f"/repos/{owner}/{repo}/contents/{quote(path)}",
            params=params,
        )
        if response.status_code == 404:
            return None
        response.raise_for_status()
        data = response.json()
        # Directories come back as a list
        if not isinstance(data, dict) or data.get("type") != "file":
            return None
        content = base64.b64decode(data.get("content", "")).decode("utf-8")
        return RepositoryFile(path=path, content=content, sha=data["sha"])

    async def get_ref_sha(self, owner: str, repo: str, ref: str) -> str | None:
        """Get the SHA a ref points at (`heads/main`, `tags/v1.0.0`)."""
        assert self._client is not None
        response = await self._client.get(f"/repos/{owner}/{repo}/git/ref/{ref}")
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()["object"]["sha"]

    async def get_commit_tree_sha(self, owner: str, repo: str, commit_sha: str) -> str:
        assert self._client is not None
        response = await self._client.get(f"/repos/{owner}/{repo}/git/commits/{commit_sha}")
        response.raise_for_status()
        return response.json()["tree"]["sha"]

    async def create_blob(self, owner: str, repo: str, content: str) -> str:
        assert self._client is not None
        response = await self._client.post(
            f"/repos/{owner}/{repo}/git/blobs",
            json={"content": content, "encoding": "utf-8"},
        )
        response.raise_for_status()
        return response.json()["sha"]

    async def create_tree(
        self,
        owner: str,
        repo: str,
        base_tree: str,
        entries: list[dict[str, Any]],
    ) -> str:
        """
        Create a tree on top of `base_tree`.

        Entries format:
        [
            {"path": "Cargo.toml", "mode": "100644", "type": "blob", "sha": "..."}
        ]
        """
        assert self._client is not None
        response = await self._client.post(
            f"/repos/{owner}/{repo}/git/trees",
            json={"base_tree": base_tree, "tree": entries},
        )
        response.raise_for_status()
        return response.json()["sha"]

    async def create_commit(
        self,
        owner: str,
        repo: str,
        message: str,
        tree_sha: str,
        parents: list[str],
    ) -> str:
        assert self._client is not None
        response = await self._client.post(
            f"/repos/{owner}/{repo}/git/commits",
            json={"message": message, "tree": tree_sha, "parents": parents},
        )
        response.raise_for_status()
        return response.json()["sha"]

    async def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> None:
        """Create a fully qualified ref (`refs/heads/...`, `refs/tags/...`)."""
        assert self._client is not None
        response = await self._client.post(
            f"/repos/{owner}/{repo}/git/refs",
            json={"ref": ref, "sha": sha},
        )
        response.raise_for_status()

    async def update_ref(
        self,
        owner: str,
        repo: str,
        ref: str,
        sha: str,
        force: bool = False,
    ) -> None:
        """Move a ref given without the `refs/` prefix (`heads/...`)."""
        assert self._client is not None
        response = await self._client.patch(
            f"/repos/{owner}/{repo}/git/refs/{ref}",
            json={"sha": sha, "force": force},
        )
        response.raise_for_status()

    async def get_issue(self, owner: str, repo: str, issue_number: int) -> dict[str, Any]:
        assert self._client is not None
        response = await self._client.get(f"/repos/{owner}/{repo}/issues/{issue_number}")
        response.raise_for_status()
        return response.json()

    async def list_issues(
        self,
        owner: str,
        repo: str,
        *,
        creator: str | None = None,
        labels: list[str] | None = None,
        state: str = "open",
    ) -> list[dict[str, Any]]:
        """List issues (first page is enough for existence checks)."""
        assert self._client is not None
        params: dict[str, Any] = {"state": state, "per_page": 100}
        if creator:
            params["creator"] = creator
        if labels:
            params["labels"] = ",".join(labels)
        response = await self._client.get(f"/repos/{owner}/{repo}/issues", params=params)
        response.raise_for_status()
        return response.json()

    async def create_issue(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str,
        labels: list[str] | None = None,
    ) -> dict[str, Any]:
        assert self._client is not None
        payload: dict[str, Any] = {"title": title, "body": body}
        if labels:
            payload["labels"] = labels
        response = await self._client.post(f"/repos/{owner}/{repo}/issues", json=payload)
        response.raise_for_status()
        return response.json()

    async def create_issue_comment(
        self,
        owner: str,
        repo: str,
        issue_number: int,
        body: str,
    ) -> dict[str, Any]:
        """Create a comment on an issue/PR."""
        assert self._client is not None
        response = await self._client.post(
            f"/repos/{owner}/{repo}/issues/{issue_number}/comments",
            json={"body": body},
        )
        response.raise_for_status()
        return response.json()

    async def remove_label(
        self,
        owner: str,
        repo: str,
        issue_number: int,
        label: str,
    ) -> None:
        assert self._client is not None
        response = await self._client.delete(
            f"/repos/{owner}/{repo}/issues/{issue_number}/labels/{quote(label, safe='')}"
        )
        # Already removed
        if response.status_code == 404:
            logger.debug(f"Label {label} was not on {owner}/{repo}#{issue_number}")
            return
        response.raise_for_status()

    async def list_pull_requests(
        self,
        owner: str,
        repo: str,
        *,
        head: str,
        base: str,
        state: str = "open",
    ) -> list[dict[str, Any]]:
        assert self._client is not None
        response = await self._client.get(
            f"/repos/{owner}/{repo}/pulls",
            params={"head": head, "base": base, "state": state},
        )
        response.raise_for_status()
        return response.json()

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
        assert self._client is not None
        response = await self._client.post(
            f"/repos/{owner}/{repo}/pulls",
            json={
                "title": title,
                "head": head,
                "base": base,
                "body": body,
                "maintainer_can_modify": maintainer_can_modify,
            },
        )
        response.raise_for_status()
        return response.json()

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
        assert self._client is not None
        response = await self._client.post(
            f"/repos/{owner}/{repo}/releases",
            json={
                "tag_name": tag_name,
                "name": name,
                "body": body,
                "prerelease": prerelease,
                # The API takes a string: "true", "false" or "legacy"
                "make_latest": "true" if make_latest else "false",
            },
        )
        response.raise_for_status()
        return response.json()
