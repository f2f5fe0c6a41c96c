"""Publish a set of file changes as a single commit on a branch."""

import logging
from dataclasses import dataclass

from .provider import SourceControlProvider

logger = logging.getLogger(__name__)


class BaseBranchNotFound(LookupError):
    """The branch a release commit should be based on does not exist."""


@dataclass(frozen=True)
class FileChange:
    """New full content for a file, relative to the repository root."""

    path: str
    content: str


async def commit_to_branch(
    gh: SourceControlProvider,
    owner: str,
    repo: str,
    *,
    branch: str,
    base_branch: str,
    changes: list[FileChange],
    message: str,
) -> str:
    """
    Commit `changes` on top of `base_branch` and point `branch` at it.

    The branch is created when missing and force-updated otherwise, so
    re-running for the same release replaces the previous commit instead of
    piling new ones on it. Returns the new commit SHA.
    """
    base_sha = await gh.get_ref_sha(owner, repo, f"heads/{base_branch}")
    if base_sha is None:
        raise BaseBranchNotFound(f"Base branch {base_branch} does not exist in {owner}/{repo}")
    base_tree = await gh.get_commit_tree_sha(owner, repo, base_sha)

    entries = []
    for change in changes:
        blob_sha = await gh.create_blob(owner, repo, change.content)
        entries.append(
            {"path": change.path, "mode": "100644", "type": "blob", "sha": blob_sha}
        )

    tree_sha = await gh.create_tree(owner, repo, base_tree, entries)
    commit_sha = await gh.create_commit(owner, repo, message, tree_sha, [base_sha])

    if await gh.get_ref_sha(owner, repo, f"heads/{branch}") is None:
        logger.info(f"Creating branch {branch} in {owner}/{repo} at {commit_sha[:8]}")
        await gh.create_ref(owner, repo, f"refs/heads/{branch}", commit_sha)
    else:
        logger.info(f"Force-updating branch {branch} in {owner}/{repo} to {commit_sha[:8]}")
        await gh.update_ref(owner, repo, f"heads/{branch}", commit_sha, force=True)

    return commit_sha
