"""Business logic services."""

from .changelog import insert_section, render_section
from .commit_builder import BaseBranchNotFound, FileChange, commit_to_branch
from .config_loader import ReleaseConfigError, load_release_config, parse_release_config
from .github_client import GitHubClient
from .manifest import ManifestError, manifest_path, set_version
from .provider import RepositoryFile, SourceControlProvider
from .versioning import (
    ReleaseRequest,
    TitleParseError,
    parse_release_title,
    release_branch,
    release_pr_title,
    release_tag,
)

__all__ = [
    "BaseBranchNotFound",
    "FileChange",
    "GitHubClient",
    "ManifestError",
    "ReleaseConfigError",
    "ReleaseRequest",
    "RepositoryFile",
    "SourceControlProvider",
    "TitleParseError",
    "commit_to_branch",
    "insert_section",
    "load_release_config",
    "manifest_path",
    "parse_release_config",
    "parse_release_title",
    "release_branch",
    "release_pr_title",
    "release_tag",
    "render_section",
    "set_version",
]
