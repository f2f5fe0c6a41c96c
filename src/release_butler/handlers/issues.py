"""Turn labeled release issues into release pull requests."""

import logging

import httpx

from ..context import AppContext
from ..schemas.github_webhooks import Issue, IssuesEvent, RepositoryIdentity
from ..schemas.release_config import PackageSpec, ReleaseConfig
from ..services.changelog import insert_section, render_section
from ..services.commit_builder import BaseBranchNotFound, FileChange, commit_to_branch
from ..services.config_loader import load_release_config
from ..services.manifest import ManifestError, manifest_path, set_version
from ..services.provider import SourceControlProvider
from ..services.versioning import (
    TITLE_HELP,
    ReleaseRequest,
    TitleParseError,
    parse_release_title,
    release_branch,
    release_pr_title,
    release_tag,
)
from .outcome import Outcome

logger = logging.getLogger(__name__)


async def handle_issue_event(
    repo: RepositoryIdentity,
    event: IssuesEvent,
    gh: SourceControlProvider,
    context: AppContext,
) -> Outcome:
    """
    Handle `labeled` and `edited` issue events.

    Steps:
    1. Ignore issues without the release label (read from the repo config)
    2. Parse `[package@]version` from the title
    3. Check the author is allowed to request releases
    4. Resolve the package
    5. Bump the manifest, add the changelog section
    6. Push the release branch and open the PR if needed
    """
    issue = event.issue
    if not issue.labels:
        return Outcome.IGNORED

    config = await load_release_config(
        gh, repo.owner, repo.name, context.release_config_path, context.app_slug
    )
    if config is None:
        return Outcome.IGNORED

    label = config.issues.label
    if not issue.has_label(label):
        return Outcome.IGNORED

    try:
        return await _process_release_request(repo, issue, gh, config, context)
    except (httpx.HTTPError, BaseBranchNotFound) as e:
        logger.error(f"Failed to process release request {repo}#{issue.number}: {e}")
        return Outcome.FAILED


async def _process_release_request(
    repo: RepositoryIdentity,
    issue: Issue,
    gh: SourceControlProvider,
    config: ReleaseConfig,
    context: AppContext,
) -> Outcome:
    label = config.issues.label

    try:
        request = parse_release_title(issue.title)
    except TitleParseError as e:
        logger.info(f"Rejecting {repo}#{issue.number}: {e}")
        await _reject(
            gh,
            repo,
            issue.number,
            label,
            f"I couldn't find a version in the title `{issue.title}`.\n\n{TITLE_HELP}",
        )
        return Outcome.COMMENTED

    if not config.issues.is_allowed(issue.user.login):
        logger.info(f"{issue.user.login} is not allowed to request releases in {repo}")
        await _reject(
            gh,
            repo,
            issue.number,
            label,
            config.issues.unauthorized_comment(context.release_config_path),
        )
        return Outcome.COMMENTED

    resolved = config.resolve_package(request.package)
    if resolved is None:
        available = ", ".join(f"`{name}`" for name in config.packages) or "none"
        if not request.package:
            body = (
                "This repository has more than one package, please prefix the version "
                f"with the package name, e.g. `<package>@v{request.version}`.\n\n"
                f"Configured packages: {available}"
            )
        else:
            body = (
                f"There is no package named `{request.package}` in "
                f"`{context.release_config_path}`.\n\nConfigured packages: {available}"
            )
        await gh.create_issue_comment(repo.owner, repo.name, issue.number, body)
        return Outcome.COMMENTED

    package_name, package = resolved
    changes = await build_file_changes(gh, repo, config, package, request, issue)
    if changes is None:
        return Outcome.IGNORED
    if not changes:
        logger.info(f"{package_name} is already at {request.version} in {repo}")
        return Outcome.IGNORED

    tag = release_tag(package_name, request.version)
    branch = release_branch(config.pull_requests.branch_prefix, package_name, request.version)
    await commit_to_branch(
        gh,
        repo.owner,
        repo.name,
        branch=branch,
        base_branch=config.default_branch,
        changes=changes,
        message=f"Release {tag}",
    )

    await ensure_pull_request(
        gh,
        repo,
        branch=branch,
        base=config.default_branch,
        title=release_pr_title(package_name, request.version),
        body=(
            f"Fixes #{issue.number}\n\n"
            f"Merging this pull request creates the `{tag}` tag."
        ),
    )
    return Outcome.PUBLISHED


async def build_file_changes(
    gh: SourceControlProvider,
    repo: RepositoryIdentity,
    config: ReleaseConfig,
    package: PackageSpec,
    request: ReleaseRequest,
    issue: Issue,
) -> list[FileChange] | None:
    """
    Compute the manifest and changelog edits for a release.

    Returns None when the manifest can't be read or updated, and only the
    files whose content actually changes otherwise.
    """
    version = str(request.version)
    ref = config.default_branch

    path = manifest_path(package)
    try:
        manifest = await gh.get_file(repo.owner, repo.name, path, ref)
    except UnicodeDecodeError as e:
        logger.error(f"Failed to decode {path} in {repo}: {e}")
        return None
    if manifest is None:
        logger.error(f"Manifest {path} not found in {repo}@{ref}")
        return None

    try:
        new_manifest = set_version(manifest.content, package.package_manager, version)
    except ManifestError as e:
        logger.error(f"Failed to update {path} in {repo}: {e}")
        return None

    changes = []
    if new_manifest != manifest.content:
        changes.append(FileChange(path=path, content=new_manifest))

    changelog_path = package.changelog_for(request.is_prerelease)
    if changelog_path:
        try:
            changelog = await gh.get_file(repo.owner, repo.name, changelog_path, ref)
        except UnicodeDecodeError as e:
            logger.error(f"Failed to decode {changelog_path} in {repo}: {e}")
            return None
        section = render_section(version, issue.updated_at.date(), issue.body)
        changes.append(
            FileChange(
                path=changelog_path,
                content=insert_section(changelog.content if changelog else None, section),
            )
        )

    return changes


async def ensure_pull_request(
    gh: SourceControlProvider,
    repo: RepositoryIdentity,
    *,
    branch: str,
    base: str,
    title: str,
    body: str,
) -> None:
    """Open the release PR unless one is already open for the branch."""
    existing = await gh.list_pull_requests(
        repo.owner, repo.name, head=f"{repo.owner}:{branch}", base=base
    )
    if existing:
        logger.info(f"Release PR #{existing[0]['number']} already open for {branch} in {repo}")
        return

    pr = await gh.create_pull_request(
        repo.owner,
        repo.name,
        title=title,
        head=branch,
        base=base,
        body=body,
        maintainer_can_modify=True,
    )
    logger.info(f"Opened release PR #{pr['number']} in {repo} for {branch}")


async def _reject(
    gh: SourceControlProvider,
    repo: RepositoryIdentity,
    issue_number: int,
    label: str,
    comment: str,
) -> None:
    await gh.create_issue_comment(repo.owner, repo.name, issue_number, comment)
    await gh.remove_label(repo.owner, repo.name, issue_number, label)
