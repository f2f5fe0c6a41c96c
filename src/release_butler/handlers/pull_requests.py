"""Tag and release merged release pull requests."""

import logging
import re

import httpx

from ..context import AppContext
from ..errors import MalformedBody
from ..schemas.github_webhooks import PullRequest, PullRequestEvent, RepositoryIdentity
from ..schemas.release_config import ReleaseConfig
from ..services.config_loader import load_release_config
from ..services.provider import SourceControlProvider
from ..services.versioning import ReleaseRequest, TitleParseError, parse_release_title
from .outcome import Outcome

logger = logging.getLogger(__name__)

RELEASE_TITLE_PREFIX = "RELEASE "
ISSUE_REFERENCE = re.compile(r"#(\d+)")
NO_RELEASE_NOTES = "No release notes were provided."


async def handle_pull_request_event(
    repo: RepositoryIdentity,
    event: PullRequestEvent,
    gh: SourceControlProvider,
    context: AppContext,
) -> Outcome:
    """
    Handle `closed` pull request events on release branches.

    Closed without merging: ask the user to drop the issue label instead.
    Merged: create the tag, then the GitHub Release if the package wants one.
    """
    pull = event.pull_request

    config = await load_release_config(
        gh, repo.owner, repo.name, context.release_config_path, context.app_slug
    )
    if config is None:
        return Outcome.IGNORED

    if not is_release_branch(pull, repo.owner, config.pull_requests.branch_prefix):
        return Outcome.IGNORED

    try:
        if not pull.merged:
            await _comment_closed_unmerged(gh, repo, pull.number, config)
            return Outcome.COMMENTED
        return await _release_merged(repo, pull, gh, config)
    except httpx.HTTPError as e:
        logger.error(f"Failed to process release PR {repo}#{pull.number}: {e}")
        return Outcome.FAILED


def is_release_branch(pull: PullRequest, owner: str, branch_prefix: str) -> bool:
    """Release PRs come from `<owner>:<branch_prefix>...` heads."""
    if not pull.head.label:
        return False
    return pull.head.label.lower().startswith(f"{owner}:{branch_prefix}".lower())


async def _comment_closed_unmerged(
    gh: SourceControlProvider,
    repo: RepositoryIdentity,
    pr_number: int,
    config: ReleaseConfig,
) -> None:
    label = config.issues.label
    prefix = config.pull_requests.branch_prefix
    await gh.create_issue_comment(
        repo.owner,
        repo.name,
        pr_number,
        (
            f"You should remove the label `{label}` from the issue that this PR is "
            "addressing instead of manually closing it, as this PR will be created again "
            "if there is any activity on the issue. If this PR was something else, please "
            f"don't use head branches starting with `{prefix}` as they are reserved for me."
        ),
    )


async def _release_merged(
    repo: RepositoryIdentity,
    pull: PullRequest,
    gh: SourceControlProvider,
    config: ReleaseConfig,
) -> Outcome:
    if pull.title is None:
        raise MalformedBody("Pull request title is required")

    if not pull.title.startswith(RELEASE_TITLE_PREFIX):
        await gh.create_issue_comment(
            repo.owner,
            repo.name,
            pull.number,
            (
                "I couldn't create the release tag: the title of a release PR must be "
                "`RELEASE <package>@v<version>`, e.g. `RELEASE my-package@v1.2.3`."
            ),
        )
        return Outcome.COMMENTED

    tag = pull.title[len(RELEASE_TITLE_PREFIX):].strip()
    try:
        request = parse_release_title(tag)
    except TitleParseError as e:
        logger.error(f"Not creating a tag for {repo}#{pull.number}: {e}")
        return Outcome.IGNORED

    if not pull.merge_commit_sha:
        raise MalformedBody("Merged pull request is missing `merge_commit_sha`")

    await gh.create_ref(repo.owner, repo.name, f"refs/tags/{tag}", pull.merge_commit_sha)
    logger.info(f"Created tag {tag} in {repo} at {pull.merge_commit_sha[:8]}")

    # The tag stays even if anything below fails
    try:
        await create_release(gh, repo, pull, config, tag, request)
    except httpx.HTTPError as e:
        logger.error(f"Failed to create the GitHub Release {tag} in {repo}: {e}")
    return Outcome.RELEASED


async def create_release(
    gh: SourceControlProvider,
    repo: RepositoryIdentity,
    pull: PullRequest,
    config: ReleaseConfig,
    tag: str,
    request: ReleaseRequest,
) -> None:
    """Create the GitHub Release using the originating issue body as notes."""
    resolved = config.resolve_package(request.package)
    if resolved is None:
        logger.info(f"No package `{request.package}` configured in {repo}, skipping release")
        return

    package_name, package = resolved
    if not package.create_gh_release:
        return

    notes = NO_RELEASE_NOTES
    match = ISSUE_REFERENCE.search(pull.body or "")
    if match:
        issue = await gh.get_issue(repo.owner, repo.name, int(match.group(1)))
        notes = issue.get("body") or NO_RELEASE_NOTES
    else:
        logger.warning(f"Release PR {repo}#{pull.number} doesn't reference an issue")

    await gh.create_release(
        repo.owner,
        repo.name,
        tag_name=tag,
        name=tag,
        body=notes,
        prerelease=request.is_prerelease,
        make_latest=not request.is_prerelease,
    )
    logger.info(f"Created GitHub Release {tag} for {package_name} in {repo}")
