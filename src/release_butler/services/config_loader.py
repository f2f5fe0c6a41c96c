"""Load release configuration from a repository."""

import logging

import httpx
import tomlkit
from pydantic import ValidationError
from tomlkit.exceptions import TOMLKitError

from ..schemas.release_config import CONFIG_VERSION, ReleaseConfig
from .provider import SourceControlProvider

logger = logging.getLogger(__name__)

CONFIG_ERROR_LABEL = "release-butler-config-error"
CONFIG_ERROR_TITLE = "release-butler: invalid configuration"


class ReleaseConfigError(ValueError):
    """The configuration file exists but is not valid."""


def parse_release_config(content: str) -> ReleaseConfig:
    """Parse and validate a TOML release configuration."""
    try:
        data = tomlkit.parse(content).unwrap()
    except TOMLKitError as e:
        raise ReleaseConfigError(f"Invalid TOML: {e}") from e

    try:
        return ReleaseConfig(**data)
    except ValidationError as e:
        raise ReleaseConfigError(str(e)) from e


async def load_release_config(
    gh: SourceControlProvider,
    owner: str,
    repo: str,
    config_path: str,
    app_slug: str,
) -> ReleaseConfig | None:
    """
    Fetch the release configuration from the repository's default branch.

    Returns None when the configuration is missing, unreadable or invalid.
    Invalid configuration is reported once through a diagnostic issue.
    """
    try:
        file = await gh.get_file(owner, repo, config_path)
    except (httpx.HTTPError, UnicodeDecodeError) as e:
        logger.error(f"Failed to fetch {config_path} from {owner}/{repo}: {e}")
        return None

    if file is None:
        logger.info(f"{owner}/{repo} has no {config_path}, ignoring the event")
        return None

    try:
        return parse_release_config(file.content)
    except ReleaseConfigError as e:
        logger.warning(f"Invalid {config_path} in {owner}/{repo}: {e}")
        await report_config_error(gh, owner, repo, config_path, app_slug, str(e))
        return None


async def report_config_error(
    gh: SourceControlProvider,
    owner: str,
    repo: str,
    config_path: str,
    app_slug: str,
    error: str,
) -> None:
    """Open a diagnostic issue unless the app already has one open."""
    try:
        existing = await gh.list_issues(
            owner,
            repo,
            creator=f"{app_slug}[bot]",
            labels=[CONFIG_ERROR_LABEL],
        )
        if existing:
            logger.debug(
                f"Config error issue already open in {owner}/{repo}: #{existing[0]['number']}"
            )
            return

        await gh.create_issue(
            owner,
            repo,
            CONFIG_ERROR_TITLE,
            (
                f"I couldn't parse `{config_path}` (expected configuration "
                f"version {CONFIG_VERSION}):\n\n```\n{error}\n```\n\n"
                "Release requests are ignored until the file is fixed."
            ),
            labels=[CONFIG_ERROR_LABEL],
        )
    except httpx.HTTPError as e:
        logger.error(f"Failed to report config error in {owner}/{repo}: {e}")
