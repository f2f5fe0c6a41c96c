"""Tests for release configuration parsing and loading."""

import pytest

from conftest import MULTI_PACKAGE_CONFIG, OWNER, REPO, SINGLE_PACKAGE_CONFIG, FakeGitHub
from release_butler.schemas.release_config import PackageManager
from release_butler.services.config_loader import (
    CONFIG_ERROR_LABEL,
    ReleaseConfigError,
    load_release_config,
    parse_release_config,
)

CONFIG_PATH = ".github/release-butler.toml"


def test_parse_defaults():
    config = parse_release_config(SINGLE_PACKAGE_CONFIG)

    assert config.default_branch == "main"
    assert config.issues.label == "release-butler"
    assert config.pull_requests.branch_prefix == "release-butler/"
    assert config.pull_requests.hold_label == "release-butler-hold"

    package = config.packages["butler"]
    assert package.path == ""
    assert package.create_gh_release is True
    assert package.package_manager == PackageManager.CARGO


def test_parse_overrides():
    config = parse_release_config(MULTI_PACKAGE_CONFIG)

    assert config.issues.label == "release"
    assert config.pull_requests.branch_prefix == "releases/"
    assert config.packages["cli"].changelog_file == ""
    assert config.packages["cli"].create_gh_release is False


def test_version_mismatch():
    with pytest.raises(ReleaseConfigError, match="version"):
        parse_release_config(SINGLE_PACKAGE_CONFIG.replace("version = 1", "version = 2"))


@pytest.mark.parametrize("content", ["", "- a list", "version = [1", "version = 1\n"])
def test_invalid_documents(content):
    with pytest.raises(ReleaseConfigError):
        parse_release_config(content)


def test_keeps_toml_comments_out_of_values():
    config = parse_release_config(
        SINGLE_PACKAGE_CONFIG.replace(
            'default_branch = "main"', 'default_branch = "develop" # release base'
        )
    )

    assert config.default_branch == "develop"


def test_issues_meta_data_alias():
    config = parse_release_config(
        SINGLE_PACKAGE_CONFIG.replace("[issues]", "[issues_meta_data]")
    )

    assert config.issues.allowed_authors == ["Alice"]


def test_unknown_package_manager():
    with pytest.raises(ReleaseConfigError):
        parse_release_config(SINGLE_PACKAGE_CONFIG.replace("cargo", "npm"))


def test_author_check_is_case_insensitive():
    config = parse_release_config(SINGLE_PACKAGE_CONFIG)

    assert config.issues.is_allowed("alice")
    assert config.issues.is_allowed("ALICE")
    assert not config.issues.is_allowed("mallory")


def test_default_unauthorized_comment_mentions_label():
    config = parse_release_config(SINGLE_PACKAGE_CONFIG)

    comment = config.issues.unauthorized_comment(CONFIG_PATH)

    assert "`release-butler`" in comment
    assert CONFIG_PATH in comment


def test_resolve_package():
    single = parse_release_config(SINGLE_PACKAGE_CONFIG)
    multi = parse_release_config(MULTI_PACKAGE_CONFIG)

    assert single.resolve_package("")[0] == "butler"
    assert single.resolve_package("butler")[0] == "butler"
    assert single.resolve_package("other") is None
    assert multi.resolve_package("") is None
    assert multi.resolve_package("cli")[0] == "cli"


async def test_load_missing_config():
    gh = FakeGitHub()

    assert await load_release_config(gh, OWNER, REPO, CONFIG_PATH, "release-butler") is None
    assert gh.created_issues == []


async def test_invalid_config_reported_once():
    gh = FakeGitHub({CONFIG_PATH: "version = 7\n"})

    for _ in range(2):
        assert await load_release_config(gh, OWNER, REPO, CONFIG_PATH, "release-butler") is None

    assert len(gh.created_issues) == 1
    assert gh.created_issues[0]["labels"] == [CONFIG_ERROR_LABEL]


async def test_fetch_failure_is_swallowed():
    gh = FakeGitHub({CONFIG_PATH: SINGLE_PACKAGE_CONFIG})
    gh.failing.add("get_file")

    assert await load_release_config(gh, OWNER, REPO, CONFIG_PATH, "release-butler") is None
