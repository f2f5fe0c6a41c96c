"""Schema for .github/release-butler.toml configuration files."""

from enum import Enum

from pydantic import AliasChoices, BaseModel, Field, field_validator

CONFIG_VERSION = 1

DEFAULT_RELEASE_LABEL = "release-butler"


class PackageManager(str, Enum):
    """Package managers whose manifests can be rewritten."""

    CARGO = "cargo"
    CARGO_WORKSPACE = "cargo_workspace"


class IssueMetadata(BaseModel):
    """Who may request releases and how they do it."""

    # Authors that are allowed to open the issue for release
    allowed_authors: list[str]
    # Label that marks an issue as a release request
    label: str = DEFAULT_RELEASE_LABEL
    # Posted when an unauthorized user applies the label (generated if not provided)
    unauthorized_author_comment: str | None = None

    def is_allowed(self, login: str) -> bool:
        login = login.lower()
        return any(author.lower() == login for author in self.allowed_authors)

    def unauthorized_comment(self, config_path: str) -> str:
        if self.unauthorized_author_comment:
            return self.unauthorized_author_comment
        return (
            f"Hi, there you can't use the label `{self.label}`, only some designated "
            "people are allowed to use this label. I will be removing this label for now."
            f"\n\nRefer to `{config_path}` for more information"
        )


class PullRequestMetadata(BaseModel):
    """Release pull request conventions."""

    hold_label: str = "release-butler-hold"
    branch_prefix: str = "release-butler/"


class PackageSpec(BaseModel):
    """A releasable package inside the repository."""

    # Root of the package, relative to the repository root ("" = repository root)
    path: str = ""
    # Changelog paths relative to the repository root ("" = no changelog)
    changelog_file: str = ""
    pre_release_changelog_file: str = ""
    create_gh_release: bool = False
    package_manager: PackageManager

    def changelog_for(self, prerelease: bool) -> str:
        return self.pre_release_changelog_file if prerelease else self.changelog_file


class ReleaseConfig(BaseModel):
    """Per-repository release configuration."""

    version: int
    # Base branch for release PRs
    default_branch: str
    issues: IssueMetadata = Field(
        validation_alias=AliasChoices("issues", "issues_meta_data")
    )
    pull_requests: PullRequestMetadata = Field(default_factory=PullRequestMetadata)
    packages: dict[str, PackageSpec]

    @field_validator("version")
    @classmethod
    def check_version(cls, value: int) -> int:
        if value != CONFIG_VERSION:
            raise ValueError(
                f"unsupported configuration version {value}, expected {CONFIG_VERSION}"
            )
        return value

    def resolve_package(self, key: str) -> tuple[str, PackageSpec] | None:
        """
        Find the package a release request targets.

        An empty key only resolves when exactly one package is configured.
        """
        if not key:
            if len(self.packages) == 1:
                return next(iter(self.packages.items()))
            return None
        package = self.packages.get(key)
        if package is None:
            return None
        return key, package
