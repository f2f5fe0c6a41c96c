"""Parse release requests out of issue and pull request titles."""

from dataclasses import dataclass

from semver import Version

TITLE_HELP = """The issue title must name the version to release:

| Title | Meaning |
|-------|---------|
| `v1.2.3` or `1.2.3` | Release the only package in the repository |
| `my-package@v1.2.3` | Release `my-package` |
| `my-package@v1.2.3-beta.1+42` | Pre-release with build metadata |

Versions follow [Semantic Versioning](https://semver.org)."""


class TitleParseError(ValueError):
    """The title does not contain a valid `[package@]version`."""


@dataclass(frozen=True)
class ReleaseRequest:
    """A parsed `[package@]version` reference."""

    package: str
    version: Version

    @property
    def is_prerelease(self) -> bool:
        return self.version.prerelease is not None


def parse_release_title(title: str) -> ReleaseRequest:
    """
    Parse `[package@][v]MAJOR.MINOR.PATCH[-prerelease][+build]`.

    Examples:
    - `v1.2.3` -> ("", 1.2.3)
    - `pkg@v1.2.3-beta.1+42` -> ("pkg", 1.2.3-beta.1+42)
    """
    package, sep, raw_version = title.strip().partition("@")
    if not sep:
        package, raw_version = "", package

    raw_version = raw_version.strip()
    if raw_version.startswith("v"):
        raw_version = raw_version[1:]

    try:
        version = Version.parse(raw_version)
    except (ValueError, TypeError) as e:
        raise TitleParseError(f"`{title}` is not a valid release title: {e}") from e

    return ReleaseRequest(package=package.strip(), version=version)


def release_tag(package: str, version: Version) -> str:
    return f"{package}@v{version}"


def release_branch(prefix: str, package: str, version: Version) -> str:
    return f"{prefix}{package}@{version}"


def release_pr_title(package: str, version: Version) -> str:
    return f"RELEASE {release_tag(package, version)}"
