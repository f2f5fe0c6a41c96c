"""Rewrite the version field of package manifests."""

from collections.abc import MutableMapping
from pathlib import PurePosixPath

import tomlkit
from tomlkit.exceptions import TOMLKitError

from ..schemas.release_config import PackageManager, PackageSpec

MANIFEST_FILES = {
    PackageManager.CARGO: "Cargo.toml",
    PackageManager.CARGO_WORKSPACE: "Cargo.toml",
}

# Table holding `version` for each package manager
VERSION_TABLES = {
    PackageManager.CARGO: ("package",),
    PackageManager.CARGO_WORKSPACE: ("workspace", "package"),
}


class ManifestError(ValueError):
    """The manifest could not be parsed or has no version field to update."""


def manifest_path(package: PackageSpec) -> str:
    """Manifest location relative to the repository root."""
    filename = MANIFEST_FILES[package.package_manager]
    if not package.path:
        return filename
    return str(PurePosixPath(package.path) / filename)


def set_version(content: str, manager: PackageManager, version: str) -> str:
    """
    Return the manifest with its version set, everything else untouched.

    tomlkit keeps comments, ordering and formatting of the rest of the file.
    """
    try:
        document = tomlkit.parse(content)
    except TOMLKitError as e:
        raise ManifestError(f"Failed to parse manifest: {e}") from e

    table: MutableMapping = document
    for key in VERSION_TABLES[manager]:
        table = table.get(key)
        if not isinstance(table, MutableMapping):
            raise ManifestError(
                f"Manifest has no `[{'.'.join(VERSION_TABLES[manager])}]` table"
            )

    # `version.workspace = true` inherits from the workspace manifest
    if isinstance(table.get("version"), MutableMapping):
        raise ManifestError(
            "Manifest inherits its version from the workspace, release the workspace instead"
        )

    table["version"] = version
    return tomlkit.dumps(document)
