"""Insert release sections into Keep-a-Changelog style files."""

from datetime import date

CHANGELOG_HEADER = "# Changelog"
SECTION_MARKER = "## ["


def render_section(version: str, released_on: date, notes: str | None) -> str:
    """Render `## [<version>] - YYYY-MM-DD` followed by the release notes."""
    header = f"{SECTION_MARKER}{version}] - {released_on:%Y-%m-%d}"
    notes = (notes or "").strip()
    if notes:
        return f"{header}\n\n{notes}\n"
    return f"{header}\n"


def insert_section(existing: str | None, section: str) -> str:
    """
    Add a release section to a changelog.

    The section goes right before the first existing `## [` line. Without
    such a line it is appended, and a missing file gets a fresh header.
    """
    if existing is None:
        return f"{CHANGELOG_HEADER}\n\n{section}"

    lines = existing.splitlines(keepends=True)
    for index, line in enumerate(lines):
        if line.startswith(SECTION_MARKER):
            return "".join(lines[:index]) + section + "\n" + "".join(lines[index:])

    if existing and not existing.endswith("\n"):
        existing += "\n"
    separator = "\n" if existing else ""
    return existing + separator + section
