"""
Release orchestration for release_changelog.

A release checks that the working tree is clean, bumps the version in
the project metadata file, prepends the new changelog section to the
changelog file, then commits, tags and pushes the result.
"""

from __future__ import annotations

import io
import json
import logging
import re
from pathlib import Path
from typing import Optional

from release_changelog.generator import generate
from release_changelog.links.link_formatter import LinkFormatter
from release_changelog.vcs.git_client import GitClient


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


TAG_PREFIX = "v"
RELEASE_COMMIT_TEMPLATE = "chore(release): {version}"
VERSION_PATTERN = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$")
BUMP_KEYWORDS = ("major", "minor", "patch")


class ReleaseError(Exception):
    """Raised when the release cannot proceed."""

    pass


def ensure_clean(client: GitClient) -> None:
    """Raise :class:`ReleaseError` if there are staged or unstaged changes."""
    if not client.is_clean():
        raise ReleaseError("Working directory must be clean to push release!")


def next_version(current: Optional[str], spec: str) -> str:
    """Compute the new version from ``current`` and a bump spec.

    ``spec`` is ``major``, ``minor``, ``patch`` or an explicit ``X.Y.Z``
    (an optional leading ``v`` is dropped).
    """
    explicit = VERSION_PATTERN.match(spec)
    if explicit:
        return ".".join(explicit.groups())

    if spec not in BUMP_KEYWORDS:
        raise ReleaseError(
            f"Invalid version '{spec}': expected one of {', '.join(BUMP_KEYWORDS)} or X.Y.Z"
        )

    match = VERSION_PATTERN.match(current or "")
    if not match:
        raise ReleaseError(f"Current version '{current}' is not in X.Y.Z form")
    major, minor, patch = (int(part) for part in match.groups())

    if spec == "major":
        return f"{major + 1}.0.0"
    if spec == "minor":
        return f"{major}.{minor + 1}.0"
    return f"{major}.{minor}.{patch + 1}"


def bump_version(metadata_path: Path, spec: str) -> str:
    """Write the bumped version into the metadata file.

    Returns
    -------
    str
        The release version, i.e. the new version with the tag prefix.
    """
    try:
        data = json.loads(metadata_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ReleaseError(f"Cannot read {metadata_path}: {exc}") from exc

    new_version = next_version(data.get("version"), spec)
    data["version"] = new_version
    metadata_path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    logger.info("Bumped version to %s in %s", new_version, metadata_path.name)
    return f"{TAG_PREFIX}{new_version}"


def prepend_changelog(changelog_path: Path, content: str) -> None:
    """Put ``content`` in front of the existing changelog, creating it if needed."""
    existing = changelog_path.read_text(encoding="utf-8") if changelog_path.exists() else ""
    changelog_path.write_text(content + existing, encoding="utf-8")


def commit_release(client: GitClient, release_version: str, push: bool = True) -> None:
    """Commit everything, tag the commit and push it with its tags."""
    client.stage_all()
    client.commit(RELEASE_COMMIT_TEMPLATE.format(version=release_version))
    client.tag(release_version, force=True)
    if push:
        client.push_with_tags()
    else:
        logger.info("Skipping push of %s", release_version)


async def run_release(
    client: GitClient,
    version_spec: str,
    metadata_path: Path,
    changelog_path: Path,
    formatter: LinkFormatter,
    push: bool = True,
    first_release: bool = False,
    date: Optional[str] = None,
) -> str:
    """Run the full release flow and return the release version.

    Raises
    ------
    ReleaseError
        If the working tree is dirty or the version cannot be bumped.
    TagLookupError
        If the previous tag is missing and ``first_release`` is False.
    GitError
        If committing, tagging or pushing fails.
    """
    ensure_clean(client)
    if not first_release:
        # Fail before touching any file.
        client.previous_tag()
    release_version = bump_version(metadata_path, version_spec)

    buffer = io.StringIO()
    await generate(
        client,
        release_version,
        buffer,
        formatter,
        date=date,
        first_release=first_release,
    )
    prepend_changelog(changelog_path, buffer.getvalue())
    logger.info("Updated %s", changelog_path.name)

    commit_release(client, release_version, push=push)
    return release_version
