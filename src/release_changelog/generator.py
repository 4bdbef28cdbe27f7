"""
Changelog generation pipeline.

Ties the pieces together: read the previous tag, fetch the matching
history, parse each record, group the commits and render the document.
The history fetch is the only ``await`` in the pipeline; everything after
it runs synchronously.
"""

from __future__ import annotations

import datetime
import logging
from typing import Iterable, List, Optional, TextIO

from release_changelog.grouping.section_grouper import group_commits
from release_changelog.links.link_formatter import LinkFormatter
from release_changelog.parsing.commit_model import RawCommitRecord, StructuredCommit
from release_changelog.parsing.commit_parser import parse_raw_commit
from release_changelog.rendering.markdown_renderer import render_changelog
from release_changelog.vcs.git_client import GitClient


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


GREP_PATTERN = "^fix|^feat|^perf|BREAKING"


def current_date() -> str:
    """Today's local date as ``YYYY-MM-DD``."""
    return datetime.date.today().isoformat()


def parse_records(records: Iterable[RawCommitRecord]) -> List[StructuredCommit]:
    """Parse records, dropping the ones that do not follow the grammar."""
    commits = []
    for record in records:
        commit = parse_raw_commit(record)
        if commit is not None:
            commits.append(commit)
    return commits


def write_changelog(
    stream: TextIO,
    commits: Iterable[StructuredCommit],
    version: str,
    formatter: LinkFormatter,
    date: Optional[str] = None,
) -> None:
    """Group ``commits`` and render the changelog for ``version`` to ``stream``."""
    sections = group_commits(commits, formatter)
    render_changelog(sections, version, date or current_date(), stream, formatter)


async def read_commits(client: GitClient, first_release: bool = False) -> List[StructuredCommit]:
    """Fetch and parse the commits since the previous tag.

    Parameters
    ----------
    client : GitClient
        Client for the repository.
    first_release : bool, optional
        Read the whole history instead of looking up the previous tag.

    Raises
    ------
    TagLookupError
        If ``first_release`` is False and no previous tag can be found.
    """
    if first_release:
        tag = None
        logger.info("Reading git log from the beginning of history")
    else:
        tag = client.previous_tag()
        logger.info("Reading git log since %s", tag)

    records = await client.fetch_history(GREP_PATTERN, tag)
    commits = parse_records(records)
    logger.info("Parsed %d commits", len(commits))
    return commits


async def generate(
    client: GitClient,
    version: str,
    stream: TextIO,
    formatter: LinkFormatter,
    date: Optional[str] = None,
    first_release: bool = False,
) -> int:
    """Generate the changelog for ``version`` and write it to ``stream``.

    Returns the number of commits included. Nothing is written if the tag
    lookup fails.
    """
    commits = await read_commits(client, first_release=first_release)
    write_changelog(stream, commits, version, formatter, date=date)
    return len(commits)
