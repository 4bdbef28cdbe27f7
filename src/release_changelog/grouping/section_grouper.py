"""
Grouping of structured commits into changelog sections.

Commits typed ``fix``, ``feat`` or ``perf`` land in the matching section
under their component. Independently of its type, every commit carrying a
``BREAKING CHANGE:`` note also produces a synthetic entry in the breaking
changes section. Other types are skipped.
"""

from __future__ import annotations

import logging
from typing import Iterable

from release_changelog.grouping.section_model import (
    BREAKS,
    TYPED_SECTIONS,
    BreakingChangeEntry,
    SectionTable,
)
from release_changelog.links.link_formatter import LinkFormatter
from release_changelog.parsing.commit_model import StructuredCommit


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


BREAKING_SUBJECT_TEMPLATE = "due to {link},\n {text}"


def group_commits(
    commits: Iterable[StructuredCommit], formatter: LinkFormatter
) -> SectionTable:
    """Group commits by section and component.

    Parameters
    ----------
    commits : Iterable[StructuredCommit]
        Parsed commits in log order.
    formatter : LinkFormatter
        Used to embed the commit link in breaking change entries.

    Returns
    -------
    SectionTable
        The populated table. Encounter order is preserved within each
        component bucket.
    """
    sections = SectionTable()

    for commit in commits:
        if commit.type in TYPED_SECTIONS:
            sections.add(commit.type, commit.component, commit)
        else:
            logger.debug("Skipping %s commit %s", commit.type, commit.hash[:8])

        if commit.breaking:
            sections.add(
                BREAKS,
                commit.component,
                BreakingChangeEntry(
                    hash=commit.hash,
                    subject=BREAKING_SUBJECT_TEMPLATE.format(
                        link=formatter.commit_link(commit.hash),
                        text=commit.breaking,
                    ),
                ),
            )

    return sections
