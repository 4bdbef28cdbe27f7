"""
Parser for conventional commit messages.

The subject line grammar is ``<type>(<component>): <subject>``::

    type       one or more characters up to the first ``(``
    component  anything up to the closing ``)``, may be empty
    subject    at least one character after ``): ``

The parentheses are mandatory. Records that do not match are dropped with
a warning instead of raising, so one sloppy commit never aborts a
changelog run.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Union

from release_changelog.parsing.commit_model import RawCommitRecord, StructuredCommit


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


SUBJECT_PATTERN = re.compile(
    r"^(?P<type>[^(]+)\((?P<component>[^)]*)\):\s(?P<subject>.+)$"
)
CLOSES_PATTERN = re.compile(r"(?:Closes|Fixes)\s#(\d+)")
BREAKING_PATTERN = re.compile(r"BREAKING CHANGE:([\s\S]*)")


def parse_raw_commit(
    raw: Union[RawCommitRecord, str, None],
) -> Optional[StructuredCommit]:
    """Parse one raw commit record into a :class:`StructuredCommit`.

    Parameters
    ----------
    raw : RawCommitRecord, str or None
        The record, or the raw ``hash\\nsubject\\nbody`` text block.

    Returns
    -------
    Optional[StructuredCommit]
        The parsed commit, or ``None`` if the input is empty or the subject
        does not follow the grammar.
    """
    if not raw:
        return None
    if isinstance(raw, str):
        record = RawCommitRecord.from_text(raw)
        if record is None:
            return None
    else:
        record = raw

    closes = []
    for line in record.body_lines:
        match = CLOSES_PATTERN.search(line)
        if match:
            closes.append(int(match.group(1)))

    breaking = None
    match = BREAKING_PATTERN.search(record.text)
    if match:
        breaking = match.group(1).strip()

    match = SUBJECT_PATTERN.match(record.subject)
    if not match or not match.group("type").strip() or not match.group("subject").strip():
        logger.warning("Incorrect message: %s %s", record.hash, record.subject)
        return None

    return StructuredCommit(
        hash=record.hash,
        type=match.group("type"),
        component=match.group("component") or None,
        subject=match.group("subject"),
        body="\n".join(record.body_lines),
        closes=closes,
        breaking=breaking,
    )
