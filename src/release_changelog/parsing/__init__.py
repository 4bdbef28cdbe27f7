"""
Commit message parsing.

This package turns raw ``git log`` records into structured commits. See
:mod:`release_changelog.parsing.commit_parser` and
:mod:`release_changelog.parsing.commit_model` for details.
"""

from .commit_model import RawCommitRecord, StructuredCommit  # noqa: F401
from .commit_parser import parse_raw_commit  # noqa: F401
