"""
Grouping logic for changelog sections.

This package sorts structured commits into sections by type and into
buckets by component. See :mod:`release_changelog.grouping.section_grouper`
and :mod:`release_changelog.grouping.section_model` for details.
"""

from .section_grouper import group_commits  # noqa: F401
from .section_model import BreakingChangeEntry, SectionTable  # noqa: F401
