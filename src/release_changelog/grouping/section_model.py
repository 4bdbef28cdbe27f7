"""
Data models for changelog sections.

A :class:`SectionTable` maps each section key to its component buckets.
Buckets are keyed by component name, or ``None`` for commits without a
component, and keep entries in the order they were added. Ordering of the
components themselves is left to the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

from release_changelog.parsing.commit_model import StructuredCommit


FIX = "fix"
FEAT = "feat"
PERF = "perf"
BREAKS = "breaks"

SECTION_KEYS: Tuple[str, ...] = (FIX, FEAT, PERF, BREAKS)
TYPED_SECTIONS: Tuple[str, ...] = (FIX, FEAT, PERF)


@dataclass
class BreakingChangeEntry:
    """Synthetic entry describing a breaking change.

    Attributes
    ----------
    hash : str
        Hash of the commit that introduced the change.
    subject : str
        Rendered text, already carrying a link to the commit.
    closes : List[int]
        Always empty; present so entries render uniformly.
    """

    hash: str
    subject: str
    closes: List[int] = field(default_factory=list)


Entry = Union[StructuredCommit, BreakingChangeEntry]
Section = Dict[Optional[str], List[Entry]]


class SectionTable:
    """Mapping of section key to component buckets."""

    def __init__(self) -> None:
        self._sections: Dict[str, Section] = {key: {} for key in SECTION_KEYS}

    def add(self, key: str, component: Optional[str], entry: Entry) -> None:
        """Append ``entry`` to the bucket, creating the bucket on first use."""
        self._sections[key].setdefault(component, []).append(entry)

    def __getitem__(self, key: str) -> Section:
        return self._sections[key]

    def __contains__(self, key: object) -> bool:
        return key in self._sections

    def __iter__(self) -> Iterator[str]:
        return iter(self._sections)

    def entry_count(self, key: str) -> int:
        return sum(len(entries) for entries in self._sections[key].values())
