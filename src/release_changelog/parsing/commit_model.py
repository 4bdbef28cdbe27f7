"""
Data models for parsed commits.

A :class:`RawCommitRecord` is the unprocessed block that ``git log``
produces for one commit. A :class:`StructuredCommit` is what the parser
extracts from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class RawCommitRecord:
    """One commit as read from the log: hash line, subject line, body lines."""

    hash: str
    subject: str
    body_lines: List[str] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> Optional["RawCommitRecord"]:
        """Build a record from a ``hash\\nsubject\\nbody...`` block.

        Returns ``None`` for blank blocks or blocks without a subject line.
        """
        if not text or not text.strip():
            return None
        lines = text.split("\n")
        if len(lines) < 2:
            return None
        return cls(hash=lines[0].strip(), subject=lines[1], body_lines=lines[2:])

    @property
    def text(self) -> str:
        return "\n".join([self.hash, self.subject] + self.body_lines)


@dataclass
class StructuredCommit:
    """Representation of a parsed conventional commit.

    Attributes
    ----------
    hash : str
        Full commit identifier.
    type : str
        Token before the parenthesised component (``fix``, ``feat``, ...).
    component : Optional[str]
        Scope inside the parentheses, ``None`` when the parentheses are empty.
    subject : str
        Description following ``): ``.
    body : str
        Body lines joined back together.
    closes : List[int]
        Issue numbers referenced by ``Closes #N`` / ``Fixes #N`` lines.
    breaking : Optional[str]
        Text following a ``BREAKING CHANGE:`` marker.
    """

    hash: str
    type: str
    subject: str
    component: Optional[str] = None
    body: str = ""
    closes: List[int] = field(default_factory=list)
    breaking: Optional[str] = None
