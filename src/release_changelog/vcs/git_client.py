"""
Git client implementation for release_changelog.

This module wraps the Git operations required by the changelog generator
and the release flow. Reading the commit history is asynchronous so the
caller is not blocked while ``git log`` runs; every other command is a
short synchronous ``subprocess`` call routed through :meth:`GitClient._run`
so that unit tests can mock it easily.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from release_changelog.parsing.commit_model import RawCommitRecord


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# Terminates each record in the log output; unlikely in real commit text.
RECORD_DELIMITER = "==END=="
LOG_FORMAT = f"%H%n%s%n%b%n{RECORD_DELIMITER}"


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class TagLookupError(GitError):
    """Raised when the previous release tag cannot be determined."""

    pass


def split_log_output(output: str) -> List[RawCommitRecord]:
    """Split ``git log`` output on the record delimiter.

    Blank and malformed trailing chunks are discarded.
    """
    records = []
    for chunk in output.split(f"\n{RECORD_DELIMITER}\n"):
        if chunk.endswith(f"\n{RECORD_DELIMITER}"):
            chunk = chunk[: -len(RECORD_DELIMITER) - 1]
        record = RawCommitRecord.from_text(chunk.strip("\n"))
        if record is not None:
            records.append(record)
    return records


class GitClient:
    """Client for interacting with a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        result = subprocess.run(
            full_cmd,
            cwd=self.repo_root,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    async def fetch_history(
        self, grep: str, lower_bound: Optional[str]
    ) -> List[RawCommitRecord]:
        """Read the commits matching ``grep`` since ``lower_bound``.

        Parameters
        ----------
        grep : str
            Extended regular expression matched against commit messages.
        lower_bound : Optional[str]
            Tag or revision to start after. ``None`` reads the whole history
            up to ``HEAD``.

        Returns
        -------
        List[RawCommitRecord]
            One record per commit, newest first. A failing ``git log`` is
            logged and yields an empty list.
        """
        revision_range = f"{lower_bound}..HEAD" if lower_bound else "HEAD"
        full_cmd = [
            "git",
            "log",
            f"--grep={grep}",
            "-E",
            f"--format={LOG_FORMAT}",
            revision_range,
        ]
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        process = await asyncio.create_subprocess_exec(
            *full_cmd,
            cwd=self.repo_root,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()

        if process.returncode != 0:
            logger.warning(
                "git log failed (exit %s): %s",
                process.returncode,
                stderr.decode("utf-8", errors="replace").strip(),
            )
            return []

        return split_log_output(stdout.decode("utf-8", errors="replace"))

    def previous_tag(self) -> str:
        """Return the most recent tag reachable from ``HEAD``.

        Raises
        ------
        TagLookupError
            If ``git describe`` fails, e.g. because no tag exists yet.
        """
        result = self._run(["describe", "--tags", "--abbrev=0"], check=False)
        if result.returncode != 0:
            raise TagLookupError(
                "Cannot get the previous tag: "
                + (result.stderr.strip() or f"exit status {result.returncode}")
            )
        return result.stdout.strip()

    # ------------------------------------------------------------------
    # Release operations
    # ------------------------------------------------------------------
    def is_clean(self) -> bool:
        """Return True if there are neither unstaged nor staged changes."""
        unstaged = self._run(["diff", "--exit-code", "--quiet"], check=False).returncode
        staged = self._run(["diff", "--cached", "--exit-code", "--quiet"], check=False).returncode
        return not (unstaged or staged)

    def stage_all(self) -> None:
        self._run(["add", "-A"], check=True)

    def commit(self, message: str) -> None:
        """Create a commit with the given message."""
        self._run(["commit", "-m", message], check=True)

    def tag(self, name: str, force: bool = True) -> None:
        """Tag ``HEAD``; with ``force`` an existing tag of that name is moved."""
        args = ["tag", "-f", name] if force else ["tag", name]
        self._run(args, check=True)

    def push_with_tags(self, remote: str = "origin") -> None:
        """Push ``HEAD`` and all tags to ``remote``.

        Raises
        ------
        GitError
            If pushing fails.
        """
        self._run(["push", remote, "HEAD", "--tags"], check=True)
