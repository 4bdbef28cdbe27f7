"""
Version control system (VCS) integration.

This package contains the Git client used to read commit history and the
previous release tag, and to commit, tag and push a release.
"""

from .git_client import GitClient, GitError, TagLookupError  # noqa: F401
