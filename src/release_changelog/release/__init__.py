"""
Release flow: clean check, version bump, changelog, commit, tag, push.
"""

from .orchestrator import ReleaseError, bump_version, run_release  # noqa: F401
