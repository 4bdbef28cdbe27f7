"""
Top-level package for release_changelog.

This package exposes the CLI entry points via the
``release_changelog.cli`` module: ``changelog`` writes the changelog for
a version, ``changelog-release`` runs the full tag/commit/push flow.
"""

__all__ = ["__version__"]

__version__ = "0.3.0"
