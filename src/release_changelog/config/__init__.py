"""
Configuration loading for release_changelog.

Provides a loader for the project metadata file (``package.json`` by
default) that supplies the repository and bug tracker URLs. See
:mod:`release_changelog.config.loader` for implementation details.
"""

from .loader import ConfigError, load_metadata  # noqa: F401
