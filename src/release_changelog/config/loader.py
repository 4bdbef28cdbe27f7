"""
Project metadata loader for release_changelog.

Links in the changelog are derived from the project's metadata file, a
JSON document in the repository root (``package.json`` by default). The
fields used are:

- ``repository``: a string spec (URL, ``owner/repo``, ``bitbucket:...``,
  ``gist:...``) or an object with a ``url`` key
- ``bugs``: the bug tracker base URL, as a string or an object with a
  ``url`` key
- ``version``: the current project version, used by the release flow

If the file is missing, malformed, or has fields of the wrong type, a
:class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from release_changelog.links.link_formatter import NO_LINK, repository_link


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_METADATA_FILE = "package.json"


class ConfigError(Exception):
    """Raised when the project metadata file is missing or invalid."""

    pass


def _url_field(data: Dict[str, Any], key: str) -> Optional[str]:
    """Return ``data[key]`` as a URL string, accepting ``{"url": ...}`` objects."""
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, dict):
        value = value.get("url")
        if value is None:
            return None
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string or an object with a 'url' string")
    return value


def load_metadata(
    repo_root: Optional[Path] = None, filename: str = DEFAULT_METADATA_FILE
) -> Dict[str, Any]:
    """Load the project metadata and return the values the tool needs.

    Args:
        repo_root: Directory containing the metadata file. Defaults to the
                   current working directory.
        filename: Name of, or path to, the metadata file. Absolute paths
                  are used as-is.

    Returns:
        A dictionary with keys:
        - repository_url (str): Normalised repository base URL, ``#`` if unknown
        - bugs_url (str): Bug tracker base URL
        - version (str, optional): Current project version, ``None`` if absent
        - path (Path): Location of the metadata file

    Raises:
        ConfigError: If the metadata file is missing, malformed, or invalid.
    """
    root = repo_root if repo_root is not None else Path.cwd()
    metadata_path = root / filename

    if not metadata_path.exists():
        logger.error("Metadata file '%s' does not exist", metadata_path)
        raise ConfigError(f"Missing project metadata file: {metadata_path}")

    try:
        content = metadata_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse metadata file: %s", exc)
        raise ConfigError(f"Invalid JSON in {metadata_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{metadata_path.name} must contain a JSON object")

    repository_url = repository_link(_url_field(data, "repository"))

    bugs_url = _url_field(data, "bugs")
    if not bugs_url:
        bugs_url = NO_LINK if repository_url == NO_LINK else f"{repository_url}/issues"

    version = data.get("version")
    if version is not None and not isinstance(version, str):
        raise ConfigError("'version' must be a string")

    metadata = {
        "repository_url": repository_url,
        "bugs_url": bugs_url,
        "version": version,
        "path": metadata_path,
    }
    logger.debug("Loaded project metadata from: %s", metadata_path)
    logger.debug("Metadata: %s", metadata)
    return metadata
