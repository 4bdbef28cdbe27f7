"""
Link formatting for changelog entries.

Repository specs come from project metadata and can take several shapes:
a full URL, an ``owner/repo`` GitHub shorthand, or a ``gist:`` /
``bitbucket:`` prefixed shorthand. :func:`repository_link` normalises them
into a base URL; :class:`LinkFormatter` builds the Markdown links for
issues and commits on top of it.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlparse


NO_LINK = "#"
GIST_PREFIX = "gist:"
BITBUCKET_PREFIX = "bitbucket:"
BITBUCKET_URL = "https://bitbucket.org/"
GITHUB_URL = "https://github.com/"

ISSUE_LINK_TEMPLATE = "[#{issue}]({bugs}/{issue})"
COMMIT_LINK_TEMPLATE = "[{short}]({repository}/commits/{hash})"


def _is_url(value: str) -> bool:
    """Return True if ``value`` is an absolute URL with a network location."""
    parsed = urlparse(value)
    return bool(parsed.scheme and parsed.netloc)


def repository_link(spec: Optional[str]) -> str:
    """Turn a repository spec into a base URL for links.

    The prefixes are checked before URL validity, so ``gist:`` and
    ``bitbucket:`` shorthands never reach the URL check.

    >>> repository_link("owner/repo")
    'https://github.com/owner/repo'
    >>> repository_link("bitbucket:owner/repo")
    'https://bitbucket.org/owner/repo'
    >>> repository_link(None)
    '#'
    """
    if not spec:
        return NO_LINK
    if spec.startswith(GIST_PREFIX):
        return NO_LINK
    if spec.startswith(BITBUCKET_PREFIX):
        return BITBUCKET_URL + spec[len(BITBUCKET_PREFIX):]
    if _is_url(spec):
        return spec
    return GITHUB_URL + spec


class LinkFormatter:
    """Builds Markdown links to issues and commits.

    Parameters
    ----------
    repository_url : str
        Base URL of the repository, already normalised by
        :func:`repository_link`.
    bugs_url : str
        Base URL of the bug tracker; the issue number is appended to it.
    """

    def __init__(self, repository_url: str, bugs_url: str) -> None:
        self.repository_url = repository_url.rstrip("/") or NO_LINK
        self.bugs_url = bugs_url.rstrip("/") or NO_LINK

    def issue_link(self, issue: int) -> str:
        return ISSUE_LINK_TEMPLATE.format(issue=issue, bugs=self.bugs_url)

    def commit_link(self, commit_hash: str) -> str:
        """Link to a commit, displaying its first 8 characters."""
        return COMMIT_LINK_TEMPLATE.format(
            short=commit_hash[:8],
            repository=self.repository_url,
            hash=commit_hash,
        )
