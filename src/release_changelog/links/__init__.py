"""
Markdown link helpers for repository, issue, and commit references.
"""

from .link_formatter import LinkFormatter, repository_link  # noqa: F401
