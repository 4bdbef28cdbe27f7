"""
Markdown rendering of changelog sections.
"""

from .markdown_renderer import render_changelog, render_section  # noqa: F401
