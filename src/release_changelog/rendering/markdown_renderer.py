"""
Markdown renderer for grouped changelog sections.

The renderer writes to any object with a ``write`` method (an open file or
``sys.stdout``) and knows nothing about where the output ends up. Output
for a given table, version and date is always byte-identical: components
are sorted here, not at insertion time.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, TextIO, Tuple

from release_changelog.grouping.section_model import (
    BREAKS,
    FEAT,
    FIX,
    PERF,
    Entry,
    Section,
    SectionTable,
)
from release_changelog.links.link_formatter import LinkFormatter


HEADER_TEMPLATE = "# {version} ({date})\n\n"
SECTION_TEMPLATE = "\n## {title}\n\n"

LINKED_SECTIONS: Sequence[Tuple[str, str]] = (
    (FIX, "Bug Fixes"),
    (FEAT, "Features"),
    (PERF, "Performance Improvements"),
)
BREAKING_TITLE = "Breaking Changes"


def _component_order(name: Optional[str]) -> Tuple[bool, str]:
    # Commits without a component come first.
    return (name is not None, name or "")


def _write_entry(
    stream: TextIO,
    prefix: str,
    entry: Entry,
    nested: bool,
    formatter: LinkFormatter,
    print_commit_links: bool,
) -> None:
    if not print_commit_links:
        stream.write(f"{prefix} {entry.subject}\n")
        return

    indent = "    " if nested else "  "
    stream.write(
        f"{prefix} {entry.subject}\n{indent}({formatter.commit_link(entry.hash)}"
    )
    if entry.closes:
        issues = ", ".join(formatter.issue_link(issue) for issue in entry.closes)
        stream.write(f",\n{indent} {issues}")
    stream.write(")\n")


def render_section(
    stream: TextIO,
    title: str,
    section: Section,
    formatter: LinkFormatter,
    print_commit_links: bool = True,
) -> None:
    """Write one section with its component buckets.

    Parameters
    ----------
    stream : TextIO
        Output sink.
    title : str
        Display title for the ``##`` header.
    section : Section
        Component buckets of the section.
    formatter : LinkFormatter
        Builds commit and issue links.
    print_commit_links : bool, optional
        Append the ``(commit, issues)`` group after each entry. Disabled for
        breaking changes, whose subject already links to the commit.
    """
    components: List[Optional[str]] = sorted(
        (name for name, entries in section.items() if entries),
        key=_component_order,
    )
    if not components:
        return

    stream.write(SECTION_TEMPLATE.format(title=title))

    for name in components:
        entries = section[name]
        nested = len(entries) > 1
        prefix = "-"

        if name is not None:
            if nested:
                stream.write(f"- **{name}:**\n")
                prefix = "    -"
            else:
                prefix = f"- **{name}:**"

        for entry in entries:
            _write_entry(stream, prefix, entry, nested, formatter, print_commit_links)

    stream.write("\n")


def render_changelog(
    sections: SectionTable,
    version: str,
    date: str,
    stream: TextIO,
    formatter: LinkFormatter,
) -> None:
    """Write the full changelog document for ``version``.

    Sections without entries are omitted; breaking changes always come last.
    """
    stream.write(HEADER_TEMPLATE.format(version=version, date=date))
    for key, title in LINKED_SECTIONS:
        render_section(stream, title, sections[key], formatter)
    render_section(stream, BREAKING_TITLE, sections[BREAKS], formatter, print_commit_links=False)
