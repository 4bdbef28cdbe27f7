#!/usr/bin/env python
"""
Thin wrapper script to invoke the release_changelog CLI.

Running ``python changelog.py 1.2.0`` is equivalent to running the
``changelog`` console script installed via ``pyproject.toml``.
"""

from release_changelog.cli import main


if __name__ == "__main__":
    main(prog_name="changelog")
