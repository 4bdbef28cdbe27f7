"""
Command line interface for the release_changelog tool.

Two commands are defined here. ``main`` backs the ``changelog`` command,
which writes the changelog for one version to a file or to standard
output. ``release_main`` backs ``changelog-release``, which bumps the
version, prepends the changelog and commits, tags and pushes the release.
Status lines and warnings go to standard error so they never end up in
the generated document.
"""

from __future__ import annotations

import asyncio
import io
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click

from release_changelog import __version__
from release_changelog.config.loader import DEFAULT_METADATA_FILE, ConfigError, load_metadata
from release_changelog.generator import generate
from release_changelog.links.link_formatter import LinkFormatter
from release_changelog.release.orchestrator import ReleaseError, run_release
from release_changelog.vcs.git_client import GitClient, GitError, TagLookupError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_NO_REPO = 3
EXIT_TAG_LOOKUP = 4
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_RELEASE_ERROR = 7

DEFAULT_CHANGELOG_FILE = "CHANGELOG.md"


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}", err=True)


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}", err=True)


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def configure_logging(verbose: bool) -> None:
    # force=True so handlers are reconfigured on repeated invocations (tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


# ---------------------------------------------------------------------------
# Shared setup
# ---------------------------------------------------------------------------

def setup_repository(metadata_file: str) -> Tuple[GitClient, Dict[str, Any], LinkFormatter]:
    """Locate the repository, load its metadata and build the link formatter.

    Raises
    ------
    click.exceptions.Exit
        With EXIT_NO_REPO or EXIT_CONFIG_ERROR.
    """
    repo_root = GitClient.find_repo_root(Path.cwd())
    if repo_root is None:
        print_error("Current directory is not inside a Git repository.")
        raise click.exceptions.Exit(EXIT_NO_REPO)
    logger.debug("Repository root: %s", repo_root)

    try:
        metadata = load_metadata(repo_root, metadata_file)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

    formatter = LinkFormatter(metadata["repository_url"], metadata["bugs_url"])
    return GitClient(repo_root), metadata, formatter


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@click.command()
@click.argument("release_version", metavar="VERSION")
@click.argument("output_file", required=False, type=click.Path(dir_okay=False))
@click.option("--metadata", "metadata_file", default=DEFAULT_METADATA_FILE, show_default=True,
              help="Project metadata JSON file providing repository and bugs URLs.")
@click.option("--first-release", is_flag=True,
              help="Read the whole history instead of commits since the previous tag.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="changelog")
def main(release_version: str, output_file: Optional[str], metadata_file: str,
         first_release: bool, verbose: bool) -> None:
    """Generate the changelog for VERSION from the git history.

    The document is written to OUTPUT_FILE, or to standard output when no
    file is given.
    """
    configure_logging(verbose)
    ctx = click.get_current_context(silent=True)

    try:
        client, _, formatter = setup_repository(metadata_file)

        # Render into memory first so a failed run leaves no partial output.
        buffer = io.StringIO()
        try:
            count = asyncio.run(
                generate(client, release_version, buffer, formatter, first_release=first_release)
            )
        except TagLookupError as exc:
            print_error(str(exc))
            print_info("Use --first-release if this project has no tags yet", indent=1)
            raise click.exceptions.Exit(EXIT_TAG_LOOKUP)
        except GitError as exc:
            print_error(f"VCS error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        print_info(f"Generating changelog to {output_file or 'stdout'} ({release_version})")
        if output_file:
            Path(output_file).write_text(buffer.getvalue(), encoding="utf-8")
        else:
            click.echo(buffer.getvalue(), nl=False)
        print_success(f"Wrote {count} commit{'s' if count != 1 else ''}")

        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)


@click.command()
@click.argument("version_spec")
@click.argument("changelog_file", required=False, default=DEFAULT_CHANGELOG_FILE,
                type=click.Path(dir_okay=False))
@click.option("--metadata", "metadata_file", default=DEFAULT_METADATA_FILE, show_default=True,
              help="Project metadata JSON file holding the version to bump.")
@click.option("--no-push", is_flag=True, help="Commit and tag, but do not push.")
@click.option("--first-release", is_flag=True,
              help="Read the whole history instead of commits since the previous tag.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="changelog-release")
def release_main(version_spec: str, changelog_file: str, metadata_file: str,
                 no_push: bool, first_release: bool, verbose: bool) -> None:
    """Release the project: bump VERSION_SPEC, update the changelog, commit, tag and push.

    VERSION_SPEC is major, minor, patch or an explicit X.Y.Z version.
    """
    configure_logging(verbose)
    ctx = click.get_current_context(silent=True)

    try:
        client, metadata, formatter = setup_repository(metadata_file)
        changelog_path = client.repo_root / changelog_file

        try:
            release_version = asyncio.run(
                run_release(
                    client,
                    version_spec,
                    metadata["path"],
                    changelog_path,
                    formatter,
                    push=not no_push,
                    first_release=first_release,
                )
            )
        except ReleaseError as exc:
            print_error(f"RELEASE ERROR: {exc}")
            raise click.exceptions.Exit(EXIT_RELEASE_ERROR)
        except TagLookupError as exc:
            print_error(str(exc))
            print_info("Use --first-release if this project has no tags yet", indent=1)
            raise click.exceptions.Exit(EXIT_TAG_LOOKUP)
        except GitError as exc:
            print_error(f"VCS error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        print_success(f"Released {release_version}")
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
