"""craftlock CLI: dependency resolution for craft projects.

Entry point for the ``craftlock`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve    Resolve a project's dependencies and write craftdesk.lock.
    parse-git  Show how a git dependency string is interpreted.
    plugins    Resolve installed plugin trees and detect cycles.
    check      Validate an existing craftdesk.lock.

Usage::

    craftlock resolve                        # Resolve ./craftdesk.json
    craftlock resolve ./my-project --production
    craftlock parse-git https://github.com/acme/crafts/tree/main/auth
    craftlock plugins ./plugins/suite ./plugins/tools
    craftlock check ./craftdesk.lock
"""

from __future__ import annotations

import logging

import click
from rich.logging import RichHandler

from craftlock import __version__, _PRODUCT_ID
from craftlock.cli.check_cmd import check_command
from craftlock.cli.output import err_console
from craftlock.cli.parse_cmd import parse_git_command
from craftlock.cli.plugins_cmd import plugins_command
from craftlock.cli.resolve_cmd import resolve_command


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name=_PRODUCT_ID)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """craftlock: reproducible dependency resolution for crafts.

    Resolves registry and git dependencies declared in craftdesk.json,
    including transitive dependencies of git sources, and records the
    result in a deterministic craftdesk.lock.
    """
    _configure_logging(verbose)


# Register all subcommands
cli.add_command(resolve_command)
cli.add_command(parse_git_command)
cli.add_command(plugins_command)
cli.add_command(check_command)
