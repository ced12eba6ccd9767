"""``craftlock check [lockfile]``: validate an existing craftdesk.lock.

Exit Codes:
    0 The lockfile can be replayed as-is.
    1 The lockfile is unreadable or fails validation.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from craftlock.cli.output import print_error, print_validation
from craftlock.core.lockfile import LOCKFILE_FILENAME, LockfileSkeleton
from craftlock.exceptions import LockfileError


@click.command("check")
@click.argument(
    "lockfile",
    type=click.Path(exists=True, dir_okay=False),
    default=LOCKFILE_FILENAME,
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def check_command(lockfile: str, as_json: bool) -> None:
    """Validate LOCKFILE and list every problem found."""
    try:
        lock = LockfileSkeleton.read(Path(lockfile))
    except LockfileError as exc:
        print_error(str(exc))
        sys.exit(1)

    errors = lock.validate()
    if as_json:
        click.echo(json.dumps({
            "lockfile": lockfile,
            "valid": not errors,
            "crafts": lock.craft_count,
            "errors": errors,
        }, indent=2))
    else:
        print_validation(lockfile, errors)
    sys.exit(1 if errors else 0)
