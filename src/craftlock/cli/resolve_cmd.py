"""``craftlock resolve [project]``: resolve dependencies into craftdesk.lock.

Reads ``craftdesk.json`` from the project directory, resolves every
dependency (git sources are cloned, registry requests are recorded as
pending), and writes a deterministic ``craftdesk.lock``.

Exit Codes:
    0 Lockfile written.
    1 Manifest or resolution error.
    2 The manifest declares no dependencies.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from craftlock.cli.output import print_error, print_resolution
from craftlock.core.dependency import DependencyGraphResolver
from craftlock.core.git import DEFAULT_GIT_TIMEOUT, GitDependencyResolver, GitRunner
from craftlock.core.lockfile import LOCKFILE_FILENAME
from craftlock.core.manifest import (
    MANIFEST_FILENAME,
    load_project_dependencies,
    read_manifest,
)
from craftlock.exceptions import CraftLockError


@click.command("resolve")
@click.argument(
    "project_dir",
    type=click.Path(exists=True, file_okay=False),
    default=".",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help=f"Output path for lockfile (default: <project>/{LOCKFILE_FILENAME}).",
)
@click.option(
    "--production",
    is_flag=True,
    help="Skip devDependencies.",
)
@click.option(
    "--timeout",
    type=float,
    default=DEFAULT_GIT_TIMEOUT,
    show_default=True,
    help="Timeout in seconds for each git command.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the lockfile as JSON.")
def resolve_command(
    project_dir: str,
    output: str | None,
    production: bool,
    timeout: float,
    as_json: bool,
) -> None:
    """Resolve PROJECT_DIR's dependencies and write a lockfile.

    Exit code 0 on success, 1 on error, 2 if there is nothing to resolve.
    """
    target = Path(project_dir)
    manifest_path = target / MANIFEST_FILENAME
    if not manifest_path.is_file():
        print_error(f"No {MANIFEST_FILENAME} found in {target}")
        sys.exit(1)

    try:
        manifest = read_manifest(manifest_path)
        requests = load_project_dependencies(manifest, production=production)
        if not requests:
            click.echo("No dependencies to resolve.")
            sys.exit(2)

        resolver = DependencyGraphResolver(
            GitDependencyResolver(runner=GitRunner(timeout=timeout))
        )
        result = resolver.resolve_all(requests)
    except CraftLockError as exc:
        print_error(str(exc))
        sys.exit(1)

    out_path = Path(output) if output else target / LOCKFILE_FILENAME
    result.lockfile.write(out_path)

    if as_json:
        click.echo(json.dumps(result.lockfile.to_dict(), indent=2))
    else:
        print_resolution(result.lockfile)
        click.echo(f"\nLockfile written to: {out_path}")
    sys.exit(0)
