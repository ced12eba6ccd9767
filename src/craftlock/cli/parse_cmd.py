"""``craftlock parse-git <coordinate>``: show how a git string is read.

Accepts ``git+`` coordinate strings, plain ``.git`` URLs and GitHub web
links (``/tree/<branch>/<dir>`` and ``/blob/<branch>/<file>``). Nothing is
cloned.

Exit Codes:
    0 Parsed.
    1 The string does not name a git source.
"""

from __future__ import annotations

import json
import sys

import click

from craftlock.cli.output import coordinate_to_json, print_coordinate, print_error
from craftlock.core.git import looks_like_git, normalize_github_url, parse_git_url


@click.command("parse-git")
@click.argument("coordinate")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def parse_git_command(coordinate: str, as_json: bool) -> None:
    """Parse COORDINATE into URL, ref, path and file."""
    normalized = normalize_github_url(coordinate.strip())
    if not looks_like_git(normalized):
        print_error(f"Not a git dependency: {coordinate}")
        sys.exit(1)

    try:
        parsed = parse_git_url(normalized)
    except ValueError as exc:
        print_error(str(exc))
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(coordinate_to_json(parsed, normalized), indent=2))
    else:
        print_coordinate(parsed, normalized)
