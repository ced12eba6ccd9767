"""``craftlock plugins <dir>...``: resolve installed plugin trees.

Resolves each plugin directory, and every plugin it depends on that is
installed alongside it, in one session so shared dependencies are listed
once with all their parents.

Exit Codes:
    0 Tree resolved.
    1 Missing manifest or circular dependency.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from craftlock.cli.output import print_error, print_plugin_tree
from craftlock.core.dependency import PluginDependencyResolver
from craftlock.core.manifest import dependency_to_json
from craftlock.exceptions import CraftLockError


@click.command("plugins")
@click.argument(
    "plugin_dirs",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, file_okay=False),
)
@click.option(
    "--plugins-dir",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Directory holding installed plugins (default: each plugin's parent).",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def plugins_command(
    plugin_dirs: tuple[str, ...], plugins_dir: str | None, as_json: bool
) -> None:
    """Resolve the plugin trees rooted at PLUGIN_DIRS."""
    resolver = PluginDependencyResolver(Path(plugins_dir) if plugins_dir else None)
    try:
        for plugin_dir in plugin_dirs:
            resolver.resolve(Path(plugin_dir))
    except CraftLockError as exc:
        print_error(str(exc))
        sys.exit(1)

    tree = resolver.build_plugin_tree()
    direct = resolver.get_direct_plugins()
    transitive = resolver.get_dependency_plugins()

    if as_json:
        click.echo(json.dumps({
            "pluginTree": {name: tree[name].to_dict() for name in sorted(tree)},
            "flattened": {
                name: dependency_to_json(spec)
                for name, spec in resolver.get_flattened_dependencies().items()
            },
            "pendingGit": sorted(resolver.pending_git),
        }, indent=2))
    else:
        print_plugin_tree(tree, direct, transitive)
