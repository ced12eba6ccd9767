"""Rich output formatting helpers for the craftlock CLI.

Provides consistent terminal output for resolution results, parsed git
coordinates, plugin trees and lockfile validation.

Status Color Mapping:
    git (pinned) = green, pending registry lookup = yellow, error = bold red
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from craftlock.core.dependency import ResolvedPlugin
from craftlock.core.git import GitCoordinate
from craftlock.core.lockfile import LockfileSkeleton, PluginDependencyTree, ResolvedEntry

console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print an error message in bold red on stderr."""
    err_console.print(Text(f"Error: {message}", style="bold red"))


def _source_text(entry: ResolvedEntry) -> Text:
    if entry.needs_resolution:
        return Text("pending", style="yellow")
    if entry.is_git:
        return Text("git", style="green")
    return Text("registry", style="cyan")


def print_resolution(lock: LockfileSkeleton) -> None:
    """Print a table of the crafts resolved in one pass.

    Args:
        lock: Skeleton produced by the graph resolver.
    """
    crafts = lock.crafts
    if not crafts:
        console.print("[dim]No crafts resolved.[/dim]")
        return

    table = Table(title="Resolved Crafts", show_header=True, header_style="bold")
    table.add_column("Craft", style="bold")
    table.add_column("Version")
    table.add_column("Type", style="dim")
    table.add_column("Source", justify="center")
    table.add_column("Commit", style="dim")

    for name in lock.craft_names:
        entry = crafts[name]
        table.add_row(
            name,
            entry.version,
            entry.craft_type.value if entry.craft_type else "-",
            _source_text(entry),
            entry.commit[:7] if entry.commit else "-",
        )
    console.print(table)

    pending = len(lock.pending_crafts())
    parts = [f"[bold]{lock.craft_count}[/bold] crafts resolved"]
    if pending:
        parts.append(f"[yellow]{pending} pending registry lookup[/yellow]")
    console.print(" | ".join(parts))


def print_coordinate(coordinate: GitCoordinate, normalized: str) -> None:
    """Print the parts of a parsed git coordinate.

    Args:
        coordinate: Parsed coordinate.
        normalized: The coordinate string after GitHub URL normalization.
    """
    console.print(Panel(Text(normalized, style="bold"), title="Git Coordinate"))
    table = Table(show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("URL", coordinate.url)
    table.add_row("Repository", coordinate.name or "-")
    table.add_row("Ref", coordinate.ref or "(default branch)")
    table.add_row("Ref kind", coordinate.ref_kind.value if coordinate.ref_kind else "-")
    table.add_row("Path", coordinate.path or "-")
    table.add_row("File", coordinate.file or "-")
    console.print(table)


def print_plugin_tree(
    tree: PluginDependencyTree,
    direct: list[ResolvedPlugin],
    transitive: list[ResolvedPlugin],
) -> None:
    """Print a resolved plugin tree with direct/transitive counts."""
    if not tree:
        console.print("[dim]No plugins resolved.[/dim]")
        return

    table = Table(title="Plugin Tree", show_header=True, header_style="bold")
    table.add_column("Plugin", style="bold")
    table.add_column("Version")
    table.add_column("Kind", justify="center")
    table.add_column("Required By", style="dim")
    for name in sorted(tree):
        entry = tree[name]
        kind = Text("dependency", style="cyan") if entry.is_dependency else Text(
            "direct", style="green"
        )
        table.add_row(name, entry.version, kind, ", ".join(entry.required_by) or "-")
    console.print(table)
    console.print(
        f"[bold]{len(tree)}[/bold] plugins | "
        f"[green]{len(direct)} direct[/green] | "
        f"[cyan]{len(transitive)} transitive[/cyan]"
    )


def print_validation(path: str, errors: list[str]) -> None:
    """Print lockfile validation results."""
    if not errors:
        console.print(
            Panel("[bold green]Lockfile is valid[/bold green]", title=path)
        )
        return
    console.print(Panel("[bold red]Lockfile is invalid[/bold red]", title=path))
    for error in errors:
        console.print(f"  [red]- {error}[/red]")


def coordinate_to_json(coordinate: GitCoordinate, normalized: str) -> dict[str, Any]:
    return {
        "input": normalized,
        "url": coordinate.url,
        "name": coordinate.name,
        "branch": coordinate.branch,
        "tag": coordinate.tag,
        "commit": coordinate.commit,
        "path": coordinate.path,
        "file": coordinate.file,
        "refKind": coordinate.ref_kind.value if coordinate.ref_kind else None,
        "spec": coordinate.to_spec(),
    }
