"""Lockfile factory --- building a skeleton from a resolved map.

``from_resolved`` is how the graph resolver turns the map it built during a
pass into a ``LockfileSkeleton``. The plugin resolver's tree can be attached
at the same time::

    result = DependencyGraphResolver().resolve_all(requests)
    lock = LockfileSkeleton.from_resolved(
        result.resolved, plugin_tree=plugins.build_plugin_tree()
    )
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from craftlock.core.lockfile.models import PluginDependencyTree, ResolvedEntry


def _from_resolved(
    cls: type,
    resolved: Mapping[str, ResolvedEntry],
    plugin_tree: PluginDependencyTree | None = None,
) -> Any:
    """Create a skeleton holding every entry of ``resolved``.

    Entries keep the order of ``resolved``; serialization sorts them.
    """
    lock = cls()
    for name, entry in resolved.items():
        lock.add_craft(name, entry)
    if plugin_tree is not None:
        lock.plugin_tree = dict(plugin_tree)
    return lock
