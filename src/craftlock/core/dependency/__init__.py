"""Dependency resolution for craft sets and plugin trees.

Two resolvers with deliberately different traversal policies:

- ``DependencyGraphResolver``: breadth-first over a project's requests,
  first request per name wins, cycles are absorbed by a visited set.
- ``PluginDependencyResolver``: depth-first over installed plugins with an
  explicit resolution stack; cycles raise ``CircularDependencyError``.
"""

from craftlock.core.dependency.graph_resolver import (
    DependencyGraphResolver,
    DependencyRequest,
    GraphResolution,
    entry_from_git,
)
from craftlock.core.dependency.plugin_resolver import (
    PluginDependencyResolver,
    ResolvedPlugin,
)

__all__ = [
    "DependencyGraphResolver",
    "DependencyRequest",
    "GraphResolution",
    "PluginDependencyResolver",
    "ResolvedPlugin",
    "entry_from_git",
]
