"""Depth-first resolution of nested plugin dependency trees.

Unlike the breadth-first graph resolver, this resolver treats a cycle as
an error. It keeps an explicit resolution stack of the plugins currently
being resolved; reaching a plugin that is still on the stack raises
``CircularDependencyError`` with the full chain (``A → B → C → A``).
Reaching a plugin that was already *finished* earlier in the session is
not an error: the new parent is appended to its ``required_by`` list and
its dependencies are not walked again.

Only plugin-to-plugin links that are already materialized on disk are
walked. A dependency is materialized when ``<plugins_dir>/<name>`` holds a
manifest. Everything else is left to other components:

- version strings are looked up by the registry client;
- git coordinates with a subdirectory need a clone first and are recorded
  in ``pending_git`` for the caller.

State lives on the resolver instance and survives across ``resolve``
calls until ``reset()``, so several top-level plugins can be resolved into
one shared tree. Separate instances never share state.

Thread safety: This class is NOT thread-safe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from craftlock.core.lockfile import PluginDependencyTree, PluginTreeEntry
from craftlock.core.manifest import (
    MANIFEST_FILENAME,
    DependencyConfig,
    DependencySpec,
    Manifest,
    join_within,
    read_manifest,
)
from craftlock.exceptions import (
    CircularDependencyError,
    ManifestError,
    ManifestMissingError,
)

logger = logging.getLogger(__name__)


@dataclass
class ResolvedPlugin:
    """A plugin recorded during a session.

    Attributes:
        name: Plugin name from its manifest.
        version: Plugin version from its manifest.
        dependencies: The plugin's own declared dependencies.
        is_dependency: False when requested directly, True when pulled in
            by another plugin.
        required_by: Parents that pulled this plugin in, without duplicates,
            in the order they were seen.
    """

    name: str
    version: str
    dependencies: dict[str, DependencySpec] = field(default_factory=dict)
    is_dependency: bool = False
    required_by: list[str] = field(default_factory=list)

    def add_parent(self, parent: str) -> None:
        if parent not in self.required_by:
            self.required_by.append(parent)


class _Registration(Enum):
    NEW = "new"
    ALREADY_RESOLVED = "already_resolved"


class PluginDependencyResolver:
    """Session-scoped resolver for plugin dependency trees.

    Args:
        plugins_dir: Directory holding installed plugins, one subdirectory
            per plugin name. When None, each plugin's own parent directory
            is searched (plugins installed side by side).
    """

    def __init__(self, plugins_dir: Path | None = None) -> None:
        self._plugins_dir = plugins_dir
        self._resolved: dict[str, ResolvedPlugin] = {}
        self._stack: list[str] = []
        self.pending_git: dict[str, DependencyConfig] = {}

    # -- Resolution ---------------------------------------------------------

    def resolve(
        self, plugin_location: Path, parent_name: str | None = None
    ) -> dict[str, ResolvedPlugin]:
        """Resolve the plugin at ``plugin_location`` and its materialized deps.

        Args:
            plugin_location: Directory containing the plugin's manifest.
            parent_name: Name of the plugin that requires this one; None for
                a direct install.

        Returns:
            Every plugin resolved so far in this session, by name.

        Raises:
            ManifestMissingError: No readable manifest at ``plugin_location``.
            CircularDependencyError: The plugin is already being resolved
                further up the current chain.
            ResolutionError: A dependency name points outside the plugins
                directory.
        """
        manifest = self._read_manifest(plugin_location)
        name = manifest.name

        if name in self._stack:
            raise CircularDependencyError([*self._stack, name])

        self._stack.append(name)
        try:
            if self._register(manifest, parent_name) is _Registration.NEW:
                self._walk_dependencies(manifest, plugin_location)
            return dict(self._resolved)
        finally:
            self._stack.pop()

    def _register(self, manifest: Manifest, parent_name: str | None) -> _Registration:
        existing = self._resolved.get(manifest.name)
        if existing is not None:
            if parent_name:
                existing.add_parent(parent_name)
            return _Registration.ALREADY_RESOLVED

        self._resolved[manifest.name] = ResolvedPlugin(
            name=manifest.name,
            version=manifest.version,
            dependencies=dict(manifest.dependencies),
            is_dependency=parent_name is not None,
            required_by=[parent_name] if parent_name else [],
        )
        return _Registration.NEW

    def _walk_dependencies(self, manifest: Manifest, location: Path) -> None:
        search_root = self._plugins_dir or location.parent
        for dep_name, spec in manifest.dependencies.items():
            dep_location = join_within(search_root, dep_name, "plugins directory")
            if (dep_location / MANIFEST_FILENAME).is_file():
                self.resolve(dep_location, parent_name=manifest.name)
            elif isinstance(spec, str):
                logger.debug("Dependency %s will be resolved by registry", dep_name)
            elif spec.is_git and spec.path:
                logger.debug("Dependency %s requires git clone for resolution", dep_name)
                self.pending_git[dep_name] = spec
            else:
                logger.debug("Dependency %s is not installed; skipping", dep_name)

    @staticmethod
    def _read_manifest(location: Path) -> Manifest:
        manifest_path = location / MANIFEST_FILENAME
        if not manifest_path.is_file():
            raise ManifestMissingError(str(location))
        try:
            manifest = read_manifest(manifest_path)
        except (OSError, ManifestError) as exc:
            logger.debug("Failed to read plugin manifest at %s: %s", manifest_path, exc)
            raise ManifestMissingError(str(location)) from exc
        if not manifest.name:
            raise ManifestMissingError(str(location))
        return manifest

    # -- Views --------------------------------------------------------------

    def build_plugin_tree(self) -> PluginDependencyTree:
        """Project every resolved plugin into the lockfile's ``pluginTree``."""
        return {
            name: PluginTreeEntry(
                version=plugin.version,
                dependencies=list(plugin.dependencies),
                is_dependency=plugin.is_dependency,
                required_by=list(plugin.required_by),
            )
            for name, plugin in self._resolved.items()
        }

    def get_flattened_dependencies(self) -> dict[str, DependencySpec]:
        """Merge every plugin and its declared dependencies into one map.

        Each plugin contributes its own version under its name, then its
        declared dependencies. Plugins are visited in resolution order and
        later values overwrite earlier ones; conflicting versions are not
        reported.
        """
        flattened: dict[str, DependencySpec] = {}
        for name, plugin in self._resolved.items():
            flattened[name] = plugin.version
            flattened.update(plugin.dependencies)
        return flattened

    def get_direct_plugins(self) -> list[ResolvedPlugin]:
        return [p for p in self._resolved.values() if not p.is_dependency]

    def get_dependency_plugins(self) -> list[ResolvedPlugin]:
        return [p for p in self._resolved.values() if p.is_dependency]

    @property
    def resolution_stack(self) -> list[str]:
        """Names currently being resolved, outermost first."""
        return list(self._stack)

    def reset(self) -> None:
        """Forget everything resolved in this session."""
        self._resolved.clear()
        self._stack.clear()
        self.pending_git.clear()
