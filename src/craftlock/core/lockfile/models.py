"""Lockfile data models: ResolvedEntry and PluginTreeEntry.

Defines the per-craft record stored in ``craftdesk.lock`` and the per-plugin
record of the optional ``pluginTree`` section. These are plain dataclasses
with dict conversion only, so they can be imported by the resolvers without
pulling in serialization code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from craftlock.core.git.coordinates import GitCoordinate
from craftlock.core.manifest.craft_type import CraftType

# Markers written into ``resolved``/``integrity`` of entries that still need
# a registry lookup, and into ``integrity`` of git entries without a commit.
REGISTRY_MARKER = "registry"
PENDING_MARKER = "pending"
GIT_MARKER = "git"


# ---------------------------------------------------------------------------
# ResolvedEntry: a single craft in the lockfile
# ---------------------------------------------------------------------------


@dataclass
class ResolvedEntry:
    """The resolved state of one craft.

    Attributes:
        version: Resolved version, or the raw constraint for pending entries.
        resolved: Download locator (registry) or repository URL (git).
        integrity: Integrity value (registry), resolved commit hash (git),
            or a marker for entries not yet resolved.
        craft_type: Kind of craft; None until known.
        author: Author identifier.
        git: The git coordinate that was requested, for git entries.
        commit: Full commit hash pinned for git entries.
        dependencies: Declared dependencies as ``name -> version or
            coordinate string``.
        needs_resolution: True for registry requests not yet looked up.
        registry: Registry override for the lookup, if any.
    """

    version: str
    resolved: str
    integrity: str
    craft_type: CraftType | None = None
    author: str | None = None
    git: GitCoordinate | None = None
    commit: str | None = None
    dependencies: dict[str, str] = field(default_factory=dict)
    needs_resolution: bool = False
    registry: str | None = None

    @property
    def is_git(self) -> bool:
        return self.git is not None

    @classmethod
    def pending(cls, constraint: str | None, registry: str | None = None) -> ResolvedEntry:
        """Placeholder for a registry request resolved after the graph pass."""
        return cls(
            version=constraint or "*",
            resolved=REGISTRY_MARKER,
            integrity=PENDING_MARKER,
            needs_resolution=True,
            registry=registry,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the on-disk camelCase keys."""
        entry: dict[str, Any] = {
            "version": self.version,
            "resolved": self.resolved,
            "integrity": self.integrity,
        }
        if self.craft_type is not None:
            entry["type"] = self.craft_type.value
        if self.author:
            entry["author"] = self.author
        if self.git is not None:
            entry["git"] = self.git.url
            for key in ("branch", "tag", "path", "file"):
                value = getattr(self.git, key)
                if value:
                    entry[key] = value
            if self.git.commit:
                entry["requestedCommit"] = self.git.commit
        if self.commit:
            entry["commit"] = self.commit
        entry["dependencies"] = dict(sorted(self.dependencies.items()))
        if self.needs_resolution:
            entry["needsResolution"] = True
        if self.registry:
            entry["registry"] = self.registry
        return entry

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResolvedEntry:
        """Deserialize one entry.

        Raises:
            ValueError: If a field has the wrong shape or the git refs conflict.
        """
        dependencies = data.get("dependencies") or {}
        if not isinstance(dependencies, dict):
            raise ValueError("'dependencies' must be an object")

        git: GitCoordinate | None = None
        if data.get("git"):
            # ``commit`` is the pin; only ``requestedCommit`` marks a commit request.
            git = GitCoordinate(
                url=data["git"],
                branch=data.get("branch"),
                tag=data.get("tag"),
                commit=data.get("requestedCommit"),
                path=data.get("path"),
                file=data.get("file"),
            )
        return cls(
            version=str(data.get("version", "")),
            resolved=str(data.get("resolved", "")),
            integrity=str(data.get("integrity", "")),
            craft_type=CraftType.parse(data.get("type")),
            author=data.get("author"),
            git=git,
            commit=data.get("commit"),
            dependencies={k: str(v) for k, v in dependencies.items()},
            needs_resolution=bool(data.get("needsResolution", False)),
            registry=data.get("registry"),
        )


# ---------------------------------------------------------------------------
# PluginTreeEntry: a single plugin in the pluginTree section
# ---------------------------------------------------------------------------


@dataclass
class PluginTreeEntry:
    """Projection of one resolved plugin for persistence.

    Attributes:
        version: Plugin version.
        dependencies: Names of the plugin's declared dependencies.
        is_dependency: True when pulled in by another plugin.
        required_by: Parents that pulled this plugin in, in arrival order.
    """

    version: str
    dependencies: list[str] = field(default_factory=list)
    is_dependency: bool = False
    required_by: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "dependencies": list(self.dependencies),
            "isDependency": self.is_dependency,
            "requiredBy": list(self.required_by),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PluginTreeEntry:
        dependencies = data.get("dependencies") or []
        required_by = data.get("requiredBy") or []
        if not isinstance(dependencies, list) or not isinstance(required_by, list):
            raise ValueError("'dependencies' and 'requiredBy' must be arrays")
        return cls(
            version=str(data.get("version", "")),
            dependencies=[str(d) for d in dependencies],
            is_dependency=bool(data.get("isDependency", False)),
            required_by=[str(p) for p in required_by],
        )


PluginDependencyTree = dict[str, PluginTreeEntry]
