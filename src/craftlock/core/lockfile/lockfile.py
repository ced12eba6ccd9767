"""Lockfile core class --- craft management and serialization.

``LockfileSkeleton`` is the in-memory form of ``craftdesk.lock``. The graph
resolver produces one at the end of every pass; persistence and the
installer consume it. It provides:

- **Craft management:** add, get, count, list, and filter pending crafts.
- **Serialization:** deterministic ``to_dict``, ``to_json`` and ``write``.

Determinism guarantee: craft and plugin entries are emitted sorted by name
and JSON keys are sorted, so two skeletons with the same content and
timestamp produce byte-identical JSON.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from craftlock import _PRODUCT_ID
from craftlock.core.lockfile.models import (
    PluginDependencyTree,
    ResolvedEntry,
)

LOCKFILE_FILENAME = "craftdesk.lock"
LOCKFILE_FORMAT_VERSION = "1.0.0"
LOCKFILE_SCHEMA_VERSION = 1


class LockfileSkeleton:
    """Resolved crafts for one pass, ready to be written as ``craftdesk.lock``.

    Example::

        lock = LockfileSkeleton()
        lock.add_craft("jwt-helper", ResolvedEntry.pending("^2.0.0"))
        lock.write(Path("craftdesk.lock"))
    """

    def __init__(
        self,
        version: str = LOCKFILE_FORMAT_VERSION,
        lockfile_version: int = LOCKFILE_SCHEMA_VERSION,
        generated_at: str | None = None,
    ) -> None:
        self.version = version
        self.lockfile_version = lockfile_version
        self.generated_at = generated_at or datetime.now(timezone.utc).isoformat()
        self._crafts: dict[str, ResolvedEntry] = {}
        self.plugin_tree: PluginDependencyTree | None = None

    # -- Craft management ---------------------------------------------------

    def add_craft(self, name: str, entry: ResolvedEntry) -> None:
        """Add a craft entry, replacing any existing entry for ``name``."""
        self._crafts[name] = entry

    def get_craft(self, name: str) -> ResolvedEntry | None:
        return self._crafts.get(name)

    @property
    def crafts(self) -> dict[str, ResolvedEntry]:
        """Craft entries in insertion (resolution) order."""
        return dict(self._crafts)

    @property
    def craft_count(self) -> int:
        return len(self._crafts)

    @property
    def craft_names(self) -> list[str]:
        """Return sorted list of all craft names in the lockfile."""
        return sorted(self._crafts)

    def pending_crafts(self) -> dict[str, ResolvedEntry]:
        """Entries still waiting for a registry lookup."""
        return {
            name: entry
            for name, entry in self._crafts.items()
            if entry.needs_resolution
        }

    # -- Serialization ------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the ``craftdesk.lock`` document shape."""
        data: dict[str, Any] = {
            "version": self.version,
            "lockfileVersion": self.lockfile_version,
            "generatedAt": self.generated_at,
            "generatedBy": _PRODUCT_ID,
            "crafts": {
                name: self._crafts[name].to_dict() for name in sorted(self._crafts)
            },
        }
        metadata: dict[str, Any] = {"totalCrafts": len(self._crafts)}
        if self.plugin_tree is not None:
            data["pluginTree"] = {
                name: self.plugin_tree[name].to_dict()
                for name in sorted(self.plugin_tree)
            }
            metadata["totalPlugins"] = len(self.plugin_tree)
        data["metadata"] = metadata
        return data

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True, ensure_ascii=False)

    def write(self, path: Path) -> None:
        """Write the lockfile to disk as JSON.

        Creates parent directories if they do not exist.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json() + "\n", encoding="utf-8")
