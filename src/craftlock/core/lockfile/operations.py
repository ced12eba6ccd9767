"""Lockfile operations --- deserialization, validation, and diffing.

This module extends ``LockfileSkeleton`` (defined in ``lockfile.py``) with
classmethods and instance methods for:

- **Deserialization:** ``from_dict``, ``from_json``, ``read`` (disk).
- **Validation:** checks that a lockfile can be replayed as-is.
- **Diffing:** structured comparison of two lockfiles.

They are attached to the class at import time (in ``__init__.py``).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from craftlock.core.git.coordinates import is_full_commit_hash
from craftlock.core.lockfile.models import PluginTreeEntry, ResolvedEntry
from craftlock.exceptions import LockfileError


def _from_dict(cls: type, data: dict[str, Any]) -> Any:
    """Deserialize a lockfile from a parsed JSON document.

    Raises:
        LockfileError: If the document is not an object, has no ``crafts``
            object, or contains a malformed entry.
    """
    if not isinstance(data, dict):
        raise LockfileError("Lockfile must be a JSON object")
    crafts = data.get("crafts")
    if not isinstance(crafts, dict):
        raise LockfileError("Lockfile has no 'crafts' object")

    lock = cls(
        version=str(data.get("version", "")),
        lockfile_version=data.get("lockfileVersion", 0),
        generated_at=data.get("generatedAt"),
    )
    for name, entry in crafts.items():
        if not isinstance(entry, dict):
            raise LockfileError(f"Lock entry for {name!r} must be an object")
        try:
            lock.add_craft(name, ResolvedEntry.from_dict(entry))
        except ValueError as exc:
            raise LockfileError(f"Invalid lock entry for {name!r}: {exc}") from exc

    tree = data.get("pluginTree")
    if tree is None:
        return lock
    if not isinstance(tree, dict):
        raise LockfileError("Lockfile 'pluginTree' must be an object")
    plugin_tree = {}
    for name, entry in tree.items():
        if not isinstance(entry, dict):
            raise LockfileError(f"Plugin tree entry for {name!r} must be an object")
        try:
            plugin_tree[name] = PluginTreeEntry.from_dict(entry)
        except ValueError as exc:
            raise LockfileError(f"Invalid plugin tree entry for {name!r}: {exc}") from exc
    lock.plugin_tree = plugin_tree
    return lock


def _from_json(cls: type, json_str: str) -> Any:
    """Deserialize from a JSON string.

    Raises:
        LockfileError: If the string is not valid JSON or not a lockfile.
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise LockfileError(f"Lockfile is not valid JSON: {exc}") from exc
    return cls.from_dict(data)


def _read(cls: type, path: Path) -> Any:
    """Read a lockfile from disk.

    Raises:
        FileNotFoundError: If the file does not exist.
        LockfileError: If the file is not a valid lockfile.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise LockfileError(f"Lockfile is not valid UTF-8: {exc}") from exc
    return cls.from_json(text)


def _validate(self: Any) -> list[str]:
    """Check that the lockfile can be replayed without re-resolving.

    Performs the following checks:

    1. **Dependency completeness:** every dependency named by an entry is
       itself an entry.
    2. **Fully resolved:** no entry still needs a registry lookup.
    3. **Pinned git sources:** every git entry carries a full commit hash.
    4. **Version non-empty.**
    5. **Plugin tree consistency:** ``requiredBy`` names exist in the tree
       and transitive plugins have at least one parent.

    Returns:
        List of validation error messages. Empty means the lockfile is valid.
    """
    errors: list[str] = []
    crafts = self.crafts

    for name, entry in crafts.items():
        for dep_name in entry.dependencies:
            if dep_name not in crafts:
                errors.append(
                    f"Craft {name!r} depends on {dep_name!r} which is not in the lockfile"
                )

    for name, entry in crafts.items():
        if entry.needs_resolution:
            errors.append(
                f"Craft {name!r} has not been resolved against the registry"
            )

    for name, entry in crafts.items():
        if entry.is_git and not (entry.commit and is_full_commit_hash(entry.commit)):
            errors.append(f"Git craft {name!r} is not pinned to a full commit hash")

    for name, entry in crafts.items():
        if not entry.version:
            errors.append(f"Craft {name!r} has empty version string")

    if self.plugin_tree:
        for name, plugin in self.plugin_tree.items():
            for parent in plugin.required_by:
                if parent not in self.plugin_tree:
                    errors.append(
                        f"Plugin {name!r} is required by unknown plugin {parent!r}"
                    )
            if plugin.is_dependency and not plugin.required_by:
                errors.append(
                    f"Plugin {name!r} is marked as a dependency but has no parent"
                )

    return errors


def _diff(self: Any, other: Any) -> dict[str, Any]:
    """Compare two lockfiles and return differences.

    - **added**: Crafts present in ``other`` but not in ``self``.
    - **removed**: Crafts present in ``self`` but not in ``other``.
    - **changed**: Crafts present in both whose version, locator or
      integrity differ.

    Args:
        other: The lockfile to compare against (typically the newer one).
    """
    mine = self.crafts
    theirs = other.crafts

    added = sorted(set(theirs) - set(mine))
    removed = sorted(set(mine) - set(theirs))

    changes: list[dict[str, Any]] = []
    for name in sorted(set(mine) & set(theirs)):
        old = mine[name]
        new = theirs[name]
        for field_name in ("version", "resolved", "integrity"):
            old_value = getattr(old, field_name)
            new_value = getattr(new, field_name)
            if old_value != new_value:
                changes.append({
                    "name": name,
                    "field": field_name,
                    "old": old_value,
                    "new": new_value,
                })

    return {
        "added": added,
        "removed": removed,
        "changed": changes,
    }
