"""Craft type inference for sources that do not declare a type.

Inference only runs when no manifest was found, or the manifest has no
``type`` field. Two entry points:

- ``infer_type_from_filename`` for single-file references.
- ``infer_type_from_directory`` for whole repositories or subdirectories.

Both are pure functions over names; ``infer_type_from_path`` is the thin
wrapper that lists a real directory first.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from craftlock.core.manifest.craft_type import CraftType

# Checked in order; the first substring found wins.
_NAME_HINTS: tuple[tuple[str, CraftType], ...] = (
    ("agent", CraftType.AGENT),
    ("command", CraftType.COMMAND),
    ("hook", CraftType.HOOK),
    ("skill", CraftType.SKILL),
)

# Marker files, in priority order.
_MARKER_FILES: tuple[tuple[str, CraftType], ...] = (
    ("SKILL.md", CraftType.SKILL),
    ("AGENT.md", CraftType.AGENT),
    ("COMMAND.md", CraftType.COMMAND),
    ("HOOK.md", CraftType.HOOK),
)

DEFAULT_CRAFT_TYPE = CraftType.SKILL


def infer_type_from_filename(filename: str) -> CraftType:
    """Infer a craft type from a file name such as ``rspec-agent.md``."""
    lower = filename.lower()
    for hint, craft_type in _NAME_HINTS:
        if hint in lower:
            return craft_type
    return DEFAULT_CRAFT_TYPE


def infer_type_from_directory(entries: Iterable[str], dir_name: str) -> CraftType:
    """Infer a craft type from a directory listing and the directory's name.

    Args:
        entries: File names directly inside the directory.
        dir_name: The directory's own base name.
    """
    present = set(entries)
    for marker, craft_type in _MARKER_FILES:
        if marker in present:
            return craft_type
    return infer_type_from_filename(dir_name)


def infer_type_from_path(directory: Path) -> CraftType:
    """List ``directory`` and infer its craft type."""
    if not directory.is_dir():
        return infer_type_from_filename(directory.name)
    return infer_type_from_directory(
        (entry.name for entry in directory.iterdir()), directory.name
    )
