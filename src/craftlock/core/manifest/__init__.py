"""Craft manifest (``craftdesk.json``) models and reader."""

from craftlock.core.manifest.craft_type import CraftType
from craftlock.core.manifest.models import (
    DependencyConfig,
    DependencySpec,
    Manifest,
    dependency_to_json,
    dependency_to_string,
    parse_dependency_map,
)
from craftlock.core.manifest.reader import (
    MANIFEST_FILENAME,
    find_manifest,
    join_within,
    load_project_dependencies,
    read_manifest,
)

__all__ = [
    "CraftType",
    "DependencyConfig",
    "DependencySpec",
    "Manifest",
    "MANIFEST_FILENAME",
    "dependency_to_json",
    "dependency_to_string",
    "find_manifest",
    "join_within",
    "load_project_dependencies",
    "parse_dependency_map",
    "read_manifest",
]
