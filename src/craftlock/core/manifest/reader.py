"""Reading ``craftdesk.json`` manifests from disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath

from craftlock.core.manifest.models import DependencySpec, Manifest
from craftlock.exceptions import ManifestError, ResolutionError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "craftdesk.json"


def read_manifest(path: Path) -> Manifest:
    """Read and parse a manifest file.

    Args:
        path: Path to a ``craftdesk.json`` file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ManifestError: If the file cannot be read, is not UTF-8, is not
            valid JSON, or is not a manifest object.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"Cannot read {path}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Invalid JSON in {path}: {exc}") from exc
    return Manifest.from_dict(data)


def find_manifest(directory: Path) -> Manifest | None:
    """Return the manifest inside ``directory``, or None if there is none."""
    candidate = directory / MANIFEST_FILENAME
    if not candidate.is_file():
        return None
    manifest = read_manifest(candidate)
    logger.debug("Found %s: %s@%s", candidate, manifest.name, manifest.version)
    return manifest


def load_project_dependencies(
    manifest: Manifest, production: bool = False
) -> dict[str, DependencySpec]:
    """Collect the top-level requests for a resolution pass.

    ``dependencies`` come first in declaration order, followed by
    ``devDependencies`` unless ``production`` is set. A dev entry with the
    same name as a runtime entry replaces its value but keeps its position.
    """
    requests: dict[str, DependencySpec] = dict(manifest.dependencies)
    if not production:
        requests.update(manifest.dev_dependencies)
    return requests


def join_within(root: Path, relative: str, scope: str = "repository") -> Path:
    """Join ``relative`` onto ``root``, refusing paths that escape it.

    Raises:
        ResolutionError: If ``relative`` is absolute or contains ``..``.
    """
    parts = PurePosixPath(relative).parts
    if PurePosixPath(relative).is_absolute() or ".." in parts:
        raise ResolutionError(f"Path {relative!r} escapes the {scope}")
    return root.joinpath(*parts)
