"""Resolution of a single git dependency into concrete metadata.

``GitDependencyResolver.resolve`` turns a ``GitCoordinate`` into a
``ResolvedGitInfo``: the exact commit that was checked out, and the
manifest describing the craft found there (read from the repository, or
synthesized when the repository has none).

Process:

1. Shallow clone at the requested branch or tag (default branch otherwise).
2. For a commit request, unshallow and check out that commit.
3. ``HEAD`` is recorded as the resolved commit. Branches and tags are
   mutable pointers, so the lockfile always pins the concrete commit.
4. Locate the manifest: beside a referenced file, then at the repository
   root; or inside the subpath; or at the root.
5. Fill gaps: an explicit manifest ``type`` always wins, inference runs
   otherwise; missing manifests are synthesized.

The clone lives in a temporary directory that is removed on every exit
path, including errors and interrupts.
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from craftlock.core.git.coordinates import GitCoordinate, is_full_commit_hash
from craftlock.core.git.inference import (
    infer_type_from_directory,
    infer_type_from_filename,
)
from craftlock.core.git.runner import GitRunner
from craftlock.core.manifest import CraftType, Manifest, find_manifest, join_within
from craftlock.exceptions import MissingFileError, SourceUnavailableError

logger = logging.getLogger(__name__)

_SHORT_COMMIT_LENGTH = 7


@dataclass(frozen=True)
class ResolvedGitInfo:
    """A git coordinate after a successful resolve.

    Attributes:
        coordinate: The coordinate that was requested.
        resolved_commit: Full 40-character hash of the checked-out commit.
        manifest: Manifest read from the source, or synthesized.
    """

    coordinate: GitCoordinate
    resolved_commit: str
    manifest: Manifest

    @property
    def url(self) -> str:
        return self.coordinate.url

    @property
    def short_commit(self) -> str:
        return self.resolved_commit[:_SHORT_COMMIT_LENGTH]


class GitDependencyResolver:
    """Resolves git coordinates by cloning them into a scratch directory.

    Args:
        runner: Git command runner. Defaults to a ``GitRunner`` using the
            ``git`` found on PATH.
        temp_root: Parent directory for scratch clones. Defaults to the
            system temporary directory.
    """

    def __init__(
        self,
        runner: GitRunner | None = None,
        temp_root: Path | None = None,
    ) -> None:
        self._runner = runner or GitRunner()
        self._temp_root = temp_root

    def resolve(self, coordinate: GitCoordinate) -> ResolvedGitInfo:
        """Resolve one git dependency.

        Raises:
            SourceUnavailableError: Clone, fetch or checkout failed, or HEAD
                is not a full commit hash.
            MissingFileError: The referenced file is not in the checkout.
            ManifestError: A manifest exists but is malformed.
        """
        if self._temp_root is not None:
            self._temp_root.mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory(
            prefix="craftlock-git-", dir=self._temp_root
        ) as scratch:
            checkout = Path(scratch) / "checkout"
            logger.debug("Cloning %s to analyze dependencies", coordinate.describe())
            resolved_commit = self._checkout(coordinate, checkout)

            if coordinate.file:
                manifest = self._manifest_for_file(coordinate, checkout, resolved_commit)
            else:
                manifest = self._manifest_for_directory(
                    coordinate, checkout, resolved_commit
                )

        return ResolvedGitInfo(
            coordinate=coordinate,
            resolved_commit=resolved_commit,
            manifest=manifest,
        )

    # -- Checkout -------------------------------------------------------------

    def _checkout(self, coordinate: GitCoordinate, checkout: Path) -> str:
        self._runner.clone(coordinate.url, checkout, coordinate.branch or coordinate.tag)

        if coordinate.commit:
            # A depth-1 clone only has the tip; deepen before checking out.
            self._runner.unshallow(checkout)
            self._runner.checkout(checkout, coordinate.commit)

        head = self._runner.head_commit(checkout).lower()
        if not is_full_commit_hash(head):
            raise SourceUnavailableError(
                f"Could not determine commit for {coordinate.describe()}: got {head!r}"
            )
        return head

    # -- Manifest discovery ---------------------------------------------------

    def _manifest_for_file(
        self, coordinate: GitCoordinate, checkout: Path, resolved_commit: str
    ) -> Manifest:
        file_ref = coordinate.file or ""
        file_path = join_within(checkout, file_ref)
        if not file_path.is_file():
            raise MissingFileError(file_ref, coordinate.url)
        logger.debug("Found direct file reference: %s", file_ref)

        found = find_manifest(file_path.parent)
        if found is None and file_path.parent != checkout:
            found = find_manifest(checkout)

        craft_type = found.type if found is not None else None
        if craft_type is None:
            craft_type = infer_type_from_filename(file_path.name)

        return Manifest(
            name=(found.name if found else "") or file_path.stem,
            version=(found.version if found else "")
            or self._fallback_version(coordinate, resolved_commit),
            type=craft_type,
            author=found.author if found else None,
            description=f"Git file dependency from {coordinate.url}/{file_ref}",
            dependencies=dict(found.dependencies) if found else {},
        )

    def _manifest_for_directory(
        self, coordinate: GitCoordinate, checkout: Path, resolved_commit: str
    ) -> Manifest:
        subpath = coordinate.subpath
        directory = join_within(checkout, subpath) if subpath else checkout
        dir_name = PurePosixPath(subpath).name if subpath else coordinate.name

        found = find_manifest(directory) if directory.is_dir() else None
        if found is not None:
            if found.type is None:
                found.type = self._infer_directory_type(directory, dir_name)
            return found

        logger.warning("No craftdesk.json found in %s", coordinate.describe())
        return Manifest(
            name=coordinate.name,
            version=self._fallback_version(coordinate, resolved_commit),
            type=self._infer_directory_type(directory, dir_name),
            description=f"Git dependency from {coordinate.url}",
        )

    @staticmethod
    def _infer_directory_type(directory: Path, dir_name: str) -> CraftType:
        entries = [e.name for e in directory.iterdir()] if directory.is_dir() else []
        return infer_type_from_directory(entries, dir_name)

    @staticmethod
    def _fallback_version(coordinate: GitCoordinate, resolved_commit: str) -> str:
        return (
            coordinate.tag
            or coordinate.branch
            or resolved_commit[:_SHORT_COMMIT_LENGTH]
        )
