"""Breadth-first resolution of a full dependency set.

``DependencyGraphResolver.resolve_all`` takes the top-level requests of a
project (registry version constraints and git coordinates mixed) and
walks them breadth-first:

- Git requests are resolved immediately through ``GitDependencyResolver``;
  the dependencies their manifests declare are appended to the back of the
  queue.
- Registry requests are recorded as pending entries. Looking them up is
  the registry client's job, after the pass.

Names are visited at most once. The first request seen for a name, in
queue order, wins; later requests for the same name are dropped without
any comparison. Breadth-first order is what makes the winner of a diamond
dependency deterministic: the shallowest request wins, and among requests
at the same depth the one declared first.

There is no cycle error here. A git manifest that depends on itself, or
two git crafts that depend on each other, simply hit the visited set.

Any error raised while resolving a git request propagates and aborts the
whole pass; there is no partial result.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from craftlock.core.git import (
    GitCoordinate,
    GitDependencyResolver,
    ResolvedGitInfo,
    looks_like_git,
    parse_git_url,
)
from craftlock.core.lockfile import GIT_MARKER, LockfileSkeleton, ResolvedEntry
from craftlock.core.manifest import (
    CraftType,
    DependencyConfig,
    dependency_to_string,
)
from craftlock.exceptions import ResolutionError

logger = logging.getLogger(__name__)

DependencyRequest = Union[str, DependencyConfig, GitCoordinate, dict]

_DEFAULT_GIT_VERSION = "0.0.0"
_DEFAULT_GIT_AUTHOR = "git"


@dataclass
class GraphResolution:
    """Output of one resolution pass.

    Attributes:
        resolved: One entry per craft name, in the order names were first
            reached.
        lockfile: Skeleton built from ``resolved``.
    """

    resolved: dict[str, ResolvedEntry]
    lockfile: LockfileSkeleton

    @property
    def pending(self) -> dict[str, ResolvedEntry]:
        """Entries waiting for the registry client."""
        return {n: e for n, e in self.resolved.items() if e.needs_resolution}


def _as_config(request: DependencyRequest) -> DependencyConfig:
    if isinstance(request, DependencyConfig):
        return request
    if isinstance(request, dict):
        return DependencyConfig.from_dict(request)
    raise TypeError(f"Unsupported dependency request: {request!r}")


def _to_git_coordinate(request: DependencyRequest) -> GitCoordinate | None:
    """Return the git coordinate of a git request, None for registry requests."""
    if isinstance(request, GitCoordinate):
        return request
    if isinstance(request, str):
        return parse_git_url(request) if looks_like_git(request) else None
    config = _as_config(request)
    if not config.is_git:
        return None
    try:
        return config.to_coordinate()
    except ValueError as exc:
        raise ResolutionError(str(exc)) from exc


def _registry_parts(request: DependencyRequest) -> tuple[str | None, str | None]:
    """Return ``(version constraint, registry override)`` of a registry request."""
    if isinstance(request, str):
        return request, None
    config = _as_config(request)
    return config.version, config.registry


def entry_from_git(info: ResolvedGitInfo) -> ResolvedEntry:
    """Build the lock entry for a resolved git source."""
    manifest = info.manifest
    return ResolvedEntry(
        version=manifest.version or info.coordinate.ref or _DEFAULT_GIT_VERSION,
        resolved=info.url,
        integrity=info.resolved_commit or GIT_MARKER,
        craft_type=manifest.type or CraftType.SKILL,
        author=manifest.author or _DEFAULT_GIT_AUTHOR,
        git=info.coordinate,
        commit=info.resolved_commit or None,
        dependencies={
            name: dependency_to_string(spec)
            for name, spec in manifest.dependencies.items()
        },
    )


class DependencyGraphResolver:
    """Resolves a set of named dependency requests, transitively.

    Args:
        git_resolver: Resolver used for git requests. Defaults to a
            ``GitDependencyResolver`` with default settings.
    """

    def __init__(self, git_resolver: GitDependencyResolver | None = None) -> None:
        self._git = git_resolver or GitDependencyResolver()

    def resolve_all(
        self,
        requests: Mapping[str, DependencyRequest] | Iterable[tuple[str, DependencyRequest]],
    ) -> GraphResolution:
        """Resolve every request and everything git sources pull in.

        Args:
            requests: ``name -> request`` mapping, or ``(name, request)``
                pairs. Pairs may repeat a name; the first one wins.

        Returns:
            A ``GraphResolution`` with the resolved map and lockfile skeleton.

        Raises:
            ResolutionError: Any git resolution failure (propagated as-is).
            ManifestError: A request object or git manifest is malformed.
        """
        pairs: Iterable[tuple[str, Any]]
        pairs = requests.items() if isinstance(requests, Mapping) else requests

        queue: deque[tuple[str, DependencyRequest]] = deque(pairs)
        visited: set[str] = set()
        resolved: dict[str, ResolvedEntry] = {}

        while queue:
            name, request = queue.popleft()
            if name in visited:
                logger.debug("Skipping %s: already resolved", name)
                continue
            # Marked before resolving so a self-referencing manifest terminates.
            visited.add(name)

            coordinate = _to_git_coordinate(request)
            if coordinate is None:
                constraint, registry = _registry_parts(request)
                resolved[name] = ResolvedEntry.pending(constraint, registry)
                logger.debug("%s@%s left for registry resolution", name, constraint or "*")
                continue

            info = self._git.resolve(coordinate)
            resolved[name] = entry_from_git(info)
            logger.debug(
                "Resolved %s from %s at %s", name, coordinate.describe(), info.short_commit
            )

            for dep_name, dep_spec in info.manifest.dependencies.items():
                if dep_name not in visited:
                    queue.append((dep_name, dep_spec))

        return GraphResolution(
            resolved=resolved,
            lockfile=LockfileSkeleton.from_resolved(resolved),
        )
