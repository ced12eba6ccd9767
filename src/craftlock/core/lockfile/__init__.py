"""Craft lockfile --- reproducible installs from ``craftdesk.lock``.

The package is split into focused submodules:

- ``models``: ``ResolvedEntry`` and ``PluginTreeEntry`` data classes.
- ``lockfile``: the ``LockfileSkeleton`` class with craft management and
  serialization.
- ``operations``: deserialization (``from_dict``, ``from_json``, ``read``),
  validation, and diffing.
- ``factory``: ``from_resolved`` for building a skeleton from a resolver's
  output map.

All public names are re-exported here.
"""

from craftlock.core.lockfile.models import (
    GIT_MARKER,
    PENDING_MARKER,
    REGISTRY_MARKER,
    PluginDependencyTree,
    PluginTreeEntry,
    ResolvedEntry,
)
from craftlock.core.lockfile.lockfile import (
    LOCKFILE_FILENAME,
    LOCKFILE_FORMAT_VERSION,
    LOCKFILE_SCHEMA_VERSION,
    LockfileSkeleton,
)

# Attach operations to LockfileSkeleton as methods/classmethods
from craftlock.core.lockfile import operations as _ops
from craftlock.core.lockfile import factory as _factory

LockfileSkeleton.from_dict = classmethod(_ops._from_dict)
LockfileSkeleton.from_json = classmethod(_ops._from_json)
LockfileSkeleton.read = classmethod(_ops._read)
LockfileSkeleton.validate = _ops._validate
LockfileSkeleton.diff = _ops._diff
LockfileSkeleton.from_resolved = classmethod(_factory._from_resolved)

__all__ = [
    "GIT_MARKER",
    "LOCKFILE_FILENAME",
    "LOCKFILE_FORMAT_VERSION",
    "LOCKFILE_SCHEMA_VERSION",
    "LockfileSkeleton",
    "PENDING_MARKER",
    "PluginDependencyTree",
    "PluginTreeEntry",
    "REGISTRY_MARKER",
    "ResolvedEntry",
]
