"""craftlock exception hierarchy.

All public exceptions inherit from CraftLockError, giving callers a single
base class to catch when they want to handle any craftlock-specific failure
without swallowing unrelated errors.
"""

from __future__ import annotations


class CraftLockError(Exception):
    """Base exception for all craftlock errors."""


class ManifestError(CraftLockError):
    """Raised when a ``craftdesk.json`` manifest cannot be read.

    Covers malformed JSON, a top-level value that is not an object, and
    fields of the wrong type.
    """


class ManifestMissingError(ManifestError):
    """Raised when a plugin location has no manifest at all."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"No craftdesk.json found in plugin: {location}")


class ResolutionError(CraftLockError):
    """Raised when dependency resolution fails.

    Covers unreachable git sources, missing file references, and
    circular plugin dependencies.
    """


class SourceUnavailableError(ResolutionError):
    """Raised when a git repository cannot be fetched or checked out.

    Network failures, authentication failures, and nonexistent refs all
    surface as this error; the underlying process error is chained.
    """


class MissingFileError(ResolutionError):
    """Raised when a file reference is absent from the checked-out tree."""

    def __init__(self, file: str, url: str) -> None:
        self.file = file
        self.url = url
        super().__init__(f"File not found: {file} in {url}")


class CircularDependencyError(ResolutionError):
    """Raised when a plugin is reached again while it is still being resolved.

    Attributes:
        chain: The resolution stack followed by the repeated name, e.g.
            ``["A", "B", "C", "A"]``.
    """

    def __init__(self, chain: list[str]) -> None:
        self.chain = list(chain)
        super().__init__(
            "Circular dependency detected: " + " → ".join(self.chain)
        )


class LockfileError(CraftLockError):
    """Raised for malformed lockfile documents.

    Covers invalid JSON, a missing ``crafts`` section, and entries that
    are not objects.
    """
