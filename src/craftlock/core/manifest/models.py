"""Manifest data models: DependencyConfig and Manifest.

These mirror the ``craftdesk.json`` document. They are pure data holders
plus the dict conversion needed to read them from JSON, so they are safe
to import from every other core module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from craftlock.core.manifest.craft_type import CraftType
from craftlock.exceptions import ManifestError

if TYPE_CHECKING:
    from craftlock.core.git.coordinates import GitCoordinate

_CONFIG_KEYS = ("version", "registry", "git", "branch", "tag", "commit", "path", "file")


@dataclass(frozen=True)
class DependencyConfig:
    """Object form of a dependency value.

    A config with ``git`` set is a git request; anything else is a registry
    request carrying an optional version constraint and registry override.
    """

    version: str | None = None
    registry: str | None = None
    git: str | None = None
    branch: str | None = None
    tag: str | None = None
    commit: str | None = None
    path: str | None = None
    file: str | None = None

    @property
    def is_git(self) -> bool:
        return bool(self.git)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DependencyConfig:
        """Build a config from a JSON object, ignoring unknown keys."""
        values: dict[str, str | None] = {}
        for key in _CONFIG_KEYS:
            raw = data.get(key)
            if raw is not None and not isinstance(raw, str):
                raise ManifestError(
                    f"Dependency field {key!r} must be a string, got {type(raw).__name__}"
                )
            values[key] = raw or None
        return cls(**values)

    def to_dict(self) -> dict[str, str]:
        return {
            key: getattr(self, key)
            for key in _CONFIG_KEYS
            if getattr(self, key) is not None
        }

    def to_coordinate(self) -> GitCoordinate:
        """Return the git coordinate for a git config.

        Raises:
            ValueError: If this is not a git config, or more than one of
                branch/tag/commit is set.
        """
        from craftlock.core.git.coordinates import GitCoordinate

        if not self.git:
            raise ValueError("Dependency config has no git URL")
        return GitCoordinate(
            url=self.git,
            branch=self.branch,
            tag=self.tag,
            commit=self.commit,
            path=self.path,
            file=self.file,
        )


DependencySpec = Union[str, DependencyConfig]


def parse_dependency_map(raw: Any, section: str = "dependencies") -> dict[str, DependencySpec]:
    """Convert a JSON dependency section into ``name -> DependencySpec``.

    Insertion order is preserved; resolution order depends on it.
    """
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ManifestError(f"{section!r} must be an object")
    deps: dict[str, DependencySpec] = {}
    for name, value in raw.items():
        if isinstance(value, str):
            deps[name] = value
        elif isinstance(value, dict):
            deps[name] = DependencyConfig.from_dict(value)
        else:
            raise ManifestError(
                f"Dependency {name!r} in {section!r} must be a string or object"
            )
    return deps


def dependency_to_string(spec: DependencySpec) -> str:
    """Render a dependency value as the single string stored in a lock entry.

    Version strings pass through. Git configs become ``git+`` coordinate
    strings; registry configs become their version constraint (``*`` when
    none was given).
    """
    if isinstance(spec, str):
        return spec
    if spec.is_git:
        return spec.to_coordinate().to_spec()
    return spec.version or "*"


def dependency_to_json(spec: DependencySpec) -> str | dict[str, str]:
    return spec if isinstance(spec, str) else spec.to_dict()


@dataclass
class Manifest:
    """A parsed or synthesized ``craftdesk.json``.

    Attributes:
        name: Craft name.
        version: Version string; empty when the document omits it.
        type: Declared craft type, or None when absent (inference applies).
        author: Author identifier, if declared.
        description: Free-text summary.
        dependencies: Runtime dependencies in declaration order.
        dev_dependencies: Development-only dependencies.
    """

    name: str
    version: str = ""
    type: CraftType | None = None
    author: str | None = None
    description: str = ""
    dependencies: dict[str, DependencySpec] = field(default_factory=dict)
    dev_dependencies: dict[str, DependencySpec] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Manifest:
        """Build a manifest from a parsed JSON document.

        Raises:
            ManifestError: If the document is not an object or a field has
                the wrong type.
        """
        if not isinstance(data, dict):
            raise ManifestError("Manifest must be a JSON object")
        name = data.get("name", "")
        version = data.get("version", "")
        if not isinstance(name, str) or not isinstance(version, str):
            raise ManifestError("Manifest 'name' and 'version' must be strings")
        author = data.get("author")
        return cls(
            name=name,
            version=version,
            type=CraftType.parse(data.get("type")),
            author=author if isinstance(author, str) else None,
            description=str(data.get("description", "") or ""),
            dependencies=parse_dependency_map(data.get("dependencies")),
            dev_dependencies=parse_dependency_map(
                data.get("devDependencies"), "devDependencies"
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "version": self.version}
        if self.type is not None:
            out["type"] = self.type.value
        if self.author:
            out["author"] = self.author
        if self.description:
            out["description"] = self.description
        out["dependencies"] = {
            name: dependency_to_json(spec) for name, spec in self.dependencies.items()
        }
        if self.dev_dependencies:
            out["devDependencies"] = {
                name: dependency_to_json(spec)
                for name, spec in self.dev_dependencies.items()
            }
        return out
