"""Shared fixtures for craftlock tests.

Git is never spawned here. ``FakeGitRunner`` stands in for ``GitRunner``:
a "clone" writes a registered file tree into the destination directory,
and HEAD is a fixed 40-character hash per repository.
"""

from __future__ import annotations

import hashlib
import json
import pathlib
from typing import Any

import pytest

from craftlock.core.dependency import DependencyGraphResolver, PluginDependencyResolver
from craftlock.core.git import GitDependencyResolver, GitRunner
from craftlock.exceptions import SourceUnavailableError


def fake_commit(seed: str) -> str:
    """Deterministic 40-hex commit hash for ``seed``."""
    return hashlib.sha1(seed.encode("utf-8")).hexdigest()


def write_tree(root: pathlib.Path, files: dict[str, Any]) -> None:
    """Write ``relative path -> content`` into ``root``.

    Dict contents are dumped as JSON, so manifests can be given as dicts.
    Bytes are written as-is.
    """
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
            continue
        if isinstance(content, dict):
            content = json.dumps(content)
        target.write_text(content, encoding="utf-8")


class FakeGitRunner(GitRunner):
    """In-memory git: repositories are registered file trees."""

    def __init__(self) -> None:
        super().__init__(executable="git-not-used")
        self._repos: dict[tuple[str, str | None], tuple[dict[str, Any], str]] = {}
        self._heads: dict[pathlib.Path, str] = {}
        self.calls: list[tuple[str, ...]] = []
        self.clone_dirs: list[pathlib.Path] = []
        self.head_override: str | None = None

    def add_repo(
        self,
        url: str,
        files: dict[str, Any],
        ref: str | None = None,
        commit: str | None = None,
    ) -> str:
        """Register a repository (or one ref of it); returns its HEAD hash."""
        head = commit or fake_commit(f"{url}#{ref or ''}")
        self._repos[(url, ref)] = (files, head)
        return head

    def run(self, args: list[str], cwd: pathlib.Path | None = None) -> str:
        raise AssertionError(f"unexpected git invocation: {args}")

    def clone(self, url: str, dest: pathlib.Path, ref: str | None = None) -> None:
        self.calls.append(("clone", url, ref or ""))
        self.clone_dirs.append(dest)
        repo = self._repos.get((url, ref)) or self._repos.get((url, None))
        if repo is None:
            raise SourceUnavailableError(f"git clone failed (exit 128): {url} not found")
        files, head = repo
        dest.mkdir(parents=True)
        write_tree(dest, files)
        self._heads[dest] = head

    def unshallow(self, repo: pathlib.Path) -> None:
        self.calls.append(("fetch", "--unshallow"))

    def checkout(self, repo: pathlib.Path, commit: str) -> None:
        self.calls.append(("checkout", commit))
        self._heads[repo] = commit

    def head_commit(self, repo: pathlib.Path) -> str:
        if self.head_override is not None:
            return self.head_override
        return self._heads[repo]


@pytest.fixture
def fake_git() -> FakeGitRunner:
    return FakeGitRunner()


@pytest.fixture
def scratch_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """Parent directory for temporary clones; empty after every resolve."""
    return tmp_path / "scratch"


@pytest.fixture
def git_resolver(
    fake_git: FakeGitRunner, scratch_dir: pathlib.Path
) -> GitDependencyResolver:
    return GitDependencyResolver(runner=fake_git, temp_root=scratch_dir)


@pytest.fixture
def graph_resolver(git_resolver: GitDependencyResolver) -> DependencyGraphResolver:
    return DependencyGraphResolver(git_resolver)


@pytest.fixture
def plugins_root(tmp_path: pathlib.Path) -> pathlib.Path:
    root = tmp_path / "plugins"
    root.mkdir()
    return root


@pytest.fixture
def make_plugin(plugins_root: pathlib.Path):
    """Factory: write ``plugins/<name>/craftdesk.json`` and return the dir."""

    def _make(
        name: str,
        version: str = "1.0.0",
        dependencies: dict[str, Any] | None = None,
    ) -> pathlib.Path:
        plugin_dir = plugins_root / name
        write_tree(plugin_dir, {
            "craftdesk.json": {
                "name": name,
                "version": version,
                "type": "plugin",
                "dependencies": dependencies or {},
            },
        })
        return plugin_dir

    return _make


@pytest.fixture
def plugin_resolver(plugins_root: pathlib.Path) -> PluginDependencyResolver:
    return PluginDependencyResolver(plugins_dir=plugins_root)
