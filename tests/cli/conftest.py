"""Shared fixtures for CLI tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def make_project(tmp_path: Path):
    """Factory: write a project ``craftdesk.json`` and return its directory."""

    def _make(
        dependencies: dict | None = None,
        dev_dependencies: dict | None = None,
    ) -> Path:
        project = tmp_path / "project"
        project.mkdir(exist_ok=True)
        manifest = {"name": "my-project", "version": "0.1.0"}
        if dependencies is not None:
            manifest["dependencies"] = dependencies
        if dev_dependencies is not None:
            manifest["devDependencies"] = dev_dependencies
        (project / "craftdesk.json").write_text(json.dumps(manifest))
        return project

    return _make


@pytest.fixture
def patched_git(monkeypatch: pytest.MonkeyPatch, fake_git):
    """Route the resolve command's git runner to the fake runner."""
    created: list[float] = []

    def factory(timeout: float):
        created.append(timeout)
        return fake_git

    monkeypatch.setattr("craftlock.cli.resolve_cmd.GitRunner", factory)
    fake_git.created_timeouts = created
    return fake_git
