"""Tests for ``craftlock plugins``."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from craftlock.cli.main import cli


class TestPlugins:
    def test_json_tree(self, runner: CliRunner, make_plugin) -> None:
        make_plugin("tools", "2.0.0", {"formatter": "^1.0.0"})
        suite = make_plugin("suite", dependencies={"tools": "^2.0.0"})
        result = runner.invoke(cli, ["plugins", str(suite), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["pluginTree"]["tools"]["requiredBy"] == ["suite"]
        assert data["pluginTree"]["suite"]["isDependency"] is False
        assert data["flattened"]["formatter"] == "^1.0.0"
        assert data["pendingGit"] == []

    def test_shared_dependency_across_roots(self, runner: CliRunner, make_plugin) -> None:
        make_plugin("shared")
        p1 = make_plugin("p1", dependencies={"shared": "1"})
        p2 = make_plugin("p2", dependencies={"shared": "1"})
        result = runner.invoke(cli, ["plugins", str(p1), str(p2), "--json"])
        data = json.loads(result.output)
        assert data["pluginTree"]["shared"]["requiredBy"] == ["p1", "p2"]

    def test_explicit_plugins_dir(
        self, runner: CliRunner, make_plugin, plugins_root: Path, tmp_path: Path
    ) -> None:
        make_plugin("tools")
        root = tmp_path / "elsewhere" / "suite"
        root.mkdir(parents=True)
        (root / "craftdesk.json").write_text(json.dumps({
            "name": "suite", "version": "1.0.0", "dependencies": {"tools": "1"},
        }))
        result = runner.invoke(cli, [
            "plugins", str(root), "--plugins-dir", str(plugins_root), "--json",
        ])
        data = json.loads(result.output)
        assert set(data["pluginTree"]) == {"suite", "tools"}

    def test_table_output(self, runner: CliRunner, make_plugin) -> None:
        make_plugin("tools")
        suite = make_plugin("suite", dependencies={"tools": "1"})
        result = runner.invoke(cli, ["plugins", str(suite)])
        assert result.exit_code == 0
        assert "1 direct" in result.output
        assert "1 transitive" in result.output

    def test_cycle_exits_1(self, runner: CliRunner, make_plugin) -> None:
        make_plugin("B", dependencies={"A": "1"})
        a = make_plugin("A", dependencies={"B": "1"})
        result = runner.invoke(cli, ["plugins", str(a)])
        assert result.exit_code == 1
        assert "Circular dependency detected" in result.output

    def test_missing_manifest_exits_1(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["plugins", str(tmp_path)])
        assert result.exit_code == 1
        assert "No craftdesk.json found" in result.output
