"""Tests for PluginDependencyResolver: depth-first plugin trees with cycle errors.

Verifies:
    - Materialized plugin dependencies are walked; registry and git
      dependencies are left for other components.
    - A plugin reached again while still on the stack raises
      CircularDependencyError with the full chain.
    - A plugin reached again after it finished only gains a parent.
    - Derived views (tree, flattened map, direct/transitive lists).
    - Session state survives across calls until reset().
"""

from __future__ import annotations

from pathlib import Path

import pytest

from craftlock.core.dependency import PluginDependencyResolver
from craftlock.core.manifest import DependencyConfig
from craftlock.exceptions import (
    CircularDependencyError,
    ManifestError,
    ManifestMissingError,
    ResolutionError,
)


class TestResolve:
    def test_single_plugin(self, make_plugin, plugin_resolver) -> None:
        location = make_plugin("suite", "1.2.0", {"formatter": "^1.0.0"})
        resolved = plugin_resolver.resolve(location)
        assert list(resolved) == ["suite"]
        suite = resolved["suite"]
        assert suite.version == "1.2.0"
        assert suite.is_dependency is False
        assert suite.required_by == []
        assert suite.dependencies == {"formatter": "^1.0.0"}

    def test_materialized_dependency_is_walked(self, make_plugin, plugin_resolver) -> None:
        make_plugin("tools", "2.0.0")
        suite = make_plugin("suite", dependencies={"tools": "^2.0.0"})
        resolved = plugin_resolver.resolve(suite)
        assert list(resolved) == ["suite", "tools"]
        assert resolved["tools"].is_dependency is True
        assert resolved["tools"].required_by == ["suite"]

    def test_nested_chain(self, make_plugin, plugin_resolver) -> None:
        make_plugin("c")
        make_plugin("b", dependencies={"c": "1.0.0"})
        a = make_plugin("a", dependencies={"b": "1.0.0"})
        resolved = plugin_resolver.resolve(a)
        assert list(resolved) == ["a", "b", "c"]
        assert resolved["c"].required_by == ["b"]

    def test_explicit_parent(self, make_plugin, plugin_resolver) -> None:
        tools = make_plugin("tools")
        resolved = plugin_resolver.resolve(tools, parent_name="suite")
        assert resolved["tools"].is_dependency is True
        assert resolved["tools"].required_by == ["suite"]

    def test_sibling_lookup_without_plugins_dir(self, make_plugin) -> None:
        make_plugin("tools")
        suite = make_plugin("suite", dependencies={"tools": "1.0.0"})
        resolved = PluginDependencyResolver().resolve(suite)
        assert "tools" in resolved

    def test_git_subdirectory_dependency_is_pending(self, make_plugin, plugin_resolver) -> None:
        config = {"git": "https://example.com/mono.git", "branch": "main", "path": "plugins/x"}
        suite = make_plugin("suite", dependencies={"x": config})
        resolved = plugin_resolver.resolve(suite)
        assert list(resolved) == ["suite"]
        assert plugin_resolver.pending_git == {"x": DependencyConfig.from_dict(config)}

    def test_git_dependency_without_path_is_skipped(self, make_plugin, plugin_resolver) -> None:
        suite = make_plugin("suite", dependencies={"x": {"git": "https://example.com/x.git"}})
        plugin_resolver.resolve(suite)
        assert plugin_resolver.pending_git == {}

    def test_missing_manifest(self, tmp_path: Path, plugin_resolver) -> None:
        with pytest.raises(ManifestMissingError) as exc_info:
            plugin_resolver.resolve(tmp_path / "nope")
        assert str(exc_info.value) == f"No craftdesk.json found in plugin: {tmp_path / 'nope'}"

    def test_unreadable_manifest(self, tmp_path: Path, plugin_resolver) -> None:
        bad = tmp_path / "bad"
        bad.mkdir()
        (bad / "craftdesk.json").write_text("{ nope")
        with pytest.raises(ManifestMissingError):
            plugin_resolver.resolve(bad)

    def test_non_utf8_manifest(self, tmp_path: Path, plugin_resolver) -> None:
        bad = tmp_path / "bad"
        bad.mkdir()
        (bad / "craftdesk.json").write_bytes(b'{"name": "\xff"}')
        with pytest.raises(ManifestMissingError) as exc_info:
            plugin_resolver.resolve(bad)
        assert isinstance(exc_info.value.__cause__, ManifestError)

    def test_dependency_name_cannot_leave_plugins_dir(
        self, make_plugin, plugin_resolver, plugins_root: Path
    ) -> None:
        outside = plugins_root.parent / "outside"
        outside.mkdir()
        (outside / "craftdesk.json").write_text('{"name": "outside", "version": "1.0.0"}')
        suite = make_plugin("suite", dependencies={"../outside": "1.0.0"})
        with pytest.raises(ResolutionError, match="escapes the plugins directory"):
            plugin_resolver.resolve(suite)
        assert plugin_resolver.resolution_stack == []


class TestCycles:
    def test_three_plugin_cycle(self, make_plugin, plugin_resolver) -> None:
        make_plugin("B", dependencies={"C": "1.0.0"})
        make_plugin("C", dependencies={"A": "1.0.0"})
        a = make_plugin("A", dependencies={"B": "1.0.0"})
        with pytest.raises(CircularDependencyError) as exc_info:
            plugin_resolver.resolve(a)
        assert exc_info.value.chain == ["A", "B", "C", "A"]
        assert str(exc_info.value) == "Circular dependency detected: A → B → C → A"

    def test_self_cycle(self, make_plugin, plugin_resolver) -> None:
        a = make_plugin("A", dependencies={"A": "1.0.0"})
        with pytest.raises(CircularDependencyError) as exc_info:
            plugin_resolver.resolve(a)
        assert exc_info.value.chain == ["A", "A"]

    def test_stack_is_empty_after_error(self, make_plugin, plugin_resolver) -> None:
        make_plugin("B", dependencies={"A": "1.0.0"})
        a = make_plugin("A", dependencies={"B": "1.0.0"})
        with pytest.raises(CircularDependencyError):
            plugin_resolver.resolve(a)
        assert plugin_resolver.resolution_stack == []

    def test_stack_is_empty_after_success(self, make_plugin, plugin_resolver) -> None:
        make_plugin("B")
        plugin_resolver.resolve(make_plugin("A", dependencies={"B": "1"}))
        assert plugin_resolver.resolution_stack == []

    def test_diamond_is_not_a_cycle(self, make_plugin, plugin_resolver) -> None:
        make_plugin("D")
        make_plugin("B", dependencies={"D": "1"})
        make_plugin("C", dependencies={"D": "1"})
        a = make_plugin("A", dependencies={"B": "1", "C": "1"})
        resolved = plugin_resolver.resolve(a)
        assert list(resolved) == ["A", "B", "D", "C"]
        assert resolved["D"].required_by == ["B", "C"]


class TestSession:
    def test_shared_dependency_accumulates_parents(self, make_plugin, plugin_resolver) -> None:
        make_plugin("shared")
        p1 = make_plugin("p1", dependencies={"shared": "1"})
        p2 = make_plugin("p2", dependencies={"shared": "1"})
        plugin_resolver.resolve(p1)
        resolved = plugin_resolver.resolve(p2)
        assert list(resolved) == ["p1", "shared", "p2"]
        assert resolved["shared"].required_by == ["p1", "p2"]

    def test_already_resolved_is_not_walked_again(
        self, make_plugin, plugin_resolver, plugins_root: Path
    ) -> None:
        make_plugin("leaf")
        shared = make_plugin("shared", dependencies={"leaf": "1"})
        plugin_resolver.resolve(shared)
        # Once "shared" is known, removing its child must not matter.
        (plugins_root / "leaf" / "craftdesk.json").unlink()
        p1 = make_plugin("p1", dependencies={"shared": "1"})
        resolved = plugin_resolver.resolve(p1)
        assert resolved["leaf"].required_by == ["shared"]
        assert resolved["shared"].required_by == ["p1"]

    def test_same_parent_not_duplicated(self, make_plugin, plugin_resolver) -> None:
        tools = make_plugin("tools")
        plugin_resolver.resolve(tools, parent_name="suite")
        plugin_resolver.resolve(tools, parent_name="suite")
        assert plugin_resolver.resolve(tools)["tools"].required_by == ["suite"]

    def test_direct_plugin_stays_direct(self, make_plugin, plugin_resolver) -> None:
        tools = make_plugin("tools")
        plugin_resolver.resolve(tools)
        resolved = plugin_resolver.resolve(make_plugin("suite", dependencies={"tools": "1"}))
        assert resolved["tools"].is_dependency is False
        assert resolved["tools"].required_by == ["suite"]

    def test_reset_clears_everything(self, make_plugin, plugin_resolver) -> None:
        suite = make_plugin("suite", dependencies={
            "x": {"git": "https://example.com/m.git", "path": "x"},
        })
        plugin_resolver.resolve(suite)
        plugin_resolver.reset()
        assert plugin_resolver.build_plugin_tree() == {}
        assert plugin_resolver.pending_git == {}
        assert plugin_resolver.resolve(suite)["suite"].required_by == []

    def test_instances_do_not_share_state(self, make_plugin, plugins_root: Path) -> None:
        first = PluginDependencyResolver(plugins_root)
        second = PluginDependencyResolver(plugins_root)
        first.resolve(make_plugin("tools"))
        assert second.build_plugin_tree() == {}


class TestViews:
    def test_flattened_last_plugin_wins(self, make_plugin, plugin_resolver) -> None:
        plugin_resolver.resolve(make_plugin("P1", dependencies={"X": "1.0"}))
        plugin_resolver.resolve(make_plugin("P2", dependencies={"X": "2.0"}))
        flattened = plugin_resolver.get_flattened_dependencies()
        assert flattened["X"] == "2.0"
        assert flattened == {"P1": "1.0.0", "X": "2.0", "P2": "1.0.0"}

    def test_flattened_keeps_config_objects(self, make_plugin, plugin_resolver) -> None:
        config = {"git": "https://example.com/x.git", "tag": "v1.0.0"}
        plugin_resolver.resolve(make_plugin("P", dependencies={"x": config}))
        assert plugin_resolver.get_flattened_dependencies()["x"] == DependencyConfig.from_dict(config)

    def test_plugin_tree(self, make_plugin, plugin_resolver) -> None:
        make_plugin("tools", "2.0.0", {"formatter": "^1"})
        plugin_resolver.resolve(make_plugin("suite", dependencies={"tools": "^2"}))
        tree = plugin_resolver.build_plugin_tree()
        assert tree["suite"].dependencies == ["tools"]
        assert tree["suite"].is_dependency is False
        assert tree["tools"].version == "2.0.0"
        assert tree["tools"].dependencies == ["formatter"]
        assert tree["tools"].required_by == ["suite"]

    def test_plugin_tree_is_a_snapshot(self, make_plugin, plugin_resolver) -> None:
        plugin_resolver.resolve(make_plugin("tools"), parent_name="a")
        tree = plugin_resolver.build_plugin_tree()
        tree["tools"].required_by.append("mutated")
        assert plugin_resolver.build_plugin_tree()["tools"].required_by == ["a"]

    def test_direct_and_dependency_lists(self, make_plugin, plugin_resolver) -> None:
        make_plugin("tools")
        plugin_resolver.resolve(make_plugin("suite", dependencies={"tools": "1"}))
        assert [p.name for p in plugin_resolver.get_direct_plugins()] == ["suite"]
        assert [p.name for p in plugin_resolver.get_dependency_plugins()] == ["tools"]
