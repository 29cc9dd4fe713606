"""
Tests for browser state reconciliation in GarageDash Client

Tests that polled listings only change the view when the set of paths
changes, and that pins and nicknames shape the display order.
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from operations import BrowserState, normalize_path
from settings import ConfigManager


def make_listing(path, *entries):
    files = []
    for entry_path, kind, size in entries:
        files.append({
            "name": entry_path.rsplit("/", 1)[-1],
            "path": entry_path,
            "kind": kind,
            "size": size,
            "last_modified": None,
            "mime_type": None,
        })
    return {"path": path, "files": files}


def test_normalize_path():
    """Test folder path normalization"""
    assert normalize_path("") == ""
    assert normalize_path(None) == ""
    assert normalize_path("/docs/") == "docs"
    assert normalize_path("docs/2024") == "docs/2024"


def test_first_listing_changes_view():
    """Test that the first listing of a folder is always applied"""
    state = BrowserState()
    state.navigate("docs")

    assert state.reconcile(make_listing("docs"))
    assert state.loaded
    assert state.entries == {}


def test_unchanged_listing_does_not_change_view():
    """Test that an identical path set is not a change, even if metadata differs"""
    state = BrowserState()
    state.navigate("docs")
    state.reconcile(make_listing("docs", ("docs/a.txt", "file", 10), ("docs/sub", "folder", 0)))
    shown = state.entries

    # Same paths, different order and a different size representation
    changed = state.reconcile(make_listing("docs/", ("docs/sub", "folder", 0), ("docs/a.txt", "file", 10.0)))

    assert not changed
    assert state.entries is shown


def test_added_or_removed_paths_change_view():
    """Test that additions and removals replace the view"""
    state = BrowserState()
    state.navigate("")
    state.reconcile(make_listing("", ("a.txt", "file", 1)))

    assert state.reconcile(make_listing("", ("a.txt", "file", 1), ("b.txt", "file", 2)))
    assert set(state.entries) == {"a.txt", "b.txt"}

    assert state.reconcile(make_listing("", ("b.txt", "file", 2)))
    assert set(state.entries) == {"b.txt"}


def test_stale_listing_is_ignored():
    """Test that a listing for a folder the user left is dropped"""
    state = BrowserState()
    state.navigate("new")

    assert not state.reconcile(make_listing("old", ("old/a.txt", "file", 1)))
    assert state.entries == {}
    assert not state.loaded


def test_navigation_and_breadcrumbs():
    """Test parent paths and breadcrumb trail"""
    state = BrowserState()
    state.navigate("/reports/2024/")

    assert state.current_path == "reports/2024"
    assert state.parent_path() == "reports"
    assert state.breadcrumbs() == [("Home", ""), ("reports", "reports"), ("2024", "reports/2024")]

    state.navigate("reports")
    assert state.parent_path() == ""


def test_sorted_entries_folders_first():
    """Test that folders come before files, names case-insensitive"""
    state = BrowserState()
    state.navigate("")
    state.reconcile(make_listing(
        "",
        ("beta.txt", "file", 1),
        ("Alpha.txt", "file", 1),
        ("zeta", "folder", 0),
    ))

    assert [e["path"] for e in state.sorted_entries()] == ["zeta", "Alpha.txt", "beta.txt"]


def test_pins_and_nicknames(tmp_path):
    """Test that pinned paths float to the top and nicknames are displayed"""
    config = ConfigManager(config_file=tmp_path / "config.json")
    config.load_config()
    config.toggle_pin("beta.txt")
    config.set_nickname("zeta", "Photos")

    state = BrowserState(config)
    state.navigate("")
    state.reconcile(make_listing(
        "",
        ("beta.txt", "file", 1),
        ("Alpha.txt", "file", 1),
        ("zeta", "folder", 0),
    ))

    ordered = state.sorted_entries()
    assert [e["path"] for e in ordered] == ["beta.txt", "zeta", "Alpha.txt"]
    assert state.display_name(ordered[1]) == "Photos"
    assert state.display_name(ordered[2]) == "Alpha.txt"
