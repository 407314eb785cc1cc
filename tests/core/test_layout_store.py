"""
Tests for LayoutStore - etag-versioned storage of resolved layouts

Tests cover:
1. Save / get / delete / listing
2. Copy semantics
3. Optimistic concurrency on update
4. File persistence under {project}/layouts/
5. Thread safety
"""

import json
import threading

import pytest

from topoflow.core.layout_store import (
    LayoutNotFoundError,
    LayoutStore,
    OptimisticLockError,
)
from topoflow.layout.builder import instantiate_layout
from topoflow.layout.placement import place_device
from topoflow.models.layout_types import LayoutBlueprint


# ============================================================================
# Test Fixtures
# ============================================================================

@pytest.fixture
def store():
    """Create a fresh layout store."""
    return LayoutStore()


@pytest.fixture
def layout():
    """Resolved two-node layout."""
    return instantiate_layout(LayoutBlueprint(nodes=[
        place_device("router", id="r1", position={"x": 0, "y": 0}),
        place_device("accessSwitch", id="s1", position={"x": 300, "y": 0}),
    ]))


# ============================================================================
# CRUD
# ============================================================================

class TestCrud:
    """Basic storage operations."""

    def test_save_generates_id(self, store, layout):
        layout_id = store.save(layout)

        assert layout_id.startswith("layout_")
        assert len(layout_id) == len("layout_") + 12
        assert store.exists(layout_id)

    def test_save_with_explicit_id(self, store, layout):
        assert store.save(layout, layout_id="campus") == "campus"
        assert store.list_ids() == ["campus"]

    def test_save_duplicate_id_raises(self, store, layout):
        store.save(layout, layout_id="campus")

        with pytest.raises(KeyError, match="already exists"):
            store.save(layout, layout_id="campus")

    def test_record_bookkeeping(self, store, layout):
        layout_id = store.save(layout)
        record = store.get_record(layout_id)

        assert record.version == 1
        assert record.etag == layout.compute_etag()
        assert record.created_at == record.updated_at

    def test_get_returns_copy(self, store, layout):
        layout_id = store.save(layout)
        copy = store.get(layout_id)
        copy.get_node("r1").label = "Changed"

        assert store.get(layout_id).get_node("r1").label == "Router"

    def test_saved_value_is_detached_from_caller(self, store, layout):
        layout_id = store.save(layout)
        layout.get_node("r1").label = "Changed"

        assert store.get(layout_id).get_node("r1").label == "Router"

    def test_get_live_reference(self, store, layout):
        layout_id = store.save(layout)
        assert store.get(layout_id, copy=False) is store.get(layout_id, copy=False)

    def test_get_missing_raises(self, store):
        with pytest.raises(LayoutNotFoundError) as exc_info:
            store.get("nope")

        assert exc_info.value.layout_id == "nope"

    def test_delete(self, store, layout):
        layout_id = store.save(layout)

        assert store.delete(layout_id) is True
        assert store.delete(layout_id) is False
        assert not store.exists(layout_id)

    def test_clear(self, store, layout):
        store.save(layout)
        store.save(layout)

        assert store.clear() == 2
        assert store.list_ids() == []


# ============================================================================
# Optimistic concurrency
# ============================================================================

class TestUpdate:
    """Etag-checked replacement."""

    def test_update_bumps_version_and_etag(self, store, layout):
        layout_id = store.save(layout)
        original = store.get_record(layout_id)

        edited = store.get(layout_id)
        edited.get_node("s1").label = "Floor 2 Switch"
        new_etag = store.update(layout_id, edited, expected_etag=original.etag)

        record = store.get_record(layout_id)
        assert record.version == 2
        assert record.etag == new_etag
        assert new_etag != original.etag
        assert record.created_at == original.created_at

    def test_stale_etag_raises(self, store, layout):
        layout_id = store.save(layout)
        stale = store.get_record(layout_id).etag

        edited = store.get(layout_id)
        edited.get_node("s1").label = "First edit"
        store.update(layout_id, edited, expected_etag=stale)

        with pytest.raises(OptimisticLockError) as exc_info:
            store.update(layout_id, edited, expected_etag=stale)

        assert exc_info.value.expected_etag == stale
        assert exc_info.value.actual_etag == store.get_record(layout_id).etag

    def test_update_without_etag(self, store, layout):
        layout_id = store.save(layout)
        store.update(layout_id, layout)

        assert store.get_record(layout_id).version == 2

    def test_update_missing_raises(self, store, layout):
        with pytest.raises(LayoutNotFoundError):
            store.update("nope", layout)


# ============================================================================
# File persistence
# ============================================================================

class TestFilePersistence:
    """JSON files inside a project directory."""

    def test_save_to_file_location(self, store, layout, tmp_path):
        layout_id = store.save(layout)
        path = store.save_to_file(layout_id, str(tmp_path), "main")

        assert path == tmp_path / "layouts" / "main.layout.json"
        data = json.loads(path.read_text())
        assert list(data) == sorted(data)
        assert data["nodes"][0]["id"] == "r1"

    def test_repeated_saves_are_identical(self, store, layout, tmp_path):
        layout_id = store.save(layout)
        first = store.save_to_file(layout_id, str(tmp_path), "main").read_text()
        second = store.save_to_file(layout_id, str(tmp_path), "main").read_text()

        assert first == second

    def test_load_from_file(self, store, layout, tmp_path):
        layout_id = store.save(layout)
        store.save_to_file(layout_id, str(tmp_path), "main")

        fresh = LayoutStore()
        loaded_id = fresh.load_from_file(str(tmp_path), "main")

        assert loaded_id == "loaded_main"
        assert fresh.get(loaded_id) == layout
        assert fresh.get_record(loaded_id).etag == store.get_record(layout_id).etag

    def test_load_replaces_existing(self, store, layout, tmp_path):
        layout_id = store.save(layout, layout_id="campus")
        store.save_to_file(layout_id, str(tmp_path), "main")

        store.load_from_file(str(tmp_path), "main", layout_id="campus")

        assert store.get_record("campus").version == 2

    def test_load_missing_file(self, store, tmp_path):
        with pytest.raises(FileNotFoundError):
            store.load_from_file(str(tmp_path), "missing")

    def test_save_missing_layout(self, store, tmp_path):
        with pytest.raises(LayoutNotFoundError):
            store.save_to_file("nope", str(tmp_path), "main")


# ============================================================================
# Thread safety
# ============================================================================

def test_concurrent_saves(store, layout):
    """Parallel saves never lose a layout."""
    def worker():
        for _ in range(20):
            store.save(layout)

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(store.list_ids()) == 100


# ============================================================================
# Package Boundary
# ============================================================================

class TestOptionalUtility:
    """The store sits beside the engine, not inside it."""

    def test_not_reexported_by_packages(self):
        import topoflow
        import topoflow.core

        assert "LayoutStore" not in topoflow.core.__all__
        assert not hasattr(topoflow.core, "LayoutStore")
        assert not hasattr(topoflow, "LayoutStore")

    def test_engine_does_not_reference_store(self):
        import topoflow.layout.builder as builder

        assert not hasattr(builder, "LayoutStore")
        assert not hasattr(builder, "layout_store")
