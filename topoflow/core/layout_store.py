"""Layout Store Module - optional storage for resolved layouts.

This is a utility for callers that cache layouts between renders. The
layout engine never imports it and instantiate_layout() works without it.

Resolved layouts are cheap to recompute but renderers cache and diff them,
so the store keeps:
- An in-memory map of FlowLayout values keyed by layout id
- An etag per layout (FlowLayout.compute_etag) for optimistic concurrency
- JSON files under a project directory: {project}/layouts/{name}.layout.json

Usage:
    from topoflow.core.layout_store import LayoutStore

    store = LayoutStore()
    layout_id = store.save(instantiate_layout(blueprint))

    current = store.get_record(layout_id)
    store.update(layout_id, instantiate_layout(edited), expected_etag=current.etag)

    store.save_to_file(layout_id, project_path="/projects/campus", name="main")
    loaded_id = store.load_from_file(project_path="/projects/campus", name="main")
"""

import json
import logging
import threading
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from topoflow.models.layout_types import FlowLayout

logger = logging.getLogger(__name__)

LAYOUT_DIR = "layouts"
LAYOUT_SUFFIX = ".layout.json"


class OptimisticLockError(Exception):
    """Raised when etag mismatch indicates concurrent modification."""

    def __init__(self, layout_id: str, expected_etag: str, actual_etag: str):
        self.layout_id = layout_id
        self.expected_etag = expected_etag
        self.actual_etag = actual_etag
        super().__init__(
            f"Layout {layout_id} was modified (expected etag {expected_etag[:8]}..., "
            f"got {actual_etag[:8]}...)"
        )


class LayoutNotFoundError(KeyError):
    """Raised when layout is not found in store."""

    def __init__(self, layout_id: str):
        self.layout_id = layout_id
        super().__init__(f"Layout {layout_id} not found")


@dataclass(frozen=True)
class StoredLayout:
    """A layout plus its bookkeeping."""
    layout_id: str
    layout: FlowLayout
    etag: str
    version: int
    created_at: str
    updated_at: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class LayoutStore:
    """Thread-safe storage for resolved layouts with file persistence.

    Stored layouts are copies; callers never share mutable state with the
    store unless they ask for a live reference.
    """

    def __init__(self):
        self._records: Dict[str, StoredLayout] = {}
        self._lock = threading.RLock()

    def save(self, layout: FlowLayout, layout_id: Optional[str] = None) -> str:
        """Save a new layout.

        Args:
            layout: Resolved layout
            layout_id: Optional ID (auto-generated if not provided)

        Returns:
            Layout ID

        Raises:
            KeyError: If layout_id already exists
        """
        with self._lock:
            if layout_id is None:
                layout_id = f"layout_{uuid.uuid4().hex[:12]}"

            if layout_id in self._records:
                raise KeyError(f"Layout {layout_id} already exists. Use update() instead.")

            stored = layout.model_copy(deep=True)
            now = _now()
            record = StoredLayout(
                layout_id=layout_id,
                layout=stored,
                etag=stored.compute_etag(),
                version=1,
                created_at=now,
                updated_at=now,
            )
            self._records[layout_id] = record
            logger.debug(f"Saved layout {layout_id} (etag: {record.etag[:8]}...)")

            return layout_id

    def get(self, layout_id: str, copy: bool = True) -> FlowLayout:
        """Retrieve a layout by ID.

        Args:
            layout_id: Layout identifier
            copy: If True (default), return deep copy. If False, return live reference.

        Raises:
            LayoutNotFoundError: If layout not found
        """
        record = self.get_record(layout_id)
        return record.layout.model_copy(deep=True) if copy else record.layout

    def get_record(self, layout_id: str) -> StoredLayout:
        """Retrieve a layout with its etag and version.

        Raises:
            LayoutNotFoundError: If layout not found
        """
        with self._lock:
            if layout_id not in self._records:
                raise LayoutNotFoundError(layout_id)
            return self._records[layout_id]

    def update(
        self,
        layout_id: str,
        layout: FlowLayout,
        expected_etag: Optional[str] = None,
    ) -> str:
        """Replace a stored layout with optimistic concurrency control.

        Args:
            layout_id: Layout identifier
            layout: New layout value
            expected_etag: If provided, update fails if current etag doesn't match

        Returns:
            New etag after update

        Raises:
            LayoutNotFoundError: If layout not found
            OptimisticLockError: If expected_etag doesn't match current etag
        """
        with self._lock:
            current = self.get_record(layout_id)

            if expected_etag is not None and current.etag != expected_etag:
                raise OptimisticLockError(layout_id, expected_etag, current.etag)

            stored = layout.model_copy(deep=True)
            record = replace(
                current,
                layout=stored,
                etag=stored.compute_etag(),
                version=current.version + 1,
                updated_at=_now(),
            )
            self._records[layout_id] = record
            logger.debug(
                f"Updated layout {layout_id} v{record.version} (etag: {record.etag[:8]}...)"
            )

            return record.etag

    def delete(self, layout_id: str) -> bool:
        """Delete a layout. Returns False if it was not stored."""
        with self._lock:
            if layout_id not in self._records:
                return False

            del self._records[layout_id]
            logger.debug(f"Deleted layout {layout_id}")
            return True

    def exists(self, layout_id: str) -> bool:
        with self._lock:
            return layout_id in self._records

    def list_ids(self) -> List[str]:
        """Layout IDs in insertion order."""
        with self._lock:
            return list(self._records.keys())

    def clear(self) -> int:
        """Remove all layouts, returning how many were removed."""
        with self._lock:
            count = len(self._records)
            self._records.clear()
            logger.debug(f"Cleared {count} layouts from store")
            return count

    # =========================================================================
    # File Persistence
    # =========================================================================

    @staticmethod
    def layout_path(project_path: str, name: str) -> Path:
        """Location of a named layout file inside a project."""
        return Path(project_path) / LAYOUT_DIR / f"{name}{LAYOUT_SUFFIX}"

    def save_to_file(self, layout_id: str, project_path: str, name: str) -> Path:
        """Write a stored layout to ``{project_path}/layouts/{name}.layout.json``.

        Keys are sorted so repeated saves of the same layout give identical
        files.

        Raises:
            LayoutNotFoundError: If layout not found
        """
        layout = self.get(layout_id, copy=False)
        file_path = self.layout_path(project_path, name)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w") as f:
            json.dump(layout.to_dict(), f, indent=2, sort_keys=True)

        logger.info(f"Saved layout to {file_path}")
        return file_path

    def load_from_file(
        self,
        project_path: str,
        name: str,
        layout_id: Optional[str] = None,
    ) -> str:
        """Load a layout file into the store.

        An existing layout with the same id is replaced without an etag check.

        Args:
            project_path: Path to project root
            name: Layout name (without suffix)
            layout_id: Store ID; defaults to ``loaded_{name}``

        Returns:
            Layout ID in store

        Raises:
            FileNotFoundError: If layout file not found
        """
        file_path = self.layout_path(project_path, name)
        if not file_path.exists():
            raise FileNotFoundError(f"Layout file not found: {file_path}")

        with open(file_path) as f:
            layout = FlowLayout.from_dict(json.load(f))

        if layout_id is None:
            layout_id = f"loaded_{name}"

        with self._lock:
            if layout_id in self._records:
                self.update(layout_id, layout)
                logger.debug(f"Updated layout {layout_id} from file")
            else:
                self.save(layout, layout_id=layout_id)
                logger.debug(f"Loaded layout {layout_id} from file")

        return layout_id


__all__ = [
    "LayoutStore",
    "StoredLayout",
    "LayoutNotFoundError",
    "OptimisticLockError",
]
