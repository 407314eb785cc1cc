"""Shared fixtures for layout tests."""

import pytest

from topoflow.core.devices import DeviceCatalog, get_catalog


@pytest.fixture
def catalog():
    """Built-in device catalog."""
    return get_catalog()


@pytest.fixture
def small_catalog():
    """Catalog with a handful of hand-written templates."""
    return DeviceCatalog.from_mapping({
        "router": {"type": "router", "label": "Router", "description": "Routes packets."},
        "switch": {"type": "switch", "label": "Switch"},
        "camera": {"type": "cctv", "label": "Camera", "size": 32},
    })

