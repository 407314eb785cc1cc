"""Tests for placement constructors."""

import pytest

from topoflow.layout.placement import StackItem, place_device, stack_devices
from topoflow.models.layout_types import (
    AbsolutePosition,
    NodeOverrides,
    Point,
    RelativePosition,
)


class TestPlaceDevice:
    """Single placements."""

    def test_shorthand_relative_position(self):
        placement = place_device(
            "multilayerSwitch",
            id="core-switch",
            zone="core",
            position={"reference": "core-router", "offsetX": 10, "offsetY": 8},
        )

        assert placement.template == "multilayerSwitch"
        assert placement.id == "core-switch"
        assert placement.zone == "core"
        assert placement.position == RelativePosition(
            reference="core-router", offset_x=10, offset_y=8
        )

    def test_overrides_mapping_is_coerced(self):
        placement = place_device(
            "router",
            position={"x": 0, "y": 0},
            overrides={"label": "Edge Router", "lockX": True},
        )

        assert isinstance(placement.overrides, NodeOverrides)
        assert placement.overrides.label == "Edge Router"
        assert placement.overrides.lock_x is True

    def test_id_and_zone_are_optional(self):
        placement = place_device("router", position={"x": 1, "y": 2})

        assert placement.id is None
        assert placement.zone is None
        assert placement.overrides is None


class TestStackDevices:
    """Rows and columns of placements."""

    def test_horizontal_row(self):
        placements = stack_devices(
            "horizontal",
            [
                {"template": "accessSwitch", "id": "A"},
                {"template": "accessSwitch", "id": "B"},
                {"template": "accessSwitch", "id": "C"},
            ],
            zone="edge",
            start={"x": 0, "y": 0},
            gap=12,
        )

        assert [p.id for p in placements] == ["A", "B", "C"]
        assert [p.position for p in placements] == [
            AbsolutePosition(x=0, y=0),
            AbsolutePosition(x=12, y=0),
            AbsolutePosition(x=24, y=0),
        ]
        assert all(p.zone == "edge" for p in placements)
        assert all(p.overrides.lock_y is True for p in placements)
        assert all(p.overrides.lock_x is None for p in placements)

    def test_vertical_column_locks_x(self):
        placements = stack_devices(
            "vertical",
            [StackItem(template="server"), StackItem(template="storageArray")],
            start=Point(x=40, y=10),
            gap=30,
        )

        assert [p.position for p in placements] == [
            AbsolutePosition(x=40, y=10),
            AbsolutePosition(x=40, y=40),
        ]
        assert all(p.overrides.lock_x is True for p in placements)

    def test_default_gap(self):
        placements = stack_devices(
            "horizontal",
            [{"template": "router"}, {"template": "router"}],
            start={"x": 0, "y": 0},
        )
        assert placements[1].position.x == 12

    def test_unlocked_stack_has_no_overrides(self):
        placements = stack_devices(
            "horizontal",
            [{"template": "router"}],
            start={"x": 0, "y": 0},
            lock=False,
        )
        assert placements[0].overrides is None

    def test_item_overrides_win(self):
        placements = stack_devices(
            "horizontal",
            [{"template": "router", "overrides": {"lockY": False, "label": "Spare"}}],
            start={"x": 0, "y": 0},
        )

        assert placements[0].overrides.lock_y is False
        assert placements[0].overrides.label == "Spare"

    def test_unknown_direction_raises(self):
        with pytest.raises(ValueError, match="diagonal"):
            stack_devices("diagonal", [{"template": "router"}], start={"x": 0, "y": 0})
