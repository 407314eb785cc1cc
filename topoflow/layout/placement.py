"""Placement constructors for blueprint authoring.

Usage:
    from topoflow.layout.placement import place_device, stack_devices

    nodes = [
        *stack_devices(
            "horizontal",
            [
                {"template": "internetGateway", "id": "isp"},
                {"template": "router", "id": "edge-modem"},
            ],
            zone="edge",
            start={"x": 0, "y": 0},
            gap=14,
        ),
        place_device(
            "multilayerSwitch",
            id="core-switch",
            zone="core",
            position={"reference": "core-router", "offsetX": 10, "offsetY": 8},
        ),
    ]
"""

from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Union

from pydantic import BaseModel

from topoflow.layout.positioning import normalise_position
from topoflow.models.layout_types import (
    DevicePlacement,
    LayoutModel,
    NodeOverrides,
    Point,
)

StackDirection = Literal["horizontal", "vertical"]

OverridesInput = Optional[Union[NodeOverrides, Mapping[str, Any]]]


class StackItem(LayoutModel):
    """One device in a stacked row or column."""

    template: str
    id: Optional[str] = None
    overrides: Optional[NodeOverrides] = None


def _coerce_overrides(overrides: OverridesInput) -> Optional[NodeOverrides]:
    if overrides is None or isinstance(overrides, NodeOverrides):
        return overrides
    return NodeOverrides.model_validate(overrides)


def place_device(
    template: str,
    *,
    position: Any,
    id: Optional[str] = None,
    zone: Optional[str] = None,
    overrides: OverridesInput = None,
) -> DevicePlacement:
    """Build one placement, normalising the position shorthand."""
    return DevicePlacement(
        template=template,
        id=id,
        zone=zone,
        overrides=_coerce_overrides(overrides),
        position=normalise_position(position),
    )


def stack_devices(
    direction: StackDirection,
    items: Sequence[Union[StackItem, Mapping[str, Any]]],
    *,
    start: Union[Point, Mapping[str, float]],
    zone: Optional[str] = None,
    gap: float = 12,
    lock: bool = True,
) -> List[DevicePlacement]:
    """Place devices in an evenly spaced row or column.

    Item ``i`` sits at ``start + i * gap`` along the stacking axis; the other
    axis stays at the start value. With ``lock`` set, every placement is
    tagged with a lock on the perpendicular axis (``lock_y`` for a row,
    ``lock_x`` for a column) so overlap separation keeps the row or column
    straight. Explicit lock overrides on an item win.

    Raises:
        ValueError: If direction is not "horizontal" or "vertical"
    """
    if direction not in ("horizontal", "vertical"):
        raise ValueError(
            f"Unknown stack direction: '{direction}'. Expected 'horizontal' or 'vertical'"
        )

    if not isinstance(start, BaseModel):
        start = Point.model_validate(start)

    placements = []
    for index, raw in enumerate(items):
        item = raw if isinstance(raw, StackItem) else StackItem.model_validate(raw)

        overrides: Dict[str, Any] = {}
        if lock:
            overrides["lock_y" if direction == "horizontal" else "lock_x"] = True
        if item.overrides is not None:
            overrides.update(item.overrides.model_dump(exclude_none=True))

        placements.append(place_device(
            item.template,
            id=item.id,
            zone=zone,
            overrides=overrides or None,
            position={
                "x": start.x + (index * gap if direction == "horizontal" else 0),
                "y": start.y + (index * gap if direction == "vertical" else 0),
            },
        ))

    return placements
