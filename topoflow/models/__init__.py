"""Pydantic schemas for blueprints and resolved layouts."""

from .layout_types import (
    AbsolutePosition,
    AxisSpacing,
    BoundingBox,
    CanvasMetrics,
    CanvasSettings,
    ComputedZone,
    DevicePlacement,
    DeviceTemplate,
    FlowLayout,
    LayoutBlueprint,
    LayoutSettings,
    Link,
    NodeInstance,
    NodeNetworkProfile,
    NodeOverrides,
    Point,
    RelativePosition,
    Spacing,
    ZoneDefinition,
)

__all__ = [
    # Geometry
    "Point",
    "Spacing",
    "AxisSpacing",
    "BoundingBox",
    # Blueprint
    "AbsolutePosition",
    "RelativePosition",
    "DeviceTemplate",
    "NodeNetworkProfile",
    "NodeOverrides",
    "DevicePlacement",
    "ZoneDefinition",
    "Link",
    "CanvasSettings",
    "LayoutSettings",
    "LayoutBlueprint",
    # Output
    "NodeInstance",
    "ComputedZone",
    "CanvasMetrics",
    "FlowLayout",
]
