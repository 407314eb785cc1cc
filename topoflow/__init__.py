"""topoflow - network topology blueprint layout engine.

Authors describe a network as device placements inside named zones plus the
links between them; instantiate_layout() resolves that blueprint into a
FlowLayout with final node coordinates, zone boxes and canvas metrics.
"""

from topoflow.core.devices import DeviceCatalog, get_catalog
from topoflow.core.errors import (
    ConfigurationError,
    ReferenceNotFoundError,
    TemplateNotFoundError,
    ZoneNotFoundError,
)
from topoflow.layout.builder import instantiate_layout
from topoflow.layout.placement import StackItem, place_device, stack_devices
from topoflow.layout.positioning import normalise_position, resolve_absolute
from topoflow.layout.spacing import normalise_axis_spacing, normalise_spacing
from topoflow.models.layout_types import (
    CanvasMetrics,
    ComputedZone,
    DevicePlacement,
    FlowLayout,
    LayoutBlueprint,
    LayoutSettings,
    Link,
    NodeInstance,
    ZoneDefinition,
)

__version__ = "0.1.0"

__all__ = [
    "instantiate_layout",
    "place_device",
    "stack_devices",
    "StackItem",
    "normalise_position",
    "resolve_absolute",
    "normalise_spacing",
    "normalise_axis_spacing",
    "DeviceCatalog",
    "get_catalog",
    "ConfigurationError",
    "TemplateNotFoundError",
    "ZoneNotFoundError",
    "ReferenceNotFoundError",
    "LayoutBlueprint",
    "LayoutSettings",
    "DevicePlacement",
    "ZoneDefinition",
    "Link",
    "FlowLayout",
    "NodeInstance",
    "ComputedZone",
    "CanvasMetrics",
]
