"""Layout module: blueprint authoring helpers and the layout instantiator."""

from topoflow.layout.builder import instantiate_layout
from topoflow.layout.placement import StackItem, place_device, stack_devices
from topoflow.layout.positioning import normalise_position, resolve_absolute

__all__ = [
    "instantiate_layout",
    "place_device",
    "stack_devices",
    "StackItem",
    "normalise_position",
    "resolve_absolute",
]
