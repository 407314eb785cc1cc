"""Position normalisation and resolution.

Authors position a device either with absolute coordinates or relative to a
node or zone placed earlier. normalise_position() turns the many shorthand
spellings into one tagged form; resolve_absolute() turns a tagged position
into coordinates once its reference is known.
"""

import logging
from typing import Any, Mapping, Optional, Protocol

from topoflow.core.errors import ReferenceNotFoundError
from topoflow.models.layout_types import AbsolutePosition, Point, RelativePosition

logger = logging.getLogger(__name__)

_REFERENCE_KEYS = ("reference", "relativeTo", "relative_to")


class HasPosition(Protocol):
    x: float
    y: float


def _first(raw: Mapping[str, Any], *keys: str) -> Optional[Any]:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def normalise_position(raw: Any):
    """Convert author shorthand into an AbsolutePosition or RelativePosition.

    Accepted shapes:
        {"reference": "core-router", "offsetX": 10, "offsetY": 8}
        {"relativeTo": "edge", "x": 10}          # x/y act as offsets
        {"x": 0, "y": 24}                          # absolute
        {"offsetX": 0, "offsetY": 0}               # absolute, offsets as x/y

    Omitted coordinates and offsets default to 0. Position models are
    returned unchanged.

    Raises:
        TypeError: If raw is neither a mapping nor a position model
    """
    if isinstance(raw, (AbsolutePosition, RelativePosition)):
        return raw

    if not isinstance(raw, Mapping):
        raise TypeError(f"Position must be a mapping, got {type(raw).__name__}")

    reference = _first(raw, *_REFERENCE_KEYS)
    if reference is not None or raw.get("kind") == "relative":
        return RelativePosition(
            reference=reference,
            offset_x=_first(raw, "offsetX", "offset_x", "x") or 0,
            offset_y=_first(raw, "offsetY", "offset_y", "y") or 0,
        )

    return AbsolutePosition(
        x=_first(raw, "x", "offsetX", "offset_x") or 0,
        y=_first(raw, "y", "offsetY", "offset_y") or 0,
    )


def resolve_absolute(
    position,
    nodes_by_id: Mapping[str, HasPosition],
    zone_anchors_by_id: Mapping[str, HasPosition],
) -> Point:
    """Resolve a position to absolute coordinates.

    Relative references are looked up among resolved nodes first, then zone
    anchors. A node reference uses the node's current coordinates, so
    placements resolved before overlap separation anchor to pre-separation
    positions.

    Args:
        position: AbsolutePosition or RelativePosition
        nodes_by_id: Already-resolved nodes
        zone_anchors_by_id: Zone anchors keyed by zone id

    Returns:
        Absolute Point

    Raises:
        ReferenceNotFoundError: If the reference is neither a node nor a zone
    """
    if isinstance(position, AbsolutePosition):
        return Point(x=position.x, y=position.y)

    anchor = nodes_by_id.get(position.reference)
    if anchor is None:
        anchor = zone_anchors_by_id.get(position.reference)
    if anchor is None:
        raise ReferenceNotFoundError(position.reference)

    return Point(x=anchor.x + position.offset_x, y=anchor.y + position.offset_y)
