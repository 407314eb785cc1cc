"""Data model for network topology blueprints and resolved layouts.

This module provides the schemas on both sides of the layout engine:
- Blueprint input (zones, device placements, links, settings)
- Resolved output (FlowLayout with nodes, zones, canvas metrics, styles)

Conventions:
    - Attribute names are snake_case; camelCase aliases are accepted on input
      and emitted by FlowLayout.to_dict(), so blueprints and cached layouts
      can be exchanged with JavaScript renderers unchanged
    - Coordinates use a top-left origin; blueprint units are pre-scale,
      FlowLayout units are final pixels
    - Network metadata is opaque and passed through untouched
"""

import hashlib
import json
import logging
from typing import Annotated, Any, Dict, Iterable, List, Literal, Optional, Tuple, Union

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class LayoutModel(BaseModel):
    """Base model accepting both snake_case names and camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Geometry primitives
# =============================================================================


class Point(LayoutModel):
    """A point in 2D layout space."""

    x: float = Field(default=0.0, description="Horizontal coordinate")
    y: float = Field(default=0.0, description="Vertical coordinate")

    def to_list(self) -> List[float]:
        """Convert to list format [x, y]."""
        return [self.x, self.y]


class Spacing(LayoutModel):
    """Fully populated four-side spacing record."""

    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


class PartialSpacing(LayoutModel):
    """Author-side spacing where any side may be omitted."""

    top: Optional[float] = None
    right: Optional[float] = None
    bottom: Optional[float] = None
    left: Optional[float] = None


class AxisSpacing(LayoutModel):
    """Fully populated spacing pair for the two axes."""

    horizontal: float = 0.0
    vertical: float = 0.0


class PartialAxisSpacing(LayoutModel):
    """Author-side axis spacing.

    Accepts either ``horizontal``/``vertical`` or the shorter ``x``/``y`` keys;
    both shapes appear in existing blueprints.
    """

    horizontal: Optional[float] = None
    vertical: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def accept_xy_keys(cls, data: Any) -> Any:
        """Map ``x``/``y`` keys onto ``horizontal``/``vertical``."""
        if isinstance(data, dict) and ("x" in data or "y" in data):
            data = dict(data)
            if "x" in data:
                data.setdefault("horizontal", data.pop("x"))
            if "y" in data:
                data.setdefault("vertical", data.pop("y"))
        return data


SpacingInput = Union[float, PartialSpacing]
AxisSpacingInput = Union[float, PartialAxisSpacing]


class BoundingBox(LayoutModel):
    """Bounding box for a set of points or rectangles.

    Attributes:
        min_x: Minimum x coordinate
        max_x: Maximum x coordinate
        min_y: Minimum y coordinate
        max_y: Maximum y coordinate
    """

    min_x: float = Field(..., description="Minimum x coordinate")
    max_x: float = Field(..., description="Maximum x coordinate")
    min_y: float = Field(..., description="Minimum y coordinate")
    max_y: float = Field(..., description="Maximum y coordinate")

    @property
    def width(self) -> float:
        """Computed width of bounding box."""
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        """Computed height of bounding box."""
        return self.max_y - self.min_y

    @property
    def center(self) -> Tuple[float, float]:
        """Computed center point of bounding box."""
        return (
            (self.min_x + self.max_x) / 2,
            (self.min_y + self.max_y) / 2
        )

    @classmethod
    def from_points(cls, points: Iterable[Tuple[float, float]]) -> "BoundingBox":
        """Compute bounding box from (x, y) points.

        Raises:
            ValueError: If no points are given
        """
        points = list(points)
        if not points:
            raise ValueError("Cannot compute bounding box from empty positions")

        x_coords = [x for x, _ in points]
        y_coords = [y for _, y in points]

        return cls(
            min_x=min(x_coords),
            max_x=max(x_coords),
            min_y=min(y_coords),
            max_y=max(y_coords)
        )

    def union(self, other: "BoundingBox") -> "BoundingBox":
        """Smallest box covering both boxes."""
        return BoundingBox(
            min_x=min(self.min_x, other.min_x),
            max_x=max(self.max_x, other.max_x),
            min_y=min(self.min_y, other.min_y),
            max_y=max(self.max_y, other.max_y),
        )


# =============================================================================
# Positioning
# =============================================================================


class AbsolutePosition(LayoutModel):
    """Absolute coordinates (zone-local when the placement names a zone)."""

    kind: Literal["absolute"] = "absolute"
    x: float = 0.0
    y: float = 0.0


class RelativePosition(LayoutModel):
    """Offset from a previously placed node or a declared zone anchor."""

    kind: Literal["relative"] = "relative"
    reference: str = Field(..., description="Node id or zone id to offset from")
    offset_x: float = 0.0
    offset_y: float = 0.0


Positioning = Annotated[
    Union[AbsolutePosition, RelativePosition], Field(discriminator="kind")
]


# =============================================================================
# Devices and placements
# =============================================================================


class DeviceTemplate(LayoutModel):
    """Default definition of a device kind from the device catalog."""

    model_config = ConfigDict(frozen=True)

    template_id: str = Field(..., description="Unique key within the device library")
    type: str = Field(..., description="Device kind used for icon mapping")
    label: str
    description: str = ""
    size: Optional[float] = None


class NodeNetworkProfile(LayoutModel):
    """Opaque network metadata attached to a node.

    Values are never validated; unknown keys are preserved.
    """

    model_config = ConfigDict(extra="allow")

    ip_address: Optional[str] = None
    subnet: Optional[str] = None
    mac_address: Optional[str] = None
    vlan: Optional[Union[int, str]] = None
    notes: Optional[str] = None


class NodeOverrides(LayoutModel):
    """Per-placement overrides applied over template defaults."""

    label: Optional[str] = None
    description: Optional[str] = None
    size: Optional[float] = None
    network: Optional[NodeNetworkProfile] = None
    lock_x: Optional[bool] = None
    lock_y: Optional[bool] = None
    multiple_instances: Optional[bool] = None


class DevicePlacement(LayoutModel):
    """Author input describing where a device template is placed."""

    template: str = Field(..., description="Device catalog template key")
    id: Optional[str] = Field(default=None, description="Node id (defaults to template id)")
    zone: Optional[str] = Field(default=None, description="Owning zone id")
    position: Positioning = Field(default_factory=AbsolutePosition)
    overrides: Optional[NodeOverrides] = None

    @field_validator("position", mode="before")
    @classmethod
    def normalise_shorthand(cls, v: Any) -> Any:
        """Accept author shorthand such as ``{"reference": "core", "x": 10}``."""
        from topoflow.layout.positioning import normalise_position

        return normalise_position(v).model_dump()


class ZoneDefinition(LayoutModel):
    """A labelled grouping region anchored at a fixed origin."""

    id: str
    label: str = ""
    origin: Point = Field(default_factory=Point)
    padding: Optional[SpacingInput] = None
    min_width: float = 0.0
    min_height: float = 0.0
    parent: Optional[str] = Field(default=None, description="Enclosing zone id")
    multiple_instances: bool = False


class Link(LayoutModel):
    """Connection between two node ids. Geometry is left to the renderer."""

    source: str
    target: str
    dashed: Optional[bool] = None
    routing: Optional[Literal["straight", "orthogonal"]] = None
    orientation: Optional[Literal["horizontal-first", "vertical-first"]] = None


# =============================================================================
# Styles
# =============================================================================


class GradientStop(LayoutModel):
    offset: float
    color: str


class LinkStyle(LayoutModel):
    """Resolved stroke style shared by all links of a diagram."""

    stroke: str
    dashed_stroke: str
    width: float
    dash_array: str
    opacity: float
    glow_color: str
    glow_blur: float


class LinkStyleOverrides(LayoutModel):
    stroke: Optional[str] = None
    dashed_stroke: Optional[str] = None
    width: Optional[float] = None
    dash_array: Optional[str] = None
    opacity: Optional[float] = None
    glow_color: Optional[str] = None
    glow_blur: Optional[float] = None


class RouteStyle(LayoutModel):
    """Resolved style of the animated route highlight."""

    gradient_stops: List[GradientStop]
    animation_distance: float
    animation_duration: float
    highlight_width_multiplier: float
    solid_dash_array: str
    dashed_dash_array: str
    glow_color: str
    glow_blur: float
    fade_out_delay: float
    fade_out_duration: float


class RouteStyleOverrides(LayoutModel):
    gradient_stops: Optional[List[GradientStop]] = None
    animation_distance: Optional[float] = None
    animation_duration: Optional[float] = None
    highlight_width_multiplier: Optional[float] = None
    solid_dash_array: Optional[str] = None
    dashed_dash_array: Optional[str] = None
    glow_color: Optional[str] = None
    glow_blur: Optional[float] = None
    fade_out_delay: Optional[float] = None
    fade_out_duration: Optional[float] = None


# =============================================================================
# Settings and blueprint
# =============================================================================


class CanvasSettings(LayoutModel):
    """Nested canvas block used by newer blueprints."""

    padding: Optional[SpacingInput] = None
    max_width: Optional[float] = None
    render: Optional[Dict[str, Any]] = Field(
        default=None, description="Renderer hints, passed through to CanvasMetrics"
    )


class LayoutSettings(LayoutModel):
    """Optional layout settings; unset values come from the layout profile.

    Both the flat shape (``canvas_padding``/``max_width``) and the nested
    ``canvas`` block are accepted. When both are given, the nested block wins.
    """

    profile: Optional[str] = None
    canvas: Optional[CanvasSettings] = None
    canvas_padding: Optional[SpacingInput] = None
    max_width: Optional[float] = None
    zone_spacing: Optional[AxisSpacingInput] = None
    zone_padding: Optional[SpacingInput] = None
    node_spacing: Optional[AxisSpacingInput] = None
    default_node_size: Optional[float] = None
    min_node_size: Optional[float] = None
    max_node_size: Optional[float] = None
    min_node_scale: Optional[float] = None
    link_style: Optional[LinkStyleOverrides] = None
    route_style: Optional[RouteStyleOverrides] = None


class LayoutBlueprint(LayoutModel):
    """Author-authored description of a diagram before resolution."""

    zones: List[ZoneDefinition] = Field(default_factory=list)
    nodes: List[DevicePlacement] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)
    settings: Optional[LayoutSettings] = None


# =============================================================================
# Resolved output
# =============================================================================


class NodeInstance(LayoutModel):
    """A resolved, positioned device."""

    id: str
    type: str
    label: str
    description: str = ""
    x: float
    y: float
    size: float
    scale: float = 1.0
    template_id: str
    zone_id: Optional[str] = None
    local_position: Optional[Point] = None
    lock_x: bool = False
    lock_y: bool = False
    network: Optional[NodeNetworkProfile] = None
    multiple_instances: bool = False


class ComputedZone(LayoutModel):
    """A zone box derived from its member nodes and padding."""

    id: str
    label: str = ""
    left: float
    top: float
    width: float
    height: float
    parent: Optional[str] = None
    multiple_instances: bool = False

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.left + self.width / 2, self.top + self.height / 2)


class CanvasMetrics(LayoutModel):
    """Final renderable area."""

    width: float
    height: float
    scale: float
    node_scale: float
    padding: Spacing
    render: Optional[Dict[str, Any]] = None


class FlowLayout(LayoutModel):
    """Fully resolved scene handed to the rendering layer.

    A plain serializable value: to_dict() yields camelCase JSON-ready data
    with deterministic ordering, and compute_etag() fingerprints it for
    caching and diffing.
    """

    nodes: List[NodeInstance]
    links: List[Link]
    zones: List[ComputedZone]
    canvas: CanvasMetrics
    link_style: LinkStyle
    route_style: RouteStyle

    def node_ids(self) -> List[str]:
        """Node ids in output order."""
        return [node.id for node in self.nodes]

    def get_node(self, node_id: str) -> NodeInstance:
        """Look up a node by id.

        Raises:
            KeyError: If no node has this id
        """
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise KeyError(f"Node {node_id} not found")

    def get_zone(self, zone_id: str) -> ComputedZone:
        """Look up a zone by id.

        Raises:
            KeyError: If no zone has this id
        """
        for zone in self.zones:
            if zone.id == zone_id:
                return zone
        raise KeyError(f"Zone {zone_id} not found")

    def to_dict(self, exclude_none: bool = True) -> Dict[str, Any]:
        """Export to JSON-ready dict with camelCase keys.

        Args:
            exclude_none: If True, exclude None values from output

        Returns:
            Dictionary with sorted top-level keys for git-friendly diffs
        """
        data = self.model_dump(mode="json", by_alias=True, exclude_none=exclude_none)
        return dict(sorted(data.items()))

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize to JSON text."""
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FlowLayout":
        """Rebuild a layout from to_dict() output."""
        return cls.model_validate(data)

    def compute_etag(self) -> str:
        """Compute SHA-256 etag from canonical content.

        Returns:
            64-character hex string (SHA-256 hash)
        """
        canonical_json = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical_json.encode()).hexdigest()

    def to_networkx_graph(self) -> nx.DiGraph:
        """Build a directed graph of nodes and links.

        Node attributes carry label, type, position, size and zone. Links whose
        endpoints are not nodes of this layout are skipped with a warning.
        """
        graph = nx.DiGraph()

        for node in self.nodes:
            graph.add_node(
                node.id,
                label=node.label,
                type=node.type,
                pos=[node.x, node.y],
                size=node.size,
                zone=node.zone_id,
            )

        for link in self.links:
            if link.source not in graph.nodes or link.target not in graph.nodes:
                logger.warning(
                    f"Link {link.source} -> {link.target} references a missing node"
                )
                continue

            graph.add_edge(
                link.source,
                link.target,
                dashed=bool(link.dashed),
                routing=link.routing or "straight",
                orientation=link.orientation,
            )

        return graph


__all__ = [
    "LayoutModel",
    # Geometry
    "Point",
    "Spacing",
    "PartialSpacing",
    "AxisSpacing",
    "PartialAxisSpacing",
    "SpacingInput",
    "AxisSpacingInput",
    "BoundingBox",
    # Positioning
    "AbsolutePosition",
    "RelativePosition",
    "Positioning",
    # Blueprint
    "DeviceTemplate",
    "NodeNetworkProfile",
    "NodeOverrides",
    "DevicePlacement",
    "ZoneDefinition",
    "Link",
    "GradientStop",
    "LinkStyle",
    "LinkStyleOverrides",
    "RouteStyle",
    "RouteStyleOverrides",
    "CanvasSettings",
    "LayoutSettings",
    "LayoutBlueprint",
    # Output
    "NodeInstance",
    "ComputedZone",
    "CanvasMetrics",
    "FlowLayout",
]
