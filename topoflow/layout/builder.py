"""Layout instantiation: blueprint in, FlowLayout out.

instantiate_layout() is a pure, synchronous transform. Each call builds its
own node and zone maps, consults the read-only device catalog, and returns a
fresh FlowLayout. Any authoring error aborts the whole call; no partial
layout is ever returned.

Pipeline:
    1. Zone anchors (origin, padding, minimum size, nesting depth)
    2. Node positions in declaration order (absolute or relative)
    3. Node overlap separation per zone group
    4. Zone boxes from member nodes (bottom-up for nested zones)
    5. Zone overlap separation among siblings
    6. Zone shifts carried onto member nodes
    7. Content bounds
    8. Uniform downscale to the maximum width
    9. Translation by canvas padding, then scaling
   10. Link and route-highlight style resolution
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from topoflow.core.devices import DeviceCatalog, get_catalog
from topoflow.core.errors import (
    ConfigurationError,
    TemplateNotFoundError,
    ZoneNotFoundError,
)
from topoflow.layout.positioning import resolve_absolute
from topoflow.layout.separation import ensure_node_spacing, separate_zones, shift_node
from topoflow.layout.settings import ResolvedSettings, resolve_settings
from topoflow.layout.spacing import normalise_spacing, scale_spacing
from topoflow.models.layout_types import (
    AbsolutePosition,
    AxisSpacing,
    BoundingBox,
    CanvasMetrics,
    ComputedZone,
    DevicePlacement,
    FlowLayout,
    LayoutBlueprint,
    NodeInstance,
    NodeOverrides,
    Point,
    RelativePosition,
    Spacing,
    ZoneDefinition,
)

logger = logging.getLogger(__name__)


@dataclass
class ZoneAnchor:
    """Fixed input geometry of a declared zone."""
    x: float
    y: float
    padding: Spacing
    min_width: float
    min_height: float
    parent: Optional[str] = None
    depth: int = 0


ZoneShift = Tuple[float, float]


# =============================================================================
# Step 1: zone anchors
# =============================================================================


def resolve_zone_anchors(
    zones: Sequence[ZoneDefinition], zone_padding: Spacing
) -> Dict[str, ZoneAnchor]:
    """Record the anchor of every declared zone.

    Raises:
        ConfigurationError: On duplicate zone ids or cyclic nesting
        ZoneNotFoundError: If a zone names an undeclared parent
    """
    anchors: Dict[str, ZoneAnchor] = {}

    for zone in zones:
        if zone.id in anchors:
            raise ConfigurationError(f"Zone \"{zone.id}\" is declared more than once.")

        anchors[zone.id] = ZoneAnchor(
            x=zone.origin.x,
            y=zone.origin.y,
            padding=normalise_spacing(zone.padding, zone_padding),
            min_width=zone.min_width,
            min_height=zone.min_height,
            parent=zone.parent,
        )

    for zone_id, anchor in anchors.items():
        seen = {zone_id}
        parent = anchor.parent
        child = zone_id
        while parent is not None:
            if parent not in anchors:
                raise ZoneNotFoundError(parent, referenced_by=child)
            if parent in seen:
                raise ConfigurationError(f"Zone \"{zone_id}\" is nested inside itself.")
            seen.add(parent)
            anchor.depth += 1
            child, parent = parent, anchors[parent].parent

    return anchors


# =============================================================================
# Step 2: node resolution
# =============================================================================


def _build_node(
    node_id: str,
    placement: DevicePlacement,
    catalog_entry,
    absolute: Point,
    local: Optional[Point],
    settings: ResolvedSettings,
) -> NodeInstance:
    overrides = placement.overrides or NodeOverrides()
    is_relative = isinstance(placement.position, RelativePosition)

    size = overrides.size
    if size is None:
        size = catalog_entry.size if catalog_entry.size is not None else settings.default_node_size

    return NodeInstance(
        id=node_id,
        template_id=catalog_entry.template_id,
        type=catalog_entry.type,
        label=overrides.label if overrides.label is not None else catalog_entry.label,
        description=(
            overrides.description if overrides.description is not None
            else catalog_entry.description
        ),
        size=size,
        x=absolute.x,
        y=absolute.y,
        zone_id=placement.zone,
        local_position=local,
        # Relative placements keep their alignment with the anchor by default
        lock_x=overrides.lock_x if overrides.lock_x is not None else is_relative,
        lock_y=overrides.lock_y if overrides.lock_y is not None else is_relative,
        network=overrides.network.model_copy() if overrides.network is not None else None,
        multiple_instances=bool(overrides.multiple_instances),
    )


def resolve_nodes(
    placements: Sequence[DevicePlacement],
    zone_anchors: Mapping[str, ZoneAnchor],
    catalog: DeviceCatalog,
    settings: ResolvedSettings,
) -> Dict[str, NodeInstance]:
    """Resolve every placement to a positioned node, in declaration order.

    A placement whose id matches an earlier node replaces that node in place.

    Raises:
        TemplateNotFoundError: Unknown template key
        ZoneNotFoundError: Placement names an undeclared zone
        ReferenceNotFoundError: Relative reference is neither a placed node nor a zone
    """
    nodes: Dict[str, NodeInstance] = {}

    for placement in placements:
        template = catalog.lookup(placement.template)
        if template is None:
            raise TemplateNotFoundError(placement.template, available=catalog.keys())

        node_id = placement.id if placement.id is not None else template.template_id
        position = placement.position
        local: Optional[Point] = None

        if placement.zone is not None:
            anchor = zone_anchors.get(placement.zone)
            if anchor is None:
                raise ZoneNotFoundError(placement.zone, referenced_by=node_id)

            if isinstance(position, AbsolutePosition):
                local = Point(x=position.x, y=position.y)
                absolute = Point(x=anchor.x + position.x, y=anchor.y + position.y)
            else:
                absolute = resolve_absolute(position, nodes, zone_anchors)
                local = Point(x=absolute.x - anchor.x, y=absolute.y - anchor.y)
        else:
            absolute = resolve_absolute(position, nodes, zone_anchors)

        if node_id in nodes:
            logger.debug(f"Placement {node_id} replaces an earlier node with the same id")

        nodes[node_id] = _build_node(node_id, placement, template, absolute, local, settings)

    return nodes


# =============================================================================
# Steps 4-6: zone boxes, zone separation, shift propagation
# =============================================================================


def compute_zone_box(
    zone: ZoneDefinition,
    anchor: ZoneAnchor,
    members: Sequence[NodeInstance],
    child_boxes: Sequence[ComputedZone] = (),
) -> ComputedZone:
    """Box around a zone's member nodes (and nested zones) plus padding.

    An empty zone is a padding-only box at its anchor, floored at the
    configured minimum size.
    """
    padding = anchor.padding
    extent: Optional[BoundingBox] = None

    if members:
        extent = BoundingBox.from_points(
            (
                anchor.x + (node.local_position.x if node.local_position else node.x - anchor.x),
                anchor.y + (node.local_position.y if node.local_position else node.y - anchor.y),
            )
            for node in members
        )

    for child in child_boxes:
        child_extent = BoundingBox(
            min_x=child.left, max_x=child.right, min_y=child.top, max_y=child.bottom
        )
        extent = child_extent if extent is None else extent.union(child_extent)

    if extent is None:
        return ComputedZone(
            id=zone.id,
            label=zone.label,
            left=anchor.x - padding.left,
            top=anchor.y - padding.top,
            width=max(anchor.min_width, padding.left + padding.right),
            height=max(anchor.min_height, padding.top + padding.bottom),
            parent=zone.parent,
            multiple_instances=zone.multiple_instances,
        )

    return ComputedZone(
        id=zone.id,
        label=zone.label,
        left=extent.min_x - padding.left,
        top=extent.min_y - padding.top,
        width=max(anchor.min_width, extent.width + padding.left + padding.right),
        height=max(anchor.min_height, extent.height + padding.top + padding.bottom),
        parent=zone.parent,
        multiple_instances=zone.multiple_instances,
    )


def layout_zones(
    zones: Sequence[ZoneDefinition],
    anchors: Mapping[str, ZoneAnchor],
    nodes: Sequence[NodeInstance],
    spacing: AxisSpacing,
) -> Tuple[List[ComputedZone], Dict[str, ZoneShift]]:
    """Compute and separate zone boxes, deepest zones first.

    Returns:
        (zone boxes in declaration order, each zone's own net shift)
    """
    members: Dict[str, List[NodeInstance]] = {zone.id: [] for zone in zones}
    for node in nodes:
        if node.zone_id is not None:
            members[node.zone_id].append(node)

    children: Dict[str, List[str]] = {zone.id: [] for zone in zones}
    for zone in zones:
        if zone.parent is not None:
            children[zone.parent].append(zone.id)

    boxes: Dict[str, ComputedZone] = {}
    shifts: Dict[str, ZoneShift] = {zone.id: (0.0, 0.0) for zone in zones}
    max_depth = max((anchor.depth for anchor in anchors.values()), default=0)

    def move_descendants(zone_id: str, dx: float, dy: float) -> None:
        for child_id in children[zone_id]:
            child = boxes[child_id]
            child.left += dx
            child.top += dy
            move_descendants(child_id, dx, dy)

    for depth in range(max_depth, -1, -1):
        level = [zone for zone in zones if anchors[zone.id].depth == depth]

        for zone in level:
            boxes[zone.id] = compute_zone_box(
                zone,
                anchors[zone.id],
                members[zone.id],
                [boxes[child_id] for child_id in children[zone.id]],
            )

        siblings: Dict[Optional[str], List[ComputedZone]] = {}
        for zone in level:
            siblings.setdefault(zone.parent, []).append(boxes[zone.id])

        for group in siblings.values():
            separated, group_shifts = separate_zones(group, spacing)
            for box in separated:
                boxes[box.id] = box
                dx, dy = group_shifts[box.id]
                if dx or dy:
                    shifts[box.id] = (dx, dy)
                    move_descendants(box.id, dx, dy)

    return [boxes[zone.id] for zone in zones], shifts


def propagate_zone_shifts(
    nodes: Sequence[NodeInstance],
    anchors: Mapping[str, ZoneAnchor],
    shifts: Mapping[str, ZoneShift],
) -> None:
    """Carry each zone's shift (plus its ancestors') onto member nodes.

    Zone-local positions are left unchanged: the node moves with its zone.
    """
    for node in nodes:
        zone_id = node.zone_id
        dx = dy = 0.0
        while zone_id is not None:
            zone_dx, zone_dy = shifts.get(zone_id, (0.0, 0.0))
            dx += zone_dx
            dy += zone_dy
            zone_id = anchors[zone_id].parent

        shift_node(node, dx, dy, move_local=False)


# =============================================================================
# Steps 7-9: bounds, scale, final transform
# =============================================================================


def content_bounds(nodes: Sequence[NodeInstance], zones: Sequence[ComputedZone]) -> BoundingBox:
    """Union of node positions and zone boxes; all zeros when both are empty."""
    points = [(node.x, node.y) for node in nodes]
    for zone in zones:
        points.append((zone.left, zone.top))
        points.append((zone.right, zone.bottom))

    if not points:
        return BoundingBox(min_x=0.0, max_x=0.0, min_y=0.0, max_y=0.0)
    return BoundingBox.from_points(points)


def derive_scale(padded_width: float, max_width: Optional[float]) -> float:
    """Uniform downscale factor fitting the padded width into max_width."""
    if max_width is not None and padded_width > max_width:
        return max_width / padded_width
    return 1.0


def _clamp_size(size: float, settings: ResolvedSettings) -> float:
    size = max(settings.min_node_size, size)
    if settings.max_node_size is not None:
        size = min(settings.max_node_size, size)
    return size


# =============================================================================
# Entry point
# =============================================================================


def instantiate_layout(
    blueprint: Union[LayoutBlueprint, Mapping[str, Any]],
    catalog: Optional[DeviceCatalog] = None,
) -> FlowLayout:
    """Resolve a blueprint into final pixel-space geometry.

    Args:
        blueprint: LayoutBlueprint or an equivalent plain mapping
        catalog: Device catalog; defaults to the built-in library

    Returns:
        FlowLayout

    Raises:
        TemplateNotFoundError: A placement names an unknown template
        ZoneNotFoundError: A placement or zone names an undeclared zone
        ReferenceNotFoundError: A relative position names an unknown id
        ConfigurationError: Duplicate zone ids or cyclic zone nesting
        pydantic.ValidationError: The blueprint mapping is malformed
    """
    if not isinstance(blueprint, LayoutBlueprint):
        blueprint = LayoutBlueprint.model_validate(blueprint)
    if catalog is None:
        catalog = get_catalog()

    settings = resolve_settings(blueprint.settings)

    anchors = resolve_zone_anchors(blueprint.zones, settings.zone_padding)
    nodes = list(resolve_nodes(blueprint.nodes, anchors, catalog, settings).values())
    logger.debug(f"Resolved {len(nodes)} nodes across {len(anchors)} zones")

    ensure_node_spacing(nodes, settings.node_spacing)

    zones, zone_shifts = layout_zones(blueprint.zones, anchors, nodes, settings.zone_spacing)
    propagate_zone_shifts(nodes, anchors, zone_shifts)

    padding = settings.canvas_padding
    bounds = content_bounds(nodes, zones)
    padded_width = max(bounds.width + padding.left + padding.right, 0.0)
    padded_height = max(bounds.height + padding.top + padding.bottom, 0.0)

    scale = derive_scale(padded_width, settings.max_width)
    node_scale = min(1.0, max(scale, settings.min_node_scale))

    offset_x = padding.left - bounds.min_x
    offset_y = padding.top - bounds.min_y

    for node in nodes:
        node.x = (node.x + offset_x) * scale
        node.y = (node.y + offset_y) * scale
        if node.local_position is not None:
            node.local_position = Point(
                x=node.local_position.x * scale,
                y=node.local_position.y * scale,
            )
        node.size = _clamp_size(node.size * node_scale, settings)
        node.scale = node_scale

    for zone in zones:
        zone.left = (zone.left + offset_x) * scale
        zone.top = (zone.top + offset_y) * scale
        zone.width *= scale
        zone.height *= scale

    node_ids = {node.id for node in nodes}
    for link in blueprint.links:
        for endpoint in (link.source, link.target):
            if endpoint not in node_ids:
                logger.warning(f"Link {link.source} -> {link.target} references unknown node {endpoint}")

    logger.debug(
        f"Canvas {padded_width * scale:.1f}x{padded_height * scale:.1f} "
        f"at scale {scale:.3f} (node scale {node_scale:.3f})"
    )

    return FlowLayout(
        nodes=nodes,
        links=[link.model_copy() for link in blueprint.links],
        zones=zones,
        canvas=CanvasMetrics(
            width=padded_width * scale,
            height=padded_height * scale,
            scale=scale,
            node_scale=node_scale,
            padding=scale_spacing(padding, scale),
            render=settings.render,
        ),
        link_style=settings.link_style,
        route_style=settings.route_style,
    )
