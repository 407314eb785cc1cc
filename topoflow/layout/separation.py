"""Overlap separation passes.

Two sweeps enforce minimum spacing after positions are resolved:

- ensure_node_spacing() separates nodes sharing a zone (zoneless nodes form
  one global group). Only the later node of a pair moves.
- separate_zones() separates sibling zone boxes. Only the later zone of a
  pair moves, and the net shift of every zone is reported so member nodes
  can follow.

Both sweeps re-check a moved item against every earlier item until it is
clear, so every pair satisfies spacing afterwards and a second run applies
no further shift.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from topoflow.models.layout_types import AxisSpacing, ComputedZone, NodeInstance, Point

logger = logging.getLogger(__name__)

GLOBAL_GROUP = "__global__"

# Overlaps smaller than this are float noise from earlier shifts
EPSILON = 1e-9


def shift_node(node: NodeInstance, dx: float, dy: float, move_local: bool = True) -> None:
    """Move a node in place, optionally carrying its zone-local position."""
    if dx == 0 and dy == 0:
        return

    node.x += dx
    node.y += dy

    if move_local and node.local_position is not None:
        node.local_position = Point(
            x=node.local_position.x + dx,
            y=node.local_position.y + dy,
        )


def group_nodes(nodes: Sequence[NodeInstance]) -> Dict[str, List[NodeInstance]]:
    """Group nodes by zone id in first-appearance order."""
    groups: Dict[str, List[NodeInstance]] = {}
    for node in nodes:
        groups.setdefault(node.zone_id or GLOBAL_GROUP, []).append(node)
    return groups


def _direction(delta: float) -> float:
    # Coincident on this axis: push forward in sweep order. A backward push can
    # land on an earlier node that already pushed this one forward.
    return -1.0 if delta < 0 else 1.0


def node_separation_shift(
    current: NodeInstance,
    other: NodeInstance,
    spacing: AxisSpacing,
    forward: bool = False,
) -> Optional[Tuple[float, float]]:
    """Shift that moves ``current`` clear of ``other``, or None if no move is due.

    A pair violates spacing only when both axes are under their threshold.
    Only ``current`` moves, so an axis it locks is never adjusted; a lock on
    ``other`` alone does not matter. Of the adjustable axes, the one with the
    larger remaining overlap is used (ties go vertical).

    By default ``current`` moves away from ``other``. With ``forward`` it
    always moves in the positive direction, to exactly one spacing past
    ``other``.
    """
    dx = current.x - other.x
    dy = current.y - other.y
    overlap_x = spacing.horizontal - abs(dx)
    overlap_y = spacing.vertical - abs(dy)

    if overlap_x <= EPSILON or overlap_y <= EPSILON:
        return None

    x_adjustable = not current.lock_x
    y_adjustable = not current.lock_y

    if y_adjustable and (not x_adjustable or overlap_y >= overlap_x):
        if forward:
            return (0.0, spacing.vertical - dy)
        return (0.0, _direction(dy) * overlap_y)
    if x_adjustable:
        if forward:
            return (spacing.horizontal - dx, 0.0)
        return (_direction(dx) * overlap_x, 0.0)
    return None


def _separate_group(group: List[NodeInstance], spacing: AxisSpacing) -> float:
    # Stable sort keeps declaration order for nodes sharing a position
    ordered = sorted(group, key=lambda node: (node.y, node.x))
    max_rounds = max(8, 4 * len(ordered))
    displacement = 0.0

    for index in range(1, len(ordered)):
        current = ordered[index]
        earlier = ordered[:index]

        for round_index in range(max_rounds):
            # A node pushed away from one neighbour can be pushed straight back
            # by another. Later rounds only push forward, so every coordinate
            # grows toward a fixed set of targets and the loop settles.
            forward = round_index > 0
            moved = False
            for other in earlier:
                shift = node_separation_shift(current, other, spacing, forward)
                if shift is None:
                    continue

                shift_node(current, *shift)
                displacement += abs(shift[0]) + abs(shift[1])
                moved = True

            if not moved:
                break

        remaining = [
            other.id for other in earlier if node_separation_shift(current, other, spacing)
        ]
        if remaining:
            logger.warning(
                f"Node {current.id} still overlaps {remaining} after {max_rounds} rounds"
            )

    return displacement


def ensure_node_spacing(nodes: Sequence[NodeInstance], spacing: AxisSpacing) -> float:
    """Separate overlapping nodes within each zone group, in place.

    Args:
        nodes: Resolved nodes (x/y and local positions are mutated)
        spacing: Minimum centre distance per axis

    Returns:
        Total displacement applied (0.0 when already separated)
    """
    displacement = 0.0

    for group_id, group in group_nodes(nodes).items():
        if len(group) < 2:
            continue

        moved = _separate_group(group, spacing)
        if moved:
            logger.debug(f"Separated nodes in group {group_id} (total shift {moved:.2f})")
        displacement += moved

    return displacement


def zones_conflict(current: ComputedZone, other: ComputedZone, spacing: AxisSpacing) -> bool:
    """Whether two zone boxes, expanded by zone spacing, overlap."""
    overlaps_horizontally = (
        current.left < other.right + spacing.horizontal - EPSILON
        and current.right > other.left - spacing.horizontal + EPSILON
    )
    overlaps_vertically = (
        current.top < other.bottom + spacing.vertical - EPSILON
        and current.bottom > other.top - spacing.vertical + EPSILON
    )
    return overlaps_horizontally and overlaps_vertically


def zone_separation_shift(
    current: ComputedZone, other: ComputedZone, spacing: AxisSpacing
) -> Optional[Tuple[float, float]]:
    """Smallest push of ``current`` that clears ``other``, or None if clear.

    Candidates are a push down below ``other`` and a horizontal push toward
    the side of ``other`` that ``current`` is centred on. The smaller push
    wins; ties push down.
    """
    if not zones_conflict(current, other, spacing):
        return None

    push_down = other.bottom + spacing.vertical - current.top

    if current.center[0] >= other.center[0]:
        push_x = other.right + spacing.horizontal - current.left
    else:
        push_x = -(current.right + spacing.horizontal - other.left)

    if abs(push_x) < push_down:
        return (push_x, 0.0)
    return (0.0, push_down)


def separate_zones(
    zones: Sequence[ComputedZone], spacing: AxisSpacing
) -> Tuple[List[ComputedZone], Dict[str, Tuple[float, float]]]:
    """Separate sibling zone boxes.

    Zones are swept in (top, left) order; each zone is pushed until it clears
    every zone swept before it.

    Args:
        zones: Zone boxes (not mutated)
        spacing: Minimum gap between boxes per axis

    Returns:
        (separated copies in input order, net (dx, dy) shift per zone id)
    """
    copies = [zone.model_copy() for zone in zones]
    shifts: Dict[str, Tuple[float, float]] = {zone.id: (0.0, 0.0) for zone in copies}
    ordered = sorted(copies, key=lambda zone: (zone.top, zone.left))
    max_rounds = max(8, 4 * len(ordered))

    for index in range(1, len(ordered)):
        current = ordered[index]
        earlier = ordered[:index]

        for _ in range(max_rounds):
            moved = False
            for other in earlier:
                shift = zone_separation_shift(current, other, spacing)
                if shift is None:
                    continue

                current.left += shift[0]
                current.top += shift[1]
                dx, dy = shifts[current.id]
                shifts[current.id] = (dx + shift[0], dy + shift[1])
                moved = True

            if not moved:
                break

        if any(zones_conflict(current, other, spacing) for other in earlier):
            # Below every earlier sibling is always clear
            push_down = max(other.bottom for other in earlier) + spacing.vertical - current.top
            current.top += push_down
            dx, dy = shifts[current.id]
            shifts[current.id] = (dx, dy + push_down)
            logger.warning(
                f"Zone {current.id} did not settle after {max_rounds} rounds; "
                f"moved below its siblings"
            )

    for zone_id, (dx, dy) in shifts.items():
        if dx or dy:
            logger.debug(f"Zone {zone_id} shifted by ({dx:.2f}, {dy:.2f})")

    return copies, shifts
