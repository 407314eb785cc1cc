"""Spacing normalisation.

Authors write spacing as shorthand: a single number for every side, or a
partial record naming only some sides. These helpers turn shorthand into
fully populated records. They are total functions and never raise.
"""

from typing import Any, Mapping, Optional, Union

from topoflow.models.layout_types import (
    AxisSpacing,
    PartialAxisSpacing,
    PartialSpacing,
    Spacing,
)

_SIDES = ("top", "right", "bottom", "left")


def _as_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    # Spacing / PartialSpacing / AxisSpacing models
    return value.model_dump()


def normalise_spacing(
    value: Optional[Union[float, Mapping[str, Any], PartialSpacing, Spacing]],
    fallback: Union[float, Spacing],
) -> Spacing:
    """Coerce spacing shorthand into a four-side record.

    Args:
        value: Number (broadcast to all sides), partial record, or None
        fallback: Spacing (or number) supplying missing sides

    Returns:
        Fully populated Spacing
    """
    if isinstance(fallback, (int, float)):
        fallback = Spacing(top=fallback, right=fallback, bottom=fallback, left=fallback)

    if value is None:
        return fallback.model_copy()

    if isinstance(value, (int, float)):
        return Spacing(top=value, right=value, bottom=value, left=value)

    sides = _as_mapping(value)
    return Spacing(**{
        side: sides[side] if sides.get(side) is not None else getattr(fallback, side)
        for side in _SIDES
    })


def normalise_axis_spacing(
    value: Optional[Union[float, Mapping[str, Any], PartialAxisSpacing, AxisSpacing]],
    fallback: Union[float, AxisSpacing],
) -> AxisSpacing:
    """Coerce axis shorthand into a horizontal/vertical pair.

    Mappings may use ``horizontal``/``vertical`` or ``x``/``y`` keys.
    """
    if isinstance(fallback, (int, float)):
        fallback = AxisSpacing(horizontal=fallback, vertical=fallback)

    if value is None:
        return fallback.model_copy()

    if isinstance(value, (int, float)):
        return AxisSpacing(horizontal=value, vertical=value)

    axes = _as_mapping(value)
    horizontal = axes.get("horizontal", axes.get("x"))
    vertical = axes.get("vertical", axes.get("y"))

    return AxisSpacing(
        horizontal=fallback.horizontal if horizontal is None else horizontal,
        vertical=fallback.vertical if vertical is None else vertical,
    )


def scale_spacing(spacing: Spacing, factor: float) -> Spacing:
    """Multiply every side by a factor."""
    return Spacing(**{side: getattr(spacing, side) * factor for side in _SIDES})
