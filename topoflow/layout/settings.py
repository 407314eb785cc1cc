"""Settings adapter.

Blueprints have carried their settings in two shapes over time: flat
(``canvas_padding``, ``max_width``) and nested (``canvas: {padding,
max_width, render}``). resolve_settings() folds either shape, the selected
layout profile and the built-in styles into one ResolvedSettings value, so
the instantiation code never has to branch on settings shape.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from topoflow.config.settings import LayoutProfile, get_profile
from topoflow.layout.spacing import normalise_axis_spacing, normalise_spacing
from topoflow.models.layout_types import (
    AxisSpacing,
    GradientStop,
    LayoutSettings,
    LinkStyle,
    LinkStyleOverrides,
    RouteStyle,
    RouteStyleOverrides,
    Spacing,
)

logger = logging.getLogger(__name__)

DEFAULT_LINK_STYLE = LinkStyle(
    stroke="rgb(148 163 184 / 0.85)",
    dashed_stroke="rgb(96 165 250 / 0.9)",
    width=1.4,
    dash_array="3.5 3.5",
    opacity=0.95,
    glow_color="rgb(14 165 233 / 0.35)",
    glow_blur=8.0,
)

DEFAULT_ROUTE_STYLE = RouteStyle(
    gradient_stops=[
        GradientStop(offset=0.0, color="rgb(22 101 52 / 0)"),
        GradientStop(offset=0.25, color="rgb(74 222 128 / 0.45)"),
        GradientStop(offset=0.6, color="rgb(34 197 94 / 1)"),
        GradientStop(offset=1.0, color="rgb(22 101 52 / 0)"),
    ],
    animation_distance=60.0,
    animation_duration=2.0,
    highlight_width_multiplier=2.0,
    solid_dash_array="24 18",
    dashed_dash_array="6 16",
    glow_color="rgb(74 222 128 / 0.75)",
    glow_blur=12.0,
    fade_out_delay=0.0,
    fade_out_duration=0.0,
)


@dataclass(frozen=True)
class ResolvedSettings:
    """Canonical settings used by instantiate_layout()."""
    profile: LayoutProfile
    canvas_padding: Spacing
    zone_padding: Spacing
    zone_spacing: AxisSpacing
    node_spacing: AxisSpacing
    max_width: Optional[float]
    default_node_size: float
    min_node_size: float
    max_node_size: Optional[float]
    min_node_scale: float
    link_style: LinkStyle
    route_style: RouteStyle
    render: Optional[Dict[str, Any]] = None


def resolve_link_style(overrides: Optional[LinkStyleOverrides]) -> LinkStyle:
    """Merge author style fields over the built-in link style."""
    if overrides is None:
        return DEFAULT_LINK_STYLE.model_copy()
    return DEFAULT_LINK_STYLE.model_copy(update=overrides.model_dump(exclude_none=True))


def resolve_route_style(overrides: Optional[RouteStyleOverrides]) -> RouteStyle:
    """Merge author style fields over the built-in route highlight style."""
    if overrides is None:
        return DEFAULT_ROUTE_STYLE.model_copy(deep=True)

    update = overrides.model_dump(exclude_none=True)
    if "gradient_stops" in update:
        update["gradient_stops"] = [GradientStop(**stop) for stop in update["gradient_stops"]]
    return DEFAULT_ROUTE_STYLE.model_copy(update=update, deep=True)


def resolve_settings(settings: Optional[LayoutSettings]) -> ResolvedSettings:
    """Fold flat and nested settings plus profile defaults into one value.

    Args:
        settings: Author settings, or None for all defaults

    Returns:
        ResolvedSettings

    Raises:
        KeyError: If settings name an unknown profile
        ValueError: If min_node_scale is outside (0, 1]
    """
    if settings is None:
        settings = LayoutSettings()

    profile = get_profile(settings.profile)
    canvas = settings.canvas

    padding_input = settings.canvas_padding
    max_width = settings.max_width
    render = None
    if canvas is not None:
        if canvas.padding is not None:
            padding_input = canvas.padding
        if canvas.max_width is not None:
            max_width = canvas.max_width
        render = canvas.render

    min_node_scale = (
        settings.min_node_scale if settings.min_node_scale is not None
        else profile.min_node_scale
    )
    if not 0 < min_node_scale <= 1:
        raise ValueError(f"min_node_scale must be in (0, 1], got {min_node_scale}")
    if max_width is not None and max_width <= 0:
        raise ValueError(f"max_width must be positive, got {max_width}")

    min_node_size = (
        settings.min_node_size if settings.min_node_size is not None
        else profile.min_node_size
    )
    max_node_size = settings.max_node_size
    if max_node_size is not None and max_node_size < min_node_size:
        logger.warning(
            f"max_node_size {max_node_size} is below min_node_size {min_node_size}; "
            f"using {min_node_size}"
        )
        max_node_size = min_node_size

    resolved = ResolvedSettings(
        profile=profile,
        canvas_padding=normalise_spacing(padding_input, profile.canvas_padding),
        zone_padding=normalise_spacing(settings.zone_padding, profile.zone_padding),
        zone_spacing=normalise_axis_spacing(
            settings.zone_spacing,
            AxisSpacing(
                horizontal=profile.zone_spacing_horizontal,
                vertical=profile.zone_spacing_vertical,
            ),
        ),
        node_spacing=normalise_axis_spacing(
            settings.node_spacing,
            AxisSpacing(
                horizontal=profile.node_spacing_horizontal,
                vertical=profile.node_spacing_vertical,
            ),
        ),
        max_width=max_width,
        default_node_size=(
            settings.default_node_size if settings.default_node_size is not None
            else profile.default_node_size
        ),
        min_node_size=min_node_size,
        max_node_size=max_node_size,
        min_node_scale=min_node_scale,
        link_style=resolve_link_style(settings.link_style),
        route_style=resolve_route_style(settings.route_style),
        render=render,
    )

    logger.debug(
        f"Resolved settings with profile '{profile.name}' "
        f"(node spacing {resolved.node_spacing.horizontal}x{resolved.node_spacing.vertical}, "
        f"zone spacing {resolved.zone_spacing.horizontal}x{resolved.zone_spacing.vertical})"
    )

    return resolved
