"""
Layout Profiles - Default Settings for Blueprint Instantiation

Blueprints are authored in two very different unit systems: pixel-space
campus diagrams (padding in the tens, node spacing in the hundreds) and
compact percentage-style diagrams (everything in single or low double digits).
A profile bundles the defaults for one of those systems. Any value a
blueprint sets explicitly wins over its profile.

Usage:
    from topoflow.config.settings import get_profile

    profile = get_profile()            # canvas
    compact = get_profile('compact')   # explicit profile

The default is always canvas. A blueprint that wants another profile names
it in its settings, so the same blueprint lays out the same way everywhere.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class LayoutProfile:
    """Default layout settings for one unit system."""
    name: str
    canvas_padding: float
    zone_padding: float
    zone_spacing_horizontal: float
    zone_spacing_vertical: float
    node_spacing_horizontal: float
    node_spacing_vertical: float
    default_node_size: float = 40.0
    min_node_size: float = 18.0
    min_node_scale: float = 0.6


LAYOUT_PROFILES: Dict[str, LayoutProfile] = {
    # Pixel-space diagrams
    'canvas': LayoutProfile(
        name='canvas',
        canvas_padding=48.0,
        zone_padding=10.0,
        zone_spacing_horizontal=80.0,
        zone_spacing_vertical=140.0,
        node_spacing_horizontal=140.0,
        node_spacing_vertical=160.0,
    ),

    # Small-unit diagrams scaled up by the renderer
    'compact': LayoutProfile(
        name='compact',
        canvas_padding=12.0,
        zone_padding=6.0,
        zone_spacing_horizontal=14.0,
        zone_spacing_vertical=14.0,
        node_spacing_horizontal=12.0,
        node_spacing_vertical=12.0,
    ),
}

DEFAULT_PROFILE = 'canvas'


def available_profiles() -> List[str]:
    """Names of all registered profiles."""
    return list(LAYOUT_PROFILES.keys())


def get_profile(name: Optional[str] = None) -> LayoutProfile:
    """
    Look up a layout profile.

    Args:
        name: Profile name; None selects DEFAULT_PROFILE

    Returns:
        LayoutProfile

    Raises:
        KeyError: If profile name is not recognized

    Example:
        >>> get_profile('compact').node_spacing_horizontal
        12.0
    """
    key = (name or DEFAULT_PROFILE).lower()
    if key not in LAYOUT_PROFILES:
        available = ', '.join(LAYOUT_PROFILES.keys())
        raise KeyError(
            f"Unknown layout profile: '{key}'. "
            f"Available profiles: {available}"
        )

    return LAYOUT_PROFILES[key]
