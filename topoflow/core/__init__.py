"""
Core Layer - device catalog and authoring errors.

Modules:
- devices: Read-only device template catalog loaded from YAML
- errors: Authoring errors raised during layout instantiation

The optional layout_store module (etag-versioned storage of resolved layouts)
is not imported here; callers that cache layouts import it directly.
"""

from .devices import DeviceCatalog, get_catalog
from .errors import (
    ConfigurationError,
    ReferenceNotFoundError,
    TemplateNotFoundError,
    ZoneNotFoundError,
)

__all__ = [
    # Catalog
    'DeviceCatalog',
    'get_catalog',
    # Errors
    'ConfigurationError',
    'TemplateNotFoundError',
    'ZoneNotFoundError',
    'ReferenceNotFoundError',
]
