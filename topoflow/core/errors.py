"""Blueprint configuration errors.

Every error here is an authoring mistake in a blueprint. They are raised at
the point of detection during layout instantiation and are never recovered
internally, so a failing call returns no partial layout. Each error keeps the
offending key as an attribute and embeds it in its message so callers can
display the message verbatim.
"""

from typing import Iterable, Optional


class ConfigurationError(ValueError):
    """Raised when a blueprint is internally inconsistent."""
    pass


class TemplateNotFoundError(ConfigurationError):
    """Raised when a placement names a template absent from the device catalog."""

    def __init__(self, template_key: str, available: Optional[Iterable[str]] = None):
        self.template_key = template_key
        message = f"Template \"{template_key}\" not found in device library."
        if available is not None:
            message += f" Available templates: {sorted(available)}"
        super().__init__(message)


class ZoneNotFoundError(ConfigurationError):
    """Raised when a placement or zone names an undeclared zone."""

    def __init__(self, zone_id: str, referenced_by: Optional[str] = None):
        self.zone_id = zone_id
        self.referenced_by = referenced_by
        message = f"Zone \"{zone_id}\" is not defined."
        if referenced_by:
            message += f" Referenced by \"{referenced_by}\"."
        super().__init__(message)


class ReferenceNotFoundError(ConfigurationError):
    """Raised when a relative position names neither a placed node nor a zone."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(
            f"Unable to resolve relative position: reference \"{reference}\" was not found."
        )


__all__ = [
    "ConfigurationError",
    "TemplateNotFoundError",
    "ZoneNotFoundError",
    "ReferenceNotFoundError",
]
