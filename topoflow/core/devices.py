"""
Device Template Catalog - Read-only Lookup of Device Defaults

Maps a template key (e.g. "accessSwitch") to the default type, label,
description and size of a device. The layout engine queries it once per
placement and never mutates it; templates are frozen models.

The built-in catalog is loaded from config/device_library.yaml. Projects with
their own device sets build a catalog with DeviceCatalog.from_yaml() or
DeviceCatalog.from_mapping() and pass it to instantiate_layout().
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

import yaml

from topoflow.core.errors import TemplateNotFoundError
from topoflow.models.layout_types import DeviceTemplate

logger = logging.getLogger(__name__)

DEFAULT_LIBRARY_PATH = Path(__file__).parent.parent / "config" / "device_library.yaml"


class DeviceCatalog:
    """
    Registry of device templates keyed by template id.
    """

    def __init__(self, templates: Optional[Mapping[str, DeviceTemplate]] = None):
        """Initialize catalog with already-built templates."""
        self._templates: Dict[str, DeviceTemplate] = dict(templates or {})

    @classmethod
    def from_mapping(
        cls, mapping: Mapping[str, Union[DeviceTemplate, Mapping[str, Any]]]
    ) -> "DeviceCatalog":
        """Build a catalog from template objects or plain dicts.

        Dict entries may omit the template id; the mapping key is used.
        """
        templates: Dict[str, DeviceTemplate] = {}

        for key, entry in mapping.items():
            if isinstance(entry, DeviceTemplate):
                templates[key] = entry
                continue

            data = dict(entry)
            if "templateId" not in data:
                data.setdefault("template_id", key)
            templates[key] = DeviceTemplate.model_validate(data)

        return cls(templates)

    @classmethod
    def from_yaml(cls, path: Optional[Path] = None) -> "DeviceCatalog":
        """Load a catalog from a YAML file with a top-level ``devices`` map.

        Raises:
            FileNotFoundError: If the library file does not exist
        """
        if path is None:
            path = DEFAULT_LIBRARY_PATH

        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        catalog = cls.from_mapping(data.get('devices', {}))
        logger.info(f"Loaded {len(catalog)} device templates from {path}")
        return catalog

    def lookup(self, template_key: str) -> Optional[DeviceTemplate]:
        """Return the template for a key, or None if absent."""
        return self._templates.get(template_key)

    def get(self, template_key: str) -> DeviceTemplate:
        """Return the template for a key.

        Raises:
            TemplateNotFoundError: If the key is not in the catalog
        """
        template = self._templates.get(template_key)
        if template is None:
            raise TemplateNotFoundError(template_key, available=self._templates.keys())
        return template

    def keys(self) -> List[str]:
        """Template keys in catalog order."""
        return list(self._templates.keys())

    def __contains__(self, template_key: object) -> bool:
        return template_key in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)


# Singleton instance for global access
_catalog: Optional[DeviceCatalog] = None


def get_catalog() -> DeviceCatalog:
    """Get the built-in device catalog."""
    global _catalog
    if _catalog is None:
        _catalog = DeviceCatalog.from_yaml()
    return _catalog
