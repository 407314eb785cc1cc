"""
Tests for DeviceCatalog - read-only device template lookup.
"""

import pytest

from topoflow.core.devices import DEFAULT_LIBRARY_PATH, DeviceCatalog, get_catalog
from topoflow.core.errors import TemplateNotFoundError
from topoflow.models.layout_types import DeviceTemplate


class TestBuiltinCatalog:
    """The YAML device library shipped with the package."""

    def test_library_file_exists(self):
        assert DEFAULT_LIBRARY_PATH.exists()

    def test_loads_all_templates(self, catalog):
        assert len(catalog) == 17
        assert "accessSwitch" in catalog
        assert "perimeterFirewall" in catalog

    def test_template_fields(self, catalog):
        template = catalog.get("perimeterFirewall")

        assert template.template_id == "perimeterFirewall"
        assert template.type == "firewall"
        assert template.label == "Perimeter Firewall"
        assert template.description
        assert template.size is None

    def test_template_with_size(self, catalog):
        assert catalog.get("cctv").size == 32

    def test_singleton(self):
        assert get_catalog() is get_catalog()

    def test_keys_keep_library_order(self, catalog):
        keys = catalog.keys()

        assert keys[0] == "internetGateway"
        assert list(catalog) == keys


class TestLookup:
    """Lookups on a hand-built catalog."""

    def test_lookup_missing_returns_none(self, small_catalog):
        assert small_catalog.lookup("toaster") is None

    def test_get_missing_raises(self, small_catalog):
        with pytest.raises(TemplateNotFoundError) as exc_info:
            small_catalog.get("toaster")

        assert exc_info.value.template_key == "toaster"
        assert "Available templates: ['camera', 'router', 'switch']" in str(exc_info.value)

    def test_mapping_key_becomes_template_id(self, small_catalog):
        assert small_catalog.get("switch").template_id == "switch"
        assert small_catalog.get("switch").description == ""

    def test_template_objects_are_kept(self):
        template = DeviceTemplate(template_id="ap", type="ap", label="Access Point")
        catalog = DeviceCatalog.from_mapping({"ap": template})

        assert catalog.get("ap") is template

    def test_empty_catalog(self):
        catalog = DeviceCatalog()

        assert len(catalog) == 0
        assert catalog.keys() == []


class TestFromYaml:
    """Project-specific device libraries."""

    def test_custom_library(self, tmp_path):
        library = tmp_path / "devices.yaml"
        library.write_text(
            "devices:\n"
            "  coreRouter:\n"
            "    type: router\n"
            "    label: Core Router\n"
            "    size: 56\n"
        )
        catalog = DeviceCatalog.from_yaml(library)

        assert catalog.keys() == ["coreRouter"]
        assert catalog.get("coreRouter").size == 56

    def test_empty_file(self, tmp_path):
        library = tmp_path / "empty.yaml"
        library.write_text("")

        assert len(DeviceCatalog.from_yaml(library)) == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DeviceCatalog.from_yaml(tmp_path / "missing.yaml")
