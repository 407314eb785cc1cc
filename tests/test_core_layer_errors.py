"""
Negative Tests - Authoring Error Handling

Tests verify that the layout engine fails loudly on bad blueprints:
1. Unknown templates raise TemplateNotFoundError
2. Undeclared zones raise ZoneNotFoundError
3. Unresolvable relative positions raise ReferenceNotFoundError
4. Every error carries the offending id in its message and attributes
5. No partial layout is returned
"""

import pytest

from topoflow import (
    ConfigurationError,
    ReferenceNotFoundError,
    TemplateNotFoundError,
    ZoneNotFoundError,
    instantiate_layout,
)


class TestErrorMessages:
    """Error construction."""

    def test_template_not_found_lists_available(self):
        error = TemplateNotFoundError("typo_switch", available=["router", "accessSwitch"])

        assert error.template_key == "typo_switch"
        assert '"typo_switch"' in str(error)
        assert "Available templates: ['accessSwitch', 'router']" in str(error)

    def test_zone_not_found_names_referrer(self):
        error = ZoneNotFoundError("dmz", referenced_by="web-1")

        assert str(error) == 'Zone "dmz" is not defined. Referenced by "web-1".'

    def test_reference_not_found(self):
        error = ReferenceNotFoundError("core-router")

        assert error.reference == "core-router"
        assert "core-router" in str(error)

    @pytest.mark.parametrize("error", [
        TemplateNotFoundError("x"),
        ZoneNotFoundError("x"),
        ReferenceNotFoundError("x"),
    ])
    def test_errors_share_a_base(self, error):
        assert isinstance(error, ConfigurationError)
        assert isinstance(error, ValueError)


class TestInstantiationFailsLoudly:
    """Errors abort instantiate_layout()."""

    def test_typo_in_template(self):
        with pytest.raises(TemplateNotFoundError) as exc_info:
            instantiate_layout({"nodes": [{"template": "acessSwitch", "position": {"x": 0, "y": 0}}]})

        assert "acessSwitch" in str(exc_info.value)
        assert "accessSwitch" in str(exc_info.value)

    def test_error_after_valid_nodes_returns_nothing(self):
        blueprint = {
            "zones": [{"id": "edge"}],
            "nodes": [
                {"template": "router", "id": "r1", "zone": "edge", "position": {"x": 0, "y": 0}},
                {"template": "router", "id": "r2", "zone": "dmz", "position": {"x": 0, "y": 0}},
            ],
        }

        with pytest.raises(ZoneNotFoundError, match="dmz"):
            instantiate_layout(blueprint)

    def test_reference_to_zone_that_is_not_declared(self):
        with pytest.raises(ReferenceNotFoundError, match="edge"):
            instantiate_layout({"nodes": [{"template": "router", "position": {"relativeTo": "edge"}}]})
