"""Tests for the link integrity report."""

import pytest

from topoflow.layout.builder import instantiate_layout
from topoflow.layout.placement import place_device
from topoflow.models.layout_types import LayoutBlueprint, Link
from topoflow.utils.response import (
    create_issue,
    is_success,
    status_for,
    validation_response,
)
from topoflow.validators.links import validate_links


def build_layout(links):
    return instantiate_layout(LayoutBlueprint(
        nodes=[
            place_device("router", id="a", position={"x": 0, "y": 0}),
            place_device("router", id="b", position={"x": 500, "y": 0}),
            place_device("router", id="c", position={"x": 1000, "y": 0}),
        ],
        links=links,
    ))


def issues_with(result, code):
    return [issue for issue in result["data"]["issues"] if issue.get("code") == code]


class TestValidateLinks:
    """Dangling, duplicate and isolated elements."""

    def test_clean_layout(self):
        result = validate_links(build_layout([Link(source="a", target="b"), Link(source="b", target="c")]))

        assert is_success(result)
        assert result["data"]["status"] == "ok"
        assert result["data"]["issues"] == []
        assert result["data"]["metrics"]["drawable_links"] == 2

    def test_missing_endpoint_is_an_error(self):
        result = validate_links(build_layout([
            Link(source="a", target="b"),
            Link(source="b", target="c"),
            Link(source="c", target="ghost"),
        ]))

        assert not is_success(result)
        assert result["data"]["status"] == "error"
        [issue] = issues_with(result, "MISSING_ENDPOINT")
        assert issue["severity"] == "error"
        assert issue["details"] == {"endpoint": "ghost"}
        assert issue["location"] == "c->ghost"

    def test_duplicate_link_is_a_warning(self):
        result = validate_links(build_layout([
            Link(source="a", target="b"),
            Link(source="a", target="b"),
            Link(source="b", target="c"),
        ]))

        assert is_success(result)
        assert result["data"]["status"] == "warning"
        [issue] = issues_with(result, "DUPLICATE_LINK")
        assert issue["details"] == {"count": 2}

    def test_isolated_node_is_info(self):
        result = validate_links(build_layout([Link(source="a", target="b")]))

        assert result["data"]["status"] == "ok"
        [issue] = issues_with(result, "ISOLATED_NODE")
        assert issue["severity"] == "info"
        assert issue["location"] == "c"
        assert result["data"]["metrics"]["isolated_nodes"] == 1

    def test_layout_is_not_mutated(self):
        layout = build_layout([Link(source="a", target="ghost")])
        before = layout.to_dict()
        validate_links(layout)

        assert layout.to_dict() == before


class TestResponseHelpers:
    """Issue and status helpers."""

    def test_create_issue_omits_empty_fields(self):
        assert create_issue("info", "note") == {"severity": "info", "message": "note"}

    def test_create_issue_keeps_given_fields(self):
        issue = create_issue("error", "gone", location="l1", code="MISSING_ENDPOINT",
                             details={"endpoint": "x"})

        assert issue == {
            "severity": "error",
            "message": "gone",
            "location": "l1",
            "code": "MISSING_ENDPOINT",
            "details": {"endpoint": "x"},
        }

    def test_warning_envelope_is_still_ok(self):
        result = validation_response("warning", [create_issue("warning", "dup")],
                                     warnings=["checked twice"])

        assert is_success(result)
        assert result["data"]["status"] == "warning"
        assert "metrics" not in result["data"]
        assert result["warnings"] == ["checked twice"]

    def test_error_envelope_fails(self):
        result = validation_response("error", metrics={"links": 1})

        assert not is_success(result)
        assert result["data"] == {"status": "error", "issues": [], "metrics": {"links": 1}}
        assert "warnings" not in result

    @pytest.mark.parametrize("severities,expected", [
        ([], "ok"),
        (["info"], "ok"),
        (["info", "warning"], "warning"),
        (["warning", "error"], "error"),
    ])
    def test_status_for(self, severities, expected):
        issues = [create_issue(severity, "x") for severity in severities]
        assert status_for(issues) == expected
