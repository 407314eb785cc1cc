"""Response envelopes for layout checks."""

from typing import Any, Dict, List, Optional


def is_success(result: Dict[str, Any]) -> bool:
    """Check whether an envelope reports success."""
    return bool(result.get("ok"))


def validation_response(
    status: str,
    issues: Optional[List[Dict[str, Any]]] = None,
    metrics: Optional[Dict[str, Any]] = None,
    warnings: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Wrap the findings of a layout check in the shared envelope.

    Only an "error" status makes the envelope unsuccessful; "warning" and
    "ok" both leave ``ok`` set. Empty metrics and warnings are left out.

    Returns:
        {"ok": bool, "data": {"status", "issues", "metrics"?}, "warnings"?}
    """
    data: Dict[str, Any] = {"status": status, "issues": list(issues or [])}
    if metrics:
        data["metrics"] = metrics

    response: Dict[str, Any] = {"ok": status != "error", "data": data}
    if warnings:
        response["warnings"] = warnings
    return response


def create_issue(
    severity: str,
    message: str,
    location: Optional[str] = None,
    code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """One finding about a layout.

    ``severity`` is "error", "warning" or "info". ``location`` names the node
    or link the finding is about, and ``code`` is a stable machine-readable
    tag such as MISSING_ENDPOINT. Optional fields are dropped when empty.
    """
    issue: Dict[str, Any] = {"severity": severity, "message": message}
    optional = {"location": location, "code": code, "details": details}
    issue.update((key, value) for key, value in optional.items() if value)
    return issue


def status_for(issues: List[Dict[str, Any]]) -> str:
    """Worst severity among issues mapped to an overall status."""
    severities = {issue["severity"] for issue in issues}
    if "error" in severities:
        return "error"
    if "warning" in severities:
        return "warning"
    return "ok"
