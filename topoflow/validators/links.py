"""Link integrity checks for resolved layouts.

Renderers call validate_links() before drawing. The layout is only read.
"""

import logging
from collections import Counter
from typing import Any, Dict, List

import networkx as nx

from topoflow.models.layout_types import FlowLayout
from topoflow.utils.response import create_issue, status_for, validation_response

logger = logging.getLogger(__name__)


def _link_label(source: str, target: str) -> str:
    return f"{source}->{target}"


def validate_links(layout: FlowLayout) -> Dict[str, Any]:
    """Report dangling, duplicate and isolated elements of a layout.

    Issues:
        error   MISSING_ENDPOINT  a link names a node the layout lacks
        warning DUPLICATE_LINK    the same source/target pair appears twice or more
        info    ISOLATED_NODE     a node no drawable link touches

    Returns:
        Validation envelope from validation_response()
    """
    issues: List[Dict[str, Any]] = []
    node_ids = set(layout.node_ids())

    for link in layout.links:
        for endpoint in (link.source, link.target):
            if endpoint not in node_ids:
                issues.append(create_issue(
                    "error",
                    f"Link {_link_label(link.source, link.target)} references missing node {endpoint}",
                    location=_link_label(link.source, link.target),
                    code="MISSING_ENDPOINT",
                    details={"endpoint": endpoint},
                ))

    pair_counts = Counter((link.source, link.target) for link in layout.links)
    for (source, target), count in pair_counts.items():
        if count > 1:
            issues.append(create_issue(
                "warning",
                f"Link {_link_label(source, target)} is declared {count} times",
                location=_link_label(source, target),
                code="DUPLICATE_LINK",
                details={"count": count},
            ))

    graph = layout.to_networkx_graph()
    isolated = sorted(nx.isolates(graph))
    for node_id in isolated:
        issues.append(create_issue(
            "info",
            f"Node {node_id} has no links",
            location=node_id,
            code="ISOLATED_NODE",
        ))

    metrics = {
        "nodes": graph.number_of_nodes(),
        "links": len(layout.links),
        "drawable_links": graph.number_of_edges(),
        "isolated_nodes": len(isolated),
    }

    status = status_for(issues)
    if status != "ok":
        logger.info(f"Link check finished with status {status} ({len(issues)} issues)")

    return validation_response(status, issues=issues, metrics=metrics)


__all__ = ["validate_links"]
