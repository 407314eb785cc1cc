#!/usr/bin/env python3
"""
High School Campus Example
Lays out a small school network: internet edge, core, a server room and two
building zones, then checks links and writes the layout to a project folder.
"""

import logging
from pathlib import Path
import sys
sys.path.append(str(Path(__file__).parent.parent))

from topoflow import instantiate_layout, place_device, stack_devices
from topoflow.core.layout_store import LayoutStore
from topoflow.models.layout_types import LayoutBlueprint, Link, ZoneDefinition
from topoflow.validators.links import validate_links

NODE_GAP = 10
ROW_GAP = round(NODE_GAP * 1.4)

NETWORK = {
    "isp": {"ipAddress": "203.0.113.1", "subnet": "203.0.113.0/30"},
    "perimeter-fw": {"ipAddress": "10.0.0.1", "subnet": "10.0.0.0/29"},
    "core-router": {"ipAddress": "10.0.0.2", "subnet": "10.0.0.0/29"},
    "core-switch": {"ipAddress": "10.0.1.1", "subnet": "10.0.1.0/24"},
    "app-servers": {"ipAddress": "172.16.10.30", "subnet": "172.16.10.0/24"},
    "student-db": {"ipAddress": "172.16.20.10", "subnet": "172.16.20.0/24"},
    "admin-access": {"ipAddress": "10.3.1.1", "subnet": "10.3.0.0/22", "vlan": 30},
    "classroom-access": {"ipAddress": "10.4.1.1", "subnet": "10.4.0.0/22", "vlan": 40},
}


def device(template, node_id, **overrides):
    """Stack item with the node's network profile attached."""
    if node_id in NETWORK:
        overrides["network"] = NETWORK[node_id]
    return {"template": template, "id": node_id, "overrides": overrides or None}


def build_blueprint() -> LayoutBlueprint:
    zones = [
        ZoneDefinition(id="edge", label="Internet Edge", origin={"x": 0, "y": 0}),
        ZoneDefinition(id="core", label="Campus Core", origin={"x": 0, "y": 30}),
        ZoneDefinition(id="servers", label="Server Room", origin={"x": 60, "y": 30}),
        ZoneDefinition(id="admin", label="Administration", origin={"x": 0, "y": 70}),
        ZoneDefinition(id="classrooms", label="Classrooms", origin={"x": 50, "y": 70}),
    ]

    nodes = [
        *stack_devices(
            "horizontal",
            [
                device("internetGateway", "isp"),
                device("perimeterFirewall", "perimeter-fw"),
            ],
            zone="edge",
            start={"x": 0, "y": 0},
            gap=NODE_GAP,
        ),
        place_device(
            "router",
            id="core-router",
            zone="core",
            position={"x": 0, "y": 0},
            overrides={"network": NETWORK["core-router"]},
        ),
        place_device(
            "multilayerSwitch",
            id="core-switch",
            zone="core",
            position={"reference": "core-router", "offsetY": ROW_GAP},
            overrides={"network": NETWORK["core-switch"]},
        ),
        place_device("wirelessController", id="wlc", zone="core", position={"x": NODE_GAP, "y": 0}),
        *stack_devices(
            "vertical",
            [
                device("server", "app-servers", multipleInstances=True),
                device("databaseCluster", "student-db"),
            ],
            zone="servers",
            start={"x": 0, "y": 0},
            gap=ROW_GAP,
        ),
        *stack_devices(
            "vertical",
            [
                device("accessSwitch", "admin-access"),
                device("workstation", "admin-clients", multipleInstances=True),
                device("printer", "admin-printers"),
            ],
            zone="admin",
            start={"x": 0, "y": 0},
            gap=ROW_GAP,
        ),
        *stack_devices(
            "vertical",
            [
                device("poeSwitch", "classroom-access"),
                device("accessPoint", "classroom-ap"),
                device("endpointCluster", "classroom-users", label="Student Devices"),
            ],
            zone="classrooms",
            start={"x": 0, "y": 0},
            gap=ROW_GAP,
        ),
        place_device("cctv", id="cctv-system", zone="classrooms", position={"x": NODE_GAP, "y": 0}),
    ]

    links = [
        Link(source="isp", target="perimeter-fw"),
        Link(source="perimeter-fw", target="core-router"),
        Link(source="core-router", target="core-switch"),
        Link(source="core-switch", target="wlc", dashed=True),
        Link(source="core-switch", target="app-servers", routing="orthogonal"),
        Link(source="app-servers", target="student-db"),
        Link(source="core-switch", target="admin-access", routing="orthogonal", orientation="vertical-first"),
        Link(source="admin-access", target="admin-clients"),
        Link(source="admin-access", target="admin-printers"),
        Link(source="core-switch", target="classroom-access", routing="orthogonal", orientation="vertical-first"),
        Link(source="classroom-access", target="classroom-ap", dashed=True),
        Link(source="classroom-ap", target="classroom-users", dashed=True),
        Link(source="classroom-access", target="cctv-system"),
    ]

    settings = {
        "profile": "compact",
        "canvas": {"padding": {"top": 1, "right": 4, "bottom": 1, "left": 4}, "maxWidth": 160},
        "zoneSpacing": {"horizontal": 2, "vertical": 2},
        "nodeSpacing": NODE_GAP,
        "maxNodeSize": 44,
        "minNodeScale": 0.65,
        "linkStyle": {"width": 0.5, "dashArray": "2 3"},
    }

    return LayoutBlueprint(zones=zones, nodes=nodes, links=links, settings=settings)


def main():
    """Build, check and save the campus layout."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("Creating High School Campus Layout...")
    print("=" * 50)

    layout = instantiate_layout(build_blueprint())
    canvas = layout.canvas
    print(f"\n1. Canvas {canvas.width:.1f} x {canvas.height:.1f} (scale {canvas.scale:.3f})")

    print("\n2. Zones")
    for zone in layout.zones:
        print(f"   {zone.label:<16} left={zone.left:6.1f} top={zone.top:6.1f} "
              f"size={zone.width:.1f}x{zone.height:.1f}")

    print("\n3. Nodes")
    for node in layout.nodes:
        print(f"   {node.id:<18} ({node.x:6.1f}, {node.y:6.1f}) size={node.size:.1f}")

    report = validate_links(layout)
    print(f"\n4. Link check: {report['data']['status']} "
          f"({len(report['data']['issues'])} issues)")

    project_path = "/tmp/example_projects/highschool"
    store = LayoutStore()
    layout_id = store.save(layout)
    path = store.save_to_file(layout_id, project_path, "campus")
    print(f"\n5. Saved layout to {path}")
    print(f"   etag: {store.get_record(layout_id).etag[:12]}...")


if __name__ == "__main__":
    main()
