#!/usr/bin/env python3
"""
Map Overlay Preprocessing

Loads the point and connection sources, resolves connection endpoints,
aggregates parallel connections and groups co-located points. The result is
what the overlay renderer filters on every toggle.

Stages:
1. Point preparation + name index (with fixed reference points)
2. Connection resolution (drops unresolved endpoints, applies inclusion rules)
3. Aggregation of parallel connections by unordered endpoint pair
4. Co-location grouping of points with identical coordinates

Usage:
    python src/build_overlay.py --points data/points.json \
        --connections data/connections_geojson_like.json --output data/overlay.json
"""

import argparse
import asyncio
import json
from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Any

from aggregate_connections import aggregate_connections
from filter_visibility import (
    FilterState,
    filter_state_key,
    is_aggregate_visible,
    is_connection_visible,
    is_icon_point_visible,
    is_marker_visible,
)
from group_colocated import group_colocated_points, location_group
from index_points import index_by_name, prepare_points
from record_access import feature_list
from resolve_connections import resolve_connections


def load_json_data(filepath) -> Any:
    """Load a record source from a JSON file."""
    with open(filepath, "r") as f:
        return json.load(f)


async def load_sources(points_path, connections_path):
    """Load both sources concurrently; returns once both are in."""
    points_data, connections_data = await asyncio.gather(
        asyncio.to_thread(load_json_data, points_path),
        asyncio.to_thread(load_json_data, connections_path),
    )
    print(f"Loaded {len(feature_list(points_data))} points from {points_path}")
    print(f"Loaded {len(feature_list(connections_data))} connections from {connections_path}")
    return points_data, connections_data


def preprocess_overlay(points_data, connections_data) -> dict[str, Any]:
    """Run the single preprocessing pass over both sources."""
    points = prepare_points(points_data)
    index = index_by_name(points)
    print(f"Indexed {len(index)} named points")

    connections = resolve_connections(connections_data, index)
    aggregates = aggregate_connections(connections)
    colocated = group_colocated_points(points)

    category_counts = defaultdict(int)
    for conn in connections:
        category_counts[conn["category"] or "unclassified"] += 1

    return {
        "points": points,
        "index": index,
        "connections": connections,
        "aggregates": aggregates,
        "colocated": colocated,
        "summary": {
            "points": len(points),
            "connections_in": len(feature_list(connections_data)),
            "connections": len(connections),
            "aggregates": len(aggregates),
            "locations": len(colocated),
            "categories": dict(category_counts),
        },
    }


def visible_locations(colocated, state: FilterState) -> list:
    """
    Location markers restricted to their visible members. A group whose
    members are partly hidden is rebuilt, so hidden points get no pie slice
    and no label.
    """
    locations = []
    for group in colocated:
        members = [p for p in group["members"] if is_marker_visible(p, state)]
        if not members:
            continue
        if len(members) == group["member_count"]:
            locations.append(group)
        else:
            locations.append(location_group(group["position"], members))
    return locations


def render_payload(overlay, state: FilterState) -> dict[str, Any]:
    """
    Everything the renderer needs for the current filter state.

    Plain markers are only in "colocated" (one entry per position, single
    points included); icon-class points are only in "icons".
    """
    if state.aggregated_view:
        connections = [a for a in overlay["aggregates"] if is_aggregate_visible(a, state)]
    else:
        connections = [c for c in overlay["connections"] if is_connection_visible(c, state)]

    return {
        "filter_key": filter_state_key(state),
        "aggregated_view": state.aggregated_view,
        "show_connection_labels": state.show_connection_labels,
        "show_point_labels": state.show_point_labels,
        "connections": connections,
        "icons": [p for p in overlay["points"] if is_icon_point_visible(p, state)],
        "colocated": visible_locations(overlay["colocated"], state),
    }


def build_overlay(points_path, connections_path) -> dict[str, Any]:
    points_data, connections_data = asyncio.run(load_sources(points_path, connections_path))
    return preprocess_overlay(points_data, connections_data)


def main():
    parser = argparse.ArgumentParser(description='Preprocess point/connection sources for the map overlay')
    parser.add_argument('--points', type=str, default='data/points.json',
                        help='Point source (list or FeatureCollection)')
    parser.add_argument('--connections', type=str, default='data/connections_geojson_like.json',
                        help='Connection source (list or FeatureCollection)')
    parser.add_argument('--output', type=str, default='data/overlay.json',
                        help='Output file path')
    args = parser.parse_args()

    overlay = build_overlay(args.points, args.connections)

    data = {
        "metadata": {
            "title": "Map Overlay",
            "points_source": args.points,
            "connections_source": args.connections,
            "created": datetime.now().strftime("%Y-%m-%d %H:%M"),
            **overlay["summary"],
        },
        "points": overlay["points"],
        "connections": overlay["connections"],
        "aggregates": overlay["aggregates"],
        "colocated": overlay["colocated"],
    }

    output_file = Path(args.output)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, 'w') as f:
        json.dump(data, f, indent=2, default=str)

    print(f"\nGenerated {args.output}")
    print(f"  Points: {overlay['summary']['points']}")
    print(f"  Connections: {overlay['summary']['connections']} of {overlay['summary']['connections_in']}")
    print(f"  Aggregates: {overlay['summary']['aggregates']}")
    print(f"  Locations: {overlay['summary']['locations']}")


if __name__ == "__main__":
    main()
