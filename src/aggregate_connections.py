"""
Aggregation of parallel connections.

All connections between the same two coordinates, in either direction, are
merged into one aggregate carrying the union of their categories and tags,
their count and the OR of their hub flags.

Co-located endpoints can have different names and groups, so the aggregate
also lists each member's category, endpoint groups and tags. The top-level
source/target fields are those of the first member.
"""

from overlay_styles import aggregate_style


def position_key(position):
    """Canonical string for a (lng, lat) position."""
    return f"{float(position[0])!r},{float(position[1])!r}"


def pair_key(source_position, target_position):
    """Order-independent key for an endpoint pair (A->B and B->A collide)."""
    return "|".join(sorted([position_key(source_position), position_key(target_position)]))


def aggregate_connections(connections):
    """Merge resolved connections by unordered endpoint pair."""
    accumulators = {}

    for conn in connections:
        key = pair_key(conn["source_position"], conn["target_position"])
        acc = accumulators.get(key)
        if acc is None:
            acc = {
                "key": key,
                "source": conn["source"],
                "target": conn["target"],
                "source_position": conn["source_position"],
                "target_position": conn["target_position"],
                "source_group": conn["source_group"],
                "target_group": conn["target_group"],
                # dicts as insertion-ordered sets
                "categories": {},
                "tags": {},
                "count": 0,
                # per-connection fields the visibility rule needs
                "members": [],
                "touches_hub1": False,
                "touches_hub2": False,
            }
            accumulators[key] = acc

        acc["categories"][conn["category"]] = None
        for tag in conn["tags"]:
            acc["tags"][tag] = None
        acc["members"].append({
            "source": conn["source"],
            "target": conn["target"],
            "category": conn["category"],
            "source_group": conn["source_group"],
            "target_group": conn["target_group"],
            "tags": list(conn["tags"]),
        })
        acc["count"] += 1
        acc["touches_hub1"] = acc["touches_hub1"] or conn["touches_hub1"]
        acc["touches_hub2"] = acc["touches_hub2"] or conn["touches_hub2"]

    aggregates = []
    for acc in accumulators.values():
        acc["categories"] = list(acc["categories"])
        acc["tags"] = list(acc["tags"])
        acc["style"] = aggregate_style(acc["categories"])
        aggregates.append(acc)

    print(f"Aggregated {len(connections)} connections into {len(aggregates)} endpoint pairs")
    return aggregates
