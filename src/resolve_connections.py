"""
Connection resolution.

Each raw connection names its two endpoints, either as a plain string or as an
embedded object with a "name". Endpoints are looked up in the point index; the
resolved connection carries both positions, both endpoint groups, its category,
tags and hub flags. Connections with an endpoint that does not resolve are
dropped.
"""

from classify_records import DEFAULT_POINT_GROUP, connection_category, tag_array
from hub_proximity import HUB1, HUB2, connection_touches_hub
from record_access import feature_list, get_prop, lng_lat, point_name


# First field present wins
ENDPOINT_FIELDS = {
    "source": ["from", "source"],
    "target": ["to", "target"],
}


class LongitudeSplitRule:
    """
    Keep connections of one category only on one side of a longitude line,
    depending on which of two named sources they start from.

    Connections from `west_source` are kept when the target lies west of
    `threshold`; connections from `east_source` when it lies on or east of it.
    Anything else passes untouched.
    """

    def __init__(self, category, west_source, east_source, threshold):
        self.category = category
        self.west_source = west_source
        self.east_source = east_source
        self.threshold = threshold

    def allows(self, category, source_name, target_position):
        if category != self.category or target_position is None:
            return True
        lng = target_position[0]
        if source_name == self.west_source:
            return lng < self.threshold
        if source_name == self.east_source:
            return lng >= self.threshold
        return True

    def __repr__(self):
        return (f"LongitudeSplitRule({self.category!r}, west={self.west_source!r}, "
                f"east={self.east_source!r}, threshold={self.threshold})")


# HF links out of the FL hub only go west of the Atlantic, those out of Naples only east.
# Remove once the duplicated HF links are cleaned up in the source data.
HF_LONGITUDE_SPLIT = LongitudeSplitRule("HF", west_source="HUB", east_source="Naples", threshold=-30.0)

INCLUSION_RULES = [HF_LONGITUDE_SPLIT]


def endpoint_ref(record, side):
    for field in ENDPOINT_FIELDS[side]:
        ref = get_prop(record, field)
        if ref is not None:
            return ref
    return None


def endpoint_name(ref):
    """Name of an endpoint reference (plain string or embedded object)."""
    if isinstance(ref, str):
        return ref.strip()
    if isinstance(ref, dict):
        return point_name(ref)
    return ""


def _lookup(index, name):
    if not name:
        return None
    return index.get(name)


def resolve_connection(record, index, rules=INCLUSION_RULES):
    """Resolve one raw connection; returns None if it must be dropped."""
    source_ref = endpoint_ref(record, "source")
    target_ref = endpoint_ref(record, "target")
    source_name = endpoint_name(source_ref)
    target_name = endpoint_name(target_ref)

    source_point = _lookup(index, source_name)
    target_point = _lookup(index, target_name)
    source_position = source_point["position"] if source_point else None
    target_position = target_point["position"] if target_point else None

    category = connection_category(record)

    # Rules may look at an unresolved target through its embedded coordinates
    rule_target = target_position
    if rule_target is None and isinstance(target_ref, dict):
        rule_target = lng_lat(target_ref)
    for rule in rules:
        if not rule.allows(category, source_name, rule_target):
            return None

    if source_position is None or target_position is None:
        return None

    connection = {
        "source": source_name,
        "target": target_name,
        "category": category,
        "tags": tag_array(record),
        "source_group": source_point["group"] if source_point else DEFAULT_POINT_GROUP,
        "target_group": target_point["group"] if target_point else DEFAULT_POINT_GROUP,
        "source_position": source_position,
        "target_position": target_position,
        "record": record,
    }
    connection["touches_hub1"] = connection_touches_hub(connection, HUB1)
    connection["touches_hub2"] = connection_touches_hub(connection, HUB2)
    return connection


def resolve_connections(raw_connections, index, rules=INCLUSION_RULES):
    """Resolve all connections, keeping input order."""
    resolved = []
    skipped = 0
    for record in feature_list(raw_connections):
        try:
            connection = resolve_connection(record, index, rules)
        except (TypeError, ValueError) as e:
            print(f"Warning: Skipping malformed connection: {e}")
            connection = None
        if connection is None:
            skipped += 1
            continue
        resolved.append(connection)

    print(f"Resolved {len(resolved)} connections ({skipped} dropped)")
    return resolved
