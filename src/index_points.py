"""Name -> point lookup used to resolve connection endpoints."""

from classify_records import point_group, point_icon, point_tag
from record_access import feature_list, lng_lat, point_name


# Fixed reference points that connections use but the point source lacks
REFERENCE_POINTS = [
    {
        "type": "Feature",
        "properties": {"name": "E6"},
        "geometry": {"type": "Point", "coordinates": [-124.122174, 39.676226]},
    },
]


def prepare_point(record):
    """Attach the derived fields (position, group, tag, icon) to a raw point."""
    return {
        "name": point_name(record),
        "position": lng_lat(record),
        "group": point_group(record),
        "tag": point_tag(record),
        "icon": point_icon(record),
        "record": record,
    }


def prepare_points(records, reference_points=REFERENCE_POINTS):
    """Prepare all source points, then append reference points whose name is missing."""
    points = [prepare_point(record) for record in feature_list(records)]
    names = {p["name"] for p in points}
    for record in reference_points:
        point = prepare_point(record)
        if point["name"] not in names:
            points.append(point)
            names.add(point["name"])
    return points


def index_by_name(points):
    # Duplicate names: last one wins
    return {point["name"]: point for point in points}


def build_point_index(records, reference_points=REFERENCE_POINTS):
    return index_by_name(prepare_points(records, reference_points))
