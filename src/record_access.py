"""
Uniform field access for point and connection records.

Records arrive either as flat dicts or as GeoJSON-like features that keep
their fields under "properties". A few old exports also carry the connection
type under a legacy camelCase key.
"""

from typing import Any, Optional


# Legacy spellings still present in older connection exports
LEGACY_ALIASES = {
    "Connection_type": "connectionType",
    "connection_type": "connectionType",
}


def _direct(record, key):
    return record.get(key)


def _nested(record, key):
    props = record.get("properties")
    if isinstance(props, dict):
        return props.get(key)
    return None


def _legacy(record, key):
    alias = LEGACY_ALIASES.get(key)
    if alias is None:
        return None
    return record.get(alias)


# Tried in order; first non-None value wins
PROPERTY_STRATEGIES = [_direct, _nested, _legacy]


def get_prop(record: Any, key: str) -> Any:
    """Read a field from a record, trying each accessor strategy in turn."""
    if not isinstance(record, dict):
        return None
    for strategy in PROPERTY_STRATEGIES:
        value = strategy(record, key)
        if value is not None:
            return value
    return None


def feature_list(data: Any) -> list:
    """Unwrap a FeatureCollection-style wrapper, or pass a flat list through."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("features"), list):
        return data["features"]
    return []


def _as_pair(coords) -> Optional[tuple]:
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        return None
    try:
        return (float(coords[0]), float(coords[1]))
    except (TypeError, ValueError):
        return None


def lng_lat(obj: Any) -> Optional[tuple]:
    """Return (lng, lat) from a Point geometry or a bare coordinates pair."""
    if not isinstance(obj, dict):
        return None
    geometry = obj.get("geometry")
    if isinstance(geometry, dict) and geometry.get("type") == "Point":
        return _as_pair(geometry.get("coordinates"))
    return _as_pair(obj.get("coordinates"))


def point_name(record: Any) -> str:
    name = get_prop(record, "name")
    return "" if name is None else str(name)
