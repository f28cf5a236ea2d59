"""
Co-located point grouping.

Points that share exactly the same coordinates are merged into one marker.
Groups with several members get a pie-slice icon (one slice per member) and
their labels are spread around a circle so they do not overlap.
"""

import numpy as np

from overlay_styles import MARKER_SIZE_PX, marker_data_url, point_color


LABEL_RADIUS_PX = 24
# Used by the renderer for single-member groups (label below the marker)
DEFAULT_LABEL_OFFSET = [0, 18]


def label_offsets(count, radius=LABEL_RADIUS_PX):
    """
    Label offsets for `count` co-located markers.

    Slice i gets its label at the middle of its slice, starting at 12 o'clock
    and going clockwise (screen y points down). A single member gets none.
    """
    if count <= 1:
        return []
    slice_angle = 360.0 / count
    mid_angles = np.radians(-90.0 + np.arange(count) * slice_angle + slice_angle / 2)
    xs = radius * np.cos(mid_angles)
    ys = radius * np.sin(mid_angles)
    return [[float(x), float(y)] for x, y in zip(xs, ys)]


def icon_descriptor(colors):
    """Marker icon for a group: plain circle for one colour, pie for several."""
    shape = "pie" if len(colors) > 1 else "circle"
    return {
        "id": shape + ":" + ";".join(",".join(str(v) for v in c) for c in colors),
        "shape": shape,
        "colors": colors,
        "url": marker_data_url(colors),
        "width": MARKER_SIZE_PX,
        "height": MARKER_SIZE_PX,
        "anchorX": MARKER_SIZE_PX // 2,
        "anchorY": MARKER_SIZE_PX // 2,
    }


def location_group(position, members):
    """Build one location marker (colours, icon, label offsets) from its members."""
    colors = [point_color(p["group"]) for p in members]
    return {
        "key": f"{position[0]!r},{position[1]!r}",
        "position": list(position),
        "members": members,
        "member_count": len(members),
        "colors": colors,
        "icon": icon_descriptor(colors),
        "label_offsets": label_offsets(len(members)),
    }


def group_colocated_points(points):
    """Group prepared points by exact position, in first-appearance order."""
    by_position = {}
    for point in points:
        position = point.get("position")
        if position is None:
            continue
        by_position.setdefault(tuple(position), []).append(point)

    groups = [location_group(position, members) for position, members in by_position.items()]

    shared = sum(1 for g in groups if g["member_count"] > 1)
    print(f"Grouped {len(points)} points into {len(groups)} locations ({shared} shared)")
    return groups
