"""
Styling tables for the overlay renderer.

Colours are RGBA lists as the map layers expect them. The pie marker is an
inline SVG so co-located points can be drawn as a single multi-sector icon.
"""

import math
from typing import Any
from urllib.parse import quote


# Connection category -> RGBA
CONNECTION_COLORS = {
    "N": [0, 128, 200, 220],
    "C": [0, 200, 0, 220],
    "HF": [200, 0, 0, 220],
}
UNCLASSIFIED_COLOR = [128, 128, 128, 200]

# Arc tilt (degrees) per category
CONNECTION_TILT = {
    "N": 5,
    "C": 10,
    "HF": 0,
}

# Point group -> RGBA
POINT_GROUP_COLORS = {
    "RED_GROUP": [200, 0, 0, 220],
    "TURQUOISE_GROUP": [64, 224, 208, 220],
    "YELLOW_GROUP": [255, 255, 0, 220],
    "GREEN_GROUP": [0, 128, 0, 220],
    "PURPLE_GROUP": [128, 0, 128, 220],
    "ORANGE_GROUP": [255, 165, 0, 220],
    "BLUE_GROUP": [0, 120, 255, 220],
    "VIOLET_GROUP": [130, 42, 245, 220],
    "PINK_GROUP": [255, 105, 180, 220],
    "WHITE_GROUP": [197, 110, 255, 220],
}

# Icon class -> image path (relative to the web root)
ICON_IMAGES = {
    "airplane": "database/icons/airplane.png",
    "boat": "database/icons/a-large-navy-ship-silhouette-vector.png",
    "truck": "database/icons/truck.png",
    "trailer": "database/icons/trailer.png",
}

# Aggregate styling by number of distinct categories (1, 2, 3+)
AGGREGATE_STYLES = [
    {"level": "single", "width": 2, "color": [160, 160, 160, 200]},
    {"level": "warning", "width": 4, "color": [255, 165, 0, 220]},
    {"level": "alert", "width": 6, "color": [220, 20, 60, 230]},
]

MARKER_SIZE_PX = 32


def connection_color(category: str) -> list:
    return list(CONNECTION_COLORS.get(category, UNCLASSIFIED_COLOR))


def darker(color: list) -> list:
    """Half-brightness version of an RGBA colour (alpha kept)."""
    r, g, b = color[:3]
    a = color[3] if len(color) > 3 else 255
    return [int(r * 0.5), int(g * 0.5), int(b * 0.5), a]


def connection_tilt(category: str) -> int:
    return CONNECTION_TILT.get(category, 0)


def point_color(group: str) -> list:
    return list(POINT_GROUP_COLORS.get(group, POINT_GROUP_COLORS["BLUE_GROUP"]))


def aggregate_style(categories: list) -> dict[str, Any]:
    """Step style for an aggregate: more distinct categories, heavier line."""
    step = max(1, min(len(categories), len(AGGREGATE_STYLES)))
    style = AGGREGATE_STYLES[step - 1]
    return {"level": style["level"], "width": style["width"], "color": list(style["color"])}


def _rgba_css(color: list) -> str:
    r, g, b = color[:3]
    a = color[3] if len(color) > 3 else 255
    return f"rgba({r},{g},{b},{round(a / 255, 3)})"


def marker_svg(colors: list, size: int = MARKER_SIZE_PX) -> str:
    """SVG marker: plain circle for one colour, equal pie slices for several."""
    c = size / 2
    r = c - 1
    stroke = 'stroke="rgba(0,0,0,0.8)" stroke-width="1"'

    if len(colors) <= 1:
        fill = _rgba_css(colors[0]) if colors else _rgba_css(UNCLASSIFIED_COLOR)
        body = f'<circle cx="{c}" cy="{c}" r="{r}" fill="{fill}" {stroke}/>'
    else:
        slice_angle = 360 / len(colors)
        paths = []
        for i, color in enumerate(colors):
            # Slices start at 12 o'clock and run clockwise
            start = math.radians(-90 + i * slice_angle)
            end = math.radians(-90 + (i + 1) * slice_angle)
            x1, y1 = c + r * math.cos(start), c + r * math.sin(start)
            x2, y2 = c + r * math.cos(end), c + r * math.sin(end)
            large_arc = 1 if slice_angle > 180 else 0
            paths.append(
                f'<path d="M{c},{c} L{x1:.3f},{y1:.3f} '
                f'A{r},{r} 0 {large_arc} 1 {x2:.3f},{y2:.3f} Z" '
                f'fill="{_rgba_css(color)}" {stroke}/>'
            )
        body = "".join(paths)

    return (f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" '
            f'viewBox="0 0 {size} {size}">{body}</svg>')


def marker_data_url(colors: list, size: int = MARKER_SIZE_PX) -> str:
    return "data:image/svg+xml;charset=utf-8," + quote(marker_svg(colors, size))
