"""
Classification of raw overlay records.

Connections get a normalized category (N / C / HF), points get a colour group
from a static name table, and both can carry tags used by the tag filter.
"""

from record_access import get_prop, point_name


# Connection categories shown in the legend
CONNECTION_TYPES = ["N", "C", "HF"]

# Empty category: valid, but matches no filter value
UNCLASSIFIED = ""

# Old type spellings -> canonical short form
LEGACY_CONNECTION_TYPES = {
    "N_TYPE": "N",
}

CATEGORY_FIELDS = ["Connection_type", "connection_type"]


# Point groups (drive marker colour and the group filter)
POINT_GROUPS = [
    "RED_GROUP", "TURQUOISE_GROUP", "YELLOW_GROUP", "GREEN_GROUP",
    "PURPLE_GROUP", "ORANGE_GROUP", "BLUE_GROUP", "VIOLET_GROUP",
    "PINK_GROUP", "WHITE_GROUP",
]

DEFAULT_POINT_GROUP = "BLUE_GROUP"

# Point name -> group. Exact, case-sensitive match.
POINT_GROUP_LOOKUP = {
    # VIOLET_GROUP
    "sb": "VIOLET_GROUP",

    # YELLOW_GROUP
    "H_AK": "YELLOW_GROUP",
    "Point 13": "YELLOW_GROUP",
    "E6": "YELLOW_GROUP",
    "Point 6": "YELLOW_GROUP",

    # PURPLE_GROUP
    "Support Team": "PURPLE_GROUP",

    # ORANGE_GROUP
    "B": "ORANGE_GROUP",

    # GREEN_GROUP
    "M": "GREEN_GROUP",

    # RED_GROUP
    "HUB": "RED_GROUP",

    # TURQUOISE_GROUP
    "PENT": "TURQUOISE_GROUP",
    "COS": "TURQUOISE_GROUP",
    "TB": "TURQUOISE_GROUP",
    "RR": "TURQUOISE_GROUP",
    "AZ": "TURQUOISE_GROUP",
    "IP": "TURQUOISE_GROUP",

    # PINK_GROUP
    "SAN": "PINK_GROUP",
    "SBL": "PINK_GROUP",
    "LUL": "PINK_GROUP",

    # WHITE_GROUP
    "Cutler": "WHITE_GROUP",
    "Grindavik": "WHITE_GROUP",
    "Awase": "WHITE_GROUP",
    "Harold E. Holt": "WHITE_GROUP",
    # FIXME: earlier tables put Aguada in PINK_GROUP too; latest mapping kept
    "Aguada": "WHITE_GROUP",
    "Wahiawa": "WHITE_GROUP",
    "Naples": "WHITE_GROUP",
    "Dixon": "WHITE_GROUP",
    "Jim Creek": "WHITE_GROUP",
    "La Moure": "WHITE_GROUP",
    "Norfolk": "WHITE_GROUP",
    "Yokosuka": "WHITE_GROUP",
    "Oklahoma City": "WHITE_GROUP",
}

# Icon classes drawn with an image instead of a plain marker
ICON_CLASSES = ["airplane", "boat", "truck", "trailer"]


def normalize_category(value):
    category = str(value if value is not None else "").strip().upper()
    return LEGACY_CONNECTION_TYPES.get(category, category)


def normalize_tag(value):
    return str(value).strip().upper()


def connection_category(record):
    """Normalize the connection type of a record ("N_TYPE" -> "N")."""
    raw = None
    for field in CATEGORY_FIELDS:
        raw = get_prop(record, field)
        if raw is not None:
            break
    return normalize_category(raw)


def point_group(point):
    """Look up the group of a point by name; unknown names get the default group."""
    return POINT_GROUP_LOOKUP.get(point_name(point), DEFAULT_POINT_GROUP)


def tag_array(record, key="tags"):
    """Return the record's tags upper-cased; anything that is not a list means no tags."""
    value = get_prop(record, key)
    if not isinstance(value, list):
        return []
    tags = []
    for item in value:
        if item is None:
            continue
        text = normalize_tag(item)
        if text:
            tags.append(text)
    return tags


def point_tag(point):
    tag = get_prop(point, "tag")
    return "" if tag is None else str(tag).strip()


def point_icon(point):
    """Return the point's icon class if it is one we have an image for."""
    icon = get_prop(point, "icon")
    if not icon:
        return None
    icon = str(icon).strip().lower()
    return icon if icon in ICON_CLASSES else None
