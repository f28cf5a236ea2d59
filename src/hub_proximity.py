"""Tests whether connections touch one of the two fixed hubs."""

HUB_EPSILON = 1e-6

# (lng, lat)
HUB1 = (-82.492696, 27.8602)
HUB2 = (9.077841, 48.734481)


def touches_hub(position, hub, epsilon=HUB_EPSILON):
    """True if both axes are within epsilon of the hub (plain abs difference)."""
    if position is None:
        return False
    try:
        lng, lat = position[0], position[1]
        return abs(lng - hub[0]) <= epsilon and abs(lat - hub[1]) <= epsilon
    except (TypeError, IndexError):
        return False


def connection_touches_hub(connection, hub, epsilon=HUB_EPSILON):
    return (touches_hub(connection.get("source_position"), hub, epsilon)
            or touches_hub(connection.get("target_position"), hub, epsilon))
