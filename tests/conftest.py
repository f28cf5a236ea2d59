"""Shared overlay fixtures."""
import pytest

from hub_proximity import HUB1, HUB2


CUTLER = [-67.28, 44.64]
NAPLES = [14.2681, 40.8518]
UNKNOWN_SITE = [-100.0, 40.0]


def point_feature(name, coords, **props):
    return {
        "type": "Feature",
        "properties": {"name": name, **props},
        "geometry": {"type": "Point", "coordinates": list(coords)},
    }


def connection_feature(conn_type, source, target, **props):
    return {
        "type": "Feature",
        "properties": {"Connection_type": conn_type, "from": source, "to": target, **props},
        "geometry": None,
    }


@pytest.fixture
def points_data():
    return {
        "type": "FeatureCollection",
        "features": [
            point_feature("HUB", HUB1),
            point_feature("Naples", NAPLES),
            point_feature("sb", HUB2),
            point_feature("Cutler", CUTLER),
            point_feature("Point 6", CUTLER, tag="relay"),
            point_feature("Unknown Site", UNKNOWN_SITE),
            point_feature("Carrier", [-40.0, 30.0], icon="Boat"),
        ],
    }


@pytest.fixture
def connections_data():
    return {
        "type": "FeatureCollection",
        "features": [
            connection_feature("N_TYPE", {"name": "HUB", "coordinates": list(HUB1)}, {"name": "Cutler"},
                               tags=["sat"]),
            connection_feature("C", "Cutler", "HUB"),
            # HF out of HUB towards the east: dropped by the longitude split
            connection_feature("HF", "HUB", "Naples"),
            connection_feature("HF", "HUB", "Unknown Site", tags=["vlf", "SAT"]),
            connection_feature("HF", "Naples", "sb"),
            # target missing from the point source
            connection_feature("N", "sb", "Missing"),
            # flat record, reference point, lower-case type
            {"connection_type": " hf ", "from": "E6", "to": "Cutler"},
            connection_feature("HF", {"name": "HUB"}, {"name": "Cutler", "coordinates": CUTLER}),
        ],
    }
