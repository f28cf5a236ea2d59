from index_points import REFERENCE_POINTS, build_point_index, prepare_point, prepare_points


def test_prepare_point_attaches_derived_fields():
    record = {"properties": {"name": "HUB", "tag": "ops"},
              "geometry": {"type": "Point", "coordinates": [-82.492696, 27.8602]}}
    point = prepare_point(record)
    assert point["name"] == "HUB"
    assert point["position"] == (-82.492696, 27.8602)
    assert point["group"] == "RED_GROUP"
    assert point["tag"] == "ops"
    assert point["icon"] is None
    assert point["record"] is record


def test_index_last_write_wins():
    points = [
        {"name": "A", "coordinates": [0, 0]},
        {"name": "A", "coordinates": [1, 1]},
    ]
    index = build_point_index(points)
    assert index["A"]["position"] == (1.0, 1.0)


def test_reference_point_is_injected(points_data):
    index = build_point_index(points_data)
    assert "E6" in index
    assert index["E6"]["position"] == (-124.122174, 39.676226)
    assert index["E6"]["group"] == "YELLOW_GROUP"


def test_reference_point_does_not_override_source():
    index = build_point_index([{"name": "E6", "coordinates": [5, 5]}])
    assert index["E6"]["position"] == (5.0, 5.0)


def test_prepare_points_keeps_duplicates_and_appends_references():
    records = [{"name": "A", "coordinates": [0, 0]}, {"name": "A", "coordinates": [0, 0]}]
    points = prepare_points(records)
    assert [p["name"] for p in points] == ["A", "A"] + [r["properties"]["name"] for r in REFERENCE_POINTS]


def test_unreadable_position_is_still_indexed():
    index = build_point_index([{"name": "Broken", "coordinates": ["x"]}])
    assert index["Broken"]["position"] is None
