import pytest

from hub_proximity import HUB1, HUB2
from index_points import build_point_index
from resolve_connections import (
    HF_LONGITUDE_SPLIT,
    LongitudeSplitRule,
    endpoint_name,
    resolve_connection,
    resolve_connections,
)


@pytest.fixture
def index(points_data):
    return build_point_index(points_data)


def test_resolve_keeps_order_and_drops_unresolved(index, connections_data):
    resolved = resolve_connections(connections_data, index)
    pairs = [(c["source"], c["target"], c["category"]) for c in resolved]
    assert pairs == [
        ("HUB", "Cutler", "N"),
        ("Cutler", "HUB", "C"),
        ("HUB", "Unknown Site", "HF"),
        ("Naples", "sb", "HF"),
        ("E6", "Cutler", "HF"),
        ("HUB", "Cutler", "HF"),
    ]


def test_resolved_connections_always_have_positions(index, connections_data):
    for conn in resolve_connections(connections_data, index):
        assert conn["source_position"] is not None
        assert conn["target_position"] is not None


def test_resolved_fields(index, connections_data):
    first = resolve_connections(connections_data, index)[0]
    assert first["tags"] == ["SAT"]
    assert first["source_group"] == "RED_GROUP"
    assert first["target_group"] == "WHITE_GROUP"
    assert first["source_position"] == HUB1
    assert first["touches_hub1"] is True
    assert first["touches_hub2"] is False


def test_hub2_flag(index):
    conn = resolve_connection({"Connection_type": "HF", "from": "Naples", "to": "sb"}, index)
    assert conn["touches_hub2"] is True
    assert conn["touches_hub1"] is False


def test_endpoint_name_shapes():
    assert endpoint_name(" HUB ") == "HUB"
    assert endpoint_name({"name": "Cutler"}) == "Cutler"
    assert endpoint_name({"properties": {"name": "Naples"}}) == "Naples"
    assert endpoint_name(None) == ""
    assert endpoint_name(42) == ""


def test_source_target_fields_are_accepted(index):
    conn = resolve_connection({"Connection_type": "C", "source": "HUB", "target": "Cutler"}, index)
    assert conn is not None
    assert conn["target"] == "Cutler"


def test_missing_endpoint_name_does_not_match_unnamed_point():
    index = build_point_index([{"coordinates": [1, 1]}, {"name": "A", "coordinates": [0, 0]}])
    assert resolve_connection({"Connection_type": "C", "from": "A"}, index) is None


def test_hf_from_west_anchor_kept_only_west_of_threshold(index):
    west = {"Connection_type": "HF", "from": "HUB", "to": "Unknown Site"}
    east = {"Connection_type": "HF", "from": "HUB", "to": "Naples"}
    assert resolve_connection(west, index) is not None
    assert resolve_connection(east, index) is None


def test_hf_from_east_anchor_kept_only_east_of_threshold(index):
    east = {"Connection_type": "HF", "from": "Naples", "to": "sb"}
    west = {"Connection_type": "HF", "from": "Naples", "to": "Cutler"}
    assert resolve_connection(east, index) is not None
    assert resolve_connection(west, index) is None


def test_split_rule_ignores_other_categories(index):
    conn = {"Connection_type": "N", "from": "HUB", "to": "Naples"}
    assert resolve_connection(conn, index) is not None


def test_split_rule_direct():
    rule = LongitudeSplitRule("HF", west_source="W", east_source="E", threshold=0.0)
    assert rule.allows("HF", "W", (-1.0, 0.0))
    assert not rule.allows("HF", "W", (0.0, 0.0))
    assert rule.allows("HF", "E", (0.0, 0.0))
    assert not rule.allows("HF", "E", (-1.0, 0.0))
    assert rule.allows("HF", "Other", (-1.0, 0.0))
    assert rule.allows("C", "W", (5.0, 0.0))
    assert rule.allows("HF", "W", None)


def test_rules_can_be_replaced(index):
    conn = {"Connection_type": "HF", "from": "HUB", "to": "Naples"}
    assert resolve_connection(conn, index, rules=[]) is not None
    assert resolve_connection(conn, index, rules=[HF_LONGITUDE_SPLIT]) is None


def test_flat_list_input(index):
    resolved = resolve_connections([{"connection_type": "c", "from": "HUB", "to": "sb"}], index)
    assert len(resolved) == 1
    assert resolved[0]["touches_hub1"] and resolved[0]["touches_hub2"]
    assert resolved[0]["target_position"] == HUB2


def test_malformed_tags_do_not_break_the_pass(index):
    raw = [
        {"Connection_type": "C", "from": "HUB", "to": "Cutler", "tags": "SAT"},
        {"Connection_type": "C", "from": "Cutler", "to": "Naples"},
    ]
    resolved = resolve_connections(raw, index)
    assert len(resolved) == 2
    assert resolved[0]["tags"] == []
