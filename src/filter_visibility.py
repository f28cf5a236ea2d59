"""
Visibility engine.

All filter toggles live in one `FilterState` value that is passed into every
predicate. The default state is empty: nothing is visible until the operator
switches categories and groups on.
"""

import json
from typing import Iterable, Optional

from pydantic import BaseModel, Field, field_validator

from classify_records import CONNECTION_TYPES, POINT_GROUPS, normalize_category, normalize_tag


# Dimension name -> (FilterState attribute, values enabled by "All", value normalizer)
DIMENSIONS = {
    "categories": ("active_categories", CONNECTION_TYPES, normalize_category),
    "groups": ("active_groups", POINT_GROUPS, None),
    "tags": ("active_tags", [], normalize_tag),
}

FLAGS = [
    "hide_hub1",
    "hide_hub2",
    "aggregated_view",
    "show_connection_labels",
    "show_point_labels",
    "show_icons",
]


class FilterState(BaseModel):
    active_categories: set[str] = Field(default_factory=set)
    active_groups: set[str] = Field(default_factory=set)
    active_tags: set[str] = Field(default_factory=set)
    hide_hub1: bool = False
    hide_hub2: bool = False
    aggregated_view: bool = False
    show_connection_labels: bool = False
    show_point_labels: bool = False
    show_icons: bool = False

    # Same normalization as the records, so "n" or "n_type" match N connections.
    # Group names stay exact, like the name -> group table.
    @field_validator("active_categories")
    @classmethod
    def _normalize_categories(cls, value: set[str]) -> set[str]:
        return {normalize_category(v) for v in value}

    @field_validator("active_tags")
    @classmethod
    def _normalize_tags(cls, value: set[str]) -> set[str]:
        return {normalize_tag(v) for v in value}

    @classmethod
    def everything_visible(cls) -> "FilterState":
        """All categories and groups on, icons and point labels shown."""
        return cls(
            active_categories=set(CONNECTION_TYPES),
            active_groups=set(POINT_GROUPS),
            show_point_labels=True,
            show_icons=True,
        )

    def _dimension(self, dimension: str):
        if dimension not in DIMENSIONS:
            raise ValueError(f"Unknown filter dimension: {dimension}")
        attr, all_values, normalize = DIMENSIONS[dimension]
        return getattr(self, attr), all_values, normalize or (lambda v: v)

    def toggle(self, dimension: str, value: str) -> bool:
        """Flip one value of a dimension; returns whether it is now active."""
        active, _, normalize = self._dimension(dimension)
        value = normalize(value)
        if value in active:
            active.discard(value)
            return False
        active.add(value)
        return True

    def toggle_all(self, dimension: str, values: Optional[Iterable[str]] = None) -> bool:
        """
        All / None button: clear the dimension if every value is already on,
        otherwise switch every value on. Returns whether values are now on.
        """
        active, all_values, normalize = self._dimension(dimension)
        values = {normalize(v) for v in (all_values if values is None else values)}
        all_active = bool(values) and values <= active
        active.clear()
        if not all_active:
            active.update(values)
        return not all_active

    def set_flag(self, name: str, value: bool) -> None:
        if name not in FLAGS:
            raise ValueError(f"Unknown filter flag: {name}")
        setattr(self, name, bool(value))


def _passes_hubs(item, state: FilterState) -> bool:
    if state.hide_hub1 and item["touches_hub1"]:
        return False
    if state.hide_hub2 and item["touches_hub2"]:
        return False
    return True


def _passes_member(member, state: FilterState) -> bool:
    """Category, both endpoint groups and tags of one connection."""
    if member["category"] not in state.active_categories:
        return False
    # Both ends must be visible
    if member["source_group"] not in state.active_groups:
        return False
    if member["target_group"] not in state.active_groups:
        return False
    # Empty tag filter means no tag filtering
    if state.active_tags and not any(t in state.active_tags for t in member["tags"]):
        return False
    return True


def is_connection_visible(connection, state: FilterState) -> bool:
    return _passes_hubs(connection, state) and _passes_member(connection, state)


def is_aggregate_visible(aggregate, state: FilterState) -> bool:
    """
    Visible if the OR-ed hub flags pass and at least one merged connection
    would be visible on its own (category, endpoint groups and tags).
    """
    if not _passes_hubs(aggregate, state):
        return False
    return any(_passes_member(m, state) for m in aggregate["members"])


def is_point_visible(point, state: FilterState) -> bool:
    return point["group"] in state.active_groups


def is_marker_visible(point, state: FilterState) -> bool:
    """Plain marker layer: icon-class points are drawn by the icon layer instead."""
    return is_point_visible(point, state) and not point.get("icon")


def is_icon_point_visible(point, state: FilterState) -> bool:
    return bool(point.get("icon")) and state.show_icons


def filter_state_key(state: FilterState) -> str:
    """Order-independent serialization of the filter state, for cache invalidation."""
    payload = {
        "categories": sorted(state.active_categories),
        "groups": sorted(state.active_groups),
        "tags": sorted(state.active_tags),
    }
    for flag in FLAGS:
        payload[flag] = int(getattr(state, flag))
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))
