#!/usr/bin/env python3
"""
Map Overlay - Filter API

Serves the preprocessed overlay and the operator's filter state to the map
renderer. The renderer re-requests /api/overlay after every toggle and can
skip redrawing when `filter_key` has not changed.

Usage:
    pip install -e .
    python src/api_server.py
    # or: uvicorn api_server:app --app-dir src --reload --port 8085
"""

import asyncio
import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from build_overlay import load_sources, preprocess_overlay, render_payload
from filter_visibility import FilterState, filter_state_key


app = FastAPI(
    title="Map Overlay API",
    description="Filtered connection/point overlay for the map renderer",
    version="1.0.0"
)

# Enable CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

DATA_DIR = Path(os.environ.get('OVERLAY_DATA_DIR', Path(__file__).parent.parent / "data"))
POINTS_FILE = os.environ.get('OVERLAY_POINTS_FILE', 'points.json')
CONNECTIONS_FILE = os.environ.get('OVERLAY_CONNECTIONS_FILE', 'connections_geojson_like.json')


# Global state (data loaded once on startup, filters mutated by the UI)
overlay_data = None
filter_state = FilterState()


async def load_data():
    """Load both sources and run preprocessing once."""
    global overlay_data

    points_path = DATA_DIR / POINTS_FILE
    connections_path = DATA_DIR / CONNECTIONS_FILE

    if not points_path.exists() or not connections_path.exists():
        print(f"Warning: overlay sources not found in {DATA_DIR}")
        return

    points_data, connections_data = await load_sources(points_path, connections_path)
    overlay_data = await asyncio.to_thread(preprocess_overlay, points_data, connections_data)
    print(f"Overlay ready: {overlay_data['summary']}")


@app.on_event("startup")
async def startup():
    await load_data()


# Request / response models
class ToggleRequest(BaseModel):
    dimension: str
    value: str


class ToggleAllRequest(BaseModel):
    dimension: str
    values: Optional[list[str]] = None


class FlagRequest(BaseModel):
    name: str
    value: bool


class FilterResponse(BaseModel):
    filter_key: str
    state: FilterState


def require_data():
    if overlay_data is None:
        raise HTTPException(status_code=503, detail="Data not loaded")
    return overlay_data


def filter_response():
    return FilterResponse(filter_key=filter_state_key(filter_state), state=filter_state)


# Endpoints

@app.get("/")
async def root():
    """API info endpoint."""
    return {
        "service": "map-overlay-api",
        "version": "1.0.0",
        "endpoints": {
            "/api/filters": "Current filter state (GET) or replace it (PUT)",
            "/api/filters/toggle": "Toggle one category/group/tag",
            "/api/filters/toggle-all": "All / None for one dimension",
            "/api/filters/flag": "Set a boolean flag (hubs, aggregated view, labels, icons)",
            "/api/overlay": "Visible connections, location markers and icons",
            "/api/stats": "Preprocessing summary",
        }
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "data_loaded": overlay_data is not None,
        "connections_count": len(overlay_data["connections"]) if overlay_data else 0,
    }


@app.get("/api/filters", response_model=FilterResponse)
async def get_filters():
    return filter_response()


@app.put("/api/filters", response_model=FilterResponse)
async def put_filters(state: FilterState):
    """Replace the whole filter state."""
    global filter_state
    filter_state = state
    return filter_response()


@app.post("/api/filters/toggle", response_model=FilterResponse)
async def toggle_filter(request: ToggleRequest):
    try:
        filter_state.toggle(request.dimension, request.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return filter_response()


@app.post("/api/filters/toggle-all", response_model=FilterResponse)
async def toggle_all_filters(request: ToggleAllRequest):
    """
    All / None button for one dimension.
    Tags have no fixed value list, so the known tags are used when none are given.
    """
    values = request.values
    if values is None and request.dimension == "tags":
        data = require_data()
        values = sorted({t for c in data["connections"] for t in c["tags"]})
    try:
        filter_state.toggle_all(request.dimension, values)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return filter_response()


@app.post("/api/filters/flag", response_model=FilterResponse)
async def set_filter_flag(request: FlagRequest):
    try:
        filter_state.set_flag(request.name, request.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return filter_response()


@app.get("/api/overlay")
async def get_overlay():
    """Visible overlay for the current filter state."""
    data = require_data()
    payload = render_payload(data, filter_state)
    payload["connections"] = [_strip_record(c) for c in payload["connections"]]
    payload["icons"] = [_strip_record(p) for p in payload["icons"]]
    payload["colocated"] = [
        {**g, "members": [_strip_record(p) for p in g["members"]]}
        for g in payload["colocated"]
    ]
    return payload


@app.get("/api/stats")
async def get_stats():
    """Get statistics about the loaded data."""
    data = require_data()
    return {
        "summary": data["summary"],
        "filter_key": filter_state_key(filter_state),
        "tags": sorted({t for c in data["connections"] for t in c["tags"]}),
    }


def _strip_record(item):
    # Raw source records stay server-side
    return {k: v for k, v in item.items() if k != "record"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8085)
