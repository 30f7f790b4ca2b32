"""
Folium map of the generated entities.

One GeoJSON feature per entity, coloured by the entity's own colour. The
selected entity (matched by name) is drawn heavier; hovering raises the
others temporarily. Clicks come back through streamlit-folium's
last_active_drawing and are resolved to the full entity record.
"""
from __future__ import annotations

import json
from typing import Any, Sequence

import folium

from . import config
from .models import HistoricalEntity


def _ring_lonlat(points: Sequence[tuple[float, float]]) -> list[list[float]]:
    """[[lat, lon], ...] -> closed GeoJSON ring [[lon, lat], ...]."""
    ring = [[lon, lat] for lat, lon in points]
    if ring and ring[0] != ring[-1]:
        ring.append(ring[0])
    return ring


def build_geojson_layer(
    entities: Sequence[HistoricalEntity],
    selected_name: str | None = None,
) -> dict[str, Any]:
    """
    Convert entities into a GeoJSON FeatureCollection, in draw order.

    Each feature carries `_index` (position in `entities`) so a click can be
    mapped back to the full record, and `_selected` for styling.
    """
    features: list[dict] = []
    for idx, entity in enumerate(entities):
        if not entity.boundary_points:
            continue
        features.append({
            "type": "Feature",
            "geometry": {
                "type": "Polygon",
                "coordinates": [_ring_lonlat(entity.boundary_points)],
            },
            "properties": {
                "name":        entity.name,
                "description": entity.description,
                "_color":      entity.color,
                "_index":      idx,
                "_selected":   selected_name is not None and entity.name == selected_name,
            },
        })
    return {"type": "FeatureCollection", "features": features}


def polygon_style(color: str, selected: bool) -> dict[str, Any]:
    """Leaflet path options for one entity."""
    style = dict(config.STYLE_SELECTED if selected else config.STYLE_BASE)
    style.update({
        "fillColor": color,
        "color":     color,
        "lineJoin":  "round",
        "lineCap":   "round",
    })
    return style


def hover_style(color: str, selected: bool) -> dict[str, Any]:
    # The selected polygon keeps its emphasis while hovered
    if selected:
        return polygon_style(color, True)
    style = polygon_style(color, False)
    style.update(config.STYLE_HOVER)
    return style


def _feature_style(feature: dict[str, Any]) -> dict[str, Any]:
    props = feature["properties"]
    return polygon_style(props["_color"], bool(props.get("_selected")))


def _feature_highlight(feature: dict[str, Any]) -> dict[str, Any]:
    props = feature["properties"]
    return hover_style(props["_color"], bool(props.get("_selected")))


def make_map(
    entities: Sequence[HistoricalEntity],
    selected_name: str | None = None,
    center: list[float] = config.MAP_CENTER,
    zoom: int = config.MAP_ZOOM,
) -> folium.Map:
    """Build the basemap with one polygon per entity."""
    m = folium.Map(
        location=center,
        zoom_start=zoom,
        tiles=config.TILE_URL,
        attr=config.TILE_ATTRIBUTION,
        zoom_control=True,
    )

    geojson = build_geojson_layer(entities, selected_name)
    if geojson["features"]:
        folium.GeoJson(
            data=json.dumps(geojson),
            name="Entities",
            style_function=_feature_style,
            highlight_function=_feature_highlight,
            tooltip=folium.GeoJsonTooltip(
                fields=["name"],
                labels=False,
                sticky=False,
            ),
        ).add_to(m)

    return m


def resolve_click_to_entity(
    map_data: dict[str, Any] | None,
    entities: Sequence[HistoricalEntity],
) -> HistoricalEntity | None:
    """
    Map streamlit-folium's last_active_drawing (the clicked GeoJSON feature)
    back to the entity it was built from. None if nothing usable was clicked.
    """
    if not map_data:
        return None
    drawing = map_data.get("last_active_drawing")
    if not isinstance(drawing, dict):
        return None
    props = drawing.get("properties") or {}

    idx = props.get("_index")
    if isinstance(idx, int) and not isinstance(idx, bool) and 0 <= idx < len(entities):
        entity = entities[idx]
        if entity.name == props.get("name", entity.name):
            return entity

    name = props.get("name")
    for entity in entities:
        if entity.name == name:
            return entity
    return None
