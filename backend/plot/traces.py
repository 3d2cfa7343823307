from __future__ import annotations

from typing import Any

from geo.footprint import Footprint
from geo.types import RGBA, GeoPosition
from highlight.sink import HighlightStyle


def rgba_css(color: RGBA) -> str:
    r, g, b, a = color
    return f"rgba({round(r * 255)}, {round(g * 255)}, {round(b * 255)}, {a:g})"


def trace_footprint(
    footprint: Footprint,
    *,
    style: HighlightStyle,
    title: str | None = None,
) -> dict[str, Any]:
    ring = footprint.lonlat()
    if ring and ring[0] != ring[-1]:
        ring = [*ring, ring[0]]
    return {
        "type": "scattermapbox",
        "name": title or footprint.id or "Selected parcel",
        "lon": [lon for lon, _lat in ring],
        "lat": [lat for _lon, lat in ring],
        "mode": "lines",
        "fill": "toself",
        "fillcolor": rgba_css(style.fill_color),
        "line": {"color": rgba_css(style.outline_color), "width": 3},
        "hoverinfo": "skip",
    }


def trace_view_center(center: GeoPosition) -> dict[str, Any]:
    return {
        "type": "scattermapbox",
        "name": "View center",
        "lon": [center.longitude],
        "lat": [center.latitude],
        "mode": "markers",
        "marker": {"size": 8, "color": "rgba(55, 71, 79, 0.8)"},
        "hoverinfo": "skip",
        "showlegend": False,
    }
