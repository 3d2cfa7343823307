from __future__ import annotations

from geo.footprint import Footprint
from geo.types import GeoPosition, ViewState
from highlight.sink import HighlightStyle
from plot.build_map import build_map_plot
from plot.traces import rgba_css

VIEW = ViewState(center=GeoPosition(48.8566, 2.3522), zoom=16.0)


def test_build_map_plot_shape():
    plot = build_map_plot(VIEW)

    assert set(plot.keys()) == {"data", "layout"}
    assert plot["data"] == []
    assert plot["layout"]["mapbox"]["center"] == {"lat": 48.8566, "lon": 2.3522}
    assert plot["layout"]["mapbox"]["zoom"] == 16.0
    assert plot["layout"]["meta"]["view"] == VIEW.as_dict()


def test_build_map_plot_closes_footprint_ring():
    fp = Footprint.from_lonlat([(2.35, 48.85), (2.36, 48.85), (2.36, 48.86)], id="p1")
    plot = build_map_plot(VIEW, footprint=fp, style=HighlightStyle(), show_center=True)

    assert any(trace.get("type") == "scattermapbox" for trace in plot["data"])
    poly = plot["data"][0]
    assert poly["name"] == "p1"
    assert poly["lon"] == [2.35, 2.36, 2.36, 2.35]
    assert poly["lat"] == [48.85, 48.85, 48.86, 48.85]
    assert poly["fillcolor"] == "rgba(0, 230, 191, 0.3)"
    assert plot["layout"]["meta"]["highlight"] == {"footprintId": "p1", "vertices": 3}


def test_rgba_css():
    assert rgba_css((1.0, 0.0, 0.5, 1.0)) == "rgba(255, 0, 128, 1)"
