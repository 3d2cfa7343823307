from __future__ import annotations

from typing import Any

from geo.footprint import Footprint
from geo.types import ViewState
from highlight.sink import HighlightStyle
from plot.traces import trace_footprint, trace_view_center


def build_map_plot(
    view: ViewState,
    *,
    footprint: Footprint | None = None,
    style: HighlightStyle | None = None,
    show_center: bool = False,
) -> dict[str, Any]:
    """
    Plotly `scattermapbox` payload showing the current view and highlighted parcel.
    """
    traces: list[dict[str, Any]] = []
    if footprint is not None and len(footprint) >= 3:
        traces.append(trace_footprint(footprint, style=style or HighlightStyle()))
    if show_center:
        traces.append(trace_view_center(view.center))

    meta: dict[str, Any] = {"view": view.as_dict()}
    if footprint is not None:
        meta["highlight"] = {
            "footprintId": footprint.id,
            "vertices": len(footprint),
        }

    return {
        "data": traces,
        "layout": {
            "mapbox": {
                "center": {"lat": view.center.latitude, "lon": view.center.longitude},
                "zoom": view.zoom,
                "style": "carto-positron",
            },
            "showlegend": bool(traces),
            "meta": meta,
        },
    }
