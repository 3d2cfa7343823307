from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from api.fly_stream import stream_flight
from api.session import get_session
from config.logging_setup import setup_logging
from geo.errors import InvalidInput, MapCoreError, ProjectionFailed, ProjectionUnavailable
from geo.footprint import Footprint
from geo.types import AddressResult, GeoPosition
from highlight.geometry import HighlightGeometry
from plot.build_map import build_map_plot

setup_logging()

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ApiCenter(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)


class ApiView(BaseModel):
    center: ApiCenter
    zoom: float = Field(ge=0.0, le=24.0)


class ApiInitialize(BaseModel):
    center: ApiCenter | None = None
    zoom: float | None = Field(default=None, ge=0.0, le=24.0)


class ApiFly(ApiView):
    # Negative/absent -> configured default.
    duration: float | None = None
    realtime: bool = False


class ApiFootprint(BaseModel):
    """
    Either a GeoJSON Feature/Polygon or a bare ring of [lon, lat] pairs.
    """

    geojson: dict[str, Any] | None = None
    coordinates: list[list[float]] | None = None
    id: str | None = None

    def to_footprint(self) -> Footprint:
        if self.geojson is not None:
            return Footprint.from_geojson(self.geojson)
        if self.coordinates is not None:
            return Footprint.from_lonlat(self.coordinates, id=self.id)
        raise InvalidInput("Footprint requires `geojson` or `coordinates`")


class ApiCenterOnFootprint(BaseModel):
    footprint: ApiFootprint
    duration: float | None = None
    realtime: bool = False


class ApiAddress(BaseModel):
    text: str
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)
    zoom: float | None = Field(default=None, ge=0.0, le=24.0)
    duration: float | None = None
    realtime: bool = False


def _view_payload() -> dict[str, Any]:
    s = get_session()
    return {**s.viewport.view.as_dict(), "flying": s.viewport.is_flying}


def _geometry_payload(g: HighlightGeometry) -> dict[str, Any]:
    return {
        "fillVertices": [p.as_tuple() for p in g.fill_vertices],
        "fillTriangles": [list(t) for t in g.fill_triangles],
        "outlinePoints": [p.as_tuple() for p in g.outline_points],
        "closed": True,
    }


def _http_error(e: MapCoreError) -> HTTPException:
    if isinstance(e, InvalidInput):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, (ProjectionUnavailable, ProjectionFailed)):
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


def _sse(gen) -> StreamingResponse:
    return StreamingResponse(gen, media_type="text/event-stream")


@app.get("/view")
async def get_view():
    return _view_payload()


@app.post("/view/initialize")
async def initialize_view(body: ApiInitialize):
    vp = get_session().viewport
    center = GeoPosition(body.center.lat, body.center.lon) if body.center else None
    vp.initialize(center, body.zoom)
    return _view_payload()


@app.post("/view/position")
async def set_view_position(body: ApiView):
    get_session().viewport.set_position(
        GeoPosition(body.center.lat, body.center.lon), body.zoom
    )
    return _view_payload()


@app.post("/view/fly")
async def fly_view(body: ApiFly):
    s = get_session()
    vp = s.viewport
    return _sse(
        stream_flight(
            vp,
            lambda: vp.fly_to(
                GeoPosition(body.center.lat, body.center.lon), body.zoom, body.duration
            ),
            fps=s.settings.streamFps,
            realtime=body.realtime,
        )
    )


@app.post("/view/footprint")
async def center_on_footprint(body: ApiCenterOnFootprint):
    s = get_session()
    try:
        footprint = body.footprint.to_footprint()
    except MapCoreError as e:
        raise _http_error(e) from e
    vp = s.viewport
    return _sse(
        stream_flight(
            vp,
            lambda: vp.center_on_footprint(footprint, body.duration),
            fps=s.settings.streamFps,
            realtime=body.realtime,
        )
    )


@app.post("/view/address")
async def center_on_address(body: ApiAddress):
    s = get_session()
    vp = s.viewport
    address = AddressResult(text=body.text, latitude=body.lat, longitude=body.lon)
    return _sse(
        stream_flight(
            vp,
            lambda: vp.center_on_address(address, body.zoom, body.duration),
            fps=s.settings.streamFps,
            realtime=body.realtime,
        )
    )


@app.post("/highlight")
async def highlight(body: ApiFootprint):
    renderer = get_session().renderer
    try:
        geometry = renderer.highlight(body.to_footprint())
    except MapCoreError as e:
        # Footprint parsing failures also leave no stale highlight behind.
        renderer.clear_highlight()
        raise _http_error(e) from e
    return _geometry_payload(geometry)


@app.delete("/highlight")
async def clear_highlight():
    get_session().renderer.clear_highlight()
    return {"cleared": True}


@app.post("/plot")
async def plot():
    s = get_session()
    return build_map_plot(
        s.viewport.view,
        footprint=s.renderer.current_footprint,
        style=s.renderer.style,
        show_center=True,
    )
