from __future__ import annotations

import logging
import math
from functools import lru_cache
from typing import Protocol, runtime_checkable

from pyproj import Transformer

from geo.errors import ProjectionUnavailable
from geo.types import GeoPosition, RenderPosition, ViewState

logger = logging.getLogger(__name__)

# Web Mercator world circumference at the equator, meters.
_EARTH_CIRCUMFERENCE_M = 40_075_016.685578488
_MAX_MERCATOR_LAT = 85.05112878


@runtime_checkable
class GeoProjector(Protocol):
    """
    Geographic <-> render-space transform supplied by the host map engine.

    Both calls report success through the returned flag and never raise; on failure
    the position is a zero/default value that must not be used.
    """

    def project_geo_to_render(self, geo: GeoPosition) -> tuple[RenderPosition, bool]: ...

    def project_render_to_geo(self, pos: RenderPosition) -> tuple[GeoPosition, bool]: ...


@runtime_checkable
class MapEngine(GeoProjector, Protocol):
    """
    The external map engine: projection plus the authoritative view center/zoom.
    """

    def push_view_state(self, state: ViewState) -> None: ...


@lru_cache(maxsize=1)
def transformer_4326_to_3857() -> Transformer:
    return Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)


@lru_cache(maxsize=1)
def transformer_3857_to_4326() -> Transformer:
    return Transformer.from_crs("EPSG:3857", "EPSG:4326", always_xy=True)


def tile_size_m(zoom: float) -> float:
    """
    Ground width of one slippy tile at `zoom` (at the equator).
    """
    return _EARTH_CIRCUMFERENCE_M / (2.0 ** float(zoom))


class WebMercatorMapEngine:
    """
    Minimal map-engine adapter backed by pyproj.

    Render space is a y-up plane centred on the last pushed view center: x grows east,
    z grows north, and one slippy tile at the current zoom spans `tile_world_size`
    render units. This mirrors how tile-based 3-D map SDKs lay out their world, which
    makes it a drop-in stand-in for tests and headless use.
    """

    def __init__(
        self,
        *,
        tile_world_size: float = 1.0,
        initial_view: ViewState | None = None,
        available: bool = True,
    ) -> None:
        self.tile_world_size = float(tile_world_size)
        self.available = available
        self.view = initial_view or ViewState(center=GeoPosition(0.0, 0.0), zoom=0.0)
        self.push_count = 0

    def push_view_state(self, state: ViewState) -> None:
        if not self.available:
            raise ProjectionUnavailable("Map engine is not available")
        self.view = state
        self.push_count += 1

    def project_geo_to_render(self, geo: GeoPosition) -> tuple[RenderPosition, bool]:
        if not self.available:
            return RenderPosition(), False
        if abs(geo.latitude) > _MAX_MERCATOR_LAT or abs(geo.longitude) > 180.0:
            logger.debug("Geo position outside Web Mercator range: %s", geo)
            return RenderPosition(), False
        try:
            mx, my = transformer_4326_to_3857().transform(geo.longitude, geo.latitude)
            cx, cy = self._center_mercator()
        except Exception as e:
            logger.warning("Geo->render projection failed for %s: %s", geo, e)
            return RenderPosition(), False
        if not (math.isfinite(mx) and math.isfinite(my)):
            return RenderPosition(), False
        scale = self.tile_world_size / tile_size_m(self.view.zoom)
        return RenderPosition(x=(mx - cx) * scale, y=0.0, z=(my - cy) * scale), True

    def project_render_to_geo(self, pos: RenderPosition) -> tuple[GeoPosition, bool]:
        if not self.available:
            return GeoPosition(0.0, 0.0), False
        try:
            cx, cy = self._center_mercator()
            scale = tile_size_m(self.view.zoom) / self.tile_world_size
            lon, lat = transformer_3857_to_4326().transform(
                cx + pos.x * scale, cy + pos.z * scale
            )
        except Exception as e:
            logger.warning("Render->geo projection failed for %s: %s", pos, e)
            return GeoPosition(0.0, 0.0), False
        if not (math.isfinite(lat) and math.isfinite(lon)):
            return GeoPosition(0.0, 0.0), False
        return GeoPosition(latitude=float(lat), longitude=float(lon)), True

    def _center_mercator(self) -> tuple[float, float]:
        c = self.view.center
        lat = max(-_MAX_MERCATOR_LAT, min(_MAX_MERCATOR_LAT, c.latitude))
        return transformer_4326_to_3857().transform(c.longitude, lat)
