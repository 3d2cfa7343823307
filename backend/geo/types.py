from __future__ import annotations

import math
from dataclasses import dataclass

from geo.errors import InvalidInput

RGBA = tuple[float, float, float, float]


@dataclass(frozen=True)
class GeoPosition:
    """
    WGS84 position in degrees.

    Range checks are the caller's responsibility on the plain constructor; use
    `GeoPosition.validated(...)` at input boundaries.
    """

    latitude: float
    longitude: float

    @classmethod
    def validated(cls, latitude: float, longitude: float) -> "GeoPosition":
        lat = float(latitude)
        lon = float(longitude)
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise InvalidInput(f"Non-finite coordinate: ({latitude}, {longitude})")
        if not -90.0 <= lat <= 90.0:
            raise InvalidInput(f"Latitude out of range [-90, 90]: {lat}")
        if not -180.0 <= lon <= 180.0:
            raise InvalidInput(f"Longitude out of range [-180, 180]: {lon}")
        return cls(latitude=lat, longitude=lon)


@dataclass(frozen=True)
class RenderPosition:
    """
    A point in the renderer's 3-D space. `y` is up (elevation above the map surface).
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def raised(self, dy: float) -> "RenderPosition":
        return RenderPosition(x=self.x, y=self.y + dy, z=self.z)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class ViewState:
    center: GeoPosition
    zoom: float

    def as_dict(self) -> dict[str, float]:
        return {
            "lat": self.center.latitude,
            "lon": self.center.longitude,
            "zoom": self.zoom,
        }


@dataclass(frozen=True)
class AddressResult:
    """
    A geocoded address (e.g. from a search box) that the view can fly to.
    """

    text: str
    latitude: float
    longitude: float

    @property
    def position(self) -> GeoPosition:
        return GeoPosition(latitude=self.latitude, longitude=self.longitude)
