from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from geo.types import GeoPosition


@dataclass(frozen=True)
class BBox:
    """
    WGS84 bounding box in lon/lat degrees.

    Convention used throughout this repo:
    - minLon, minLat, maxLon, maxLat
    """

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @classmethod
    def from_positions(cls, positions: Iterable[GeoPosition]) -> "BBox":
        pts = list(positions)
        if not pts:
            raise ValueError("Cannot build a bbox from zero positions")
        return cls(
            min_lon=min(p.longitude for p in pts),
            min_lat=min(p.latitude for p in pts),
            max_lon=max(p.longitude for p in pts),
            max_lat=max(p.latitude for p in pts),
        )

    def normalized(self) -> "BBox":
        min_lon = min(self.min_lon, self.max_lon)
        max_lon = max(self.min_lon, self.max_lon)
        min_lat = min(self.min_lat, self.max_lat)
        max_lat = max(self.min_lat, self.max_lat)
        return BBox(min_lon=min_lon, min_lat=min_lat, max_lon=max_lon, max_lat=max_lat)

    @property
    def width_deg(self) -> float:
        b = self.normalized()
        return b.max_lon - b.min_lon

    @property
    def height_deg(self) -> float:
        b = self.normalized()
        return b.max_lat - b.min_lat

    def max_extent_deg(self) -> float:
        return max(self.width_deg, self.height_deg)
