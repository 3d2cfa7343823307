from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from shapely.geometry import Polygon

from geo.aoi import BBox
from geo.errors import InvalidInput
from geo.types import GeoPosition

MIN_RING_POINTS = 3


@dataclass(frozen=True)
class Footprint:
    """
    An ordered ring of geographic points describing a parcel boundary.

    The ring is implicitly closed (last point connects to first). A repeated closing
    point is dropped by the parsing helpers, so `points` never ends with a copy of
    its first element.

    The point count is not enforced here: renderers/viewports validate at use time so
    they can apply their own failure policy.
    """

    points: tuple[GeoPosition, ...]
    id: str | None = None
    props: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_lonlat(
        cls,
        coords: Sequence[Any] | None,
        *,
        id: str | None = None,
        props: dict[str, Any] | None = None,
    ) -> "Footprint":
        """
        Build from GeoJSON-ordered `(lon, lat)` pairs, validating every coordinate.
        """
        if coords is None:
            coords = []
        if not _is_sequence(coords):
            raise InvalidInput(f"Footprint ring must be a list of positions: {coords!r}")
        pts: list[GeoPosition] = []
        for p in coords:
            if not _is_sequence(p) or len(p) < 2:
                raise InvalidInput(f"Malformed coordinate pair: {p!r}")
            try:
                lon, lat = float(p[0]), float(p[1])
            except (TypeError, ValueError) as e:
                raise InvalidInput(f"Malformed coordinate pair: {p!r}") from e
            pts.append(GeoPosition.validated(lat, lon))
        return cls(points=tuple(_open_ring(pts)), id=id, props=dict(props or {}))

    @classmethod
    def from_geojson(cls, obj: dict[str, Any]) -> "Footprint":
        """
        Accepts a GeoJSON Feature or a bare Polygon/MultiPolygon geometry.

        Only the outer ring is used; for a MultiPolygon that is the first polygon's
        outer ring.
        """
        if not isinstance(obj, dict):
            raise InvalidInput("GeoJSON footprint must be an object")
        props = {}
        fid = None
        geom = obj
        if obj.get("type") == "Feature":
            geom = obj.get("geometry") or {}
            props = obj.get("properties") or {}
            if not isinstance(props, dict):
                raise InvalidInput("GeoJSON feature properties must be an object")
            fid = obj.get("id") or props.get("id")
        if not isinstance(geom, dict):
            raise InvalidInput("GeoJSON geometry must be an object")
        gtype = geom.get("type")
        coords = geom.get("coordinates") or []
        if not _is_sequence(coords):
            raise InvalidInput(f"GeoJSON coordinates must be a list: {coords!r}")
        if gtype == "Polygon":
            ring = coords[0] if coords else []
        elif gtype == "MultiPolygon":
            first = coords[0] if coords else []
            if not _is_sequence(first):
                raise InvalidInput(f"GeoJSON polygon must be a list of rings: {first!r}")
            ring = first[0] if first else []
        else:
            raise InvalidInput(f"Unsupported footprint geometry type: {gtype!r}")
        return cls.from_lonlat(ring, id=str(fid) if fid is not None else None, props=props)

    def __len__(self) -> int:
        return len(self.points)

    def validate(self) -> None:
        if len(self.points) < MIN_RING_POINTS:
            raise InvalidInput(
                f"Footprint needs at least {MIN_RING_POINTS} points, got {len(self.points)}"
            )

    def bbox(self) -> BBox:
        return BBox.from_positions(self.points)

    def centroid(self) -> GeoPosition:
        """
        Area centroid of the ring; falls back to the vertex mean for degenerate
        (zero-area) rings.
        """
        if not self.points:
            raise InvalidInput("Empty footprint has no centroid")
        poly = self._polygon()
        if poly is not None and poly.area > 0.0:
            c = poly.centroid
            return GeoPosition(latitude=float(c.y), longitude=float(c.x))
        n = len(self.points)
        return GeoPosition(
            latitude=sum(p.latitude for p in self.points) / n,
            longitude=sum(p.longitude for p in self.points) / n,
        )

    def is_convex(self, *, rel_tol: float = 1e-9) -> bool:
        poly = self._polygon()
        if poly is None or poly.area == 0.0:
            return True
        hull_area = poly.convex_hull.area
        return abs(hull_area - poly.area) <= rel_tol * hull_area

    def lonlat(self) -> list[tuple[float, float]]:
        return [(p.longitude, p.latitude) for p in self.points]

    def _polygon(self) -> Polygon | None:
        if len(self.points) < MIN_RING_POINTS:
            return None
        return Polygon(self.lonlat())


def _open_ring(points: list[GeoPosition]) -> list[GeoPosition]:
    if len(points) > 1 and points[0] == points[-1]:
        return points[:-1]
    return points


def _is_sequence(v: Any) -> bool:
    return isinstance(v, Sequence) and not isinstance(v, (str, bytes))
