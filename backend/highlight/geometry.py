from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from geo.types import RenderPosition

Triangle = tuple[int, int, int]


@dataclass(frozen=True)
class HighlightGeometry:
    """
    Render-space geometry for one highlighted footprint.

    - fill_vertices / fill_triangles: the filled polygon mesh (indices into vertices)
    - outline_points: the ring as a closed loop (last point connects to first),
      drawn slightly above the fill
    """

    fill_vertices: tuple[RenderPosition, ...]
    fill_triangles: tuple[Triangle, ...]
    outline_points: tuple[RenderPosition, ...]

    @property
    def triangle_count(self) -> int:
        return len(self.fill_triangles)

    def flat_indices(self) -> list[int]:
        """
        Triangle list flattened the way mesh APIs usually take it.
        """
        return [i for tri in self.fill_triangles for i in tri]


def fan_triangulate(n: int) -> list[Triangle]:
    """
    Fan from vertex 0: (0, i, i+1) for i in 1..n-2, i.e. n-2 triangles.

    Only correct for convex rings; concave rings get overlapping/outside triangles.
    """
    return [(0, i, i + 1) for i in range(1, n - 1)]


def build_highlight_geometry(
    surface_points: Sequence[RenderPosition],
    *,
    elevation: float,
    outline_lift: float,
) -> HighlightGeometry:
    """
    Lift projected surface points off the map and build fill + outline.

    The outline sits `outline_lift` above the fill so it draws on top of it.
    """
    fill = tuple(p.raised(elevation) for p in surface_points)
    outline = tuple(p.raised(elevation + outline_lift) for p in surface_points)
    return HighlightGeometry(
        fill_vertices=fill,
        fill_triangles=tuple(fan_triangulate(len(fill))),
        outline_points=outline,
    )
