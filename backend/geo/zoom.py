from __future__ import annotations

from typing import Sequence

from geo.footprint import Footprint

# Linear degrees -> meters factor calibrated for mid-latitudes (~46°N: 1° lat ≈ 111 km,
# 1° lon ≈ 75 km). Not geodesic; adjust per target region.
DEFAULT_METERS_PER_DEGREE = 90_000.0

# (min extent in meters, zoom) checked top to bottom; first `extent > threshold` wins.
DEFAULT_ZOOM_STEPS: tuple[tuple[float, int], ...] = (
    (1000.0, 15),
    (500.0, 16),
    (200.0, 17),
    (100.0, 18),
)
FINEST_ZOOM = 19


def footprint_extent_m(
    footprint: Footprint,
    *,
    meters_per_degree: float = DEFAULT_METERS_PER_DEGREE,
) -> float:
    """
    Largest bbox side of the footprint, converted to approximate meters.
    """
    return footprint.bbox().max_extent_deg() * float(meters_per_degree)


def zoom_for_extent_m(
    extent_m: float,
    *,
    steps: Sequence[tuple[float, int]] = DEFAULT_ZOOM_STEPS,
    finest_zoom: int = FINEST_ZOOM,
) -> int:
    for threshold_m, zoom in steps:
        if extent_m > threshold_m:
            return int(zoom)
    return int(finest_zoom)


def estimate_zoom(
    footprint: Footprint,
    *,
    meters_per_degree: float = DEFAULT_METERS_PER_DEGREE,
    steps: Sequence[tuple[float, int]] = DEFAULT_ZOOM_STEPS,
    finest_zoom: int = FINEST_ZOOM,
) -> int:
    """
    Pick a discrete map zoom that frames the footprint.

    Degenerate footprints (single point / zero extent) get the finest zoom.
    """
    if not footprint.points:
        return int(finest_zoom)
    extent_m = footprint_extent_m(footprint, meters_per_degree=meters_per_degree)
    return zoom_for_extent_m(extent_m, steps=steps, finest_zoom=finest_zoom)
