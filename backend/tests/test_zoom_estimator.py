from __future__ import annotations

from geo.footprint import Footprint
from geo.zoom import estimate_zoom, footprint_extent_m, zoom_for_extent_m


def _square(side_deg: float, *, lon: float = 2.35, lat: float = 48.85) -> Footprint:
    return Footprint.from_lonlat(
        [
            (lon, lat),
            (lon + side_deg, lat),
            (lon + side_deg, lat + side_deg),
            (lon, lat + side_deg),
        ]
    )


def test_small_parcel_gets_finest_zoom():
    fp = _square(50.0 / 90_000.0)
    assert round(footprint_extent_m(fp)) == 50
    assert estimate_zoom(fp) == 19


def test_750m_parcel_gets_zoom_16():
    fp = _square(750.0 / 90_000.0)
    assert estimate_zoom(fp) == 16


def test_step_thresholds_are_strict():
    assert zoom_for_extent_m(1000.0) == 16
    assert zoom_for_extent_m(1000.1) == 15
    assert zoom_for_extent_m(500.0) == 17
    assert zoom_for_extent_m(200.0) == 18
    assert zoom_for_extent_m(100.0) == 19
    assert zoom_for_extent_m(0.0) == 19


def test_degenerate_footprint_gets_finest_zoom():
    point = Footprint.from_lonlat([(2.35, 48.85)])
    assert estimate_zoom(point) == 19
    assert estimate_zoom(Footprint(points=())) == 19


def test_zoom_is_monotonic_non_increasing_in_extent():
    extents_m = [0, 10, 99, 101, 150, 201, 350, 499, 501, 999, 1001, 5_000, 100_000]
    zooms = [estimate_zoom(_square(m / 90_000.0)) for m in extents_m]
    assert all(a >= b for a, b in zip(zooms, zooms[1:]))
    assert zooms[0] == 19
    assert zooms[-1] == 15


def test_uses_the_larger_bbox_side():
    # 60 m wide, 300 m tall -> driven by height.
    fp = Footprint.from_lonlat(
        [(2.35, 48.85), (2.35 + 60 / 90_000, 48.85), (2.35 + 60 / 90_000, 48.85 + 300 / 90_000)]
    )
    assert estimate_zoom(fp) == 17


def test_scale_factor_is_adjustable():
    fp = _square(0.001)
    assert estimate_zoom(fp) == 19  # 90 m
    assert estimate_zoom(fp, meters_per_degree=111_000.0) == 18  # 111 m
