from __future__ import annotations

import logging
from typing import Any

from config.settings import HighlightSettings, get_settings
from geo.errors import InvalidInput, ProjectionFailed, ProjectionUnavailable
from geo.footprint import Footprint
from geo.types import RGBA, RenderPosition
from highlight.geometry import HighlightGeometry, build_highlight_geometry
from highlight.sink import HighlightSink, HighlightStyle, InMemoryHighlightSink
from nav.viewport import MapViewport

logger = logging.getLogger(__name__)


class FootprintRenderer:
    """
    Turns a parcel footprint into a highlighted fill + outline on the map.

    At most one highlight is current. `highlight` always clears the previous one
    *before* validating the new footprint, so a rejected request leaves nothing stale
    on screen.
    """

    def __init__(
        self,
        viewport: MapViewport | None,
        *,
        sink: HighlightSink | None = None,
        settings: HighlightSettings | None = None,
    ) -> None:
        self.viewport = viewport
        self.sink = sink if sink is not None else InMemoryHighlightSink()
        hs = settings or get_settings().highlight
        self.elevation = float(hs.elevation)
        self.outline_lift = float(hs.outlineLift)
        self.style = HighlightStyle(
            fill_color=tuple(hs.fillColor),
            outline_color=tuple(hs.outlineColor),
            outline_width=float(hs.outlineWidth),
        )
        self._current: HighlightGeometry | None = None
        self._current_footprint: Footprint | None = None
        self._handle: Any = None
        if viewport is None:
            logger.warning("FootprintRenderer has no viewport; highlights will fail")

    @property
    def current(self) -> HighlightGeometry | None:
        return self._current

    @property
    def current_footprint(self) -> Footprint | None:
        return self._current_footprint

    def highlight(self, footprint: Footprint | None) -> HighlightGeometry:
        """
        Replace the current highlight with `footprint`.

        Raises InvalidInput (null / <3 points), ProjectionUnavailable (no engine) or
        ProjectionFailed (a point did not project). On any failure nothing is
        highlighted afterwards.
        """
        self.clear_highlight()

        if footprint is None:
            raise InvalidInput("Footprint is null")
        footprint.validate()
        if not footprint.is_convex():
            logger.warning(
                "Footprint %s is not convex; fan-triangulated fill will be inaccurate",
                footprint.id or "<anonymous>",
            )

        surface = self._project(footprint)
        geometry = build_highlight_geometry(
            surface, elevation=self.elevation, outline_lift=self.outline_lift
        )
        self._handle = self.sink.show(geometry, self.style)
        self._current = geometry
        self._current_footprint = footprint
        logger.info(
            "Highlighted footprint %s: %d vertices, %d triangles",
            footprint.id or "<anonymous>",
            len(geometry.fill_vertices),
            geometry.triangle_count,
        )
        return geometry

    def clear_highlight(self) -> None:
        handle, self._handle = self._handle, None
        try:
            if handle is not None:
                self.sink.release(handle)
        finally:
            self._current = None
            self._current_footprint = None

    def set_highlight_color(self, fill_color: RGBA, outline_color: RGBA) -> None:
        self.style = HighlightStyle(
            fill_color=tuple(fill_color),
            outline_color=tuple(outline_color),
            outline_width=self.style.outline_width,
        )
        if self._handle is not None:
            self.sink.restyle(self._handle, self.style)

    def _project(self, footprint: Footprint) -> list[RenderPosition]:
        vp = self.viewport
        if vp is None or vp.engine is None:
            raise ProjectionUnavailable("No map engine available to project the footprint")
        # Engines that can go offline report it via `available`.
        if not getattr(vp.engine, "available", True):
            raise ProjectionUnavailable("Map engine is not available")
        out: list[RenderPosition] = []
        for i, geo in enumerate(footprint.points):
            pos, ok = vp.geo_to_render_position(geo)
            if not ok:
                raise ProjectionFailed(
                    f"Could not project point {i} ({geo.latitude:.6f}, {geo.longitude:.6f})",
                    index=i,
                )
            out.append(pos)
        return out
