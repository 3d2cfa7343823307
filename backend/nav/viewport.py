from __future__ import annotations

import logging

from config.settings import NavigatorSettings, get_settings
from geo.errors import MapCoreError
from geo.footprint import Footprint
from geo.projection import MapEngine
from geo.types import AddressResult, GeoPosition, RenderPosition, ViewState
from geo.zoom import estimate_zoom
from nav.animator import FlightTarget, FlyAnimator
from nav.easing import Easing, get_easing
from nav.events import EventEmitter

logger = logging.getLogger(__name__)


class MapViewport:
    """
    Owns the map's center/zoom and moves it instantly or via eased flights.

    The viewport is the only writer of `view`; the animator merely proposes states
    during `update(dt)`. Every change is pushed to the map engine (when one is
    attached) and announced synchronously through `events`:

    - "initialized" ()
    - "moved"       (ViewState)
    - "flight_started" ()
    - "flight_completed" ()
    """

    def __init__(
        self,
        engine: MapEngine | None = None,
        *,
        settings: NavigatorSettings | None = None,
        easing: Easing | None = None,
    ) -> None:
        self.engine = engine
        self.settings = settings or get_settings()
        self.easing = easing or get_easing(self.settings.flight.easing)
        self.events = EventEmitter("initialized", "moved", "flight_started", "flight_completed")
        self.animator = FlyAnimator()

        dv = self.settings.defaultView
        self._view = ViewState(center=GeoPosition(dv.lat, dv.lon), zoom=float(dv.zoom))

        self.animator.events.subscribe("started", self._on_flight_started)
        self.animator.events.subscribe("position", self._on_flight_position)
        self.animator.events.subscribe("completed", self._on_flight_completed)

    @property
    def view(self) -> ViewState:
        return self._view

    @property
    def is_flying(self) -> bool:
        return self.animator.is_running

    def initialize(self, position: GeoPosition | None = None, zoom: float | None = None) -> None:
        dv = self.settings.defaultView
        center = position or GeoPosition(dv.lat, dv.lon)
        self._view = ViewState(center=center, zoom=float(dv.zoom if zoom is None else zoom))
        self._push()
        logger.info(
            "Map initialized at (%.6f, %.6f) zoom %.1f",
            center.latitude,
            center.longitude,
            self._view.zoom,
        )
        self.events.emit("initialized")

    def set_position(self, position: GeoPosition, zoom: float) -> None:
        """
        Jump immediately. An active flight is not stopped and will keep proposing
        states on the next `update`; call `stop_flight()` first if that is unwanted.
        """
        self._apply(ViewState(center=position, zoom=float(zoom)))

    def fly_to(self, position: GeoPosition, zoom: float, duration: float | None = None) -> None:
        if duration is None or duration < 0:
            duration = self.settings.flight.defaultDuration
        target = FlightTarget(
            start=self._view,
            end=ViewState(center=position, zoom=float(zoom)),
            duration_s=float(duration),
            easing=self.easing,
        )
        logger.debug(
            "Flying to (%.6f, %.6f) zoom %.1f over %.2fs",
            position.latitude,
            position.longitude,
            float(zoom),
            float(duration),
        )
        self.animator.start(target)

    def center_on_footprint(self, footprint: Footprint | None, duration: float | None = None) -> None:
        """
        Fly to the footprint's centroid at a zoom chosen from its size.

        Never raises: a missing or unusable footprint is logged and ignored.
        """
        if footprint is None or not footprint.points:
            logger.warning("center_on_footprint: footprint is null or empty")
            return
        try:
            zs = self.settings.zoom
            zoom = estimate_zoom(
                footprint,
                meters_per_degree=zs.metersPerDegree,
                steps=zs.step_table(),
                finest_zoom=zs.finestZoom,
            )
            center = footprint.centroid()
        except (MapCoreError, ValueError) as e:
            logger.warning("center_on_footprint: unusable footprint: %s", e)
            return
        if duration is None or duration < 0:
            duration = self.settings.flight.footprintDuration
        logger.info(
            "Centering on footprint %s at (%.6f, %.6f) zoom %d",
            footprint.id or "<anonymous>",
            center.latitude,
            center.longitude,
            zoom,
        )
        self.fly_to(center, zoom, duration)

    def center_on_address(
        self,
        address: AddressResult | None,
        zoom: float | None = None,
        duration: float | None = None,
    ) -> None:
        if address is None:
            logger.warning("center_on_address: address is null")
            return
        fs = self.settings.flight
        if duration is None or duration < 0:
            duration = fs.addressDuration
        logger.info("Navigating to address: %s", address.text)
        self.fly_to(address.position, fs.addressZoom if zoom is None else zoom, duration)

    def stop_flight(self) -> None:
        """
        Return the animator to idle without a completion event; the view stays where
        the last tick left it.
        """
        self.animator.stop()

    def update(self, dt: float) -> None:
        """
        Per-frame hook: advance the active flight by `dt` seconds.
        """
        self.animator.tick(dt)

    def geo_to_render_position(self, geo: GeoPosition) -> tuple[RenderPosition, bool]:
        if self.engine is None:
            logger.error("geo_to_render_position: no map engine attached")
            return RenderPosition(), False
        try:
            pos, ok = self.engine.project_geo_to_render(geo)
        except Exception as e:
            logger.error("geo_to_render_position failed for %s: %s", geo, e)
            return RenderPosition(), False
        return (pos, True) if ok else (RenderPosition(), False)

    def render_to_geo_position(self, pos: RenderPosition) -> tuple[GeoPosition, bool]:
        if self.engine is None:
            logger.error("render_to_geo_position: no map engine attached")
            return GeoPosition(0.0, 0.0), False
        try:
            geo, ok = self.engine.project_render_to_geo(pos)
        except Exception as e:
            logger.error("render_to_geo_position failed for %s: %s", pos, e)
            return GeoPosition(0.0, 0.0), False
        return (geo, True) if ok else (GeoPosition(0.0, 0.0), False)

    # -- animator plumbing ---------------------------------------------------------

    def _on_flight_started(self) -> None:
        self.events.emit("flight_started")

    def _on_flight_position(self, view: ViewState) -> None:
        self._apply(view)

    def _on_flight_completed(self) -> None:
        self.events.emit("flight_completed")

    def _apply(self, view: ViewState) -> None:
        self._view = view
        self._push()
        self.events.emit("moved", view)

    def _push(self) -> None:
        if self.engine is None:
            logger.debug("No map engine attached; view state not pushed")
            return
        try:
            self.engine.push_view_state(self._view)
        except Exception as e:
            # Engine hiccups must not stall the animation loop.
            logger.warning("Failed to push view state to map engine: %s", e)
