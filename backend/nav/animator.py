from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum

from geo.types import GeoPosition, ViewState
from nav.easing import Easing, ease_in_out
from nav.events import EventEmitter

logger = logging.getLogger(__name__)

# Accumulated frame deltas rarely sum to the duration bit-exactly (10 x 0.1 != 1.0).
_COMPLETION_EPS_S = 1e-9


class AnimatorState(str, Enum):
    idle = "idle"
    running = "running"


@dataclass(frozen=True)
class FlightTarget:
    start: ViewState
    end: ViewState
    duration_s: float
    easing: Easing = field(default=ease_in_out, compare=False)

    @property
    def is_instant(self) -> bool:
        d = float(self.duration_s)
        return not math.isfinite(d) or d <= 0.0


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def interpolate_view(start: ViewState, end: ViewState, t: float) -> ViewState:
    """
    Component-wise linear interpolation in coordinate space (not great-circle).
    """
    return ViewState(
        center=GeoPosition(
            latitude=lerp(start.center.latitude, end.center.latitude, t),
            longitude=lerp(start.center.longitude, end.center.longitude, t),
        ),
        zoom=lerp(start.zoom, end.zoom, t),
    )


class FlyAnimator:
    """
    Drives one eased flight at a time; advanced only by explicit `tick(dt)` calls.

    Events (via `events`):
    - "started"   ()          -- synchronously from `start`
    - "position"  (ViewState) -- every running tick, including the final snap
    - "completed" ()          -- after the final position; not emitted by `stop`
    """

    def __init__(self) -> None:
        self.events = EventEmitter("started", "position", "completed")
        self._target: FlightTarget | None = None
        self._elapsed = 0.0

    @property
    def state(self) -> AnimatorState:
        return AnimatorState.running if self._target is not None else AnimatorState.idle

    @property
    def is_running(self) -> bool:
        return self._target is not None

    @property
    def target(self) -> FlightTarget | None:
        return self._target

    @property
    def elapsed_s(self) -> float:
        return self._elapsed

    def progress(self) -> float:
        """
        Linear (un-eased) progress of the current flight in [0, 1]; 0 when idle.
        """
        if self._target is None:
            return 0.0
        if self._target.is_instant:
            return 0.0
        return min(1.0, max(0.0, self._elapsed / float(self._target.duration_s)))

    def start(self, target: FlightTarget) -> None:
        if self._target is not None:
            logger.debug("Flight superseded at %.3fs", self._elapsed)
        self._target = target
        self._elapsed = 0.0
        self.events.emit("started")

    def stop(self) -> None:
        """
        Abandon the current flight without a completion event.
        """
        self._target = None
        self._elapsed = 0.0

    def tick(self, dt: float) -> ViewState | None:
        """
        Advance by `dt` seconds and return the proposed view, or None when idle.
        """
        target = self._target
        if target is None:
            return None

        step = float(dt)
        if math.isfinite(step) and step > 0.0:
            self._elapsed += step

        if target.is_instant or self._elapsed + _COMPLETION_EPS_S >= float(target.duration_s):
            return self._finish(target)

        t = min(1.0, max(0.0, self._elapsed / float(target.duration_s)))
        eased = target.easing(t)
        view = interpolate_view(target.start, target.end, eased)
        self.events.emit("position", view)
        return view

    def _finish(self, target: FlightTarget) -> ViewState:
        self._target = None
        self._elapsed = 0.0
        # Snap to the exact end state rather than the last interpolated value.
        self.events.emit("position", target.end)
        self.events.emit("completed")
        return target.end
