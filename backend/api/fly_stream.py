from __future__ import annotations

import json
import math
from asyncio import sleep
from enum import Enum
from typing import Any, AsyncIterator, Callable

from geo.types import ViewState
from nav.animator import FlightTarget
from nav.viewport import MapViewport


class EventType(str, Enum):
    flight_started = "flight_started"
    moved = "moved"
    flight_completed = "flight_completed"
    superseded = "superseded"
    error = "error"


def format_event(type: EventType, data: str):
    return f"event: {type.value}\ndata: {data}\n\n"


def _max_frames(viewport: MapViewport, fps: float) -> int:
    target = viewport.animator.target
    if target is None or target.is_instant:
        return 1
    # A couple of spare frames absorb float rounding in the accumulated time.
    return int(math.ceil(float(target.duration_s) * fps)) + 2


async def stream_flight(
    viewport: MapViewport,
    begin: Callable[[], None],
    *,
    fps: float,
    realtime: bool = False,
) -> AsyncIterator[str]:
    """
    Start a flight via `begin()` and step it at `fps`, streaming viewport events as SSE.

    With `realtime=False` frames are produced as fast as the client reads them; the
    simulated clock still advances by 1/fps per frame.

    A stream only steps and reports the flight it started. When another request
    starts a newer flight on the same viewport, this stream ends with `superseded`.
    """
    pending: list[tuple[EventType, Any]] = []
    owned: FlightTarget | None = None
    superseded = False

    def on_started() -> None:
        nonlocal superseded
        if owned is not None:
            superseded = True
        elif not superseded:
            pending.append((EventType.flight_started, {}))

    def on_moved(view: ViewState) -> None:
        if not superseded:
            pending.append((EventType.moved, view.as_dict()))

    def on_completed() -> None:
        if not superseded:
            pending.append((EventType.flight_completed, viewport.view.as_dict()))

    unsubscribe = [
        viewport.events.subscribe("flight_started", on_started),
        viewport.events.subscribe("moved", on_moved),
        viewport.events.subscribe("flight_completed", on_completed),
    ]
    try:
        begin()
        if not any(evt is EventType.flight_started for evt, _data in pending):
            # begin() declined to fly (e.g. unusable footprint); report and stop.
            for evt, data in pending:
                yield format_event(evt, json.dumps(data))
            yield format_event(EventType.error, json.dumps({"message": "No flight started"}))
            return
        owned = viewport.animator.target

        dt = 1.0 / float(fps)
        for _ in range(_max_frames(viewport, fps)):
            if superseded or owned is None or viewport.animator.target is not owned:
                break
            viewport.update(dt)
            while pending:
                evt, data = pending.pop(0)
                yield format_event(evt, json.dumps(data))
            await sleep(dt if realtime else 0)
        while pending:
            evt, data = pending.pop(0)
            yield format_event(evt, json.dumps(data))
        if superseded:
            yield format_event(
                EventType.superseded, json.dumps({"message": "Flight superseded by a newer one"})
            )
    finally:
        for u in unsubscribe:
            u()
