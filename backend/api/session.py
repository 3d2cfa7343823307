from __future__ import annotations

import threading
from dataclasses import dataclass

from config.settings import NavigatorSettings, get_settings
from geo.projection import WebMercatorMapEngine
from highlight.renderer import FootprintRenderer
from nav.viewport import MapViewport


@dataclass
class MapSession:
    """
    One map view as served over HTTP: engine adapter, viewport and highlighter.
    """

    settings: NavigatorSettings
    engine: WebMercatorMapEngine
    viewport: MapViewport
    renderer: FootprintRenderer


def build_session(settings: NavigatorSettings | None = None) -> MapSession:
    s = settings or get_settings()
    engine = WebMercatorMapEngine()
    viewport = MapViewport(engine, settings=s)
    renderer = FootprintRenderer(viewport, settings=s.highlight)
    viewport.initialize()
    return MapSession(settings=s, engine=engine, viewport=viewport, renderer=renderer)


_SESSION: MapSession | None = None
_SESSION_LOCK = threading.RLock()


def get_session() -> MapSession:
    global _SESSION
    with _SESSION_LOCK:
        if _SESSION is None:
            _SESSION = build_session()
        return _SESSION


def reset_session() -> None:
    global _SESSION
    with _SESSION_LOCK:
        if _SESSION is not None:
            _SESSION.renderer.clear_highlight()
        _SESSION = None
