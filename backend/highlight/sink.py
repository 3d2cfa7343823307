from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any, Protocol

from geo.types import RGBA
from highlight.geometry import HighlightGeometry


@dataclass(frozen=True)
class HighlightStyle:
    fill_color: RGBA = (0.0, 0.9, 0.75, 0.3)
    outline_color: RGBA = (0.0, 0.9, 0.75, 1.0)
    outline_width: float = 0.002


class HighlightSink(Protocol):
    """
    Host-scene side of a highlight: creates mesh/line nodes and frees them.

    `show` returns an opaque handle; the renderer passes it back to `restyle` and
    `release` and never inspects it.
    """

    def show(self, geometry: HighlightGeometry, style: HighlightStyle) -> Any: ...

    def restyle(self, handle: Any, style: HighlightStyle) -> None: ...

    def release(self, handle: Any) -> None: ...


class InMemoryHighlightSink:
    """
    Scene stand-in that keeps live highlights in a dict (headless use and tests).
    """

    def __init__(self) -> None:
        self.live: dict[int, tuple[HighlightGeometry, HighlightStyle]] = {}
        self.released_count = 0
        self._ids = itertools.count(1)

    def show(self, geometry: HighlightGeometry, style: HighlightStyle) -> int:
        handle = next(self._ids)
        self.live[handle] = (geometry, style)
        return handle

    def restyle(self, handle: int, style: HighlightStyle) -> None:
        geometry, _old = self.live[handle]
        self.live[handle] = (geometry, style)

    def release(self, handle: int) -> None:
        if self.live.pop(handle, None) is not None:
            self.released_count += 1
