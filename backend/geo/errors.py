from __future__ import annotations


class MapCoreError(Exception):
    """Base class for navigation/highlight failures reported to callers."""


class InvalidInput(MapCoreError, ValueError):
    """Null/empty footprint, too few points or out-of-range coordinates."""


class ProjectionUnavailable(MapCoreError):
    """No map engine/projector is wired up."""


class ProjectionFailed(MapCoreError):
    """The engine is present but refused to convert a specific coordinate."""

    def __init__(self, message: str, *, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index
