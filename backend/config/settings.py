from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from geo.types import RGBA
from geo.zoom import DEFAULT_METERS_PER_DEGREE, DEFAULT_ZOOM_STEPS, FINEST_ZOOM
from nav.easing import DEFAULT_EASING, EasingType


def _repo_root() -> Path:
    # .../backend/config/settings.py -> repo root is 2 levels up from backend/
    return Path(__file__).resolve().parents[2]


def config_path() -> Path:
    return Path(
        os.getenv("GEOSCALE_CONFIG") or (_repo_root() / "config" / "navigator.yaml")
    )


class DefaultView(BaseModel):
    # Paris
    lat: float = Field(default=48.8566, ge=-90.0, le=90.0)
    lon: float = Field(default=2.3522, ge=-180.0, le=180.0)
    zoom: float = Field(default=15.0, ge=0.0, le=24.0)


class FlightSettings(BaseModel):
    defaultDuration: float = Field(default=1.2, ge=0.0)
    footprintDuration: float = Field(default=0.8, ge=0.0)
    addressDuration: float = Field(default=2.0, ge=0.0)
    addressZoom: float = Field(default=18.0, ge=0.0, le=24.0)
    easing: EasingType = DEFAULT_EASING

    @field_validator("easing", mode="before")
    @classmethod
    def _easing_name(cls, v):
        # Unknown names fall back to the default curve instead of failing startup.
        if isinstance(v, EasingType):
            return v
        try:
            return EasingType(str(v).strip().lower())
        except ValueError:
            return DEFAULT_EASING


class ZoomStep(BaseModel):
    minExtentMeters: float = Field(ge=0.0)
    zoom: int = Field(ge=0, le=24)


class ZoomSettings(BaseModel):
    """
    Footprint-size -> zoom heuristic. `metersPerDegree` is a flat approximation tuned
    for mid-latitudes; change it for the target region.
    """

    metersPerDegree: float = Field(default=DEFAULT_METERS_PER_DEGREE, gt=0.0)
    steps: list[ZoomStep] = Field(
        default_factory=lambda: [
            ZoomStep(minExtentMeters=m, zoom=z) for m, z in DEFAULT_ZOOM_STEPS
        ]
    )
    finestZoom: int = Field(default=FINEST_ZOOM, ge=0, le=24)

    @field_validator("steps")
    @classmethod
    def _descending(cls, steps: list[ZoomStep]) -> list[ZoomStep]:
        # Evaluated top-down; keep the largest threshold first.
        return sorted(steps, key=lambda s: s.minExtentMeters, reverse=True)

    def step_table(self) -> tuple[tuple[float, int], ...]:
        return tuple((s.minExtentMeters, s.zoom) for s in self.steps)


class HighlightSettings(BaseModel):
    elevation: float = 0.01
    outlineLift: float = 0.001
    outlineWidth: float = Field(default=0.002, gt=0.0)
    # #00E5BE
    fillColor: RGBA = (0.0, 0.9, 0.75, 0.3)
    outlineColor: RGBA = (0.0, 0.9, 0.75, 1.0)


class NavigatorSettings(BaseModel):
    defaultView: DefaultView = Field(default_factory=DefaultView)
    flight: FlightSettings = Field(default_factory=FlightSettings)
    zoom: ZoomSettings = Field(default_factory=ZoomSettings)
    highlight: HighlightSettings = Field(default_factory=HighlightSettings)
    # Frame rate used when the HTTP layer steps a flight on the server.
    streamFps: float = Field(default=30.0, gt=0.0, le=240.0)


def _load_yaml(path: Path) -> dict:
    raw = path.read_text(encoding="utf-8")
    data = yaml.safe_load(raw) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid navigator config root: {path}")
    return data


@lru_cache(maxsize=1)
def get_settings() -> NavigatorSettings:
    path = config_path()
    if not path.exists():
        return NavigatorSettings()
    return NavigatorSettings.model_validate(_load_yaml(path))


def clear_settings_cache() -> None:
    """
    Drop cached settings so config/env changes are picked up (tests, dev reloads).
    """
    get_settings.cache_clear()
