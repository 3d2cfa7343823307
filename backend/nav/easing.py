"""
Easing curves for view flights.

Each curve maps linear progress t in [0, 1] to eased progress in [0, 1], is monotonic
and fixes both endpoints (f(0) == 0, f(1) == 1).
"""
from __future__ import annotations

from enum import Enum
from typing import Callable

Easing = Callable[[float], float]


class EasingType(str, Enum):
    linear = "linear"
    ease_in = "ease_in"
    ease_out = "ease_out"
    ease_in_out = "ease_in_out"
    quad_in_out = "quad_in_out"


def linear(t: float) -> float:
    return t


def ease_in(t: float) -> float:
    return t * t


def ease_out(t: float) -> float:
    return 1 - (1 - t) * (1 - t)


def ease_in_out(t: float) -> float:
    # Cubic Hermite with zero end tangents (smoothstep).
    return t * t * (3.0 - 2.0 * t)


def quad_in_out(t: float) -> float:
    if t < 0.5:
        return 2 * t * t
    return 1 - pow(-2 * t + 2, 2) / 2


EASING_FUNCTIONS: dict[EasingType, Easing] = {
    EasingType.linear: linear,
    EasingType.ease_in: ease_in,
    EasingType.ease_out: ease_out,
    EasingType.ease_in_out: ease_in_out,
    EasingType.quad_in_out: quad_in_out,
}

DEFAULT_EASING = EasingType.ease_in_out


def get_easing(name: str | EasingType | None) -> Easing:
    """
    Lookup by enum or name; unknown/empty names fall back to the default curve.
    """
    if isinstance(name, EasingType):
        return EASING_FUNCTIONS[name]
    try:
        return EASING_FUNCTIONS[EasingType((name or "").strip().lower())]
    except ValueError:
        return EASING_FUNCTIONS[DEFAULT_EASING]
