"""Small vector helpers shared by movement, collision and spawning."""

from __future__ import annotations

from math import hypot


def clamp(value: float, min_value: float, max_value: float) -> float:
    return min(max(value, min_value), max_value)


def distance(ax: float, ay: float, bx: float, by: float) -> float:
    return hypot(ax - bx, ay - by)


def distance_sq(ax: float, ay: float, bx: float, by: float) -> float:
    dx = ax - bx
    dy = ay - by
    return dx * dx + dy * dy


def unit_vec(dx: float, dy: float) -> tuple[float, float]:
    mag_sq = dx * dx + dy * dy
    if mag_sq <= 1e-9:
        return (0.0, 0.0)
    inv_mag = mag_sq ** -0.5
    return (dx * inv_mag, dy * inv_mag)
