from __future__ import annotations

import math

from pygame.math import Vector2


def _safe_normalize(vector: Vector2) -> Vector2:
    return _safe_normalize_xy(vector.x, vector.y)


def _safe_normalize_xy(x: float, y: float) -> Vector2:
    magnitude_sq = x * x + y * y
    if magnitude_sq < 1e-10:
        return Vector2()
    inv = 1.0 / math.sqrt(magnitude_sq)
    return Vector2(x * inv, y * inv)


def _clamp_length(vector: Vector2, max_length: float) -> Vector2:
    if max_length <= 0:
        return Vector2()
    magnitude_sq = vector.length_squared()
    if magnitude_sq <= max_length * max_length:
        return Vector2(vector)
    if magnitude_sq == 0:
        return Vector2()
    scale = max_length / math.sqrt(magnitude_sq)
    return Vector2(vector.x * scale, vector.y * scale)


def distance(a: Vector2, b: Vector2) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def lerp(a: Vector2, b: Vector2, t: float) -> Vector2:
    return Vector2(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)


def rotate(vector: Vector2, angle: float) -> Vector2:
    """Rotate by ``angle`` radians (pygame's own rotate works in degrees)."""
    cos = math.cos(angle)
    sin = math.sin(angle)
    return Vector2(vector.x * cos - vector.y * sin, vector.x * sin + vector.y * cos)


def _wrap_value(value: float, size: float) -> float:
    wrapped = value % size
    # float modulo of a tiny negative value can round up to ``size`` itself
    if wrapped >= size:
        return 0.0
    return wrapped


def wrap_position(position: Vector2, size: float) -> Vector2:
    return Vector2(_wrap_value(position.x, size), _wrap_value(position.y, size))


def reflect_from_circle(position: Vector2, center: Vector2, radius: float, margin: float = 1.0) -> Vector2:
    """Move a point inside the circle to ``radius + margin`` from the center.

    Points outside the circle and the center itself are returned unchanged.
    """
    dx = position.x - center.x
    dy = position.y - center.y
    dist = math.hypot(dx, dy)
    if dist == 0.0 or dist > radius:
        return Vector2(position)
    scale = (radius + margin) / dist
    return Vector2(center.x + dx * scale, center.y + dy * scale)


def is_finite(vector: Vector2) -> bool:
    return math.isfinite(vector.x) and math.isfinite(vector.y)
