from __future__ import annotations

import math
from typing import Sequence

from pygame.math import Vector2

from ..core.family import Family
from ..core.species import BehaviorType

_SEPARATION_COEFFICIENTS = {
    BehaviorType.PREDATOR: 1.5,
    BehaviorType.PREY: 1.0,
    BehaviorType.NEUTRAL: 1.0,
}


def separation_coefficient(behavior: BehaviorType) -> float:
    return _SEPARATION_COEFFICIENTS.get(behavior, 1.0)


def separation_force(families: Sequence[Family], index: int, threshold: float) -> Vector2:
    """Average inverse-square repulsion from every family closer than ``threshold``.

    The sum is divided by the number of contributing neighbours rather than the
    family count, so dense clusters do not blow the force up. Coincident
    families are skipped.
    """
    subject = families[index]
    coefficient = separation_coefficient(subject.species.behavior)
    x1 = subject.position.x
    y1 = subject.position.y
    sum_x = 0.0
    sum_y = 0.0
    neighbors = 0

    for j, other in enumerate(families):
        if j == index:
            continue
        dx = x1 - other.position.x
        dy = y1 - other.position.y
        dist = math.sqrt(dx * dx + dy * dy)
        if 0.0 < dist < threshold:
            magnitude = coefficient / (dist * dist)
            sum_x += dx * magnitude
            sum_y += dy * magnitude
            neighbors += 1

    if neighbors == 0:
        return Vector2()
    return Vector2(sum_x / neighbors, sum_y / neighbors)
