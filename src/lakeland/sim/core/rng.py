from __future__ import annotations

import math
import random
from typing import Sequence, TypeVar

from pygame.math import Vector2

T = TypeVar("T")


class DeterministicRng:
    def __init__(self, seed: int):
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_range(self, low: float, high: float) -> float:
        return self._random.uniform(low, high)

    def next_int_inclusive(self, low: int, high: int) -> int:
        return self._random.randint(low, high)

    def next_angle(self) -> float:
        return self._random.uniform(0, 2 * math.pi)

    def next_unit_circle(self) -> Vector2:
        angle = self.next_angle()
        return Vector2(math.cos(angle), math.sin(angle))

    def choice(self, items: Sequence[T]) -> T:
        return self._random.choice(items)
