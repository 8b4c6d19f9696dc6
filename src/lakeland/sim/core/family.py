from __future__ import annotations

from dataclasses import dataclass, field

from pygame.math import Vector2

from .species import Species


@dataclass(slots=True)
class Family:
    id: int
    species: Species
    size: int
    position: Vector2
    velocity: Vector2 = field(default_factory=Vector2)
    acceleration: Vector2 = field(default_factory=Vector2)
    propulsion_direction: Vector2 = field(default_factory=Vector2)


@dataclass(slots=True)
class Plant:
    position: Vector2
    size: float


@dataclass(slots=True)
class Lake:
    center: Vector2
    radius: float
    max_radius: float
