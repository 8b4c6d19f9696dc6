from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Tuple, Union

from pygame.math import Vector2

from ..utils.math2d import reflect_from_circle, wrap_position
from .family import Family, Lake
from .rng import DeterministicRng


class Weather(str, Enum):
    DRY = "Dry"
    SUNNY = "Sunny"
    RAINY = "Rainy"
    FROZEN = "Frozen"


WEATHER_NAMES: Tuple[str, ...] = tuple(weather.value for weather in Weather)

WeatherLike = Union[Weather, str]


@dataclass(frozen=True)
class WeatherCoefficients:
    plant_growth: float
    lake_size: float
    movement_speed: float
    animal_growth: float


_COEFFICIENTS: Dict[str, WeatherCoefficients] = {
    Weather.DRY.value: WeatherCoefficients(plant_growth=-0.20, lake_size=-0.20, movement_speed=-0.05, animal_growth=-0.10),
    Weather.SUNNY.value: WeatherCoefficients(plant_growth=0.00, lake_size=0.00, movement_speed=0.07, animal_growth=0.10),
    Weather.RAINY.value: WeatherCoefficients(plant_growth=0.20, lake_size=0.20, movement_speed=0.00, animal_growth=0.00),
    Weather.FROZEN.value: WeatherCoefficients(plant_growth=-0.40, lake_size=0.00, movement_speed=-0.15, animal_growth=-0.20),
}

# Unrecognised weather values fall back to the Frozen row.
_FALLBACK = _COEFFICIENTS[Weather.FROZEN.value]

MAX_MOVEMENT_SPEED_COEFFICIENT = max(row.movement_speed for row in _COEFFICIENTS.values())


def coefficients_for(weather: WeatherLike) -> WeatherCoefficients:
    key = weather.value if isinstance(weather, Weather) else weather
    return _COEFFICIENTS.get(key, _FALLBACK)


def coefficient_of_plant_increase(weather: WeatherLike) -> float:
    return coefficients_for(weather).plant_growth


def coefficient_of_lake_increase(weather: WeatherLike) -> float:
    return coefficients_for(weather).lake_size


def coefficient_of_moving_speed_increase(weather: WeatherLike) -> float:
    return coefficients_for(weather).movement_speed


def coefficient_of_animal_growth_rate_increase(weather: WeatherLike) -> float:
    return coefficients_for(weather).animal_growth


class WeatherCycle:
    """Memoryless weather state machine, redrawn every ``change_interval`` steps."""

    def __init__(self, initial: WeatherLike, change_interval: int, enabled: bool = True):
        self._initial = Weather(initial)
        self.weather = self._initial
        self.change_counter = 0
        self._change_interval = change_interval
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def reset(self) -> None:
        self.weather = self._initial
        self.change_counter = 0

    def tick(self, rng: DeterministicRng) -> bool:
        """Advance the counter; return True when a new weather was drawn."""
        self.change_counter += 1
        if not self._enabled or self.change_counter < self._change_interval:
            return False
        self.weather = rng.choice(list(Weather))
        self.change_counter = 0
        return True


def is_in_lake(position: Vector2, lake: Lake) -> bool:
    return math.hypot(position.x - lake.center.x, position.y - lake.center.y) <= lake.radius


def push_out_of_lake(position: Vector2, lake: Lake, margin: float = 1.0) -> Vector2:
    return reflect_from_circle(position, lake.center, lake.radius, margin)


def lake_radius_for(weather: WeatherLike, max_radius: float) -> float:
    radius = max_radius * (0.8 + coefficient_of_lake_increase(weather))
    return min(max_radius, max(0.0, radius))


def resize_lake(lake: Lake, weather: WeatherLike) -> None:
    lake.radius = lake_radius_for(weather, lake.max_radius)


def eject_families(families: List[Family], lake: Lake, world_size: float, margin: float = 1.0) -> List[Family]:
    ejected: List[Family] = []
    for family in families:
        if not is_in_lake(family.position, lake):
            ejected.append(family)
            continue
        pushed = push_out_of_lake(family.position, lake, margin)
        ejected.append(replace(family, position=wrap_position(pushed, world_size)))
    return ejected
