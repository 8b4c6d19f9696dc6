from __future__ import annotations

import math
from typing import Dict, Sequence

from ..core.environment import WeatherLike, coefficient_of_plant_increase
from ..core.family import Family, Plant


def grow_plants(plants: Sequence[Plant], growth_coefficient: float, weather: WeatherLike) -> None:
    multiplier = 1.0 + coefficient_of_plant_increase(weather)
    for plant in plants:
        if plant.size > 0:
            plant.size += growth_coefficient * plant.size * multiplier


def consume_plants(
    families: Sequence[Family],
    plants: Sequence[Plant],
    consumption_rate: float,
    threshold: float,
) -> Dict[int, float]:
    """Let prey families graze nearby plants.

    Returns the biomass actually removed, keyed by family id. Empty plants are
    skipped and no plant is taken below zero.
    """
    consumed: Dict[int, float] = {}
    if consumption_rate <= 0:
        return consumed
    for family in families:
        if not family.species.is_prey:
            continue
        fx = family.position.x
        fy = family.position.y
        eaten = 0.0
        for plant in plants:
            if plant.size <= 0:
                continue
            if math.hypot(plant.position.x - fx, plant.position.y - fy) >= threshold:
                continue
            bite = min(consumption_rate, plant.size)
            plant.size = max(0.0, plant.size - bite)
            eaten += bite
        if eaten > 0.0:
            consumed[family.id] = consumed.get(family.id, 0.0) + eaten
    return consumed


def total_plant_mass(plants: Sequence[Plant]) -> float:
    return sum(plant.size for plant in plants)
