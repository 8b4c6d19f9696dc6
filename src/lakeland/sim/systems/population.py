from __future__ import annotations

import math
from typing import Dict, List, Mapping, Sequence, Tuple, TYPE_CHECKING

from ..core.environment import coefficient_of_animal_growth_rate_increase, is_in_lake
from ..core.family import Family
from ..utils.math2d import distance

if TYPE_CHECKING:
    from ..core.ecosystem import Ecosystem


def round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def count_species(families: Sequence[Family]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for family in families:
        counts[family.species.name] = counts.get(family.species.name, 0) + family.size
    return counts


def contact_growth(a: Family, b: Family, eating_threshold: float) -> Tuple[float, float]:
    """Growth impulses for a predator/prey pair closer than ``eating_threshold``.

    Each side gets its own species' contact rate. Same-type pairs and pairs
    involving neutral families get nothing.
    """
    if distance(a.position, b.position) >= eating_threshold:
        return 0.0, 0.0
    if (a.species.is_predator and b.species.is_prey) or (a.species.is_prey and b.species.is_predator):
        return a.species.contact_growth_rate, b.species.contact_growth_rate
    return 0.0, 0.0


def compute_growth_rates(
    world: Ecosystem, families: Sequence[Family], consumed: Mapping[int, float]
) -> List[float]:
    population = world._config.population
    plants = world._config.plants
    capacities = world._carrying_capacity
    lake = world._lake
    weather_factor = 1.0 + coefficient_of_animal_growth_rate_increase(world.weather)
    counts = count_species(families)

    rates: List[float] = []
    for family in families:
        species = family.species
        rate = species.growth_rate * weather_factor
        capacity = capacities.get(species.name, 0)
        if capacity > 0:
            # goes negative once the species is above capacity
            rate *= 1.0 - counts[species.name] / capacity
        if species.is_prey:
            rate += consumed.get(family.id, 0.0) * plants.prey_conversion_factor
        if is_in_lake(family.position, lake):
            rate += population.lake_growth_bonus
        rates.append(rate)

    # Contact impact scales with the size of the other party.
    for i in range(len(families)):
        for j in range(i + 1, len(families)):
            rate_i, rate_j = contact_growth(families[i], families[j], population.eating_threshold)
            if rate_i == 0.0 and rate_j == 0.0:
                continue
            rates[i] += rate_i * (1.0 + families[j].size)
            rates[j] += rate_j * (1.0 + families[i].size)
    return rates


def apply_growth(families: Sequence[Family], rates: Sequence[float]) -> None:
    for family, rate in zip(families, rates):
        size = float(family.size)
        family.size = max(0, round_half_away(size + size * rate))


def enforce_carrying_capacity(families: Sequence[Family], capacities: Mapping[str, int]) -> None:
    """Trim every over-capacity species back to its cap.

    The excess is shared out in proportion to family size; whatever rounding
    leaves behind comes off the largest families one individual at a time.
    """
    for name, total in count_species(families).items():
        capacity = capacities.get(name, 0)
        if capacity <= 0 or total <= capacity:
            continue
        excess = total - capacity
        members = [family for family in families if family.species.name == name]
        for family in members:
            reduction = round_half_away(excess * (family.size / total))
            if reduction > 0:
                family.size = max(0, family.size - reduction)
        remaining = sum(family.size for family in members) - capacity
        while remaining > 0:
            largest = max(members, key=lambda family: family.size)
            largest.size -= 1
            remaining -= 1


def remove_extinct(families: Sequence[Family]) -> List[Family]:
    return [family for family in families if family.size > 0]


def update_populations(world: Ecosystem, consumed: Mapping[int, float]) -> int:
    """Grow, clamp and prune ``world``'s families. Returns the number removed."""
    families = world._families
    rates = compute_growth_rates(world, families, consumed)
    apply_growth(families, rates)
    enforce_carrying_capacity(families, world._carrying_capacity)
    survivors = remove_extinct(families)
    extinct = len(families) - len(survivors)
    world._families = survivors
    return extinct
