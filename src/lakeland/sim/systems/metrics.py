from __future__ import annotations

import math
from typing import Mapping, Sequence, TYPE_CHECKING

from ..core.family import Family
from ..types.metrics import PopulationSummary, StepMetrics
from ..utils.math2d import distance

if TYPE_CHECKING:
    from ..core.ecosystem import Ecosystem


def create_metrics(world: Ecosystem, step: int, splits: int = 0, merges: int = 0, extinctions: int = 0) -> StepMetrics:
    counts = world.species_counts()
    return StepMetrics(
        step=step,
        population=sum(counts.values()),
        families=len(world.families),
        species_counts=counts,
        plant_mass=world.total_plant_mass(),
        weather=world.weather.value,
        lake_radius=world.lake_radius,
        splits=splits,
        merges=merges,
        extinctions=extinctions,
    )


def diversity_index(counts: Mapping[str, int]) -> float:
    """Shannon index of the species counts (0 for an empty ecosystem)."""
    total = sum(counts.values())
    if total <= 0:
        return 0.0
    h = 0.0
    for value in counts.values():
        if value <= 0:
            continue
        p = value / total
        h -= p * math.log(p)
    return h


def build_population_summary(world: Ecosystem) -> PopulationSummary:
    counts = world.species_counts()
    total = sum(counts.values())
    family_count = len(world.families)
    return PopulationSummary(
        total_population=total,
        species_counts=counts,
        average_family_size=0.0 if family_count == 0 else total / family_count,
        family_count=family_count,
        plant_mass=world.total_plant_mass(),
        diversity_index=diversity_index(counts),
    )


def predator_prey_ratio(families: Sequence[Family]) -> float:
    predators = sum(family.size for family in families if family.species.is_predator)
    prey = sum(family.size for family in families if family.species.is_prey)
    if prey == 0:
        return 0.0 if predators == 0 else math.inf
    return predators / prey


def average_pairwise_distance(families: Sequence[Family]) -> float:
    n = len(families)
    if n < 2:
        return 0.0
    total = 0.0
    pairs = 0
    for i in range(n):
        for j in range(i + 1, n):
            total += distance(families[i].position, families[j].position)
            pairs += 1
    return total / pairs


def format_population_line(step: int, world: Ecosystem) -> str:
    summary = build_population_summary(world)
    species = ",".join(f"{name}={summary.species_counts[name]}" for name in sorted(summary.species_counts))
    return (
        f"step={step} total={summary.total_population} families={summary.family_count} "
        f"plants={summary.plant_mass:.2f} species={{{species}}}"
    )


def format_weather_line(step: int, world: Ecosystem) -> str:
    return f"step={step} weather={world.weather.value} lake_radius={world.lake_radius:.2f}"
