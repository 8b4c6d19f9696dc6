from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from ..sim.core.config import SimulationConfig
from ..sim.core.ecosystem import Ecosystem
from ..sim.systems.metrics import (
    average_pairwise_distance,
    format_population_line,
    format_weather_line,
    predator_prey_ratio,
)
from ..sim.types.metrics import PopulationSeries

logger = logging.getLogger(__name__)


def _log_summary(ecosystem: Ecosystem, series: PopulationSeries) -> None:
    last = series.last()
    if last is None:
        return
    logger.info(
        "final step=%d total_population=%d plant_mass=%.2f weather=%s",
        last.step,
        last.population,
        last.plant_mass,
        last.weather,
    )
    for name in sorted(ecosystem.species):
        trajectory = series.species_trajectory(name)
        logger.info("species=%s min=%d max=%d final=%d", name, min(trajectory), max(trajectory), trajectory[-1])
    logger.info("predator_prey_ratio=%.3f", predator_prey_ratio(ecosystem.families))


def run_headless(
    steps: int,
    config: Optional[SimulationConfig] = None,
    seed: Optional[int] = None,
    time_step: Optional[float] = None,
) -> PopulationSeries:
    """Run the ecosystem without any renderer and return its population series."""
    config = config if config is not None else SimulationConfig()
    if seed is not None:
        config = dataclasses.replace(config, seed=seed)
    ecosystem = Ecosystem(config)
    series = PopulationSeries()

    for step in range(steps):
        logger.info(format_population_line(step, ecosystem))
        logger.info(format_weather_line(step, ecosystem))
        logger.debug("step=%d avg_pairwise_distance=%.3f", step, average_pairwise_distance(ecosystem.families))
        series.append(ecosystem.step(time_step))

    _log_summary(ecosystem, series)
    return series
