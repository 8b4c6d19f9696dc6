from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from pygame.math import Vector2

from .config import ConfigurationError, SimulationConfig, validate_config
from .environment import Weather, WeatherCycle, eject_families, is_in_lake, resize_lake
from .family import Family, Lake, Plant
from .rng import DeterministicRng
from .species import Species
from ..systems import lifecycle, movement, plants as plant_system, population
from ..systems.metrics import create_metrics
from ..types.metrics import PopulationSeries, StepMetrics
from ..types.snapshot import Snapshot, SnapshotLake, SnapshotMetadata
from ..utils.math2d import wrap_position

logger = logging.getLogger(__name__)

_PLACEMENT_ATTEMPTS = 1000


class Ecosystem:
    """Aggregate root of the simulation: families, plants, lake and weather."""

    def __init__(self, config: SimulationConfig, rng: Optional[DeterministicRng] = None):
        validate_config(config)
        self._config = config
        self._rng = rng if rng is not None else DeterministicRng(config.seed)
        self._species: Mapping[str, Species] = MappingProxyType(dict(config.species))
        self._carrying_capacity: Dict[str, int] = dict(config.population.carrying_capacities)
        self._weather = WeatherCycle(config.weather.initial, config.weather.change_interval, config.weather.enabled)
        self._lake = self._build_lake()
        self._families: List[Family] = []
        self._plants: List[Plant] = []
        self._id_to_index: Dict[int, int] = {}
        self._next_family_id = 0
        self._step_count = 0
        self._metrics: StepMetrics | None = None
        self._bootstrap_families()
        self._bootstrap_plants()
        self._refresh_index_map()

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def families(self) -> List[Family]:
        return self._families

    @property
    def plants(self) -> List[Plant]:
        return self._plants

    @property
    def species(self) -> Mapping[str, Species]:
        return self._species

    @property
    def lake(self) -> Lake:
        return self._lake

    @property
    def lake_radius(self) -> float:
        return self._lake.radius

    @property
    def weather(self) -> Weather:
        return self._weather.weather

    @weather.setter
    def weather(self, value: Weather | str) -> None:
        self._weather.weather = Weather(value)

    @property
    def weather_change_counter(self) -> int:
        return self._weather.change_counter

    @property
    def carrying_capacity(self) -> Mapping[str, int]:
        return self._carrying_capacity

    @property
    def width(self) -> float:
        return self._config.world_size

    @property
    def step_count(self) -> int:
        return self._step_count

    @property
    def metrics(self) -> StepMetrics | None:
        return self._metrics

    def reset(self) -> None:
        self._rng.reset()
        self._weather.reset()
        self._carrying_capacity = dict(self._config.population.carrying_capacities)
        self._lake = self._build_lake()
        self._families = []
        self._plants = []
        self._next_family_id = 0
        self._step_count = 0
        self._metrics = None
        self._bootstrap_families()
        self._bootstrap_plants()
        self._refresh_index_map()

    def species_counts(self) -> Dict[str, int]:
        return population.count_species(self._families)

    def total_population(self) -> int:
        return sum(family.size for family in self._families)

    def total_plant_mass(self) -> float:
        return plant_system.total_plant_mass(self._plants)

    def family(self, family_id: int) -> Family | None:
        index = self._id_to_index.get(family_id)
        if index is None or index >= len(self._families):
            return None
        family = self._families[index]
        return family if family.id == family_id else None

    def add_family(
        self,
        species_name: str,
        size: int,
        position: Vector2,
        velocity: Vector2 | None = None,
        acceleration: Vector2 | None = None,
        propulsion_direction: Vector2 | None = None,
    ) -> Family:
        species = self._species.get(species_name)
        if species is None:
            raise ConfigurationError(f"Unknown species {species_name!r}")
        if size < 0:
            raise ConfigurationError(f"Family size must be non-negative, got {size}")
        family = Family(
            id=self._allocate_family_id(),
            species=species,
            size=size,
            position=wrap_position(position, self._config.world_size),
            velocity=Vector2() if velocity is None else Vector2(velocity),
            acceleration=Vector2() if acceleration is None else Vector2(acceleration),
            propulsion_direction=Vector2() if propulsion_direction is None else Vector2(propulsion_direction),
        )
        self._families.append(family)
        self._id_to_index[family.id] = len(self._families) - 1
        return family

    def step(self, time_step: float | None = None) -> StepMetrics:
        dt = self._config.movement.time_step if time_step is None else time_step
        if not (math.isfinite(dt) and dt > 0):
            raise ConfigurationError(f"time_step must be positive, got {dt}")
        config = self._config

        if self._weather.tick(self._rng):
            logger.debug("weather changed to %s", self.weather.value)
        resize_lake(self._lake, self.weather)
        self._families = eject_families(self._families, self._lake, config.world_size, config.lake.eject_margin)

        self._families = movement.update_movement(self, dt)

        plant_system.grow_plants(self._plants, config.plants.growth_coefficient, self.weather)
        consumed = plant_system.consume_plants(
            self._families, self._plants, config.plants.consumption_rate, config.population.eating_threshold
        )

        extinctions = population.update_populations(self, consumed)
        if extinctions:
            logger.debug("%d families went extinct", extinctions)

        splits = lifecycle.split_large_families(self)
        merges = lifecycle.merge_small_families(self)

        self._step_count += 1
        self._refresh_index_map()
        metrics = create_metrics(self, self._step_count, splits=splits, merges=merges, extinctions=extinctions)
        self._metrics = metrics
        return metrics

    def snapshot(self) -> Snapshot:
        metrics = self._metrics if self._metrics is not None else create_metrics(self, self._step_count)
        return Snapshot(
            step=self._step_count,
            metrics=metrics,
            families=[self._family_snapshot(family) for family in self._families],
            plants=[{"x": plant.position.x, "y": plant.position.y, "size": plant.size} for plant in self._plants],
            lake=SnapshotLake(
                x=self._lake.center.x,
                y=self._lake.center.y,
                radius=self._lake.radius,
                max_radius=self._lake.max_radius,
            ),
            metadata=SnapshotMetadata(
                world_size=self._config.world_size,
                time_step=self._config.movement.time_step,
                seed=self._rng.seed,
                config_version=self._config.config_version,
            ),
        )

    def _build_lake(self) -> Lake:
        cx, cy = self._config.lake_center
        return Lake(center=Vector2(cx, cy), radius=self._config.lake.radius, max_radius=self._config.lake_max_radius)

    def _bootstrap_families(self) -> None:
        population_config = self._config.population
        initial_speed = self._config.movement.initial_speed
        for name, total in population_config.initial_populations.items():
            sizes = lifecycle.random_partition(
                total, population_config.families_per_species, population_config.min_family_size, self._rng
            )
            for size in sizes:
                family = Family(
                    id=self._allocate_family_id(),
                    species=self._species[name],
                    size=size,
                    position=self._random_position_outside_lake(),
                    velocity=self._rng.next_unit_circle() * initial_speed,
                    propulsion_direction=self._rng.next_unit_circle(),
                )
                self._families.append(family)

    def _bootstrap_plants(self) -> None:
        plant_config = self._config.plants
        size = self._config.world_size
        for _ in range(plant_config.count):
            position = Vector2(self._rng.next_range(0.0, size), self._rng.next_range(0.0, size))
            if is_in_lake(position, self._lake):
                continue
            self._plants.append(
                Plant(
                    position=wrap_position(position, size),
                    size=self._rng.next_range(plant_config.min_initial_size, plant_config.max_initial_size),
                )
            )

    def _random_position_outside_lake(self) -> Vector2:
        size = self._config.world_size
        for _ in range(_PLACEMENT_ATTEMPTS):
            position = wrap_position(
                Vector2(self._rng.next_range(0.0, size), self._rng.next_range(0.0, size)), size
            )
            if not is_in_lake(position, self._lake):
                return position
        raise ConfigurationError("Could not place a family outside the lake")

    def _allocate_family_id(self) -> int:
        family_id = self._next_family_id
        self._next_family_id += 1
        return family_id

    def _refresh_index_map(self) -> None:
        self._id_to_index = {family.id: i for i, family in enumerate(self._families)}

    def _family_snapshot(self, family: Family) -> Dict[str, Any]:
        return {
            "id": family.id,
            "species": family.species.name,
            "behavior": family.species.behavior.value,
            "size": family.size,
            "x": family.position.x,
            "y": family.position.y,
            "vx": family.velocity.x,
            "vy": family.velocity.y,
            "speed": family.velocity.length(),
        }


def initialize_ecosystem(config: SimulationConfig, rng: Optional[DeterministicRng] = None) -> Ecosystem:
    return Ecosystem(config, rng)


def advance_step(ecosystem: Ecosystem, time_step: float | None = None) -> Ecosystem:
    ecosystem.step(time_step)
    return ecosystem


def simulate(ecosystem: Ecosystem, steps: int, time_step: float | None = None) -> PopulationSeries:
    """Run ``steps`` updates, recording the starting state and every step after it."""
    series = PopulationSeries()
    series.append(create_metrics(ecosystem, ecosystem.step_count))
    for _ in range(steps):
        series.append(ecosystem.step(time_step))
    return series
