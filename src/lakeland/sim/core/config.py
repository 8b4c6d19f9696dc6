from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .environment import WEATHER_NAMES
from .species import BehaviorType, Species, default_species


class ConfigurationError(ValueError):
    """Raised when a configuration bundle cannot describe a valid ecosystem."""


def _default_initial_populations() -> Dict[str, int]:
    return {"rabbit": 50, "sheep": 40, "deer": 30, "wolf": 80, "human": 2}


def _default_carrying_capacities() -> Dict[str, int]:
    return {name: int(count * 1.5) for name, count in _default_initial_populations().items()}


@dataclass
class MovementConfig:
    max_speed: float = 40.0
    time_step: float = 1.0
    separation_weight: float = 2.0
    separation_threshold: float = 20.0
    propulsion_strength: float = 3.0
    neutral_propulsion_multiplier: float = 2.0
    turn_strength: float = 0.3
    stuck_speed: float = 0.1
    initial_speed: float = 10.0


@dataclass
class PopulationConfig:
    initial_populations: Dict[str, int] = field(default_factory=_default_initial_populations)
    carrying_capacities: Dict[str, int] = field(default_factory=_default_carrying_capacities)
    families_per_species: int = 3
    min_family_size: int = 5
    max_family_size: int = 100
    eating_threshold: float = 15.0
    merging_threshold: float = 20.0
    lake_growth_bonus: float = 0.1
    split_speed_boost: float = 30.0
    split_jitter: float = 1.0


@dataclass
class PlantConfig:
    count: int = 200
    min_initial_size: float = 5.0
    max_initial_size: float = 15.0
    growth_coefficient: float = 0.05
    consumption_rate: float = 0.1
    prey_conversion_factor: float = 0.05


@dataclass
class WeatherConfig:
    enabled: bool = True
    change_interval: int = 100
    initial: str = "Sunny"


@dataclass
class LakeConfig:
    radius: float = 75.0
    # None means "same as radius" / "world center"
    max_radius: Optional[float] = None
    center: Optional[Tuple[float, float]] = None
    eject_margin: float = 1.0


@dataclass
class SimulationConfig:
    world_size: float = 500.0
    seed: int = 42
    config_version: str = "v1"
    species: Dict[str, Species] = field(default_factory=default_species)
    movement: MovementConfig = field(default_factory=MovementConfig)
    population: PopulationConfig = field(default_factory=PopulationConfig)
    plants: PlantConfig = field(default_factory=PlantConfig)
    weather: WeatherConfig = field(default_factory=WeatherConfig)
    lake: LakeConfig = field(default_factory=LakeConfig)

    @property
    def lake_center(self) -> Tuple[float, float]:
        if self.lake.center is None:
            return (self.world_size / 2.0, self.world_size / 2.0)
        return (float(self.lake.center[0]), float(self.lake.center[1]))

    @property
    def lake_max_radius(self) -> float:
        if self.lake.max_radius is None:
            return self.lake.radius
        return self.lake.max_radius

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text())
        return load_config(data or {})


_SECTIONS = {"species", "movement", "population", "plants", "weather", "lake"}


def _load_species(raw: Dict[str, Any] | None) -> Dict[str, Species]:
    catalog = default_species()
    for name, entry in (raw or {}).items():
        entry = dict(entry or {})
        behavior_raw = entry.pop("type", entry.pop("behavior", None))
        try:
            behavior = BehaviorType(behavior_raw)
        except ValueError as exc:
            raise ConfigurationError(f"Species {name!r} has unknown behavior type {behavior_raw!r}") from exc
        catalog[name] = Species(
            name=name,
            species_class=str(entry.pop("class", entry.pop("species_class", behavior.value))),
            behavior=behavior,
            growth_rate=float(entry.pop("growth_rate", 0.0)),
            contact_growth_rate=float(entry.pop("contact_growth_rate", 0.0)),
        )
        if entry:
            raise ConfigurationError(f"Species {name!r} has unknown options: {sorted(entry)}")
    return catalog


def load_config(raw: dict) -> SimulationConfig:
    try:
        species = _load_species(raw.get("species"))
        movement = MovementConfig(**raw.get("movement") or {})
        population = PopulationConfig(**raw.get("population") or {})
        plants = PlantConfig(**raw.get("plants") or {})
        weather = WeatherConfig(**raw.get("weather") or {})
        lake_raw = dict(raw.get("lake") or {})
        center = lake_raw.pop("center", None)
        if isinstance(center, dict):
            center = (center.get("x", 0.0), center.get("y", 0.0))
        lake = LakeConfig(center=None if center is None else (float(center[0]), float(center[1])), **lake_raw)
        sim_values = {k: v for k, v in raw.items() if k not in _SECTIONS}
        config = SimulationConfig(
            species=species,
            movement=movement,
            population=population,
            plants=plants,
            weather=weather,
            lake=lake,
            **sim_values,
        )
    except TypeError as exc:
        raise ConfigurationError(f"Invalid configuration option: {exc}") from exc
    validate_config(config)
    return config


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigurationError(message)


def _positive(value: float) -> bool:
    return math.isfinite(value) and value > 0


def validate_config(config: SimulationConfig) -> None:
    _require(_positive(config.world_size), f"world_size must be positive, got {config.world_size}")

    movement = config.movement
    _require(_positive(movement.time_step), f"time_step must be positive, got {movement.time_step}")
    _require(movement.max_speed >= 0, f"max_speed must be non-negative, got {movement.max_speed}")
    _require(movement.separation_threshold >= 0, "separation_threshold must be non-negative")

    for name, species in config.species.items():
        _require(species.name == name, f"Species registered as {name!r} is named {species.name!r}")

    population = config.population
    _require(
        population.families_per_species > 0,
        f"families_per_species must be positive, got {population.families_per_species}",
    )
    _require(population.min_family_size >= 1, "min_family_size must be at least 1")
    _require(
        population.max_family_size >= population.min_family_size,
        "max_family_size must not be smaller than min_family_size",
    )
    for name, count in population.initial_populations.items():
        _require(name in config.species, f"Initial population given for unknown species {name!r}")
        _require(count >= 0, f"Initial population of {name!r} must be non-negative, got {count}")
    for name, capacity in population.carrying_capacities.items():
        _require(name in config.species, f"Carrying capacity given for unknown species {name!r}")
        _require(capacity >= 0, f"Carrying capacity of {name!r} must be non-negative, got {capacity}")

    plants = config.plants
    _require(plants.count >= 0, "plant count must be non-negative")
    _require(
        0 <= plants.min_initial_size <= plants.max_initial_size,
        "plant initial size range must satisfy 0 <= min <= max",
    )
    _require(plants.consumption_rate >= 0, "plant consumption_rate must be non-negative")

    weather = config.weather
    _require(weather.change_interval > 0, f"weather change_interval must be positive, got {weather.change_interval}")
    _require(weather.initial in WEATHER_NAMES, f"Unknown initial weather {weather.initial!r}")

    lake = config.lake
    _require(lake.radius >= 0, f"lake radius must be non-negative, got {lake.radius}")
    _require(
        config.lake_max_radius >= lake.radius,
        f"lake max_radius ({config.lake_max_radius}) must not be smaller than radius ({lake.radius})",
    )
    _require(
        config.lake_max_radius < config.world_size / 2.0,
        "lake max_radius must leave room for families inside the world",
    )
