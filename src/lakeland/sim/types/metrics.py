from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(slots=True)
class StepMetrics:
    step: int
    population: int
    families: int
    species_counts: Dict[str, int]
    plant_mass: float
    weather: str
    lake_radius: float
    splits: int = 0
    merges: int = 0
    extinctions: int = 0


@dataclass(slots=True)
class PopulationSummary:
    total_population: int
    species_counts: Dict[str, int]
    average_family_size: float
    family_count: int
    plant_mass: float
    diversity_index: float


@dataclass
class PopulationSeries:
    snapshots: List[StepMetrics] = field(default_factory=list)

    def append(self, metrics: StepMetrics) -> None:
        self.snapshots.append(metrics)

    def __len__(self) -> int:
        return len(self.snapshots)

    def is_empty(self) -> bool:
        return not self.snapshots

    def last(self) -> StepMetrics | None:
        return self.snapshots[-1] if self.snapshots else None

    def species_trajectory(self, name: str) -> List[int]:
        return [snapshot.species_counts.get(name, 0) for snapshot in self.snapshots]

    def total_population_trajectory(self) -> List[int]:
        return [snapshot.population for snapshot in self.snapshots]
