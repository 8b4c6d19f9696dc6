from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from .metrics import StepMetrics


@dataclass(slots=True)
class Snapshot:
    step: int
    metrics: StepMetrics
    families: List[Dict[str, Any]]
    plants: List[Dict[str, float]]
    lake: "SnapshotLake"
    metadata: "SnapshotMetadata"


@dataclass(slots=True)
class SnapshotLake:
    x: float
    y: float
    radius: float
    max_radius: float


@dataclass(slots=True)
class SnapshotMetadata:
    world_size: float
    time_step: float
    seed: int
    config_version: str
