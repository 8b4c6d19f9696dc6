from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class BehaviorType(str, Enum):
    PREDATOR = "predator"
    PREY = "prey"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Species:
    name: str
    species_class: str
    behavior: BehaviorType
    growth_rate: float
    contact_growth_rate: float

    @property
    def is_predator(self) -> bool:
        return self.behavior is BehaviorType.PREDATOR

    @property
    def is_prey(self) -> bool:
        return self.behavior is BehaviorType.PREY

    @property
    def is_neutral(self) -> bool:
        return self.behavior is BehaviorType.NEUTRAL


def default_species() -> Dict[str, Species]:
    return {
        "rabbit": Species("rabbit", "prey", BehaviorType.PREY, growth_rate=0.02, contact_growth_rate=-0.4),
        "sheep": Species("sheep", "prey", BehaviorType.PREY, growth_rate=0.08, contact_growth_rate=-0.1),
        "deer": Species("deer", "prey", BehaviorType.PREY, growth_rate=0.06, contact_growth_rate=-0.1),
        # slow starvation, big meals
        "wolf": Species("wolf", "predator", BehaviorType.PREDATOR, growth_rate=-0.01, contact_growth_rate=0.3),
        "human": Species("human", "neutral", BehaviorType.NEUTRAL, growth_rate=0.0, contact_growth_rate=0.0),
    }
