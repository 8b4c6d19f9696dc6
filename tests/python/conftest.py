import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

ROOT = Path(__file__).resolve().parents[2]
src_root = ROOT / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))


@pytest.fixture
def make_config():
    """Factory for configs with no initial families or plants and a small corner lake."""
    from lakeland.sim.core.config import LakeConfig, PlantConfig, PopulationConfig, SimulationConfig, WeatherConfig

    def _make(**overrides) -> SimulationConfig:
        overrides.setdefault("population", PopulationConfig(initial_populations={}, carrying_capacities={}))
        overrides.setdefault("plants", PlantConfig(count=0))
        overrides.setdefault("lake", LakeConfig(radius=10.0, center=(450.0, 450.0)))
        overrides.setdefault("weather", WeatherConfig(enabled=False, initial="Rainy"))
        return SimulationConfig(**overrides)

    return _make


@pytest.fixture
def empty_ecosystem(make_config):
    from lakeland.sim.core.ecosystem import Ecosystem

    return Ecosystem(make_config())


@pytest.fixture
def repo_root() -> Path:
    return ROOT
