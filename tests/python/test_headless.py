import logging

from lakeland.app.headless import run_headless
from lakeland.sim.core.config import SimulationConfig


def test_headless_returns_one_entry_per_step():
    series = run_headless(steps=3, seed=5)
    assert len(series) == 3
    assert [metrics.step for metrics in series.snapshots] == [1, 2, 3]


def test_headless_logs_population_and_weather_lines(caplog):
    caplog.set_level(logging.INFO, logger="lakeland")
    run_headless(steps=2, seed=1)

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("step=0 total=202 families=") for message in messages)
    assert any(message.startswith("step=1 weather=") for message in messages)
    assert any(message.startswith("final step=2") for message in messages)


def test_headless_is_deterministic_for_a_seed():
    first = run_headless(steps=10, config=SimulationConfig(), seed=8)
    second = run_headless(steps=10, config=SimulationConfig(), seed=8)
    assert first.total_population_trajectory() == second.total_population_trajectory()
    assert first.species_trajectory("wolf") == second.species_trajectory("wolf")


def test_headless_zero_steps():
    series = run_headless(steps=0)
    assert series.is_empty()


def test_headless_seed_override_leaves_config_untouched():
    config = SimulationConfig(seed=1)
    run_headless(steps=1, config=config, seed=8)
    assert config.seed == 1

    reused = run_headless(steps=5, config=config)
    fresh = run_headless(steps=5, config=SimulationConfig(seed=1))
    assert reused.total_population_trajectory() == fresh.total_population_trajectory()


def test_headless_summary_reports_species_ranges_and_ratio(caplog):
    caplog.set_level(logging.INFO, logger="lakeland")
    series = run_headless(steps=4, seed=3)

    messages = [record.getMessage() for record in caplog.records]
    wolves = series.species_trajectory("wolf")
    assert f"species=wolf min={min(wolves)} max={max(wolves)} final={wolves[-1]}" in messages
    assert sum(message.startswith("species=") for message in messages) == 5
    assert any(message.startswith("predator_prey_ratio=") for message in messages)
