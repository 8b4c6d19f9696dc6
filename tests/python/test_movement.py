from __future__ import annotations

import math

import pytest
from pygame.math import Vector2
from pytest import approx

from lakeland.sim.core.environment import MAX_MOVEMENT_SPEED_COEFFICIENT, Weather
from lakeland.sim.core.family import Family
from lakeland.sim.core.rng import DeterministicRng
from lakeland.sim.core.species import default_species
from lakeland.sim.systems import movement
from lakeland.sim.systems.separation import separation_force

SPECIES = default_species()


def _family(family_id: int, name: str, x: float, y: float) -> Family:
    return Family(id=family_id, species=SPECIES[name], size=10, position=Vector2(x, y))


def test_separation_single_neighbor_inverse_square():
    families = [_family(0, "rabbit", 0, 0), _family(1, "rabbit", 3, 4)]
    force = separation_force(families, 0, threshold=20.0)
    assert force.x == approx(-0.12)
    assert force.y == approx(-0.16)


def test_separation_predators_push_harder():
    families = [_family(0, "wolf", 0, 0), _family(1, "rabbit", 3, 4)]
    force = separation_force(families, 0, threshold=20.0)
    assert force.x == approx(-0.18)
    assert force.y == approx(-0.24)


def test_separation_is_averaged_over_contributing_neighbors():
    families = [
        _family(0, "rabbit", 0, 0),
        _family(1, "rabbit", 5, 0),
        _family(2, "rabbit", 0, 10),
        _family(3, "rabbit", 300, 300),
    ]
    force = separation_force(families, 0, threshold=20.0)
    assert force.x == approx(-0.1)
    assert force.y == approx(-0.05)


def test_separation_ignores_far_and_coincident_families():
    families = [_family(0, "rabbit", 10, 10), _family(1, "rabbit", 30, 10), _family(2, "deer", 10, 10)]
    force = separation_force(families, 0, threshold=20.0)
    assert force == Vector2(0, 0)


def test_wander_picks_fresh_direction_when_stuck():
    rng = DeterministicRng(4)
    direction = movement.wander_direction(Vector2(1, 0), Vector2(0.01, 0), rng, turn_strength=0.3, stuck_speed=0.1)
    assert direction.length() == approx(1.0)


def test_wander_turns_smoothly_when_moving():
    rng = DeterministicRng(5)
    for _ in range(50):
        direction = movement.wander_direction(Vector2(1, 0), Vector2(5, 0), rng, turn_strength=0.3, stuck_speed=0.1)
        assert direction.length() == approx(1.0)
        assert abs(math.atan2(direction.y, direction.x)) <= 0.3 + 1e-9


def test_integrate_velocity_trapezoid_and_weather():
    velocity = movement.integrate_velocity(
        Vector2(1, 0), Vector2(2, 0), Vector2(4, 0), max_speed=40.0, time_step=1.0, weather=Weather.RAINY
    )
    assert velocity.x == approx(4.0)
    assert velocity.y == approx(0.0)

    sunny = movement.integrate_velocity(
        Vector2(1, 0), Vector2(2, 0), Vector2(4, 0), max_speed=40.0, time_step=1.0, weather=Weather.SUNNY
    )
    assert sunny.x == approx(4.0 * 1.07)


def test_integrate_velocity_clamps_before_weather():
    velocity = movement.integrate_velocity(
        Vector2(100, 0), Vector2(), Vector2(), max_speed=40.0, time_step=1.0, weather=Weather.FROZEN
    )
    assert velocity.length() == approx(40.0 * 0.85)


def test_integrate_position_and_wrap():
    position = movement.integrate_position(Vector2(10, 10), Vector2(2, 3), Vector2(2, 0), time_step=1.0, world_size=500.0)
    assert position.x == approx(13.0)
    assert position.y == approx(13.0)

    wrapped = movement.integrate_position(Vector2(499, 0), Vector2(2, -1), Vector2(), time_step=1.0, world_size=500.0)
    assert wrapped.x == approx(1.0)
    assert wrapped.y == approx(499.0)


def test_neutral_families_get_doubled_propulsion(empty_ecosystem):
    human = empty_ecosystem.add_family("human", 10, Vector2(100, 100))
    empty_ecosystem.add_family("rabbit", 10, Vector2(102, 100))
    acceleration = movement.compute_acceleration(empty_ecosystem, empty_ecosystem.families, 0, Vector2(0, 1))
    assert human.species.is_neutral
    assert acceleration.x == approx(0.0)
    assert acceleration.y == approx(6.0)


def test_movement_reads_previous_state_only(empty_ecosystem):
    empty_ecosystem.add_family("rabbit", 10, Vector2(100, 100), velocity=Vector2(1, 0))
    empty_ecosystem.add_family("rabbit", 10, Vector2(105, 100), velocity=Vector2(-1, 0))

    updated = movement.update_movement(empty_ecosystem, 1.0)

    assert [family.id for family in updated] == [0, 1]
    assert updated[0].position.x == approx(101.0)
    assert updated[1].position.x == approx(104.0)
    # separation measured on the old 5-unit gap, weighted by 2
    assert (updated[0].acceleration - Vector2(-0.4, 0)).length() == approx(3.0)
    assert (updated[1].acceleration - Vector2(0.4, 0)).length() == approx(3.0)
    assert all(family.size == 10 for family in updated)
    assert all(family.propulsion_direction.length() == approx(1.0) for family in updated)


def test_lake_collision_bounces(empty_ecosystem):
    # corner lake: center (450, 450), radius 10
    empty_ecosystem.add_family("rabbit", 10, Vector2(430, 450), velocity=Vector2(15, 0))

    updated = movement.update_movement(empty_ecosystem, 1.0)

    assert updated[0].position.x == approx(415.0)
    assert updated[0].position.y == approx(450.0)
    assert updated[0].velocity.x < 0


@pytest.mark.parametrize("weather", list(Weather))
def test_speed_never_exceeds_weather_adjusted_cap(empty_ecosystem, weather):
    empty_ecosystem.weather = weather
    rng = DeterministicRng(12)
    for i in range(20):
        empty_ecosystem.add_family(
            "wolf" if i % 3 == 0 else "rabbit",
            10,
            Vector2(rng.next_range(0, 400), rng.next_range(0, 400)),
            velocity=rng.next_unit_circle() * rng.next_range(0, 500),
            acceleration=rng.next_unit_circle() * rng.next_range(0, 50),
            propulsion_direction=rng.next_unit_circle(),
        )

    updated = movement.update_movement(empty_ecosystem, 1.0)

    cap = empty_ecosystem.config.movement.max_speed * (1.0 + MAX_MOVEMENT_SPEED_COEFFICIENT)
    for family in updated:
        assert family.velocity.length() <= cap + 1e-9
        assert 0 <= family.position.x < 500.0
        assert 0 <= family.position.y < 500.0
