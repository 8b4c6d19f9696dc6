from __future__ import annotations

from typing import List, Sequence, TYPE_CHECKING

from pygame.math import Vector2

from ..core.environment import WeatherLike, coefficient_of_moving_speed_increase, is_in_lake
from ..core.family import Family
from ..core.rng import DeterministicRng
from ..utils.math2d import _clamp_length, _safe_normalize, rotate, wrap_position
from .separation import separation_force

if TYPE_CHECKING:
    from ..core.ecosystem import Ecosystem


def wander_direction(
    direction: Vector2,
    velocity: Vector2,
    rng: DeterministicRng,
    turn_strength: float,
    stuck_speed: float,
) -> Vector2:
    # Nearly stopped (or never assigned a heading): pick a fresh direction.
    if velocity.length() < stuck_speed or direction.length_squared() < 1e-12:
        return rng.next_unit_circle()
    angle = rng.next_range(-turn_strength, turn_strength)
    return _safe_normalize(rotate(direction, angle))


def compute_acceleration(world: Ecosystem, families: Sequence[Family], index: int, direction: Vector2) -> Vector2:
    movement = world._config.movement
    propulsion = direction * movement.propulsion_strength
    family = families[index]
    if family.species.is_neutral:
        # neutral families ignore their neighbours but still have to keep moving
        return propulsion * movement.neutral_propulsion_multiplier
    separation = separation_force(families, index, movement.separation_threshold)
    return propulsion + separation * movement.separation_weight


def integrate_velocity(
    velocity: Vector2,
    old_acceleration: Vector2,
    new_acceleration: Vector2,
    max_speed: float,
    time_step: float,
    weather: WeatherLike,
) -> Vector2:
    vx = velocity.x + 0.5 * (old_acceleration.x + new_acceleration.x) * time_step
    vy = velocity.y + 0.5 * (old_acceleration.y + new_acceleration.y) * time_step
    clamped = _clamp_length(Vector2(vx, vy), max_speed)
    return clamped * (1.0 + coefficient_of_moving_speed_increase(weather))


def integrate_position(
    position: Vector2,
    velocity: Vector2,
    acceleration: Vector2,
    time_step: float,
    world_size: float,
) -> Vector2:
    px = position.x + velocity.x * time_step + 0.5 * acceleration.x * time_step * time_step
    py = position.y + velocity.y * time_step + 0.5 * acceleration.y * time_step * time_step
    return wrap_position(Vector2(px, py), world_size)


def update_movement(world: Ecosystem, time_step: float) -> List[Family]:
    """Advance every family's kinematics from the same pre-step snapshot.

    Results are collected in a new list; no family sees another family's
    updated position during the pass.
    """
    config = world._config
    movement = config.movement
    rng = world._rng
    lake = world._lake
    weather = world.weather
    families = world._families
    updated: List[Family] = []

    for index, family in enumerate(families):
        old_velocity = family.velocity
        old_acceleration = family.acceleration

        direction = wander_direction(
            family.propulsion_direction, old_velocity, rng, movement.turn_strength, movement.stuck_speed
        )
        new_acceleration = compute_acceleration(world, families, index, direction)
        new_velocity = integrate_velocity(
            old_velocity, old_acceleration, new_acceleration, movement.max_speed, time_step, weather
        )
        new_position = integrate_position(
            family.position, old_velocity, old_acceleration, time_step, config.world_size
        )

        if is_in_lake(new_position, lake):
            # bounce off the shore
            new_velocity = -new_velocity
            new_position = integrate_position(
                family.position, -old_velocity, old_acceleration, time_step, config.world_size
            )

        # Next step's heading is decided from this step's pre-update state.
        next_direction = wander_direction(
            family.propulsion_direction, old_velocity, rng, movement.turn_strength, movement.stuck_speed
        )

        updated.append(
            Family(
                id=family.id,
                species=family.species,
                size=family.size,
                position=new_position,
                velocity=new_velocity,
                acceleration=new_acceleration,
                propulsion_direction=next_direction,
            )
        )
    return updated
