from __future__ import annotations

import logging
import math
from typing import List, TYPE_CHECKING

from pygame.math import Vector2

from ..core.config import ConfigurationError
from ..core.family import Family
from ..core.rng import DeterministicRng
from ..utils.math2d import distance, wrap_position

if TYPE_CHECKING:
    from ..core.ecosystem import Ecosystem

logger = logging.getLogger(__name__)


def random_partition(total: int, parts: int, minimum: int, rng: DeterministicRng) -> List[int]:
    """Split ``total`` into ``parts`` random sizes of at least ``minimum`` each.

    Too small a total for the requested parts yields a single family, and a
    zero total yields none.
    """
    if parts <= 0:
        raise ConfigurationError(f"Cannot partition a population into {parts} families")
    if total < 0:
        raise ConfigurationError(f"Cannot partition a negative population ({total})")
    if total == 0:
        return []
    if total < parts * minimum:
        return [total]

    remain = total - parts * minimum
    cuts = sorted(rng.next_int_inclusive(0, remain) for _ in range(parts - 1))
    bounds = [0, *cuts, remain]
    return [bounds[i + 1] - bounds[i] + minimum for i in range(parts)]


def split_large_families(world: Ecosystem) -> int:
    population = world._config.population
    rng = world._rng
    world_size = world._config.world_size
    offspring: List[Family] = []

    for family in world._families:
        if family.size <= population.max_family_size:
            continue
        kept = family.size // 2
        split_size = family.size - kept
        family.size = kept

        angle = rng.next_angle()
        push = Vector2(math.cos(angle), math.sin(angle)) * population.split_speed_boost
        pre_kick_velocity = family.velocity
        family.velocity = pre_kick_velocity + push

        jitter = population.split_jitter
        offset = Vector2(rng.next_range(-jitter, jitter), rng.next_range(-jitter, jitter))
        child = Family(
            id=world._allocate_family_id(),
            species=family.species,
            size=split_size,
            position=wrap_position(family.position + offset, world_size),
            velocity=pre_kick_velocity - push,
            acceleration=Vector2(family.acceleration),
            propulsion_direction=Vector2(family.propulsion_direction),
        )
        offspring.append(child)
        logger.debug("family %d (%s) split off family %d", family.id, family.species.name, child.id)

    world._families.extend(offspring)
    return len(offspring)


def merge_small_families(world: Ecosystem) -> int:
    """Fold undersized families into the first same-species neighbour in range.

    Absorbed families are swapped with the last entry and dropped, so the scan
    re-checks the same index instead of skipping the moved family.
    """
    population = world._config.population
    families = world._families
    merges = 0
    i = 0
    while i < len(families):
        small = families[i]
        if small.size < population.min_family_size:
            target = None
            for j, other in enumerate(families):
                if j == i or other.species.name != small.species.name:
                    continue
                if distance(small.position, other.position) <= population.merging_threshold:
                    target = other
                    break
            if target is not None:
                target.size += small.size
                families[i] = families[-1]
                families.pop()
                merges += 1
                logger.debug("family %d merged into family %d", small.id, target.id)
                continue
        i += 1
    return merges
