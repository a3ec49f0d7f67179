"""Apply and remove growth potions on a total experience value.

Growth rule for a potion with level cap ``max``, starting from total ``t`` at
(level L, experience e):

  L <  max: advance exactly one level and keep e  ->  requirement(L+1) + e
  L >= max: grant the cap level's span             ->  t + span(max)

The first branch only lands on levels <= max, the second only on levels > max,
so every result has exactly one source and removal is exact integer
arithmetic. This relies on spans never shrinking from one level to the next,
which the experience table guarantees.

Kinds are applied in POTION_IDS order and removed in the reverse order.
"""

from __future__ import annotations

from typing import Any, Mapping

from potioncalc.core.errors import (
    LevelOverflowError,
    LevelUnderflowError,
    OutOfRangeError,
    UnreachableTotalError,
)
from potioncalc.core.exp_table import EXPERIENCE, ExperienceTable
from potioncalc.core.level_codec import exp_to_level, level_to_exp
from potioncalc.core.potions.catalog import POTION_DATA, POTION_IDS, make_potion_count
from potioncalc.core.potions.types import PotionDescriptor


def _check_covered(potion: PotionDescriptor, table: ExperienceTable) -> None:
    if potion.max >= table.max_level:
        raise OutOfRangeError(f"{potion.id.value} caps at level {potion.max}; table ends at {table.max_level}")


def apply_potion(total: int, potion: PotionDescriptor, *, table: ExperienceTable = EXPERIENCE) -> int:
    _check_covered(potion, table)
    level, exp = exp_to_level(total, table=table)
    if level < potion.max:
        return level_to_exp(level + 1, exp, table=table)

    new_total = table.requirement(level) + exp + table.level_span(potion.max)
    if new_total > table.max_total:
        raise LevelOverflowError(f"{potion.id.value} would push total experience past level {table.max_level}")
    return new_total


def unapply_potion(total: int, potion: PotionDescriptor, *, table: ExperienceTable = EXPERIENCE) -> int:
    _check_covered(potion, table)
    level, exp = exp_to_level(total, table=table)
    if level > potion.max:
        return table.requirement(level) + exp - table.level_span(potion.max)

    if level <= 1:
        raise LevelUnderflowError(f"No level below {level} to remove {potion.id.value} from")
    prev = level - 1
    if exp >= table.level_span(prev):
        raise UnreachableTotalError(
            f"Level {level} with {exp} experience cannot result from {potion.id.value} "
            f"(level {prev} holds at most {table.level_span(prev) - 1})"
        )
    return level_to_exp(prev, exp, table=table)


def apply_potions(total: int, potions: Mapping[Any, int], *, table: ExperienceTable = EXPERIENCE) -> int:
    counts = make_potion_count(potions)
    for pid in POTION_IDS:
        potion = POTION_DATA[pid]
        for _ in range(counts[pid]):
            total = apply_potion(total, potion, table=table)
    return total


def unapply_potions(total: int, potions: Mapping[Any, int], *, table: ExperienceTable = EXPERIENCE) -> int:
    counts = make_potion_count(potions)
    for pid in reversed(POTION_IDS):
        potion = POTION_DATA[pid]
        for _ in range(counts[pid]):
            total = unapply_potion(total, potion, table=table)
    return total
