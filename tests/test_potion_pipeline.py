import random

import pytest

from potioncalc.core.errors import (
    LevelOverflowError,
    LevelUnderflowError,
    OutOfRangeError,
    UnreachableTotalError,
)
from potioncalc.core.exp_table import EXPERIENCE, ExperienceTable
from potioncalc.core.level_codec import exp_to_level, level_to_exp
from potioncalc.core.potions.catalog import POTION_DATA, POTION_IDS, make_potion_count, potion_count_limit
from potioncalc.core.potions.pipeline import apply_potion, apply_potions, unapply_potion, unapply_potions
from potioncalc.core.potions.types import PotionID

P0 = POTION_DATA[PotionID.POTION0]
P5 = POTION_DATA[PotionID.POTION5]


@pytest.mark.parametrize("level", range(200, 251))
@pytest.mark.parametrize("potion_id", POTION_IDS)
def test_apply_then_unapply_every_level(level, potion_id):
    potion = POTION_DATA[potion_id]
    for exp in (0, EXPERIENCE.level_span(level) - 1):
        total = level_to_exp(level, exp)
        assert unapply_potion(apply_potion(total, potion), potion) == total


def test_below_cap_grants_one_level():
    assert exp_to_level(apply_potion(level_to_exp(200), P0)) == (201, 0)
    assert exp_to_level(apply_potion(level_to_exp(208, 777), P0)) == (209, 777)
    assert exp_to_level(apply_potion(level_to_exp(250, 5), P5)) == (251, 5)


def test_at_cap_grants_cap_span():
    total = level_to_exp(209)
    assert apply_potion(total, P0) == total + EXPERIENCE.level_span(209)
    assert exp_to_level(apply_potion(total, P0)) == (210, 0)

    high = level_to_exp(260, 42)
    assert apply_potion(high, P0) == high + EXPERIENCE.level_span(209)


def test_unapply_above_cap():
    total = level_to_exp(210)
    assert exp_to_level(unapply_potion(total, P0)) == (209, 0)


def test_unapply_unreachable_total():
    # Level 201 holds more experience than level 200 can carry over.
    total = level_to_exp(201, EXPERIENCE.level_span(200))
    with pytest.raises(UnreachableTotalError):
        unapply_potion(total, P0)


def test_unapply_below_level_one():
    with pytest.raises(LevelUnderflowError):
        unapply_potion(level_to_exp(1, 3), P0)


def test_apply_past_table_end():
    with pytest.raises(LevelOverflowError):
        apply_potion(EXPERIENCE.max_total, P0)
    with pytest.raises(LevelOverflowError):
        apply_potion(EXPERIENCE.max_total - 1, P0)


def test_table_must_cover_potion_caps():
    table = ExperienceTable.build(250)
    with pytest.raises(OutOfRangeError):
        apply_potion(level_to_exp(200, table=table), P5, table=table)


def test_growth_is_monotonic():
    rng = random.Random(7)
    for _ in range(300):
        level = rng.randrange(1, 290)
        total = level_to_exp(level, rng.randrange(EXPERIENCE.level_span(level)))
        for pid in POTION_IDS:
            assert apply_potion(total, POTION_DATA[pid]) > total


def test_zero_potions_is_identity():
    total = level_to_exp(200)
    assert apply_potions(total, make_potion_count()) == total
    assert unapply_potions(total, {}) == total


def test_order_matters():
    # POTION5 first would level past 209 before POTION0 ran, changing what POTION0 grants.
    start = level_to_exp(205)
    forward = apply_potions(start, {PotionID.POTION0: 5, PotionID.POTION5: 5})
    manual = start
    for _ in range(5):
        manual = apply_potion(manual, P0)
    for _ in range(5):
        manual = apply_potion(manual, P5)
    assert forward == manual

    swapped = start
    for _ in range(5):
        swapped = apply_potion(swapped, P5)
    for _ in range(5):
        swapped = apply_potion(swapped, P0)
    assert swapped != forward


def test_multi_potion_round_trip():
    rng = random.Random(2024)
    checked = 0
    for _ in range(200):
        level = rng.randrange(1, 260)
        start = level_to_exp(level, rng.randrange(EXPERIENCE.level_span(level)))
        counts = make_potion_count(
            {pid: rng.randint(0, potion_count_limit(POTION_DATA[pid])) for pid in POTION_IDS}
        )
        try:
            end = apply_potions(start, counts)
        except LevelOverflowError:
            continue
        assert unapply_potions(end, counts) == start
        checked += 1
    assert checked > 150


def test_unapply_then_apply_round_trip():
    rng = random.Random(99)
    checked = 0
    for _ in range(300):
        level = rng.randrange(190, 280)
        end = level_to_exp(level, rng.randrange(EXPERIENCE.level_span(level)))
        counts = make_potion_count({pid: rng.randint(0, 3) for pid in POTION_IDS})
        try:
            start = unapply_potions(end, counts)
        except (UnreachableTotalError, LevelUnderflowError):
            continue
        assert apply_potions(start, counts) == end
        checked += 1
    assert checked > 0


def test_scenario_from_level_200():
    start = level_to_exp(200)
    counts = make_potion_count({"POTION0": 3, "POTION3": 2, "POTION5": 1})
    end = apply_potions(start, counts)
    assert exp_to_level(end) == (206, 0)
    assert exp_to_level(unapply_potions(end, counts)) == (200, 0)


@pytest.mark.parametrize("potion_id", POTION_IDS)
def test_round_trip_at_each_cap(potion_id):
    potion = POTION_DATA[potion_id]
    below_cap = potion.max - 1
    for total in (
        level_to_exp(potion.max),
        level_to_exp(below_cap, EXPERIENCE.level_span(below_cap) - 1),
        level_to_exp(potion.max + 1),
    ):
        assert unapply_potion(apply_potion(total, potion), potion) == total
    # one below the cap still levels up, the cap itself grants flat experience
    assert exp_to_level(apply_potion(level_to_exp(below_cap), potion)) == (potion.max, 0)
    assert exp_to_level(apply_potion(level_to_exp(potion.max), potion)) == (potion.max + 1, 0)
