from __future__ import annotations

import bisect
from dataclasses import dataclass
from functools import lru_cache

from potioncalc.core.errors import LevelOverflowError, LevelUnderflowError, OutOfRangeError

DEFAULT_MAX_LEVEL = 300

# Experience needed to leave levels 1-9.
_BASE_SPANS = (15, 34, 57, 92, 135, 372, 560, 840, 1242)

# (first level of band, growth in percent per level). A band runs until the next one starts.
_GROWTH_BANDS = (
    (10, 100),
    (15, 120),
    (30, 100),
    (35, 120),
    (40, 108),
    (60, 100),
    (65, 107),
    (100, 100),
    (105, 107),
    (160, 104),
    (201, 112),
    (210, 111),
    (220, 109),
    (230, 107),
    (250, 103),
    (260, 101),
    (275, 102),
)

_SPAN_OVERRIDES = {200: 2_207_026_470}

# Levels whose span doubles on top of the band growth.
_STEP_UPS = frozenset({210, 220, 230, 240, 250, 260, 270, 275})


def _growth_for(level: int) -> int:
    rate = 100
    for first, pct in _GROWTH_BANDS:
        if level < first:
            break
        rate = pct
    return rate


def level_spans(max_level: int) -> list[int]:
    """Experience needed to go from each level to the next, for levels 1..max_level-1.

    All arithmetic is integer; spans never decrease from one level to the next.
    """
    spans: list[int] = []
    for level in range(1, int(max_level)):
        if level <= len(_BASE_SPANS):
            span = _BASE_SPANS[level - 1]
        elif level in _SPAN_OVERRIDES:
            span = max(_SPAN_OVERRIDES[level], spans[-1])
        else:
            span = spans[-1] * _growth_for(level) // 100
            if level in _STEP_UPS:
                span *= 2
        spans.append(span)
    return spans


@dataclass(frozen=True)
class ExperienceTable:
    """Cumulative experience required to reach each level.

    ``requirements[0]`` is level 1 (always 0). The last entry is ``max_level``,
    a terminal level with no span of its own.
    """

    requirements: tuple[int, ...]

    @classmethod
    def build(cls, max_level: int = DEFAULT_MAX_LEVEL) -> "ExperienceTable":
        if int(max_level) < 2:
            raise OutOfRangeError(f"max_level must be at least 2, got {max_level}")
        totals = [0]
        for span in level_spans(max_level):
            totals.append(totals[-1] + span)
        return cls(requirements=tuple(totals))

    @property
    def max_level(self) -> int:
        return len(self.requirements)

    @property
    def max_total(self) -> int:
        return self.requirements[-1]

    def requirement(self, level: int) -> int:
        lvl = int(level)
        if lvl < 1 or lvl > self.max_level:
            raise OutOfRangeError(f"Level {lvl} is out of range 1..{self.max_level}")
        return self.requirements[lvl - 1]

    def level_span(self, level: int) -> int:
        lvl = int(level)
        if lvl < 1 or lvl >= self.max_level:
            raise OutOfRangeError(f"Level {lvl} has no span (range 1..{self.max_level - 1})")
        return self.requirements[lvl] - self.requirements[lvl - 1]

    def level_for(self, total: int) -> int:
        """Highest level whose requirement does not exceed `total`."""
        if total < 0:
            raise LevelUnderflowError(f"Total experience {total} is below level 1")
        if total > self.max_total:
            raise LevelOverflowError(f"Total experience {total} exceeds level {self.max_level}")
        return bisect.bisect_right(self.requirements, total)


@lru_cache(maxsize=8)
def get_table(max_level: int = DEFAULT_MAX_LEVEL) -> ExperienceTable:
    return ExperienceTable.build(max_level)


EXPERIENCE = get_table(DEFAULT_MAX_LEVEL)
