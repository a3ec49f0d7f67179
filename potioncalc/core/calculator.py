"""Before/after calculator state and the edit reducer.

The calculator mirrors two (level, experience, percentage) triples: the
character before drinking potions and after. Editing the before side
recomputes the after side by applying potions; editing the after side
recomputes the before side by removing them. Changing a potion count
recomputes in whichever direction was edited last.

Everything here is pure: `reduce` returns a new state or raises an engine
error and leaves the previous state alone. Saving is the caller's job
(see CalculatorService).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Literal, Mapping, Optional

from potioncalc.core.exp_table import EXPERIENCE, ExperienceTable
from potioncalc.core.level_codec import exp_to_level, level_to_exp, whole_number
from potioncalc.core.percentage import DISPLAY_DIGITS, from_percentage, to_percentage
from potioncalc.core.potions.catalog import make_potion_count, resolve_potion_id
from potioncalc.core.potions.pipeline import apply_potions, unapply_potions
from potioncalc.core.potions.types import PotionID

Field = Literal[
    "level_before",
    "experience_before",
    "percentage_before",
    "level_after",
    "experience_after",
    "percentage_after",
]

FIELDS: tuple[str, ...] = (
    "level_before",
    "experience_before",
    "percentage_before",
    "level_after",
    "experience_after",
    "percentage_after",
)

BEFORE_FIELDS = frozenset(FIELDS[:3])
AFTER_FIELDS = frozenset(FIELDS[3:])


class Direction(str, Enum):
    FORWARD = "forward"  # before side edited last
    REVERSE = "reverse"  # after side edited last


@dataclass(frozen=True)
class CalculatorState:
    level_before: int
    experience_before: int
    percentage_before: float
    level_after: int
    experience_after: int
    percentage_after: float
    potions: Mapping[PotionID, int] = field(default_factory=make_potion_count)
    change: Field = "level_before"

    def __post_init__(self) -> None:
        # read-only copy
        object.__setattr__(self, "potions", MappingProxyType(dict(self.potions)))

    @property
    def direction(self) -> Direction:
        return Direction.REVERSE if self.change in AFTER_FIELDS else Direction.FORWARD

    def to_dict(self) -> dict[str, Any]:
        return {
            "level_before": self.level_before,
            "experience_before": self.experience_before,
            "percentage_before": self.percentage_before,
            "level_after": self.level_after,
            "experience_after": self.experience_after,
            "percentage_after": self.percentage_after,
            "potions": {pid.value: qty for pid, qty in self.potions.items()},
            "change": self.change,
        }


@dataclass(frozen=True)
class Action:
    type: str  # one of FIELDS | "potion"
    value: Any
    potion_id: Optional[PotionID] = None


def default_state(level: int = 200, *, table: ExperienceTable = EXPERIENCE) -> CalculatorState:
    lvl = whole_number(level, what="level")
    table.requirement(lvl)
    return CalculatorState(
        level_before=lvl,
        experience_before=0,
        percentage_before=0.0,
        level_after=lvl,
        experience_after=0,
        percentage_after=0.0,
        potions=make_potion_count(),
        change="level_before",
    )


def apply(
    level_before: int,
    experience_before: int,
    potions: Mapping[PotionID, int],
    *,
    table: ExperienceTable = EXPERIENCE,
    digits: int = DISPLAY_DIGITS,
) -> dict[str, Any]:
    """Both triples from the before side."""
    total_before = level_to_exp(level_before, experience_before, table=table)
    total_after = apply_potions(total_before, potions, table=table)
    level_after, experience_after = exp_to_level(total_after, table=table)
    return {
        "level_before": int(level_before),
        "experience_before": int(experience_before),
        "percentage_before": to_percentage(level_before, experience_before, digits=digits, table=table),
        "level_after": level_after,
        "experience_after": experience_after,
        "percentage_after": to_percentage(level_after, experience_after, digits=digits, table=table),
    }


def unapply(
    level_after: int,
    experience_after: int,
    potions: Mapping[PotionID, int],
    *,
    table: ExperienceTable = EXPERIENCE,
    digits: int = DISPLAY_DIGITS,
) -> dict[str, Any]:
    """Both triples from the after side."""
    total_after = level_to_exp(level_after, experience_after, table=table)
    total_before = unapply_potions(total_after, potions, table=table)
    level_before, experience_before = exp_to_level(total_before, table=table)
    return {
        "level_before": level_before,
        "experience_before": experience_before,
        "percentage_before": to_percentage(level_before, experience_before, digits=digits, table=table),
        "level_after": int(level_after),
        "experience_after": int(experience_after),
        "percentage_after": to_percentage(level_after, experience_after, digits=digits, table=table),
    }


def reduce(
    state: CalculatorState,
    action: Action,
    *,
    table: ExperienceTable = EXPERIENCE,
    digits: int = DISPLAY_DIGITS,
) -> CalculatorState:
    kw = {"table": table, "digits": digits}
    t = action.type

    if t == "level_before":
        lvl = whole_number(action.value, what="level")
        return replace(state, **apply(lvl, state.experience_before, state.potions, **kw), change=t)

    if t == "experience_before":
        exp = whole_number(action.value)
        return replace(state, **apply(state.level_before, exp, state.potions, **kw), change=t)

    if t == "percentage_before":
        exp = from_percentage(state.level_before, action.value, table=table)
        triples = apply(state.level_before, exp, state.potions, **kw)
        # Keep what the user typed; the derived experience is floored.
        triples["percentage_before"] = float(action.value)
        return replace(state, **triples, change=t)

    if t == "level_after":
        lvl = whole_number(action.value, what="level")
        return replace(state, **unapply(lvl, state.experience_after, state.potions, **kw), change=t)

    if t == "experience_after":
        exp = whole_number(action.value)
        return replace(state, **unapply(state.level_after, exp, state.potions, **kw), change=t)

    if t == "percentage_after":
        exp = from_percentage(state.level_after, action.value, table=table)
        triples = unapply(state.level_after, exp, state.potions, **kw)
        triples["percentage_after"] = float(action.value)
        return replace(state, **triples, change=t)

    if t == "potion":
        pid = resolve_potion_id(action.potion_id)
        potions = make_potion_count({**state.potions, pid: action.value})
        if state.direction is Direction.FORWARD:
            triples = apply(state.level_before, state.experience_before, potions, **kw)
        else:
            triples = unapply(state.level_after, state.experience_after, potions, **kw)
        return replace(state, **triples, potions=potions)

    return state
