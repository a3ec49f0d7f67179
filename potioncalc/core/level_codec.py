from __future__ import annotations

from numbers import Integral

from potioncalc.core.errors import InvalidExperienceError
from potioncalc.core.exp_table import EXPERIENCE, ExperienceTable


def whole_number(value, *, what: str = "experience") -> int:
    """Coerce `value` to int without silently dropping a fractional part."""
    if isinstance(value, bool):
        raise InvalidExperienceError(f"{what} must be a whole number, got {value!r}")
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise InvalidExperienceError(f"{what} must be a whole number, got {value!r}")


def level_to_exp(level: int, experience: int = 0, *, table: ExperienceTable = EXPERIENCE) -> int:
    """Total experience for `level` plus `experience` earned inside that level.

    Experience outside ``[0, level_span(level))`` is rejected, never clamped.
    The maximum level is terminal and only accepts 0.
    """
    lvl = whole_number(level, what="level")
    exp = whole_number(experience)
    base = table.requirement(lvl)
    if exp < 0:
        raise InvalidExperienceError(f"Experience {exp} is negative")
    if lvl == table.max_level:
        if exp != 0:
            raise InvalidExperienceError(f"Level {lvl} is the maximum level; experience must be 0")
        return base
    span = table.level_span(lvl)
    if exp >= span:
        raise InvalidExperienceError(f"Experience {exp} does not fit in level {lvl} (span {span})")
    return base + exp


def exp_to_level(total: int, *, table: ExperienceTable = EXPERIENCE) -> tuple[int, int]:
    """Split a total into (level, experience within that level)."""
    tx = whole_number(total, what="total experience")
    lvl = table.level_for(tx)
    return lvl, tx - table.requirement(lvl)
