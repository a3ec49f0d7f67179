from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from numbers import Rational

from potioncalc.core.errors import InvalidExperienceError
from potioncalc.core.exp_table import EXPERIENCE, ExperienceTable
from potioncalc.core.level_codec import level_to_exp, whole_number

DISPLAY_DIGITS = 3


def percentage_fraction(level: int, experience: int, *, table: ExperienceTable = EXPERIENCE) -> Fraction:
    """Exact share of `level` completed, in percent."""
    lvl = whole_number(level, what="level")
    exp = whole_number(experience)
    # Same bounds as level_to_exp: negative or overflowing experience is rejected.
    level_to_exp(lvl, exp, table=table)
    if lvl == table.max_level:
        return Fraction(0)
    return Fraction(exp * 100, table.level_span(lvl))


def to_percentage(
    level: int,
    experience: int,
    *,
    digits: int = DISPLAY_DIGITS,
    table: ExperienceTable = EXPERIENCE,
) -> float:
    """Percentage of `level` completed, truncated to `digits` fractional digits.

    Truncation keeps the last experience point of a level below 100.
    """
    scale = 10 ** max(0, int(digits))
    exact = percentage_fraction(level, experience, table=table)
    return math.floor(exact * scale) / scale


def _as_fraction(percentage) -> Fraction:
    if isinstance(percentage, Rational):
        return Fraction(percentage)
    try:
        dec = Decimal(str(percentage).strip())
    except InvalidOperation:
        raise InvalidExperienceError(f"Percentage {percentage!r} is not a number")
    if not dec.is_finite():
        raise InvalidExperienceError(f"Percentage {percentage!r} is not finite")
    return Fraction(dec)


def from_percentage(level: int, percentage, *, table: ExperienceTable = EXPERIENCE) -> int:
    """Experience inside `level` matching `percentage`, floored and clamped into the level.

    Lossy: to_percentage(level, from_percentage(level, p)) may be slightly below p.
    """
    lvl = whole_number(level, what="level")
    pct = _as_fraction(percentage)
    if lvl == table.max_level:
        return 0
    span = table.level_span(lvl)
    exp = math.floor(pct * span / 100)
    return min(max(exp, 0), span - 1)


def format_percentage(value: float, digits: int = DISPLAY_DIGITS) -> str:
    return f"{float(value):.{max(0, int(digits))}f}"
