"""Core package.

Keep this file lightweight: importing `potioncalc.core` should not touch the database.

The experience curve lives in `exp_table`, `level_codec` and `percentage`;
potions are under `potioncalc.core.potions`.
"""

from .exp_table import EXPERIENCE, ExperienceTable, get_table
from .level_codec import exp_to_level, level_to_exp
from .percentage import from_percentage, to_percentage

__all__ = [
    "EXPERIENCE",
    "ExperienceTable",
    "exp_to_level",
    "from_percentage",
    "get_table",
    "level_to_exp",
    "to_percentage",
]
