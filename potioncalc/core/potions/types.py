from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class PotionID(str, Enum):
    """Closed set of potion kinds, in canonical application order.

    Values double as the keys used in saved state.
    """

    POTION0 = "POTION0"
    POTION1 = "POTION1"
    POTION2 = "POTION2"
    POTION3 = "POTION3"
    POTION4 = "POTION4"
    POTION5 = "POTION5"


@dataclass(frozen=True)
class PotionDescriptor:
    id: PotionID
    label: str

    # Level cap: below it a potion grants one full level, at or above it
    # the potion grants this level's span as flat experience.
    max: int

    # Lowest level the potion is sold for; only used to size UI limits.
    base_level: int = 200


# Every PotionID is always present; quantities are non-negative.
PotionCount = Dict[PotionID, int]
