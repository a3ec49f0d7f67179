from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from potioncalc.core.errors import InvalidPotionCountError, UnknownPotionError
from potioncalc.core.potions.types import PotionCount, PotionDescriptor, PotionID

POTION_IDS: tuple[PotionID, ...] = tuple(PotionID)

POTION_DATA: Mapping[PotionID, PotionDescriptor] = MappingProxyType({
    PotionID.POTION0: PotionDescriptor(PotionID.POTION0, "成長の秘薬1", max=209),
    PotionID.POTION1: PotionDescriptor(PotionID.POTION1, "成長の秘薬2", max=219),
    PotionID.POTION2: PotionDescriptor(PotionID.POTION2, "成長の秘薬3", max=229),
    PotionID.POTION3: PotionDescriptor(PotionID.POTION3, "台風成長の秘薬", max=239),
    PotionID.POTION4: PotionDescriptor(PotionID.POTION4, "極限成長の秘薬", max=249),
    PotionID.POTION5: PotionDescriptor(PotionID.POTION5, "成長の秘薬4", max=269),
})


def resolve_potion_id(key: Any) -> PotionID:
    if isinstance(key, PotionID):
        return key
    try:
        return PotionID(str(key).strip().upper())
    except ValueError:
        raise UnknownPotionError(f"Unknown potion: {key!r}") from None


def get_descriptor(key: Any) -> PotionDescriptor:
    return POTION_DATA[resolve_potion_id(key)]


def highest_potion_level() -> int:
    return max(d.max for d in POTION_DATA.values())


def potion_count_limit(descriptor: PotionDescriptor) -> int:
    """Sensible upper bound for a quantity: enough to climb from base_level to the cap."""
    return max(1, int(descriptor.max) - int(descriptor.base_level))


def make_potion_count(mapping: Mapping[Any, Any] | None = None) -> PotionCount:
    """Fully populated PotionCount; missing kinds default to 0."""
    counts: PotionCount = {pid: 0 for pid in POTION_IDS}
    for key, qty in (mapping or {}).items():
        pid = resolve_potion_id(key)
        if isinstance(qty, bool) or not isinstance(qty, int):
            if isinstance(qty, float) and qty.is_integer():
                qty = int(qty)
            else:
                raise InvalidPotionCountError(f"{pid.value} quantity must be a whole number, got {qty!r}")
        if qty < 0:
            raise InvalidPotionCountError(f"{pid.value} quantity must not be negative, got {qty}")
        counts[pid] = int(qty)
    return counts
