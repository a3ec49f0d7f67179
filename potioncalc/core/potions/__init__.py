from .catalog import POTION_DATA, POTION_IDS, get_descriptor, make_potion_count
from .pipeline import apply_potion, apply_potions, unapply_potion, unapply_potions
from .types import PotionCount, PotionDescriptor, PotionID

__all__ = [
    "POTION_DATA",
    "POTION_IDS",
    "PotionCount",
    "PotionDescriptor",
    "PotionID",
    "apply_potion",
    "apply_potions",
    "get_descriptor",
    "make_potion_count",
    "unapply_potion",
    "unapply_potions",
]
