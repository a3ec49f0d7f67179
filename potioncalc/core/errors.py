from __future__ import annotations


class ExperienceError(ValueError):
    """Base class for experience-curve and potion-transform failures.

    Every subclass is a local validation failure: nothing here is transient,
    so callers reject the edit and keep their previous state.
    """


class InvalidExperienceError(ExperienceError):
    pass


class OutOfRangeError(ExperienceError):
    pass


class LevelOverflowError(OutOfRangeError):
    pass


class LevelUnderflowError(OutOfRangeError, InvalidExperienceError):
    pass


class UnreachableTotalError(ExperienceError):
    """The total cannot be produced by the potion being removed."""


class PotionCatalogError(Exception):
    pass


class UnknownPotionError(PotionCatalogError, LookupError):
    pass


class InvalidPotionCountError(PotionCatalogError, ValueError):
    pass
