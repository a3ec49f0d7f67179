from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from potioncalc.core.calculator import FIELDS, CalculatorState, default_state
from potioncalc.core.errors import ExperienceError, PotionCatalogError
from potioncalc.core.exp_table import EXPERIENCE, ExperienceTable
from potioncalc.core.level_codec import level_to_exp
from potioncalc.core.models import SavedState
from potioncalc.core.potions.catalog import make_potion_count

log = logging.getLogger("potioncalc.store")


class StateStore:
    """Persists the calculator state for one slot.

    Saving is explicit: callers invoke `save` after a successful edit.
    """

    def __init__(
        self,
        db: Session,
        *,
        slot: str = "default",
        table: ExperienceTable = EXPERIENCE,
        default_level: int = 200,
    ) -> None:
        self.db = db
        self.slot = slot
        self.table = table
        self.default_level = default_level

    def fresh_state(self) -> CalculatorState:
        return default_state(self.default_level, table=self.table)

    def load(self) -> CalculatorState:
        row = self.db.get(SavedState, self.slot)
        if row is None:
            return self.fresh_state()
        try:
            return self._from_row(row)
        except (ExperienceError, PotionCatalogError, TypeError, ValueError) as e:
            log.warning(f"[STORE] Discarding saved state for slot {self.slot!r}: {e}")
            return self.fresh_state()

    def _from_row(self, row: SavedState) -> CalculatorState:
        if row.change not in FIELDS:
            raise ValueError(f"unknown field {row.change!r}")
        state = CalculatorState(
            level_before=int(row.level_before),
            experience_before=int(row.experience_before),
            percentage_before=float(row.percentage_before),
            level_after=int(row.level_after),
            experience_after=int(row.experience_after),
            percentage_after=float(row.percentage_after),
            potions=make_potion_count(row.potions_json or {}),
            change=row.change,
        )
        # Both sides must still sit on the current curve.
        level_to_exp(state.level_before, state.experience_before, table=self.table)
        level_to_exp(state.level_after, state.experience_after, table=self.table)
        return state

    def save(self, state: CalculatorState) -> None:
        data = state.to_dict()
        row = self.db.get(SavedState, self.slot)
        if row is None:
            row = SavedState(slot=self.slot)
            self.db.add(row)
        row.level_before = data["level_before"]
        row.experience_before = data["experience_before"]
        row.percentage_before = data["percentage_before"]
        row.level_after = data["level_after"]
        row.experience_after = data["experience_after"]
        row.percentage_after = data["percentage_after"]
        row.potions_json = data["potions"]
        row.change = data["change"]
        row.updated_at = datetime.utcnow()
        self.db.commit()
        log.debug(f"[STORE] Saved slot {self.slot!r}")

    def clear(self) -> None:
        row = self.db.get(SavedState, self.slot)
        if row is not None:
            self.db.delete(row)
            self.db.commit()
