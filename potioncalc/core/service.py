from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from potioncalc.core.calculator import Action, CalculatorState, reduce
from potioncalc.core.config import Settings
from potioncalc.core.errors import ExperienceError, OutOfRangeError, PotionCatalogError
from potioncalc.core.exp_table import ExperienceTable, get_table
from potioncalc.core.potions.catalog import highest_potion_level
from potioncalc.core.state_store import StateStore

log = logging.getLogger("potioncalc.calculator")


@dataclass(frozen=True)
class DispatchResult:
    ok: bool
    state: CalculatorState
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"ok": bool(self.ok), "state": self.state.to_dict(), "error": self.error}


class CalculatorService:
    """Holds the current calculator state and saves it after every successful edit."""

    def __init__(self, db: Session, settings: Settings) -> None:
        self.db = db
        self.settings = settings
        self.table: ExperienceTable = get_table(int(settings.MAX_LEVEL))
        if self.table.max_level <= highest_potion_level():
            raise OutOfRangeError(
                f"MAX_LEVEL {self.table.max_level} must exceed the highest potion cap {highest_potion_level()}"
            )
        self.digits = int(settings.PERCENT_DIGITS)
        self.store = StateStore(
            db,
            slot=settings.STATE_SLOT,
            table=self.table,
            default_level=int(settings.DEFAULT_LEVEL),
        )
        self.state = self.store.load()

    def dispatch(self, action: Action) -> DispatchResult:
        try:
            new_state = reduce(self.state, action, table=self.table, digits=self.digits)
        except (ExperienceError, PotionCatalogError) as e:
            log.info(f"[CALC] Rejected {action.type}={action.value!r}: {e}")
            return DispatchResult(ok=False, state=self.state, error=str(e))

        return self._commit(new_state)

    def reset(self) -> DispatchResult:
        return self._commit(self.store.fresh_state())

    def _commit(self, new_state: CalculatorState) -> DispatchResult:
        # The in-memory state only advances once the save went through.
        try:
            self.store.save(new_state)
        except SQLAlchemyError as e:
            self.db.rollback()
            log.error(f"[CALC] Could not save state: {e}")
            return DispatchResult(ok=False, state=self.state, error=f"Could not save state: {e}")
        self.state = new_state
        return DispatchResult(ok=True, state=new_state)
