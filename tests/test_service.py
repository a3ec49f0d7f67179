import pytest
from sqlalchemy.exc import OperationalError

from potioncalc.core.calculator import Action, default_state
from potioncalc.core.config import Settings
from potioncalc.core.errors import OutOfRangeError
from potioncalc.core.models import SavedState
from potioncalc.core.potions.types import PotionID
from potioncalc.core.service import CalculatorService
from potioncalc.core.state_store import StateStore


def test_starts_from_default(service):
    assert service.state == default_state()
    assert service.table.max_level == 300
    assert service.digits == 3


def test_successful_dispatch_saves(service, db_session):
    r = service.dispatch(Action(type="potion", value=2, potion_id=PotionID.POTION0))
    assert r.ok and r.error is None
    assert r.state.level_after == 202
    assert StateStore(db_session).load() == r.state


def test_rejected_dispatch_keeps_state_and_skips_save(service, db_session):
    service.dispatch(Action(type="level_before", value=205))
    before = service.state
    r = service.dispatch(Action(type="level_before", value=1000))
    assert not r.ok
    assert "1000" in r.error
    assert r.state is before
    assert service.state is before
    assert StateStore(db_session).load() == before


def test_unknown_potion_is_rejected(service):
    r = service.dispatch(Action(type="potion", value=1, potion_id="POTION9"))
    assert not r.ok
    assert r.to_dict()["ok"] is False


def test_state_survives_new_service(db_session, settings):
    first = CalculatorService(db_session, settings)
    first.dispatch(Action(type="level_after", value=240))
    second = CalculatorService(db_session, settings)
    assert second.state.level_after == 240


def test_reset(service, db_session):
    service.dispatch(Action(type="level_before", value=250))
    r = service.reset()
    assert r.state == default_state()
    assert db_session.get(SavedState, "default").level_before == 200


def test_settings_drive_table_and_defaults(db_session, tmp_path):
    settings = Settings(DATA_DIR=str(tmp_path), MAX_LEVEL=275, DEFAULT_LEVEL=210, PERCENT_DIGITS=1, _env_file=None)
    svc = CalculatorService(db_session, settings)
    assert svc.table.max_level == 275
    assert svc.state.level_before == 210
    r = svc.dispatch(Action(type="percentage_before", value=33.33))
    assert r.state.percentage_after == 33.3


def test_table_must_cover_potions(db_session, tmp_path):
    settings = Settings(DATA_DIR=str(tmp_path), MAX_LEVEL=260, _env_file=None)
    with pytest.raises(OutOfRangeError):
        CalculatorService(db_session, settings)


def test_settings_db_url(tmp_path):
    settings = Settings(DATA_DIR=str(tmp_path), DB_FILE="x.db", _env_file=None)
    assert settings.db_url.startswith("sqlite:///")
    assert settings.db_url.endswith("/x.db")


def test_failed_save_keeps_state_and_recovers(service, db_session, monkeypatch):
    before = service.state

    def broken_commit():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "commit", broken_commit)
    r = service.dispatch(Action(type="level_before", value=230))
    assert not r.ok
    assert "database is locked" in r.error
    assert service.state is before

    monkeypatch.undo()
    r = service.dispatch(Action(type="level_before", value=230))
    assert r.ok
    assert service.state.level_before == 230
    assert StateStore(db_session).load().level_before == 230
