from __future__ import annotations

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from potioncalc.core.config import Settings
from potioncalc.core.models import Base


def make_engine(settings: Settings) -> Engine:
    settings.data_path.mkdir(parents=True, exist_ok=True)
    return create_engine(settings.db_url, echo=False, future=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def bootstrap(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("PRAGMA journal_mode=WAL"))
        conn.commit()

    # Create tables for a fresh DB
    Base.metadata.create_all(bind=engine)
