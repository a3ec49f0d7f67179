import os
import sys

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from potioncalc.core.config import Settings  # noqa: E402
from potioncalc.core.models import Base  # noqa: E402
from potioncalc.core.service import CalculatorService  # noqa: E402


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite://", future=True)
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def settings(tmp_path):
    return Settings(DATA_DIR=str(tmp_path), _env_file=None)


@pytest.fixture()
def service(db_session, settings):
    return CalculatorService(db_session, settings)
