from __future__ import annotations
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Experience curve
    MAX_LEVEL: int = 300
    PERCENT_DIGITS: int = 3

    # Starting point for a fresh calculator
    DEFAULT_LEVEL: int = 200

    # Local state (SQLite)
    DATA_DIR: str = "./data"
    DB_FILE: str = "calculator.db"
    STATE_SLOT: str = "default"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def data_path(self) -> Path:
        return Path(self.DATA_DIR).resolve()

    @property
    def db_url(self) -> str:
        return f"sqlite:///{(self.data_path / self.DB_FILE).as_posix()}"
