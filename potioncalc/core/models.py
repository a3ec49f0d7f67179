from __future__ import annotations
from datetime import datetime
from sqlalchemy.orm import declarative_base, Mapped, mapped_column
from sqlalchemy import BigInteger, Integer, String, DateTime, Float, JSON

Base = declarative_base()


class SavedState(Base):
    """Last calculator state, one row per slot."""

    __tablename__ = "saved_state"
    slot: Mapped[str] = mapped_column(String(40), primary_key=True)
    level_before: Mapped[int] = mapped_column(Integer)
    experience_before: Mapped[int] = mapped_column(BigInteger)
    percentage_before: Mapped[float] = mapped_column(Float)
    level_after: Mapped[int] = mapped_column(Integer)
    experience_after: Mapped[int] = mapped_column(BigInteger)
    percentage_after: Mapped[float] = mapped_column(Float)
    potions_json: Mapped[dict] = mapped_column(JSON, default=dict)
    change: Mapped[str] = mapped_column(String(32))  # last edited field
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
