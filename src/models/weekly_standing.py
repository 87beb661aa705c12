"""weekly_standings table model."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import CheckConstraint, DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, JSONType


class WeeklyStanding(Base):
    """Persisted weekly snapshot, keyed by week and only ever written by upsert."""

    __tablename__ = "weekly_standings"
    __table_args__ = (CheckConstraint("week >= 1", name="ck_weekly_standings_week"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    week: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, index=True)
    top_players: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False)
    stats: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
