"""players table model."""

from __future__ import annotations

from datetime import datetime
import uuid

from sqlalchemy import CheckConstraint, DateTime, Float, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


def _new_player_id() -> str:
    return str(uuid.uuid4())


class Player(Base):
    """Current rating and lifetime totals for one league player."""

    __tablename__ = "players"
    __table_args__ = (
        CheckConstraint("sigma > 0.0", name="ck_players_sigma"),
        CheckConstraint("matches_played >= 0", name="ck_players_matches_played"),
        CheckConstraint("wins >= 0 AND wins <= matches_played", name="ck_players_wins"),
        CheckConstraint("points_for >= 0", name="ck_players_points_for"),
        CheckConstraint("points_against >= 0", name="ck_players_points_against"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_player_id)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    # Whitespace-normalised, casefolded name; lookups and uniqueness go through this.
    name_key: Mapped[str] = mapped_column(String(256), nullable=False, unique=True, index=True)
    skill_level: Mapped[str | None] = mapped_column(String(64), nullable=True)
    mu: Mapped[float] = mapped_column(Float, nullable=False)
    sigma: Mapped[float] = mapped_column(Float, nullable=False)
    matches_played: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_for: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_against: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
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

    # Every UPDATE checks and bumps version, so a stale read fails instead of overwriting.
    __mapper_args__ = {"version_id_col": version}
