"""matches table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Match(Base):
    """One recorded doubles match; team1 is player1/player2, team2 is player3/player4."""

    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint("week", "match_code", name="uq_matches_week_code"),
        CheckConstraint("week >= 1", name="ck_matches_week"),
        CheckConstraint("team1_score >= 0 AND team2_score >= 0", name="ck_matches_scores"),
        CheckConstraint("team1_score <> team2_score", name="ck_matches_no_tie"),
        CheckConstraint("winner_team IN (1, 2)", name="ck_matches_winner_team"),
        Index("idx_matches_week", "week", "id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    week: Mapped[int] = mapped_column(Integer, nullable=False)
    match_code: Mapped[str] = mapped_column(String(64), nullable=False)
    player1_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    player2_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    player3_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    player4_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    team1_score: Mapped[int] = mapped_column(Integer, nullable=False)
    team2_score: Mapped[int] = mapped_column(Integer, nullable=False)
    winner_team: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
