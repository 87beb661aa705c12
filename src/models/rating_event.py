"""player_rating_events table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class PlayerRatingEvent(Base):
    """Per-player rating change caused by one match (one row per player per match)."""

    __tablename__ = "player_rating_events"
    __table_args__ = (
        UniqueConstraint("match_id", "player_id", name="uq_player_rating_events_match_player"),
        CheckConstraint(
            "expected_score >= 0.0 AND expected_score <= 1.0",
            name="ck_player_rating_events_expected_score",
        ),
        CheckConstraint("pre_sigma > 0.0", name="ck_player_rating_events_pre_sigma"),
        CheckConstraint("post_sigma > 0.0", name="ck_player_rating_events_post_sigma"),
        Index("idx_player_rating_events_player", "player_id", "match_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id"), nullable=False)
    player_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    week: Mapped[int] = mapped_column(Integer, nullable=False)
    team: Mapped[int] = mapped_column(Integer, nullable=False)
    won: Mapped[bool] = mapped_column(Boolean, nullable=False)
    expected_score: Mapped[float] = mapped_column(Float, nullable=False)
    algorithm: Mapped[str] = mapped_column(String(32), nullable=False)
    pre_mu: Mapped[float] = mapped_column(Float, nullable=False)
    pre_sigma: Mapped[float] = mapped_column(Float, nullable=False)
    mu_delta: Mapped[float] = mapped_column(Float, nullable=False)
    sigma_delta: Mapped[float] = mapped_column(Float, nullable=False)
    post_mu: Mapped[float] = mapped_column(Float, nullable=False)
    post_sigma: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
