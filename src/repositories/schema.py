"""Schema bootstrap for the league tables."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from models import Match, Player, PlayerRatingEvent, WeeklyStanding


def ensure_league_schema(engine: Engine) -> None:
    """Create players/matches/player_rating_events/weekly_standings if missing."""
    with engine.begin() as connection:
        Player.__table__.create(bind=connection, checkfirst=True)
        Match.__table__.create(bind=connection, checkfirst=True)
        PlayerRatingEvent.__table__.create(bind=connection, checkfirst=True)
        WeeklyStanding.__table__.create(bind=connection, checkfirst=True)
