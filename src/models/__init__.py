"""ORM models."""

from models.base import Base
from models.match import Match
from models.player import Player
from models.rating_event import PlayerRatingEvent
from models.weekly_standing import WeeklyStanding

__all__ = [
    "Base",
    "Match",
    "Player",
    "PlayerRatingEvent",
    "WeeklyStanding",
]
