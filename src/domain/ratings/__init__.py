"""Doubles rating engines."""

from domain.ratings.common import DoublesRatingUpdate, Rating, Winner, winner_from_scores
from domain.ratings.protocol import DoublesRatingEngine

__all__ = [
    "DoublesRatingEngine",
    "DoublesRatingUpdate",
    "Rating",
    "Winner",
    "winner_from_scores",
]
