"""Shared types for doubles rating engines."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
import math
from typing import Sequence

from domain.errors import ValidationError

CONSERVATIVE_Z = 3.0


@dataclass(frozen=True)
class Rating:
    """Gaussian skill belief for one player."""

    mu: float
    sigma: float

    def conservative(self, z: float = CONSERVATIVE_Z) -> float:
        return self.mu - z * self.sigma


class Winner(IntEnum):
    TEAM1 = 1
    TEAM2 = 2

    def other(self) -> Winner:
        return Winner.TEAM2 if self is Winner.TEAM1 else Winner.TEAM1


TeamRatings = tuple[Rating, Rating]


@dataclass(frozen=True)
class DoublesRatingUpdate:
    """Post-match ratings, positionally matching the input teams."""

    team1: TeamRatings
    team2: TeamRatings
    team1_win_probability: float

    @property
    def team2_win_probability(self) -> float:
        return 1.0 - self.team1_win_probability

    def mirrored(self) -> DoublesRatingUpdate:
        return DoublesRatingUpdate(
            team1=self.team2,
            team2=self.team1,
            team1_win_probability=self.team2_win_probability,
        )


def validate_team(name: str, team: Sequence[Rating]) -> TeamRatings:
    """Return the team as a pair, rejecting anything but two valid ratings."""
    if len(team) != 2:
        raise ValidationError(f"{name} must contain exactly 2 ratings, got {len(team)}")
    for index, rating in enumerate(team):
        if not isinstance(rating, Rating):
            raise ValidationError(f"{name}[{index}] must be a Rating, got {type(rating).__name__}")
        if not math.isfinite(rating.mu):
            raise ValidationError(f"{name}[{index}].mu must be finite")
        if not math.isfinite(rating.sigma) or rating.sigma <= 0.0:
            raise ValidationError(f"{name}[{index}].sigma must be > 0, got {rating.sigma}")
    return team[0], team[1]


def validate_winner(winner: object) -> Winner:
    if isinstance(winner, bool) or winner not in (Winner.TEAM1, Winner.TEAM2):
        raise ValidationError(f"winner must be TEAM1 or TEAM2, got {winner!r}")
    return Winner(winner)


def winner_from_scores(team1_score: int, team2_score: int) -> Winner:
    """Derive the winner from final scores; tied scores are invalid."""
    if team1_score == team2_score:
        raise ValidationError(f"tied score {team1_score}-{team2_score} has no winner")
    return Winner.TEAM1 if team1_score > team2_score else Winner.TEAM2
