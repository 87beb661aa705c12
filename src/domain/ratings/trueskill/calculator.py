"""Doubles TrueSkill engine (factor-graph update, no draws)."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Sequence

import trueskill

from domain.ratings.common import (
    DoublesRatingUpdate,
    Rating,
    Winner,
    validate_team,
    validate_winner,
)


@dataclass(frozen=True)
class TrueSkillParameters:
    initial_mu: float = 25.0
    initial_sigma: float = 25.0 / 3.0
    beta: float = 25.0 / 6.0
    tau: float = 0.0


class DoublesTrueSkillCalculator:
    """Stateless TrueSkill update for one two-vs-two match.

    Each player's performance is drawn from N(mu, sigma^2 + beta^2), a team
    performs as the sum of its two players and the winner's performance must
    exceed the loser's. With ``tau == 0`` no sigma can grow.
    """

    algorithm = "trueskill"

    def __init__(self, params: TrueSkillParameters) -> None:
        self.params = params
        self._env = trueskill.TrueSkill(
            mu=self.params.initial_mu,
            sigma=self.params.initial_sigma,
            beta=self.params.beta,
            tau=self.params.tau,
            draw_probability=0.0,
        )

    def initial_rating(self) -> Rating:
        return Rating(mu=self.params.initial_mu, sigma=self.params.initial_sigma)

    def win_probability(self, team1: Sequence[Rating], team2: Sequence[Rating]) -> float:
        """Pre-match probability that team1 beats team2."""
        team1_pair = validate_team("team1", team1)
        team2_pair = validate_team("team2", team2)
        players = team1_pair + team2_pair
        delta_mu = sum(r.mu for r in team1_pair) - sum(r.mu for r in team2_pair)
        variance = sum(r.sigma**2 for r in players) + len(players) * self.params.beta**2
        return float(self._env.cdf(delta_mu / math.sqrt(variance)))

    def update(
        self,
        team1: Sequence[Rating],
        team2: Sequence[Rating],
        winner: Winner,
    ) -> DoublesRatingUpdate:
        team1_pair = validate_team("team1", team1)
        team2_pair = validate_team("team2", team2)
        winner = validate_winner(winner)

        team1_expected = self.win_probability(team1_pair, team2_pair)
        ranks = [0, 1] if winner is Winner.TEAM1 else [1, 0]

        rated_team1, rated_team2 = self._env.rate(
            [
                tuple(self._env.create_rating(mu=r.mu, sigma=r.sigma) for r in team1_pair),
                tuple(self._env.create_rating(mu=r.mu, sigma=r.sigma) for r in team2_pair),
            ],
            ranks=ranks,
        )

        return DoublesRatingUpdate(
            team1=(_from_library(rated_team1[0]), _from_library(rated_team1[1])),
            team2=(_from_library(rated_team2[0]), _from_library(rated_team2[1])),
            team1_win_probability=team1_expected,
        )


def _from_library(rating: trueskill.Rating) -> Rating:
    return Rating(mu=float(rating.mu), sigma=float(rating.sigma))
