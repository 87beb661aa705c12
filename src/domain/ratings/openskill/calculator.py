"""Doubles OpenSkill engine (Thurstone-Mosteller full pairing)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from openskill.models import ThurstoneMostellerFull

from domain.ratings.common import (
    DoublesRatingUpdate,
    Rating,
    Winner,
    validate_team,
    validate_winner,
)


@dataclass(frozen=True)
class OpenSkillParameters:
    initial_mu: float = 25.0
    initial_sigma: float = 25.0 / 3.0
    beta: float = 25.0 / 6.0
    kappa: float = 0.0001
    tau: float = 0.0
    balance: bool = False


class DoublesOpenSkillCalculator:
    """Stateless OpenSkill update for one two-vs-two match."""

    algorithm = "openskill"

    def __init__(self, params: OpenSkillParameters) -> None:
        self.params = params
        # limit_sigma keeps every post-match sigma at or below its pre-match value.
        self._model = ThurstoneMostellerFull(
            mu=self.params.initial_mu,
            sigma=self.params.initial_sigma,
            beta=self.params.beta,
            kappa=self.params.kappa,
            tau=self.params.tau,
            limit_sigma=True,
            balance=self.params.balance,
        )

    def initial_rating(self) -> Rating:
        return Rating(mu=self.params.initial_mu, sigma=self.params.initial_sigma)

    def _to_model(self, team: Sequence[Rating]) -> list:
        return [self._model.rating(mu=r.mu, sigma=r.sigma) for r in team]

    def update(
        self,
        team1: Sequence[Rating],
        team2: Sequence[Rating],
        winner: Winner,
    ) -> DoublesRatingUpdate:
        team1_pair = validate_team("team1", team1)
        team2_pair = validate_team("team2", team2)
        winner = validate_winner(winner)

        predicted = self._model.predict_win([self._to_model(team1_pair), self._to_model(team2_pair)])
        ranks = [1, 2] if winner is Winner.TEAM1 else [2, 1]

        updated = self._model.rate(
            [self._to_model(team1_pair), self._to_model(team2_pair)],
            ranks=ranks,
        )
        team1_post = updated[0]
        team2_post = updated[1]

        return DoublesRatingUpdate(
            team1=(
                Rating(mu=float(team1_post[0].mu), sigma=float(team1_post[0].sigma)),
                Rating(mu=float(team1_post[1].mu), sigma=float(team1_post[1].sigma)),
            ),
            team2=(
                Rating(mu=float(team2_post[0].mu), sigma=float(team2_post[0].sigma)),
                Rating(mu=float(team2_post[1].mu), sigma=float(team2_post[1].sigma)),
            ),
            team1_win_probability=float(predicted[0]),
        )
