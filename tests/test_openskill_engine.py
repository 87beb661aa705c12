"""Unit tests for the doubles OpenSkill engine."""

from __future__ import annotations

import pytest

from domain.errors import ValidationError
from domain.ratings.common import Rating, Winner
from domain.ratings.openskill import DoublesOpenSkillCalculator, OpenSkillParameters

EVEN = Rating(mu=25.0, sigma=25.0 / 3.0)


def test_openskill_parameter_defaults_are_expected_constants() -> None:
    params = OpenSkillParameters()
    assert params.initial_mu == pytest.approx(25.0)
    assert params.initial_sigma == pytest.approx(25.0 / 3.0)
    assert params.beta == pytest.approx(25.0 / 6.0)
    assert params.kappa == pytest.approx(0.0001)
    assert params.tau == pytest.approx(0.0)
    assert params.balance is False


def test_equal_default_teams_have_half_win_probability() -> None:
    update = DoublesOpenSkillCalculator(OpenSkillParameters()).update((EVEN, EVEN), (EVEN, EVEN), Winner.TEAM2)

    assert update.team1_win_probability == pytest.approx(0.5, abs=1e-6)
    assert update.team2_win_probability == pytest.approx(0.5, abs=1e-6)
    assert update.team2[0].mu > 25.0
    assert update.team1[0].mu < 25.0


def test_sigma_never_increases_and_winner_sum_rises() -> None:
    team1 = (Rating(29.0, 3.0), Rating(21.0, 8.0))
    team2 = (Rating(25.0, 5.0), Rating(24.0, 2.0))

    update = DoublesOpenSkillCalculator(OpenSkillParameters()).update(team1, team2, Winner.TEAM1)

    for before, after in zip(team1 + team2, update.team1 + update.team2):
        assert after.sigma <= before.sigma
    assert sum(r.mu for r in update.team1) > sum(r.mu for r in team1)
    assert sum(r.mu for r in update.team2) < sum(r.mu for r in team2)


def test_invalid_team_is_rejected() -> None:
    calculator = DoublesOpenSkillCalculator(OpenSkillParameters())
    with pytest.raises(ValidationError, match="sigma must be > 0"):
        calculator.update((EVEN, Rating(25.0, -1.0)), (EVEN, EVEN), Winner.TEAM1)


def test_equal_players_move_by_equal_amounts() -> None:
    update = DoublesOpenSkillCalculator(OpenSkillParameters()).update((EVEN, EVEN), (EVEN, EVEN), Winner.TEAM1)

    winner_a, winner_b = update.team1
    loser_a, loser_b = update.team2
    assert winner_a.mu > 25.0
    assert winner_a.mu == pytest.approx(winner_b.mu)
    assert loser_a.mu == pytest.approx(loser_b.mu)
    assert winner_a.mu - 25.0 == pytest.approx(25.0 - loser_a.mu)
    for rating in update.team1 + update.team2:
        assert rating.sigma <= EVEN.sigma


def test_swapping_team_roles_mirrors_the_update() -> None:
    team1 = (Rating(27.0, 5.0), Rating(23.0, 7.0))
    team2 = (Rating(25.0, 2.0), Rating(26.0, 4.0))
    calculator = DoublesOpenSkillCalculator(OpenSkillParameters())

    forward = calculator.update(team1, team2, Winner.TEAM1)
    swapped = calculator.update(team2, team1, Winner.TEAM2).mirrored()

    for left, right in zip(forward.team1 + forward.team2, swapped.team1 + swapped.team2):
        assert left.mu == pytest.approx(right.mu)
        assert left.sigma == pytest.approx(right.sigma)
    assert forward.team1_win_probability == pytest.approx(swapped.team1_win_probability)
