"""Unit tests for the doubles TrueSkill engine."""

from __future__ import annotations

import pytest

from domain.errors import ValidationError
from domain.ratings.common import Rating, Winner
from domain.ratings.trueskill import DoublesTrueSkillCalculator, TrueSkillParameters

EVEN = Rating(mu=25.0, sigma=8.33)


def _calculator() -> DoublesTrueSkillCalculator:
    return DoublesTrueSkillCalculator(TrueSkillParameters())


def test_trueskill_parameter_defaults_are_expected_constants() -> None:
    params = TrueSkillParameters()
    assert params.initial_mu == pytest.approx(25.0)
    assert params.initial_sigma == pytest.approx(25.0 / 3.0)
    assert params.beta == pytest.approx(25.0 / 6.0)
    assert params.tau == pytest.approx(0.0)


def test_initial_rating_uses_configured_prior() -> None:
    calculator = DoublesTrueSkillCalculator(TrueSkillParameters(initial_mu=30.0, initial_sigma=5.0))
    assert calculator.initial_rating() == Rating(mu=30.0, sigma=5.0)


def test_equal_players_move_by_equal_amounts() -> None:
    update = _calculator().update((EVEN, EVEN), (EVEN, EVEN), Winner.TEAM1)

    winner_a, winner_b = update.team1
    loser_a, loser_b = update.team2
    assert winner_a.mu > 25.0
    assert winner_a.mu == pytest.approx(winner_b.mu)
    assert loser_a.mu < 25.0
    assert loser_a.mu == pytest.approx(loser_b.mu)
    assert winner_a.mu - 25.0 == pytest.approx(25.0 - loser_a.mu)
    for rating in update.team1 + update.team2:
        assert rating.sigma < EVEN.sigma
    assert update.team1_win_probability == pytest.approx(0.5)


@pytest.mark.parametrize("winner", [Winner.TEAM1, Winner.TEAM2])
def test_sigma_never_increases(winner: Winner) -> None:
    team1 = (Rating(31.0, 2.5), Rating(18.0, 7.9))
    team2 = (Rating(24.0, 1.2), Rating(26.5, 8.3))

    update = _calculator().update(team1, team2, winner)

    for before, after in zip(team1 + team2, update.team1 + update.team2):
        assert after.sigma <= before.sigma


def test_winning_team_mu_sum_rises_and_losing_team_sum_falls() -> None:
    team1 = (Rating(20.0, 4.0), Rating(22.0, 6.0))
    team2 = (Rating(30.0, 3.0), Rating(28.0, 5.0))

    update = _calculator().update(team1, team2, Winner.TEAM1)

    assert sum(r.mu for r in update.team1) > sum(r.mu for r in team1)
    assert sum(r.mu for r in update.team2) < sum(r.mu for r in team2)


def test_upset_moves_more_than_expected_win() -> None:
    strong = (Rating(32.0, 3.0), Rating(30.0, 3.0))
    weak = (Rating(20.0, 3.0), Rating(21.0, 3.0))
    calculator = _calculator()

    expected = calculator.update(strong, weak, Winner.TEAM1)
    upset = calculator.update(strong, weak, Winner.TEAM2)

    assert expected.team1_win_probability > 0.5
    expected_gain = sum(r.mu for r in expected.team1) - sum(r.mu for r in strong)
    upset_gain = sum(r.mu for r in upset.team2) - sum(r.mu for r in weak)
    assert upset_gain > expected_gain


def test_swapping_team_roles_mirrors_the_update() -> None:
    team1 = (Rating(27.0, 5.0), Rating(23.0, 7.0))
    team2 = (Rating(25.0, 2.0), Rating(26.0, 4.0))
    calculator = _calculator()

    forward = calculator.update(team1, team2, Winner.TEAM1)
    swapped = calculator.update(team2, team1, Winner.TEAM2).mirrored()

    for left, right in zip(forward.team1 + forward.team2, swapped.team1 + swapped.team2):
        assert left.mu == pytest.approx(right.mu)
        assert left.sigma == pytest.approx(right.sigma)
    assert forward.team1_win_probability == pytest.approx(swapped.team1_win_probability)


def test_update_is_deterministic() -> None:
    team1 = (Rating(27.0, 5.0), Rating(23.0, 7.0))
    team2 = (Rating(25.0, 2.0), Rating(26.0, 4.0))
    calculator = _calculator()
    assert calculator.update(team1, team2, Winner.TEAM2) == calculator.update(team1, team2, Winner.TEAM2)


def test_non_positive_sigma_is_rejected() -> None:
    with pytest.raises(ValidationError, match=r"team2\[1\]\.sigma must be > 0"):
        _calculator().update((EVEN, EVEN), (EVEN, Rating(25.0, 0.0)), Winner.TEAM1)


def test_team_size_other_than_two_is_rejected() -> None:
    with pytest.raises(ValidationError, match="exactly 2 ratings"):
        _calculator().update((EVEN,), (EVEN, EVEN), Winner.TEAM1)
    with pytest.raises(ValidationError, match="exactly 2 ratings"):
        _calculator().update((EVEN, EVEN), (EVEN, EVEN, EVEN), Winner.TEAM1)


def test_invalid_winner_is_rejected() -> None:
    with pytest.raises(ValidationError, match="winner must be TEAM1 or TEAM2"):
        _calculator().update((EVEN, EVEN), (EVEN, EVEN), 3)  # type: ignore[arg-type]
