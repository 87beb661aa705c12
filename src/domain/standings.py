"""Weekly standings aggregation: top players and superlatives for one week."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Sequence

from domain.errors import ValidationError
from domain.ratings.common import CONSERVATIVE_Z, Rating, Winner


class StatsScope(str, Enum):
    """Which match totals feed the weekly player stats."""

    CUMULATIVE = "cumulative"
    WEEK = "week"


@dataclass(frozen=True)
class StandingsParameters:
    top_n: int = 3
    min_matches_for_win_rate: int = 3
    conservative_z: float = CONSERVATIVE_Z
    stats_scope: StatsScope = StatsScope.CUMULATIVE


@dataclass(frozen=True)
class PlayerWeekStats:
    """One player's line in a weekly snapshot; ``rating`` is the conservative rating."""

    id: str
    name: str
    rating: float
    matches_played: int
    wins: int
    points_for: int
    points_against: int

    @property
    def win_rate(self) -> float:
        if self.matches_played == 0:
            return 0.0
        return self.wins / self.matches_played

    def as_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "rating": self.rating,
            "matches_played": self.matches_played,
            "wins": self.wins,
            "points_for": self.points_for,
            "points_against": self.points_against,
        }


@dataclass(frozen=True)
class Superlative:
    """A named best-of statistic: who holds it and the winning value."""

    id: str
    name: str
    value: float


@dataclass(frozen=True)
class WeeklyStats:
    most_matches: Superlative | None
    best_win_rate: Superlative | None
    most_points: Superlative | None
    least_points_against: Superlative | None

    def as_json(self) -> dict[str, Any]:
        return {
            "mostMatches": _superlative_json(self.most_matches, "matches", int),
            "bestWinRate": _superlative_json(self.best_win_rate, "winRate", float),
            "mostPoints": _superlative_json(self.most_points, "points", int),
            "leastPointsAgainst": _superlative_json(self.least_points_against, "pointsAgainst", int),
        }


@dataclass(frozen=True)
class WeeklyStandingsSnapshot:
    week: int
    top_players: tuple[PlayerWeekStats, ...]
    stats: WeeklyStats

    def as_json(self) -> dict[str, Any]:
        return {
            "week": self.week,
            "top_players": [player.as_json() for player in self.top_players],
            "stats": self.stats.as_json(),
        }


@dataclass(frozen=True)
class StoredPlayer:
    """Player state as read from the store, before week enrichment."""

    id: str
    name: str
    mu: float
    sigma: float
    matches_played: int
    wins: int
    points_for: int
    points_against: int


@dataclass(frozen=True)
class WeekMatch:
    """Recorded match reduced to what the week fold needs."""

    team1_player_ids: tuple[str, str]
    team2_player_ids: tuple[str, str]
    team1_score: int
    team2_score: int
    winner: Winner


def _superlative_json(
    superlative: Superlative | None,
    value_key: str,
    cast: Callable[[float], Any],
) -> dict[str, Any] | None:
    if superlative is None:
        return None
    return {"id": superlative.id, "name": superlative.name, value_key: cast(superlative.value)}


def _first_max(
    players: Iterable[PlayerWeekStats],
    key: Callable[[PlayerWeekStats], float],
) -> PlayerWeekStats | None:
    best: PlayerWeekStats | None = None
    for player in players:
        if best is None or key(player) > key(best):
            best = player
    return best


def _first_min(
    players: Iterable[PlayerWeekStats],
    key: Callable[[PlayerWeekStats], float],
) -> PlayerWeekStats | None:
    best: PlayerWeekStats | None = None
    for player in players:
        if best is None or key(player) < key(best):
            best = player
    return best


def aggregate_week(
    players: Sequence[PlayerWeekStats],
    week: int,
    *,
    top_n: int = 3,
    min_matches_for_win_rate: int = 3,
) -> WeeklyStandingsSnapshot:
    """Rank one week's players and compute the four superlatives.

    Ties keep input order: ``top_players`` is a stable sort and every
    superlative is a left-to-right reduction where the earliest extreme wins.
    """
    if not players:
        raise ValidationError(f"week {week} has no players to aggregate")
    if week < 1:
        raise ValidationError(f"week must be >= 1, got {week}")
    if top_n < 1:
        raise ValidationError(f"top_n must be >= 1, got {top_n}")

    top_players = tuple(sorted(players, key=lambda p: p.rating, reverse=True)[:top_n])

    most_matches = _first_max(players, key=lambda p: p.matches_played)
    most_points = _first_max(players, key=lambda p: p.points_for)
    best_win_rate = _first_max(
        (p for p in players if p.matches_played >= min_matches_for_win_rate),
        key=lambda p: p.win_rate,
    )
    least_points_against = _first_min(
        (p for p in players if p.matches_played > 0),
        key=lambda p: p.points_against,
    )

    stats = WeeklyStats(
        most_matches=None
        if most_matches is None
        else Superlative(most_matches.id, most_matches.name, most_matches.matches_played),
        best_win_rate=None
        if best_win_rate is None
        else Superlative(best_win_rate.id, best_win_rate.name, best_win_rate.win_rate),
        most_points=None
        if most_points is None
        else Superlative(most_points.id, most_points.name, most_points.points_for),
        least_points_against=None
        if least_points_against is None
        else Superlative(
            least_points_against.id,
            least_points_against.name,
            least_points_against.points_against,
        ),
    )
    return WeeklyStandingsSnapshot(week=week, top_players=top_players, stats=stats)


def week_player_order(matches: Iterable[WeekMatch]) -> list[str]:
    """Player ids in order of first appearance across the week's matches."""
    seen: dict[str, None] = {}
    for match in matches:
        for player_id in match.team1_player_ids + match.team2_player_ids:
            seen.setdefault(player_id, None)
    return list(seen)


def build_week_player_stats(
    players: Sequence[StoredPlayer],
    matches: Sequence[WeekMatch],
    *,
    scope: StatsScope = StatsScope.CUMULATIVE,
    conservative_z: float = CONSERVATIVE_Z,
) -> list[PlayerWeekStats]:
    """Enrich stored players with a conservative rating and the chosen totals.

    ``CUMULATIVE`` keeps each player's lifetime totals; ``WEEK`` folds only
    ``matches`` into matches played, wins and points. The rating is always
    the player's current one. Output follows first appearance in ``matches``.
    """
    by_id = {player.id: player for player in players}
    order = week_player_order(matches)
    missing = [player_id for player_id in order if player_id not in by_id]
    if missing:
        raise ValidationError(f"week matches reference unknown player ids: {missing}")

    if scope is StatsScope.WEEK:
        totals = _fold_week_totals(matches)
    else:
        totals = {
            player_id: (
                by_id[player_id].matches_played,
                by_id[player_id].wins,
                by_id[player_id].points_for,
                by_id[player_id].points_against,
            )
            for player_id in order
        }

    enriched: list[PlayerWeekStats] = []
    for player_id in order:
        player = by_id[player_id]
        matches_played, wins, points_for, points_against = totals[player_id]
        enriched.append(
            PlayerWeekStats(
                id=player.id,
                name=player.name,
                rating=Rating(player.mu, player.sigma).conservative(conservative_z),
                matches_played=matches_played,
                wins=wins,
                points_for=points_for,
                points_against=points_against,
            )
        )
    return enriched


def _fold_week_totals(matches: Iterable[WeekMatch]) -> dict[str, tuple[int, int, int, int]]:
    totals: dict[str, tuple[int, int, int, int]] = {}

    def add(player_id: str, won: bool, scored: int, conceded: int) -> None:
        matches_played, wins, points_for, points_against = totals.get(player_id, (0, 0, 0, 0))
        totals[player_id] = (
            matches_played + 1,
            wins + (1 if won else 0),
            points_for + scored,
            points_against + conceded,
        )

    for match in matches:
        team1_won = match.winner is Winner.TEAM1
        for player_id in match.team1_player_ids:
            add(player_id, team1_won, match.team1_score, match.team2_score)
        for player_id in match.team2_player_ids:
            add(player_id, not team1_won, match.team2_score, match.team1_score)
    return totals


__all__ = [
    "PlayerWeekStats",
    "StandingsParameters",
    "StatsScope",
    "StoredPlayer",
    "Superlative",
    "WeekMatch",
    "WeeklyStandingsSnapshot",
    "WeeklyStats",
    "aggregate_week",
    "build_week_player_stats",
    "week_player_order",
]
