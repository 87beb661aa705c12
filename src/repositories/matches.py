"""Persistence helpers for recorded matches and their rating events."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import insert, select
from sqlalchemy.orm import Session, aliased

from domain.matches import MatchRow
from domain.ratings.common import DoublesRatingUpdate, Winner
from domain.standings import WeekMatch
from models import Match, Player, PlayerRatingEvent


@dataclass(frozen=True)
class MatchResultLine:
    """A recorded match resolved to player names for display."""

    match_id: int
    week: int
    match_code: str
    team1_names: tuple[str, str]
    team2_names: tuple[str, str]
    team1_score: int
    team2_score: int
    winner: Winner


def match_exists(session: Session, *, week: int, match_code: str) -> bool:
    statement = select(Match.id).where(Match.week == week, Match.match_code == match_code)
    return session.execute(statement).first() is not None


def insert_match(session: Session, row: MatchRow, players: Sequence[Player]) -> Match:
    """Insert one match row; ``players`` are player1..player4 in order."""
    match = Match(
        week=row.week,
        match_code=row.match_code,
        player1_id=players[0].id,
        player2_id=players[1].id,
        player3_id=players[2].id,
        player4_id=players[3].id,
        team1_score=row.team1_score,
        team2_score=row.team2_score,
        winner_team=int(row.winner),
    )
    session.add(match)
    session.flush()
    return match


def insert_rating_events(
    session: Session,
    *,
    match: Match,
    players: Sequence[Player],
    pre_ratings: Sequence[tuple[float, float]],
    update: DoublesRatingUpdate,
    algorithm: str,
) -> None:
    """Bulk insert one rating event per player for ``match``."""
    post_ratings = update.team1 + update.team2
    winner = Winner(match.winner_team)
    payload = []
    for index, (player, (pre_mu, pre_sigma), post) in enumerate(zip(players, pre_ratings, post_ratings)):
        team = Winner.TEAM1 if index < 2 else Winner.TEAM2
        expected = (
            update.team1_win_probability if team is Winner.TEAM1 else update.team2_win_probability
        )
        payload.append(
            {
                "match_id": match.id,
                "player_id": player.id,
                "week": match.week,
                "team": int(team),
                "won": team is winner,
                "expected_score": expected,
                "algorithm": algorithm,
                "pre_mu": pre_mu,
                "pre_sigma": pre_sigma,
                "mu_delta": post.mu - pre_mu,
                "sigma_delta": post.sigma - pre_sigma,
                "post_mu": post.mu,
                "post_sigma": post.sigma,
            }
        )
    session.execute(insert(PlayerRatingEvent), payload)


def fetch_week_matches(session: Session, week: int) -> list[WeekMatch]:
    """Matches recorded for ``week`` in insertion order."""
    rows = session.execute(select(Match).where(Match.week == week).order_by(Match.id)).scalars().all()
    return [
        WeekMatch(
            team1_player_ids=(match.player1_id, match.player2_id),
            team2_player_ids=(match.player3_id, match.player4_id),
            team1_score=match.team1_score,
            team2_score=match.team2_score,
            winner=Winner(match.winner_team),
        )
        for match in rows
    ]


def fetch_week_results(session: Session, week: int) -> list[MatchResultLine]:
    """Matches for ``week`` with player names, in insertion order."""
    p1, p2, p3, p4 = (aliased(Player) for _ in range(4))
    statement = (
        select(Match, p1.name, p2.name, p3.name, p4.name)
        .join(p1, p1.id == Match.player1_id)
        .join(p2, p2.id == Match.player2_id)
        .join(p3, p3.id == Match.player3_id)
        .join(p4, p4.id == Match.player4_id)
        .where(Match.week == week)
        .order_by(Match.id)
    )
    return [
        MatchResultLine(
            match_id=match.id,
            week=match.week,
            match_code=match.match_code,
            team1_names=(name1, name2),
            team2_names=(name3, name4),
            team1_score=match.team1_score,
            team2_score=match.team2_score,
            winner=Winner(match.winner_team),
        )
        for match, name1, name2, name3, name4 in session.execute(statement).all()
    ]


def list_recorded_weeks(session: Session) -> list[int]:
    rows = session.execute(select(Match.week).distinct().order_by(Match.week)).scalars().all()
    return [int(week) for week in rows]
