"""Persistence helpers for league players."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.errors import PlayerLookupError, ValidationError
from domain.ratings.common import Rating
from domain.standings import StoredPlayer
from models import Player


def _normalize_name(name: str) -> str:
    return " ".join(name.split())


def player_name_key(name: str) -> str:
    """Lookup key for a player name: whitespace-normalised and casefolded."""
    return _normalize_name(name).casefold()


def add_player(
    session: Session,
    *,
    name: str,
    rating: Rating,
    skill_level: str | None = None,
) -> Player:
    """Insert a new player at ``rating``; names are unique case-insensitively."""
    normalized = _normalize_name(name)
    if not normalized:
        raise ValidationError("player name is required")
    if rating.sigma <= 0.0:
        raise ValidationError(f"player sigma must be > 0, got {rating.sigma}")

    existing = session.execute(
        select(Player).where(Player.name_key == player_name_key(normalized))
    ).scalar_one_or_none()
    if existing is not None:
        raise ValidationError(f"player {normalized!r} already exists")

    player = Player(
        name=normalized,
        name_key=player_name_key(normalized),
        skill_level=skill_level,
        mu=rating.mu,
        sigma=rating.sigma,
        matches_played=0,
        wins=0,
        points_for=0,
        points_against=0,
    )
    session.add(player)
    session.flush()
    return player


def fetch_players_by_names(session: Session, names: Sequence[str]) -> list[Player]:
    """Return players in the same order as ``names`` or raise naming the missing ones."""
    wanted = [_normalize_name(name) for name in names]
    keys = [player_name_key(name) for name in wanted]
    rows = session.execute(
        select(Player).where(Player.name_key.in_(set(keys)))
    ).scalars().all()
    by_key = {player.name_key: player for player in rows}

    missing = tuple(name for name, key in zip(wanted, keys) if key not in by_key)
    if missing:
        raise PlayerLookupError(
            f"players not found: {', '.join(missing)}",
            missing=missing,
        )

    players = [by_key[key] for key in keys]
    if len({player.id for player in players}) != len(players):
        raise PlayerLookupError(f"names {wanted} do not resolve to distinct players")
    return players


def fetch_players_by_ids(session: Session, player_ids: Iterable[str]) -> list[Player]:
    ids = set(player_ids)
    if not ids:
        return []
    return list(session.execute(select(Player).where(Player.id.in_(ids))).scalars().all())


def apply_match_result(
    player: Player,
    *,
    rating: Rating,
    won: bool,
    points_scored: int,
    points_conceded: int,
) -> None:
    """Write the new rating and bump lifetime totals; flushed with the version check."""
    player.mu = rating.mu
    player.sigma = rating.sigma
    player.matches_played += 1
    player.wins += 1 if won else 0
    player.points_for += points_scored
    player.points_against += points_conceded
    player.updated_at = datetime.now(UTC).replace(tzinfo=None)


def list_leaderboard(session: Session) -> list[Player]:
    """All players ordered by mu descending."""
    return list(
        session.execute(select(Player).order_by(Player.mu.desc(), Player.name.asc())).scalars().all()
    )


def to_stored_player(player: Player) -> StoredPlayer:
    return StoredPlayer(
        id=player.id,
        name=player.name,
        mu=float(player.mu),
        sigma=float(player.sigma),
        matches_played=int(player.matches_played),
        wins=int(player.wins),
        points_for=int(player.points_for),
        points_against=int(player.points_against),
    )
