"""Ingestion pipeline: apply match rows to the store, then refresh weekly standings."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from domain.config import LeagueConfig
from domain.errors import (
    ConcurrentUpdateError,
    DuplicateMatchError,
    PlayerLookupError,
    StoreError,
    ValidationError,
)
from domain.matches import MatchRow, ParsedMatchCsv, RowFailure
from domain.ratings.common import Rating, Winner
from domain.ratings.protocol import DoublesRatingEngine
from domain.standings import (
    StandingsParameters,
    WeeklyStandingsSnapshot,
    aggregate_week,
    build_week_player_stats,
    week_player_order,
)
from repositories.matches import fetch_week_matches, insert_match, insert_rating_events, match_exists
from repositories.players import (
    apply_match_result,
    fetch_players_by_ids,
    fetch_players_by_names,
    to_stored_player,
)
from repositories.standings import upsert_weekly_standing

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]


@dataclass(frozen=True)
class IngestSummary:
    """Outcome of one upload."""

    total_rows: int
    processed: int
    failures: tuple[RowFailure, ...]
    weeks_recomputed: tuple[int, ...]

    @property
    def failed(self) -> int:
        return len(self.failures)


def ingest_match_rows(
    session_factory: SessionFactory,
    rows: Sequence[MatchRow],
    *,
    engine: DoublesRatingEngine,
    standings: StandingsParameters | None = None,
    max_attempts: int = 3,
    prior_failures: Sequence[RowFailure] = (),
) -> IngestSummary:
    """Apply each row in its own transaction, then recompute each touched week once.

    A row that fails validation or player lookup is recorded and skipped;
    rows already applied stay applied. Any other store failure aborts the
    batch with ``StoreError``.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    standings = standings or StandingsParameters()

    processed = 0
    failures: list[RowFailure] = list(prior_failures)
    weeks_touched: set[int] = set()

    for row in rows:
        try:
            _apply_row_with_retries(session_factory, row, engine=engine, max_attempts=max_attempts)
        except (ValidationError, PlayerLookupError, ConcurrentUpdateError) as exc:
            logger.warning("Skipped match row %s: %s", row.describe(), exc)
            failures.append(
                RowFailure(
                    line_number=row.line_number,
                    week=row.week,
                    match_code=row.match_code,
                    reason=str(exc),
                )
            )
            continue
        except SQLAlchemyError as exc:
            raise StoreError(
                f"store failure on {row.describe()} after {processed} processed rows: {exc}",
                processed=processed,
                row=row,
            ) from exc
        processed += 1
        weeks_touched.add(row.week)

    recomputed: list[int] = []
    for week in sorted(weeks_touched):
        try:
            snapshot = recompute_weekly_standings(session_factory, week, standings=standings)
        except SQLAlchemyError as exc:
            raise StoreError(
                f"store failure recomputing week {week} after {processed} processed rows: {exc}",
                processed=processed,
            ) from exc
        if snapshot is not None:
            recomputed.append(week)

    failures.sort(key=lambda failure: failure.line_number)
    logger.info(
        "Ingested rows=%d processed=%d failed=%d weeks_recomputed=%s",
        len(rows) + len(prior_failures),
        processed,
        len(failures),
        recomputed,
    )
    return IngestSummary(
        total_rows=len(rows) + len(prior_failures),
        processed=processed,
        failures=tuple(failures),
        weeks_recomputed=tuple(recomputed),
    )


def ingest_parsed_csv(
    session_factory: SessionFactory,
    parsed: ParsedMatchCsv,
    config: LeagueConfig,
) -> IngestSummary:
    """Ingest a parsed upload with the league's engine and settings."""
    return ingest_match_rows(
        session_factory,
        parsed.rows,
        engine=config.create_engine(),
        standings=config.standings,
        max_attempts=config.max_attempts,
        prior_failures=parsed.failures,
    )


def _apply_row_with_retries(
    session_factory: SessionFactory,
    row: MatchRow,
    *,
    engine: DoublesRatingEngine,
    max_attempts: int,
) -> None:
    for attempt in range(1, max_attempts + 1):
        try:
            with session_factory() as session, session.begin():
                _apply_row(session, row, engine=engine)
            return
        except StaleDataError:
            logger.debug("Concurrent player update on %s (attempt %d/%d)", row.describe(), attempt, max_attempts)
        except IntegrityError:
            with session_factory() as session:
                if match_exists(session, week=row.week, match_code=row.match_code):
                    raise DuplicateMatchError(
                        f"match {row.match_code} is already recorded for week {row.week}"
                    ) from None
            raise

    raise ConcurrentUpdateError(
        f"players for {row.describe()} kept changing; gave up after {max_attempts} attempts"
    )


def _apply_row(session: Session, row: MatchRow, *, engine: DoublesRatingEngine) -> None:
    if match_exists(session, week=row.week, match_code=row.match_code):
        raise DuplicateMatchError(f"match {row.match_code} is already recorded for week {row.week}")

    players = fetch_players_by_names(session, row.player_names)
    pre_ratings = [(float(player.mu), float(player.sigma)) for player in players]
    ratings = [Rating(mu=mu, sigma=sigma) for mu, sigma in pre_ratings]
    winner = row.winner

    update = engine.update(ratings[:2], ratings[2:], winner)

    post_ratings = update.team1 + update.team2
    for index, (player, post) in enumerate(zip(players, post_ratings)):
        on_team1 = index < 2
        apply_match_result(
            player,
            rating=post,
            won=(winner is Winner.TEAM1) == on_team1,
            points_scored=row.team1_score if on_team1 else row.team2_score,
            points_conceded=row.team2_score if on_team1 else row.team1_score,
        )
    session.flush()

    match = insert_match(session, row, players)
    insert_rating_events(
        session,
        match=match,
        players=players,
        pre_ratings=pre_ratings,
        update=update,
        algorithm=engine.algorithm,
    )


def recompute_weekly_standings(
    session_factory: SessionFactory,
    week: int,
    *,
    standings: StandingsParameters | None = None,
) -> WeeklyStandingsSnapshot | None:
    """Rebuild and upsert the snapshot for ``week``; weeks without matches are left alone."""
    standings = standings or StandingsParameters()
    with session_factory() as session, session.begin():
        matches = fetch_week_matches(session, week)
        if not matches:
            logger.info("No matches recorded for week %d; snapshot left unchanged", week)
            return None

        players = fetch_players_by_ids(session, week_player_order(matches))
        player_stats = build_week_player_stats(
            [to_stored_player(player) for player in players],
            matches,
            scope=standings.stats_scope,
            conservative_z=standings.conservative_z,
        )
        snapshot = aggregate_week(
            player_stats,
            week,
            top_n=standings.top_n,
            min_matches_for_win_rate=standings.min_matches_for_win_rate,
        )
        upsert_weekly_standing(session, snapshot)

    logger.info("Recomputed week %d standings players=%d", week, len(player_stats))
    return snapshot


__all__ = [
    "IngestSummary",
    "ingest_match_rows",
    "ingest_parsed_csv",
    "recompute_weekly_standings",
]
