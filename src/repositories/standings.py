"""Persistence helpers for weekly standings snapshots."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from domain.standings import WeeklyStandingsSnapshot
from models import WeeklyStanding

# Dialects with INSERT ... ON CONFLICT DO UPDATE.
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert_weekly_standing(session: Session, snapshot: WeeklyStandingsSnapshot) -> WeeklyStanding:
    """Create or overwrite the snapshot stored for ``snapshot.week`` in one statement.

    A concurrent writer that stores the same week first is overwritten
    instead of tripping the unique key on ``week``.
    """
    dialect_name = session.get_bind().dialect.name
    try:
        dialect_insert = _UPSERT_INSERTS[dialect_name]
    except KeyError as exc:
        raise NotImplementedError(
            f"weekly standings upsert supports {sorted(_UPSERT_INSERTS)}, got {dialect_name}"
        ) from exc

    payload = snapshot.as_json()
    table = WeeklyStanding.__table__
    statement = dialect_insert(table).values(
        week=snapshot.week,
        top_players=payload["top_players"],
        stats=payload["stats"],
    )
    statement = statement.on_conflict_do_update(
        index_elements=[table.c.week],
        set_={
            "top_players": statement.excluded.top_players,
            "stats": statement.excluded.stats,
            "updated_at": datetime.now(UTC).replace(tzinfo=None),
        },
    )
    session.execute(statement)

    return session.execute(
        select(WeeklyStanding)
        .where(WeeklyStanding.week == snapshot.week)
        .execution_options(populate_existing=True)
    ).scalar_one()


def fetch_weekly_standing(session: Session, week: int) -> WeeklyStanding | None:
    return session.execute(
        select(WeeklyStanding).where(WeeklyStanding.week == week)
    ).scalar_one_or_none()


def fetch_latest_weekly_standing(session: Session) -> WeeklyStanding | None:
    return session.execute(
        select(WeeklyStanding).order_by(WeeklyStanding.week.desc()).limit(1)
    ).scalar_one_or_none()


def list_standing_weeks(session: Session) -> list[int]:
    rows = session.execute(select(WeeklyStanding.week).order_by(WeeklyStanding.week)).scalars().all()
    return [int(week) for week in rows]
