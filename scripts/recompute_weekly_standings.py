#!/usr/bin/env python3
"""Recompute stored weekly standings from the recorded matches."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.config import DEFAULT_CONFIG_PATH, load_league_config
from domain.pipeline import recompute_weekly_standings as recompute_week
from repositories.matches import list_recorded_weeks
from repositories.schema import ensure_league_schema

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    help="Recompute weekly standings snapshots.",
)


@app.command()
def recompute_weekly_standings(
    week: Annotated[
        int | None,
        typer.Option("--week", help="Recompute only this week. Defaults to every recorded week."),
    ] = None,
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to the local league postgres instance."),
    ] = DEFAULT_DB_URL,
    config_path: Annotated[
        Path,
        typer.Option("--config", help="League TOML config file."),
    ] = DEFAULT_CONFIG_PATH,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Python logging level."),
    ] = "INFO",
) -> None:
    """Rebuild and upsert snapshots; weeks without matches are reported and skipped."""
    logging.basicConfig(level=log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if week is not None and week < 1:
        raise typer.BadParameter("--week must be >= 1")

    config = load_league_config(config_path)
    engine = create_db_engine(db_url)
    ensure_league_schema(engine)
    session_factory = create_session_factory(engine)

    if week is None:
        with session_factory() as session:
            weeks = list_recorded_weeks(session)
    else:
        weeks = [week]

    if not weeks:
        typer.echo("No recorded matches; nothing to recompute.")
        return

    recomputed = 0
    for target in weeks:
        snapshot = recompute_week(session_factory, target, standings=config.standings)
        if snapshot is None:
            typer.echo(f"week={target} skipped=no_matches")
            continue
        recomputed += 1
        leader = snapshot.top_players[0]
        typer.echo(
            f"week={target} players_top={len(snapshot.top_players)} "
            f"leader={leader.name} rating={leader.rating:.3f}"
        )

    typer.echo(f"completed weeks={len(weeks)} recomputed={recomputed}")


if __name__ == "__main__":
    app()
