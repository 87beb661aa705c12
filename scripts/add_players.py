#!/usr/bin/env python3
"""Register league players at the configured prior rating."""

from __future__ import annotations

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
from domain.errors import ValidationError
from repositories.players import add_player
from repositories.schema import ensure_league_schema

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Add players to the league.",
)


@app.command()
def add_players(
    names: Annotated[list[str], typer.Argument(help="Player names to register.")],
    skill_level: Annotated[
        str | None,
        typer.Option("--skill-level", help="Optional free-text skill level stored with each player."),
    ] = None,
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to the local league postgres instance."),
    ] = DEFAULT_DB_URL,
    config_path: Annotated[
        Path,
        typer.Option("--config", help="League TOML config file."),
    ] = DEFAULT_CONFIG_PATH,
) -> None:
    """Insert each name with the engine's initial rating; all or nothing."""
    config = load_league_config(config_path)
    prior = config.create_engine().initial_rating()

    engine = create_db_engine(db_url)
    ensure_league_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        try:
            players = [
                add_player(session, name=name, rating=prior, skill_level=skill_level)
                for name in names
            ]
            session.commit()
        except ValidationError as exc:
            session.rollback()
            raise typer.BadParameter(str(exc), param_hint="NAMES") from exc

    for player in players:
        typer.echo(f"added name={player.name} id={player.id} mu={player.mu:.3f} sigma={player.sigma:.3f}")


if __name__ == "__main__":
    app()
