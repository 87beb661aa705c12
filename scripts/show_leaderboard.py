#!/usr/bin/env python3
"""Show the lifetime leaderboard ordered by mu."""

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
from domain.ratings.common import Rating
from repositories.players import list_leaderboard

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    help="Query the league leaderboard.",
)


@app.command()
def show_leaderboard(
    min_matches: Annotated[
        int,
        typer.Option("--min-matches", help="Hide players with fewer matches played."),
    ] = 0,
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to the local league postgres instance."),
    ] = DEFAULT_DB_URL,
    config_path: Annotated[
        Path,
        typer.Option("--config", help="League TOML config file."),
    ] = DEFAULT_CONFIG_PATH,
) -> None:
    """Print every player with totals, mu, sigma and conservative rating."""
    if min_matches < 0:
        raise typer.BadParameter("--min-matches must be >= 0")

    config = load_league_config(config_path)
    session_factory = create_session_factory(create_db_engine(db_url))
    with session_factory() as session:
        players = [player for player in list_leaderboard(session) if player.matches_played >= min_matches]

    if not players:
        typer.echo(f"No players found with min_matches={min_matches}.")
        return

    typer.echo(f"league={config.name} players={len(players)} min_matches={min_matches}")
    for index, player in enumerate(players, start=1):
        conservative = Rating(player.mu, player.sigma).conservative(config.standings.conservative_z)
        typer.echo(
            f"{index:2d}. {player.name:<20} "
            f"matches={player.matches_played:3d} wins={player.wins:3d} "
            f"pf={player.points_for:4d} pa={player.points_against:4d} "
            f"mu={player.mu:7.3f} sigma={player.sigma:6.3f} rating={conservative:7.3f}"
        )


if __name__ == "__main__":
    app()
