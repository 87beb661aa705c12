#!/usr/bin/env python3
"""Show a stored weekly standings snapshot and that week's results."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated, Any

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.ratings.common import Winner
from repositories.matches import fetch_week_results
from repositories.standings import fetch_latest_weekly_standing, fetch_weekly_standing

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    help="Query weekly league standings.",
)

_SUPERLATIVES = (
    ("mostMatches", "most matches", "matches"),
    ("bestWinRate", "best win rate", "winRate"),
    ("mostPoints", "most points", "points"),
    ("leastPointsAgainst", "least points against", "pointsAgainst"),
)


def _format_superlative(entry: dict[str, Any] | None, value_key: str) -> str:
    if entry is None:
        return "-"
    value = entry[value_key]
    if value_key == "winRate":
        return f"{entry['name']} ({value:.1%})"
    return f"{entry['name']} ({value})"


@app.command()
def show_weekly_standings(
    week: Annotated[
        int | None,
        typer.Option("--week", help="Week to show. Defaults to the latest week with a snapshot."),
    ] = None,
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to the local league postgres instance."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Print superlatives, top players and match results for one week."""
    if week is not None and week < 1:
        raise typer.BadParameter("--week must be >= 1")

    session_factory = create_session_factory(create_db_engine(db_url))
    with session_factory() as session:
        standing = (
            fetch_latest_weekly_standing(session)
            if week is None
            else fetch_weekly_standing(session, week)
        )
        if standing is None:
            typer.echo("No weekly standings found." if week is None else f"No standings found for week={week}.")
            raise typer.Exit(code=1)
        results = fetch_week_results(session, standing.week)

    typer.echo(f"week={standing.week} updated_at={standing.updated_at.isoformat(sep=' ', timespec='seconds')}")

    typer.echo("Stats:")
    for key, label, value_key in _SUPERLATIVES:
        typer.echo(f"  {label:<20} {_format_superlative(standing.stats.get(key), value_key)}")

    typer.echo("Top players:")
    for index, player in enumerate(standing.top_players, start=1):
        typer.echo(
            f"  {index}. {player['name']:<20} rating={player['rating']:7.3f} "
            f"matches={player['matches_played']} wins={player['wins']} "
            f"pf={player['points_for']} pa={player['points_against']}"
        )

    typer.echo(f"Results ({len(results)} matches):")
    for result in results:
        marker1 = "*" if result.winner is Winner.TEAM1 else " "
        marker2 = "*" if result.winner is Winner.TEAM2 else " "
        typer.echo(
            f"  {result.match_code:<8} "
            f"{marker1}{' / '.join(result.team1_names)} {result.team1_score}"
            f" - {result.team2_score} {' / '.join(result.team2_names)}{marker2}"
        )


if __name__ == "__main__":
    app()
