#!/usr/bin/env python3
"""Ingest a match results CSV: update player ratings and weekly standings."""

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
from domain.errors import StoreError, ValidationError
from domain.matches import read_match_csv
from domain.pipeline import ingest_parsed_csv
from repositories.schema import ensure_league_schema

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Upload league match results.",
)


@app.command()
def upload_matches(
    csv_path: Annotated[
        Path,
        typer.Option(
            "--csv",
            help="CSV with week, match_id, player1..player4, team1_score, team2_score columns.",
        ),
    ],
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to the local league postgres instance."),
    ] = DEFAULT_DB_URL,
    config_path: Annotated[
        Path,
        typer.Option("--config", help="League TOML config file."),
    ] = DEFAULT_CONFIG_PATH,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Validate the CSV without writing anything."),
    ] = False,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Python logging level."),
    ] = "INFO",
) -> None:
    """Apply every valid row, then recompute standings once per week touched."""
    logging.basicConfig(level=log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = load_league_config(config_path)
    try:
        parsed = read_match_csv(csv_path)
    except (FileNotFoundError, ValidationError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--csv") from exc

    if dry_run:
        typer.echo(
            f"[dry-run] csv={csv_path.name} valid_rows={len(parsed.rows)} "
            f"invalid_rows={len(parsed.failures)}"
        )
        for failure in parsed.failures:
            typer.echo(f"invalid {failure.describe()}", err=True)
        if parsed.failures:
            raise typer.Exit(code=1)
        return

    engine = create_db_engine(db_url)
    ensure_league_schema(engine)
    session_factory = create_session_factory(engine)

    try:
        summary = ingest_parsed_csv(session_factory, parsed, config)
    except StoreError as exc:
        row = exc.row.describe() if exc.row is not None else "-"
        typer.echo(f"aborted processed={exc.processed} row={row} error={exc}", err=True)
        raise typer.Exit(code=2) from exc

    typer.echo(
        "completed "
        f"league={config.name} "
        f"algorithm={config.algorithm} "
        f"rows={summary.total_rows} "
        f"processed={summary.processed} "
        f"failed={summary.failed} "
        f"weeks_recomputed={','.join(str(week) for week in summary.weeks_recomputed) or '-'}"
    )
    for failure in summary.failures:
        typer.echo(f"failed {failure.describe()}", err=True)
    if summary.failures:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
