"""Shared fixtures for store-backed league tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db import create_db_engine, create_session_factory
from domain.ratings.common import Rating
from repositories.players import add_player
from repositories.schema import ensure_league_schema

PRIOR = Rating(mu=25.0, sigma=25.0 / 3.0)


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    engine = create_db_engine(f"sqlite:///{tmp_path / 'league.db'}")
    ensure_league_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine: Engine) -> sessionmaker[Session]:
    return create_session_factory(db_engine)


@pytest.fixture
def roster(session_factory: sessionmaker[Session]) -> dict[str, str]:
    """Six players at the default prior, keyed by name -> id."""
    names = ["Alice", "Bob", "Carol", "Dave", "Erin", "Frank"]
    with session_factory() as session, session.begin():
        players = [add_player(session, name=name, rating=PRIOR) for name in names]
        return {player.name: player.id for player in players}
