"""Tests for TOML-based league config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain.config import DEFAULT_CONFIG_PATH, load_league_config
from domain.ratings.openskill import DoublesOpenSkillCalculator
from domain.ratings.trueskill import DoublesTrueSkillCalculator
from domain.standings import StatsScope


def _write(tmp_path: Path, body: str) -> Path:
    config_path = tmp_path / "league.toml"
    config_path.write_text(body.strip())
    return config_path


def test_load_league_config_reads_all_sections(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path,
        """
[league]
name = "thursday_club"
description = "Thursday night doubles"

[rating]
algorithm = "openskill"

[openskill]
initial_mu = 30.0
initial_sigma = 7.5
beta = 4.0
kappa = 0.0002
tau = 0.0
balance = "yes"

[standings]
top_n = 5
min_matches_for_win_rate = 4
conservative_z = 2.0
stats_scope = "week"

[ingest]
max_attempts = 5
""",
    )

    config = load_league_config(config_path)

    assert config.name == "thursday_club"
    assert config.description == "Thursday night doubles"
    assert config.algorithm == "openskill"
    assert config.openskill.initial_mu == pytest.approx(30.0)
    assert config.openskill.kappa == pytest.approx(0.0002)
    assert config.openskill.balance is True
    assert config.standings.top_n == 5
    assert config.standings.min_matches_for_win_rate == 4
    assert config.standings.conservative_z == pytest.approx(2.0)
    assert config.standings.stats_scope is StatsScope.WEEK
    assert config.max_attempts == 5
    assert isinstance(config.create_engine(), DoublesOpenSkillCalculator)
    assert config.as_config_json()["balance"] is True


def test_minimal_config_falls_back_to_trueskill_defaults(tmp_path: Path) -> None:
    config = load_league_config(_write(tmp_path, '[league]\nname = "club"'))

    assert config.algorithm == "trueskill"
    assert config.trueskill.initial_sigma == pytest.approx(25.0 / 3.0)
    assert config.trueskill.tau == pytest.approx(0.0)
    assert config.standings.top_n == 3
    assert config.standings.stats_scope is StatsScope.CUMULATIVE
    assert config.max_attempts == 3
    engine = config.create_engine()
    assert isinstance(engine, DoublesTrueSkillCalculator)
    assert engine.initial_rating().mu == pytest.approx(25.0)


def test_bundled_default_config_loads() -> None:
    config = load_league_config(DEFAULT_CONFIG_PATH)
    assert config.name
    assert config.algorithm in ("trueskill", "openskill")


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ('[league]\ndescription = "no name"', r"\[league\]\.name is required"),
        ('[league]\nname = "x"\n[rating]\nalgorithm = "glicko"', r"\[rating\]\.algorithm must be one of"),
        ('[league]\nname = "x"\n[trueskill]\ninitial_sigma = 0.0', r"\[trueskill\]\.initial_sigma must be > 0"),
        ('[league]\nname = "x"\n[trueskill]\ntau = -0.1', r"\[trueskill\]\.tau must be >= 0"),
        ('[league]\nname = "x"\n[openskill]\nkappa = 0.0', r"\[openskill\]\.kappa must be > 0"),
        ('[league]\nname = "x"\n[openskill]\nbalance = "maybe"', r"\[openskill\]\.balance must be a boolean"),
        ('[league]\nname = "x"\n[standings]\ntop_n = 0', r"\[standings\]\.top_n must be >= 1"),
        ('[league]\nname = "x"\n[standings]\nstats_scope = "season"', r"\[standings\]\.stats_scope must be one of"),
        ('[league]\nname = "x"\n[ingest]\nmax_attempts = 0', r"\[ingest\]\.max_attempts must be >= 1"),
        ('[league]\nname = "x"\n[standings]\ntop_n = "three"', r"\[standings\]\.top_n must be an integer"),
        ('[league]\nname = "x"\n[standings]\ntop_n = 2.5', r"\[standings\]\.top_n must be an integer"),
        ('[league]\nname = "x"\n[trueskill]\nbeta = "wide"', r"\[trueskill\]\.beta must be a number"),
        ('[league]\nname = "x"\n[openskill]\nkappa = [1.0]', r"\[openskill\]\.kappa must be a number"),
        ('[league]\nname = "x"\n[ingest]\nmax_attempts = true', r"\[ingest\]\.max_attempts must be an integer"),
    ],
)
def test_invalid_config_values_raise(tmp_path: Path, body: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        load_league_config(_write(tmp_path, body))


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        load_league_config(tmp_path / "missing.toml")


def test_config_directory_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(IsADirectoryError, match="not a file"):
        load_league_config(tmp_path)
