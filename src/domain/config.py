"""Load the league configuration from a TOML file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
import tomllib

from domain.ratings import registry
from domain.ratings.openskill.calculator import OpenSkillParameters
from domain.ratings.protocol import DoublesRatingEngine
from domain.ratings.trueskill.calculator import TrueSkillParameters
from domain.standings import StandingsParameters, StatsScope

ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = ROOT_DIR / "configs" / "league.toml"


@dataclass(frozen=True)
class LeagueConfig:
    """Configuration for one league: rating engine, standings and ingest settings."""

    file_path: Path | None
    name: str
    description: str | None
    algorithm: str
    trueskill: TrueSkillParameters
    openskill: OpenSkillParameters
    standings: StandingsParameters
    max_attempts: int = 3

    @property
    def rating_parameters(self) -> TrueSkillParameters | OpenSkillParameters:
        if self.algorithm == "openskill":
            return self.openskill
        return self.trueskill

    def create_engine(self) -> DoublesRatingEngine:
        return registry.create(self.algorithm, self.rating_parameters)

    def as_config_json(self) -> dict[str, Any]:
        params = self.rating_parameters
        payload: dict[str, Any] = {
            "algorithm": self.algorithm,
            "initial_mu": params.initial_mu,
            "initial_sigma": params.initial_sigma,
            "beta": params.beta,
            "tau": params.tau,
            "top_n": self.standings.top_n,
            "min_matches_for_win_rate": self.standings.min_matches_for_win_rate,
            "conservative_z": self.standings.conservative_z,
            "stats_scope": self.standings.stats_scope.value,
            "max_attempts": self.max_attempts,
        }
        if isinstance(params, OpenSkillParameters):
            payload["kappa"] = params.kappa
            payload["balance"] = params.balance
        return payload


def default_league_config() -> LeagueConfig:
    return LeagueConfig(
        file_path=None,
        name="league",
        description=None,
        algorithm="trueskill",
        trueskill=TrueSkillParameters(),
        openskill=OpenSkillParameters(),
        standings=StandingsParameters(),
    )


def load_league_config(file_path: Path) -> LeagueConfig:
    """Load and validate one league TOML config file."""
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")
    if not file_path.is_file():
        raise IsADirectoryError(f"Config path is not a file: {file_path}")

    with file_path.open("rb") as file:
        raw = tomllib.load(file)

    league_raw = raw.get("league", {})
    rating_raw = raw.get("rating", {})
    trueskill_raw = raw.get("trueskill", {})
    openskill_raw = raw.get("openskill", {})
    standings_raw = raw.get("standings", {})
    ingest_raw = raw.get("ingest", {})

    name = str(league_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [league].name is required")

    description_value = league_raw.get("description")
    description = None if description_value is None else str(description_value)

    algorithm = str(rating_raw.get("algorithm", "trueskill")).strip().lower()
    if algorithm not in registry.available():
        raise ValueError(
            f"{file_path}: [rating].algorithm must be one of {registry.available()}, got {algorithm!r}"
        )

    trueskill_params = TrueSkillParameters(
        initial_mu=_read_float(
            trueskill_raw, "initial_mu", 25.0, file_path=file_path, section="trueskill"
        ),
        initial_sigma=_read_float(
            trueskill_raw, "initial_sigma", 25.0 / 3.0, file_path=file_path, section="trueskill"
        ),
        beta=_read_float(
            trueskill_raw, "beta", 25.0 / 6.0, file_path=file_path, section="trueskill"
        ),
        tau=_read_float(trueskill_raw, "tau", 0.0, file_path=file_path, section="trueskill"),
    )
    _validate_gaussian(file_path=file_path, section="trueskill", parameters=trueskill_params)

    openskill_params = OpenSkillParameters(
        initial_mu=_read_float(
            openskill_raw, "initial_mu", 25.0, file_path=file_path, section="openskill"
        ),
        initial_sigma=_read_float(
            openskill_raw, "initial_sigma", 25.0 / 3.0, file_path=file_path, section="openskill"
        ),
        beta=_read_float(
            openskill_raw, "beta", 25.0 / 6.0, file_path=file_path, section="openskill"
        ),
        kappa=_read_float(
            openskill_raw, "kappa", 0.0001, file_path=file_path, section="openskill"
        ),
        tau=_read_float(openskill_raw, "tau", 0.0, file_path=file_path, section="openskill"),
        balance=_parse_bool(
            openskill_raw.get("balance", False), file_path=file_path, section="openskill", key="balance"
        ),
    )
    _validate_gaussian(file_path=file_path, section="openskill", parameters=openskill_params)
    if openskill_params.kappa <= 0.0:
        raise ValueError(f"{file_path}: [openskill].kappa must be > 0")

    scope_raw = str(standings_raw.get("stats_scope", StatsScope.CUMULATIVE.value)).strip().lower()
    try:
        stats_scope = StatsScope(scope_raw)
    except ValueError as exc:
        raise ValueError(
            f"{file_path}: [standings].stats_scope must be one of "
            f"{[scope.value for scope in StatsScope]}, got {scope_raw!r}"
        ) from exc

    standings = StandingsParameters(
        top_n=_read_int(standings_raw, "top_n", 3, file_path=file_path, section="standings"),
        min_matches_for_win_rate=_read_int(
            standings_raw, "min_matches_for_win_rate", 3, file_path=file_path, section="standings"
        ),
        conservative_z=_read_float(
            standings_raw, "conservative_z", 3.0, file_path=file_path, section="standings"
        ),
        stats_scope=stats_scope,
    )
    if standings.top_n < 1:
        raise ValueError(f"{file_path}: [standings].top_n must be >= 1")
    if standings.min_matches_for_win_rate < 1:
        raise ValueError(f"{file_path}: [standings].min_matches_for_win_rate must be >= 1")
    if standings.conservative_z <= 0.0:
        raise ValueError(f"{file_path}: [standings].conservative_z must be > 0")

    max_attempts = _read_int(ingest_raw, "max_attempts", 3, file_path=file_path, section="ingest")
    if max_attempts < 1:
        raise ValueError(f"{file_path}: [ingest].max_attempts must be >= 1")

    return LeagueConfig(
        file_path=file_path,
        name=name,
        description=description,
        algorithm=algorithm,
        trueskill=trueskill_params,
        openskill=openskill_params,
        standings=standings,
        max_attempts=max_attempts,
    )


def _parse_bool(value: Any, *, file_path: Path, section: str, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in ("true", "1", "yes", "on"):
            return True
        if normalized in ("false", "0", "no", "off"):
            return False
    raise ValueError(f"{file_path}: [{section}].{key} must be a boolean")


def _read_float(raw: dict[str, Any], key: str, default: float, *, file_path: Path, section: str) -> float:
    value = raw.get(key, default)
    if isinstance(value, bool):
        raise ValueError(f"{file_path}: [{section}].{key} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{file_path}: [{section}].{key} must be a number, got {value!r}") from exc


def _read_int(raw: dict[str, Any], key: str, default: int, *, file_path: Path, section: str) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"{file_path}: [{section}].{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{file_path}: [{section}].{key} must be an integer, got {value!r}") from exc


def _validate_gaussian(
    *,
    file_path: Path,
    section: str,
    parameters: TrueSkillParameters | OpenSkillParameters,
) -> None:
    if parameters.initial_sigma <= 0.0:
        raise ValueError(f"{file_path}: [{section}].initial_sigma must be > 0")
    if parameters.beta <= 0.0:
        raise ValueError(f"{file_path}: [{section}].beta must be > 0")
    if parameters.tau < 0.0:
        raise ValueError(f"{file_path}: [{section}].tau must be >= 0")
