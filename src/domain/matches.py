"""Match rows parsed from league CSV uploads."""

from __future__ import annotations

import csv
from dataclasses import dataclass
import io
import re
from pathlib import Path
from typing import Any, Iterable, Mapping

from domain.errors import ValidationError
from domain.ratings.common import Winner, winner_from_scores

# Canonical column name -> accepted header spellings.
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "week": ("week",),
    "match_code": ("match_id", "matchId", "match_code"),
    "player1": ("player1",),
    "player2": ("player2",),
    "player3": ("player3",),
    "player4": ("player4",),
    "team1_score": ("team1_score", "team1Score"),
    "team2_score": ("team2_score", "team2Score"),
}
OPTIONAL_ALIASES: dict[str, tuple[str, ...]] = {
    "winner_team": ("winner_team", "winnerTeam"),
}

# Optional minus sign, ASCII digits only.
_INTEGER_PATTERN = re.compile(r"-?[0-9]+")


@dataclass(frozen=True)
class MatchRow:
    """One validated doubles match: team1 is player1/player2, team2 is player3/player4."""

    line_number: int
    week: int
    match_code: str
    player1: str
    player2: str
    player3: str
    player4: str
    team1_score: int
    team2_score: int

    @property
    def winner(self) -> Winner:
        return winner_from_scores(self.team1_score, self.team2_score)

    @property
    def team1_names(self) -> tuple[str, str]:
        return self.player1, self.player2

    @property
    def team2_names(self) -> tuple[str, str]:
        return self.player3, self.player4

    @property
    def player_names(self) -> tuple[str, str, str, str]:
        return self.player1, self.player2, self.player3, self.player4

    def describe(self) -> str:
        return f"line={self.line_number} week={self.week} match={self.match_code}"


@dataclass(frozen=True)
class RowFailure:
    """A row that was rejected, with enough context to find it in the upload."""

    line_number: int
    week: int | None
    match_code: str | None
    reason: str

    def describe(self) -> str:
        return (
            f"line={self.line_number} week={self.week if self.week is not None else '?'} "
            f"match={self.match_code or '?'}: {self.reason}"
        )


@dataclass(frozen=True)
class ParsedMatchCsv:
    rows: tuple[MatchRow, ...]
    failures: tuple[RowFailure, ...]


def _parse_int(name: str, raw: Any, *, minimum: int) -> int:
    if isinstance(raw, bool):
        raise ValidationError(f"{name} must be an integer")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and _INTEGER_PATTERN.fullmatch(raw.strip()):
        value = int(raw.strip())
    else:
        raise ValidationError(f"{name} must be an integer, got {raw!r}")
    if value < minimum:
        raise ValidationError(f"{name} must be >= {minimum}, got {value}")
    return value


def _parse_name(name: str, raw: Any) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError(f"{name} is required")
    return " ".join(raw.split())


def parse_match_row(record: Mapping[str, Any], *, line_number: int) -> MatchRow:
    """Validate one canonical-keyed record into a ``MatchRow``.

    The winner always comes from the scores; a ``winner_team`` value that
    disagrees with them is rejected rather than preferred.
    """
    week = _parse_int("week", record.get("week"), minimum=1)

    match_code_raw = record.get("match_code")
    match_code = str(match_code_raw).strip() if match_code_raw is not None else ""
    if not match_code:
        raise ValidationError("match_id is required")

    names = [_parse_name(key, record.get(key)) for key in ("player1", "player2", "player3", "player4")]
    lowered = [value.casefold() for value in names]
    if len(set(lowered)) != 4:
        raise ValidationError(f"match needs 4 distinct players, got {names}")

    team1_score = _parse_int("team1_score", record.get("team1_score"), minimum=0)
    team2_score = _parse_int("team2_score", record.get("team2_score"), minimum=0)
    winner = winner_from_scores(team1_score, team2_score)

    winner_raw = record.get("winner_team")
    if winner_raw is not None and str(winner_raw).strip():
        declared = _parse_int("winner_team", winner_raw, minimum=1)
        if declared not in (Winner.TEAM1, Winner.TEAM2):
            raise ValidationError(f"winner_team must be 1 or 2, got {declared}")
        if declared != winner:
            raise ValidationError(
                f"winner_team={declared} contradicts score {team1_score}-{team2_score}"
            )

    return MatchRow(
        line_number=line_number,
        week=week,
        match_code=match_code,
        player1=names[0],
        player2=names[1],
        player3=names[2],
        player4=names[3],
        team1_score=team1_score,
        team2_score=team2_score,
    )


def _resolve_columns(fieldnames: Iterable[str] | None) -> dict[str, str]:
    present = [name.strip() for name in (fieldnames or [])]
    resolved: dict[str, str] = {}
    missing: list[str] = []
    for canonical, aliases in COLUMN_ALIASES.items():
        header = next((alias for alias in aliases if alias in present), None)
        if header is None:
            missing.append(aliases[0])
        else:
            resolved[canonical] = header
    if missing:
        raise ValidationError(f"Match CSV missing required columns: {', '.join(missing)}")
    for canonical, aliases in OPTIONAL_ALIASES.items():
        header = next((alias for alias in aliases if alias in present), None)
        if header is not None:
            resolved[canonical] = header
    return resolved


def parse_match_csv(text: str) -> ParsedMatchCsv:
    """Parse a whole upload; bad rows become failures instead of aborting the file."""
    reader = csv.DictReader(io.StringIO(text))
    if reader.fieldnames is not None:
        reader.fieldnames = [name.strip() for name in reader.fieldnames]
    columns = _resolve_columns(reader.fieldnames)

    rows: list[MatchRow] = []
    failures: list[RowFailure] = []
    for raw in reader:
        line_number = reader.line_num
        if not any((value or "").strip() for value in raw.values() if isinstance(value, str)):
            continue
        record = {canonical: raw.get(header) for canonical, header in columns.items()}
        try:
            rows.append(parse_match_row(record, line_number=line_number))
        except ValidationError as exc:
            failures.append(
                RowFailure(
                    line_number=line_number,
                    week=_safe_week(record.get("week")),
                    match_code=(record.get("match_code") or "").strip() or None,
                    reason=str(exc),
                )
            )
    return ParsedMatchCsv(rows=tuple(rows), failures=tuple(failures))


def read_match_csv(path: Path) -> ParsedMatchCsv:
    if not path.exists():
        raise FileNotFoundError(f"Match CSV not found: {path}")
    return parse_match_csv(path.read_text(encoding="utf-8-sig"))


def _safe_week(raw: Any) -> int | None:
    try:
        return _parse_int("week", raw, minimum=1)
    except ValidationError:
        return None


__all__ = [
    "MatchRow",
    "ParsedMatchCsv",
    "RowFailure",
    "parse_match_csv",
    "parse_match_row",
    "read_match_csv",
]
