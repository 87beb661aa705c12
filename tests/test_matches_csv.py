"""Tests for match CSV parsing and row validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain.errors import ValidationError
from domain.matches import parse_match_csv, parse_match_row, read_match_csv
from domain.ratings.common import Winner, winner_from_scores


def _record(**overrides: object) -> dict[str, object]:
    record: dict[str, object] = {
        "week": "1",
        "match_code": "M1",
        "player1": "Alice",
        "player2": "Bob",
        "player3": "Carol",
        "player4": "Dave",
        "team1_score": "21",
        "team2_score": "18",
    }
    record.update(overrides)
    return record


def test_parse_match_row_derives_winner_from_scores() -> None:
    row = parse_match_row(_record(team1_score="12", team2_score="21"), line_number=2)

    assert row.winner is Winner.TEAM2
    assert row.team1_names == ("Alice", "Bob")
    assert row.team2_names == ("Carol", "Dave")
    assert row.describe() == "line=2 week=1 match=M1"


def test_winner_from_scores_rejects_ties() -> None:
    assert winner_from_scores(21, 19) is Winner.TEAM1
    assert winner_from_scores(19, 21) is Winner.TEAM2
    with pytest.raises(ValidationError, match="tied score 21-21"):
        winner_from_scores(21, 21)


def test_tied_row_is_rejected_instead_of_defaulting_to_team1() -> None:
    with pytest.raises(ValidationError, match="tied score"):
        parse_match_row(_record(team1_score="20", team2_score="20"), line_number=2)


def test_winner_team_must_agree_with_scores() -> None:
    assert parse_match_row(_record(winner_team="1"), line_number=2).winner is Winner.TEAM1
    with pytest.raises(ValidationError, match="contradicts score 21-18"):
        parse_match_row(_record(winner_team="2"), line_number=2)
    with pytest.raises(ValidationError, match="winner_team must be 1 or 2"):
        parse_match_row(_record(winner_team="3"), line_number=2)


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"week": "0"}, "week must be >= 1"),
        ({"week": "first"}, "week must be an integer"),
        ({"match_code": "  "}, "match_id is required"),
        ({"player3": ""}, "player3 is required"),
        ({"player4": "alice"}, "4 distinct players"),
        ({"team2_score": "-1"}, "team2_score must be >= 0"),
        ({"team1_score": "21.5"}, "team1_score must be an integer"),
        ({"team1_score": "--5"}, "team1_score must be an integer"),
        ({"team2_score": "2\u00b2"}, "team2_score must be an integer"),
        ({"week": "\u0661"}, "week must be an integer"),
    ],
)
def test_invalid_rows_are_rejected(overrides: dict[str, object], message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        parse_match_row(_record(**overrides), line_number=2)


def test_player_names_are_whitespace_normalised() -> None:
    row = parse_match_row(_record(player1="  Mary   Jane "), line_number=2)
    assert row.player1 == "Mary Jane"


def test_parse_match_csv_accepts_camel_case_headers_and_collects_failures() -> None:
    text = (
        "week,matchId,player1,player2,player3,player4,team1Score,team2Score,winnerTeam\n"
        "1,M1,Alice,Bob,Carol,Dave,21,15,1\n"
        "1,M2,Alice,Carol,Bob,Dave,19,19,\n"
        "\n"
        "2,M1,Erin,Bob,Carol,Frank,10,21,2\n"
    )

    parsed = parse_match_csv(text)

    assert [(row.week, row.match_code) for row in parsed.rows] == [(1, "M1"), (2, "M1")]
    assert parsed.rows[1].winner is Winner.TEAM2
    assert len(parsed.failures) == 1
    failure = parsed.failures[0]
    assert failure.line_number == 3
    assert failure.week == 1
    assert failure.match_code == "M2"
    assert "tied score" in failure.reason


def test_malformed_score_cells_fail_only_their_row() -> None:
    text = (
        "week,match_id,player1,player2,player3,player4,team1_score,team2_score\n"
        "1,M1,Alice,Bob,Carol,Dave,--5,21\n"
        "1,M2,Alice,Carol,Bob,Dave,21,5\n"
        "1,M3,Bob,Dave,Alice,Carol,2\u00b2,15\n"
    )

    parsed = parse_match_csv(text)

    assert [row.match_code for row in parsed.rows] == ["M2"]
    assert [failure.line_number for failure in parsed.failures] == [2, 4]
    assert all("team1_score must be an integer" in failure.reason for failure in parsed.failures)


def test_parse_match_csv_requires_all_columns() -> None:
    text = "week,match_id,player1,player2,player3,team1_score,team2_score\n1,M1,A,B,C,21,10\n"
    with pytest.raises(ValidationError, match="missing required columns: player4"):
        parse_match_csv(text)


def test_read_match_csv_strips_bom(tmp_path: Path) -> None:
    csv_path = tmp_path / "week1.csv"
    csv_path.write_text(
        "week,match_id,player1,player2,player3,player4,team1_score,team2_score\n"
        "1,M1,Alice,Bob,Carol,Dave,21,15\n",
        encoding="utf-8-sig",
    )

    parsed = read_match_csv(csv_path)

    assert len(parsed.rows) == 1
    assert parsed.failures == ()


def test_read_match_csv_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Match CSV not found"):
        read_match_csv(tmp_path / "missing.csv")
