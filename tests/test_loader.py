from pathlib import Path

import pytest

from squad_rating_tool.loader import (
    _to_bool,
    _to_int,
    load_performances,
    load_roster,
    normalize_role,
)

ROSTER_CSV = """Player ID,Player Name,Role,Batting,Bowling,Fielding,Bowls,Keeper,Captains Choice,Season,Available,Played,Form
p1,Asha Rao,batter,8,2,7,,no,1,2024,10,4,good
p2,Ben Iles,WK,6,1,8,,yes,,2024,10,10,
p3,Cal Dorsey,Bowling All-Rounder,5,7,6,medium fast,,,2024,10,7,Excellent
"""

PERFORMANCE_CSV = """player_id,match_id,season,date,importance,batted,runs,balls,4s,6s,not_out,bowled,overs,conceded,wickets,catches,potm
p1,m1,2024,2024-05-01,must win,yes,54*,40,5,1,yes,no,,,,1,yes
p3,m1,2024,2024-05-01,,no,,,,,,yes,3.4,21,2,0,
"""


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


class TestParsing:
    def test_to_int(self) -> None:
        assert _to_int("1,024") == 1024
        assert _to_int("54*") == 54
        assert _to_int("") == 0
        assert _to_int(None) == 0
        with pytest.raises(ValueError, match="Cannot parse integer"):
            _to_int("n/a")

    def test_to_bool(self) -> None:
        assert _to_bool("Yes") is True
        assert _to_bool("0") is False
        assert _to_bool("") is False
        with pytest.raises(ValueError, match="Cannot parse boolean"):
            _to_bool("maybe")

    def test_normalize_role(self) -> None:
        assert normalize_role("Batter") == "BATSMAN"
        assert normalize_role("wicket keeper") == "WICKETKEEPER"
        assert normalize_role("Bowling All-Rounder") == "BOWLING_ALL_ROUNDER"
        assert normalize_role("Coach") == "Coach"


class TestLoadRoster:
    def test_loads_players_and_snapshots(self, tmp_path: Path) -> None:
        entries = load_roster(_write(tmp_path, "roster.csv", ROSTER_CSV))

        assert [e.player_id for e in entries] == ["p1", "p2", "p3"]
        asha, ben, cal = entries
        assert asha.player.primary_role == "BATSMAN"
        assert asha.player.captain_choice == 1
        assert asha.player.experience_level == 5
        assert asha.form == "GOOD"
        assert asha.snapshot.matches_played == 4
        assert ben.player.primary_role == "WICKETKEEPER"
        assert ben.player.is_wicketkeeper is True
        assert ben.player.captain_choice is None
        assert ben.form == "UNKNOWN"
        assert cal.player.bowling_style == "MEDIUM_FAST"
        assert cal.player.bowling_skill == 7
        assert cal.form == "EXCELLENT"

    def test_roster_without_season_columns(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "roster.csv", "id,name,role,batting,bowling,fielding\np1,Asha,bat,5,5,5\n")
        assert load_roster(path)[0].snapshot is None

    def test_missing_required_columns(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "roster.csv", "id,name,batting\np1,Asha,5\n")
        with pytest.raises(ValueError, match="Missing required columns"):
            load_roster(path)


class TestLoadPerformances:
    def test_loads_rows_in_file_order(self, tmp_path: Path) -> None:
        rows = load_performances(_write(tmp_path, "perf.csv", PERFORMANCE_CSV))

        assert len(rows) == 2
        batting, season, date = rows[0]
        assert (season, date) == ("2024", "2024-05-01")
        assert batting.did_bat and batting.is_not_out and batting.is_man_of_match
        assert batting.runs_scored == 54
        assert batting.boundaries == 6
        assert batting.importance == "MUST_WIN"
        assert not batting.did_bowl

        bowling = rows[1][0]
        assert bowling.overs_bowled == pytest.approx(3.4)
        assert bowling.wickets_taken == 2
        assert bowling.importance == "REGULAR"
