from __future__ import annotations

import csv
import re
from pathlib import Path

from .models import PerformanceRecord, Player, RosterEntry, SeasonSnapshot

REQUIRED_ROSTER_COLUMNS = {
    "player_id": ["player_id", "id"],
    "name": ["name", "player_name", "player name"],
    "primary_role": ["primary_role", "role"],
    "batting_skill": ["batting_skill", "batting"],
    "bowling_skill": ["bowling_skill", "bowling"],
    "fielding_skill": ["fielding_skill", "fielding"],
}

OPTIONAL_ROSTER_COLUMNS = {
    "experience_level": ["experience_level", "experience"],
    "power_hitting": ["power_hitting", "power hitting"],
    "running_between_wickets": ["running_between_wickets", "running"],
    "pressure_handling": ["pressure_handling", "pressure"],
    "fitness_level": ["fitness_level", "fitness"],
    "injury_status": ["injury_status", "injury"],
    "batting_style": ["batting_style", "bats"],
    "bowling_style": ["bowling_style", "bowls"],
    "batting_position": ["batting_position", "position"],
    "captain_choice": ["captain_choice", "captains_choice"],
    "is_captain": ["is_captain", "captain"],
    "is_vice_captain": ["is_vice_captain", "vice_captain"],
    "is_wicketkeeper": ["is_wicketkeeper", "wicketkeeper", "keeper"],
    "reliability_score": ["reliability_score", "reliability"],
    "is_rookie": ["is_rookie", "rookie"],
    "exclude_from_auto_rating": ["exclude_from_auto_rating", "exclude_from_rating"],
    "rating_exclusion_reason": ["rating_exclusion_reason", "exclusion_reason"],
    "season_id": ["season_id", "season"],
    "matches_available": ["matches_available", "available"],
    "matches_played": ["matches_played", "played"],
    "current_form": ["current_form", "form"],
    "runs_scored": ["runs_scored", "runs"],
    "wickets_taken": ["wickets_taken", "wickets"],
    "catches": ["catches"],
}

REQUIRED_PERFORMANCE_COLUMNS = {
    "player_id": ["player_id", "id"],
    "match_id": ["match_id", "match"],
}

OPTIONAL_PERFORMANCE_COLUMNS = {
    "season_id": ["season_id", "season"],
    "match_date": ["match_date", "date"],
    "importance": ["importance", "match_importance"],
    "did_bat": ["did_bat", "batted"],
    "runs_scored": ["runs_scored", "runs"],
    "balls_faced": ["balls_faced", "balls"],
    "fours": ["fours", "4s"],
    "sixes": ["sixes", "6s"],
    "is_not_out": ["is_not_out", "not_out"],
    "did_bowl": ["did_bowl", "bowled"],
    "overs_bowled": ["overs_bowled", "overs"],
    "runs_conceded": ["runs_conceded", "conceded"],
    "wickets_taken": ["wickets_taken", "wickets"],
    "maidens": ["maidens"],
    "wides": ["wides"],
    "no_balls": ["no_balls", "noballs"],
    "catches": ["catches"],
    "run_outs": ["run_outs", "runouts"],
    "stumpings": ["stumpings"],
    "dropped_catches": ["dropped_catches", "drops"],
    "is_man_of_match": ["is_man_of_match", "man_of_match", "potm"],
}

ROLE_ALIASES = {
    "batsman": "BATSMAN",
    "batter": "BATSMAN",
    "bat": "BATSMAN",
    "bowler": "BOWLER",
    "bowl": "BOWLER",
    "all_rounder": "ALL_ROUNDER",
    "allrounder": "ALL_ROUNDER",
    "batting_all_rounder": "BATTING_ALL_ROUNDER",
    "bowling_all_rounder": "BOWLING_ALL_ROUNDER",
    "wicketkeeper": "WICKETKEEPER",
    "wicket_keeper": "WICKETKEEPER",
    "wk": "WICKETKEEPER",
    "keeper": "WICKETKEEPER",
    "other": "OTHER",
}


def _to_int(value: str | None) -> int:
    if value is None:
        return 0
    token = value.strip().replace(",", "")
    if token == "":
        return 0
    if token.endswith("*"):
        token = token[:-1]
    match = re.search(r"-?\d+(\.\d+)?", token)
    if not match:
        raise ValueError(f"Cannot parse integer from '{value}'")
    return int(float(match.group(0)))


def _to_float(value: str | None) -> float:
    if value is None:
        return 0.0
    token = value.strip().replace(",", "")
    if token == "":
        return 0.0
    match = re.search(r"-?\d+(\.\d+)?", token)
    if not match:
        raise ValueError(f"Cannot parse float from '{value}'")
    return float(match.group(0))


def _to_bool(value: str | None) -> bool:
    if value is None:
        return False
    token = value.strip().lower()
    if token in {"1", "true", "yes", "y"}:
        return True
    if token in {"", "0", "false", "no", "n"}:
        return False
    raise ValueError(f"Cannot parse boolean from '{value}'. Use true/false or yes/no.")


def _to_token(value: str | None, default: str) -> str:
    if value is None or value.strip() == "":
        return default
    return re.sub(r"[^A-Z0-9]+", "_", value.strip().upper()).strip("_")


def _normalize_column(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", name.strip().lower()).strip("_")


def _resolve_columns(
    fieldnames: list[str],
    required: dict[str, list[str]],
    optional: dict[str, list[str]],
) -> dict[str, str]:
    normalized_to_original = {_normalize_column(col): col for col in fieldnames}
    resolved: dict[str, str] = {}
    missing: list[str] = []

    for canonical, aliases in {**required, **optional}.items():
        actual = None
        for alias in aliases:
            normalized_alias = _normalize_column(alias)
            if normalized_alias in normalized_to_original:
                actual = normalized_to_original[normalized_alias]
                break
        if actual is not None:
            resolved[canonical] = actual
        elif canonical in required:
            missing.append(canonical)

    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    return resolved


def normalize_role(role: str) -> str:
    key = re.sub(r"[^a-z]+", "_", role.strip().lower()).strip("_")
    if key in ROLE_ALIASES:
        return ROLE_ALIASES[key]
    # Left as-is so validation reports the unknown role.
    return role.strip()


def load_roster(csv_path: str | Path) -> list[RosterEntry]:
    path = Path(csv_path)
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError("CSV has no header")
        columns = _resolve_columns(reader.fieldnames, REQUIRED_ROSTER_COLUMNS, OPTIONAL_ROSTER_COLUMNS)

        entries: list[RosterEntry] = []
        for row in reader:

            def cell(name: str) -> str | None:
                return row[columns[name]] if name in columns else None

            def rating(name: str) -> int:
                raw = cell(name)
                return 5 if raw is None or raw.strip() == "" else _to_int(raw)

            player_id = cell("player_id").strip()
            captain_choice = _to_int(cell("captain_choice"))
            player = Player(
                player_id=player_id,
                name=cell("name").strip(),
                primary_role=normalize_role(cell("primary_role")),
                batting_skill=_to_int(cell("batting_skill")),
                bowling_skill=_to_int(cell("bowling_skill")),
                fielding_skill=_to_int(cell("fielding_skill")),
                experience_level=rating("experience_level"),
                power_hitting=rating("power_hitting"),
                running_between_wickets=rating("running_between_wickets"),
                pressure_handling=rating("pressure_handling"),
                fitness_level=rating("fitness_level"),
                injury_status=_to_token(cell("injury_status"), "FIT"),
                batting_style=_to_token(cell("batting_style"), "RIGHT_HAND"),
                bowling_style=_to_token(cell("bowling_style"), "NONE"),
                batting_position=_to_token(cell("batting_position"), "MIDDLE_ORDER"),
                captain_choice=captain_choice or None,
                is_captain=_to_bool(cell("is_captain")),
                is_vice_captain=_to_bool(cell("is_vice_captain")),
                is_wicketkeeper=_to_bool(cell("is_wicketkeeper")),
                reliability_score=rating("reliability_score"),
                is_rookie=_to_bool(cell("is_rookie")),
                exclude_from_auto_rating=_to_bool(cell("exclude_from_auto_rating")),
                rating_exclusion_reason=(cell("rating_exclusion_reason") or "").strip() or None,
            )

            snapshot = None
            if "matches_available" in columns or "current_form" in columns:
                snapshot = SeasonSnapshot(
                    player_id=player_id,
                    season_id=(cell("season_id") or "").strip(),
                    matches_available=_to_int(cell("matches_available")),
                    matches_played=_to_int(cell("matches_played")),
                    current_form=_to_token(cell("current_form"), "UNKNOWN"),
                    runs_scored=_to_int(cell("runs_scored")),
                    wickets_taken=_to_int(cell("wickets_taken")),
                    catches=_to_int(cell("catches")),
                )
            entries.append(RosterEntry(player=player, snapshot=snapshot))

    return entries


def load_performances(csv_path: str | Path) -> list[tuple[PerformanceRecord, str, str]]:
    """Read (performance, season_id, match_date) rows in file order."""
    path = Path(csv_path)
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError("CSV has no header")
        columns = _resolve_columns(reader.fieldnames, REQUIRED_PERFORMANCE_COLUMNS, OPTIONAL_PERFORMANCE_COLUMNS)

        rows: list[tuple[PerformanceRecord, str, str]] = []
        for row in reader:

            def cell(name: str) -> str | None:
                return row[columns[name]] if name in columns else None

            record = PerformanceRecord(
                player_id=cell("player_id").strip(),
                match_id=cell("match_id").strip(),
                did_bat=_to_bool(cell("did_bat")),
                runs_scored=_to_int(cell("runs_scored")),
                balls_faced=_to_int(cell("balls_faced")),
                fours=_to_int(cell("fours")),
                sixes=_to_int(cell("sixes")),
                is_not_out=_to_bool(cell("is_not_out")),
                did_bowl=_to_bool(cell("did_bowl")),
                overs_bowled=_to_float(cell("overs_bowled")),
                runs_conceded=_to_int(cell("runs_conceded")),
                wickets_taken=_to_int(cell("wickets_taken")),
                maidens=_to_int(cell("maidens")),
                wides=_to_int(cell("wides")),
                no_balls=_to_int(cell("no_balls")),
                catches=_to_int(cell("catches")),
                run_outs=_to_int(cell("run_outs")),
                stumpings=_to_int(cell("stumpings")),
                dropped_catches=_to_int(cell("dropped_catches")),
                is_man_of_match=_to_bool(cell("is_man_of_match")),
                importance=_to_token(cell("importance"), "REGULAR"),
            )
            rows.append((record, (cell("season_id") or "").strip(), (cell("match_date") or "").strip()))

    return rows
