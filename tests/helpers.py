from __future__ import annotations

from typing import Any

from squad_rating_tool.models import PerformanceRecord, Player, RosterEntry, SeasonSnapshot


def make_player(player_id: str, role: str = "BATSMAN", skill: int = 5, **overrides: Any) -> Player:
    """Player whose batting, bowling, fielding and experience all equal `skill`."""
    fields: dict[str, Any] = {
        "player_id": player_id,
        "name": overrides.pop("name", player_id.title()),
        "primary_role": role,
        "batting_skill": skill,
        "bowling_skill": skill,
        "fielding_skill": skill,
        "experience_level": skill,
    }
    fields.update(overrides)
    return Player(**fields)


def make_entry(
    player_id: str,
    role: str = "BATSMAN",
    skill: int = 5,
    available: int | None = None,
    played: int = 0,
    form: str = "UNKNOWN",
    season_id: str = "2024",
    **overrides: Any,
) -> RosterEntry:
    player = make_player(player_id, role, skill, **overrides)
    snapshot = None
    if available is not None:
        snapshot = SeasonSnapshot(
            player_id=player_id,
            season_id=season_id,
            matches_available=available,
            matches_played=played,
            current_form=form,
        )
    elif form != "UNKNOWN":
        snapshot = SeasonSnapshot(player_id=player_id, season_id=season_id, current_form=form)
    return RosterEntry(player=player, snapshot=snapshot)


def make_performance(player_id: str, match_id: str, **overrides: Any) -> PerformanceRecord:
    return PerformanceRecord(player_id=player_id, match_id=match_id, **overrides)


def century(player_id: str, match_id: str, **overrides: Any) -> PerformanceRecord:
    """Unbeaten 100 off 100 with player of the match: batting score 9.0."""
    fields: dict[str, Any] = {
        "did_bat": True,
        "runs_scored": 100,
        "balls_faced": 100,
        "is_not_out": True,
        "is_man_of_match": True,
    }
    fields.update(overrides)
    return PerformanceRecord(player_id=player_id, match_id=match_id, **fields)


def standard_pool() -> list[RosterEntry]:
    """Thirteen players: two keepers, five bowlers, two all-rounders, four batsmen."""
    return [
        make_entry("wk1", "WICKETKEEPER", 8, batting_position="TOP_ORDER"),
        make_entry("wk2", "WICKETKEEPER", 6),
        make_entry("bat1", "BATSMAN", 9, bowling_skill=2, batting_position="OPENER"),
        make_entry("bat2", "BATSMAN", 8, bowling_skill=2, batting_position="OPENER"),
        make_entry("bat3", "BATSMAN", 7, bowling_skill=3),
        make_entry("bat4", "BATSMAN", 6, bowling_skill=2),
        make_entry("ar1", "ALL_ROUNDER", 7, bowling_style="MEDIUM"),
        make_entry("ar2", "BATTING_ALL_ROUNDER", 6, bowling_style="SPIN_OFF"),
        make_entry("bowl1", "BOWLER", 8, batting_skill=3, bowling_style="FAST", batting_position="LOWER_ORDER"),
        make_entry("bowl2", "BOWLER", 7, batting_skill=3, bowling_style="MEDIUM_FAST", batting_position="LOWER_ORDER"),
        make_entry("bowl3", "BOWLER", 6, batting_skill=2, bowling_style="SPIN_LEG", batting_position="LOWER_ORDER"),
        make_entry("bowl4", "BOWLER", 5, batting_skill=2, bowling_style="SPIN_OFF", batting_position="LOWER_ORDER"),
        make_entry("bowl5", "BOWLER", 4, batting_skill=2, bowling_style="MEDIUM", batting_position="LOWER_ORDER"),
    ]
