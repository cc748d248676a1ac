from __future__ import annotations

from collections.abc import Sequence

from .models import (
    ALL_ROUNDER_ROLES,
    BATSMAN,
    BOWLER,
    PACE_STYLES,
    SPIN_STYLES,
    Player,
    TeamBalance,
)
from .scoring import overall_rating

ROLE_LABELS = {
    "BATSMAN": "Batsman",
    "BOWLER": "Bowler",
    "ALL_ROUNDER": "All-rounder",
    "BATTING_ALL_ROUNDER": "Batting all-rounder",
    "BOWLING_ALL_ROUNDER": "Bowling all-rounder",
    "WICKETKEEPER": "Wicketkeeper",
    "OTHER": "Utility player",
}


def role_label(player: Player) -> str:
    label = ROLE_LABELS.get(player.primary_role, player.primary_role.replace("_", " ").title())
    if player.is_wicketkeeper and player.primary_role != "WICKETKEEPER":
        label = f"{label} (wicketkeeper)"
    return label


def _average(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return round(sum(values) / len(values), 1)


def summarize_balance(players: Sequence[Player]) -> TeamBalance:
    return TeamBalance(
        batsmen=sum(1 for p in players if p.primary_role == BATSMAN and not p.is_keeper),
        bowlers=sum(1 for p in players if p.primary_role == BOWLER),
        all_rounders=sum(1 for p in players if p.primary_role in ALL_ROUNDER_ROLES),
        wicketkeepers=sum(1 for p in players if p.is_keeper),
        pace_options=sum(1 for p in players if p.bowling_style in PACE_STYLES),
        spin_options=sum(1 for p in players if p.bowling_style in SPIN_STYLES),
        left_hand_batsmen=sum(1 for p in players if p.batting_style == "LEFT_HAND"),
        right_hand_batsmen=sum(1 for p in players if p.batting_style == "RIGHT_HAND"),
        avg_batting=_average([p.batting_skill for p in players]),
        avg_bowling=_average([p.bowling_skill for p in players]),
        avg_fielding=_average([p.fielding_skill for p in players]),
        avg_overall=_average([overall_rating(p) for p in players]),
    )
