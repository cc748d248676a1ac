from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .config import DEFAULT_WEIGHTS
from .models import (
    ALL_ROUNDER,
    BALANCED,
    BATSMAN,
    BATTING_ALL_ROUNDER,
    BOWLER,
    BOWLING_ALL_ROUNDER,
    OPPORTUNITY_FOCUSED,
    SELECTION_MODES,
    WICKETKEEPER,
    WIN_FOCUSED,
    MatchContext,
    Player,
    RosterEntry,
)
from .opportunity import opportunity_ratio

# batting, bowling, fielding, experience
ROLE_WEIGHTS: dict[str, tuple[float, float, float, float]] = {
    BATSMAN: (0.50, 0.15, 0.20, 0.15),
    BOWLER: (0.15, 0.50, 0.20, 0.15),
    ALL_ROUNDER: (0.35, 0.35, 0.15, 0.15),
    BATTING_ALL_ROUNDER: (0.45, 0.25, 0.15, 0.15),
    BOWLING_ALL_ROUNDER: (0.25, 0.45, 0.15, 0.15),
    WICKETKEEPER: (0.40, 0.10, 0.35, 0.15),
}

FORM_BONUS = {
    "EXCELLENT": 3.0,
    "GOOD": 2.0,
    "AVERAGE": 1.0,
    "POOR": 0.0,
}
UNKNOWN_FORM_BONUS = 1.0

PITCH_STYLE_BONUS = {
    "SPIN_FRIENDLY": ("SPIN_OFF", "SPIN_LEG", "SPIN_LEFT_ARM"),
    "PACE_FRIENDLY": ("FAST", "MEDIUM_FAST"),
}


def overall_rating(player: Player) -> float:
    core = (player.batting_skill, player.bowling_skill, player.fielding_skill, player.experience_level)
    weights = ROLE_WEIGHTS.get(player.primary_role)
    if weights is None:
        rating = sum(core) / len(core)
    else:
        rating = sum(skill * weight for skill, weight in zip(core, weights))
    return round(rating, 1)


def skill_average(player: Player) -> float:
    skills = (
        player.batting_skill,
        player.bowling_skill,
        player.fielding_skill,
        player.power_hitting,
        player.running_between_wickets,
        player.pressure_handling,
    )
    return sum(skills) / len(skills)


def form_bonus(form: str | None) -> float:
    return FORM_BONUS.get(form or "", UNKNOWN_FORM_BONUS)


def injury_penalty(player: Player, weights: Mapping[str, Any]) -> float:
    if player.injury_status == "INJURED":
        return float(weights["injured_penalty"])
    if player.injury_status == "RECOVERING":
        return float(weights["recovering_penalty"])
    return 0.0


def pitch_bonus(player: Player, match_context: MatchContext | None, weights: Mapping[str, Any]) -> float:
    if match_context is None:
        return 0.0
    favoured = PITCH_STYLE_BONUS.get(match_context.pitch_type, ())
    if player.bowling_style in favoured:
        return float(weights["pitch_bonus"])
    return 0.0


def captain_choice_bonus(player: Player, weights: Mapping[str, Any]) -> float:
    if not player.captain_choice:
        return 0.0
    return float(weights["captain_choice_bonus"]) / player.captain_choice


def is_eligible(player: Player, mode: str) -> bool:
    return not (mode == OPPORTUNITY_FOCUSED and player.injury_status == "INJURED")


def selection_score(
    entry: RosterEntry,
    mode: str = WIN_FOCUSED,
    match_context: MatchContext | None = None,
    weights: Mapping[str, Any] | None = None,
) -> float | None:
    """Rank value of one player for one match under a selection mode.

    Returns None when the mode excludes the player outright (injured players
    in OPPORTUNITY_FOCUSED mode), so callers can drop them instead of ranking
    them last.
    """
    if mode not in SELECTION_MODES:
        raise ValueError(f"Unknown selection mode: {mode}")
    cfg = weights if weights is not None else DEFAULT_WEIGHTS
    player = entry.player
    if not is_eligible(player, mode):
        return None

    score = skill_average(player) + form_bonus(entry.form)

    ratio = opportunity_ratio(entry.snapshot)
    if mode == OPPORTUNITY_FOCUSED:
        score += (1.0 - ratio) * float(cfg["opportunity_weight"])
    elif mode == BALANCED:
        score += (1.0 - ratio) * float(cfg["opportunity_weight"]) * 0.5
        score -= injury_penalty(player, cfg)
    else:
        score -= injury_penalty(player, cfg)

    score += pitch_bonus(player, match_context, cfg)
    score += captain_choice_bonus(player, cfg)
    return round(score, 3)
