from __future__ import annotations

import dataclasses
import logging
import math
from collections.abc import Callable, Collection, Iterable, Mapping, Sequence
from typing import Any

from .config import DEFAULT_WEIGHTS
from .models import Player, PerformanceRecord, RatingCalculationResult, RatingChange, RosterEntry
from .performance import (
    batting_performance_score,
    bowling_performance_score,
    fielding_performance_score,
)

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 10

SKILL_FIELDS = {
    "BATTING": "batting_skill",
    "BOWLING": "bowling_skill",
    "FIELDING": "fielding_skill",
    "POWER_HITTING": "power_hitting",
    "RUNNING_BETWEEN_WICKETS": "running_between_wickets",
    "PRESSURE_HANDLING": "pressure_handling",
}

# skill type, scorer, reason noun
_DISCIPLINES: tuple[tuple[str, Callable[[PerformanceRecord], float], str], ...] = (
    ("BATTING", batting_performance_score, "innings"),
    ("BOWLING", bowling_performance_score, "bowling spells"),
    ("FIELDING", fielding_performance_score, "matches"),
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def blend_rating(current: int, average_score: float, weights: Mapping[str, Any] | None = None) -> int:
    cfg = weights if weights is not None else DEFAULT_WEIGHTS
    blended = current * float(cfg["weight_current"]) + average_score * float(cfg["weight_performance"])
    return _round_half_up(max(MIN_RATING, min(MAX_RATING, blended)))


def classify_form_score(average_score: float) -> str:
    if average_score >= 8:
        return "EXCELLENT"
    if average_score >= 6:
        return "GOOD"
    if average_score >= 4:
        return "AVERAGE"
    return "POOR"


def classify_form(performances: Sequence[PerformanceRecord], lookback: int = 5) -> str | None:
    """Label recent form from the better of each match's batting and bowling score.

    Matches where the player neither batted nor bowled are skipped; None means
    nothing in the window was scorable.
    """
    scores: list[float] = []
    for performance in performances[:lookback]:
        valid = [
            s
            for s in (batting_performance_score(performance), bowling_performance_score(performance))
            if s >= 0
        ]
        if valid:
            scores.append(max(valid))
    if not scores:
        return None
    return classify_form_score(_mean(scores))


def rated_match_ids(changes: Iterable[RatingChange]) -> set[str]:
    return {match_id for change in changes for match_id in change.match_ids}


def calculate_rating_changes(
    player: Player,
    performances: Sequence[PerformanceRecord],
    weights: Mapping[str, Any] | None = None,
    already_rated: Collection[str] = (),
) -> RatingCalculationResult:
    """Blend recent performance scores into the player's current ratings.

    `performances` must be ordered most-recent-first; only the lookback window
    is read. The result is computed against the ratings on `player`, so the
    caller applies earlier changes before calling again. `already_rated` holds
    the match ids recorded on previously applied changes: a window made only
    of those matches yields no change, which keeps a re-run idempotent.
    """
    cfg = weights if weights is not None else DEFAULT_WEIGHTS
    if player.exclude_from_auto_rating:
        logger.debug("Skipping %s: excluded from auto rating", player.player_id)
        return RatingCalculationResult(
            player_id=player.player_id,
            player_name=player.name,
            excluded=True,
            exclusion_reason=player.rating_exclusion_reason or "Excluded by admin",
        )

    lookback = int(cfg["lookback_matches"])
    window = [p for p in performances if p.player_id == player.player_id][:lookback]
    form = classify_form(window, lookback)
    window_ids = tuple(p.match_id for p in window)
    if window and already_rated and all(match_id in already_rated for match_id in window_ids):
        logger.debug("Skipping %s: window already rated", player.player_id)
        return RatingCalculationResult(player_id=player.player_id, player_name=player.name, form=form)

    changes: list[RatingChange] = []

    for skill_type, scorer, noun in _DISCIPLINES:
        scores = [s for s in (scorer(p) for p in window) if s >= 0]
        if not scores:
            continue
        average = _mean(scores)
        current = getattr(player, SKILL_FIELDS[skill_type])
        new_rating = blend_rating(current, average, cfg)
        if new_rating == current:
            continue
        changes.append(
            RatingChange(
                player_id=player.player_id,
                player_name=player.name,
                skill_type=skill_type,
                previous_rating=current,
                new_rating=new_rating,
                change_amount=new_rating - current,
                performance_score=round(average, 1),
                reason=f"Based on {len(scores)} recent {noun}",
                match_ids=window_ids,
            )
        )

    return RatingCalculationResult(
        player_id=player.player_id,
        player_name=player.name,
        changes=tuple(changes),
        form=form,
    )


def recalculate_ratings(
    entries: Iterable[RosterEntry],
    performances_by_player: Mapping[str, Sequence[PerformanceRecord]],
    weights: Mapping[str, Any] | None = None,
    rated_by_player: Mapping[str, Collection[str]] | None = None,
) -> list[RatingCalculationResult]:
    results: list[RatingCalculationResult] = []
    for entry in entries:
        performances = performances_by_player.get(entry.player_id, ())
        already_rated = rated_by_player.get(entry.player_id, ()) if rated_by_player else ()
        results.append(calculate_rating_changes(entry.player, performances, weights, already_rated))

    changed = sum(1 for r in results if r.changes)
    excluded = sum(1 for r in results if r.excluded)
    logger.info("Recalculated %d players: %d changed, %d excluded", len(results), changed, excluded)
    return results


def apply_rating_changes(player: Player, changes: Iterable[RatingChange]) -> Player:
    """Return a copy of `player` with each change's new rating written back."""
    updates: dict[str, int] = {}
    for change in changes:
        if change.player_id != player.player_id:
            raise ValueError(f"Rating change for {change.player_id} cannot be applied to {player.player_id}")
        field_name = SKILL_FIELDS.get(change.skill_type)
        if field_name is None:
            raise ValueError(f"Unknown skill type: {change.skill_type}")
        updates[field_name] = max(MIN_RATING, min(MAX_RATING, change.new_rating))
    if not updates:
        return player
    return dataclasses.replace(player, **updates)
