from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from .models import OpportunityReport, OpportunityRow, RosterEntry, SeasonSnapshot

logger = logging.getLogger(__name__)

DEFAULT_TARGET = 0.6
WELL_COVERED_ABOVE = 0.8

NEW = "NEW"
NEEDS_GAMES = "NEEDS_GAMES"
BELOW_TARGET = "BELOW_TARGET"
ON_TRACK = "ON_TRACK"
WELL_COVERED = "WELL_COVERED"

# NEW sits outside the ordering: it has no ratio to compare.
STATUS_ORDER = (NEEDS_GAMES, BELOW_TARGET, ON_TRACK, WELL_COVERED)


def opportunity_ratio(snapshot: SeasonSnapshot | None) -> float:
    if snapshot is None or snapshot.matches_available <= 0:
        return 0.0
    return snapshot.matches_played / snapshot.matches_available


def classify_opportunity(ratio: float, target: float = DEFAULT_TARGET, matches_available: int | None = None) -> str:
    if matches_available is not None and matches_available <= 0:
        return NEW
    if ratio < target - 0.2:
        return NEEDS_GAMES
    if ratio < target:
        return BELOW_TARGET
    if ratio > WELL_COVERED_ABOVE:
        return WELL_COVERED
    return ON_TRACK


def games_needed(snapshot: SeasonSnapshot | None, target: float = DEFAULT_TARGET) -> int:
    if snapshot is None:
        return 0
    return max(0, math.ceil(snapshot.matches_available * target) - snapshot.matches_played)


def opportunity_report(entries: Iterable[RosterEntry], target: float = DEFAULT_TARGET) -> OpportunityReport:
    rows: list[OpportunityRow] = []
    for entry in entries:
        snapshot = entry.snapshot
        available = snapshot.matches_available if snapshot is not None else 0
        played = snapshot.matches_played if snapshot is not None else 0
        ratio = opportunity_ratio(snapshot)
        rows.append(
            OpportunityRow(
                player_id=entry.player_id,
                player_name=entry.player.name,
                matches_available=available,
                matches_played=played,
                ratio=round(ratio, 3),
                status=classify_opportunity(ratio, target, matches_available=available),
                games_needed=games_needed(snapshot, target),
            )
        )

    rows.sort(key=lambda r: r.ratio)
    needing = tuple(r.player_name for r in rows if r.status == NEEDS_GAMES)
    if needing:
        recommendation = (
            f"{len(needing)} players need more playing time. "
            f"Consider prioritizing: {', '.join(needing)}"
        )
    else:
        recommendation = "All players are getting fair opportunities."

    logger.debug("Opportunity report: %d players, %d need games", len(rows), len(needing))
    return OpportunityReport(
        target_ratio=target,
        rows=tuple(rows),
        players_needing_games=needing,
        recommendation=recommendation,
    )
