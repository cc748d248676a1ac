from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .config import DEFAULT_WEIGHTS
from .models import (
    WIN_FOCUSED,
    MatchContext,
    OpportunityReport,
    RatingCalculationResult,
    SplitResult,
    TeamComposition,
)
from .opportunity import opportunity_report
from .rating import recalculate_ratings
from .repository import RosterRepository
from .splitter import quick_split, weighted_balanced_split
from .strategy import SquadStrategy, get_strategy

logger = logging.getLogger(__name__)


class SquadEngine:
    """Read roster data once per call, then hand it to the pure allocators."""

    def __init__(
        self,
        repository: RosterRepository,
        weights: Mapping[str, Any] | None = None,
        strategy: SquadStrategy | None = None,
    ) -> None:
        self.repository = repository
        self.weights = dict(weights) if weights is not None else DEFAULT_WEIGHTS.copy()
        self.strategy = strategy or get_strategy(str(self.weights["strategy"]))

    def pick_squad(
        self,
        season_id: str | None = None,
        match_context: MatchContext | None = None,
        mode: str = WIN_FOCUSED,
        player_ids: Iterable[str] | None = None,
    ) -> TeamComposition:
        pool = self.repository.get_roster(season_id, player_ids)
        logger.debug("Picking a squad from %d players (season %s)", len(pool), season_id)
        return self.strategy.select(pool, mode, match_context, self.weights)

    def quick_split(self, player_ids: Iterable[str] | None = None, season_id: str | None = None) -> SplitResult:
        return quick_split(self.repository.get_roster(season_id, player_ids))

    def balanced_split(self, player_ids: Iterable[str] | None = None, season_id: str | None = None) -> SplitResult:
        return weighted_balanced_split(self.repository.get_roster(season_id, player_ids), self.weights)

    def opportunities(self, season_id: str | None = None) -> OpportunityReport:
        entries = self.repository.get_roster(season_id)
        return opportunity_report(entries, float(self.weights["opportunity_target"]))

    def recalculate_ratings(
        self,
        season_id: str | None = None,
        player_ids: Iterable[str] | None = None,
    ) -> list[RatingCalculationResult]:
        """Propose rating changes; nothing is written back."""
        entries = self.repository.get_roster(season_id, player_ids)
        lookback = int(self.weights["lookback_matches"])
        performances = {
            e.player_id: self.repository.get_performances(e.player_id, season_id, lookback) for e in entries
        }
        rated = {e.player_id: self.repository.get_rated_match_ids(e.player_id) for e in entries}
        return recalculate_ratings(entries, performances, self.weights, rated)
