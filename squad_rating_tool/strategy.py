from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol

from .config import DEFAULT_WEIGHTS
from .models import MatchContext, RosterEntry, TeamComposition
from .scoring import is_eligible, selection_score
from .selector import SelectionEntry, bowling_quota, build_composition, is_bowling_capable, select_match_squad
from .validation import validate_pool

logger = logging.getLogger(__name__)

# Ordered player ids, e.g. parsed from a generative model's reply.
SuggestionSource = Callable[[Sequence[RosterEntry], str, MatchContext | None], Sequence[str]]


class SquadStrategy(Protocol):
    def select(
        self,
        pool: Sequence[RosterEntry],
        mode: str,
        match_context: MatchContext | None,
        weights: Mapping[str, Any],
    ) -> TeamComposition: ...


class GreedySquadStrategy:
    """The deterministic allocator."""

    def select(
        self,
        pool: Sequence[RosterEntry],
        mode: str,
        match_context: MatchContext | None,
        weights: Mapping[str, Any],
    ) -> TeamComposition:
        return select_match_squad(pool, mode, match_context, weights=weights)


def validate_composition(
    player_ids: Sequence[str],
    pool: Sequence[RosterEntry],
    target_size: int,
    weights: Mapping[str, Any] | None = None,
    mode: str | None = None,
) -> list[str]:
    """List every way a proposed XI breaks the allocator's invariants."""
    cfg = weights if weights is not None else DEFAULT_WEIGHTS
    by_id = {e.player_id: e for e in pool}
    problems: list[str] = []

    unknown = [pid for pid in player_ids if pid not in by_id]
    if unknown:
        problems.append(f"Players not in the pool: {', '.join(unknown)}")
    if len(set(player_ids)) != len(player_ids):
        problems.append("Players selected more than once")

    # Players the mode excludes and spare keepers can never be in the XI.
    eligible = [e.player for e in pool if mode is None or is_eligible(e.player, mode)]
    pool_keepers = sum(1 for p in eligible if p.is_keeper)
    expected = min(target_size, len(eligible) - max(pool_keepers - 1, 0))
    if len(player_ids) != expected:
        problems.append(f"Expected {expected} players, got {len(player_ids)}")

    chosen = [by_id[pid].player for pid in dict.fromkeys(player_ids) if pid in by_id]
    if mode is not None:
        ineligible = [p.name for p in chosen if not is_eligible(p, mode)]
        if ineligible:
            problems.append(f"Players not eligible in {mode} mode: {', '.join(ineligible)}")

    keepers = sum(1 for p in chosen if p.is_keeper)
    if pool_keepers and keepers != 1:
        problems.append(f"Expected exactly one wicketkeeper, got {keepers}")

    quota = bowling_quota(target_size, cfg)
    available_bowling = sum(1 for p in eligible if not p.is_keeper and is_bowling_capable(p, cfg))
    available_bowling += min(1, sum(1 for p in eligible if p.is_keeper and is_bowling_capable(p, cfg)))
    bowling = sum(1 for p in chosen if is_bowling_capable(p, cfg))
    if bowling < min(quota, available_bowling):
        problems.append(f"Only {bowling} bowling options, at least {quota} wanted")
    return problems


class SuggestionStrategy:
    """Wrap an external, non-deterministic squad suggestion.

    The suggestion is only used when it passes `validate_composition`; otherwise
    the deterministic allocator's XI is returned with the rejection noted in
    its warnings.
    """

    def __init__(self, source: SuggestionSource, fallback: SquadStrategy | None = None) -> None:
        self.source = source
        self.fallback = fallback or GreedySquadStrategy()

    def select(
        self,
        pool: Sequence[RosterEntry],
        mode: str,
        match_context: MatchContext | None,
        weights: Mapping[str, Any],
    ) -> TeamComposition:
        players_in = validate_pool(pool)
        try:
            suggested = list(self.source(players_in, mode, match_context))
        except Exception as exc:
            logger.warning("Squad suggestion failed: %s", exc)
            return self._fall_back(players_in, mode, match_context, weights, f"Suggestion unavailable: {exc}")

        problems = validate_composition(suggested, players_in, int(weights["squad_size"]), weights, mode)
        if problems:
            logger.warning("Squad suggestion rejected: %s", "; ".join(problems))
            return self._fall_back(
                players_in, mode, match_context, weights, f"Suggestion rejected: {'; '.join(problems)}"
            )

        by_id = {e.player_id: e for e in players_in}
        selected = []
        for pid in suggested:
            entry = by_id[pid]
            score = selection_score(entry, mode, match_context, weights)
            selected.append(SelectionEntry(entry=entry, selection_score=score if score is not None else 0.0))
        return build_composition(selected, mode, match_context, weights, ["Squad suggested by an external advisor"])

    def _fall_back(
        self,
        pool: Sequence[RosterEntry],
        mode: str,
        match_context: MatchContext | None,
        weights: Mapping[str, Any],
        note: str,
    ) -> TeamComposition:
        composition = self.fallback.select(pool, mode, match_context, weights)
        return dataclasses.replace(composition, warnings=(note, *composition.warnings))


_STRATEGIES: dict[str, Callable[[], SquadStrategy]] = {
    "greedy": GreedySquadStrategy,
}


def register_strategy(name: str, factory: Callable[[], SquadStrategy]) -> None:
    _STRATEGIES[name] = factory


def get_strategy(name: str) -> SquadStrategy:
    if name not in _STRATEGIES:
        raise ValueError(f"Unknown squad strategy '{name}'. Available: {sorted(_STRATEGIES)}")
    return _STRATEGIES[name]()
