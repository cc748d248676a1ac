"""Two-team splits for practice matches.

Both splitters are approximate balancers. The snake alternation and the capped
rebalancing loop carry no optimality bound; they only guarantee that every
player lands on exactly one team and that team sizes differ by at most one.

The weighted split seeds the first two tiers (keepers, then captains and
vice-captains) in pairs: the best member of the tier goes to the lighter team
and the second best to the other one. Seeding only the first member of each
tier could put both top keepers on the same side.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from .composition import role_label, summarize_balance
from .config import DEFAULT_WEIGHTS
from .models import (
    BOWLER,
    PACE_STYLES,
    SPIN_STYLES,
    RosterEntry,
    SelectedPlayer,
    SplitResult,
    TeamComposition,
)
from .scoring import overall_rating
from .validation import validate_pool

logger = logging.getLogger(__name__)

FORM_SCORES = {
    "EXCELLENT": 10.0,
    "GOOD": 8.0,
    "AVERAGE": 5.0,
    "POOR": 3.0,
}
UNKNOWN_FORM_SCORE = 5.0
SIZE_WEIGHT = 2.0

QUICK_BUCKETS: tuple[tuple[str, Callable[[RosterEntry], bool]], ...] = (
    ("wicketkeepers", lambda e: e.player.is_keeper),
    ("bowlers", lambda e: e.player.primary_role == BOWLER),
    ("all-rounders", lambda e: e.player.is_all_rounder),
    ("batsmen", lambda e: True),
)


def _is_pace_bowler(entry: RosterEntry) -> bool:
    player = entry.player
    return player.bowling_style in PACE_STYLES and (player.primary_role == BOWLER or player.is_all_rounder)


def _is_spin_bowler(entry: RosterEntry) -> bool:
    player = entry.player
    return player.bowling_style in SPIN_STYLES and (player.primary_role == BOWLER or player.is_all_rounder)


PRIORITY_TIERS: tuple[tuple[str, Callable[[RosterEntry], bool]], ...] = (
    ("wicketkeepers", lambda e: e.player.is_keeper),
    ("leaders", lambda e: e.player.is_captain or e.player.is_vice_captain),
    ("pace bowlers", _is_pace_bowler),
    ("spin bowlers", _is_spin_bowler),
    ("left-handed batsmen", lambda e: e.player.batting_style == "LEFT_HAND"),
    ("everyone else", lambda e: True),
)
SEEDED_TIERS = 2


def composite_score(entry: RosterEntry) -> float:
    player = entry.player
    form_score = FORM_SCORES.get(entry.form, UNKNOWN_FORM_SCORE)
    return round(
        overall_rating(player) * 3
        + form_score * 1.5
        + player.experience_level * 1.0
        + player.pressure_handling * 0.5,
        2,
    )


def _bucket(
    pool: Sequence[RosterEntry],
    rules: Sequence[tuple[str, Callable[[RosterEntry], bool]]],
    key: Callable[[RosterEntry], float],
) -> list[tuple[str, list[RosterEntry]]]:
    """Put each player in the first bucket whose rule matches, best first."""
    buckets: dict[str, list[RosterEntry]] = {name: [] for name, _ in rules}
    for entry in pool:
        for name, rule in rules:
            if rule(entry):
                buckets[name].append(entry)
                break
    return [(name, sorted(buckets[name], key=key, reverse=True)) for name, _ in rules]


def rebalance(team_a: list[Any], team_b: list[Any], max_iterations: int) -> int:
    """Move last-added players from the larger team until sizes differ by at most one."""
    moves = 0
    while abs(len(team_a) - len(team_b)) > 1 and moves < max_iterations:
        if len(team_a) > len(team_b):
            team_b.append(team_a.pop())
        else:
            team_a.append(team_b.pop())
        moves += 1
    return moves


def _team(members: Sequence[tuple[RosterEntry, float, str]], mode: str) -> TeamComposition:
    return TeamComposition(
        players=tuple(
            SelectedPlayer(
                player=entry.player,
                position=index,
                role_in_match=role_label(entry.player),
                selection_reason=note,
                score=score,
            )
            for index, (entry, score, note) in enumerate(members, start=1)
        ),
        balance=summarize_balance([entry.player for entry, _, _ in members]),
        mode=mode,
    )


def _pool_warnings(pool: Sequence[RosterEntry]) -> list[str]:
    warnings: list[str] = []
    if len(pool) < 2:
        warnings.append(f"Need at least 2 players to split, got {len(pool)}")
    keepers = sum(1 for e in pool if e.player.is_keeper)
    if keepers < 2:
        warnings.append(f"Only {keepers} wicketkeeper(s) available; one team will play without a keeper")
    return warnings


def quick_split(pool: Iterable[RosterEntry]) -> SplitResult:
    """Split by role scarcity with a snake draft inside each role bucket.

    Each bucket opens on the smaller team (lower total rating on a tie), then
    alternates in pairs: first, second, second, first, ...
    """
    players_in = validate_pool(pool)
    team_a: list[tuple[RosterEntry, float, str]] = []
    team_b: list[tuple[RosterEntry, float, str]] = []

    def total(team: list[tuple[RosterEntry, float, str]]) -> float:
        return sum(score for _, score, _ in team)

    for name, bucket in _bucket(players_in, QUICK_BUCKETS, lambda e: overall_rating(e.player)):
        if not bucket:
            continue
        if (len(team_b), total(team_b)) < (len(team_a), total(team_a)):
            first, second = team_b, team_a
        else:
            first, second = team_a, team_b
        for index, entry in enumerate(bucket):
            rating = overall_rating(entry.player)
            round_index = index // 2
            to_first = (index % 2 == 0) == (round_index % 2 == 0)
            target = first if to_first else second
            target.append((entry, rating, f"Overall rating {rating} ({name} pick {index + 1})"))

    moves = rebalance(team_a, team_b, len(players_in))
    logger.info(
        "Quick split of %d players: %d v %d after %d moves", len(players_in), len(team_a), len(team_b), moves
    )
    return SplitResult(
        team_a=_team(team_a, "QUICK_SPLIT"),
        team_b=_team(team_b, "QUICK_SPLIT"),
        warnings=tuple(_pool_warnings(players_in)),
    )


def weighted_balanced_split(pool: Iterable[RosterEntry], weights: Mapping[str, Any] | None = None) -> SplitResult:
    """Split on composite score while spreading keepers, leaders and bowling variety.

    The top two members of each seeded tier go one to each team. Everyone else
    joins the team with the lower cumulative composite score plus a size term,
    so one side is never starved of players while the other chases skill.
    """
    cfg = weights if weights is not None else DEFAULT_WEIGHTS
    players_in = validate_pool(pool)
    team_a: list[tuple[RosterEntry, float, str]] = []
    team_b: list[tuple[RosterEntry, float, str]] = []
    totals = {"a": 0.0, "b": 0.0}
    seeded_side = "a"

    def load(side: str) -> float:
        size = len(team_a) if side == "a" else len(team_b)
        return totals[side] + size * SIZE_WEIGHT

    def add(side: str, entry: RosterEntry, score: float, note: str) -> None:
        (team_a if side == "a" else team_b).append((entry, score, note))
        totals[side] += score

    def lighter() -> str:
        gap = len(team_a) - len(team_b)
        if gap >= 2:
            return "b"
        if gap <= -2:
            return "a"
        return "b" if load("b") < load("a") else "a"

    for tier_index, (name, tier) in enumerate(_bucket(players_in, PRIORITY_TIERS, composite_score)):
        for index, entry in enumerate(tier):
            score = composite_score(entry)
            note = f"Composite {score} ({name})"
            if tier_index < SEEDED_TIERS and index == 0:
                seeded_side = lighter()
                add(seeded_side, entry, score, f"{note}, seeded")
            elif tier_index < SEEDED_TIERS and index == 1:
                add("b" if seeded_side == "a" else "a", entry, score, f"{note}, seeded")
            else:
                add(lighter(), entry, score, note)

    moves = rebalance(team_a, team_b, int(cfg["rebalance_max_iterations"]))
    logger.info(
        "Balanced split of %d players: %d v %d after %d moves", len(players_in), len(team_a), len(team_b), moves
    )
    return SplitResult(
        team_a=_team(team_a, "BALANCED_SPLIT"),
        team_b=_team(team_b, "BALANCED_SPLIT"),
        warnings=tuple(_pool_warnings(players_in)),
    )
