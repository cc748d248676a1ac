from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .composition import summarize_balance
from .config import DEFAULT_WEIGHTS
from .models import (
    BATTING_POSITIONS,
    BOWLER,
    OPPORTUNITY_FOCUSED,
    SPIN_STYLES,
    WIN_FOCUSED,
    MatchContext,
    Player,
    RosterEntry,
    SelectedPlayer,
    TeamComposition,
)
from .opportunity import opportunity_ratio
from .scoring import selection_score
from .validation import validate_pool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionEntry:
    entry: RosterEntry
    selection_score: float

    @property
    def player(self) -> Player:
        return self.entry.player


def is_bowling_capable(player: Player, weights: Mapping[str, Any] | None = None) -> bool:
    cfg = weights if weights is not None else DEFAULT_WEIGHTS
    return (
        player.primary_role == BOWLER
        or player.is_all_rounder
        or player.bowling_skill >= int(cfg["bowling_capable_skill"])
    )


def bowling_quota(target_size: int, weights: Mapping[str, Any] | None = None) -> int:
    cfg = weights if weights is not None else DEFAULT_WEIGHTS
    full_side = int(cfg["squad_size"])
    minimum = int(cfg["min_bowling_options"])
    if target_size >= full_side:
        return minimum
    return min(target_size, math.ceil(minimum * target_size / full_side))


def _rank_pool(
    pool: Sequence[RosterEntry],
    mode: str,
    match_context: MatchContext | None,
    weights: Mapping[str, Any],
) -> tuple[list[SelectionEntry], list[Player]]:
    scored: list[SelectionEntry] = []
    excluded: list[Player] = []
    for entry in pool:
        score = selection_score(entry, mode, match_context, weights)
        if score is None:
            excluded.append(entry.player)
            continue
        scored.append(SelectionEntry(entry=entry, selection_score=score))
    # sorted() is stable, so equal scores keep their input order.
    ranked = sorted(scored, key=lambda e: e.selection_score, reverse=True)
    return ranked, excluded


def _fill(
    candidates: Sequence[SelectionEntry],
    selected: list[SelectionEntry],
    target_size: int,
    quota: int,
    weights: Mapping[str, Any],
) -> None:
    bowling_count = sum(1 for e in selected if is_bowling_capable(e.player, weights))
    capable_left = sum(1 for e in candidates if is_bowling_capable(e.player, weights))
    deferred: list[SelectionEntry] = []

    for candidate in candidates:
        if len(selected) >= target_size:
            break
        if is_bowling_capable(candidate.player, weights):
            capable_left -= 1
            selected.append(candidate)
            bowling_count += 1
            continue
        # Only hold back places that a remaining bowling option can take.
        held_back = min(max(quota - bowling_count, 0), capable_left)
        if target_size - len(selected) <= held_back:
            deferred.append(candidate)
            continue
        selected.append(candidate)

    for candidate in deferred:
        if len(selected) >= target_size:
            break
        selected.append(candidate)


def batting_order(selected: Iterable[SelectionEntry]) -> list[SelectionEntry]:
    def sort_key(e: SelectionEntry) -> tuple[int, int]:
        position = e.player.batting_position
        category = BATTING_POSITIONS.index(position) if position in BATTING_POSITIONS else 2
        return category, -e.player.batting_skill

    return sorted(selected, key=sort_key)


def describe_role(player: Player, position: int) -> str:
    if position <= 2:
        role = "Opening batsman"
    elif position <= 4:
        role = "Top order batsman"
    elif player.is_keeper:
        return "Wicketkeeper-batsman"
    elif player.is_all_rounder:
        role = "All-rounder"
    elif player.primary_role == BOWLER:
        if player.bowling_style in ("FAST", "MEDIUM_FAST"):
            role = "Pace bowler"
        elif player.bowling_style in SPIN_STYLES:
            role = "Spin bowler"
        else:
            role = "Medium pace bowler"
    elif position <= 7:
        role = "Middle order batsman"
    else:
        role = "Lower order batsman"

    if player.is_keeper:
        role = f"{role} and wicketkeeper"
    return role


def selection_reason(entry: SelectionEntry, mode: str, weights: Mapping[str, Any]) -> str:
    player = entry.player
    key = int(weights["key_skill_threshold"])
    reasons: list[str] = []

    if player.captain_choice == 1:
        reasons.append("captain's first choice")
    if player.is_captain:
        reasons.append("team captain")
    elif player.is_vice_captain:
        reasons.append("vice-captain")

    form = entry.entry.form
    if form == "EXCELLENT":
        reasons.append("in excellent form")
    elif form == "GOOD":
        reasons.append("in good form")

    snapshot = entry.entry.snapshot
    if mode != WIN_FOCUSED and snapshot is not None and snapshot.matches_available > 0:
        if opportunity_ratio(snapshot) < 0.5:
            reasons.append("needs game time")

    if player.batting_skill >= key:
        reasons.append(f"key batsman (skill ≥ {key})")
    if player.bowling_skill >= key:
        reasons.append(f"key bowler (skill ≥ {key})")
    if player.is_keeper:
        reasons.append("primary wicketkeeper")
    if player.injury_status in ("RECOVERING", "MINOR_NIGGLE"):
        reasons.append(f"fitness watch ({player.injury_status.replace('_', ' ').lower()})")

    if not reasons:
        return "Solid team player."
    text = "; ".join(reasons)
    return text[0].upper() + text[1:] + "."


def win_probability(players: Sequence[Player], match_context: MatchContext | None) -> int | None:
    if match_context is None or not players:
        return None
    squad_skill = sum((p.batting_skill + p.bowling_skill) / 2 for p in players) / len(players)
    opponent_skill = (match_context.opponent_batting + match_context.opponent_bowling) / 2
    return round(min(85.0, max(25.0, 50 + (squad_skill - opponent_skill) * 5)))


def fairness_score(entries: Sequence[RosterEntry]) -> int:
    ratios = [
        opportunity_ratio(e.snapshot)
        for e in entries
        if e.snapshot is not None and e.snapshot.matches_available > 0
    ]
    average = sum(ratios) / len(ratios) if ratios else 0.5
    return round(100 - average * 50)


def _reasoning(players: Sequence[Player], mode: str, match_context: MatchContext | None) -> str:
    text = f"Team selected in {mode.replace('_', ' ').lower()} mode. "
    if match_context is not None:
        text += (
            f"Against {match_context.opponent_name} "
            f"(strength {match_context.opponent_overall}/10) the XI is built around the strongest ranked players. "
        )
        if match_context.pitch_type == "SPIN_FRIENDLY":
            spin = sum(1 for p in players if p.bowling_style in SPIN_STYLES)
            text += f"Spin-friendly conditions at {match_context.venue_name}: {spin} spin options included. "
        elif match_context.pitch_type == "PACE_FRIENDLY":
            pace = sum(1 for p in players if p.bowling_style in ("FAST", "MEDIUM_FAST"))
            text += f"Pace-friendly pitch at {match_context.venue_name}: {pace} pace bowlers included. "
    if mode == OPPORTUNITY_FOCUSED:
        text += "Players with fewer opportunities this season were given priority."
    elif mode == WIN_FOCUSED:
        text += "Selection prioritized current skill and form."
    else:
        text += "Selection balanced current strength with fair game time."
    return text.strip()


def _insights(players: Sequence[Player], match_context: MatchContext | None) -> list[str]:
    insights: list[str] = []
    if sum(1 for p in players if p.batting_skill >= 7) >= 6:
        insights.append("Strong batting depth should allow an aggressive approach")
    if match_context is None:
        return insights
    name = match_context.opponent_name
    if match_context.opponent_batting > match_context.opponent_bowling:
        insights.append(f"{name}'s batting is stronger than their bowling - bowl first if possible")
    elif match_context.opponent_bowling > match_context.opponent_batting:
        insights.append(f"{name}'s bowling is stronger - be cautious in the first few overs")
    if match_context.boundary_size == "SMALL":
        insights.append("Small boundaries favour attacking batting")
    elif match_context.boundary_size == "LARGE":
        insights.append("Large ground - running between wickets will be crucial")
    return insights


def build_composition(
    selected: Sequence[SelectionEntry],
    mode: str,
    match_context: MatchContext | None,
    weights: Mapping[str, Any],
    warnings: Sequence[str] = (),
) -> TeamComposition:
    ordered = batting_order(selected)
    players = [e.player for e in ordered]
    return TeamComposition(
        players=tuple(
            SelectedPlayer(
                player=e.player,
                position=index,
                role_in_match=describe_role(e.player, index),
                selection_reason=selection_reason(e, mode, weights),
                score=e.selection_score,
            )
            for index, e in enumerate(ordered, start=1)
        ),
        balance=summarize_balance(players),
        warnings=tuple(warnings),
        mode=mode,
        reasoning=_reasoning(players, mode, match_context),
        insights=tuple(_insights(players, match_context)),
        win_probability=win_probability(players, match_context),
        fairness_score=fairness_score([e.entry for e in ordered]),
    )


def select_match_squad(
    pool: Iterable[RosterEntry],
    mode: str = WIN_FOCUSED,
    match_context: MatchContext | None = None,
    target_size: int | None = None,
    weights: Mapping[str, Any] | None = None,
) -> TeamComposition:
    """Pick a playing XI from the pool.

    One slot goes to the best-ranked wicketkeeper, the rest are filled greedily
    by selection score while holding back places for bowling options. Shortfalls
    never raise: they come back as warnings on the composition.
    """
    cfg = weights if weights is not None else DEFAULT_WEIGHTS
    players_in = validate_pool(pool)
    size = int(target_size if target_size is not None else cfg["squad_size"])
    warnings: list[str] = []

    ranked, excluded = _rank_pool(players_in, mode, match_context, cfg)
    if excluded:
        warnings.append(f"Excluded injured players: {', '.join(p.name for p in excluded)}")
    if len(ranked) < size:
        warnings.append(f"Only {len(ranked)} eligible players available for {size} places")

    selected: list[SelectionEntry] = []
    keepers = [e for e in ranked if e.player.is_keeper]
    if keepers:
        selected.append(keepers[0])
    else:
        warnings.append("No designated wicketkeeper in the pool; the XI has no keeper")

    quota = bowling_quota(size, cfg)
    candidates = [e for e in ranked if not e.player.is_keeper]
    _fill(candidates, selected, size, quota, cfg)

    if len(keepers) > 1 and len(selected) < size:
        left_out = ", ".join(e.player.name for e in keepers[1:])
        warnings.append(f"Squad is {size - len(selected)} short; extra wicketkeepers left out: {left_out}")

    bowling_count = sum(1 for e in selected if is_bowling_capable(e.player, cfg))
    if bowling_count < quota:
        warnings.append(f"Limited bowling options: {bowling_count} selected, at least {quota} wanted")

    selected_ids = {e.player.player_id for e in selected}
    missed = [e.player.name for e in players_in if e.player.captain_choice == 1 and e.player_id not in selected_ids]
    if missed:
        warnings.append(f"First-choice players not selected: {', '.join(missed)}")

    logger.info(
        "Selected %d of %d players in %s mode with %d warnings",
        len(selected),
        len(players_in),
        mode,
        len(warnings),
    )
    return build_composition(selected, mode, match_context, cfg, warnings)
