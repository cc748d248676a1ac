from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from .models import OpportunityReport, RatingCalculationResult, SplitResult, TeamComposition
from .scoring import overall_rating

COMPOSITION_COLUMNS = [
    "position",
    "player_id",
    "player_name",
    "role_in_match",
    "score",
    "overall_rating",
    "selection_reason",
]
RATING_COLUMNS = [
    "player_id",
    "player_name",
    "skill_type",
    "previous_rating",
    "new_rating",
    "change_amount",
    "performance_score",
    "reason",
    "form",
]
OPPORTUNITY_COLUMNS = [
    "player_id",
    "player_name",
    "matches_available",
    "matches_played",
    "ratio",
    "status",
    "games_needed",
]


def composition_frame(composition: TeamComposition) -> pd.DataFrame:
    rows = [
        {
            "position": s.position,
            "player_id": s.player.player_id,
            "player_name": s.player.name,
            "role_in_match": s.role_in_match,
            "score": s.score,
            "overall_rating": overall_rating(s.player),
            "selection_reason": s.selection_reason,
        }
        for s in composition.players
    ]
    return pd.DataFrame(rows, columns=COMPOSITION_COLUMNS)


def split_frame(result: SplitResult) -> pd.DataFrame:
    frames = []
    for label, team in (("A", result.team_a), ("B", result.team_b)):
        frame = composition_frame(team)
        frame.insert(0, "team", label)
        frames.append(frame)
    return pd.concat(frames, ignore_index=True)


def rating_results_frame(results: Iterable[RatingCalculationResult]) -> pd.DataFrame:
    """One row per proposed change; excluded players get a single row with the reason."""
    rows = []
    for result in results:
        if result.excluded:
            rows.append(
                {
                    "player_id": result.player_id,
                    "player_name": result.player_name,
                    "reason": result.exclusion_reason,
                    "form": result.form,
                }
            )
            continue
        for change in result.changes:
            rows.append(
                {
                    "player_id": change.player_id,
                    "player_name": change.player_name,
                    "skill_type": change.skill_type,
                    "previous_rating": change.previous_rating,
                    "new_rating": change.new_rating,
                    "change_amount": change.change_amount,
                    "performance_score": change.performance_score,
                    "reason": change.reason,
                    "form": result.form,
                }
            )
    return pd.DataFrame(rows, columns=RATING_COLUMNS)


def opportunity_frame(report: OpportunityReport) -> pd.DataFrame:
    rows = [
        {
            "player_id": row.player_id,
            "player_name": row.player_name,
            "matches_available": row.matches_available,
            "matches_played": row.matches_played,
            "ratio": round(row.ratio, 3),
            "status": row.status,
            "games_needed": row.games_needed,
        }
        for row in report.rows
    ]
    return pd.DataFrame(rows, columns=OPPORTUNITY_COLUMNS)


def to_csv(df: pd.DataFrame) -> str:
    return df.to_csv(index=False)
