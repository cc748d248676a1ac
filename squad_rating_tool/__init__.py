"""Cricket squad selection, team splitting and rating toolkit."""

from .engine import SquadEngine
from .models import MatchContext, PerformanceRecord, Player, RosterEntry, SeasonSnapshot, TeamComposition
from .rating import calculate_rating_changes
from .selector import select_match_squad
from .splitter import quick_split, weighted_balanced_split

__all__ = [
    "MatchContext",
    "PerformanceRecord",
    "Player",
    "RosterEntry",
    "SeasonSnapshot",
    "SquadEngine",
    "TeamComposition",
    "calculate_rating_changes",
    "quick_split",
    "select_match_squad",
    "weighted_balanced_split",
]
