from __future__ import annotations

from dataclasses import dataclass, field

BATSMAN = "BATSMAN"
BOWLER = "BOWLER"
ALL_ROUNDER = "ALL_ROUNDER"
BATTING_ALL_ROUNDER = "BATTING_ALL_ROUNDER"
BOWLING_ALL_ROUNDER = "BOWLING_ALL_ROUNDER"
WICKETKEEPER = "WICKETKEEPER"
OTHER = "OTHER"

ROLES = (BATSMAN, BOWLER, ALL_ROUNDER, BATTING_ALL_ROUNDER, BOWLING_ALL_ROUNDER, WICKETKEEPER, OTHER)
ALL_ROUNDER_ROLES = (ALL_ROUNDER, BATTING_ALL_ROUNDER, BOWLING_ALL_ROUNDER)

INJURY_STATUSES = ("FIT", "MINOR_NIGGLE", "RECOVERING", "INJURED")
FORMS = ("EXCELLENT", "GOOD", "AVERAGE", "POOR", "UNKNOWN")
BATTING_STYLES = ("RIGHT_HAND", "LEFT_HAND")
BOWLING_STYLES = ("FAST", "MEDIUM_FAST", "MEDIUM", "SPIN_OFF", "SPIN_LEG", "SPIN_LEFT_ARM", "NONE")
PACE_STYLES = ("FAST", "MEDIUM_FAST", "MEDIUM")
SPIN_STYLES = ("SPIN_OFF", "SPIN_LEG", "SPIN_LEFT_ARM")
BATTING_POSITIONS = ("OPENER", "TOP_ORDER", "MIDDLE_ORDER", "LOWER_ORDER", "FINISHER")
IMPORTANCE_TIERS = ("MUST_WIN", "IMPORTANT", "REGULAR", "LOW_STAKES")
PITCH_TYPES = ("BATTING_FRIENDLY", "BOWLING_FRIENDLY", "BALANCED", "SPIN_FRIENDLY", "PACE_FRIENDLY")

WIN_FOCUSED = "WIN_FOCUSED"
BALANCED = "BALANCED"
OPPORTUNITY_FOCUSED = "OPPORTUNITY_FOCUSED"
SELECTION_MODES = (WIN_FOCUSED, BALANCED, OPPORTUNITY_FOCUSED)

SKILL_TYPES = (
    "BATTING",
    "BOWLING",
    "FIELDING",
    "POWER_HITTING",
    "RUNNING_BETWEEN_WICKETS",
    "PRESSURE_HANDLING",
)


@dataclass(frozen=True)
class Player:
    player_id: str
    name: str
    primary_role: str
    batting_skill: int
    bowling_skill: int
    fielding_skill: int
    experience_level: int = 5
    power_hitting: int = 5
    running_between_wickets: int = 5
    pressure_handling: int = 5
    fitness_level: int = 5
    injury_status: str = "FIT"
    batting_style: str = "RIGHT_HAND"
    bowling_style: str = "NONE"
    batting_position: str = "MIDDLE_ORDER"
    captain_choice: int | None = None
    is_captain: bool = False
    is_vice_captain: bool = False
    is_wicketkeeper: bool = False
    reliability_score: int = 5
    is_rookie: bool = False
    exclude_from_auto_rating: bool = False
    rating_exclusion_reason: str | None = None

    @property
    def is_keeper(self) -> bool:
        return self.primary_role == WICKETKEEPER or self.is_wicketkeeper

    @property
    def is_all_rounder(self) -> bool:
        return self.primary_role in ALL_ROUNDER_ROLES


@dataclass(frozen=True)
class SeasonSnapshot:
    player_id: str
    season_id: str = ""
    matches_available: int = 0
    matches_played: int = 0
    current_form: str = "UNKNOWN"
    innings: int = 0
    runs_scored: int = 0
    balls_faced: int = 0
    overs_bowled: float = 0.0
    wickets_taken: int = 0
    catches: int = 0
    run_outs: int = 0
    stumpings: int = 0


@dataclass(frozen=True)
class RosterEntry:
    player: Player
    snapshot: SeasonSnapshot | None = None

    @property
    def player_id(self) -> str:
        return self.player.player_id

    @property
    def form(self) -> str:
        return self.snapshot.current_form if self.snapshot is not None else "UNKNOWN"


@dataclass(frozen=True)
class MatchContext:
    opponent_name: str = "Opponent"
    opponent_overall: int = 5
    opponent_batting: int = 5
    opponent_bowling: int = 5
    venue_name: str = "Home ground"
    pitch_type: str = "BALANCED"
    boundary_size: str = "MEDIUM"
    outfield_speed: str = "MEDIUM"
    importance: str = "REGULAR"
    weather: str | None = None


@dataclass(frozen=True)
class PerformanceRecord:
    player_id: str
    match_id: str = ""
    did_bat: bool = False
    runs_scored: int = 0
    balls_faced: int = 0
    fours: int = 0
    sixes: int = 0
    is_not_out: bool = False
    did_bowl: bool = False
    overs_bowled: float = 0.0
    runs_conceded: int = 0
    wickets_taken: int = 0
    maidens: int = 0
    wides: int = 0
    no_balls: int = 0
    catches: int = 0
    run_outs: int = 0
    stumpings: int = 0
    dropped_catches: int = 0
    is_man_of_match: bool = False
    importance: str = "REGULAR"

    @property
    def boundaries(self) -> int:
        return self.fours + self.sixes

    @property
    def illegal_deliveries(self) -> int:
        return self.wides + self.no_balls


@dataclass(frozen=True)
class SelectedPlayer:
    player: Player
    position: int
    role_in_match: str
    selection_reason: str
    score: float


@dataclass(frozen=True)
class TeamBalance:
    batsmen: int = 0
    bowlers: int = 0
    all_rounders: int = 0
    wicketkeepers: int = 0
    pace_options: int = 0
    spin_options: int = 0
    left_hand_batsmen: int = 0
    right_hand_batsmen: int = 0
    avg_batting: float = 0.0
    avg_bowling: float = 0.0
    avg_fielding: float = 0.0
    avg_overall: float = 0.0


@dataclass(frozen=True)
class TeamComposition:
    players: tuple[SelectedPlayer, ...]
    balance: TeamBalance
    warnings: tuple[str, ...] = ()
    mode: str | None = None
    reasoning: str = ""
    insights: tuple[str, ...] = ()
    win_probability: int | None = None
    fairness_score: int | None = None

    @property
    def player_ids(self) -> list[str]:
        return [s.player.player_id for s in self.players]


@dataclass(frozen=True)
class SplitResult:
    team_a: TeamComposition
    team_b: TeamComposition
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class RatingChange:
    player_id: str
    player_name: str
    skill_type: str
    previous_rating: int
    new_rating: int
    change_amount: int
    performance_score: float
    reason: str
    match_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class RatingCalculationResult:
    player_id: str
    player_name: str
    changes: tuple[RatingChange, ...] = ()
    excluded: bool = False
    exclusion_reason: str | None = None
    form: str | None = None


@dataclass(frozen=True)
class OpportunityRow:
    player_id: str
    player_name: str
    matches_available: int
    matches_played: int
    ratio: float
    status: str
    games_needed: int


@dataclass(frozen=True)
class OpportunityReport:
    target_ratio: float
    rows: tuple[OpportunityRow, ...] = field(default_factory=tuple)
    players_needing_games: tuple[str, ...] = ()
    recommendation: str = ""
