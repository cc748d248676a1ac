import pytest

from squad_rating_tool.config import DEFAULT_WEIGHTS
from squad_rating_tool.models import BALANCED, OPPORTUNITY_FOCUSED, WIN_FOCUSED, MatchContext
from squad_rating_tool.scoring import (
    captain_choice_bonus,
    form_bonus,
    is_eligible,
    overall_rating,
    selection_score,
    skill_average,
)
from tests.helpers import make_entry, make_player


class TestOverallRating:
    def test_uniform_skills_give_that_rating_for_every_role(self) -> None:
        for role in ("BATSMAN", "BOWLER", "ALL_ROUNDER", "WICKETKEEPER"):
            assert overall_rating(make_player("p", role, 7)) == 7.0

    def test_batsman_weights_batting_heaviest(self) -> None:
        player = make_player("p", "BATSMAN", 5, batting_skill=9)
        # 9*0.5 + 5*0.15 + 5*0.2 + 5*0.15
        assert overall_rating(player) == 7.0

    def test_other_role_uses_plain_mean(self) -> None:
        player = make_player("p", "OTHER", 4, batting_skill=8)
        assert overall_rating(player) == 5.0


class TestComponents:
    def test_skill_average_covers_six_skills(self) -> None:
        player = make_player("p", skill=5, power_hitting=8, pressure_handling=2)
        assert skill_average(player) == pytest.approx(5.0)

    def test_form_bonus_table(self) -> None:
        assert form_bonus("EXCELLENT") == 3.0
        assert form_bonus("GOOD") == 2.0
        assert form_bonus("AVERAGE") == 1.0
        assert form_bonus("POOR") == 0.0
        assert form_bonus("UNKNOWN") == 1.0
        assert form_bonus(None) == 1.0

    def test_captain_choice_bonus_scales_by_rank(self) -> None:
        assert captain_choice_bonus(make_player("p", captain_choice=1), DEFAULT_WEIGHTS) == 1.5
        assert captain_choice_bonus(make_player("p", captain_choice=3), DEFAULT_WEIGHTS) == 0.5
        assert captain_choice_bonus(make_player("p"), DEFAULT_WEIGHTS) == 0.0

    def test_injured_players_are_only_ineligible_in_opportunity_mode(self) -> None:
        injured = make_player("p", injury_status="INJURED")
        assert not is_eligible(injured, OPPORTUNITY_FOCUSED)
        assert is_eligible(injured, WIN_FOCUSED)
        assert is_eligible(injured, BALANCED)


class TestSelectionScore:
    def test_base_score_is_skill_average_plus_form(self) -> None:
        assert selection_score(make_entry("p")) == 6.0
        assert selection_score(make_entry("p", form="EXCELLENT")) == 8.0

    def test_low_ratio_outranks_high_ratio_in_opportunity_mode(self) -> None:
        starved = make_entry("a", available=10, played=2)
        regular = make_entry("b", available=10, played=9)
        low = selection_score(starved, OPPORTUNITY_FOCUSED)
        high = selection_score(regular, OPPORTUNITY_FOCUSED)
        assert low == pytest.approx(14.0)
        assert high == pytest.approx(7.0)
        assert low > high

    def test_balanced_mode_uses_half_the_opportunity_weight(self) -> None:
        entry = make_entry("p", available=10, played=2)
        assert selection_score(entry, BALANCED) == pytest.approx(10.0)

    def test_win_mode_ignores_opportunity(self) -> None:
        starved = make_entry("a", available=10, played=2)
        regular = make_entry("b", available=10, played=9)
        assert selection_score(starved, WIN_FOCUSED) == selection_score(regular, WIN_FOCUSED)

    def test_injury_penalties(self) -> None:
        assert selection_score(make_entry("p", injury_status="INJURED")) == -4.0
        assert selection_score(make_entry("p", injury_status="RECOVERING")) == 3.0
        assert selection_score(make_entry("p", injury_status="INJURED"), BALANCED) == pytest.approx(1.0)

    def test_injured_player_excluded_in_opportunity_mode(self) -> None:
        assert selection_score(make_entry("p", injury_status="INJURED"), OPPORTUNITY_FOCUSED) is None

    def test_pitch_bonus_for_matching_bowling_style(self) -> None:
        spinner = make_entry("p", "BOWLER", bowling_style="SPIN_LEG")
        seamer = make_entry("q", "BOWLER", bowling_style="FAST")
        context = MatchContext(pitch_type="SPIN_FRIENDLY")
        assert selection_score(spinner, match_context=context) == 7.5
        assert selection_score(seamer, match_context=context) == 6.0

    def test_custom_weights_are_honoured(self) -> None:
        weights = {**DEFAULT_WEIGHTS, "captain_choice_bonus": 3.0}
        entry = make_entry("p", captain_choice=1)
        assert selection_score(entry, weights=weights) == 9.0

    def test_unknown_mode_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown selection mode"):
            selection_score(make_entry("p"), "RANDOM")
