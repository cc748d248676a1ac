import pytest

from squad_rating_tool.performance import (
    DID_NOT_PARTICIPATE,
    batting_performance_score,
    bowling_performance_score,
    fielding_performance_score,
)
from tests.helpers import century, make_performance


class TestBatting:
    def test_did_not_bat_is_sentinel(self) -> None:
        assert batting_performance_score(make_performance("p", "m1")) == DID_NOT_PARTICIPATE

    def test_unbeaten_century_with_award(self) -> None:
        assert batting_performance_score(century("p", "m1")) == 9.0

    def test_fast_fifty(self) -> None:
        perf = make_performance("p", "m1", did_bat=True, runs_scored=60, balls_faced=30, fours=6, sixes=2)
        # 5 + 2.5 (fifty) + 1 (SR 200) + 0.5 (8 boundaries)
        assert batting_performance_score(perf) == 9.0

    def test_cheap_dismissal(self) -> None:
        perf = make_performance("p", "m1", did_bat=True, runs_scored=2, balls_faced=12)
        # 5 - 1 (under 5, out) - 0.5 (slow, 10+ balls)
        assert batting_performance_score(perf) == 3.5

    def test_importance_scales_and_clamps(self) -> None:
        perf = make_performance("p", "m1", did_bat=True, runs_scored=12, balls_faced=12, importance="MUST_WIN")
        assert batting_performance_score(perf) == pytest.approx(8.25)
        assert batting_performance_score(century("p", "m1", importance="MUST_WIN")) == 10.0

    def test_low_stakes_multiplier(self) -> None:
        perf = make_performance("p", "m1", did_bat=True, runs_scored=12, balls_faced=12, importance="LOW_STAKES")
        assert batting_performance_score(perf) == pytest.approx(4.125)


class TestBowling:
    def test_did_not_bowl_is_sentinel(self) -> None:
        assert bowling_performance_score(make_performance("p", "m1")) == DID_NOT_PARTICIPATE

    def test_zero_overs_is_sentinel(self) -> None:
        perf = make_performance("p", "m1", did_bowl=True, overs_bowled=0.0)
        assert bowling_performance_score(perf) == DID_NOT_PARTICIPATE

    def test_three_wicket_spell(self) -> None:
        perf = make_performance("p", "m1", did_bowl=True, overs_bowled=4.0, runs_conceded=20, wickets_taken=3)
        # 5 + 2 (3 wickets) + 1 (economy 5)
        assert bowling_performance_score(perf) == 8.0

    def test_expensive_wicketless_spell(self) -> None:
        perf = make_performance(
            "p", "m1", did_bowl=True, overs_bowled=3.0, runs_conceded=36, wides=4, no_balls=1
        )
        # 5 - 0.5 (no wickets) - 1 (economy 12) - 0.5 (5 extras)
        assert bowling_performance_score(perf) == 3.0

    def test_maidens_and_award(self) -> None:
        perf = make_performance(
            "p",
            "m1",
            did_bowl=True,
            overs_bowled=4.0,
            runs_conceded=12,
            wickets_taken=1,
            maidens=2,
            is_man_of_match=True,
        )
        # 5 + 0.75 + 1.5 (economy 3) + 0.5 + 0.5
        assert bowling_performance_score(perf) == 8.25


class TestFielding:
    def test_everyone_fields(self) -> None:
        assert fielding_performance_score(make_performance("p", "m1")) == 5.0

    def test_catches_run_outs_and_stumpings(self) -> None:
        perf = make_performance("p", "m1", catches=2, run_outs=1, stumpings=2)
        assert fielding_performance_score(perf) == 8.0

    def test_drops_cost(self) -> None:
        perf = make_performance("p", "m1", dropped_catches=2)
        assert fielding_performance_score(perf) == 3.5

    def test_importance_applies_to_fielding(self) -> None:
        perf = make_performance("p", "m1", catches=1, importance="IMPORTANT")
        assert fielding_performance_score(perf) == pytest.approx(7.1875)
