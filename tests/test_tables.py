from squad_rating_tool.models import RatingCalculationResult, RatingChange
from squad_rating_tool.opportunity import opportunity_report
from squad_rating_tool.selector import select_match_squad
from squad_rating_tool.splitter import quick_split
from squad_rating_tool.tables import (
    COMPOSITION_COLUMNS,
    OPPORTUNITY_COLUMNS,
    RATING_COLUMNS,
    composition_frame,
    opportunity_frame,
    rating_results_frame,
    split_frame,
    to_csv,
)
from tests.helpers import make_entry


class TestFrames:
    def test_composition_frame(self, pool) -> None:
        df = composition_frame(select_match_squad(pool))
        assert list(df.columns) == COMPOSITION_COLUMNS
        assert len(df) == 11
        assert df["position"].tolist() == list(range(1, 12))

    def test_split_frame_labels_teams(self, pool) -> None:
        df = split_frame(quick_split(pool))
        assert set(df["team"]) == {"A", "B"}
        assert len(df) == 13

    def test_rating_results_frame(self) -> None:
        change = RatingChange("a", "A", "BATTING", 6, 7, 1, 9.0, "Based on 5 recent innings", ("m1",))
        results = [
            RatingCalculationResult("a", "A", changes=(change,), form="EXCELLENT"),
            RatingCalculationResult("b", "B", excluded=True, exclusion_reason="Injured"),
            RatingCalculationResult("c", "C"),
        ]
        df = rating_results_frame(results)

        assert list(df.columns) == RATING_COLUMNS
        assert df["player_id"].tolist() == ["a", "b"]
        assert df.loc[0, "new_rating"] == 7
        assert df.loc[1, "reason"] == "Injured"

    def test_empty_frames_keep_columns(self) -> None:
        assert list(rating_results_frame([]).columns) == RATING_COLUMNS
        assert list(opportunity_frame(opportunity_report([])).columns) == OPPORTUNITY_COLUMNS

    def test_opportunity_frame_to_csv(self) -> None:
        report = opportunity_report([make_entry("a", available=3, played=1, name="Asha")])
        text = to_csv(opportunity_frame(report))
        assert text.splitlines() == [
            ",".join(OPPORTUNITY_COLUMNS),
            "a,Asha,3,1,0.333,NEEDS_GAMES,1",
        ]
