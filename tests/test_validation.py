import pytest

from squad_rating_tool.errors import InputError
from squad_rating_tool.models import RosterEntry, SeasonSnapshot
from squad_rating_tool.validation import validate_player, validate_pool
from tests.helpers import make_entry, make_player


class TestValidatePlayer:
    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("batting_skill", 0),
            ("bowling_skill", 11),
            ("experience_level", 5.5),
            ("fitness_level", True),
            ("primary_role", "CAPTAIN"),
            ("injury_status", "SORE"),
            ("batting_style", "AMBIDEXTROUS"),
            ("bowling_style", "UNDERARM"),
            ("batting_position", "NIGHTWATCHMAN"),
            ("captain_choice", 4),
        ],
    )
    def test_rejects_bad_field(self, field: str, value: object) -> None:
        with pytest.raises(InputError) as exc_info:
            validate_player(make_player("p", **{field: value}))
        assert exc_info.value.field == field
        assert exc_info.value.player_id == "p"

    def test_accepts_valid_player(self) -> None:
        validate_player(make_player("p", "BOWLER", 10, bowling_style="SPIN_LEFT_ARM", captain_choice=3))


class TestValidatePool:
    def test_returns_list(self) -> None:
        entries = (make_entry(pid) for pid in ("a", "b"))
        assert [e.player_id for e in validate_pool(entries)] == ["a", "b"]

    def test_duplicate_ids(self) -> None:
        with pytest.raises(InputError, match="Duplicate player id in pool: a"):
            validate_pool([make_entry("a"), make_entry("a")])

    def test_snapshot_for_other_player(self) -> None:
        entry = RosterEntry(make_player("a"), SeasonSnapshot("b"))
        with pytest.raises(InputError) as exc_info:
            validate_pool([entry])
        assert exc_info.value.field == "snapshot"

    def test_unknown_form(self) -> None:
        with pytest.raises(InputError) as exc_info:
            validate_pool([make_entry("a", form="HOT")])
        assert exc_info.value.field == "current_form"

    def test_negative_match_counts(self) -> None:
        with pytest.raises(InputError):
            validate_pool([make_entry("a", available=-1)])
