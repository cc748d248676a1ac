from squad_rating_tool.db import (
    SqliteRosterRepository,
    get_connection,
    import_performances,
    import_roster,
    record_rating_changes,
)
from squad_rating_tool.models import RatingChange, RosterEntry, SeasonSnapshot
from squad_rating_tool.repository import InMemoryRosterRepository
from tests.helpers import century, make_entry, make_player


class TestInMemoryRosterRepository:
    def _repo(self) -> InMemoryRosterRepository:
        return InMemoryRosterRepository(
            players=[make_player("a"), make_player("b")],
            snapshots=[
                SeasonSnapshot("a", "2023", matches_available=5, matches_played=5),
                SeasonSnapshot("a", "2024", matches_available=8, matches_played=2),
            ],
            performances={"a": [century("a", "m3"), century("a", "m2"), century("a", "m1")]},
            rated_match_ids={"a": ["m1"]},
            performance_seasons={"m3": "2024", "m2": "2024", "m1": "2023"},
        )

    def test_roster_for_season(self) -> None:
        roster = self._repo().get_roster("2023")
        assert [e.player_id for e in roster] == ["a", "b"]
        assert roster[0].snapshot.matches_played == 5
        assert roster[1].snapshot is None

    def test_roster_defaults_to_latest_snapshot(self) -> None:
        assert self._repo().get_roster()[0].snapshot.season_id == "2024"

    def test_roster_subset_keeps_requested_order(self) -> None:
        assert [e.player_id for e in self._repo().get_roster(player_ids=["b", "ghost", "a"])] == ["b", "a"]

    def test_performances(self) -> None:
        repo = self._repo()
        assert [p.match_id for p in repo.get_performances("a", limit=2)] == ["m3", "m2"]
        assert [p.match_id for p in repo.get_performances("a", season_id="2023")] == ["m1"]
        assert repo.get_performances("b") == []

    def test_player_and_rated_ids(self) -> None:
        repo = self._repo()
        assert repo.get_player("a").player_id == "a"
        assert repo.get_player("ghost") is None
        assert repo.get_rated_match_ids("a") == {"m1"}
        assert repo.get_rated_match_ids("b") == set()


class TestSqliteRosterRepository:
    def _seed(self, db_path) -> None:
        entries = [
            make_entry("wk", "WICKETKEEPER", 7, available=6, played=3, form="GOOD", is_wicketkeeper=True),
            make_entry("bat", "BATSMAN", 6, available=6, played=6, captain_choice=2),
        ]
        import_roster(entries, db_path)
        import_roster([RosterEntry(entries[0].player, SeasonSnapshot("wk", "2023", 10, 9))], db_path)
        import_performances(
            [
                (century("bat", "m1"), "2024", "2024-05-01"),
                (century("bat", "m2", importance="MUST_WIN"), "2024", "2024-05-08"),
                (century("bat", "m0"), "2023", "2023-09-01"),
            ],
            db_path,
        )

    def test_round_trips_players_and_latest_snapshot(self, db_path) -> None:
        self._seed(db_path)
        roster = SqliteRosterRepository(db_path).get_roster()

        assert [e.player_id for e in roster] == ["wk", "bat"]
        keeper, batter = roster
        assert keeper.player.is_wicketkeeper is True
        assert keeper.snapshot.season_id == "2024"
        assert keeper.form == "GOOD"
        assert batter.player.captain_choice == 2
        assert batter.player.is_captain is False

    def test_explicit_season(self, db_path) -> None:
        self._seed(db_path)
        roster = SqliteRosterRepository(db_path).get_roster("2023")
        assert roster[0].snapshot.matches_played == 9
        assert roster[1].snapshot is None

    def test_performances_most_recent_first(self, db_path) -> None:
        self._seed(db_path)
        repo = SqliteRosterRepository(db_path)

        records = repo.get_performances("bat")
        assert [r.match_id for r in records] == ["m2", "m1", "m0"]
        assert records[0].importance == "MUST_WIN"
        assert records[0].did_bat is True
        assert [r.match_id for r in repo.get_performances("bat", "2024", limit=1)] == ["m2"]

    def test_reimporting_roster_keeps_performances(self, db_path) -> None:
        self._seed(db_path)
        import_roster([make_entry("bat", "BATSMAN", 7)], db_path)
        repo = SqliteRosterRepository(db_path)

        assert repo.get_player("bat").batting_skill == 7
        assert len(repo.get_performances("bat")) == 3

    def test_record_rating_changes(self, db_path) -> None:
        self._seed(db_path)
        change = RatingChange("bat", "Bat", "BATTING", 6, 7, 1, 9.0, "Based on 2 recent innings", ("m2", "m1"))
        assert record_rating_changes([change], db_path) == 1

        repo = SqliteRosterRepository(db_path)
        assert repo.get_player("bat").batting_skill == 7
        assert repo.get_rated_match_ids("bat") == {"m1", "m2"}
        with get_connection(db_path) as conn:
            count = conn.execute("SELECT COUNT(*) FROM rating_history WHERE player_id = 'bat'").fetchone()[0]
        assert count == 2

    def test_empty_database(self, db_path) -> None:
        repo = SqliteRosterRepository(db_path)
        assert repo.get_roster() == []
        assert repo.get_player("nobody") is None
