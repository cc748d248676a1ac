from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Protocol

from .models import PerformanceRecord, Player, RosterEntry, SeasonSnapshot


class RosterRepository(Protocol):
    """Read-only access to roster data; the engine never writes through it."""

    def get_roster(self, season_id: str | None = None, player_ids: Iterable[str] | None = None) -> list[RosterEntry]: ...

    def get_player(self, player_id: str) -> Player | None: ...

    def get_performances(
        self, player_id: str, season_id: str | None = None, limit: int | None = None
    ) -> list[PerformanceRecord]: ...

    def get_rated_match_ids(self, player_id: str) -> set[str]: ...


class InMemoryRosterRepository:
    def __init__(
        self,
        players: Iterable[Player],
        snapshots: Iterable[SeasonSnapshot] = (),
        performances: Mapping[str, Iterable[PerformanceRecord]] | None = None,
        rated_match_ids: Mapping[str, Iterable[str]] | None = None,
        performance_seasons: Mapping[str, str] | None = None,
    ) -> None:
        self._players = {p.player_id: p for p in players}
        self._snapshots: dict[tuple[str, str], SeasonSnapshot] = {(s.player_id, s.season_id): s for s in snapshots}
        # Most-recent-first per player.
        self._performances = {pid: list(records) for pid, records in (performances or {}).items()}
        self._rated = {pid: set(ids) for pid, ids in (rated_match_ids or {}).items()}
        # match_id -> season_id
        self._seasons = dict(performance_seasons or {})

    def _snapshot(self, player_id: str, season_id: str | None) -> SeasonSnapshot | None:
        if season_id is not None:
            return self._snapshots.get((player_id, season_id))
        matching = [s for (pid, _), s in self._snapshots.items() if pid == player_id]
        return matching[-1] if matching else None

    def get_roster(self, season_id: str | None = None, player_ids: Iterable[str] | None = None) -> list[RosterEntry]:
        wanted = list(player_ids) if player_ids is not None else list(self._players)
        return [
            RosterEntry(player=self._players[pid], snapshot=self._snapshot(pid, season_id))
            for pid in wanted
            if pid in self._players
        ]

    def get_player(self, player_id: str) -> Player | None:
        return self._players.get(player_id)

    def get_performances(
        self, player_id: str, season_id: str | None = None, limit: int | None = None
    ) -> list[PerformanceRecord]:
        records = self._performances.get(player_id, [])
        if season_id is not None:
            records = [r for r in records if self._seasons.get(r.match_id) == season_id]
        return records[:limit] if limit is not None else list(records)

    def get_rated_match_ids(self, player_id: str) -> set[str]:
        return set(self._rated.get(player_id, ()))
