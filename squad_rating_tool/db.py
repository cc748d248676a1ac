from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .models import PerformanceRecord, Player, RatingChange, RosterEntry, SeasonSnapshot
from .rating import SKILL_FIELDS

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("data/squad_rating.db")

PLAYER_COLUMNS = (
    "player_id",
    "name",
    "primary_role",
    "batting_skill",
    "bowling_skill",
    "fielding_skill",
    "experience_level",
    "power_hitting",
    "running_between_wickets",
    "pressure_handling",
    "fitness_level",
    "injury_status",
    "batting_style",
    "bowling_style",
    "batting_position",
    "captain_choice",
    "is_captain",
    "is_vice_captain",
    "is_wicketkeeper",
    "reliability_score",
    "is_rookie",
    "exclude_from_auto_rating",
    "rating_exclusion_reason",
)
PLAYER_FLAGS = ("is_captain", "is_vice_captain", "is_wicketkeeper", "is_rookie", "exclude_from_auto_rating")

SNAPSHOT_COLUMNS = (
    "player_id",
    "season_id",
    "matches_available",
    "matches_played",
    "current_form",
    "innings",
    "runs_scored",
    "balls_faced",
    "overs_bowled",
    "wickets_taken",
    "catches",
    "run_outs",
    "stumpings",
)

PERFORMANCE_COLUMNS = (
    "player_id",
    "match_id",
    "did_bat",
    "runs_scored",
    "balls_faced",
    "fours",
    "sixes",
    "is_not_out",
    "did_bowl",
    "overs_bowled",
    "runs_conceded",
    "wickets_taken",
    "maidens",
    "wides",
    "no_balls",
    "catches",
    "run_outs",
    "stumpings",
    "dropped_catches",
    "is_man_of_match",
)
PERFORMANCE_FLAGS = ("did_bat", "is_not_out", "did_bowl", "is_man_of_match")


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    path = Path(db_path) if db_path is not None else DEFAULT_DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def init_db(db_path: str | Path | None = None) -> None:
    with get_connection(db_path) as conn:
        _ensure_schema(conn)
        conn.commit()


def _ensure_schema(conn: sqlite3.Connection) -> None:
    statements = [
        """
        CREATE TABLE IF NOT EXISTS players (
            player_id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            primary_role TEXT NOT NULL DEFAULT 'BATSMAN',
            batting_skill INTEGER NOT NULL DEFAULT 5,
            bowling_skill INTEGER NOT NULL DEFAULT 5,
            fielding_skill INTEGER NOT NULL DEFAULT 5,
            experience_level INTEGER NOT NULL DEFAULT 5,
            power_hitting INTEGER NOT NULL DEFAULT 5,
            running_between_wickets INTEGER NOT NULL DEFAULT 5,
            pressure_handling INTEGER NOT NULL DEFAULT 5,
            fitness_level INTEGER NOT NULL DEFAULT 5,
            injury_status TEXT NOT NULL DEFAULT 'FIT',
            batting_style TEXT NOT NULL DEFAULT 'RIGHT_HAND',
            bowling_style TEXT NOT NULL DEFAULT 'NONE',
            batting_position TEXT NOT NULL DEFAULT 'MIDDLE_ORDER',
            captain_choice INTEGER,
            is_captain INTEGER NOT NULL DEFAULT 0,
            is_vice_captain INTEGER NOT NULL DEFAULT 0,
            is_wicketkeeper INTEGER NOT NULL DEFAULT 0,
            reliability_score INTEGER NOT NULL DEFAULT 5,
            is_rookie INTEGER NOT NULL DEFAULT 0,
            exclude_from_auto_rating INTEGER NOT NULL DEFAULT 0,
            rating_exclusion_reason TEXT,
            is_active INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS season_stats (
            player_id TEXT NOT NULL,
            season_id TEXT NOT NULL,
            matches_available INTEGER NOT NULL DEFAULT 0,
            matches_played INTEGER NOT NULL DEFAULT 0,
            current_form TEXT NOT NULL DEFAULT 'UNKNOWN',
            innings INTEGER NOT NULL DEFAULT 0,
            runs_scored INTEGER NOT NULL DEFAULT 0,
            balls_faced INTEGER NOT NULL DEFAULT 0,
            overs_bowled REAL NOT NULL DEFAULT 0.0,
            wickets_taken INTEGER NOT NULL DEFAULT 0,
            catches INTEGER NOT NULL DEFAULT 0,
            run_outs INTEGER NOT NULL DEFAULT 0,
            stumpings INTEGER NOT NULL DEFAULT 0,
            PRIMARY KEY (player_id, season_id),
            FOREIGN KEY (player_id) REFERENCES players(player_id) ON DELETE CASCADE
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS matches (
            match_id TEXT PRIMARY KEY,
            season_id TEXT NOT NULL,
            match_date TEXT NOT NULL,
            importance TEXT NOT NULL DEFAULT 'REGULAR'
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS match_performances (
            player_id TEXT NOT NULL,
            match_id TEXT NOT NULL,
            did_bat INTEGER NOT NULL DEFAULT 0,
            runs_scored INTEGER NOT NULL DEFAULT 0,
            balls_faced INTEGER NOT NULL DEFAULT 0,
            fours INTEGER NOT NULL DEFAULT 0,
            sixes INTEGER NOT NULL DEFAULT 0,
            is_not_out INTEGER NOT NULL DEFAULT 0,
            did_bowl INTEGER NOT NULL DEFAULT 0,
            overs_bowled REAL NOT NULL DEFAULT 0.0,
            runs_conceded INTEGER NOT NULL DEFAULT 0,
            wickets_taken INTEGER NOT NULL DEFAULT 0,
            maidens INTEGER NOT NULL DEFAULT 0,
            wides INTEGER NOT NULL DEFAULT 0,
            no_balls INTEGER NOT NULL DEFAULT 0,
            catches INTEGER NOT NULL DEFAULT 0,
            run_outs INTEGER NOT NULL DEFAULT 0,
            stumpings INTEGER NOT NULL DEFAULT 0,
            dropped_catches INTEGER NOT NULL DEFAULT 0,
            is_man_of_match INTEGER NOT NULL DEFAULT 0,
            PRIMARY KEY (player_id, match_id),
            FOREIGN KEY (player_id) REFERENCES players(player_id) ON DELETE CASCADE,
            FOREIGN KEY (match_id) REFERENCES matches(match_id) ON DELETE CASCADE
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS rating_history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            player_id TEXT NOT NULL,
            match_id TEXT,
            skill_type TEXT NOT NULL,
            previous_rating INTEGER NOT NULL,
            new_rating INTEGER NOT NULL,
            change_amount INTEGER NOT NULL,
            performance_score REAL,
            reason TEXT,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """,
        "CREATE INDEX IF NOT EXISTS idx_performances_player ON match_performances(player_id);",
        "CREATE INDEX IF NOT EXISTS idx_matches_season_date ON matches(season_id, match_date);",
        "CREATE INDEX IF NOT EXISTS idx_rating_history_player ON rating_history(player_id);",
    ]

    for stmt in statements:
        conn.execute(stmt)


def _upsert(
    conn: sqlite3.Connection,
    table: str,
    columns: tuple[str, ...],
    keys: tuple[str, ...],
    values: list[Any],
) -> None:
    # Update in place: REPLACE would delete the row and cascade to its children.
    placeholders = ", ".join("?" for _ in columns)
    updates = ", ".join(f"{col} = excluded.{col}" for col in columns if col not in keys)
    conn.execute(
        f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders}) "
        f"ON CONFLICT ({', '.join(keys)}) DO UPDATE SET {updates}",
        values,
    )


def save_player(conn: sqlite3.Connection, player: Player) -> None:
    values = [getattr(player, col) for col in PLAYER_COLUMNS]
    values = [int(v) if col in PLAYER_FLAGS else v for col, v in zip(PLAYER_COLUMNS, values)]
    _upsert(conn, "players", PLAYER_COLUMNS, ("player_id",), values)


def save_snapshot(conn: sqlite3.Connection, snapshot: SeasonSnapshot) -> None:
    values = [getattr(snapshot, col) for col in SNAPSHOT_COLUMNS]
    _upsert(conn, "season_stats", SNAPSHOT_COLUMNS, ("player_id", "season_id"), values)


def save_match(conn: sqlite3.Connection, match_id: str, season_id: str, match_date: str, importance: str) -> None:
    _upsert(
        conn,
        "matches",
        ("match_id", "season_id", "match_date", "importance"),
        ("match_id",),
        [match_id, season_id, match_date, importance],
    )


def save_performance(conn: sqlite3.Connection, performance: PerformanceRecord) -> None:
    values = [getattr(performance, col) for col in PERFORMANCE_COLUMNS]
    values = [int(v) if col in PERFORMANCE_FLAGS else v for col, v in zip(PERFORMANCE_COLUMNS, values)]
    _upsert(conn, "match_performances", PERFORMANCE_COLUMNS, ("player_id", "match_id"), values)


def import_roster(
    entries: Iterable[RosterEntry],
    db_path: str | Path | None = None,
) -> int:
    count = 0
    with get_connection(db_path) as conn:
        _ensure_schema(conn)
        for entry in entries:
            save_player(conn, entry.player)
            if entry.snapshot is not None:
                save_snapshot(conn, entry.snapshot)
            count += 1
        conn.commit()
    logger.info("Imported %d roster entries", count)
    return count


def import_performances(
    performances: Iterable[tuple[PerformanceRecord, str, str]],
    db_path: str | Path | None = None,
) -> int:
    """Store (performance, season_id, match_date) rows, creating matches as needed."""
    count = 0
    with get_connection(db_path) as conn:
        _ensure_schema(conn)
        for performance, season_id, match_date in performances:
            save_match(conn, performance.match_id, season_id, match_date, performance.importance)
            save_performance(conn, performance)
            count += 1
        conn.commit()
    logger.info("Imported %d match performances", count)
    return count


def record_rating_changes(
    changes: Iterable[RatingChange],
    db_path: str | Path | None = None,
) -> int:
    """Write new ratings back and log one history row per rated match."""
    count = 0
    with get_connection(db_path) as conn:
        _ensure_schema(conn)
        for change in changes:
            column = SKILL_FIELDS.get(change.skill_type)
            if column is None:
                raise ValueError(f"Unknown skill type: {change.skill_type}")
            conn.execute(
                f"UPDATE players SET {column} = ? WHERE player_id = ?",
                (change.new_rating, change.player_id),
            )
            for match_id in change.match_ids or (None,):
                conn.execute(
                    """
                    INSERT INTO rating_history (
                        player_id, match_id, skill_type, previous_rating,
                        new_rating, change_amount, performance_score, reason
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        change.player_id,
                        match_id,
                        change.skill_type,
                        change.previous_rating,
                        change.new_rating,
                        change.change_amount,
                        change.performance_score,
                        change.reason,
                    ),
                )
            count += 1
        conn.commit()
    logger.info("Recorded %d rating changes", count)
    return count


def _row_to_player(row: sqlite3.Row) -> Player:
    data = {col: row[col] for col in PLAYER_COLUMNS}
    for flag in PLAYER_FLAGS:
        data[flag] = bool(data[flag])
    return Player(**data)


def _row_to_snapshot(row: sqlite3.Row) -> SeasonSnapshot:
    return SeasonSnapshot(**{col: row[col] for col in SNAPSHOT_COLUMNS})


class SqliteRosterRepository:
    """Read-only repository over the squad database."""

    def __init__(self, db_path: str | Path | None = None) -> None:
        self.db_path = db_path
        init_db(db_path)

    def get_roster(self, season_id: str | None = None, player_ids: Iterable[str] | None = None) -> list[RosterEntry]:
        wanted = list(player_ids) if player_ids is not None else None
        with get_connection(self.db_path) as conn:
            rows = conn.execute("SELECT * FROM players WHERE is_active = 1 ORDER BY rowid").fetchall()
            players = [_row_to_player(row) for row in rows]
            if wanted is not None:
                by_id = {p.player_id: p for p in players}
                players = [by_id[pid] for pid in wanted if pid in by_id]

            if season_id is None:
                season_row = conn.execute(
                    "SELECT season_id FROM season_stats ORDER BY season_id DESC LIMIT 1"
                ).fetchone()
                season_id = season_row["season_id"] if season_row else None

            snapshots: dict[str, SeasonSnapshot] = {}
            if season_id is not None:
                for row in conn.execute("SELECT * FROM season_stats WHERE season_id = ?", (season_id,)):
                    snapshots[row["player_id"]] = _row_to_snapshot(row)

        logger.debug("Loaded %d players for season %s", len(players), season_id)
        return [RosterEntry(player=p, snapshot=snapshots.get(p.player_id)) for p in players]

    def get_player(self, player_id: str) -> Player | None:
        with get_connection(self.db_path) as conn:
            row = conn.execute("SELECT * FROM players WHERE player_id = ?", (player_id,)).fetchone()
        return _row_to_player(row) if row else None

    def get_performances(
        self, player_id: str, season_id: str | None = None, limit: int | None = None
    ) -> list[PerformanceRecord]:
        query = """
            SELECT mp.*, m.importance
            FROM match_performances mp
            JOIN matches m ON m.match_id = mp.match_id
            WHERE mp.player_id = ?
        """
        params: list[Any] = [player_id]
        if season_id is not None:
            query += " AND m.season_id = ?"
            params.append(season_id)
        query += " ORDER BY m.match_date DESC, m.match_id DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        with get_connection(self.db_path) as conn:
            rows = conn.execute(query, params).fetchall()

        records: list[PerformanceRecord] = []
        for row in rows:
            data = {col: row[col] for col in PERFORMANCE_COLUMNS}
            for flag in PERFORMANCE_FLAGS:
                data[flag] = bool(data[flag])
            records.append(PerformanceRecord(importance=row["importance"], **data))
        return records

    def get_rated_match_ids(self, player_id: str) -> set[str]:
        with get_connection(self.db_path) as conn:
            rows = conn.execute(
                "SELECT DISTINCT match_id FROM rating_history WHERE player_id = ? AND match_id IS NOT NULL",
                (player_id,),
            ).fetchall()
        return {row["match_id"] for row in rows}
