from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from .config import load_weights
from .db import SqliteRosterRepository, import_performances, import_roster, record_rating_changes
from .engine import SquadEngine
from .env import DB_PATH_VAR, STRATEGY_VAR, WEIGHTS_PATH_VAR, get_setting, load_env_files
from .errors import InputError
from .loader import load_performances, load_roster
from .models import IMPORTANCE_TIERS, PITCH_TYPES, SELECTION_MODES, WIN_FOCUSED, MatchContext
from .tables import composition_frame, opportunity_frame, rating_results_frame, split_frame, to_csv
from .validation import validate_pool

logger = logging.getLogger(__name__)

load_env_files()


def _player_ids(raw: str | None) -> list[str] | None:
    if not raw:
        return None
    return [token.strip() for token in raw.split(",") if token.strip()]


def _engine(args: argparse.Namespace) -> SquadEngine:
    weights = load_weights(args.weights)
    strategy = get_setting(STRATEGY_VAR)
    if strategy:
        weights["strategy"] = strategy
    return SquadEngine(SqliteRosterRepository(args.db), weights)


def _emit(df: pd.DataFrame, output_path: str | None) -> None:
    payload = to_csv(df)
    if output_path:
        Path(output_path).write_text(payload, encoding="utf-8")
    else:
        print(payload, end="")


def _warn(warnings: Sequence[str]) -> None:
    for warning in warnings:
        print(f"WARNING: {warning}", file=sys.stderr)


def run_import(args: argparse.Namespace) -> int:
    if not args.roster and not args.performances:
        raise ValueError("Nothing to import: pass --roster and/or --performances")
    if args.roster:
        entries = validate_pool(load_roster(args.roster))
        count = import_roster(entries, args.db)
        print(f"Imported {count} players from {args.roster}")
    if args.performances:
        rows = load_performances(args.performances)
        count = import_performances(rows, args.db)
        print(f"Imported {count} match performances from {args.performances}")
    return 0


def run_squad(args: argparse.Namespace) -> int:
    engine = _engine(args)
    context = None
    if args.opponent or args.pitch or args.importance:
        context = MatchContext(
            opponent_name=args.opponent or "Opponent",
            opponent_overall=args.opponent_strength,
            pitch_type=args.pitch or "BALANCED",
            importance=args.importance or "REGULAR",
        )
    composition = engine.pick_squad(args.season, context, args.mode, _player_ids(args.players))
    _warn(composition.warnings)
    _emit(composition_frame(composition), args.output)
    logger.info("Squad reasoning: %s", composition.reasoning)
    return 0


def run_split(args: argparse.Namespace) -> int:
    engine = _engine(args)
    player_ids = _player_ids(args.players)
    if args.method == "quick":
        result = engine.quick_split(player_ids, args.season)
    else:
        result = engine.balanced_split(player_ids, args.season)
    _warn(result.warnings)
    _emit(split_frame(result), args.output)
    return 0


def run_ratings(args: argparse.Namespace) -> int:
    engine = _engine(args)
    results = engine.recalculate_ratings(args.season, _player_ids(args.players))
    _emit(rating_results_frame(results), args.output)
    if args.apply:
        changes = [change for result in results for change in result.changes]
        record_rating_changes(changes, args.db)
        print(f"Applied {len(changes)} rating changes", file=sys.stderr)
    return 0


def run_opportunities(args: argparse.Namespace) -> int:
    engine = _engine(args)
    report = engine.opportunities(args.season)
    _emit(opportunity_frame(report), args.output)
    if report.recommendation:
        print(report.recommendation, file=sys.stderr)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Cricket squad selection and rating tool")
    parser.add_argument("--db", default=get_setting(DB_PATH_VAR), help="SQLite database path")
    parser.add_argument("--weights", default=get_setting(WEIGHTS_PATH_VAR), help="Optional JSON weight config")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    import_cmd = sub.add_parser("import", help="Load roster and performance CSVs into the database")
    import_cmd.add_argument("--roster", required=False, help="Path to roster CSV")
    import_cmd.add_argument("--performances", required=False, help="Path to match performance CSV")
    import_cmd.set_defaults(handler=run_import)

    squad_cmd = sub.add_parser("squad", help="Select a playing XI")
    squad_cmd.add_argument("--mode", choices=SELECTION_MODES, default=WIN_FOCUSED)
    squad_cmd.add_argument("--opponent", required=False, help="Opponent name")
    squad_cmd.add_argument("--opponent-strength", type=int, default=5, help="Opponent overall rating 1-10")
    squad_cmd.add_argument("--pitch", choices=PITCH_TYPES, required=False)
    squad_cmd.add_argument("--importance", choices=IMPORTANCE_TIERS, required=False)

    split_cmd = sub.add_parser("split", help="Split available players into two practice teams")
    split_cmd.add_argument("--method", choices=("quick", "balanced"), default="balanced")

    ratings_cmd = sub.add_parser("ratings", help="Propose rating changes from recent performances")
    ratings_cmd.add_argument("--apply", action="store_true", help="Write the changes back to the database")

    opportunities_cmd = sub.add_parser("opportunities", help="Report match opportunity ratios")
    opportunities_cmd.set_defaults(handler=run_opportunities)

    for cmd, handler in ((squad_cmd, run_squad), (split_cmd, run_split), (ratings_cmd, run_ratings)):
        cmd.add_argument("--players", required=False, help="Comma-separated player ids (default: whole roster)")
        cmd.set_defaults(handler=handler)

    for cmd in (squad_cmd, split_cmd, ratings_cmd, opportunities_cmd):
        cmd.add_argument("--season", required=False, help="Season id (default: latest)")
        cmd.add_argument("--output", required=False, help="Optional output CSV path")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.handler(args)
    except InputError as exc:
        location = f" [{exc.player_id}.{exc.field}]" if exc.player_id else ""
        print(f"ERROR: {exc}{location}", file=sys.stderr)
        return 2
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
