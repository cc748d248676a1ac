from __future__ import annotations

import logging
from collections.abc import Iterable

from .errors import InputError
from .models import (
    BATTING_POSITIONS,
    BATTING_STYLES,
    BOWLING_STYLES,
    FORMS,
    INJURY_STATUSES,
    ROLES,
    Player,
    RosterEntry,
)

logger = logging.getLogger(__name__)

RATED_FIELDS = (
    "batting_skill",
    "bowling_skill",
    "fielding_skill",
    "experience_level",
    "power_hitting",
    "running_between_wickets",
    "pressure_handling",
    "fitness_level",
)

_CHOICE_FIELDS = (
    ("primary_role", ROLES),
    ("injury_status", INJURY_STATUSES),
    ("batting_style", BATTING_STYLES),
    ("bowling_style", BOWLING_STYLES),
    ("batting_position", BATTING_POSITIONS),
)


def validate_player(player: Player) -> None:
    for field_name in RATED_FIELDS:
        value = getattr(player, field_name)
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 10:
            raise InputError(
                f"{player.name}: {field_name} must be an integer in [1, 10], got {value!r}",
                player_id=player.player_id,
                field=field_name,
            )

    for field_name, allowed in _CHOICE_FIELDS:
        value = getattr(player, field_name)
        if value not in allowed:
            raise InputError(
                f"{player.name}: unknown {field_name} {value!r}. Allowed: {list(allowed)}",
                player_id=player.player_id,
                field=field_name,
            )

    if player.captain_choice is not None and player.captain_choice not in (1, 2, 3):
        raise InputError(
            f"{player.name}: captain_choice must be 1, 2 or 3",
            player_id=player.player_id,
            field="captain_choice",
        )


def validate_pool(entries: Iterable[RosterEntry]) -> list[RosterEntry]:
    """Check every entry and return the pool as a list.

    Raises InputError on the first malformed record so the caller can fix the
    data upstream; nothing is scored until the whole pool passes.
    """
    pool = list(entries)
    seen: set[str] = set()
    for entry in pool:
        validate_player(entry.player)
        if entry.player_id in seen:
            raise InputError(
                f"Duplicate player id in pool: {entry.player_id}",
                player_id=entry.player_id,
                field="player_id",
            )
        seen.add(entry.player_id)

        snapshot = entry.snapshot
        if snapshot is None:
            continue
        if snapshot.player_id != entry.player_id:
            raise InputError(
                f"Season snapshot for {snapshot.player_id} attached to {entry.player_id}",
                player_id=entry.player_id,
                field="snapshot",
            )
        if snapshot.current_form not in FORMS:
            raise InputError(
                f"{entry.player.name}: unknown form {snapshot.current_form!r}",
                player_id=entry.player_id,
                field="current_form",
            )
        if snapshot.matches_available < 0 or snapshot.matches_played < 0:
            raise InputError(
                f"{entry.player.name}: match counts cannot be negative",
                player_id=entry.player_id,
                field="matches_available",
            )

    logger.debug("Validated pool of %d players", len(pool))
    return pool
