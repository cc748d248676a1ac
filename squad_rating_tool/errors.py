from __future__ import annotations


class InputError(ValueError):
    """Malformed player data detected before any scoring runs."""

    def __init__(self, message: str, player_id: str | None = None, field: str | None = None) -> None:
        super().__init__(message)
        self.player_id = player_id
        self.field = field
