from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

DB_PATH_VAR = "SQUAD_DB_PATH"
WEIGHTS_PATH_VAR = "SQUAD_WEIGHTS_PATH"
STRATEGY_VAR = "SQUAD_STRATEGY"


def load_env_files(env_path: str | Path = ".env") -> None:
    """Load `.env` into the process environment without overriding set values."""
    path = Path(env_path)
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def get_setting(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value:
        return value
    return default
