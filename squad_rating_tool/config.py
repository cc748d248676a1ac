from __future__ import annotations

import json
from pathlib import Path
from typing import Any

DEFAULT_WEIGHTS: dict[str, Any] = {
    # rating blend
    "weight_current": 0.7,
    "weight_performance": 0.3,
    "lookback_matches": 5,
    # opportunity
    "opportunity_target": 0.6,
    "opportunity_weight": 10.0,
    # selection score
    "injured_penalty": 10.0,
    "recovering_penalty": 3.0,
    "pitch_bonus": 1.5,
    "captain_choice_bonus": 1.5,
    # allocation
    "squad_size": 11,
    "min_bowling_options": 4,
    "bowling_capable_skill": 6,
    "key_skill_threshold": 8,
    "rebalance_max_iterations": 10,
    "strategy": "greedy",
}


def load_weights(path: str | Path | None = None) -> dict[str, Any]:
    if path is None:
        return DEFAULT_WEIGHTS.copy()

    config = DEFAULT_WEIGHTS.copy()
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    for key, value in payload.items():
        if key not in config:
            continue
        default = config[key]
        if isinstance(default, str):
            config[key] = str(value)
        elif isinstance(default, int):
            config[key] = int(value)
        else:
            config[key] = float(value)
    return config
