from __future__ import annotations
import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

from .errors import InvalidDifficulty

ENV_VAR = "SUDOKU_ROOMS_CONFIG"

DEFAULT_CONFIG: Dict[str, Any] = {
    "difficulties": {
        "easy": {"name": "Easy", "filled_cells": 35},
        "medium": {"name": "Medium", "filled_cells": 30},
        "hard": {"name": "Hard", "filled_cells": 25},
    },
    "max_errors": 3,
    "logical_attempts": 3,
    "recent_moves": 5,
    "player_colors": ["#EF4444", "#3B82F6", "#10B981", "#F59E0B", "#8B5CF6", "#EC4899"],
}

class DotDict(dict):
    __getattr__ = dict.get
    __setattr__ = dict.__setitem__
    __delattr__ = dict.__delitem__

def load_yaml(path: str | Path) -> DotDict:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return DotDict(data)

def merge_overrides(cfg: Dict[str, Any], **overrides) -> Dict[str, Any]:
    for k, v in overrides.items():
        if v is None:
            continue
        if isinstance(v, dict) and isinstance(cfg.get(k), dict):
            cfg[k] = merge_overrides(dict(cfg[k]), **v)
        else:
            cfg[k] = v
    return cfg

def load_game_config(path: Optional[str | Path] = None, **overrides) -> DotDict:
    """Defaults, then the YAML file (explicit path or $SUDOKU_ROOMS_CONFIG), then keyword overrides."""
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    path = path or os.environ.get(ENV_VAR)
    if path:
        merge_overrides(cfg, **load_yaml(path))
    merge_overrides(cfg, **overrides)
    return DotDict(cfg)

def difficulty_target(cfg: Dict[str, Any], name: str) -> int:
    tiers = cfg.get("difficulties") or {}
    if name not in tiers:
        raise InvalidDifficulty(f"Invalid difficulty: {name!r}")
    return int(tiers[name]["filled_cells"])
