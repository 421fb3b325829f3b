# tests/test_config.py
import pytest

from rooms.config import DEFAULT_CONFIG, ENV_VAR, difficulty_target, load_game_config, merge_overrides
from rooms.errors import InvalidDifficulty


def test_defaults():
    cfg = load_game_config()
    assert cfg.max_errors == 3
    assert [difficulty_target(cfg, d) for d in ("easy", "medium", "hard")] == [35, 30, 25]


def test_defaults_are_not_shared():
    cfg = load_game_config()
    cfg["difficulties"]["easy"]["filled_cells"] = 70
    assert DEFAULT_CONFIG["difficulties"]["easy"]["filled_cells"] == 35


def test_yaml_file_overrides_nested_keys(tmp_path):
    path = tmp_path / "game.yaml"
    path.write_text("max_errors: 5\ndifficulties:\n  hard:\n    filled_cells: 22\n", encoding="utf-8")
    cfg = load_game_config(path)
    assert cfg.max_errors == 5
    assert difficulty_target(cfg, "hard") == 22
    assert difficulty_target(cfg, "easy") == 35


def test_env_var_and_keyword_overrides(tmp_path, monkeypatch):
    path = tmp_path / "game.yaml"
    path.write_text("logical_attempts: 1\n", encoding="utf-8")
    monkeypatch.setenv(ENV_VAR, str(path))
    cfg = load_game_config(max_errors=4)
    assert cfg.logical_attempts == 1
    assert cfg.max_errors == 4


def test_shipped_config_matches_defaults():
    from pathlib import Path

    shipped = Path(__file__).resolve().parents[1] / "configs" / "game.yaml"
    assert dict(load_game_config(shipped)) == DEFAULT_CONFIG


def test_merge_skips_none():
    assert merge_overrides({"a": 1}, a=None, b=2) == {"a": 1, "b": 2}


def test_unknown_difficulty():
    with pytest.raises(InvalidDifficulty):
        difficulty_target(load_game_config(), "expert")
