# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so "apps", "rooms", "solver" can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rooms.config import load_game_config  # noqa: E402
from rooms.engine import RoomEngine  # noqa: E402
from rooms.store import MemoryStore  # noqa: E402
from solver.carver import Deal, locked_from_board  # noqa: E402

# Classic 30-given puzzle with r1c1 (a 5) removed.
PUZZLE = [
    [0, 3, 0, 0, 7, 0, 0, 0, 0],
    [6, 0, 0, 1, 9, 5, 0, 0, 0],
    [0, 9, 8, 0, 0, 0, 0, 6, 0],
    [8, 0, 0, 0, 6, 0, 0, 0, 3],
    [4, 0, 0, 8, 0, 3, 0, 0, 1],
    [7, 0, 0, 0, 2, 0, 0, 0, 6],
    [0, 6, 0, 0, 0, 0, 2, 8, 0],
    [0, 0, 0, 4, 1, 9, 0, 0, 5],
    [0, 0, 0, 0, 8, 0, 0, 7, 9],
]

SOLUTION = [
    [5, 3, 4, 6, 7, 8, 9, 1, 2],
    [6, 7, 2, 1, 9, 5, 3, 4, 8],
    [1, 9, 8, 3, 4, 2, 5, 6, 7],
    [8, 5, 9, 7, 6, 1, 4, 2, 3],
    [4, 2, 6, 8, 5, 3, 7, 9, 1],
    [7, 1, 3, 9, 2, 4, 8, 5, 6],
    [9, 6, 1, 5, 3, 7, 2, 8, 4],
    [2, 8, 7, 4, 1, 9, 6, 3, 5],
    [3, 4, 5, 2, 8, 6, 1, 7, 9],
]


@pytest.fixture
def puzzle():
    return [row[:] for row in PUZZLE]


@pytest.fixture
def solution():
    return [row[:] for row in SOLUTION]


def fixed_dealer(target_filled, logical_attempts, rng):
    board = [row[:] for row in PUZZLE]
    return Deal(solution=[row[:] for row in SOLUTION], board=board, locked=locked_from_board(board), logical=True)


@pytest.fixture
def engine():
    return RoomEngine(store=MemoryStore(), config=load_game_config(), dealer=fixed_dealer)


@pytest.fixture
def room(engine):
    """A dealt room with two players; returns (room_id, alice_id, bob_id)."""
    created = engine.create_room("lobby", "easy", "alice", "#EF4444")
    room_id = created["room"]["id"]
    bob = engine.join_room("lobby", "bob", "#3B82F6")
    return room_id, created["player"]["id"], bob["player"]["id"]
