"""Room, player and move records kept by the store."""
from __future__ import annotations

import copy
import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from solver.solver_core import empty_grid
from types_sudoku import Cell, Grid, Mask, NotesGrid, RoomStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def empty_notes() -> NotesGrid:
    return [[[] for _ in range(9)] for _ in range(9)]


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, tuple):
        return list(value)
    return value


@dataclass
class Room:
    id: int
    code: str
    name: str
    difficulty: str
    solution: Grid
    board: Grid
    givens: Mask
    locked: Mask
    incorrect: Mask = field(default_factory=lambda: empty_grid(False))
    notes: NotesGrid = field(default_factory=empty_notes)
    errors: int = 0
    total_moves: int = 0
    status: RoomStatus = "active"
    created_at: datetime = field(default_factory=utcnow)
    game_started_at: datetime = field(default_factory=utcnow)
    game_ended_at: Optional[datetime] = None

    @property
    def is_game_over(self) -> bool:
        return self.status != "active"

    @property
    def is_won(self) -> bool:
        return self.status == "won"

    def to_dict(self, include_solution: bool = False) -> dict[str, Any]:
        data = {k: _jsonable(v) for k, v in dataclasses.asdict(self).items()}
        if not include_solution:
            data.pop("solution")
        data["is_game_over"] = self.is_game_over
        data["is_won"] = self.is_won
        return data


@dataclass
class Player:
    id: int
    room_id: int
    nickname: str
    color: str
    selected_cell: Optional[Cell] = None
    highlighted_number: Optional[int] = None
    pencil_mode: bool = False
    is_online: bool = True
    last_seen: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {k: _jsonable(v) for k, v in dataclasses.asdict(self).items()}


@dataclass
class Move:
    """Audit record; the `previous_*` fields are the snapshot undo restores."""

    id: int
    room_id: int
    player_id: int
    row: int
    col: int
    kind: str  # number | note | clear
    value: Optional[int] = None
    notes: Optional[list[int]] = None
    is_correct: bool = True
    previous_value: int = 0
    previous_notes: list[int] = field(default_factory=list)
    previous_incorrect: bool = False
    # peers whose notes lost `value` when a correct digit was placed
    stripped_peers: list[Cell] = field(default_factory=list)
    timestamp: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        data["stripped_peers"] = [list(p) for p in self.stripped_peers]
        return {k: _jsonable(v) for k, v in data.items()}


def snapshot(record):
    """Detached copy handed out to readers."""
    return copy.deepcopy(record)
