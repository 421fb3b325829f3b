# types_sudoku.py
from __future__ import annotations

from typing import Any, Literal, TypedDict

Grid = list[list[int]]
"""A 9x9 Sudoku grid as rows of integers (0 = empty)."""

NotesGrid = list[list[list[int]]]
"""Per-cell sorted pencil marks (1..9); empty wherever the board holds a digit."""

Mask = list[list[bool]]
"""9x9 boolean mask (locked cells, incorrect cells, givens)."""

Cell = tuple[int, int]
"""(row, col), 0-based."""

MoveKind = Literal["number", "note", "clear", "toggle"]
RoomStatus = Literal["active", "won", "lost"]


class Step(TypedDict, total=False):
    """A single deduction applied by the logical solver."""

    technique: str  # 'naked_single' or 'hidden_single'
    cell: str  # e.g. 'r4c7' (1-based, for display)
    digit: int
    unit: str  # for hidden singles: 'r4', 'c7' or 'b5'


class GameState(TypedDict):
    """Full room snapshot handed to consumers after every mutation."""

    room: dict[str, Any]
    players: list[dict[str, Any]]
    recent_moves: list[dict[str, Any]]
