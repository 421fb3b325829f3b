"""Carve playable puzzles out of full solutions.

The uniqueness check is the hard gate: a removal that lets the grid complete in
more than one way is always undone. Logical solvability (singles only) is a
best-effort property: `deal_puzzle` tries the stricter carve on a few fresh
solutions and falls back to the uniqueness-only carve when none reaches the
requested number of givens.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional

from .generator import generate_solution, has_unique_solution
from .solver_core import Grid, clone_grid
from .sudoku_tools import is_logically_solvable

logger = logging.getLogger(__name__)

Oracle = Callable[[Grid], bool]


@dataclass
class Deal:
    solution: Grid
    board: Grid
    locked: list
    logical: bool

    @property
    def filled(self) -> int:
        return sum(1 for row in self.board for v in row if v != 0)


def locked_from_board(board: Grid) -> list:
    return [[v != 0 for v in row] for row in board]


def _logical_oracle(grid: Grid) -> bool:
    # uniqueness first: it rejects far more removals than it accepts late in the carve
    return has_unique_solution(grid) and is_logically_solvable(grid)


def carve(
    solution: Grid,
    target_filled: int,
    rng: Optional[random.Random] = None,
    oracle: Optional[Oracle] = None,
) -> tuple[Grid, list]:
    """Remove cells from `solution` until `target_filled` givens remain.

    Returns (board, locked). When the shuffled position list runs out first the
    board keeps whatever was achieved, so it may hold more givens than asked.
    """
    rng = rng or random.Random()
    oracle = oracle or has_unique_solution
    target_filled = max(0, min(81, target_filled))
    to_remove = 81 - target_filled

    board = clone_grid(solution)
    positions = [(r, c) for r in range(9) for c in range(9)]
    rng.shuffle(positions)

    removed = 0
    for r, c in positions:
        if removed >= to_remove:
            break
        keep = board[r][c]
        board[r][c] = 0
        if oracle(board):
            removed += 1
        else:
            board[r][c] = keep
    if removed < to_remove:
        logger.debug("carve stopped at %d givens (target %d)", 81 - removed, target_filled)
    return board, locked_from_board(board)


def carve_logical(
    solution: Grid,
    target_filled: int,
    rng: Optional[random.Random] = None,
) -> Optional[tuple[Grid, list]]:
    """Like `carve`, but every intermediate grid must also fall to singles.

    Returns None when the target count is not reached.
    """
    board, locked = carve(solution, target_filled, rng=rng, oracle=_logical_oracle)
    filled = sum(1 for row in board for v in row if v != 0)
    if filled > target_filled:
        return None
    return board, locked


def deal_puzzle(
    target_filled: int,
    logical_attempts: int = 3,
    rng: Optional[random.Random] = None,
) -> Deal:
    """Generate a solution and carve it to `target_filled` givens."""
    rng = rng or random.Random()
    for attempt in range(logical_attempts):
        solution = generate_solution(rng)
        carved = carve_logical(solution, target_filled, rng=rng)
        if carved is not None:
            board, locked = carved
            logger.debug("logical puzzle dealt on attempt %d", attempt + 1)
            return Deal(solution=solution, board=board, locked=locked, logical=True)

    if logical_attempts:
        logger.warning(
            "no singles-only puzzle with %d givens after %d attempts; dealing uniqueness-only carve",
            target_filled,
            logical_attempts,
        )
    solution = generate_solution(rng)
    board, locked = carve(solution, target_filled, rng=rng)
    return Deal(solution=solution, board=board, locked=locked, logical=is_logically_solvable(board))
