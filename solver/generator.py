"""Backtracking fill and capped solution counting.

`generate_solution` fills an empty grid with shuffled candidates, which is what
makes every dealt puzzle different. `count_solutions` walks the same search
space but keeps going after the first completion so a carved grid can be
checked for uniqueness; it stops as soon as `cap` completions are seen.
"""
from __future__ import annotations

import logging
import random
from typing import Optional

from .solver_core import DIGITS, Grid, clone_grid, empty_grid, is_valid_placement, which_box

logger = logging.getLogger(__name__)


class GenerationInvariantViolation(RuntimeError):
    """The generator could not complete a grid. This is a bug, not a user error."""


def _fill(grid: Grid, rng: random.Random, pos: int = 0) -> bool:
    # row-major walk; cells before `pos` are already filled
    while pos < 81 and grid[pos // 9][pos % 9] != 0:
        pos += 1
    if pos == 81:
        return True
    r, c = divmod(pos, 9)
    numbers = list(DIGITS)
    rng.shuffle(numbers)
    for num in numbers:
        if is_valid_placement(grid, r, c, num):
            grid[r][c] = num
            if _fill(grid, rng, pos + 1):
                return True
            grid[r][c] = 0
    return False


def generate_solution(rng: Optional[random.Random] = None) -> Grid:
    """Return a complete, constraint-satisfying 9x9 grid."""
    rng = rng or random.Random()
    grid = empty_grid()
    if not _fill(grid, rng):
        raise GenerationInvariantViolation("backtracking could not fill an empty grid")
    return grid


class _Counter:
    """Capped solution counter over row/col/box usage sets."""

    def __init__(self, grid: Grid, cap: int) -> None:
        self.grid = clone_grid(grid)
        self.cap = cap
        self.found = 0
        self.first: Optional[Grid] = None
        self.rows = [set() for _ in range(9)]
        self.cols = [set() for _ in range(9)]
        self.boxes = [set() for _ in range(9)]
        self.empties = []
        self.consistent = True
        for r in range(9):
            for c in range(9):
                v = self.grid[r][c]
                if v == 0:
                    self.empties.append((r, c))
                    continue
                b = which_box(r, c)
                if v in self.rows[r] or v in self.cols[c] or v in self.boxes[b]:
                    self.consistent = False
                self.rows[r].add(v)
                self.cols[c].add(v)
                self.boxes[b].add(v)

    def _options(self, r: int, c: int) -> list[int]:
        used = self.rows[r] | self.cols[c] | self.boxes[which_box(r, c)]
        return [d for d in DIGITS if d not in used]

    def _pick(self):
        # most constrained empty cell first; keeps the search shallow on sparse grids
        best = None
        best_opts = None
        for idx, (r, c) in enumerate(self.empties):
            if self.grid[r][c] != 0:
                continue
            opts = self._options(r, c)
            if best_opts is None or len(opts) < len(best_opts):
                best, best_opts = idx, opts
                if len(opts) <= 1:
                    break
        return best, best_opts

    def search(self) -> None:
        if self.found >= self.cap:
            return
        idx, opts = self._pick()
        if idx is None:
            self.found += 1
            if self.first is None:
                self.first = clone_grid(self.grid)
            return
        r, c = self.empties[idx]
        b = which_box(r, c)
        for d in opts:
            self.grid[r][c] = d
            self.rows[r].add(d)
            self.cols[c].add(d)
            self.boxes[b].add(d)
            self.search()
            self.rows[r].discard(d)
            self.cols[c].discard(d)
            self.boxes[b].discard(d)
            self.grid[r][c] = 0
            if self.found >= self.cap:
                return


def count_solutions(grid: Grid, cap: int = 2) -> int:
    """Number of completions of `grid`, counting no further than `cap`."""
    counter = _Counter(grid, cap)
    if not counter.consistent:
        return 0
    counter.search()
    return counter.found


def has_unique_solution(grid: Grid) -> bool:
    return count_solutions(grid, cap=2) == 1


def solve(grid: Grid) -> Optional[Grid]:
    """First completion of `grid`, or None if it has none."""
    counter = _Counter(grid, cap=1)
    if not counter.consistent:
        return None
    counter.search()
    return counter.first
