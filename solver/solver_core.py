"""Core Sudoku utilities used by the generator, the logical filter and the room engine: index math, peers, unit iterators, placement checks and the single-candidate techniques."""

# solver_core.py
# - constraint checker (is_valid_placement)
# - candidate computation
# - naked singles & hidden singles (placements)
# Grid is 9x9 list of lists of ints (0..9). 0 = blank. Coordinates are 0-based;
# string keys ("r1c1") are 1-based because they are meant for people.

from __future__ import annotations

Cell = tuple[int, int]  # (row, col) 0-based
Grid = list[list[int]]

DIGITS = range(1, 10)


def in_bounds(r: int, c: int) -> bool:
    return 0 <= r <= 8 and 0 <= c <= 8


def rc_to_key(r: int, c: int) -> str:
    return f"r{r + 1}c{c + 1}"


def key_to_rc(key: str) -> Cell:
    r = int(key.split("c")[0][1:])
    c = int(key.split("c")[1])
    return (r - 1, c - 1)


def empty_grid(fill=0) -> list:
    return [[fill] * 9 for _ in range(9)]


def clone_grid(grid: Grid) -> Grid:
    return [row[:] for row in grid]


def row_values(grid: Grid, r: int) -> set:
    return set(grid[r]) - {0}


def col_values(grid: Grid, c: int) -> set:
    return {grid[i][c] for i in range(9)} - {0}


def box_values(grid: Grid, r: int, c: int) -> set:
    r0 = 3 * (r // 3)
    c0 = 3 * (c // 3)
    return {grid[r0 + i][c0 + j] for i in range(3) for j in range(3)} - {0}


def which_box(r: int, c: int) -> int:
    return 3 * (r // 3) + (c // 3)


def unit_cells_row(r: int) -> list[Cell]:
    return [(r, c) for c in range(9)]


def unit_cells_col(c: int) -> list[Cell]:
    return [(r, c) for r in range(9)]


def unit_cells_box(b: int) -> list[Cell]:
    r0 = 3 * (b // 3)
    c0 = 3 * (b % 3)
    return [(r0 + i, c0 + j) for i in range(3) for j in range(3)]


def all_units() -> list[tuple[str, list[Cell]]]:
    """The 27 units as (label, cells); labels are 1-based ('r1', 'c9', 'b5')."""
    units = [(f"r{i + 1}", unit_cells_row(i)) for i in range(9)]
    units += [(f"c{i + 1}", unit_cells_col(i)) for i in range(9)]
    units += [(f"b{i + 1}", unit_cells_box(i)) for i in range(9)]
    return units


UNITS = all_units()


def peers(r: int, c: int) -> set:
    """Return the set of peer coordinates for a given cell (same row, column, and 3x3 box)."""
    ps = set()
    for j in range(9):
        if j != c:
            ps.add((r, j))
    for i in range(9):
        if i != r:
            ps.add((i, c))
    for rr, cc in unit_cells_box(which_box(r, c)):
        if (rr, cc) != (r, c):
            ps.add((rr, cc))
    return ps


PEERS = {(r, c): frozenset(peers(r, c)) for r in range(9) for c in range(9)}


def is_valid_placement(grid: Grid, r: int, c: int, value: int) -> bool:
    """True if `value` does not already appear in the row, column or box of (r, c).

    The target cell itself is not compared, and empty cells never conflict.
    """
    if value == 0:
        return True
    for j in range(9):
        if j != c and grid[r][j] == value:
            return False
    for i in range(9):
        if i != r and grid[i][c] == value:
            return False
    r0 = 3 * (r // 3)
    c0 = 3 * (c // 3)
    for i in range(r0, r0 + 3):
        for j in range(c0, c0 + 3):
            if (i, j) != (r, c) and grid[i][j] == value:
                return False
    return True


def candidate_map(grid: Grid) -> dict[Cell, set]:
    cand = {}
    for r in range(9):
        for c in range(9):
            if grid[r][c] == 0:
                used = row_values(grid, r) | col_values(grid, c) | box_values(grid, r, c)
                cand[(r, c)] = set(DIGITS) - used
    return cand


def compute_candidates(grid: Grid) -> dict[str, list]:
    return {rc_to_key(r, c): sorted(opts) for (r, c), opts in candidate_map(grid).items()}


def find_naked_singles(candidates: dict[Cell, set]) -> list[dict]:
    moves = []
    for (r, c), opts in candidates.items():
        if len(opts) == 1:
            moves.append(
                {
                    "technique": "naked_single",
                    "cell": rc_to_key(r, c),
                    "digit": next(iter(opts)),
                }
            )
    return moves


def find_hidden_singles(candidates: dict[Cell, set]) -> list[dict]:
    moves = []
    for label, cells in UNITS:
        pos_for_digit = {d: [] for d in DIGITS}
        for cell in cells:
            for d in candidates.get(cell, ()):
                pos_for_digit[d].append(cell)
        for d, spots in pos_for_digit.items():
            if len(spots) == 1:
                r, c = spots[0]
                moves.append(
                    {
                        "technique": "hidden_single",
                        "cell": rc_to_key(r, c),
                        "digit": d,
                        "unit": label,
                    }
                )
    return moves


def unit_is_complete(grid: Grid, cells: list[Cell]) -> bool:
    """A unit holding a permutation of 1..9."""
    return sorted(grid[r][c] for r, c in cells) == list(DIGITS)
