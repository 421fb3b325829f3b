"""Human-style solving helpers: grid sanity checks, candidate calculation and the singles-only logical solver used to filter carved puzzles. Also provides a tool-friendly interface for the API and CLI."""

# sudoku_tools.py
from __future__ import annotations

from typing import Dict, List, Tuple

from types_sudoku import Step

from .solver_core import (
    DIGITS, PEERS, UNITS, Grid, candidate_map, clone_grid, compute_candidates,
    find_hidden_singles, find_naked_singles, key_to_rc
)


class DeadEnd(Exception):
    """A cell (or a unit) ran out of options during deduction."""


def sanity_check(original:Grid, current:Grid)->Dict:
    issues = []
    for r in range(9):
        for c in range(9):
            if original[r][c] != 0 and current[r][c] not in (0, original[r][c]):
                issues.append({"type":"given_overwritten","cell":f"r{r+1}c{c+1}",
                               "given": original[r][c], "found": current[r][c]})
    def duplicates_in_unit(vals):
        seen=set(); dups=set()
        for v in vals:
            if v==0: continue
            if v in seen: dups.add(v)
            seen.add(v)
        return dups
    for label, cells in UNITS:
        vals = [current[r][c] for r, c in cells]
        dups = duplicates_in_unit(vals)
        if dups:
            bad = [f"r{r+1}c{c+1}" for (r, c), v in zip(cells, vals) if v in dups]
            issues.append({"type":"duplicate","unit":label,"digits":sorted(dups),"cells":bad})
    return {"ok": len(issues)==0, "issues": issues}

def compute_candidates_tool(current:Grid)->Dict:
    """Compute candidate digits for each empty cell in the current grid. Returns a dict like {'candidates': {'r1c2':[1,2,5], ...}}."""
    return {"candidates": compute_candidates(current)}

def _place(cur:Grid, cands:Dict, r:int, c:int, digit:int):
    if digit not in cands.get((r, c), ()):
        # two singles disagreed about this cell during the same pass
        raise DeadEnd(f"r{r+1}c{c+1} cannot take {digit}")
    cur[r][c] = digit
    del cands[(r, c)]
    for peer in PEERS[(r, c)]:
        opts = cands.get(peer)
        if opts is not None:
            opts.discard(digit)
            if not opts:
                raise DeadEnd(f"r{peer[0]+1}c{peer[1]+1} has no candidates left")

def _check_units(cur:Grid, cands:Dict):
    for label, cells in UNITS:
        placed = {cur[r][c] for r, c in cells}
        for d in DIGITS:
            if d in placed:
                continue
            if not any(d in cands.get(cell, ()) for cell in cells):
                raise DeadEnd(f"{d} has no place left in {label}")

def _propagate(puzzle:Grid) -> Tuple[Grid, List[Step]]:
    cur = clone_grid(puzzle)
    cands = candidate_map(cur)
    steps: List[Step] = []
    if not sanity_check(puzzle, puzzle)["ok"]:
        raise DeadEnd("givens already conflict")
    if any(not opts for opts in cands.values()):
        raise DeadEnd("empty cell with no candidates")
    while cands:
        _check_units(cur, cands)
        singles = find_naked_singles(cands) + find_hidden_singles(cands)
        progressed = False
        for s in singles:
            r, c = key_to_rc(s["cell"])
            if cur[r][c] != 0:
                if cur[r][c] != s["digit"]:
                    raise DeadEnd(f"{s['cell']} claimed by two digits")
                continue
            _place(cur, cands, r, c, s["digit"])
            steps.append(s)
            progressed = True
        if not progressed:
            break
    return cur, steps

def logical_solve(puzzle:Grid) -> Dict:
    """Apply naked and hidden singles until nothing fires.

    Returns {'grid', 'steps', 'solved', 'dead_end'}; `solved` is True only when
    the fixed point is a completely filled grid.
    """
    try:
        cur, steps = _propagate(puzzle)
    except DeadEnd:
        return {"grid": clone_grid(puzzle), "steps": [], "solved": False, "dead_end": True}
    solved = all(v != 0 for row in cur for v in row)
    return {"grid": cur, "steps": steps, "solved": solved, "dead_end": False}

def is_logically_solvable(puzzle:Grid) -> bool:
    return logical_solve(puzzle)["solved"]
