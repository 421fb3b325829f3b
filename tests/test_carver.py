# tests/test_carver.py
import logging
import random

import pytest

from solver import carver
from solver.carver import carve, carve_logical, deal_puzzle
from solver.generator import count_solutions, generate_solution, solve
from solver.sudoku_tools import is_logically_solvable


def _filled(board):
    return sum(1 for row in board for v in row if v != 0)


@pytest.mark.parametrize("seed,target", [(1, 35), (2, 30), (3, 25)])
def test_carved_puzzle_is_unique_and_matches_solution(seed, target):
    rng = random.Random(seed)
    solution = generate_solution(rng)
    board, locked = carve(solution, target, rng=rng)
    assert _filled(board) >= target
    assert count_solutions(board) == 1
    assert solve(board) == solution
    assert locked == [[v != 0 for v in row] for row in board]
    for r in range(9):
        for c in range(9):
            assert board[r][c] in (0, solution[r][c])


def test_carve_stops_at_target(solution):
    board, _ = carve(solution, 60, rng=random.Random(3))
    assert _filled(board) == 60


def test_carve_nothing_to_remove(solution):
    board, locked = carve(solution, 81, rng=random.Random(0))
    assert board == solution
    assert all(all(row) for row in locked)


def test_unreachable_target_still_terminates(solution):
    board, _ = carve(solution, 5, rng=random.Random(9))
    assert _filled(board) > 5
    assert count_solutions(board) == 1


def test_carve_leaves_solution_untouched(solution):
    before = [row[:] for row in solution]
    carve(solution, 30, rng=random.Random(4))
    assert solution == before


def test_logical_carve_is_singles_solvable(solution):
    carved = carve_logical(solution, 45, rng=random.Random(11))
    assert carved is not None
    board, _ = carved
    assert _filled(board) == 45
    assert is_logically_solvable(board)
    assert count_solutions(board) == 1


def test_deal_puzzle_logical_path():
    deal = deal_puzzle(40, logical_attempts=3, rng=random.Random(8))
    assert deal.logical
    assert deal.filled == 40
    assert count_solutions(deal.board) == 1
    assert solve(deal.board) == deal.solution


def test_deal_puzzle_falls_back_to_uniqueness_only(monkeypatch, caplog):
    calls = []

    def never(solution, target_filled, rng=None):
        calls.append(target_filled)
        return None

    monkeypatch.setattr(carver, "carve_logical", never)
    with caplog.at_level(logging.WARNING, logger="solver.carver"):
        deal = deal_puzzle(30, logical_attempts=2, rng=random.Random(5))
    assert calls == [30, 30]
    assert "uniqueness-only" in caplog.text
    assert count_solutions(deal.board) == 1
    assert deal.locked == [[v != 0 for v in row] for row in deal.board]
    assert deal.logical == is_logically_solvable(deal.board)


def test_deal_puzzle_without_logical_attempts():
    deal = deal_puzzle(30, logical_attempts=0, rng=random.Random(6))
    assert deal.filled >= 30
    assert count_solutions(deal.board) == 1
