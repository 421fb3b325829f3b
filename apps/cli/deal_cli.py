"""Deal a puzzle from the command line and report how it was built: givens, uniqueness, and whether singles alone solve it."""

# deal_cli.py
# - Generates a full solution
# - Carves it for the requested difficulty (same policy the rooms use)
# - Re-checks uniqueness and prints the deal as JSON
#
# Usage:
#   python -m apps.cli.deal_cli --difficulty hard --seed 123 --steps

import argparse
import json
import logging
import random

from rooms.config import difficulty_target, load_game_config
from solver.carver import deal_puzzle
from solver.generator import count_solutions, solve
from solver.sudoku_tools import logical_solve


def as_lines(grid):
    return ["".join(str(v) if v else "." for v in row) for row in grid]


def main(args):
    logging.basicConfig(level=getattr(logging, args.log_level.upper()), format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    cfg = load_game_config(args.config)
    target = difficulty_target(cfg, args.difficulty)
    attempts = args.logical_attempts if args.logical_attempts is not None else int(cfg.logical_attempts)
    rng = random.Random(args.seed)

    deal = deal_puzzle(target, attempts, rng)
    logic = logical_solve(deal.board)
    payload = {
        "difficulty": args.difficulty,
        "target_filled": target,
        "filled": deal.filled,
        "logical": deal.logical,
        "solutions": count_solutions(deal.board),
        "matches_solution": solve(deal.board) == deal.solution,
        "board": as_lines(deal.board),
        "solution": as_lines(deal.solution),
    }
    if args.steps:
        payload["steps"] = logic["steps"]
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    ap = argparse.ArgumentParser()
    ap.add_argument("--difficulty", type=str, default="medium")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--config", type=str, default=None, help="YAML file layered over the defaults")
    ap.add_argument("--logical_attempts", type=int, default=None)
    ap.add_argument("--steps", action="store_true", help="Include the singles-only solve path")
    ap.add_argument("--log_level", type=str, default="warning")
    args = ap.parse_args()
    main(args)
