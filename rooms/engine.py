"""Authoritative room state: moves, undo, auto-locks and win/loss.

Every write goes through `MemoryStore.room_lock(room_id)`: the engine reads a
copy of the room, validates the request against it, applies the change to the
copy and stores it back. A rejected request raises before anything is stored.
Puzzle dealing is CPU-bound and always happens before the lock is taken.
"""
from __future__ import annotations

import logging
import random
import threading
from typing import Callable, Optional

from solver.carver import Deal, deal_puzzle
from solver.solver_core import PEERS, UNITS, empty_grid, in_bounds, unit_is_complete
from types_sudoku import GameState, Grid, Mask, MoveKind

from .config import DotDict, difficulty_target, load_game_config
from .errors import (
    ColorTaken, InvalidMove, NicknameTaken, NothingToUndo, PlayerNotFound, RoomCodeTaken,
    RoomNotFound
)
from .models import Move, Room, empty_notes, utcnow
from .store import MemoryStore

logger = logging.getLogger(__name__)

MOVE_KINDS = ("number", "note", "clear", "toggle")

Dealer = Callable[[int, int, Optional[random.Random]], Deal]


def is_puzzle_completed(board: Grid, solution: Grid) -> bool:
    return all(board[r][c] != 0 and board[r][c] == solution[r][c] for r in range(9) for c in range(9))


def get_progress(board: Grid) -> tuple[int, int]:
    completed = sum(1 for row in board for v in row if v != 0)
    return completed, 81


def completed_unit_cells(board: Grid, solution: Grid) -> set:
    """Cells of every row, column and box that holds 1..9 matching the solution."""
    cells = set()
    for _, unit in UNITS:
        if unit_is_complete(board, unit) and all(board[r][c] == solution[r][c] for r, c in unit):
            cells.update(unit)
    return cells


def lock_completed_units(locked: Mask, board: Grid, solution: Grid) -> Mask:
    """OR newly completed units into `locked`; never clears a cell."""
    out = [row[:] for row in locked]
    for r, c in completed_unit_cells(board, solution):
        out[r][c] = True
    return out


def strip_note_from_peers(notes, row: int, col: int, digit: int) -> list:
    stripped = []
    for r, c in sorted(PEERS[(row, col)]):
        if digit in notes[r][c]:
            notes[r][c] = [n for n in notes[r][c] if n != digit]
            stripped.append((r, c))
    return stripped


class RoomEngine:
    def __init__(
        self,
        store: Optional[MemoryStore] = None,
        config: Optional[DotDict] = None,
        dealer: Optional[Dealer] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store = store or MemoryStore()
        self.config = config or load_game_config()
        self.dealer = dealer or deal_puzzle
        self.rng = rng
        self._create_lock = threading.Lock()

    @property
    def max_errors(self) -> int:
        return int(self.config.get("max_errors", 3))

    def _deal(self, difficulty: str) -> Deal:
        target = difficulty_target(self.config, difficulty)
        deal = self.dealer(target, int(self.config.get("logical_attempts", 3)), self.rng)
        logger.debug("dealt %s puzzle with %d givens (logical=%s)", difficulty, deal.filled, deal.logical)
        return deal

    def _room(self, room_id: int) -> Room:
        room = self.store.get_room(room_id)
        if room is None:
            raise RoomNotFound(f"Room {room_id} not found")
        return room

    def _player_in(self, room_id: int, player_id: int):
        player = self.store.get_player(player_id)
        if player is None:
            raise PlayerNotFound(f"Player {player_id} not found")
        if player.room_id != room_id:
            raise InvalidMove(f"Player {player_id} is not in room {room_id}")
        return player

    def _state(self, room_id: int) -> GameState:
        room = self._room(room_id)
        return {
            "room": room.to_dict(),
            "players": [p.to_dict() for p in self.store.players_in_room(room_id)],
            "recent_moves": [
                m.to_dict() for m in self.store.recent_moves(room_id, int(self.config.get("recent_moves", 5)))
            ],
        }

    def _settle(self, room: Room) -> None:
        """Terminal check after a mutation; win is evaluated before loss."""
        if room.is_game_over:
            return
        if is_puzzle_completed(room.board, room.solution):
            room.status = "won"
        elif room.errors >= self.max_errors:
            room.status = "lost"
        if room.is_game_over:
            room.game_ended_at = utcnow()
            logger.info("room %s %s after %d moves and %d errors", room.code, room.status, room.total_moves, room.errors)

    # lifecycle
    def create_room(self, name: str, difficulty: str, nickname: str, color: str) -> dict:
        difficulty_target(self.config, difficulty)
        if self.store.get_room_by_code(name) is not None:
            raise RoomCodeTaken("A room with this name already exists")
        deal = self._deal(difficulty)
        with self._create_lock:
            if self.store.get_room_by_code(name) is not None:
                raise RoomCodeTaken("A room with this name already exists")
            room = self.store.create_room(
                code=name,
                name=name,
                difficulty=difficulty,
                solution=deal.solution,
                board=deal.board,
                givens=deal.locked,
                locked=[row[:] for row in deal.locked],
            )
        player = self.store.create_player(room_id=room.id, nickname=nickname, color=color)
        logger.info("room %s created (%s)", room.code, difficulty)
        return {"room": room.to_dict(), "player": player.to_dict()}

    def join_room(self, code: str, nickname: str, color: str) -> dict:
        room = self.store.get_room_by_code(code)
        if room is None:
            raise RoomNotFound(f"Room {code!r} not found")
        with self.store.room_lock(room.id):
            online = [p for p in self.store.players_in_room(room.id) if p.is_online]
            if any(p.color == color for p in online):
                raise ColorTaken("Color already taken")
            if any(p.nickname == nickname for p in online):
                raise NicknameTaken("Nickname already taken")
            player = self.store.create_player(room_id=room.id, nickname=nickname, color=color)
        return {"room": room.to_dict(), "player": player.to_dict()}

    def get_state(self, room_id: int) -> GameState:
        with self.store.room_lock(room_id):
            return self._state(room_id)

    def new_game(self, room_id: int, difficulty: str) -> GameState:
        self._room(room_id)
        deal = self._deal(difficulty)
        with self.store.room_lock(room_id):
            room = self._room(room_id)
            now = utcnow()
            room.difficulty = difficulty
            room.solution = deal.solution
            room.board = deal.board
            room.givens = deal.locked
            room.locked = [row[:] for row in deal.locked]
            room.incorrect = empty_grid(False)
            room.notes = empty_notes()
            room.errors = 0
            room.total_moves = 0
            room.status = "active"
            room.game_started_at = now
            room.game_ended_at = None
            self.store.clear_moves(room_id)
            self.store.update_room(room)
            logger.info("room %s: new %s game", room.code, difficulty)
            return self._state(room_id)

    # moves
    def apply_move(
        self,
        room_id: int,
        player_id: int,
        row: int,
        col: int,
        kind: MoveKind,
        value: Optional[int] = None,
        notes: Optional[list] = None,
    ) -> GameState:
        with self.store.room_lock(room_id):
            room = self._room(room_id)
            self._player_in(room_id, player_id)
            if kind not in MOVE_KINDS:
                raise InvalidMove(f"Unknown move type {kind!r}")
            if not in_bounds(row, col):
                raise InvalidMove(f"Cell ({row}, {col}) is off the board")
            if room.is_game_over:
                raise InvalidMove("Game is over")
            if room.locked[row][col]:
                raise InvalidMove("Cell is locked")
            if value is not None and not 1 <= value <= 9:
                raise InvalidMove(f"Value {value} is not a digit")

            if kind == "toggle":
                if value is None:
                    raise InvalidMove("Toggle needs a digit")
                kind = "clear" if room.board[row][col] == value else "number"
            if kind == "note":
                if room.board[row][col] != 0:
                    raise InvalidMove("Notes are only allowed on empty cells")
                notes = sorted(set(notes or []))
                if any(not 1 <= n <= 9 for n in notes):
                    raise InvalidMove("Notes must be digits 1-9")

            previous = {
                "previous_value": room.board[row][col],
                "previous_notes": list(room.notes[row][col]),
                "previous_incorrect": room.incorrect[row][col],
            }
            is_correct = True
            stripped = []
            if kind == "number":
                is_correct = value is None or room.solution[row][col] == value
                room.board[row][col] = value or 0
                room.notes[row][col] = []
                if value is not None and not is_correct:
                    room.errors += 1
                    room.incorrect[row][col] = True
                else:
                    room.incorrect[row][col] = False
                if value is not None and is_correct:
                    stripped = strip_note_from_peers(room.notes, row, col, value)
            elif kind == "note":
                room.notes[row][col] = notes
            else:
                room.board[row][col] = 0
                room.notes[row][col] = []
                room.incorrect[row][col] = False

            room.locked = lock_completed_units(room.locked, room.board, room.solution)
            self.store.add_move(
                room_id=room_id,
                player_id=player_id,
                row=row,
                col=col,
                kind=kind,
                value=value if kind == "number" else None,
                notes=notes if kind == "note" else None,
                is_correct=is_correct,
                stripped_peers=stripped,
                **previous,
            )
            room.total_moves = self.store.count_moves(room_id)
            self._settle(room)
            self.store.update_room(room)
            if not is_correct:
                logger.debug("room %s: wrong digit at r%dc%d (%d/%d errors)", room.code, row + 1, col + 1, room.errors, self.max_errors)
            return self._state(room_id)

    def undo(self, room_id: int, player_id: int) -> GameState:
        with self.store.room_lock(room_id):
            room = self._room(room_id)
            self._player_in(room_id, player_id)
            if room.is_game_over:
                raise InvalidMove("Cannot undo moves after game is over")
            move = self.store.last_move_by_player(room_id, player_id)
            if move is None:
                raise NothingToUndo()

            row, col = move.row, move.col
            room.board[row][col] = move.previous_value
            room.notes[row][col] = list(move.previous_notes)
            room.incorrect[row][col] = move.previous_incorrect
            for r, c in move.stripped_peers:
                if room.board[r][c] == 0 and move.value not in room.notes[r][c]:
                    room.notes[r][c] = sorted(room.notes[r][c] + [move.value])
            if not move.is_correct:
                room.errors = max(0, room.errors - 1)

            self.store.delete_move(move.id)
            room.locked = lock_completed_units(room.givens, room.board, room.solution)
            room.total_moves = self.store.count_moves(room_id)
            self._settle(room)
            self.store.update_room(room)
            return self._state(room_id)

    # players
    def update_selection(
        self,
        player_id: int,
        row: Optional[int] = None,
        col: Optional[int] = None,
        highlighted_number: Optional[int] = None,
    ) -> dict:
        selected = (row, col) if row is not None and col is not None else None
        if selected is not None and not in_bounds(row, col):
            raise InvalidMove(f"Cell ({row}, {col}) is off the board")
        player = self.store.update_player(
            player_id, selected_cell=selected, highlighted_number=highlighted_number or None, is_online=True
        )
        if player is None:
            raise PlayerNotFound(f"Player {player_id} not found")
        return player.to_dict()

    def set_pencil_mode(self, player_id: int, enabled: bool) -> dict:
        player = self.store.update_player(player_id, pencil_mode=bool(enabled), is_online=True)
        if player is None:
            raise PlayerNotFound(f"Player {player_id} not found")
        return player.to_dict()

    def leave(self, player_id: int) -> None:
        if self.store.get_player(player_id) is None:
            raise PlayerNotFound(f"Player {player_id} not found")
        self.store.remove_player(player_id)
