"""In-memory storage for rooms, players and moves.

Records go in and come out as copies, so callers can edit what they got back
without touching stored state until they call one of the update methods.
Per-room locks serialize writers of the same room; different rooms never wait
on each other.
"""
from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from .models import Move, Player, Room, snapshot, utcnow


class MemoryStore:
    def __init__(self) -> None:
        self._rooms: dict[int, Room] = {}
        self._players: dict[int, Player] = {}
        self._moves: dict[int, Move] = {}
        self._room_ids = itertools.count(1)
        self._player_ids = itertools.count(1)
        self._move_ids = itertools.count(1)
        self._registry = threading.Lock()
        self._room_locks: dict[int, threading.RLock] = {}

    @contextmanager
    def room_lock(self, room_id: int) -> Iterator[None]:
        with self._registry:
            lock = self._room_locks.setdefault(room_id, threading.RLock())
        with lock:
            yield

    # rooms
    def create_room(self, **fields) -> Room:
        with self._registry:
            room = Room(id=next(self._room_ids), **fields)
            self._rooms[room.id] = room
            self._room_locks[room.id] = threading.RLock()
        return snapshot(room)

    def get_room(self, room_id: int) -> Optional[Room]:
        room = self._rooms.get(room_id)
        return snapshot(room) if room is not None else None

    def get_room_by_code(self, code: str) -> Optional[Room]:
        for room in list(self._rooms.values()):
            if room.code == code:
                return snapshot(room)
        return None

    def update_room(self, room: Room) -> Room:
        if room.id not in self._rooms:
            raise KeyError(room.id)
        self._rooms[room.id] = snapshot(room)
        return snapshot(room)

    # players
    def create_player(self, **fields) -> Player:
        with self._registry:
            player = Player(id=next(self._player_ids), **fields)
            self._players[player.id] = player
        return snapshot(player)

    def get_player(self, player_id: int) -> Optional[Player]:
        player = self._players.get(player_id)
        return snapshot(player) if player is not None else None

    def players_in_room(self, room_id: int) -> list[Player]:
        return [snapshot(p) for p in list(self._players.values()) if p.room_id == room_id]

    def update_player(self, player_id: int, **changes) -> Optional[Player]:
        player = self._players.get(player_id)
        if player is None:
            return None
        for key, value in changes.items():
            setattr(player, key, value)
        player.last_seen = utcnow()
        return snapshot(player)

    def remove_player(self, player_id: int) -> None:
        self._players.pop(player_id, None)

    # moves
    def add_move(self, **fields) -> Move:
        with self._registry:
            move = Move(id=next(self._move_ids), **fields)
            self._moves[move.id] = move
        return snapshot(move)

    def moves_in_room(self, room_id: int) -> list[Move]:
        """Oldest first."""
        moves = [m for m in list(self._moves.values()) if m.room_id == room_id]
        return [snapshot(m) for m in sorted(moves, key=lambda m: m.id)]

    def recent_moves(self, room_id: int, limit: int = 10) -> list[Move]:
        """Newest first."""
        return list(reversed(self.moves_in_room(room_id)))[:limit]

    def last_move_by_player(self, room_id: int, player_id: int) -> Optional[Move]:
        for move in reversed(self.moves_in_room(room_id)):
            if move.player_id == player_id:
                return move
        return None

    def count_moves(self, room_id: int) -> int:
        return sum(1 for m in list(self._moves.values()) if m.room_id == room_id)

    def delete_move(self, move_id: int) -> None:
        self._moves.pop(move_id, None)

    def clear_moves(self, room_id: int) -> None:
        for move_id in [m.id for m in list(self._moves.values()) if m.room_id == room_id]:
            self._moves.pop(move_id, None)
