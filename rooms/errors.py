"""User-facing rejections raised by the room engine.

All of them are raised before any state is touched. `status_code` is what an
HTTP wrapper should answer with.
"""
from __future__ import annotations


class GameError(Exception):
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidMove(GameError):
    pass


class NothingToUndo(GameError):
    def __init__(self, message: str = "No moves to undo") -> None:
        super().__init__(message)


class InvalidDifficulty(GameError):
    pass


class RoomNotFound(GameError):
    status_code = 404


class PlayerNotFound(GameError):
    status_code = 404


class RoomCodeTaken(GameError):
    status_code = 409


class NicknameTaken(GameError):
    status_code = 409


class ColorTaken(GameError):
    status_code = 409
