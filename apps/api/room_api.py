# room_api.py
# Optional FastAPI wrapper around the room engine.
# Run with: uvicorn apps.api.room_api:app --reload
#
# Endpoints are plain `def`, so Starlette runs them in its threadpool and a slow
# puzzle deal never blocks requests for other rooms.

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from rooms.engine import RoomEngine
from rooms.errors import GameError
from solver.sudoku_tools import compute_candidates_tool, sanity_check

app = FastAPI(title="Sudoku Rooms API")
engine = RoomEngine()


@app.exception_handler(GameError)
def game_error_handler(request: Request, exc: GameError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


class GridModel(BaseModel):
    grid: list[list[int]]


class SanityCheckRequest(BaseModel):
    original: list[list[int]]
    current: list[list[int]]


class CreateRoomRequest(BaseModel):
    name: str
    difficulty: str
    player_nickname: str
    player_color: str


class JoinRoomRequest(BaseModel):
    nickname: str
    color: str


class MoveRequest(BaseModel):
    player_id: int
    row: int
    col: int
    move_type: str
    value: int | None = None
    notes: list[int] | None = None


class NewGameRequest(BaseModel):
    difficulty: str


class SelectionRequest(BaseModel):
    row: int | None = None
    col: int | None = None
    highlighted_number: int | None = None


class PencilRequest(BaseModel):
    pencil_mode: bool = False


@app.post("/sanity_check")
def api_sanity(payload: SanityCheckRequest):
    return sanity_check(payload.original, payload.current)


@app.post("/compute_candidates")
def api_cands(payload: GridModel):
    return compute_candidates_tool(payload.grid)


@app.post("/rooms")
def api_create_room(req: CreateRoomRequest):
    return engine.create_room(req.name, req.difficulty, req.player_nickname, req.player_color)


@app.post("/rooms/{code}/join")
def api_join_room(code: str, req: JoinRoomRequest):
    return engine.join_room(code, req.nickname, req.color)


@app.get("/rooms/{room_id}/state")
def api_state(room_id: int):
    return engine.get_state(room_id)


@app.post("/rooms/{room_id}/moves")
def api_move(room_id: int, req: MoveRequest):
    return engine.apply_move(room_id, req.player_id, req.row, req.col, req.move_type, req.value, req.notes)


@app.post("/rooms/{room_id}/undo/{player_id}")
def api_undo(room_id: int, player_id: int):
    return engine.undo(room_id, player_id)


@app.post("/rooms/{room_id}/new-game")
def api_new_game(room_id: int, req: NewGameRequest):
    return engine.new_game(room_id, req.difficulty)


@app.put("/players/{player_id}/selection")
def api_selection(player_id: int, req: SelectionRequest):
    return engine.update_selection(player_id, req.row, req.col, req.highlighted_number)


@app.put("/players/{player_id}/pencil")
def api_pencil(player_id: int, req: PencilRequest):
    return engine.set_pencil_mode(player_id, req.pencil_mode)


@app.delete("/players/{player_id}")
def api_leave(player_id: int):
    engine.leave(player_id)
    return {"message": "Player removed"}
