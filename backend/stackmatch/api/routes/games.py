"""Game session API routes."""
from fastapi import APIRouter, Depends, HTTPException

from ...models.schemas import (
    ErrorResponse,
    GameStateResponse,
    MoveResponse,
    SelectTileRequest,
    StartGameRequest,
)
from ...core.board import MoveResult
from ...core.session import GameSession, SessionStore
from ..deps import get_game_session, get_sessions

router = APIRouter(
    prefix="/api/games",
    tags=["games"],
    responses={404: {"model": ErrorResponse}},
)


def _move_response(session: GameSession, result: MoveResult) -> MoveResponse:
    return MoveResponse(
        accepted=result.accepted,
        reason=result.reason.value if result.reason else None,
        state=GameStateResponse(**session.snapshot()),
    )


@router.post("", response_model=GameStateResponse, status_code=201)
async def create_game(
    request: StartGameRequest,
    store: SessionStore = Depends(get_sessions),
) -> GameStateResponse:
    """Create a session and start the requested level."""
    try:
        session = store.create(request.level)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Could not start game: {str(e)}")
    return GameStateResponse(**session.snapshot())


@router.get("/{session_id}", response_model=GameStateResponse)
async def get_game(session: GameSession = Depends(get_game_session)) -> GameStateResponse:
    """Current board, dock and phase of a session."""
    return GameStateResponse(**session.snapshot())


@router.post("/{session_id}/start", response_model=GameStateResponse)
async def restart_game(
    request: StartGameRequest,
    session: GameSession = Depends(get_game_session),
) -> GameStateResponse:
    """Start a new board (next level or retry) in an existing session."""
    try:
        session.start(request.level)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Could not start game: {str(e)}")
    return GameStateResponse(**session.snapshot())


@router.post("/{session_id}/select", response_model=MoveResponse)
async def select_tile(
    request: SelectTileRequest,
    session: GameSession = Depends(get_game_session),
) -> MoveResponse:
    """Move a clickable tile into the dock."""
    return _move_response(session, session.select(request.tile_id))


@router.post("/{session_id}/undo", response_model=MoveResponse)
async def undo_move(session: GameSession = Depends(get_game_session)) -> MoveResponse:
    """Use an undo charge."""
    return _move_response(session, session.undo())


@router.post("/{session_id}/shuffle", response_model=MoveResponse)
async def shuffle_board(session: GameSession = Depends(get_game_session)) -> MoveResponse:
    """Use a shuffle charge."""
    return _move_response(session, session.shuffle())


@router.post("/{session_id}/remove", response_model=MoveResponse)
async def remove_tiles(session: GameSession = Depends(get_game_session)) -> MoveResponse:
    """Use a remove charge: three oldest dock tiles go back to the board."""
    return _move_response(session, session.remove())


@router.delete("/{session_id}", status_code=204)
async def delete_game(
    session: GameSession = Depends(get_game_session),
    store: SessionStore = Depends(get_sessions),
) -> None:
    """Discard a session."""
    store.delete(session.id)
