"""REST endpoints for match play.

Endpoints are plain ``def`` so the CPU-bound engine and AI search run on
the threadpool instead of blocking the event loop.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException, status

from app.schemas.match import (
    AIMoveInfo,
    AIMoveResponse,
    ActionResponse,
    Cell,
    CreateMatchRequest,
    ErrorDetail,
    MatchResponse,
    PieceActionsResponse,
    PieceMovesResponse,
    PlacementsResponse,
    StatsResponse,
)
from app.services.game.engine import ProcessResult, build_action_from_payload
from app.services.game.manager import (
    AIMove,
    MatchNotFoundError,
    MatchSession,
    get_match_manager,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/matches", tags=["matches"])

error_status_map = {
    "GAME_FINISHED": status.HTTP_409_CONFLICT,
    "NOT_YOUR_TURN": status.HTTP_409_CONFLICT,
}


def _not_found(match_id: str) -> HTTPException:
    logger.warning("Match %s not found", match_id)
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=ErrorDetail(
            error_code="MATCH_NOT_FOUND", message=f"Match {match_id} not found"
        ).model_dump(),
    )


def _get_session(match_id: str) -> MatchSession:
    try:
        return get_match_manager().get_match(match_id)
    except MatchNotFoundError:
        raise _not_found(match_id)


def _raise_for_failure(match_id: str, result: ProcessResult) -> None:
    http_status = error_status_map.get(result.error_code, status.HTTP_400_BAD_REQUEST)
    logger.warning(
        "Action rejected in match %s: %s - %s",
        match_id,
        result.error_code,
        result.error_message,
    )
    raise HTTPException(
        status_code=http_status,
        detail=ErrorDetail(
            error_code=result.error_code, message=result.error_message
        ).model_dump(),
    )


def _ai_move_info(move: AIMove | None) -> AIMoveInfo | None:
    if move is None:
        return None
    return AIMoveInfo(
        action=move.action,
        success=move.result.success,
        message=move.result.message or move.result.error_message,
        laser_events=move.result.laser_events,
    )


def _match_response(session: MatchSession) -> MatchResponse:
    return MatchResponse(
        match_id=session.match_id,
        mode=session.mode,
        player_names=session.player_names,
        snapshot=session.engine.snapshot(),
        history=session.engine.history,
    )


@router.post("", response_model=MatchResponse, status_code=status.HTTP_201_CREATED)
def create_match(request: CreateMatchRequest):
    """Create a new match with a randomized starting layout.

    Args:
        request: Mode ('local' or 'ai'), optional seed and player names.

    Returns:
        MatchResponse with the new match id and the initial snapshot.
    """
    logger.info("POST /matches - mode: %s, seed: %s", request.mode, request.seed)

    names = {}
    if request.player1_name:
        names[1] = request.player1_name
    if request.player2_name:
        names[2] = request.player2_name

    session = get_match_manager().create_match(
        mode=request.mode, seed=request.seed, player_names=names
    )
    return _match_response(session)


@router.get("/stats", response_model=StatsResponse)
def match_stats():
    """Counts of registered, active and finished matches."""
    return StatsResponse(**get_match_manager().stats())


@router.get("/{match_id}", response_model=MatchResponse)
def get_match(match_id: str):
    return _match_response(_get_session(match_id))


@router.post("/{match_id}/actions", response_model=ActionResponse)
def submit_action(match_id: str, payload: dict[str, Any] = Body(...)):
    """Submit a rotate, move, place or swap action.

    Accepts flat payloads or ``{"action_type", "player", "params": {...}}``.

    Raises:
        HTTPException 404: If the match does not exist.
        HTTPException 409: If the match is over or it is not the player's turn.
        HTTPException 400: For any other rule violation.
        HTTPException 422: If the payload is malformed.
    """
    _get_session(match_id)

    try:
        action = build_action_from_payload(payload)
    except ValueError as e:
        logger.warning("Malformed action payload for match %s: %s", match_id, e)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=ErrorDetail(error_code="INVALID_PAYLOAD", message=str(e)).model_dump(),
        )

    logger.info(
        "POST /matches/%s/actions - %s by player %d", match_id, action.action_type, action.player
    )
    try:
        outcome = get_match_manager().execute_action(match_id, action)
    except MatchNotFoundError:
        raise _not_found(match_id)

    result = outcome.result
    if not result.success:
        _raise_for_failure(match_id, result)

    return ActionResponse(
        success=True,
        message=result.message,
        skip_laser=result.skip_laser,
        laser_events=result.laser_events,
        snapshot=result.snapshot,
        ai_move=_ai_move_info(outcome.ai_move),
    )


@router.get("/{match_id}/pieces/{x}/{y}/moves", response_model=PieceMovesResponse)
def piece_moves(match_id: str, x: int, y: int):
    """Cells the piece at (x, y) can step into, for the side to move."""
    engine = _get_session(match_id).engine
    moves = [Cell(x=mx, y=my) for mx, my in engine.valid_moves_for(x, y)]
    return PieceMovesResponse(x=x, y=y, moves=moves)


@router.get("/{match_id}/pieces/{x}/{y}/actions", response_model=PieceActionsResponse)
def piece_actions(match_id: str, x: int, y: int):
    engine = _get_session(match_id).engine
    return PieceActionsResponse(x=x, y=y, actions=engine.valid_actions_for(x, y))


@router.get("/{match_id}/placements", response_model=PlacementsResponse)
def placements(match_id: str):
    """Cells where the side to move may place a mirror from reserve."""
    engine = _get_session(match_id).engine
    player = engine.turns.current_player
    return PlacementsResponse(
        player=player,
        reserve=engine.turns.reserve(player),
        cells=[Cell(x=x, y=y) for x, y in engine.valid_placements()],
    )


@router.post("/{match_id}/ai-move", response_model=AIMoveResponse)
def ai_move(match_id: str):
    """Let the AI act for the side to move.

    Raises:
        HTTPException 404: If the match does not exist.
        HTTPException 409: If the match has already finished.
    """
    session = _get_session(match_id)
    if session.engine.game_over:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=ErrorDetail(
                error_code="GAME_FINISHED", message="Game has already finished"
            ).model_dump(),
        )

    logger.info("POST /matches/%s/ai-move", match_id)
    move = get_match_manager().ai_move(match_id)
    return AIMoveResponse(ai_move=_ai_move_info(move), snapshot=session.engine.snapshot())
