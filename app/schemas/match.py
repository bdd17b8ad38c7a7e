"""Pydantic schemas for match operations."""

from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.game_engine import ActionLog, Snapshot
from app.services.game.engine.actions import GameAction
from app.services.game.engine.events import LaserEvent


class CreateMatchRequest(BaseModel):
    """Request body for creating a match."""

    mode: Literal["local", "ai"] = Field(
        "local",
        description="'local' for two players on one client, 'ai' to face the AI as player 1",
    )
    seed: int | None = Field(None, description="Seed for the starting layout")
    player1_name: str | None = Field(None, max_length=40)
    player2_name: str | None = Field(None, max_length=40)


class MatchResponse(BaseModel):
    """A match's metadata, board snapshot and action history."""

    match_id: str
    mode: Literal["local", "ai"]
    player_names: dict[int, str]
    snapshot: Snapshot
    history: list[ActionLog] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Body of the ``detail`` field on error responses."""

    error_code: str
    message: str


class AIMoveInfo(BaseModel):
    """The AI's move and the shot it produced."""

    action: GameAction
    success: bool
    message: str | None = None
    laser_events: list[LaserEvent] = Field(default_factory=list)


class ActionResponse(BaseModel):
    """Result of a submitted action."""

    success: bool
    message: str | None = None
    skip_laser: bool = False
    laser_events: list[LaserEvent] = Field(default_factory=list)
    snapshot: Snapshot
    ai_move: AIMoveInfo | None = Field(
        None, description="The AI reply, in 'ai' mode when the match continues"
    )


class Cell(BaseModel):
    x: int
    y: int


class PieceMovesResponse(BaseModel):
    x: int
    y: int
    moves: list[Cell]


class PieceActionsResponse(BaseModel):
    x: int
    y: int
    actions: list[GameAction]


class PlacementsResponse(BaseModel):
    player: int
    reserve: int
    cells: list[Cell]


class AIMoveResponse(BaseModel):
    """Response from asking the AI to play for the side to move."""

    ai_move: AIMoveInfo | None = None
    snapshot: Snapshot


class StatsResponse(BaseModel):
    total: int
    active: int
    finished: int
