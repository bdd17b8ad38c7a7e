"""Explicitly owned per-match state passed to every engine call."""

from dataclasses import dataclass, field

from app.schemas.game_engine import ActionLog, GamePhase

from .board import Board
from .turns import TurnManager


@dataclass
class MatchContext:
    """Board, turn state and outcome of one match.

    Nothing is shared between contexts, so independent matches (and AI
    look-ahead clones) never observe each other's mutations.
    """

    board: Board
    turns: TurnManager = field(default_factory=TurnManager)
    phase: GamePhase = GamePhase.IN_PROGRESS
    winner: int | None = None
    history: list[ActionLog] = field(default_factory=list)

    @property
    def current_player(self) -> int:
        return self.turns.current_player

    @property
    def is_finished(self) -> bool:
        return self.phase == GamePhase.FINISHED

    def finish(self, winner: int | None) -> None:
        self.phase = GamePhase.FINISHED
        self.winner = winner

    def clone(self) -> "MatchContext":
        """Full deep copy for look-ahead search."""
        return MatchContext(
            board=self.board.clone(),
            turns=self.turns.model_copy(deep=True),
            phase=self.phase,
            winner=self.winner,
            history=[entry.model_copy() for entry in self.history],
        )
