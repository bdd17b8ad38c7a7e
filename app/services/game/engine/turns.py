"""Turn order, reserves, deferred reserve credits and cooldown ticking."""

import logging

from pydantic import BaseModel, Field

from app.schemas.game_engine import INITIAL_RESERVE, PieceKind

from .board import Board

logger = logging.getLogger(__name__)


def opponent_of(player: int) -> int:
    return 2 if player == 1 else 1


class TurnManager(BaseModel):
    """Per-match turn state.

    Dual mirror cooldowns live on the pieces themselves; ``end_turn`` ticks
    them down for the player who just moved.
    """

    current_player: int = 1
    turn_count: int = 0
    reserves: dict[int, int] = Field(
        default_factory=lambda: {1: INITIAL_RESERVE, 2: INITIAL_RESERVE}
    )
    pending_credits: dict[int, int] = Field(default_factory=lambda: {1: 0, 2: 0})

    def reserve(self, player: int) -> int:
        return self.reserves.get(player, 0)

    def decrement_reserve(self, player: int) -> None:
        if self.reserves.get(player, 0) > 0:
            self.reserves[player] -= 1

    def register_captured_mirror(self, owner: int) -> None:
        """Queue one reserve credit for the destroyed mirror's owner.

        The credit lands when ``owner``'s next turn begins, never immediately.
        """
        self.pending_credits[owner] = self.pending_credits.get(owner, 0) + 1
        logger.debug(
            "Mirror credit queued: owner=%d, pending=%d", owner, self.pending_credits[owner]
        )

    def end_turn(self, board: Board) -> None:
        finished_player = self.current_player
        next_player = opponent_of(finished_player)

        for dual_mirror in board.find_pieces(kind=PieceKind.DUAL_MIRROR, owner=finished_player):
            if dual_mirror.cooldowns is not None:
                dual_mirror.cooldowns.tick()

        pending = self.pending_credits.get(next_player, 0)
        if pending > 0:
            self.reserves[next_player] = self.reserve(next_player) + pending
            self.pending_credits[next_player] = 0
            logger.info(
                "Credited %d mirror(s) to player %d reserve (now %d)",
                pending,
                next_player,
                self.reserves[next_player],
            )

        self.turn_count += 1
        self.current_player = next_player
        logger.debug(
            "Turn ended: player=%d, next=%d, turn_count=%d",
            finished_player,
            next_player,
            self.turn_count,
        )
