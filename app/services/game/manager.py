"""In-memory registry of running matches."""

import asyncio
import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Literal

from app.config import get_settings

from .ai import choose_action
from .engine import GameAction, GameEngine, ProcessResult
from .start_game import initialize_match

logger = logging.getLogger(__name__)

MatchMode = Literal["local", "ai"]

AI_PLAYER = 2


class MatchNotFoundError(KeyError):
    """No match is registered under the given id."""

    def __init__(self, match_id: str):
        super().__init__(match_id)
        self.match_id = match_id


@dataclass
class AIMove:
    """An action the AI chose and the result of applying it."""

    action: GameAction
    result: ProcessResult


@dataclass
class ActionOutcome:
    """Result of a submitted action plus the AI's reply, if one was played."""

    result: ProcessResult
    ai_move: AIMove | None = None


@dataclass
class MatchSession:
    """One registered match and its metadata."""

    match_id: str
    engine: GameEngine
    mode: MatchMode = "local"
    player_names: dict[int, str] = field(default_factory=lambda: {1: "Player 1", 2: "Player 2"})
    seed: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_activity: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def touch(self) -> None:
        self.last_activity = datetime.now(timezone.utc)


class MatchManager:
    """Creates, looks up and drives matches kept in process memory.

    Calls for one match are serialized by that match's lock; different
    matches never share state.
    """

    def __init__(self, ai_time_budget_ms: int | None = None):
        self._settings = get_settings()
        self._ai_time_budget_ms = ai_time_budget_ms or self._settings.AI_TIME_BUDGET_MS
        self._matches: dict[str, MatchSession] = {}
        self._registry_lock = threading.Lock()
        self._cleanup_task: asyncio.Task | None = None
        logger.info("MatchManager initialized (AI budget %dms)", self._ai_time_budget_ms)

    def create_match(
        self,
        mode: MatchMode = "local",
        seed: int | None = None,
        player_names: dict[int, str] | None = None,
    ) -> MatchSession:
        if seed is None:
            seed = self._settings.DEFAULT_SEED

        names = {1: "Player 1", 2: "AI" if mode == "ai" else "Player 2"}
        if player_names:
            names.update(player_names)

        session = MatchSession(
            match_id=str(uuid.uuid4()),
            engine=GameEngine(initialize_match(seed)),
            mode=mode,
            player_names=names,
            seed=seed,
        )
        with self._registry_lock:
            self._matches[session.match_id] = session
        logger.info("Match %s created (mode=%s, seed=%s)", session.match_id, mode, seed)
        return session

    def get_match(self, match_id: str) -> MatchSession:
        session = self._matches.get(match_id)
        if session is None:
            raise MatchNotFoundError(match_id)
        return session

    def execute_action(self, match_id: str, action: GameAction) -> ActionOutcome:
        """Apply a player's action; in AI mode, let the AI answer as player 2.

        Raises:
            MatchNotFoundError: If the match does not exist.
        """
        session = self.get_match(match_id)
        with session.lock:
            result = session.engine.execute_action(action)
            session.touch()
            outcome = ActionOutcome(result=result)

            if (
                result.success
                and session.mode == "ai"
                and not session.engine.game_over
                and session.engine.turns.current_player == AI_PLAYER
            ):
                outcome.ai_move = self._play_ai(session)
                if outcome.ai_move is not None:
                    # The response snapshot reflects the board after the AI reply.
                    result.snapshot = session.engine.snapshot()

        if session.engine.game_over:
            logger.info(
                "Match %s finished, winner=%s", match_id, session.engine.winner
            )
        return outcome

    def ai_move(self, match_id: str) -> AIMove | None:
        """Let the AI act for whichever side is to move.

        Returns:
            The chosen move, or None when the match is over or has no legal action.
        """
        session = self.get_match(match_id)
        with session.lock:
            move = self._play_ai(session)
            session.touch()
        return move

    def _play_ai(self, session: MatchSession) -> AIMove | None:
        engine = session.engine
        if engine.game_over:
            return None

        action = choose_action(engine.context, time_budget_ms=self._ai_time_budget_ms)
        if action is None:
            logger.warning(
                "AI has no legal action in match %s for player %d",
                session.match_id,
                engine.turns.current_player,
            )
            return None

        result = engine.execute_action(action)
        logger.info(
            "AI played %s in match %s (success=%s)",
            action.action_type,
            session.match_id,
            result.success,
        )
        return AIMove(action=action, result=result)

    def cleanup_stale_matches(self, max_age_seconds: int | None = None) -> int:
        """Drop matches idle for longer than ``max_age_seconds``.

        Returns:
            Number of matches removed.
        """
        if max_age_seconds is None:
            max_age_seconds = self._settings.MATCH_MAX_AGE_SECONDS
        cutoff = datetime.now(timezone.utc) - timedelta(seconds=max_age_seconds)

        with self._registry_lock:
            stale = [
                match_id
                for match_id, session in self._matches.items()
                if session.last_activity < cutoff
            ]
            for match_id in stale:
                del self._matches[match_id]

        if stale:
            logger.info("Cleaned up %d stale match(es)", len(stale))
        return len(stale)

    async def start_cleanup_task(self, interval_seconds: float | None = None) -> None:
        """Start the periodic cleanup task for idle matches."""
        if self._cleanup_task is not None:
            logger.warning("Cleanup task already running")
            return

        if interval_seconds is None:
            interval_seconds = self._settings.MATCH_CLEANUP_INTERVAL_SECONDS

        async def cleanup_loop():
            logger.info("Starting match cleanup task with interval %ss", interval_seconds)
            while True:
                try:
                    await asyncio.sleep(interval_seconds)
                    self.cleanup_stale_matches()
                except asyncio.CancelledError:
                    logger.info("Match cleanup task cancelled")
                    break
                except Exception as e:
                    logger.error("Error in match cleanup task: %s", e)

        self._cleanup_task = asyncio.create_task(cleanup_loop())

    async def stop_cleanup_task(self) -> None:
        """Stop the periodic cleanup task."""
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None
            logger.info("Match cleanup task stopped")

    def stats(self) -> dict[str, int]:
        sessions = list(self._matches.values())
        finished = sum(1 for session in sessions if session.engine.game_over)
        return {
            "total": len(sessions),
            "active": len(sessions) - finished,
            "finished": finished,
        }


_match_manager: MatchManager | None = None


def get_match_manager() -> MatchManager:
    """Get the singleton MatchManager instance."""
    global _match_manager
    if _match_manager is None:
        _match_manager = MatchManager()
    return _match_manager
