"""Decides when the computer moves and adds a short "thinking" pause.

One timer at most is pending per turn. ``cancel`` must be called whenever the
position is replaced (new game, undo, loaded position); on top of that the
game's ``version`` is checked before applying, so a move computed for an
older position is always dropped.
"""

from __future__ import annotations

import enum
import logging
import random
import threading
from typing import Callable, Optional

import chess

from .config import OrchestratorConfig
from .game import Game, IllegalMoveError
from .strategy import choose_move

logger = logging.getLogger(__name__)


class OrchestratorState(enum.Enum):
    IDLE = "idle"
    THINKING = "thinking"


class MoveOrchestrator:
    def __init__(
        self,
        game: Game,
        config: Optional[OrchestratorConfig] = None,
        timer_factory: Callable = threading.Timer,
        rng: Optional[random.Random] = None,
        selector: Callable = choose_move,
        on_move: Optional[Callable[[chess.Move], None]] = None,
    ) -> None:
        self.game = game
        self.config = config or OrchestratorConfig()
        self.lock = threading.RLock()
        self.state = OrchestratorState.IDLE
        self._timer_factory = timer_factory
        self._rng = rng or random.Random()
        self._selector = selector
        self._on_move = on_move
        self._timer = None
        # Bumped on every schedule and cancel; a firing timer must hold the latest
        self._ticket = 0

    @property
    def thinking(self) -> bool:
        return self.state is OrchestratorState.THINKING

    def should_move(self) -> bool:
        game = self.game
        return (
            game.mode == "ai"
            and game.is_ai_turn()
            and not game.is_game_over()
            and game.pending_promotion is None
        )

    def request_move(self) -> bool:
        """Schedule the computer's move if it is due. Returns True when scheduled."""
        with self.lock:
            if self.thinking:
                logger.debug("move already requested, ignoring trigger")
                return False
            if not self.should_move():
                return False

            delay_s = self._rng.uniform(self.config.min_delay_ms, self.config.max_delay_ms) / 1000.0
            self._ticket += 1
            timer = self._timer_factory(delay_s, self._fire, args=(self._ticket,))
            timer.daemon = True
            self._timer = timer
            self.state = OrchestratorState.THINKING
            logger.debug("thinking for %.3fs at level %d", delay_s, self.game.profile.level)
            timer.start()
            return True

    def cancel(self) -> bool:
        """Drop any pending move. Returns True if one was pending."""
        with self.lock:
            was_thinking = self.thinking
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._ticket += 1
            self.state = OrchestratorState.IDLE
            if was_thinking:
                logger.info("cancelled pending computer move")
            return was_thinking

    close = cancel

    def _fire(self, ticket: int) -> Optional[chess.Move]:
        with self.lock:
            if ticket != self._ticket or not self.thinking:
                return None
            board = self.game.board.copy()
            profile = self.game.profile
            version = self.game.version

        try:
            move = self._selector(board, profile, self._rng)
        except Exception:
            logger.exception("move selection failed at level %d", profile.level)
            with self.lock:
                if ticket == self._ticket:
                    self._finish()
            raise

        with self.lock:
            if ticket != self._ticket:
                return None
            self._finish()
            if self.game.version != version:
                logger.info("position changed while thinking, dropping %s", move)
                return None
            if move is None:
                logger.info("no legal move available")
                return None
            try:
                self.game.apply_move(move)
            except IllegalMoveError:
                if self.config.strict_moves:
                    raise
                logger.error("engine produced a rejected move %s, skipping", move.uci())
                return None
            logger.info("computer played %s", move.uci())

        if self._on_move is not None:
            self._on_move(move)
        return move

    def _finish(self) -> None:
        self._timer = None
        self.state = OrchestratorState.IDLE
