"""Difficulty levels and the move picker behind each of them."""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from typing import Optional, Sequence

import chess

from . import rules
from .search import choose_best_move

logger = logging.getLogger(__name__)


class Strategy(enum.Enum):
    RANDOM = "random"
    HEURISTIC = "heuristic"
    MINIMAX = "minimax"


@dataclass(frozen=True)
class DifficultyProfile:
    level: int
    strategy: Strategy
    depth: Optional[int] = None

    @classmethod
    def for_level(cls, level: int) -> "DifficultyProfile":
        try:
            strategy, depth = LEVELS[int(level)]
        except (KeyError, TypeError, ValueError):
            raise ValueError(f"Unknown difficulty level: {level!r}") from None
        return cls(level=int(level), strategy=strategy, depth=depth)


LEVELS = {
    1: (Strategy.RANDOM, None),
    2: (Strategy.HEURISTIC, None),
    3: (Strategy.HEURISTIC, None),
    4: (Strategy.MINIMAX, 2),
    5: (Strategy.MINIMAX, 3),
}


def choose_move(
    board: chess.Board,
    profile: DifficultyProfile,
    rng: Optional[random.Random] = None,
) -> Optional[chess.Move]:
    """Return the move for ``profile``, or None when no legal move exists."""
    rng = rng or random
    moves = rules.legal_moves(board)
    if not moves:
        return None

    if profile.strategy is Strategy.RANDOM:
        return random_move(moves, rng)
    if profile.strategy is Strategy.HEURISTIC:
        return heuristic_move(board, moves, rng)
    return choose_best_move(board, profile.depth or 0).best_move


def random_move(moves: Sequence[chess.Move], rng=random) -> chess.Move:
    return rng.choice(list(moves))


def heuristic_move(board: chess.Board, moves: Sequence[chess.Move], rng=random) -> chess.Move:
    """Checkmate first, then a random check, then a random capture, then anything."""
    checks = []
    for move in moves:
        child = rules.apply_move(board, move)
        if rules.is_checkmate(child):
            logger.debug("heuristic found mate %s", move.uci())
            return move
        if rules.is_check(child):
            checks.append(move)
    if checks:
        return rng.choice(checks)

    captures = [m for m in moves if rules.is_capture(board, m)]
    if captures:
        return rng.choice(captures)
    return random_move(moves, rng)
