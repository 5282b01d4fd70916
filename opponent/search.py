"""Depth-bounded minimax with alpha-beta pruning.

Scores come from :class:`Evaluator`, which is absolute (White positive). The
computer always plays the minimizing side: ``choose_best_move`` orients leaf
scores so that positive favours the opponent of the side to move at the
root, then picks the root move with the lowest score.

The root is forked once and the tree is walked with push/pop, so the cost of
a node does not depend on how long the game has been going.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import chess

from . import rules
from .evaluator import Evaluator

logger = logging.getLogger(__name__)

INF = 10**9


@dataclass
class SearchResult:
    best_move: Optional[chess.Move]
    score: float
    nodes: int
    scored_moves: Optional[List[Tuple[chess.Move, float]]] = None


def search(
    board: chess.Board,
    depth: int,
    alpha: float,
    beta: float,
    maximizing: bool,
) -> float:
    """Return the minimax value of ``board`` searched ``depth`` plies deep.

    The value is on the absolute evaluation scale. ``board`` is left untouched.
    """
    score, _ = _alphabeta(rules.fork(board), depth, alpha, beta, maximizing, 1)
    return score


def choose_best_move(board: chess.Board, depth: int) -> SearchResult:
    """Pick the move for the side to move, which minimizes.

    Ties keep the first move in enumeration order. When there is no legal
    move the result carries ``best_move=None`` and the static evaluation.
    """
    # Positive must favour the opponent of the root mover
    orientation = 1 if board.turn == chess.BLACK else -1
    child_depth = max(depth - 1, 0)

    # Search on a copy so the caller's board is never touched
    search_board = rules.fork(board)

    best_score: float = INF
    best_move: Optional[chess.Move] = None
    nodes = 0
    scored_moves: List[Tuple[chess.Move, float]] = []

    for move in rules.legal_moves(search_board):
        rules.push(search_board, move)
        try:
            score, sub_nodes = _alphabeta(search_board, child_depth, -INF, INF, True, orientation)
        finally:
            rules.pop(search_board)
        nodes += sub_nodes + 1
        scored_moves.append((move, score))
        if score < best_score:
            best_score = score
            best_move = move

    if best_move is None:
        return SearchResult(
            best_move=None,
            score=orientation * Evaluator.evaluate(search_board),
            nodes=1,
            scored_moves=[],
        )

    logger.debug(
        "depth %d: %s scored %s over %d nodes", depth, best_move.uci(), best_score, nodes
    )
    return SearchResult(best_move=best_move, score=best_score, nodes=nodes, scored_moves=scored_moves)


def _alphabeta(
    board: chess.Board,
    depth: int,
    alpha: float,
    beta: float,
    maximizing: bool,
    orientation: int,
) -> Tuple[float, int]:
    if depth == 0:
        return orientation * Evaluator.evaluate(board), 1

    moves = rules.legal_moves(board)
    # No legal move is mate or stalemate; the evaluator tells them apart
    if not moves or rules.is_draw(board):
        return orientation * Evaluator.evaluate(board), 1

    nodes = 0

    if maximizing:
        value: float = -INF
        for move in moves:
            rules.push(board, move)
            try:
                score, child_nodes = _alphabeta(board, depth - 1, alpha, beta, False, orientation)
            finally:
                rules.pop(board)
            nodes += child_nodes + 1
            value = max(value, score)
            alpha = max(alpha, value)
            if beta <= alpha:
                break
        return value, nodes
    else:
        value = INF
        for move in moves:
            rules.push(board, move)
            try:
                score, child_nodes = _alphabeta(board, depth - 1, alpha, beta, True, orientation)
            finally:
                rules.pop(board)
            nodes += child_nodes + 1
            value = min(value, score)
            beta = min(beta, value)
            if beta <= alpha:
                break
        return value, nodes
