"""Rules adapter over python-chess.

The move-selection engine only talks to the board through these functions.
``apply_move`` never mutates its argument: it returns a fresh board.
The search instead forks the root once with ``fork`` and walks the tree with
``push``/``pop`` in strict LIFO order.
"""

from __future__ import annotations

from typing import List

import chess


def legal_moves(board: chess.Board) -> List[chess.Move]:
    return list(board.legal_moves)


def has_legal_moves(board: chess.Board) -> bool:
    return any(board.generate_legal_moves())


def apply_move(board: chess.Board, move: chess.Move) -> chess.Board:
    child = board.copy()
    child.push(move)
    return child


def fork(board: chess.Board) -> chess.Board:
    """Copy ``board`` keeping only the history a repetition can still reach.

    Positions before the last capture or pawn move can never recur, so the
    copied stack is bounded by the halfmove clock, not the game length.
    """
    return board.copy(stack=min(board.halfmove_clock, len(board.move_stack)))


def push(board: chess.Board, move: chess.Move) -> None:
    board.push(move)


def pop(board: chess.Board) -> chess.Move:
    return board.pop()


def side_to_move(board: chess.Board) -> chess.Color:
    return board.turn


def is_capture(board: chess.Board, move: chess.Move) -> bool:
    return board.is_capture(move)


def is_check(board: chess.Board) -> bool:
    return board.is_check()


def is_checkmate(board: chess.Board) -> bool:
    return board.is_checkmate()


def is_stalemate(board: chess.Board) -> bool:
    return board.is_stalemate()


def is_draw(board: chess.Board) -> bool:
    """Any drawn condition other than stalemate.

    Claimable draws (fifty-move rule, threefold repetition) count as drawn.
    """
    return (
        board.is_insufficient_material()
        or board.is_seventyfive_moves()
        or board.is_fivefold_repetition()
        or board.can_claim_fifty_moves()
        or board.is_repetition(3)
    )


def is_terminal(board: chess.Board) -> bool:
    # Checkmate or stalemate, whichever, means no legal move
    return not has_legal_moves(board) or is_draw(board)
