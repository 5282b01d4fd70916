from __future__ import annotations

from typing import Dict

import chess

from . import rules

# Forced-mate sentinel, far beyond any material + positional total
MATE_SCORE = 9999


class Evaluator:
    """Static evaluation for chess positions.

    Positive scores favor White, negative scores favor Black. Units are pawns.
    Terminal positions short-circuit: checkmate returns the mate sentinel and
    any drawn position returns exactly zero.
    """

    MATERIAL_VALUES: Dict[chess.PieceType, int] = {
        chess.PAWN: 1,
        chess.KNIGHT: 3,
        chess.BISHOP: 3,
        chess.ROOK: 5,
        chess.QUEEN: 9,
        chess.KING: 0,
    }

    PAWN_ADVANCE_BONUS = 0.1
    CENTER_BONUS = 0.3
    CHECK_BONUS = 0.5

    CENTER_SQUARES = frozenset([chess.D4, chess.E4, chess.D5, chess.E5])

    @classmethod
    def evaluate(cls, board: chess.Board) -> float:
        in_check = rules.is_check(board)
        if not rules.has_legal_moves(board):
            if in_check:
                return -MATE_SCORE if board.turn == chess.WHITE else MATE_SCORE
            return 0
        if rules.is_draw(board):
            return 0

        score = 0.0

        # Iterate in square order so the float sum is always identical
        for square, piece in sorted(board.piece_map().items()):
            value = cls.MATERIAL_VALUES[piece.piece_type] + cls._positional(piece, square)
            if piece.color == chess.WHITE:
                score += value
            else:
                score -= value

        if in_check:
            score += -cls.CHECK_BONUS if board.turn == chess.WHITE else cls.CHECK_BONUS

        return score

    @classmethod
    def _positional(cls, piece: chess.Piece, square: chess.Square) -> float:
        bonus = 0.0
        if piece.piece_type == chess.PAWN:
            bonus += cls.PAWN_ADVANCE_BONUS * cls._ranks_advanced(piece.color, square)
        if square in cls.CENTER_SQUARES:
            bonus += cls.CENTER_BONUS
        return bonus

    @staticmethod
    def _ranks_advanced(color: chess.Color, square: chess.Square) -> int:
        rank = chess.square_rank(square)
        # Pawns start on the second rank (index 1) for White, seventh (6) for Black
        return rank - 1 if color == chess.WHITE else 6 - rank
