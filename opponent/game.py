from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import chess

from . import rules
from .strategy import DifficultyProfile

MODES = ("ai", "pvp")
COLORS = {"white": chess.WHITE, "black": chess.BLACK}
PROMOTION_PIECES = {
    "q": chess.QUEEN,
    "r": chess.ROOK,
    "b": chess.BISHOP,
    "n": chess.KNIGHT,
}


class IllegalMoveError(ValueError):
    """A move the board rejected."""


@dataclass
class PendingPromotion:
    from_square: chess.Square
    to_square: chess.Square

    def uci(self) -> str:
        return chess.SQUARE_NAMES[self.from_square] + chess.SQUARE_NAMES[self.to_square]


class Game:
    """Wraps python-chess Board and owns the authoritative game state.

    Besides the board it keeps the game settings (mode, computer color,
    difficulty) and a pending promotion choice. ``version`` increases on
    every change of position so callers can detect a stale snapshot.
    """

    def __init__(
        self,
        starting_fen: Optional[str] = None,
        mode: str = "ai",
        ai_color: str = "black",
        level: int = 3,
    ) -> None:
        self.version = 0
        self.mode = "ai"
        self.ai_color: chess.Color = chess.BLACK
        self.profile = DifficultyProfile.for_level(level)
        self.reset(starting_fen, mode=mode, ai_color=ai_color)

    def reset(
        self,
        starting_fen: Optional[str] = None,
        mode: Optional[str] = None,
        ai_color: Optional[str] = None,
        level: Optional[int] = None,
    ) -> None:
        if mode is not None and mode not in MODES:
            raise ValueError(f"Unknown game mode: {mode!r}")
        color = parse_color(ai_color) if ai_color is not None else self.ai_color
        profile = DifficultyProfile.for_level(level) if level is not None else self.profile
        try:
            board = chess.Board(fen=starting_fen) if starting_fen else chess.Board()
        except ValueError as exc:
            raise ValueError(f"Invalid FEN: {starting_fen!r}") from exc
        if not board.is_valid():
            raise ValueError(f"Invalid position: {starting_fen!r}")

        self.board = board
        self.mode = mode or self.mode
        self.ai_color = color
        self.profile = profile
        self.pending_promotion: Optional[PendingPromotion] = None
        self.last_move_was_capture: bool = False
        self._touch()

    def set_level(self, level: int) -> None:
        self.profile = DifficultyProfile.for_level(level)

    def _touch(self) -> None:
        self.version += 1

    def get_full_fen(self) -> str:
        return self.board.fen()

    def get_turn_color(self) -> str:
        return "white" if self.board.turn == chess.WHITE else "black"

    def get_legal_moves(self) -> List[str]:
        return [move.uci() for move in self.board.legal_moves]

    def is_ai_turn(self) -> bool:
        return self.mode == "ai" and self.board.turn == self.ai_color

    def is_game_over(self) -> bool:
        return rules.is_terminal(self.board)

    def get_result(self) -> Optional[str]:
        if rules.is_checkmate(self.board):
            return "0-1" if self.board.turn == chess.WHITE else "1-0"
        if self.is_game_over():
            return "1/2-1/2"
        return None

    def status(self) -> str:
        if rules.is_checkmate(self.board):
            return "checkmate"
        if rules.is_stalemate(self.board):
            return "stalemate"
        if rules.is_draw(self.board):
            return "draw"
        if rules.is_check(self.board):
            return "check"
        return "playing"

    def push_uci(self, uci: str) -> None:
        """Play a human move given in UCI.

        A pawn move to the last rank without a promotion suffix is not played:
        it opens a pending promotion that ``complete_promotion`` resolves.
        """
        if self.pending_promotion is not None:
            raise IllegalMoveError("A promotion choice is pending")
        try:
            move = chess.Move.from_uci(uci)
        except (ValueError, TypeError):
            raise IllegalMoveError(f"Illegal move: {uci}") from None

        if move in self.board.legal_moves:
            self._push(move)
            return

        if move.promotion is None:
            promo_move = chess.Move(move.from_square, move.to_square, promotion=chess.QUEEN)
            if promo_move in self.board.legal_moves:
                self.pending_promotion = PendingPromotion(move.from_square, move.to_square)
                return

        raise IllegalMoveError(f"Illegal move: {uci}")

    def complete_promotion(self, piece: str) -> chess.Move:
        if self.pending_promotion is None:
            raise IllegalMoveError("No promotion is pending")
        piece_type = PROMOTION_PIECES.get(str(piece).lower())
        if piece_type is None:
            raise ValueError(f"Unknown promotion piece: {piece!r}")
        pending = self.pending_promotion
        move = chess.Move(pending.from_square, pending.to_square, promotion=piece_type)
        self.pending_promotion = None
        self._push(move)
        return move

    def cancel_promotion(self) -> None:
        self.pending_promotion = None

    def apply_move(self, move: chess.Move) -> None:
        """Play an engine move, which must be legal in the current position."""
        if move not in self.board.legal_moves:
            raise IllegalMoveError(f"Illegal move: {move.uci()}")
        self._push(move)

    def _push(self, move: chess.Move) -> None:
        self.last_move_was_capture = rules.is_capture(self.board, move)
        self.board.push(move)
        self._touch()

    def undo(self, plies: int = 1) -> int:
        """Take back up to ``plies`` half-moves; returns how many were undone."""
        self.pending_promotion = None
        undone = 0
        while undone < plies and self.board.move_stack:
            self.board.pop()
            undone += 1
        if undone:
            self.last_move_was_capture = False
            self._touch()
        return undone

    def move_history(self) -> List[str]:
        """Moves played so far in SAN, replayed from the starting position."""
        replay = self.board.root()
        history: List[str] = []
        for move in self.board.move_stack:
            history.append(replay.san_and_push(move))
        return history

    def captured_pieces(self) -> Dict[str, List[str]]:
        """Pieces each side has captured, as lowercase piece symbols."""
        captured: Dict[str, List[str]] = {"white": [], "black": []}
        replay = self.board.root()
        for move in self.board.move_stack:
            if replay.is_capture(move):
                if replay.is_en_passant(move):
                    victim = chess.PAWN
                else:
                    victim = replay.piece_type_at(move.to_square)
                side = "white" if replay.turn == chess.WHITE else "black"
                captured[side].append(chess.piece_symbol(victim))
            replay.push(move)
        return captured

    def snapshot(self) -> Dict[str, object]:
        last_uci: Optional[str] = None
        if self.board.move_stack:
            last_uci = self.board.move_stack[-1].uci()

        in_check = rules.is_check(self.board)
        check_square: Optional[str] = None
        if in_check:
            king_sq = self.board.king(self.board.turn)
            if king_sq is not None:
                check_square = chess.SQUARE_NAMES[king_sq]

        return {
            "fen": self.get_full_fen(),
            "turn": self.get_turn_color(),
            "legal_moves": self.get_legal_moves(),
            "game_over": self.is_game_over(),
            "result": self.get_result(),
            "status": self.status(),
            "mode": self.mode,
            "ai_color": "white" if self.ai_color == chess.WHITE else "black",
            "level": self.profile.level,
            "last_move": last_uci,
            "in_check": in_check,
            "check_square": check_square,
            "last_move_capture": self.last_move_was_capture,
            "pending_promotion": self.pending_promotion.uci() if self.pending_promotion else None,
            "captured": self.captured_pieces(),
            "history": self.move_history(),
        }


def parse_color(color: str) -> chess.Color:
    try:
        return COLORS[str(color).lower()]
    except KeyError:
        raise ValueError(f"Unknown color: {color!r}") from None
