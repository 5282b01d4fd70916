from __future__ import annotations

import dataclasses
import random

import chess
import pytest

from opponent import DifficultyProfile, Strategy, choose_best_move, choose_move

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
STALEMATE = "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"
WHITE_MATES_IN_ONE = "6k1/5ppp/8/8/8/8/5PPP/R5K1 w - - 0 1"
# Ra8+ is the only checking move and it is not mate
ONLY_CHECK = "4k3/8/8/8/8/8/8/R3K3 w - - 0 1"
# No check is available; Rxa2 is the only capture
ONLY_CAPTURE = "4k3/8/8/8/8/8/p7/R3K3 w - - 0 1"


@pytest.mark.parametrize(
    "level,strategy,depth",
    [
        (1, Strategy.RANDOM, None),
        (2, Strategy.HEURISTIC, None),
        (3, Strategy.HEURISTIC, None),
        (4, Strategy.MINIMAX, 2),
        (5, Strategy.MINIMAX, 3),
    ],
)
def test_level_mapping(level, strategy, depth):
    profile = DifficultyProfile.for_level(level)
    assert profile.level == level
    assert profile.strategy is strategy
    assert profile.depth == depth


@pytest.mark.parametrize("level", [0, 6, -1, "hard", None])
def test_unknown_level_is_rejected(level):
    with pytest.raises(ValueError):
        DifficultyProfile.for_level(level)


def test_profile_is_immutable():
    profile = DifficultyProfile.for_level(4)
    with pytest.raises(dataclasses.FrozenInstanceError):
        profile.depth = 5


@pytest.mark.parametrize("seed", range(5))
def test_random_level_returns_legal_move(seed):
    board = chess.Board()
    move = choose_move(board, DifficultyProfile.for_level(1), random.Random(seed))
    assert move in board.legal_moves


def test_random_level_is_reproducible_with_seed():
    board = chess.Board()
    profile = DifficultyProfile.for_level(1)
    first = choose_move(board, profile, random.Random(7))
    second = choose_move(board, profile, random.Random(7))
    assert first == second


@pytest.mark.parametrize("level", [2, 3])
@pytest.mark.parametrize("seed", range(5))
def test_heuristic_always_plays_mate(level, seed):
    board = chess.Board(WHITE_MATES_IN_ONE)
    move = choose_move(board, DifficultyProfile.for_level(level), random.Random(seed))
    assert move == chess.Move.from_uci("a1a8")


@pytest.mark.parametrize("seed", range(5))
def test_heuristic_prefers_check(seed):
    board = chess.Board(ONLY_CHECK)
    move = choose_move(board, DifficultyProfile.for_level(2), random.Random(seed))
    assert move == chess.Move.from_uci("a1a8")


@pytest.mark.parametrize("seed", range(5))
def test_heuristic_prefers_capture_without_check(seed):
    board = chess.Board(ONLY_CAPTURE)
    move = choose_move(board, DifficultyProfile.for_level(3), random.Random(seed))
    assert move == chess.Move.from_uci("a1a2")


def test_heuristic_falls_back_to_any_move():
    board = chess.Board()
    move = choose_move(board, DifficultyProfile.for_level(2), random.Random(3))
    assert move in board.legal_moves


@pytest.mark.parametrize("level", [1, 2, 3, 4, 5])
@pytest.mark.parametrize("fen", [FOOLS_MATE, STALEMATE])
def test_no_move_available_at_every_level(level, fen):
    assert choose_move(chess.Board(fen), DifficultyProfile.for_level(level)) is None


@pytest.mark.parametrize("level,depth", [(4, 2), (5, 3)])
def test_search_levels_use_their_depth(level, depth):
    board = chess.Board(WHITE_MATES_IN_ONE)
    move = choose_move(board, DifficultyProfile.for_level(level))
    assert move == choose_best_move(board, depth).best_move
