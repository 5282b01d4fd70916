"""Computer opponent for chess: evaluation, search, difficulty levels and move scheduling.

Modules:
- rules: thin adapter over python-chess used by the engine
- evaluator: static evaluation of positions
- search: minimax with alpha-beta pruning
- strategy: difficulty levels mapped to move pickers
- orchestrator: decides when the computer moves, with a thinking delay
- game: board and game settings atop python-chess
"""

from .evaluator import Evaluator, MATE_SCORE
from .search import SearchResult, choose_best_move, search
from .strategy import DifficultyProfile, Strategy, choose_move
from .game import Game, IllegalMoveError
from .orchestrator import MoveOrchestrator, OrchestratorState

__all__ = [
    "Evaluator",
    "MATE_SCORE",
    "SearchResult",
    "choose_best_move",
    "search",
    "DifficultyProfile",
    "Strategy",
    "choose_move",
    "Game",
    "IllegalMoveError",
    "MoveOrchestrator",
    "OrchestratorState",
]
