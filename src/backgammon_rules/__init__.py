"""
Backgammon Rules - a stateless backgammon rules engine.
"""

__version__ = "0.1.0"

# Core exports
from backgammon_rules.core.types import (
    BAR,
    OFF,
    Board,
    Color,
    GameStatus,
    Move,
)
from backgammon_rules.core.board import initial_board, pip_count, all_home
from backgammon_rules.core.dice import Dice, roll_dice
from backgammon_rules.config import RulesConfig, DEFAULT_RULES, STRICT_RULES
from backgammon_rules.engine import (
    GameState,
    apply_move,
    legal_moves,
    legal_turns,
    make_move,
    new_game,
    start_game,
    start_turn,
    validate,
)
from backgammon_rules.errors import (
    MoveError,
    RulesError,
    IllegalMoveError,
    DieNotAvailableError,
    GameStateError,
    GameOverError,
    SnapshotError,
)

__all__ = [
    "BAR",
    "OFF",
    "Board",
    "Color",
    "GameStatus",
    "Move",
    "initial_board",
    "pip_count",
    "all_home",
    "Dice",
    "roll_dice",
    "RulesConfig",
    "DEFAULT_RULES",
    "STRICT_RULES",
    "GameState",
    "apply_move",
    "legal_moves",
    "legal_turns",
    "make_move",
    "new_game",
    "start_game",
    "start_turn",
    "validate",
    "MoveError",
    "RulesError",
    "IllegalMoveError",
    "DieNotAvailableError",
    "GameStateError",
    "GameOverError",
    "SnapshotError",
]
