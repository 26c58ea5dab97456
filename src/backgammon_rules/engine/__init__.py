"""Rules engine: validation, move application, enumeration and game flow."""

from backgammon_rules.engine.validator import validate, is_legal
from backgammon_rules.engine.executor import apply_move, is_hit
from backgammon_rules.engine.enumerator import (
    legal_moves,
    legal_turns,
    max_dice_playable,
    playable_dice,
    has_legal_move,
    sorted_moves,
)
from backgammon_rules.engine.game import (
    GameState,
    new_game,
    start_game,
    start_turn,
    make_move,
    legal_moves_for,
    is_turn_complete,
)

__all__ = [
    "validate",
    "is_legal",
    "apply_move",
    "is_hit",
    "legal_moves",
    "legal_turns",
    "max_dice_playable",
    "playable_dice",
    "has_legal_move",
    "sorted_moves",
    "GameState",
    "new_game",
    "start_game",
    "start_turn",
    "make_move",
    "legal_moves_for",
    "is_turn_complete",
]
