"""Core data structures: board, dice and moves."""

from backgammon_rules.core.types import (
    BAR,
    OFF,
    Board,
    Color,
    GameStatus,
    Move,
    Point,
    Turn,
    Zone,
)
from backgammon_rules.core.dice import Dice, roll_dice

__all__ = [
    "BAR",
    "OFF",
    "Board",
    "Color",
    "Dice",
    "GameStatus",
    "Move",
    "Point",
    "Turn",
    "Zone",
    "roll_dice",
]
