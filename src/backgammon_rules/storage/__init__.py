"""Snapshot codec for storing games between calls."""

from backgammon_rules.storage.snapshot import (
    board_from_dict,
    board_to_dict,
    dice_from_dict,
    dice_to_dict,
    dumps,
    game_from_dict,
    game_to_dict,
    loads,
    move_from_dict,
    move_to_dict,
)

__all__ = [
    "board_from_dict",
    "board_to_dict",
    "dice_from_dict",
    "dice_to_dict",
    "dumps",
    "game_from_dict",
    "game_to_dict",
    "loads",
    "move_from_dict",
    "move_to_dict",
]
