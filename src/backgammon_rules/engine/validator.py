"""Single-move validation.

``validate`` checks one move against a board, the remaining dice and the
color on roll. Checks run in a fixed order and stop at the first failure,
so each rejection maps to exactly one ``MoveError``:

1. the move belongs to the color on roll
2. the die is still available
3. checkers on the bar enter before anything else moves
4. the source holds a checker of the moving color
5. the destination is exactly one die away (bar entry and bearing off
   included, with the overshoot rule for bearing off)
6. the destination is not held by two or more opposing checkers
"""

from typing import Optional

from backgammon_rules.core.board import (
    all_home,
    distance_to_off,
    entry_point,
    has_checker_behind,
    target_point,
)
from backgammon_rules.core.dice import Dice
from backgammon_rules.core.types import BAR, OFF, Board, Color, Move
from backgammon_rules.errors import MoveError


def validate(board: Board, dice: Dice, on_roll: Color, move: Move) -> Optional[MoveError]:
    """Check whether a move is legal.

    Args:
        board: Current board
        dice: Dice with the values still available this turn
        on_roll: Color whose turn it is
        move: Candidate move

    Returns:
        None if the move is legal, otherwise the first failing check
    """
    if move.player != on_roll:
        return MoveError.WRONG_PLAYER

    if not dice.has(move.die):
        return MoveError.DIE_NOT_AVAILABLE

    if board.bar(on_roll) > 0 and move.from_point is not BAR:
        return MoveError.MUST_ENTER_FROM_BAR_FIRST

    if not _has_source_checker(board, on_roll, move):
        return MoveError.NO_PIECE_AT_SOURCE

    error = _check_distance(board, on_roll, move)
    if error is not None:
        return error

    if move.to_point is not OFF and board.count(on_roll.opponent(), move.to_point) >= 2:
        return MoveError.BLOCKED_POINT

    return None


def is_legal(board: Board, dice: Dice, on_roll: Color, move: Move) -> bool:
    """True if ``validate`` accepts the move."""
    return validate(board, dice, on_roll, move) is None


def _has_source_checker(board: Board, color: Color, move: Move) -> bool:
    if move.from_point is BAR:
        return board.bar(color) > 0
    return board.count(color, move.from_point) > 0


def _check_distance(board: Board, color: Color, move: Move) -> Optional[MoveError]:
    if move.to_point is OFF:
        return _check_bear_off(board, color, move)

    if move.from_point is BAR:
        expected = entry_point(color, move.die)
    else:
        expected = target_point(color, move.from_point, move.die)

    if move.to_point != expected:
        return MoveError.WRONG_DISTANCE
    return None


def _check_bear_off(board: Board, color: Color, move: Move) -> Optional[MoveError]:
    # A checker on the bar means not all checkers are home
    if not all_home(board, color):
        return MoveError.NOT_ALL_CHECKERS_HOME

    needed = distance_to_off(color, move.from_point)
    if move.die == needed:
        return None

    # A larger die may only bear off the rearmost checker
    if move.die > needed and not has_checker_behind(board, color, move.from_point):
        return None

    return MoveError.WRONG_DISTANCE
