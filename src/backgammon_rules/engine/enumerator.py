"""Legal move enumeration.

Two views of the same rules:

- ``legal_moves``: every single move that is legal right now for some
  remaining die. This drives UI highlighting and die forfeiture.
- ``legal_turns``: complete move sequences for the whole roll, keeping only
  those that use the maximum number of dice (and the higher die when just
  one of two different dice can be played).

With ``RulesConfig.enforce_maximal_usage`` set, ``legal_moves`` is narrowed
to the first steps of those maximal sequences.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from backgammon_rules.config import DEFAULT_RULES, RulesConfig
from backgammon_rules.core.board import entry_point, target_point
from backgammon_rules.core.dice import Dice
from backgammon_rules.core.types import BAR, NUM_POINTS, OFF, Board, Color, Move, Turn
from backgammon_rules.engine.executor import apply_move
from backgammon_rules.engine.validator import validate

# Longest sequence still playable from (board, remaining dice)
_DepthMemo = Dict[Tuple[Board, Tuple[int, ...]], int]


# ==============================================================================
# SINGLE MOVES
# ==============================================================================

def candidate_moves(board: Board, dice: Dice, color: Color) -> Iterator[Move]:
    """Yield one candidate move per remaining die value and occupied source.

    Candidates are not checked; pass them through ``validate``.
    """
    for die in dice.distinct_remaining():
        if board.bar(color) > 0:
            yield Move(from_point=BAR, to_point=entry_point(color, die), player=color, die=die)

        for point in range(NUM_POINTS):
            if board.count(color, point) == 0:
                continue
            target = target_point(color, point, die)
            if 0 <= target < NUM_POINTS:
                yield Move(from_point=point, to_point=target, player=color, die=die)
            else:
                yield Move(from_point=point, to_point=OFF, player=color, die=die)


def single_moves(board: Board, dice: Dice, color: Color) -> Set[Move]:
    """All moves that pass ``validate`` on their own."""
    return {
        move for move in candidate_moves(board, dice, color)
        if validate(board, dice, color, move) is None
    }


def legal_moves(
    board: Board,
    dice: Dice,
    color: Color,
    config: RulesConfig = DEFAULT_RULES,
) -> Set[Move]:
    """Get the legal moves for the color on roll.

    Args:
        board: Current board
        dice: Dice with the values still available
        color: Color on roll
        config: Rule options

    Returns:
        Set of legal moves (empty if no remaining die can be played)
    """
    moves = single_moves(board, dice, color)
    if config.enforce_maximal_usage and moves:
        moves = _maximal_first_moves(board, dice, color, moves, {})
    return moves


def playable_dice(
    board: Board,
    dice: Dice,
    color: Color,
    config: RulesConfig = DEFAULT_RULES,
) -> List[int]:
    """Distinct remaining die values that have at least one legal move."""
    used = {move.die for move in legal_moves(board, dice, color, config)}
    return [die for die in dice.distinct_remaining() if die in used]


def has_legal_move(
    board: Board,
    dice: Dice,
    color: Color,
    config: RulesConfig = DEFAULT_RULES,
) -> bool:
    """True if at least one remaining die can be played."""
    return bool(legal_moves(board, dice, color, config))


def sorted_moves(moves: Iterable[Move]) -> List[Move]:
    """Order moves deterministically (bar first, then by point and die)."""
    return sorted(moves, key=Move.sort_key)


# ==============================================================================
# FULL TURNS
# ==============================================================================

def max_dice_playable(board: Board, dice: Dice, color: Color) -> int:
    """Maximum number of remaining dice that can be played in sequence."""
    return _max_depth(board, dice, color, {})


def legal_turns(board: Board, dice: Dice, color: Color) -> List[Turn]:
    """Generate the complete legal move sequences for a roll.

    Only sequences using the maximum number of dice are returned. Sequences
    that reach the same final position are merged, keeping the first found.

    Args:
        board: Current board
        dice: Dice with the values still available
        color: Color on roll

    Returns:
        List of turns; ``[()]`` if nothing can be played
    """
    memo: _DepthMemo = {}
    target = _max_depth(board, dice, color, memo)
    if target == 0:
        return [()]

    first_moves = _maximal_first_moves(board, dice, color, single_moves(board, dice, color), memo)
    turns: Dict[Board, Turn] = {}

    def extend(current: Board, remaining: Dice, path: List[Move], allowed: Optional[Set[Move]]) -> None:
        if len(path) == target:
            turns.setdefault(current, tuple(path))
            return

        options = allowed if allowed is not None else single_moves(current, remaining, color)
        for move in sorted_moves(options):
            next_board = apply_move(current, move)
            next_dice = remaining.consume(move.die)
            if len(path) + 1 + _max_depth(next_board, next_dice, color, memo) < target:
                continue
            path.append(move)
            extend(next_board, next_dice, path, None)
            path.pop()

    extend(board, dice, [], first_moves)
    return list(turns.values())


def _max_depth(board: Board, dice: Dice, color: Color, memo: _DepthMemo) -> int:
    key = (board, dice.remaining)
    if key in memo:
        return memo[key]

    best = 0
    for move in single_moves(board, dice, color):
        depth = 1 + _max_depth(apply_move(board, move), dice.consume(move.die), color, memo)
        if depth > best:
            best = depth
            if best == len(dice.remaining):
                break

    memo[key] = best
    return best


def _maximal_first_moves(
    board: Board,
    dice: Dice,
    color: Color,
    moves: Set[Move],
    memo: _DepthMemo,
) -> Set[Move]:
    """Keep moves that start a sequence using as many dice as possible."""
    target = _max_depth(board, dice, color, memo)
    if target == 0:
        return set()

    allowed = {
        move for move in moves
        if 1 + _max_depth(apply_move(board, move), dice.consume(move.die), color, memo) == target
    }

    # Only one of two different dice can be played: it must be the higher one if possible
    if target == 1 and len(set(dice.remaining)) == 2:
        higher = max(dice.remaining)
        if any(move.die == higher for move in allowed):
            allowed = {move for move in allowed if move.die == higher}

    return allowed
