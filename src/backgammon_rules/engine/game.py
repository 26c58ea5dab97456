"""Turn and game state machine.

A game moves through WAITING -> PLAYING -> FINISHED and never goes back.
Within PLAYING each turn runs:

    start_turn (roll)  ->  make_move ...  ->  turn complete (switch color)

A turn is complete when every die has been used, or when none of the
remaining die values has a legal move. A blocked die stays in play while
another die can still move, since that move may open it up; whatever is
left when nothing can move is forfeited.

Every function takes a ``GameState`` and returns a new one; nothing here
keeps state between calls.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Set

import numpy as np

from backgammon_rules.config import DEFAULT_RULES, RulesConfig
from backgammon_rules.core.board import initial_board, winner as board_winner
from backgammon_rules.core.dice import Dice, roll_dice
from backgammon_rules.core.types import Board, Color, GameStatus, Move
from backgammon_rules.engine.enumerator import legal_moves
from backgammon_rules.engine.executor import apply_move
from backgammon_rules.engine.validator import validate
from backgammon_rules.errors import GameOverError, GameStateError, IllegalMoveError, MoveError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameState:
    """Complete state of one game.

    Attributes:
        board: Current position
        dice: Dice in play for the current turn, or None while waiting for a roll
        on_roll: Color whose turn it is
        status: Lifecycle status
        winner: Set exactly when status is FINISHED
    """
    board: Board
    dice: Optional[Dice] = None
    on_roll: Color = Color.WHITE
    status: GameStatus = GameStatus.WAITING
    winner: Optional[Color] = None

    def __post_init__(self):
        """Validate status/winner consistency."""
        if self.status == GameStatus.FINISHED:
            assert self.winner is not None, "A finished game must have a winner"
        else:
            assert self.winner is None, "Only a finished game has a winner"

    @property
    def is_finished(self) -> bool:
        return self.status == GameStatus.FINISHED

    @property
    def awaiting_roll(self) -> bool:
        """True when the color on roll has not rolled yet."""
        return self.status == GameStatus.PLAYING and self.dice is None


# ==============================================================================
# GAME LIFECYCLE
# ==============================================================================

def new_game(board: Optional[Board] = None, on_roll: Color = Color.WHITE) -> GameState:
    """Create a game waiting to start.

    Args:
        board: Starting position (standard layout if None)
        on_roll: Color that plays first

    Returns:
        GameState in WAITING status
    """
    return GameState(board=board if board is not None else initial_board(), on_roll=on_roll)


def start_game(state: GameState) -> GameState:
    """Move a waiting game into play.

    Raises:
        GameStateError: If the game is not WAITING
    """
    if state.status != GameStatus.WAITING:
        raise GameStateError(f"Cannot start a game in status '{state.status}'")

    logger.info("Game started, %s on roll", state.on_roll)
    return replace(state, status=GameStatus.PLAYING)


def start_turn(
    state: GameState,
    dice: Optional[Dice] = None,
    rng: Optional[np.random.Generator] = None,
    config: RulesConfig = DEFAULT_RULES,
) -> GameState:
    """Roll dice for the color on roll.

    If no die can be played the roll is forfeited, the turn ends
    immediately and the opponent is on roll, still waiting for their own
    roll.

    Args:
        state: Game awaiting a roll
        dice: Pre-rolled dice (rolled with ``rng`` if None)
        rng: Random source for rolling
        config: Rule options

    Returns:
        New state with dice in play, or with the turn passed

    Raises:
        GameOverError: If the game has finished
        GameStateError: If the game is not in play or dice are already in play
    """
    _require_playing(state)
    if state.dice is not None:
        raise GameStateError("Dice are already in play for this turn")

    rolled = dice if dice is not None else roll_dice(rng)
    logger.debug("%s rolled %s", state.on_roll, rolled)
    return _settle_turn(replace(state, dice=rolled), config)


def make_move(state: GameState, move: Move, config: RulesConfig = DEFAULT_RULES) -> GameState:
    """Validate and play one checker move.

    Args:
        state: Game with dice in play
        move: Move to play
        config: Rule options

    Returns:
        New state after the move, with the turn passed if it is complete and
        the game finished if the mover bore off the last checker

    Raises:
        GameOverError: If the game has finished
        GameStateError: If the game is not in play or no dice have been rolled
        IllegalMoveError: If the move is rejected; ``reason`` tells why
    """
    _require_playing(state)
    if state.dice is None:
        raise GameStateError("Dice have not been rolled")

    error = validate(state.board, state.dice, state.on_roll, move)
    if error is not None:
        raise IllegalMoveError(error, str(move))

    if config.enforce_maximal_usage and move not in legal_moves(state.board, state.dice, state.on_roll, config):
        raise IllegalMoveError(MoveError.MUST_MAXIMIZE_DICE, str(move))

    board = apply_move(state.board, move)
    dice = state.dice.consume(move.die)
    logger.debug("%s played %s", state.on_roll, move)

    champion = board_winner(board)
    if champion is not None:
        logger.info("Game finished, %s wins", champion)
        return replace(state, board=board, dice=None, status=GameStatus.FINISHED, winner=champion)

    return _settle_turn(replace(state, board=board, dice=dice), config)


# ==============================================================================
# TURN QUERIES
# ==============================================================================

def legal_moves_for(state: GameState, config: RulesConfig = DEFAULT_RULES) -> Set[Move]:
    """Legal moves for the color on roll (empty if no dice are in play)."""
    if state.status != GameStatus.PLAYING or state.dice is None:
        return set()
    return legal_moves(state.board, state.dice, state.on_roll, config)


def is_turn_complete(state: GameState, config: RulesConfig = DEFAULT_RULES) -> bool:
    """True if the current dice are exhausted or none can be played."""
    if state.dice is None or state.dice.exhausted:
        return True
    return not legal_moves(state.board, state.dice, state.on_roll, config)


# ==============================================================================
# HELPERS
# ==============================================================================

def _require_playing(state: GameState) -> None:
    if state.status == GameStatus.FINISHED:
        raise GameOverError(f"Game is over, {state.winner} won")
    if state.status != GameStatus.PLAYING:
        raise GameStateError(f"Game is not in play (status '{state.status}')")


def _settle_turn(state: GameState, config: RulesConfig) -> GameState:
    """Pass the turn once no remaining die can be played."""
    dice = state.dice
    if not dice.exhausted:
        if legal_moves(state.board, dice, state.on_roll, config):
            return state
        logger.debug("%s forfeits %s: no legal move", state.on_roll, list(dice.remaining))

    logger.debug("Turn complete, %s on roll", state.on_roll.opponent())
    return replace(state, dice=None, on_roll=state.on_roll.opponent())
