"""Play complete games between two advisors.

Drives the state machine from the opening roll to the last checker borne
off. Useful for exercising the rules over many random positions and for
the ``play`` command of the CLI.
"""

import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Optional

import numpy as np

from backgammon_rules.config import DEFAULT_RULES, RulesConfig
from backgammon_rules.core.dice import Dice, roll_dice
from backgammon_rules.core.types import Color, GameStatus, Move
from backgammon_rules.advisor.agents import Advisor
from backgammon_rules.engine.game import (
    GameState,
    legal_moves_for,
    make_move,
    new_game,
    start_game,
    start_turn,
)

logger = logging.getLogger(__name__)


class TurnRecord(NamedTuple):
    """One turn of a game: who rolled what and which moves were played."""
    player: Color
    dice: Dice
    moves: List[Move]


@dataclass
class GameRecord:
    """Result of a played game.

    Attributes:
        turns: Every turn in order, including forced passes
        winner: Winning color, or None if the turn limit was reached
        final_state: State after the last move
    """
    turns: List[TurnRecord]
    winner: Optional[Color]
    final_state: GameState

    @property
    def num_turns(self) -> int:
        return len(self.turns)

    @property
    def num_moves(self) -> int:
        return sum(len(turn.moves) for turn in self.turns)


def play_game(
    white: Advisor,
    black: Advisor,
    state: Optional[GameState] = None,
    rng: Optional[np.random.Generator] = None,
    max_turns: int = 2000,
    config: RulesConfig = DEFAULT_RULES,
) -> GameRecord:
    """Play a game between two advisors.

    Args:
        white: Advisor playing White
        black: Advisor playing Black
        state: Starting state (a new standard game if None)
        rng: Random number generator for dice
        max_turns: Turn limit before giving up without a winner
        config: Rule options

    Returns:
        GameRecord with the complete trajectory
    """
    if rng is None:
        rng = np.random.default_rng()
    if state is None:
        state = new_game()
    if state.status == GameStatus.WAITING:
        state = start_game(state)

    turns: List[TurnRecord] = []

    for _ in range(max_turns):
        if state.is_finished:
            break

        player = state.on_roll
        advisor = white if player == Color.WHITE else black

        dice = roll_dice(rng)
        state = start_turn(state, dice=dice, config=config)
        moves: List[Move] = []

        # The turn ends when the color on roll changes or the game finishes
        while not state.is_finished and state.on_roll == player and state.dice is not None:
            options = legal_moves_for(state, config)
            move = advisor.select_move(state, options)
            state = make_move(state, move, config)
            moves.append(move)

        turns.append(TurnRecord(player=player, dice=dice, moves=moves))

    if not state.is_finished:
        logger.info("Turn limit %d reached without a winner", max_turns)

    return GameRecord(turns=turns, winner=state.winner, final_state=state)


def compute_game_statistics(games: List[GameRecord]) -> dict:
    """Compute summary statistics for a batch of games.

    Args:
        games: List of game records

    Returns:
        Dictionary of statistics
    """
    total_games = len(games)
    white_wins = sum(1 for g in games if g.winner == Color.WHITE)
    black_wins = sum(1 for g in games if g.winner == Color.BLACK)
    unfinished = sum(1 for g in games if g.winner is None)

    return {
        'total_games': total_games,
        'white_wins': white_wins,
        'black_wins': black_wins,
        'unfinished': unfinished,
        'white_win_rate': white_wins / total_games if total_games > 0 else 0.0,
        'avg_turns': float(np.mean([g.num_turns for g in games])) if games else 0.0,
        'avg_moves': float(np.mean([g.num_moves for g in games])) if games else 0.0,
    }
