"""Move advisors.

An advisor picks one move from the legal moves the engine offers. The engine
never calls an advisor itself: the caller asks the advisor, then passes the
chosen move to ``make_move`` like any other move. This is also the shape an
external evaluation service is adapted to.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Set

import numpy as np

from backgammon_rules.core.types import Move
from backgammon_rules.engine.enumerator import sorted_moves
from backgammon_rules.engine.game import GameState


# ==============================================================================
# ADVISOR BASE CLASS
# ==============================================================================


@dataclass
class Advisor:
    """Chooses moves for one side.

    Attributes:
        name: Advisor name for identification
        select_move_fn: Function that picks a move from the legal moves
    """
    name: str
    select_move_fn: Callable[[GameState, Set[Move]], Move]

    def select_move(self, state: GameState, legal_moves: Set[Move]) -> Move:
        """Select a move from the legal moves.

        Args:
            state: Current game state (dice in play)
            legal_moves: Non-empty set of legal moves

        Returns:
            One of ``legal_moves``
        """
        return self.select_move_fn(state, legal_moves)


# ==============================================================================
# RANDOM ADVISOR
# ==============================================================================


def random_advisor(seed: Optional[int] = None) -> Advisor:
    """Create an advisor that picks uniformly among legal moves.

    Args:
        seed: Random seed (optional, for reproducibility)

    Returns:
        Random advisor
    """
    rng = np.random.default_rng(seed)

    def select_random_move(state: GameState, legal_moves: Set[Move]) -> Move:
        # Sort first so a seed gives the same choice regardless of set order
        ordered = sorted_moves(legal_moves)
        return ordered[int(rng.integers(0, len(ordered)))]

    return Advisor(name="Random", select_move_fn=select_random_move)


def first_move_advisor() -> Advisor:
    """Create an advisor that always plays the first move in sorted order."""

    def select_first_move(state: GameState, legal_moves: Set[Move]) -> Move:
        return sorted_moves(legal_moves)[0]

    return Advisor(name="First", select_move_fn=select_first_move)
