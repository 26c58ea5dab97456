"""Error types for the rules engine.

Validation outcomes are expected and recoverable, so ``validate`` reports
them as ``MoveError`` values. The state machine raises them wrapped in
``IllegalMoveError`` so callers can catch one exception type and still read
the precise reason.
"""

from enum import Enum
from typing import Sequence


class MoveError(Enum):
    """Reasons a single move is rejected."""
    WRONG_PLAYER = "wrong_player"
    DIE_NOT_AVAILABLE = "die_not_available"
    MUST_ENTER_FROM_BAR_FIRST = "must_enter_from_bar_first"
    NO_PIECE_AT_SOURCE = "no_piece_at_source"
    WRONG_DISTANCE = "wrong_distance"
    NOT_ALL_CHECKERS_HOME = "not_all_checkers_home"
    BLOCKED_POINT = "blocked_point"
    MUST_MAXIMIZE_DICE = "must_maximize_dice"

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    def __str__(self) -> str:
        return self.value


_MESSAGES = {
    MoveError.WRONG_PLAYER: "It is not this color's turn",
    MoveError.DIE_NOT_AVAILABLE: "Die value is not available",
    MoveError.MUST_ENTER_FROM_BAR_FIRST: "Checkers on the bar must enter first",
    MoveError.NO_PIECE_AT_SOURCE: "No checker of this color at the starting position",
    MoveError.WRONG_DISTANCE: "Move distance does not match the die",
    MoveError.NOT_ALL_CHECKERS_HOME: "Cannot bear off until all checkers are in the home board",
    MoveError.BLOCKED_POINT: "Destination point is held by two or more opposing checkers",
    MoveError.MUST_MAXIMIZE_DICE: "Another move uses more of the roll",
}


class RulesError(Exception):
    """Base class for errors raised by the rules engine."""


class IllegalMoveError(RulesError):
    """A move failed validation.

    Attributes:
        reason: The specific validation failure
    """

    def __init__(self, reason: MoveError, detail: str = ""):
        self.reason = reason
        message = reason.message if not detail else f"{reason.message}: {detail}"
        super().__init__(message)


class DieNotAvailableError(IllegalMoveError):
    """A die value was consumed that is not among the remaining dice."""

    def __init__(self, die: int, remaining: Sequence[int]):
        self.die = die
        self.remaining = tuple(remaining)
        super().__init__(MoveError.DIE_NOT_AVAILABLE, f"{die} not in {list(self.remaining)}")


class GameStateError(RulesError):
    """An operation was attempted in a game state that does not allow it."""


class GameOverError(GameStateError):
    """The game has finished; no further moves are accepted."""


class SnapshotError(RulesError, ValueError):
    """A stored game snapshot could not be decoded."""
