"""Core type definitions for the backgammon rules engine.

This module defines the value types shared by every layer of the engine:
colors, board locations, boards, moves and game status.

Point indexing:
    Points are numbered 0-23. Two extra logical locations exist per color,
    the bar and the off tray, represented by the ``Zone`` enum.

    White moves from 23 toward 0 and bears off past 0 (home board: 0-5).
    Black moves from 0 toward 23 and bears off past 23 (home board: 18-23).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Tuple, Union

import numpy as np
from numpy.typing import NDArray


# ==============================================================================
# CONSTANTS
# ==============================================================================

NUM_POINTS = 24
CHECKERS_PER_SIDE = 15
BAR_PIPS = 25  # A checker on the bar is the furthest possible distance from home


# ==============================================================================
# COLORS AND LOCATIONS
# ==============================================================================

class Color(Enum):
    """Checker colors."""
    WHITE = "white"
    BLACK = "black"

    def opponent(self) -> "Color":
        """Return the opposing color."""
        return Color.BLACK if self == Color.WHITE else Color.WHITE

    @property
    def sign(self) -> int:
        """Sign used for this color in the signed point array."""
        return 1 if self == Color.WHITE else -1

    def __str__(self) -> str:
        return self.value


class Zone(Enum):
    """Off-board locations a checker can occupy."""
    BAR = "bar"
    OFF = "off"

    def __str__(self) -> str:
        return self.value


BAR = Zone.BAR
OFF = Zone.OFF

Point = int  # 0-23
Source = Union[Point, Zone]  # A point or BAR
Destination = Union[Point, Zone]  # A point or OFF


class GameStatus(Enum):
    """Lifecycle of a game. Transitions only move forward."""
    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"

    def __str__(self) -> str:
        return self.value


# ==============================================================================
# BOARD REPRESENTATION
# ==============================================================================

def _frozen_points(values: Iterable[int]) -> NDArray[np.int8]:
    points = np.array(list(values), dtype=np.int8)
    points.setflags(write=False)
    return points


@dataclass(frozen=True, eq=False)
class Board:
    """Immutable board position.

    Attributes:
        points: Signed checker counts for points 0-23. Positive values are
            White checkers, negative values are Black checkers.
        white_bar: White checkers waiting on the bar
        black_bar: Black checkers waiting on the bar
        white_off: White checkers borne off
        black_off: Black checkers borne off
    """
    points: NDArray[np.int8] = field(default_factory=lambda: _frozen_points([0] * NUM_POINTS))
    white_bar: int = 0
    black_bar: int = 0
    white_off: int = 0
    black_off: int = 0

    def __post_init__(self):
        """Validate shape and counts, and freeze the point array."""
        object.__setattr__(self, "points", _frozen_points(self.points))
        assert len(self.points) == NUM_POINTS, "points must have length 24"
        assert all(abs(int(c)) <= CHECKERS_PER_SIDE for c in self.points), "Invalid checker count"
        for name in ("white_bar", "black_bar", "white_off", "black_off"):
            count = getattr(self, name)
            assert 0 <= count <= CHECKERS_PER_SIDE, f"Invalid {name}: {count}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            np.array_equal(self.points, other.points)
            and self.white_bar == other.white_bar
            and self.black_bar == other.black_bar
            and self.white_off == other.white_off
            and self.black_off == other.black_off
        )

    def __hash__(self) -> int:
        return hash((self.points.tobytes(), self.white_bar, self.black_bar, self.white_off, self.black_off))

    def count(self, color: Color, point: Point) -> int:
        """Number of ``color`` checkers on a point (0 if the opponent holds it)."""
        value = int(self.points[point]) * color.sign
        return value if value > 0 else 0

    def bar(self, color: Color) -> int:
        """Number of ``color`` checkers on the bar."""
        return self.white_bar if color == Color.WHITE else self.black_bar

    def off(self, color: Color) -> int:
        """Number of ``color`` checkers borne off."""
        return self.white_off if color == Color.WHITE else self.black_off


# ==============================================================================
# MOVES
# ==============================================================================

@dataclass(frozen=True)
class Move:
    """A single checker movement using one die.

    Attributes:
        from_point: Starting point (0-23) or BAR
        to_point: Ending point (0-23) or OFF
        player: Color of the moving checker
        die: Die value consumed by the move (1-6)
    """
    from_point: Source
    to_point: Destination
    player: Color
    die: int

    def __post_init__(self):
        """Validate the move's shape; rule legality is checked elsewhere."""
        assert self.from_point is not OFF, "A move cannot start from OFF"
        assert self.to_point is not BAR, "A move cannot end on the BAR"
        for location in (self.from_point, self.to_point):
            if not isinstance(location, Zone):
                assert 0 <= location < NUM_POINTS, f"Invalid point: {location}"
        assert 1 <= self.die <= 6, f"Invalid die: {self.die}"

    @property
    def enters_from_bar(self) -> bool:
        return self.from_point is BAR

    @property
    def bears_off(self) -> bool:
        return self.to_point is OFF

    def sort_key(self) -> Tuple[int, int, int]:
        """Ordering key: bar first, then by source, destination and die."""
        source = -1 if self.from_point is BAR else self.from_point
        target = NUM_POINTS if self.to_point is OFF else self.to_point
        return (source, target, self.die)

    def __str__(self) -> str:
        return f"{self.from_point}/{self.to_point} ({self.die})"


# A full turn is a sequence of 0-4 single moves
Turn = Tuple[Move, ...]
