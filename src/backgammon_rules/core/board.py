"""Board construction and queries.

This module implements the board-level parts of the rules:
- Board initialization
- Pip counts and bear-off eligibility
- Entry points, home boards and distances
- Conservation checks and game-over detection

Board Layout (0-indexed):
    White moves 23→0→off (home board: 0-5)
    Black moves 0→23→off (home board: 18-23)

    12 13 14 15 16 17    18 19 20 21 22 23
    +------------------+------------------+
    |                  |                  |  Black home
    |                  |                  |
    |                  |                  |
    |                  |                  |
    |                  |                  |
    |                  |                  |  White home
    +------------------+------------------+
    11 10  9  8  7  6     5  4  3  2  1  0
"""

from typing import Dict, Optional, Sequence, Tuple

from backgammon_rules.core.types import (
    BAR_PIPS,
    CHECKERS_PER_SIDE,
    NUM_POINTS,
    Board,
    Color,
    Point,
)


# Standard starting layout as {point: count}
STANDARD_WHITE_SETUP = {23: 2, 12: 5, 7: 3, 5: 5}
STANDARD_BLACK_SETUP = {0: 2, 11: 5, 16: 3, 18: 5}


# ==============================================================================
# BOARD CONSTRUCTION
# ==============================================================================

def initial_board() -> Board:
    """Create the standard backgammon starting position.

    Standard setup:
    - White: 2 on 23, 5 on 12, 3 on 7, 5 on 5
    - Black: 2 on 0, 5 on 11, 3 on 16, 5 on 18

    Returns:
        Board in starting position
    """
    points = [0] * NUM_POINTS
    for point, count in STANDARD_WHITE_SETUP.items():
        points[point] = count
    for point, count in STANDARD_BLACK_SETUP.items():
        points[point] = -count
    return Board(points=points)


def empty_board() -> Board:
    """Create an empty board with no checkers.

    Returns:
        Empty board
    """
    return Board()


def board_from_points(
    points: Sequence[int],
    white_bar: int = 0,
    black_bar: int = 0,
    white_off: int = 0,
    black_off: int = 0,
) -> Board:
    """Build a board from a signed point list and bar/off counts."""
    return Board(
        points=list(points),
        white_bar=white_bar,
        black_bar=black_bar,
        white_off=white_off,
        black_off=black_off,
    )


def board_from_layout(
    white: Dict[Point, int],
    black: Dict[Point, int],
    white_bar: int = 0,
    black_bar: int = 0,
    white_off: int = 0,
    black_off: int = 0,
) -> Board:
    """Build a board from per-color {point: count} layouts.

    Args:
        white: White checker counts by point
        black: Black checker counts by point
        white_bar, black_bar, white_off, black_off: Off-board counts

    Returns:
        New board
    """
    points = [0] * NUM_POINTS
    for point, count in white.items():
        points[point] += count
    for point, count in black.items():
        assert points[point] == 0, f"Point {point} cannot hold both colors"
        points[point] -= count
    return board_from_points(points, white_bar, black_bar, white_off, black_off)


# ==============================================================================
# GEOMETRY
# ==============================================================================

def home_points(color: Color) -> range:
    """Get the points of a color's home board."""
    if color == Color.WHITE:
        return range(0, 6)
    return range(18, 24)


def entry_point(color: Color, die: int) -> Point:
    """Get the point a checker enters on from the bar.

    Checkers enter in the opponent's home board, ``die`` steps from the far
    edge.

    Args:
        color: Which color is entering
        die: Die value (1-6)

    Returns:
        Point index
    """
    if color == Color.WHITE:
        return NUM_POINTS - die  # 18-23
    return die - 1  # 0-5


def distance_to_off(color: Color, point: Point) -> int:
    """Pips a checker on ``point`` still has to travel to bear off."""
    if color == Color.WHITE:
        return point + 1
    return NUM_POINTS - point


def target_point(color: Color, point: Point, die: int) -> int:
    """Point reached by moving ``die`` pips forward.

    The result is off the board (below 0 or above 23) when the move would
    bear off.
    """
    if color == Color.WHITE:
        return point - die
    return point + die


# ==============================================================================
# BOARD QUERIES
# ==============================================================================

def checkers_at(board: Board, color: Color, point: Point) -> int:
    """Number of ``color`` checkers on a point."""
    return board.count(color, point)


def checkers_on_bar(board: Board, color: Color) -> int:
    """Number of ``color`` checkers on the bar."""
    return board.bar(color)


def checkers_borne_off(board: Board, color: Color) -> int:
    """Number of ``color`` checkers borne off."""
    return board.off(color)


def checkers_on_board(board: Board, color: Color) -> int:
    """Number of ``color`` checkers on points 0-23."""
    return sum(board.count(color, point) for point in range(NUM_POINTS))


def pip_count(board: Board, color: Color) -> int:
    """Calculate pip count for a color.

    Pip count = sum of each checker's distance to bearing off. Checkers on
    the bar count 25 pips each; borne-off checkers count nothing.

    Args:
        board: Current board
        color: Which color

    Returns:
        Total pip count
    """
    total = board.bar(color) * BAR_PIPS
    for point in range(NUM_POINTS):
        count = board.count(color, point)
        if count:
            total += count * distance_to_off(color, point)
    return total


def pip_counts(board: Board) -> Dict[Color, int]:
    """Pip counts for both colors."""
    return {color: pip_count(board, color) for color in Color}


def all_home(board: Board, color: Color) -> bool:
    """Check if every checker of a color is home (or already borne off).

    A color may bear off only when this holds.

    Args:
        board: Current board
        color: Which color

    Returns:
        True if no checker is on the bar or outside the home board
    """
    if board.bar(color) > 0:
        return False

    home = home_points(color)
    for point in range(NUM_POINTS):
        if point not in home and board.count(color, point) > 0:
            return False

    return True


def has_checker_behind(board: Board, color: Color, point: Point) -> bool:
    """Check for own checkers further from home than ``point``.

    Used by the bear-off overshoot rule: a die larger than needed may only
    bear off the rearmost checker.
    """
    if color == Color.WHITE:
        behind = range(point + 1, NUM_POINTS)
    else:
        behind = range(0, point)
    return any(board.count(color, p) > 0 for p in behind)


def is_game_over(board: Board) -> bool:
    """Check if one color has borne off all 15 checkers."""
    return board.white_off == CHECKERS_PER_SIDE or board.black_off == CHECKERS_PER_SIDE


def winner(board: Board) -> Optional[Color]:
    """Return the color that has borne off all checkers, if any."""
    if board.white_off == CHECKERS_PER_SIDE:
        return Color.WHITE
    if board.black_off == CHECKERS_PER_SIDE:
        return Color.BLACK
    return None


def check_board(board: Board) -> Tuple[bool, str]:
    """Validate checker conservation for both colors.

    Args:
        board: Board to validate

    Returns:
        (is_valid, error_message) tuple
    """
    for color in Color:
        total = board.bar(color) + board.off(color) + checkers_on_board(board, color)
        if total != CHECKERS_PER_SIDE:
            return False, f"{color.value.capitalize()} has {total} checkers, should have {CHECKERS_PER_SIDE}"

    return True, ""


# ==============================================================================
# BOARD DISPLAY
# ==============================================================================

def _cell(value: int) -> str:
    if value > 0:
        return f"W{value}"
    if value < 0:
        return f"B{-value}"
    return " ."


def board_to_string(board: Board) -> str:
    """Convert board to an ASCII representation.

    Args:
        board: Board to display

    Returns:
        Multi-line string with the top half (12-23) above the bottom half (11-0)
    """
    top = list(range(12, 24))
    bottom = list(range(11, -1, -1))

    lines = []
    lines.append(" ".join(f"{p:>3}" for p in top))
    lines.append(" ".join(f"{_cell(int(board.points[p])):>3}" for p in top))
    lines.append("")
    lines.append(" ".join(f"{_cell(int(board.points[p])):>3}" for p in bottom))
    lines.append(" ".join(f"{p:>3}" for p in bottom))
    lines.append(
        f"Bar: W{board.white_bar} B{board.black_bar}   "
        f"Off: W{board.white_off} B{board.black_off}"
    )
    lines.append(
        f"Pips: W{pip_count(board, Color.WHITE)} B{pip_count(board, Color.BLACK)}"
    )
    return "\n".join(lines)
