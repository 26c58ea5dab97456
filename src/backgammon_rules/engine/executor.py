"""Move application.

``apply_move`` is a pure transform: it returns a new board and never
touches its input. It assumes the move has already passed ``validate``;
violating that contract trips an assertion.
"""

from backgammon_rules.core.types import BAR, OFF, Board, Color, Move


def apply_move(board: Board, move: Move) -> Board:
    """Apply a validated move to a board.

    The source loses one checker and the destination gains one. Landing on
    a single opposing checker sends it to its owner's bar. Bearing off
    increments the mover's off count.

    Args:
        board: Board before the move
        move: A move that ``validate`` accepted for this board

    Returns:
        New board with the move applied
    """
    color = move.player
    sign = color.sign
    points = board.points.copy()
    bar = {Color.WHITE: board.white_bar, Color.BLACK: board.black_bar}
    off = {Color.WHITE: board.white_off, Color.BLACK: board.black_off}

    # Pick up the checker
    if move.from_point is BAR:
        assert bar[color] > 0, f"No {color} checker on the bar"
        bar[color] -= 1
    else:
        assert points[move.from_point] * sign > 0, f"No {color} checker on point {move.from_point}"
        points[move.from_point] -= sign

    # Put it down
    if move.to_point is OFF:
        off[color] += 1
    else:
        occupant = int(points[move.to_point]) * sign
        assert occupant >= -1, f"Point {move.to_point} is blocked"
        if occupant == -1:
            # Hit: the blot goes to the bar and the mover takes the point
            points[move.to_point] = sign
            bar[color.opponent()] += 1
        else:
            points[move.to_point] += sign

    return Board(
        points=points,
        white_bar=bar[Color.WHITE],
        black_bar=bar[Color.BLACK],
        white_off=off[Color.WHITE],
        black_off=off[Color.BLACK],
    )


def is_hit(board: Board, move: Move) -> bool:
    """Check whether a move lands on an opposing blot."""
    if move.to_point is OFF:
        return False
    return board.count(move.player.opponent(), move.to_point) == 1
