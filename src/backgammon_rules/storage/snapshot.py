"""JSON snapshots of game state.

The engine keeps nothing between calls, so whoever stores games (a database
row, a file, a cache) saves a snapshot after each call and loads it before
the next. These helpers convert engine values to plain dictionaries and
back without losing anything.

Snapshot layout::

    {
        "board": {"points": [...24 ints...], "white_bar": 0, "black_bar": 0,
                  "white_off": 0, "black_off": 0},
        "dice": {"values": [3, 1], "remaining": [1, 3]} | null,
        "on_roll": "white",
        "status": "playing",
        "winner": null
    }
"""

import json
import logging
from typing import Any, Dict, Optional

from backgammon_rules.core.board import check_board, winner as board_winner
from backgammon_rules.core.dice import Dice, remaining_fits_roll
from backgammon_rules.core.types import (
    BAR,
    CHECKERS_PER_SIDE,
    NUM_POINTS,
    OFF,
    Board,
    Color,
    GameStatus,
    Move,
    Zone,
)
from backgammon_rules.engine.game import GameState
from backgammon_rules.errors import SnapshotError

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


# ==============================================================================
# ENCODING
# ==============================================================================

def board_to_dict(board: Board) -> Dict[str, Any]:
    """Convert a board to a JSON-serializable dictionary."""
    return {
        "points": [int(c) for c in board.points],
        "white_bar": board.white_bar,
        "black_bar": board.black_bar,
        "white_off": board.white_off,
        "black_off": board.black_off,
    }


def dice_to_dict(dice: Optional[Dice]) -> Optional[Dict[str, Any]]:
    """Convert dice to a dictionary (None stays None)."""
    if dice is None:
        return None
    return {"values": list(dice.values), "remaining": list(dice.remaining)}


def move_to_dict(move: Move) -> Dict[str, Any]:
    """Convert a move to a dictionary. BAR and OFF are written as strings."""
    return {
        "from": _location_to_json(move.from_point),
        "to": _location_to_json(move.to_point),
        "player": move.player.value,
        "die": move.die,
    }


def game_to_dict(state: GameState) -> Dict[str, Any]:
    """Convert a game state to a dictionary."""
    return {
        "version": SNAPSHOT_VERSION,
        "board": board_to_dict(state.board),
        "dice": dice_to_dict(state.dice),
        "on_roll": state.on_roll.value,
        "status": state.status.value,
        "winner": state.winner.value if state.winner is not None else None,
    }


def dumps(state: GameState) -> str:
    """Serialize a game state to JSON text."""
    return json.dumps(game_to_dict(state))


# ==============================================================================
# DECODING
# ==============================================================================
#
# Every field is checked here and reported as SnapshotError before any
# engine value is built.

def board_from_dict(data: Dict[str, Any]) -> Board:
    """Rebuild a board, checking checker conservation.

    Raises:
        SnapshotError: If fields are missing or the position is invalid
    """
    raw_points = _field(data, "points", "board")
    if not isinstance(raw_points, list) or len(raw_points) != NUM_POINTS:
        raise SnapshotError(f"Invalid board snapshot: expected a list of {NUM_POINTS} points")

    points = [
        _checked_int(count, f"point {i}", -CHECKERS_PER_SIDE, CHECKERS_PER_SIDE)
        for i, count in enumerate(raw_points)
    ]
    counts = {
        name: _checked_int(_field(data, name, "board"), name, 0, CHECKERS_PER_SIDE)
        for name in ("white_bar", "black_bar", "white_off", "black_off")
    }
    board = Board(points=points, **counts)

    ok, message = check_board(board)
    if not ok:
        raise SnapshotError(f"Invalid board snapshot: {message}")
    return board


def dice_from_dict(data: Optional[Dict[str, Any]]) -> Optional[Dice]:
    """Rebuild dice (None stays None).

    Raises:
        SnapshotError: If the dice are malformed or ``remaining`` cannot be
            left over from ``values``
    """
    if data is None:
        return None

    raw_values = _field(data, "values", "dice")
    raw_remaining = _field(data, "remaining", "dice")
    if not isinstance(raw_values, list) or len(raw_values) != 2:
        raise SnapshotError("Invalid dice snapshot: a roll has exactly two values")
    if not isinstance(raw_remaining, list) or len(raw_remaining) > 4:
        raise SnapshotError("Invalid dice snapshot: at most four dice can remain")

    values = tuple(_checked_int(v, "die value", 1, 6) for v in raw_values)
    remaining = tuple(_checked_int(v, "remaining die", 1, 6) for v in raw_remaining)
    if not remaining_fits_roll(values, remaining):
        raise SnapshotError(
            f"Invalid dice snapshot: remaining {list(remaining)} cannot come from a roll of {list(values)}"
        )
    return Dice(values=values, remaining=remaining)


def move_from_dict(data: Dict[str, Any]) -> Move:
    """Rebuild a move.

    Raises:
        SnapshotError: If the move is malformed
    """
    return Move(
        from_point=_location_from_json(_field(data, "from", "move"), BAR, "move source"),
        to_point=_location_from_json(_field(data, "to", "move"), OFF, "move destination"),
        player=_checked_enum(Color, _field(data, "player", "move"), "player"),
        die=_checked_int(_field(data, "die", "move"), "die", 1, 6),
    )


def game_from_dict(data: Dict[str, Any]) -> GameState:
    """Rebuild a game state.

    Raises:
        SnapshotError: If the snapshot is malformed or inconsistent
    """
    if not isinstance(data, dict):
        raise SnapshotError("Invalid game snapshot: expected an object")
    version = data.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise SnapshotError(f"Unsupported snapshot version: {version}")

    board = board_from_dict(_field(data, "board", "game"))
    dice = dice_from_dict(data.get("dice"))
    on_roll = _checked_enum(Color, _field(data, "on_roll", "game"), "on_roll")
    status = _checked_enum(GameStatus, _field(data, "status", "game"), "status")
    raw_winner = data.get("winner")
    winner = _checked_enum(Color, raw_winner, "winner") if raw_winner is not None else None

    _check_game_consistency(board, dice, status, winner)

    state = GameState(board=board, dice=dice, on_roll=on_roll, status=status, winner=winner)
    logger.debug("Loaded game snapshot: %s on roll, status %s", state.on_roll, state.status)
    return state


def loads(text: str) -> GameState:
    """Deserialize a game state from JSON text.

    Raises:
        SnapshotError: If the text is not valid JSON or not a valid snapshot
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")
    return game_from_dict(data)


# ==============================================================================
# HELPERS
# ==============================================================================

def _location_to_json(location):
    if isinstance(location, Zone):
        return location.value
    return location


def _location_from_json(value, zone: Zone, what: str):
    """Decode a point index or the one zone allowed at this end of a move."""
    if value == zone.value:
        return zone
    if isinstance(value, str):
        raise SnapshotError(f"Invalid {what}: expected a point or '{zone.value}', got {value!r}")
    return _checked_int(value, what, 0, NUM_POINTS - 1)


def _field(data: Any, key: str, what: str) -> Any:
    if not isinstance(data, dict):
        raise SnapshotError(f"Invalid {what} snapshot: expected an object")
    if key not in data:
        raise SnapshotError(f"Invalid {what} snapshot: missing '{key}'")
    return data[key]


def _checked_int(value: Any, what: str, low: int, high: int) -> int:
    # bool is an int subclass; floats are rejected rather than truncated
    if isinstance(value, bool) or not isinstance(value, int):
        raise SnapshotError(f"Invalid {what}: expected an integer, got {value!r}")
    if not low <= value <= high:
        raise SnapshotError(f"Invalid {what}: {value} is outside {low}..{high}")
    return value


def _checked_enum(enum_cls, value: Any, what: str):
    try:
        return enum_cls(value)
    except (ValueError, TypeError) as e:
        raise SnapshotError(f"Invalid {what}: {value!r}") from e


def _check_game_consistency(
    board: Board,
    dice: Optional[Dice],
    status: GameStatus,
    winner: Optional[Color],
) -> None:
    """Check that status, winner, dice and the board agree."""
    finished_by = board_winner(board)
    if status == GameStatus.FINISHED:
        if winner is None:
            raise SnapshotError("Invalid game snapshot: a finished game must have a winner")
        if finished_by != winner:
            raise SnapshotError(f"Invalid game snapshot: {winner} has not borne off every checker")
    else:
        if winner is not None:
            raise SnapshotError(f"Invalid game snapshot: a {status} game cannot have a winner")
        if finished_by is not None:
            raise SnapshotError(f"Invalid game snapshot: {finished_by} has borne off every checker")

    if dice is not None and status != GameStatus.PLAYING:
        raise SnapshotError(f"Invalid game snapshot: a {status} game cannot have dice in play")
