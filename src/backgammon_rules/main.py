"""Command-line entrypoint for backgammon-rules.

Each command loads a game from a JSON session file, calls the engine once
and writes the result back, the same way a stateless server handles one
request. The session file holds the game snapshot, the rule options and an
append-only history of played moves.

Examples:
    backgammon-rules new game.json
    backgammon-rules roll game.json --dice 3 1
    backgammon-rules moves game.json
    backgammon-rules move game.json 7 4 3
    backgammon-rules play --seed 7
    backgammon-rules play --games 20 --seed 7
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from backgammon_rules import __version__
from backgammon_rules.advisor import compute_game_statistics, play_game, random_advisor
from backgammon_rules.config import RulesConfig
from backgammon_rules.core.board import board_to_string, pip_count
from backgammon_rules.core.dice import Dice
from backgammon_rules.core.types import BAR, NUM_POINTS, OFF, Color, Move, Zone
from backgammon_rules.engine import (
    GameState,
    legal_moves_for,
    make_move,
    new_game,
    sorted_moves,
    start_game,
    start_turn,
)
from backgammon_rules.errors import IllegalMoveError, RulesError, SnapshotError
from backgammon_rules.storage import game_from_dict, game_to_dict, move_from_dict, move_to_dict

logger = logging.getLogger(__name__)


# ==============================================================================
# SESSION FILES
# ==============================================================================

def load_session(path: Path) -> Tuple[GameState, RulesConfig, List[Move]]:
    """Read a session file.

    Raises:
        SnapshotError: If the file is missing or malformed
    """
    try:
        data = json.loads(Path(path).read_text())
    except FileNotFoundError as e:
        raise SnapshotError(f"No session file at {path}") from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Session file is not valid JSON: {e}") from e

    if not isinstance(data, dict) or "game" not in data:
        raise SnapshotError("Session file has no game")

    state = game_from_dict(data["game"])

    rules = data.get("rules", {})
    if not isinstance(rules, dict) or set(rules) - {"enforce_maximal_usage"}:
        raise SnapshotError(f"Invalid rules in session file: {rules!r}")
    strict = rules.get("enforce_maximal_usage", False)
    if not isinstance(strict, bool):
        raise SnapshotError(f"Invalid rules in session file: enforce_maximal_usage={strict!r}")
    config = RulesConfig(enforce_maximal_usage=strict)

    history = data.get("history", [])
    if not isinstance(history, list):
        raise SnapshotError("Session history must be a list of moves")
    return state, config, [move_from_dict(m) for m in history]


def save_session(path: Path, state: GameState, config: RulesConfig, history: Sequence[Move]) -> None:
    """Write a session file."""
    data: Dict[str, Any] = {
        "game": game_to_dict(state),
        "rules": {"enforce_maximal_usage": config.enforce_maximal_usage},
        "history": [move_to_dict(m) for m in history],
    }
    Path(path).write_text(json.dumps(data, indent=2))


def parse_location(text: str, zone: Zone):
    """Parse a move endpoint: a point number 0-23 or the given zone."""
    lowered = text.strip().lower()
    if lowered == zone.value:
        return zone
    try:
        point = int(lowered)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Not a point or '{zone.value}': {text}")
    if not 0 <= point < NUM_POINTS:
        raise argparse.ArgumentTypeError(f"Point must be 0-{NUM_POINTS - 1}: {text}")
    return point


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"Must be at least 1: {text}")
    return value


def parse_source(text: str):
    """Parse a move source: a point or 'bar'."""
    return parse_location(text, BAR)


def parse_target(text: str):
    """Parse a move destination: a point or 'off'."""
    return parse_location(text, OFF)


def describe(state: GameState) -> str:
    """Human-readable summary of a game state."""
    lines = [board_to_string(state.board), f"Status: {state.status}"]
    if state.is_finished:
        lines.append(f"Winner: {state.winner}")
    else:
        dice = "not rolled" if state.dice is None else f"{state.dice} (remaining {list(state.dice.remaining)})"
        lines.append(f"On roll: {state.on_roll}, dice: {dice}")
    return "\n".join(lines)


# ==============================================================================
# COMMANDS
# ==============================================================================

def cmd_new(args: argparse.Namespace) -> int:
    on_roll = Color.BLACK if args.black_first else Color.WHITE
    state = start_game(new_game(on_roll=on_roll))
    config = RulesConfig(enforce_maximal_usage=args.strict)
    save_session(args.session, state, config, [])
    print(describe(state))
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    state, _, history = load_session(args.session)
    print(describe(state))
    print(f"Moves played: {len(history)}")
    return 0


def cmd_roll(args: argparse.Namespace) -> int:
    state, config, history = load_session(args.session)
    player = state.on_roll
    dice = Dice.from_values(*args.dice) if args.dice else None
    state = start_turn(state, dice=dice, rng=np.random.default_rng(args.seed), config=config)
    if state.dice is None:
        print(f"{player} has no legal move; turn passes to {state.on_roll}")
    save_session(args.session, state, config, history)
    print(describe(state))
    return 0


def cmd_moves(args: argparse.Namespace) -> int:
    state, config, _ = load_session(args.session)
    moves = sorted_moves(legal_moves_for(state, config))
    if not moves:
        print("No legal moves")
    for move in moves:
        print(move)
    return 0


def cmd_move(args: argparse.Namespace) -> int:
    state, config, history = load_session(args.session)
    move = Move(from_point=args.source, to_point=args.target, player=state.on_roll, die=args.die)
    try:
        state = make_move(state, move, config)
    except IllegalMoveError as e:
        print(f"Illegal move ({e.reason}): {e}")
        return 1
    history.append(move)
    save_session(args.session, state, config, history)
    print(describe(state))
    return 0


def cmd_play(args: argparse.Namespace) -> int:
    rng = np.random.default_rng(args.seed)
    config = RulesConfig(enforce_maximal_usage=args.strict)
    white = random_advisor(seed=None if args.seed is None else args.seed + 1)
    black = random_advisor(seed=None if args.seed is None else args.seed + 2)
    records = [
        play_game(white, black, rng=rng, max_turns=args.max_turns, config=config)
        for _ in range(args.games)
    ]

    if args.games > 1:
        stats = compute_game_statistics(records)
        print(f"Games: {stats['total_games']}")
        print(f"White wins: {stats['white_wins']} ({stats['white_win_rate']:.1%})")
        print(f"Black wins: {stats['black_wins']}")
        print(f"Unfinished: {stats['unfinished']}")
        print(f"Average turns: {stats['avg_turns']:.1f}, average moves: {stats['avg_moves']:.1f}")
        return 0

    record = records[0]
    print(board_to_string(record.final_state.board))
    print(f"Turns: {record.num_turns}, moves: {record.num_moves}")
    if record.winner is None:
        print("No winner within the turn limit")
    else:
        loser = record.winner.opponent()
        print(f"Winner: {record.winner} (opponent pips left: {pip_count(record.final_state.board, loser)})")
    return 0


# ==============================================================================
# PARSER
# ==============================================================================

def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="backgammon-rules",
        description="Backgammon rules engine CLI",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"backgammon-rules {__version__}",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    new = subparsers.add_parser("new", help="Start a new game in a session file")
    new.add_argument("session", type=Path)
    new.add_argument("--black-first", action="store_true", help="Black plays first")
    new.add_argument("--strict", action="store_true", help="Require maximal dice usage")
    new.set_defaults(func=cmd_new)

    show = subparsers.add_parser("show", help="Show the game")
    show.add_argument("session", type=Path)
    show.set_defaults(func=cmd_show)

    roll = subparsers.add_parser("roll", help="Roll dice for the color on roll")
    roll.add_argument("session", type=Path)
    roll.add_argument("--dice", type=int, nargs=2, metavar=("D1", "D2"), choices=range(1, 7))
    roll.add_argument("--seed", type=int, default=None)
    roll.set_defaults(func=cmd_roll)

    moves = subparsers.add_parser("moves", help="List legal moves")
    moves.add_argument("session", type=Path)
    moves.set_defaults(func=cmd_moves)

    move = subparsers.add_parser("move", help="Play one checker move")
    move.add_argument("session", type=Path)
    move.add_argument("source", type=parse_source, help="Point 0-23 or 'bar'")
    move.add_argument("target", type=parse_target, help="Point 0-23 or 'off'")
    move.add_argument("die", type=int, choices=range(1, 7))
    move.set_defaults(func=cmd_move)

    play = subparsers.add_parser("play", help="Play random games to the end")
    play.add_argument("--seed", type=int, default=None)
    play.add_argument("--games", type=_positive_int, default=1, help="Games to play; more than one prints statistics")
    play.add_argument("--max-turns", type=int, default=2000)
    play.add_argument("--strict", action="store_true", help="Require maximal dice usage")
    play.set_defaults(func=cmd_play)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entrypoint used by the `backgammon-rules` console script."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        return args.func(args)
    except RulesError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
