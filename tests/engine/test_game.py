"""Tests for the turn and game state machine."""

import pytest

from backgammon_rules.config import STRICT_RULES
from backgammon_rules.core.board import board_from_layout, check_board, initial_board
from backgammon_rules.core.dice import Dice
from backgammon_rules.core.types import BAR, OFF, Color, GameStatus, Move
from backgammon_rules.engine.game import (
    GameState,
    is_turn_complete,
    legal_moves_for,
    make_move,
    new_game,
    start_game,
    start_turn,
)
from backgammon_rules.errors import GameOverError, GameStateError, IllegalMoveError, MoveError


def white(from_point, to_point, die):
    return Move(from_point=from_point, to_point=to_point, player=Color.WHITE, die=die)


def black(from_point, to_point, die):
    return Move(from_point=from_point, to_point=to_point, player=Color.BLACK, die=die)


def playing(board, on_roll=Color.WHITE):
    return start_game(new_game(board=board, on_roll=on_roll))


class TestLifecycle:
    """Tests for WAITING -> PLAYING -> FINISHED."""

    def test_new_game(self):
        state = new_game()
        assert state.status == GameStatus.WAITING
        assert state.board == initial_board()
        assert state.on_roll == Color.WHITE
        assert state.dice is None
        assert state.winner is None

    def test_new_game_black_first(self):
        assert new_game(on_roll=Color.BLACK).on_roll == Color.BLACK

    def test_start_game(self):
        state = start_game(new_game())
        assert state.status == GameStatus.PLAYING
        assert state.awaiting_roll

    def test_start_game_twice(self, playing_game):
        with pytest.raises(GameStateError):
            start_game(playing_game)

    def test_waiting_game_rejects_turns(self):
        state = new_game()
        with pytest.raises(GameStateError):
            start_turn(state, dice=Dice.from_values(3, 1))
        with pytest.raises(GameStateError):
            make_move(state, white(7, 4, 3))

    def test_move_before_roll(self, playing_game):
        with pytest.raises(GameStateError):
            make_move(playing_game, white(7, 4, 3))

    def test_roll_twice(self, playing_game):
        state = start_turn(playing_game, dice=Dice.from_values(3, 1))
        with pytest.raises(GameStateError):
            start_turn(state, dice=Dice.from_values(6, 5))

    def test_roll_with_generator(self, playing_game, rng):
        state = start_turn(playing_game, rng=rng)
        assert state.dice is not None
        assert state.on_roll == Color.WHITE

    def test_winner_requires_finished(self):
        with pytest.raises(AssertionError):
            GameState(board=initial_board(), status=GameStatus.PLAYING, winner=Color.WHITE)
        with pytest.raises(AssertionError):
            GameState(board=initial_board(), status=GameStatus.FINISHED)


class TestMakeMove:
    """Tests for playing moves within a turn."""

    def test_opening_three_one(self, playing_game):
        """8/5 6/5 (1-indexed) makes White's 5-point and passes the turn."""
        state = start_turn(playing_game, dice=Dice.from_values(3, 1))
        state = make_move(state, white(7, 4, 3))
        assert state.on_roll == Color.WHITE
        assert state.dice.remaining == (1,)

        state = make_move(state, white(5, 4, 1))
        assert state.board.points[4] == 2
        assert state.board.points[7] == 2
        assert state.board.points[5] == 4
        assert state.dice is None
        assert state.on_roll == Color.BLACK
        assert state.awaiting_roll

    def test_illegal_move_raises_with_reason(self, playing_game):
        state = start_turn(playing_game, dice=Dice.from_values(3, 1))
        with pytest.raises(IllegalMoveError) as excinfo:
            make_move(state, white(7, 5, 3))
        assert excinfo.value.reason == MoveError.WRONG_DISTANCE

    def test_illegal_move_leaves_state(self, playing_game):
        state = start_turn(playing_game, dice=Dice.from_values(6, 1))
        with pytest.raises(IllegalMoveError) as excinfo:
            make_move(state, white(12, 11, 1))
        assert excinfo.value.reason == MoveError.BLOCKED_POINT
        assert state.board == initial_board()
        assert state.dice.remaining == (1, 6)

    def test_wrong_player(self, playing_game):
        state = start_turn(playing_game, dice=Dice.from_values(3, 1))
        with pytest.raises(IllegalMoveError) as excinfo:
            make_move(state, black(16, 19, 3))
        assert excinfo.value.reason == MoveError.WRONG_PLAYER

    def test_hit_blot_on_eighteen(self):
        board = board_from_layout({20: 1, 5: 14}, {18: 1, 0: 14})
        state = start_turn(playing(board), dice=Dice.from_values(2, 1))
        state = make_move(state, white(20, 18, 2))

        assert state.board.count(Color.WHITE, 18) == 1
        assert state.board.black_bar == 1
        assert state.on_roll == Color.WHITE
        assert check_board(state.board)[0]

    def test_hit_checker_must_enter(self):
        """After being hit Black must enter before moving anything else."""
        board = board_from_layout({20: 1, 5: 14}, {18: 1, 0: 14})
        state = start_turn(playing(board), dice=Dice.from_values(2, 1))
        state = make_move(state, white(20, 18, 2))
        state = make_move(state, white(18, 17, 1))
        assert state.on_roll == Color.BLACK

        state = start_turn(state, dice=Dice.from_values(4, 3))
        with pytest.raises(IllegalMoveError) as excinfo:
            make_move(state, black(0, 4, 4))
        assert excinfo.value.reason == MoveError.MUST_ENTER_FROM_BAR_FIRST
        assert all(move.from_point is BAR for move in legal_moves_for(state))

    def test_doubles_allow_four_moves(self, playing_game):
        state = start_turn(playing_game, dice=Dice.from_values(6, 6))
        for source in (23, 23, 12, 12):
            assert state.on_roll == Color.WHITE
            state = make_move(state, white(source, source - 6, 6))
        assert state.on_roll == Color.BLACK
        assert state.board.points[17] == 2
        assert state.board.points[6] == 2

    def test_conservation_over_a_turn(self, playing_game):
        state = start_turn(playing_game, dice=Dice.from_values(5, 2))
        state = make_move(state, white(12, 7, 5))
        state = make_move(state, white(12, 10, 2))
        ok, message = check_board(state.board)
        assert ok, message


class TestForfeiture:
    """Tests for unplayable dice."""

    def test_full_forced_pass(self):
        """A closed-out checker on the bar passes the whole roll."""
        black_layout = {point: 2 for point in range(18, 24)}
        black_layout[0] = 3
        board = board_from_layout({5: 14}, black_layout, white_bar=1)
        state = start_turn(playing(board), dice=Dice.from_values(6, 5))

        assert state.dice is None
        assert state.on_roll == Color.BLACK
        assert state.board == board
        assert state.status == GameStatus.PLAYING

    def test_single_die_forfeited(self):
        """After the 6 is played the 5 has nowhere to go."""
        board = board_from_layout({13: 1}, {2: 2, 23: 13}, white_off=14)
        state = start_turn(playing(board), dice=Dice.from_values(6, 5))
        assert state.dice.remaining == (5, 6)

        state = make_move(state, white(13, 7, 6))
        assert state.board.points[7] == 1
        assert state.dice is None
        assert state.on_roll == Color.BLACK

    def test_blocked_die_kept_while_other_plays(self):
        """The 6 cannot enter, but stays available once the 1 has entered."""
        black_layout = {point: 2 for point in range(18, 23)}
        black_layout[0] = 5
        board = board_from_layout({5: 14}, black_layout, white_bar=1)
        state = start_turn(playing(board), dice=Dice.from_values(6, 1))
        assert state.dice.remaining == (1, 6)
        assert legal_moves_for(state) == {white(BAR, 23, 1)}

        state = make_move(state, white(BAR, 23, 1))
        assert state.dice.remaining == (6,)
        assert legal_moves_for(state) == {white(23, 17, 6)}

        state = make_move(state, white(23, 17, 6))
        assert state.on_roll == Color.BLACK

    def test_is_turn_complete(self, playing_game):
        assert is_turn_complete(playing_game)
        state = start_turn(playing_game, dice=Dice.from_values(3, 1))
        assert not is_turn_complete(state)

    def test_no_moves_while_awaiting_roll(self, playing_game):
        assert legal_moves_for(playing_game) == set()
        assert legal_moves_for(new_game()) == set()


class TestStrictRules:
    """Tests for the maximal dice usage option."""

    def test_dead_end_move_rejected(self):
        board = board_from_layout({13: 1, 8: 1}, {12: 2, 1: 2, 23: 11}, white_off=13)
        state = start_turn(playing(board), dice=Dice.from_values(6, 1), config=STRICT_RULES)
        with pytest.raises(IllegalMoveError) as excinfo:
            make_move(state, white(8, 2, 6), STRICT_RULES)
        assert excinfo.value.reason == MoveError.MUST_MAXIMIZE_DICE

    def test_dead_end_move_allowed_by_default(self):
        board = board_from_layout({13: 1, 8: 1}, {12: 2, 1: 2, 23: 11}, white_off=13)
        state = start_turn(playing(board), dice=Dice.from_values(6, 1))
        state = make_move(state, white(8, 2, 6))
        # The 1 is now unplayable, so the turn ends
        assert state.on_roll == Color.BLACK

    def test_higher_die_required(self):
        board = board_from_layout({13: 1}, {2: 2, 23: 13}, white_off=14)
        state = start_turn(playing(board), dice=Dice.from_values(6, 5), config=STRICT_RULES)
        assert legal_moves_for(state, STRICT_RULES) == {white(13, 7, 6)}
        with pytest.raises(IllegalMoveError) as excinfo:
            make_move(state, white(13, 8, 5), STRICT_RULES)
        assert excinfo.value.reason == MoveError.MUST_MAXIMIZE_DICE


class TestTermination:
    """Tests for game end."""

    def test_last_checker_wins(self):
        board = board_from_layout({0: 1}, {23: 15}, white_off=14)
        state = start_turn(playing(board), dice=Dice.from_values(2, 1))
        state = make_move(state, white(0, OFF, 1))

        assert state.status == GameStatus.FINISHED
        assert state.winner == Color.WHITE
        assert state.is_finished
        assert state.dice is None
        assert state.board.white_off == 15

    def test_win_ends_turn_with_dice_left(self):
        """The win is detected after the move, not at the end of the turn."""
        board = board_from_layout({0: 2}, {23: 15}, white_off=13)
        state = start_turn(playing(board), dice=Dice.from_values(1, 1))
        state = make_move(state, white(0, OFF, 1))
        assert state.status == GameStatus.PLAYING
        state = make_move(state, white(0, OFF, 1))
        assert state.winner == Color.WHITE

    def test_black_wins(self):
        board = board_from_layout({5: 15}, {23: 1}, black_off=14)
        state = start_turn(playing(board, on_roll=Color.BLACK), dice=Dice.from_values(4, 1))
        state = make_move(state, black(23, OFF, 1))
        assert state.winner == Color.BLACK

    def test_finished_game_rejects_play(self):
        board = board_from_layout({0: 1}, {23: 15}, white_off=14)
        state = start_turn(playing(board), dice=Dice.from_values(2, 1))
        finished = make_move(state, white(0, OFF, 2))

        with pytest.raises(GameOverError):
            make_move(finished, black(23, OFF, 1))
        with pytest.raises(GameOverError):
            start_turn(finished, dice=Dice.from_values(3, 1))
        assert isinstance(GameOverError("x"), GameStateError)
        assert finished.board.white_off == 15
