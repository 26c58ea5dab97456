"""Tests for dice utilities."""

import pytest
import numpy as np
from backgammon_rules.core.dice import (
    Dice,
    all_dice_rolls,
    is_doubles,
    dice_values,
    roll_dice,
    dice_to_string,
    remaining_fits_roll,
    ALL_DICE_ROLLS,
)
from backgammon_rules.errors import DieNotAvailableError, IllegalMoveError, MoveError


class TestDiceUtilities:
    """Tests for dice utility functions."""

    def test_all_dice_rolls(self):
        """Test that we get all 21 unique dice rolls."""
        rolls = all_dice_rolls()
        assert len(rolls) == 21

        # Check all doubles are present
        for i in range(1, 7):
            assert (i, i) in rolls

        # Check no duplicates (e.g., both (2,3) and (3,2))
        seen = set()
        for roll in rolls:
            canonical = tuple(sorted(roll))
            assert canonical not in seen
            seen.add(canonical)

        assert ALL_DICE_ROLLS == rolls

    def test_is_doubles(self):
        """Test doubles detection."""
        assert is_doubles((1, 1))
        assert is_doubles((6, 6))
        assert not is_doubles((1, 2))

    def test_dice_values(self):
        """Test getting dice values for moves."""
        assert dice_values((3, 5)) == [3, 5]
        assert dice_values((4, 4)) == [4, 4, 4, 4]

    def test_dice_to_string(self):
        """Test dice string conversion."""
        assert dice_to_string((3, 5)) == "3-5"
        assert dice_to_string((4, 4)) == "Double 4s"


class TestDice:
    """Tests for the Dice value type."""

    def test_from_values(self):
        dice = Dice.from_values(5, 2)
        assert dice.values == (5, 2)
        assert dice.remaining == (2, 5)
        assert not dice.is_double

    def test_double_gives_four(self):
        """A double grants four uses of the value."""
        dice = Dice.from_values(3, 3)
        assert dice.remaining == (3, 3, 3, 3)
        assert dice.is_double

    def test_consume(self):
        """Consuming removes exactly one occurrence."""
        dice = Dice.from_values(4, 4)
        after = dice.consume(4)
        assert after.remaining == (4, 4, 4)
        # Original unchanged
        assert dice.remaining == (4, 4, 4, 4)

    def test_consume_until_exhausted(self):
        dice = Dice.from_values(3, 1).consume(3).consume(1)
        assert dice.exhausted
        assert dice.values == (3, 1)

    def test_consume_unavailable(self):
        """Consuming a missing value raises with the precise reason."""
        dice = Dice.from_values(3, 1)
        with pytest.raises(DieNotAvailableError) as excinfo:
            dice.consume(6)
        assert excinfo.value.reason == MoveError.DIE_NOT_AVAILABLE
        assert excinfo.value.die == 6
        assert isinstance(excinfo.value, IllegalMoveError)

    def test_consume_used_value(self):
        dice = Dice.from_values(3, 1).consume(3)
        with pytest.raises(DieNotAvailableError):
            dice.consume(3)

    def test_distinct_remaining(self):
        assert Dice.from_values(2, 5).distinct_remaining() == [5, 2]
        assert Dice.from_values(4, 4).distinct_remaining() == [4]

    def test_invalid_values(self):
        with pytest.raises(AssertionError):
            Dice.from_values(0, 3)
        with pytest.raises(AssertionError):
            Dice(values=(1, 2), remaining=(1, 2, 2, 2, 2))

    def test_remaining_from_another_roll(self):
        """Sixes cannot be left over from a 3-1."""
        with pytest.raises(AssertionError):
            Dice(values=(3, 1), remaining=(6, 6, 6, 6))

    def test_string(self):
        assert str(Dice.from_values(6, 6)) == "Double 6s"


class TestRollDice:
    """Tests for dice rolling."""

    def test_roll_range(self, rng):
        """Rolls stay within 1-6 and set up remaining dice."""
        for _ in range(100):
            dice = roll_dice(rng)
            assert 1 <= dice.values[0] <= 6
            assert 1 <= dice.values[1] <= 6
            expected = 4 if dice.is_double else 2
            assert len(dice.remaining) == expected

    def test_roll_is_reproducible(self):
        """The same seed gives the same rolls."""
        first = [roll_dice(np.random.default_rng(7)) for _ in range(5)]
        second = [roll_dice(np.random.default_rng(7)) for _ in range(5)]
        assert first == second

    def test_roll_covers_all_faces(self, rng):
        faces = set()
        for _ in range(500):
            faces.update(roll_dice(rng).values)
        assert faces == {1, 2, 3, 4, 5, 6}

    def test_roll_without_generator(self):
        dice = roll_dice()
        assert all(1 <= v <= 6 for v in dice.values)


class TestRemainingFitsRoll:
    """Tests for remaining_fits_roll."""

    def test_unused_roll(self):
        assert remaining_fits_roll((3, 1), (1, 3))
        assert remaining_fits_roll((4, 4), (4, 4, 4, 4))

    def test_partly_used(self):
        assert remaining_fits_roll((3, 1), (1,))
        assert remaining_fits_roll((4, 4), (4,))
        assert remaining_fits_roll((3, 1), ())

    def test_value_not_rolled(self):
        assert not remaining_fits_roll((3, 1), (6,))

    def test_value_used_too_often(self):
        assert not remaining_fits_roll((3, 1), (3, 3))
        assert not remaining_fits_roll((4, 4), (4, 4, 4, 4, 4))
